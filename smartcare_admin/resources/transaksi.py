# smartcare_admin/resources/transaksi.py

from flask import request
from flask_restx import Namespace, abort
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import cocok_pencarian, gagal
from ..jwt_utils import AdminResource
from ..models import TopUp, Tagihan, TRANSISI_TOPUP, TRANSISI_TAGIHAN

transaksi_ns = Namespace('transaksi', description='Riwayat transaksi keuangan (top up + tagihan)')

TIPE_TRANSAKSI = ('all', 'topup', 'tagihan')
STATUS_DIKENAL = set(TRANSISI_TOPUP) | set(TRANSISI_TAGIHAN)


def _dari_topup(topup):
    return {
        'id': topup.id,
        'type': 'topup',
        'user_id': topup.user_id,
        'nominal': str(topup.nominal),
        'payment_method': topup.payment_method,
        'status': topup.status,
        'transaction_code': topup.transaction_code or '',
        'created_at': topup.created_at.isoformat(),
        'user': {'nama': topup.user.nama, 'email': topup.user.email} if topup.user else None,
        'mitra': None,
        'layanan': None
    }


def _dari_tagihan(tagihan):
    # Tagihan memakai order_date sebagai waktu transaksi
    return {
        'id': tagihan.id,
        'type': 'tagihan',
        'user_id': tagihan.user_id,
        'nominal': str(tagihan.nominal),
        'payment_method': tagihan.payment_method or 'Unknown',
        'status': tagihan.status,
        'transaction_code': '',
        'created_at': tagihan.order_date.isoformat(),
        'user': {'nama': tagihan.user.nama, 'email': tagihan.user.email} if tagihan.user else None,
        'mitra': {'nama_toko': tagihan.mitra.nama_toko} if tagihan.mitra else None,
        'layanan': {'nama_layanan': tagihan.layanan.nama_layanan} if tagihan.layanan else None
    }


@transaksi_ns.route('')
@transaksi_ns.param('tipe', 'all (default), topup, tagihan')
@transaksi_ns.param('status', 'all (default) atau status tertentu')
@transaksi_ns.param('q', 'Cari nama, email, atau ID')
class TransaksiList(AdminResource):
    def get(self):
        """(R)EAD: Gabungan top up dan tagihan, terbaru dulu"""
        tipe = request.args.get('tipe', 'all')
        status = request.args.get('status', 'all')
        if tipe not in TIPE_TRANSAKSI:
            abort(400, f"Tipe transaksi '{tipe}' tidak dikenal.")
        if status != 'all' and status not in STATUS_DIKENAL:
            abort(400, f"Status '{status}' tidak dikenal.")

        transaksi = []
        try:
            if tipe in ('all', 'topup'):
                query = TopUp.query.order_by(TopUp.created_at.desc())
                if status != 'all':
                    query = query.filter(TopUp.status == status)
                transaksi.extend(_dari_topup(t) for t in query.all())

            if tipe in ('all', 'tagihan'):
                query = Tagihan.query.order_by(Tagihan.order_date.desc())
                if status != 'all':
                    query = query.filter(Tagihan.status == status)
                transaksi.extend(_dari_tagihan(t) for t in query.all())
        except SQLAlchemyError as e:
            gagal('Gagal memuat riwayat transaksi', e)

        # ISO string dengan format yang sama bisa diurutkan langsung
        transaksi.sort(key=lambda t: t['created_at'], reverse=True)
        hasil = cocok_pencarian(transaksi, request.args.get('q', ''), 'user.nama', 'user.email', 'id')
        return {'total': len(transaksi), 'ditampilkan': len(hasil), 'items': hasil}
