# smartcare_admin/resources/topup.py

import logging

from flask_restx import Namespace
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import format_rupiah, gagal, jalankan_transisi
from ..jwt_utils import AdminResource
from ..models import TopUp, TOPUP_PENDING, TRANSISI_TOPUP
from ..procedures import call_procedure

log = logging.getLogger(__name__)

topup_ns = Namespace('topup', description='Konfirmasi permintaan top up saldo user')


@topup_ns.route('/pending')
class TopUpPendingList(AdminResource):
    def get(self):
        """(R)EAD: Top up yang menunggu konfirmasi, beserta nama & email user"""
        try:
            topups = TopUp.query.filter_by(status=TOPUP_PENDING).order_by(TopUp.created_at.desc()).all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data top up', e)
        return {'total': len(topups), 'items': [t.to_dict() for t in topups]}


@topup_ns.route('/<string:topup_id>/konfirmasi')
@topup_ns.param('topup_id', 'ID top up')
class TopUpKonfirmasi(AdminResource):
    def put(self, topup_id):
        """(U)PDATE: Setujui top up dan tambah saldo user (satu transaksi)"""
        try:
            hasil = call_procedure('konfirmasi_topup', topup_id_input=topup_id)
        except SQLAlchemyError as e:
            gagal('Gagal mengkonfirmasi top up', e)

        log.info('Top up %s dikonfirmasi, user %s +%s', topup_id, hasil['user_id'], hasil['nominal'])
        return {
            'message': f"Top up sebesar {format_rupiah(hasil['nominal'])} telah dikonfirmasi",
            'status': TRANSISI_TOPUP[TOPUP_PENDING]['konfirmasi']
        }, 200


@topup_ns.route('/<string:topup_id>/tolak')
@topup_ns.param('topup_id', 'ID top up')
class TopUpTolak(AdminResource):
    def put(self, topup_id):
        """(U)PDATE: pending -> rejected"""
        try:
            _, status_baru = jalankan_transisi(TopUp, topup_id, TRANSISI_TOPUP, 'Top up', aksi='tolak')
        except SQLAlchemyError as e:
            gagal('Gagal menolak top up', e)
        return {'message': 'Top up ditolak', 'status': status_baru}, 200
