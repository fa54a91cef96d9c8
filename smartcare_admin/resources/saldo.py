# smartcare_admin/resources/saldo.py

import logging
from decimal import Decimal

from flask import request
from flask_restx import Namespace, fields, abort
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import format_rupiah, gagal
from ..jwt_utils import AdminResource
from ..models import db, User, Mitra, MITRA_TERVERIFIKASI
from ..procedures import call_procedure

log = logging.getLogger(__name__)

saldo_ns = Namespace('saldo', description='Kirim saldo manual ke user atau mitra')

# tipe penerima -> (model, prosedur, label)
PENERIMA = {
    'user': (User, 'tambah_saldo', 'User'),
    'mitra': (Mitra, 'tambah_saldo_mitra', 'Mitra'),
}

kirim_saldo_input = saldo_ns.model('KirimSaldoInput', {
    'tipe': fields.String(required=True, enum=list(PENERIMA), description='user atau mitra'),
    'penerima_id': fields.String(required=True, description='ID user/mitra penerima'),
    'nominal': fields.Integer(required=True, description='Jumlah saldo (Rp)')
})


def _tipe_valid(tipe):
    if tipe not in PENERIMA:
        abort(400, "Tipe penerima harus 'user' atau 'mitra'.")
    return tipe


def _nominal_valid(nominal):
    try:
        nominal = int(nominal)
    except (TypeError, ValueError):
        abort(400, 'Nominal harus berupa angka.')
    if nominal <= 0:
        abort(400, 'Nominal harus lebih dari 0')
    return nominal


def _ringkas(tipe, row):
    return {
        'id': row.id,
        'nama': row.nama if tipe == 'user' else row.nama_toko,
        'email': row.email,
        'saldo': str(row.saldo)
    }


@saldo_ns.route('/penerima')
@saldo_ns.param('tipe', 'user (default) atau mitra')
class PenerimaList(AdminResource):
    def get(self):
        """(R)EAD: Calon penerima: semua user (urut nama) atau mitra terverifikasi (urut nama toko)"""
        tipe = _tipe_valid(request.args.get('tipe', 'user'))
        try:
            if tipe == 'user':
                rows = User.query.order_by(User.nama).all()
            else:
                rows = Mitra.query.filter_by(status=MITRA_TERVERIFIKASI).order_by(Mitra.nama_toko).all()
        except SQLAlchemyError as e:
            gagal(f'Gagal memuat data {tipe}', e)
        return [_ringkas(tipe, r) for r in rows]


@saldo_ns.route('/pratinjau')
class PratinjauSaldo(AdminResource):
    def get(self):
        """(R)EAD: Saldo saat ini dan saldo setelah dikirim"""
        tipe = _tipe_valid(request.args.get('tipe', 'user'))
        model, _, label = PENERIMA[tipe]
        penerima_id = request.args.get('penerima_id')
        if not penerima_id:
            abort(400, 'Pilih penerima terlebih dahulu.')
        nominal = request.args.get('nominal') or 0

        try:
            row = db.session.get(model, penerima_id)
        except SQLAlchemyError as e:
            gagal(f'Gagal memuat data {tipe}', e)
        if not row:
            abort(404, f'{label} tidak ditemukan.')

        data = _ringkas(tipe, row)
        try:
            tambahan = int(nominal)
        except ValueError:
            abort(400, 'Nominal harus berupa angka.')
        data['saldo_setelah'] = str(row.saldo + Decimal(tambahan))
        return data


@saldo_ns.route('/kirim')
class KirimSaldo(AdminResource):
    @saldo_ns.expect(kirim_saldo_input)
    def post(self):
        """(U)PDATE: Tambah saldo user/mitra secara atomik"""
        data = saldo_ns.payload or {}
        if not data.get('tipe') or not data.get('penerima_id') or data.get('nominal') in (None, ''):
            abort(400, 'Harap lengkapi semua field')
        tipe = _tipe_valid(data['tipe'])
        nominal = _nominal_valid(data['nominal'])
        model, procedure, label = PENERIMA[tipe]
        # Nama parameter mengikuti prosedur backend (user_id_input / mitra_id_input)
        id_param = 'user_id_input' if tipe == 'user' else 'mitra_id_input'

        try:
            call_procedure(procedure, **{id_param: data['penerima_id'], 'jumlah_input': nominal})
            row = db.session.get(model, data['penerima_id'])
        except SQLAlchemyError as e:
            gagal('Gagal mengirim saldo', e)

        log.info('Saldo manual %s ke %s %s', nominal, tipe, data['penerima_id'])
        return {
            'message': f'Saldo sebesar {format_rupiah(nominal)} berhasil dikirim',
            'penerima': _ringkas(tipe, row)
        }, 200
