# smartcare_admin/resources/pengguna.py

from flask import request
from flask_restx import Namespace, fields, abort
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import cocok_pencarian, gagal
from ..jwt_utils import AdminResource
from ..models import User, Mitra, AdminCredential, TRANSISI_MITRA
from .mitra import ubah_status_mitra

pengguna_ns = Namespace('pengguna', description='Kelola data user, mitra, dan admin')

mitra_status_input = pengguna_ns.model('MitraStatusInput', {
    'aksi': fields.String(required=True, enum=['verifikasi', 'tolak', 'suspend', 'aktifkan'])
})


def _hasil(rows, *keys):
    items = cocok_pencarian([r.to_dict() for r in rows], request.args.get('q', ''), *keys)
    return {'total': len(rows), 'ditampilkan': len(items), 'items': items}


@pengguna_ns.route('/users')
@pengguna_ns.param('q', 'Cari nama atau email')
class PenggunaUserList(AdminResource):
    def get(self):
        """(R)EAD: Semua user, terbaru dulu"""
        try:
            users = User.query.order_by(User.created_at.desc()).all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data user', e)
        return _hasil(users, 'nama', 'email')


@pengguna_ns.route('/mitra')
@pengguna_ns.param('status', 'all (default), pending, terverifikasi, ditolak, suspended')
@pengguna_ns.param('q', 'Cari nama toko atau email')
class PenggunaMitraList(AdminResource):
    def get(self):
        """(R)EAD: Semua mitra (filter status dilakukan di query), terbaru dulu"""
        status = request.args.get('status', 'all')
        if status != 'all' and status not in TRANSISI_MITRA:
            abort(400, f"Status '{status}' tidak dikenal.")
        try:
            query = Mitra.query.order_by(Mitra.created_at.desc())
            if status != 'all':
                query = query.filter(Mitra.status == status)
            mitras = query.all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data mitra', e)
        return _hasil(mitras, 'nama_toko', 'email')


@pengguna_ns.route('/admin')
@pengguna_ns.param('q', 'Cari email')
class PenggunaAdminList(AdminResource):
    def get(self):
        """(R)EAD: Daftar kredensial admin (read-only)"""
        try:
            admins = AdminCredential.query.order_by(AdminCredential.created_at.desc()).all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data admin', e)
        return _hasil(admins, 'email')


@pengguna_ns.route('/mitra/<string:mitra_id>/status')
@pengguna_ns.param('mitra_id', 'ID mitra')
class PenggunaMitraStatus(AdminResource):
    @pengguna_ns.expect(mitra_status_input)
    def put(self, mitra_id):
        """(U)PDATE: verifikasi / tolak / suspend / aktifkan mitra"""
        data = pengguna_ns.payload or {}
        if not data.get('aksi'):
            abort(400, 'Aksi wajib diisi.')
        return ubah_status_mitra(mitra_id, data['aksi'])
