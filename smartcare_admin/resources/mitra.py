# smartcare_admin/resources/mitra.py

from flask_restx import Namespace
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal, jalankan_transisi
from ..jwt_utils import AdminResource
from ..models import Mitra, MITRA_PENDING, TRANSISI_MITRA

mitra_ns = Namespace('mitra', description='Verifikasi mitra baru (status pending)')

PESAN_AKSI = {
    'verifikasi': ('Mitra berhasil diverifikasi', 'Gagal memverifikasi mitra'),
    'tolak': ('Mitra ditolak', 'Gagal menolak mitra'),
    'suspend': ('Mitra berhasil disuspend', 'Gagal mengubah status mitra'),
    'aktifkan': ('Mitra berhasil diaktifkan kembali', 'Gagal mengubah status mitra'),
}


def ubah_status_mitra(mitra_id, aksi):
    """Dipakai juga oleh menu Kelola Pengguna."""
    sukses, pesan_gagal = PESAN_AKSI.get(aksi, ('Status mitra berhasil diubah', 'Gagal mengubah status mitra'))
    try:
        _, status_baru = jalankan_transisi(Mitra, mitra_id, TRANSISI_MITRA, 'Mitra', aksi=aksi)
    except SQLAlchemyError as e:
        gagal(pesan_gagal, e)
    return {'message': sukses, 'status': status_baru}, 200


@mitra_ns.route('/pending')
class MitraPendingList(AdminResource):
    def get(self):
        """(R)EAD: Mitra yang menunggu verifikasi, terbaru dulu"""
        try:
            mitras = Mitra.query.filter_by(status=MITRA_PENDING).order_by(Mitra.created_at.desc()).all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data mitra', e)
        return {'total': len(mitras), 'items': [m.to_dict() for m in mitras]}


@mitra_ns.route('/<string:mitra_id>/verifikasi')
@mitra_ns.param('mitra_id', 'ID mitra')
class MitraVerifikasi(AdminResource):
    def put(self, mitra_id):
        """(U)PDATE: pending -> terverifikasi"""
        return ubah_status_mitra(mitra_id, 'verifikasi')


@mitra_ns.route('/<string:mitra_id>/tolak')
@mitra_ns.param('mitra_id', 'ID mitra')
class MitraTolak(AdminResource):
    def put(self, mitra_id):
        """(U)PDATE: pending -> ditolak"""
        return ubah_status_mitra(mitra_id, 'tolak')
