# smartcare_admin/resources/tagihan.py

from flask import request
from flask_restx import Namespace, fields, abort
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal, jalankan_transisi
from ..jwt_utils import AdminResource
from ..models import utcnow, Tagihan, TRANSISI_TAGIHAN, TAGIHAN_COMPLETED

tagihan_ns = Namespace('tagihan', description='Kelola tagihan (order) layanan')

status_input = tagihan_ns.model('TagihanStatusInput', {
    'status': fields.String(required=True, enum=['processing', 'completed', 'cancelled'])
})


def _tanggal_selesai(status_baru):
    # completion_date hanya diisi saat tagihan selesai
    return {'completion_date': utcnow()} if status_baru == TAGIHAN_COMPLETED else {}


@tagihan_ns.route('')
@tagihan_ns.param('status', 'all (default), pending, processing, completed, cancelled')
class TagihanList(AdminResource):
    def get(self):
        """(R)EAD: Semua tagihan beserta nama user, mitra, dan layanan (terbaru dulu)"""
        status = request.args.get('status', 'all')
        if status != 'all' and status not in TRANSISI_TAGIHAN:
            abort(400, f"Status '{status}' tidak dikenal.")
        try:
            query = Tagihan.query.order_by(Tagihan.order_date.desc())
            if status != 'all':
                query = query.filter(Tagihan.status == status)
            tagihans = query.all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data tagihan', e)
        return {'total': len(tagihans), 'items': [t.to_dict() for t in tagihans]}


@tagihan_ns.route('/<string:tagihan_id>/status')
@tagihan_ns.param('tagihan_id', 'ID tagihan')
class TagihanStatus(AdminResource):
    @tagihan_ns.expect(status_input)
    def put(self, tagihan_id):
        """(U)PDATE: Ubah status tagihan sesuai alur pending -> processing -> completed"""
        data = tagihan_ns.payload or {}
        if not data.get('status'):
            abort(400, 'Status baru wajib diisi.')
        try:
            _, status_baru = jalankan_transisi(
                Tagihan, tagihan_id, TRANSISI_TAGIHAN, 'Tagihan',
                status_tujuan=data['status'], extra_values=_tanggal_selesai
            )
        except SQLAlchemyError as e:
            gagal('Gagal mengubah status tagihan', e)
        return {'message': f'Status tagihan berhasil diubah ke {status_baru}', 'status': status_baru}, 200
