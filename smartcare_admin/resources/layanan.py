# smartcare_admin/resources/layanan.py

import logging
from decimal import Decimal, InvalidOperation

from flask_restx import Namespace, fields, abort
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal
from ..jwt_utils import AdminResource
from ..models import db, Layanan, MitraLayanan

log = logging.getLogger(__name__)

layanan_ns = Namespace('layanan', description='Operasi CRUD katalog layanan SmartCare')

# Model untuk output
layanan_model = layanan_ns.model('Layanan', {
    'id': fields.String,
    'nama_layanan': fields.String,
    'description': fields.String,
    'base_price': fields.String(description='Harga dasar (Rp)'),
    'icon_url': fields.String,
    'created_at': fields.String,
    'updated_at': fields.String
})

# Model untuk input (tanpa ID)
layanan_input = layanan_ns.model('LayananInput', {
    'nama_layanan': fields.String(required=True, description='Contoh: Perbaikan AC'),
    'description': fields.String(description='Deskripsi layanan'),
    'base_price': fields.Float(required=True, description='Harga dasar (Rp)'),
    'icon_url': fields.String(description='https://example.com/icon.png')
})


def _data_layanan(payload):
    """Validasi input form layanan; dipakai untuk tambah dan edit."""
    data = payload or {}
    nama = (data.get('nama_layanan') or '').strip()
    harga = data.get('base_price')
    if not nama or harga in (None, ''):
        abort(400, 'Nama layanan dan harga dasar wajib diisi')
    try:
        harga = Decimal(str(harga))
    except (InvalidOperation, ValueError):
        abort(400, 'Harga dasar harus berupa angka.')
    if harga < 0:
        abort(400, 'Harga dasar tidak boleh negatif.')
    return {
        'nama_layanan': nama,
        'description': data.get('description') or '',
        'base_price': harga,
        'icon_url': data.get('icon_url') or ''
    }


def _ambil_layanan(layanan_id):
    try:
        layanan = db.session.get(Layanan, layanan_id)
    except SQLAlchemyError as e:
        gagal('Gagal memuat data layanan', e)
    if not layanan:
        abort(404, 'Layanan tidak ditemukan.')
    return layanan


@layanan_ns.route('')
class LayananList(AdminResource):
    @layanan_ns.marshal_list_with(layanan_model)
    def get(self):
        """(R)EAD: Semua layanan, terbaru dulu"""
        try:
            layanans = Layanan.query.order_by(Layanan.created_at.desc()).all()
        except SQLAlchemyError as e:
            gagal('Gagal memuat data layanan', e)
        return [l.to_dict() for l in layanans]

    @layanan_ns.expect(layanan_input)
    def post(self):
        """(C)REATE: Tambah layanan baru"""
        layanan = Layanan(**_data_layanan(layanan_ns.payload))
        try:
            db.session.add(layanan)
            db.session.commit()
        except SQLAlchemyError as e:
            gagal('Gagal menyimpan layanan', e)
        log.info('Layanan baru %s (%s)', layanan.nama_layanan, layanan.id)
        return {'message': 'Layanan baru berhasil ditambahkan', 'layanan': layanan.to_dict()}, 201


@layanan_ns.route('/<string:layanan_id>')
@layanan_ns.param('layanan_id', 'ID layanan')
class LayananResource(AdminResource):
    @layanan_ns.marshal_with(layanan_model)
    def get(self, layanan_id):
        """(R)EAD: Detail 1 layanan"""
        return _ambil_layanan(layanan_id).to_dict()

    @layanan_ns.expect(layanan_input)
    def put(self, layanan_id):
        """(U)PDATE: Edit layanan (yang terakhir menyimpan yang berlaku)"""
        data = _data_layanan(layanan_ns.payload)
        layanan = _ambil_layanan(layanan_id)
        try:
            for key, value in data.items():
                setattr(layanan, key, value)
            db.session.commit()
        except SQLAlchemyError as e:
            gagal('Gagal menyimpan layanan', e)
        return {'message': 'Layanan berhasil diperbarui', 'layanan': layanan.to_dict()}, 200

    def delete(self, layanan_id):
        """(D)ELETE: Hapus 1 layanan"""
        layanan = _ambil_layanan(layanan_id)
        try:
            db.session.delete(layanan)
            db.session.commit()
        except SQLAlchemyError as e:
            gagal('Gagal menghapus layanan', e)
        log.info('Layanan %s dihapus', layanan_id)
        return {'message': 'Layanan berhasil dihapus'}, 200


@layanan_ns.route('/<string:layanan_id>/mitra')
@layanan_ns.param('layanan_id', 'ID layanan')
class LayananMitraList(AdminResource):
    def get(self, layanan_id):
        """(R)EAD: Mitra yang menawarkan layanan ini, dengan harga masing-masing"""
        _ambil_layanan(layanan_id)
        try:
            penawaran = (
                MitraLayanan.query.filter_by(layanan_id=layanan_id)
                .order_by(MitraLayanan.price.asc())
                .all()
            )
        except SQLAlchemyError as e:
            gagal('Gagal memuat data mitra layanan', e)
        return [p.to_dict() for p in penawaran]
