# smartcare_admin/resources/notifikasi.py

import logging
import uuid
from datetime import datetime

import requests # Untuk memanggil layanan notifikasi
from flask import current_app
from flask_restx import Namespace, fields, abort
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal, local_store
from ..jwt_utils import AdminResource
from ..local_store import TEMPLATE_NOTIFIKASI
from ..models import db, utcnow, User, Mitra, MITRA_TERVERIFIKASI

log = logging.getLogger(__name__)

notifikasi_ns = Namespace('notifikasi', description='Kirim pengumuman dan kelola template notifikasi')

AUDIENCE = ('all', 'users', 'mitras')

template_input = notifikasi_ns.model('TemplateInput', {
    'title': fields.String(required=True, description='Judul notifikasi'),
    'message': fields.String(required=True, description='Isi pesan'),
    'audience': fields.String(enum=list(AUDIENCE), default='all', description='Penerima')
})

kirim_input = notifikasi_ns.inherit('KirimNotifikasiInput', template_input, {
    'kirim_sekarang': fields.Boolean(default=True),
    'jadwal': fields.String(description='Waktu kirim (ISO 8601) jika tidak dikirim sekarang')
})


def _validasi(payload):
    data = payload or {}
    title = (data.get('title') or '').strip()
    message = (data.get('message') or '').strip()
    if not title or not message:
        abort(400, 'Judul dan pesan notifikasi wajib diisi')
    audience = data.get('audience') or 'all'
    if audience not in AUDIENCE:
        abort(400, "Penerima harus 'all', 'users', atau 'mitras'.")
    return title, message, audience


def _jadwal_valid(jadwal):
    """Jadwal wajib ISO 8601, misal 2026-01-01T09:00:00. Dikembalikan dalam bentuk baku."""
    if not jadwal:
        abort(400, 'Jadwal pengiriman wajib diisi jika tidak dikirim sekarang.')
    try:
        return datetime.fromisoformat(str(jadwal)).isoformat()
    except ValueError:
        abort(400, 'Format jadwal harus ISO 8601, contoh 2026-01-01T09:00:00.')


def jumlah_penerima():
    users = db.session.query(func.count(User.id)).scalar() or 0
    mitras = db.session.query(func.count(Mitra.id)).filter(Mitra.status == MITRA_TERVERIFIKASI).scalar() or 0
    return {'users': users, 'mitras': mitras, 'all': users + mitras}


def simpan_template(title, message, audience):
    """Template terbaru disimpan di depan daftar."""
    template = {
        'id': uuid.uuid4().hex,
        'title': title,
        'message': message,
        'audience': audience,
        'created_at': utcnow().isoformat()
    }
    local_store().update(TEMPLATE_NOTIFIKASI, lambda templates: [template] + templates, [])
    return template


@notifikasi_ns.route('/penerima')
class PenerimaNotifikasi(AdminResource):
    def get(self):
        """(R)EAD: Jumlah penerima per kelompok (user, mitra terverifikasi, semua)"""
        try:
            return jumlah_penerima()
        except SQLAlchemyError as e:
            gagal('Gagal memuat jumlah penerima', e)


@notifikasi_ns.route('/template')
class TemplateList(AdminResource):
    def get(self):
        """(R)EAD: Template tersimpan, terbaru dulu"""
        return local_store().read(TEMPLATE_NOTIFIKASI, [])

    @notifikasi_ns.expect(template_input)
    def post(self):
        """(C)REATE: Simpan template notifikasi"""
        template = simpan_template(*_validasi(notifikasi_ns.payload))
        return {'message': 'Template notifikasi berhasil disimpan', 'template': template}, 201


@notifikasi_ns.route('/template/<string:template_id>')
@notifikasi_ns.param('template_id', 'ID template')
class TemplateResource(AdminResource):
    def delete(self, template_id):
        """(D)ELETE: Hapus 1 template"""
        def hapus(templates):
            sisa = [t for t in templates if t['id'] != template_id]
            if len(sisa) == len(templates):
                abort(404, 'Template tidak ditemukan.')
            return sisa

        local_store().update(TEMPLATE_NOTIFIKASI, hapus, [])
        return {'message': 'Template berhasil dihapus'}, 200


@notifikasi_ns.route('/kirim')
class KirimNotifikasi(AdminResource):
    @notifikasi_ns.expect(kirim_input)
    def post(self):
        """(C)REATE: Kirim notifikasi ke user/mitra, lalu simpan sebagai template"""
        data = notifikasi_ns.payload or {}
        title, message, audience = _validasi(data)
        kirim_sekarang = data.get('kirim_sekarang', True)
        jadwal = None if kirim_sekarang else _jadwal_valid(data.get('jadwal'))

        try:
            penerima = jumlah_penerima()[audience]
        except SQLAlchemyError as e:
            gagal('Gagal mengirim notifikasi', e)

        url = current_app.config.get('NOTIFICATION_SERVICE_URL')
        if url:
            payload = {
                'title': title,
                'message': message,
                'audience': audience,
                'scheduled_at': jadwal
            }
            try:
                resp = requests.post(url, json=payload, timeout=current_app.config['NOTIFICATION_TIMEOUT'])
                resp.raise_for_status()
            except requests.exceptions.RequestException as e:
                # Jika layanan notifikasi mati atau menolak request
                log.error('Gagal memanggil layanan notifikasi: %s', e)
                abort(503, 'Gagal mengirim notifikasi')
        else:
            log.info('NOTIFICATION_SERVICE_URL kosong, pengiriman ke %s penerima disimulasikan', penerima)

        template = simpan_template(title, message, audience)
        if jadwal:
            pesan = f'Notifikasi dijadwalkan untuk {penerima} penerima pada {jadwal}'
        else:
            pesan = f'Notifikasi berhasil dikirim ke {penerima} penerima'
        return {
            'message': pesan,
            'penerima': penerima,
            'jadwal': jadwal,
            'template': template
        }, 200
