# smartcare_admin/resources/pengaturan.py
"""
Pengaturan aplikasi. Disimpan di local store instance ini saja dan tidak
ditegakkan di mana pun (murni konfigurasi tampilan dashboard).
"""
import logging

from flask_restx import Namespace, fields, abort

from ..helpers import local_store
from ..jwt_utils import AdminResource
from ..local_store import PENGATURAN_APLIKASI

log = logging.getLogger(__name__)

pengaturan_ns = Namespace('pengaturan', description='Konfigurasi umum sistem SmartCare')

PENGATURAN_DEFAULT = {
    # Umum
    'app_name': 'SmartCare',
    'app_description': 'Platform layanan smartcare terpercaya',
    'app_version': '1.0.0',
    # Keuangan
    'min_topup_amount': 10000,
    'max_topup_amount': 10000000,
    'min_saldo_limit': 5000,
    'service_fee_percentage': 5.0,
    # User
    'auto_verify_users': False,
    'allow_guest_checkout': True,
    'require_phone_verification': True,
    # Mitra
    'auto_verify_mitras': False,
    'mitra_commission_percentage': 15.0,
    'min_mitra_rating': 4.0,
    # Notifikasi
    'enable_email_notifications': True,
    'enable_sms_notifications': False,
    'enable_push_notifications': True,
    # Maintenance
    'maintenance_mode': False,
    'maintenance_message': 'Sistem sedang dalam perbaikan. Mohon tunggu beberapa saat.',
    # Keamanan
    'session_timeout': 60,
    'max_login_attempts': 3,
    'require_strong_password': True,
}

pengaturan_model = pengaturan_ns.model('Pengaturan', {
    'app_name': fields.String,
    'app_description': fields.String,
    'app_version': fields.String,
    'min_topup_amount': fields.Integer(description='Minimum top up (Rp)'),
    'max_topup_amount': fields.Integer(description='Maximum top up (Rp)'),
    'min_saldo_limit': fields.Integer(description='Batas minimum saldo (Rp)'),
    'service_fee_percentage': fields.Float(min=0, max=100, description='Fee layanan (%)'),
    'auto_verify_users': fields.Boolean,
    'allow_guest_checkout': fields.Boolean,
    'require_phone_verification': fields.Boolean,
    'auto_verify_mitras': fields.Boolean,
    'mitra_commission_percentage': fields.Float(min=0, max=100, description='Komisi mitra (%)'),
    'min_mitra_rating': fields.Float(min=1, max=5),
    'enable_email_notifications': fields.Boolean,
    'enable_sms_notifications': fields.Boolean,
    'enable_push_notifications': fields.Boolean,
    'maintenance_mode': fields.Boolean,
    'maintenance_message': fields.String,
    'session_timeout': fields.Integer(description='Menit'),
    'max_login_attempts': fields.Integer,
    'require_strong_password': fields.Boolean,
})

# Tipe python per field untuk validasi input (bool dicek duluan karena bool turunan int)
_TIPE = {key: type(value) for key, value in PENGATURAN_DEFAULT.items()}

# Batas nilai (inklusif), sama dengan min/max di pengaturan_model
_RENTANG = {
    'service_fee_percentage': (0, 100),
    'mitra_commission_percentage': (0, 100),
    'min_mitra_rating': (1, 5),
}


def _gabung_default(tersimpan):
    return {**PENGATURAN_DEFAULT, **{k: v for k, v in (tersimpan or {}).items() if k in PENGATURAN_DEFAULT}}


def baca_pengaturan():
    return _gabung_default(local_store().read(PENGATURAN_APLIKASI, {}))


def _nilai_valid(key, value):
    tipe = _TIPE[key]
    if tipe is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if tipe is float:
        ok = isinstance(value, (int, float))
    else:
        ok = isinstance(value, tipe)
    if ok and key in _RENTANG:
        batas_bawah, batas_atas = _RENTANG[key]
        ok = batas_bawah <= value <= batas_atas
    return ok


@pengaturan_ns.route('')
class Pengaturan(AdminResource):
    @pengaturan_ns.marshal_with(pengaturan_model)
    def get(self):
        """(R)EAD: Pengaturan saat ini (default + yang tersimpan)"""
        return baca_pengaturan()

    @pengaturan_ns.expect(pengaturan_model)
    def put(self):
        """(U)PDATE: Simpan pengaturan (seluruh dokumen ditulis ulang)"""
        data = pengaturan_ns.payload or {}
        tidak_dikenal = sorted(set(data) - set(PENGATURAN_DEFAULT))
        if tidak_dikenal:
            abort(400, f"Pengaturan tidak dikenal: {', '.join(tidak_dikenal)}")
        tidak_valid = sorted(k for k, v in data.items() if not _nilai_valid(k, v))
        if tidak_valid:
            abort(400, f"Nilai tidak valid: {', '.join(tidak_valid)}")

        pengaturan = local_store().update(
            PENGATURAN_APLIKASI, lambda tersimpan: {**_gabung_default(tersimpan), **data}, {}
        )
        log.info('Pengaturan aplikasi disimpan (%s field diubah)', len(data))
        return {
            'message': 'Semua pengaturan aplikasi berhasil disimpan',
            'pengaturan': pengaturan
        }, 200


@pengaturan_ns.route('/reset')
class PengaturanReset(AdminResource):
    def post(self):
        """(U)PDATE: Kembalikan semua pengaturan ke default"""
        local_store().write(PENGATURAN_APLIKASI, dict(PENGATURAN_DEFAULT))
        return {
            'message': 'Semua pengaturan telah dikembalikan ke default',
            'pengaturan': dict(PENGATURAN_DEFAULT)
        }, 200
