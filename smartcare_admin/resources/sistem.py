# smartcare_admin/resources/sistem.py

from flask_restx import Namespace, Resource
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..jwt_utils import AdminResource
from ..models import db

health_ns = Namespace('health', description='Cek kesehatan layanan')
dashboard_ns = Namespace('dashboard', description='Menu utama dashboard admin')

MENU_DASHBOARD = [
    {'id': 'verifikasi-mitra', 'title': 'Verifikasi Mitra Baru', 'icon': '👥', 'description': 'Verifikasi data mitra baru'},
    {'id': 'konfirmasi-topup', 'title': 'Konfirmasi Top Up', 'icon': '💰', 'description': 'Setujui permintaan top up'},
    {'id': 'kirim-saldo', 'title': 'Kirim Saldo Manual', 'icon': '📤', 'description': 'Transfer saldo manual'},
    {'id': 'live-chat', 'title': 'Live Chat', 'icon': '💬', 'description': 'Chat dengan pengguna'},
    {'id': 'kelola-tagihan', 'title': 'Kelola Tagihan', 'icon': '🧾', 'description': 'Atur tagihan layanan'},
    {'id': 'kelola-layanan', 'title': 'Kelola Layanan', 'icon': '⚙️', 'description': 'Atur layanan SmartCare'},
    {'id': 'riwayat-transaksi', 'title': 'Riwayat Transaksi', 'icon': '📊', 'description': 'Log transaksi keuangan'},
    {'id': 'kelola-pengguna', 'title': 'Kelola Pengguna', 'icon': '👤', 'description': 'Atur data pengguna'},
    {'id': 'laporan-statistik', 'title': 'Laporan & Statistik', 'icon': '📈', 'description': 'Data dan analitik'},
    {'id': 'kelola-notifikasi', 'title': 'Kelola Notifikasi', 'icon': '🔔', 'description': 'Kirim pengumuman'},
    {'id': 'pengaturan', 'title': 'Pengaturan Aplikasi', 'icon': '⚙️', 'description': 'Konfigurasi sistem'},
    {'id': 'logout', 'title': 'Logout', 'icon': '🚪', 'description': 'Keluar dari sistem'},
]


@health_ns.route('')
class Health(Resource):
    def get(self):
        """Status aplikasi dan koneksi database (tanpa token)"""
        try:
            db.session.execute(text('SELECT 1'))
            database = 'healthy'
        except SQLAlchemyError:
            db.session.rollback()
            database = 'offline'
        return {'app': 'healthy', 'database': database}


@dashboard_ns.route('/menu')
class DashboardMenu(AdminResource):
    def get(self):
        """(R)EAD: Daftar menu dashboard"""
        return MENU_DASHBOARD
