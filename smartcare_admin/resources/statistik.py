# smartcare_admin/resources/statistik.py
"""
Laporan & statistik. Semua angka dihitung dengan query agregat di database
(COUNT/SUM/AVG), bukan dengan menarik seluruh tabel lalu dijumlah di Python.
"""
from datetime import timedelta
from decimal import Decimal

from flask_restx import Namespace
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal
from ..jwt_utils import AdminResource
from ..models import (db, utcnow, User, Mitra, TopUp, Tagihan,
                      TOPUP_APPROVED, TOPUP_PENDING, TAGIHAN_COMPLETED)

statistik_ns = Namespace('statistik', description='Data analitik dan laporan kinerja sistem')

HARI_PERTUMBUHAN = 30


def _count(model, *criteria):
    return db.session.query(func.count(model.id)).filter(*criteria).scalar() or 0


def _persen(bagian, total):
    return min(float(bagian) / max(float(total), 1) * 100, 100)


def hitung_statistik():
    sejak = utcnow() - timedelta(days=HARI_PERTUMBUHAN)

    total_users = _count(User)
    total_mitras = _count(Mitra)
    approved_topups = _count(TopUp, TopUp.status == TOPUP_APPROVED)
    pending_topups = _count(TopUp, TopUp.status == TOPUP_PENDING)
    completed_services = _count(Tagihan, Tagihan.status == TAGIHAN_COMPLETED)

    total_revenue = db.session.query(
        func.coalesce(func.sum(Tagihan.nominal), 0)
    ).filter(Tagihan.status == TAGIHAN_COMPLETED).scalar()

    average_rating = db.session.query(func.avg(Tagihan.rating)).filter(Tagihan.rating.isnot(None)).scalar()

    users_baru = _count(User, User.created_at >= sejak)
    revenue_baru = db.session.query(
        func.coalesce(func.sum(Tagihan.nominal), 0)
    ).filter(Tagihan.status == TAGIHAN_COMPLETED, Tagihan.order_date >= sejak).scalar()

    total_revenue = Decimal(str(total_revenue))
    revenue_baru = Decimal(str(revenue_baru))
    return {
        'total_users': total_users,
        'total_mitras': total_mitras,
        'total_transactions': approved_topups + completed_services,
        'total_revenue': str(total_revenue),
        'pending_topups': pending_topups,
        'completed_services': completed_services,
        'average_rating': round(float(average_rating), 1) if average_rating is not None else 0,
        'monthly_growth': {
            'users': users_baru,
            'revenue': str(revenue_baru),
            'users_percent': _persen(users_baru, total_users),
            'revenue_percent': _persen(revenue_baru, total_revenue)
        }
    }


@statistik_ns.route('')
class Statistik(AdminResource):
    def get(self):
        """(R)EAD: Ringkasan statistik (dihitung ulang setiap dibuka)"""
        try:
            return hitung_statistik()
        except SQLAlchemyError as e:
            gagal('Gagal memuat statistik', e)
