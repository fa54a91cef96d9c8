from datetime import timedelta
from decimal import Decimal

import pytest

from smartcare_admin import create_app
from smartcare_admin.config import TestConfig
from smartcare_admin.models import (db, utcnow, User, Mitra, Layanan, MitraLayanan,
                                    Tagihan, TopUp, Chat, AdminCredential)


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        LOCAL_STORE_DIR = str(tmp_path / 'local_store')

    app = create_app(Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth(client):
    resp = client.post('/auth/login', json={'kode_akses': '011090'})
    assert resp.status_code == 200
    return {'Authorization': f"Bearer {resp.get_json()['token']}"}


class Factory:
    """Membuat baris langsung di database test."""

    def _simpan(self, row):
        db.session.add(row)
        db.session.commit()
        return row

    def user(self, nama='Budi', email=None, saldo='0', **kw):
        email = email or f'{nama.lower().replace(" ", ".")}@mail.com'
        return self._simpan(User(nama=nama, email=email, saldo=Decimal(saldo), **kw))

    def mitra(self, nama_toko='Toko Servis', email=None, status='pending', saldo='0', **kw):
        email = email or f'{nama_toko.lower().replace(" ", "")}@mitra.com'
        kw.setdefault('alamat', 'Jl. Merdeka 1')
        kw.setdefault('phone_number', '0812000000')
        return self._simpan(Mitra(nama_toko=nama_toko, email=email, status=status, saldo=Decimal(saldo), **kw))

    def layanan(self, nama_layanan='Perbaikan AC', base_price='50000', **kw):
        return self._simpan(Layanan(nama_layanan=nama_layanan, base_price=Decimal(base_price), **kw))

    def mitra_layanan(self, mitra, layanan, price='60000', is_available=True):
        return self._simpan(MitraLayanan(mitra_id=mitra.id, layanan_id=layanan.id,
                                         price=Decimal(price), is_available=is_available))

    def tagihan(self, user, mitra, layanan, nominal='75000', status='pending', **kw):
        return self._simpan(Tagihan(user_id=user.id, mitra_id=mitra.id, layanan_id=layanan.id,
                                    nominal=Decimal(nominal), status=status, **kw))

    def topup(self, user_id, nominal='50000', status='pending', payment_method='Transfer BCA', **kw):
        return self._simpan(TopUp(user_id=user_id, nominal=Decimal(nominal), status=status,
                                  payment_method=payment_method, **kw))

    def chat(self, sender_id, sender_type, receiver_id, receiver_type, message, **kw):
        return self._simpan(Chat(sender_id=sender_id, sender_type=sender_type, receiver_id=receiver_id,
                                 receiver_type=receiver_type, message=message, **kw))

    def admin(self, email, role='admin', **kw):
        return self._simpan(AdminCredential(email=email, role=role, **kw))


@pytest.fixture
def buat(app):
    return Factory()


@pytest.fixture
def lalu():
    """lalu(n) -> waktu n menit yang lalu."""
    sekarang = utcnow()
    return lambda menit=0, hari=0: sekarang - timedelta(minutes=menit, days=hari)
