from decimal import Decimal

from smartcare_admin.models import db, User, Mitra


def test_penerima_user_urut_nama(client, auth, buat):
    buat.user('Citra')
    buat.user('Andi')
    buat.user('Budi')

    resp = client.get('/saldo/penerima?tipe=user', headers=auth)

    assert [u['nama'] for u in resp.get_json()] == ['Andi', 'Budi', 'Citra']


def test_penerima_mitra_hanya_yang_terverifikasi(client, auth, buat):
    buat.mitra('Zeta Servis', status='terverifikasi')
    buat.mitra('Alpha Servis', status='terverifikasi')
    buat.mitra('Pending Servis', status='pending')
    buat.mitra('Suspend Servis', status='suspended')

    resp = client.get('/saldo/penerima?tipe=mitra', headers=auth)

    assert [m['nama'] for m in resp.get_json()] == ['Alpha Servis', 'Zeta Servis']


def test_pratinjau_saldo(client, auth, buat):
    user = buat.user(saldo='10000')

    resp = client.get(f'/saldo/pratinjau?tipe=user&penerima_id={user.id}&nominal=2500', headers=auth)

    body = resp.get_json()
    assert Decimal(body['saldo']) == Decimal('10000')
    assert Decimal(body['saldo_setelah']) == Decimal('12500')


def test_kirim_saldo_ke_user(client, auth, buat):
    user = buat.user(saldo='1000')

    resp = client.post('/saldo/kirim', headers=auth,
                       json={'tipe': 'user', 'penerima_id': user.id, 'nominal': 20000})

    assert resp.status_code == 200
    assert resp.get_json()['message'] == 'Saldo sebesar Rp 20.000 berhasil dikirim'
    assert db.session.get(User, user.id).saldo == Decimal('21000')


def test_kirim_saldo_ke_mitra_atomik(client, auth, buat):
    mitra = buat.mitra(status='terverifikasi', saldo='500')

    resp = client.post('/saldo/kirim', headers=auth,
                       json={'tipe': 'mitra', 'penerima_id': mitra.id, 'nominal': 1500})

    assert resp.status_code == 200
    assert Decimal(resp.get_json()['penerima']['saldo']) == Decimal('2000')
    assert db.session.get(Mitra, mitra.id).saldo == Decimal('2000')


def test_kirim_saldo_field_kosong(client, auth, buat):
    user = buat.user()

    resp = client.post('/saldo/kirim', headers=auth, json={'tipe': 'user', 'penerima_id': user.id})

    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Harap lengkapi semua field'


def test_kirim_saldo_nominal_tidak_positif(client, auth, buat):
    user = buat.user(saldo='100')

    for nominal in (0, -5000):
        resp = client.post('/saldo/kirim', headers=auth,
                           json={'tipe': 'user', 'penerima_id': user.id, 'nominal': nominal})
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'Nominal harus lebih dari 0'

    assert db.session.get(User, user.id).saldo == Decimal('100')


def test_kirim_saldo_penerima_tidak_ada(client, auth):
    resp = client.post('/saldo/kirim', headers=auth,
                       json={'tipe': 'mitra', 'penerima_id': 'tidak-ada', 'nominal': 1000})

    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'Mitra tidak ditemukan.'


def test_tipe_penerima_tidak_dikenal(client, auth):
    assert client.get('/saldo/penerima?tipe=admin', headers=auth).status_code == 400
