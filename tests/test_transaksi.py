import pytest


@pytest.fixture
def riwayat(buat, lalu):
    siti = buat.user('Siti')
    joko = buat.user('Joko')
    mitra = buat.mitra('Servis Kilat', status='terverifikasi')
    layanan = buat.layanan('Cuci AC')

    buat.topup(siti.id, nominal='100000', status='approved', created_at=lalu(hari=3))
    buat.topup(joko.id, nominal='20000', status='pending', created_at=lalu(hari=1))
    buat.tagihan(siti, mitra, layanan, status='completed', order_date=lalu(hari=2))
    buat.tagihan(joko, mitra, layanan, status='pending', order_date=lalu(menit=5), payment_method=None)
    return siti, joko


def test_gabungan_urut_terbaru(client, auth, riwayat):
    body = client.get('/transaksi', headers=auth).get_json()

    assert body['total'] == 4
    assert body['ditampilkan'] == 4
    assert [(t['type'], t['status']) for t in body['items']] == [
        ('tagihan', 'pending'), ('topup', 'pending'), ('tagihan', 'completed'), ('topup', 'approved')
    ]
    tagihan = body['items'][0]
    assert tagihan['payment_method'] == 'Unknown'
    assert tagihan['mitra'] == {'nama_toko': 'Servis Kilat'}
    assert tagihan['layanan'] == {'nama_layanan': 'Cuci AC'}
    assert body['items'][1]['mitra'] is None


def test_filter_tipe(client, auth, riwayat):
    body = client.get('/transaksi?tipe=topup', headers=auth).get_json()

    assert body['total'] == 2
    assert {t['type'] for t in body['items']} == {'topup'}


def test_filter_status_berlaku_untuk_kedua_tipe(client, auth, riwayat):
    body = client.get('/transaksi?status=pending', headers=auth).get_json()

    assert body['total'] == 2
    assert {t['type'] for t in body['items']} == {'topup', 'tagihan'}


def test_cari_nama_email_atau_id(client, auth, riwayat):
    body = client.get('/transaksi?q=SITI', headers=auth).get_json()
    assert body['total'] == 4
    assert body['ditampilkan'] == 2
    assert {t['user']['nama'] for t in body['items']} == {'Siti'}

    body = client.get('/transaksi?q=joko@mail', headers=auth).get_json()
    assert body['ditampilkan'] == 2

    target = body['items'][0]['id']
    body = client.get(f'/transaksi?q={target[:8]}', headers=auth).get_json()
    assert target in [t['id'] for t in body['items']]


def test_cari_tanpa_hasil(client, auth, riwayat):
    body = client.get('/transaksi?q=tidak-ada-yang-cocok', headers=auth).get_json()

    assert body['ditampilkan'] == 0
    assert body['items'] == []


def test_parameter_tidak_dikenal(client, auth):
    assert client.get('/transaksi?tipe=refund', headers=auth).status_code == 400
    assert client.get('/transaksi?status=lunas', headers=auth).status_code == 400
