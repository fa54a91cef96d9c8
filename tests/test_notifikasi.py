import pytest
import requests


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f'{self.status_code} Error')


@pytest.fixture
def penerima(buat):
    buat.user('A')
    buat.user('B')
    buat.mitra('Terverifikasi', status='terverifikasi')
    buat.mitra('Masih Pending', status='pending')


def test_jumlah_penerima(client, auth, penerima):
    body = client.get('/notifikasi/penerima', headers=auth).get_json()

    assert body == {'users': 2, 'mitras': 1, 'all': 3}


def test_simpan_list_dan_hapus_template(client, auth):
    pertama = client.post('/notifikasi/template', headers=auth,
                          json={'title': 'Promo', 'message': 'Diskon 20%'}).get_json()['template']
    client.post('/notifikasi/template', headers=auth,
                json={'title': 'Maintenance', 'message': 'Malam ini', 'audience': 'mitras'})

    templates = client.get('/notifikasi/template', headers=auth).get_json()
    assert [t['title'] for t in templates] == ['Maintenance', 'Promo']
    assert pertama['audience'] == 'all'

    resp = client.delete(f"/notifikasi/template/{pertama['id']}", headers=auth)
    assert resp.status_code == 200
    assert [t['title'] for t in client.get('/notifikasi/template', headers=auth).get_json()] == ['Maintenance']
    assert client.delete(f"/notifikasi/template/{pertama['id']}", headers=auth).status_code == 404


def test_template_tanpa_judul(client, auth):
    resp = client.post('/notifikasi/template', headers=auth, json={'title': ' ', 'message': 'Isi'})

    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Judul dan pesan notifikasi wajib diisi'


def test_kirim_disimulasikan_tanpa_url(client, auth, penerima, monkeypatch):
    def tidak_boleh_dipanggil(*args, **kwargs):
        raise AssertionError('requests.post tidak boleh dipanggil')

    monkeypatch.setattr(requests, 'post', tidak_boleh_dipanggil)

    resp = client.post('/notifikasi/kirim', headers=auth,
                       json={'title': 'Halo', 'message': 'Untuk user', 'audience': 'users'})

    assert resp.status_code == 200
    assert resp.get_json()['message'] == 'Notifikasi berhasil dikirim ke 2 penerima'
    assert len(client.get('/notifikasi/template', headers=auth).get_json()) == 1


def test_kirim_lewat_layanan_notifikasi(app, client, auth, penerima, monkeypatch):
    app.config['NOTIFICATION_SERVICE_URL'] = 'http://notif.local/send'
    panggilan = []

    def fake_post(url, json=None, timeout=None):
        panggilan.append((url, json))
        return FakeResponse()

    monkeypatch.setattr(requests, 'post', fake_post)

    resp = client.post('/notifikasi/kirim', headers=auth, json={
        'title': 'Jadwal', 'message': 'Besok', 'kirim_sekarang': False, 'jadwal': '2026-01-01T09:00:00'
    })

    assert resp.status_code == 200
    assert resp.get_json()['penerima'] == 3
    assert panggilan == [('http://notif.local/send', {
        'title': 'Jadwal', 'message': 'Besok', 'audience': 'all', 'scheduled_at': '2026-01-01T09:00:00'
    })]


def test_layanan_notifikasi_gagal(app, client, auth, monkeypatch):
    app.config['NOTIFICATION_SERVICE_URL'] = 'http://notif.local/send'

    def mati(*args, **kwargs):
        raise requests.exceptions.ConnectionError('connection refused')

    monkeypatch.setattr(requests, 'post', mati)

    resp = client.post('/notifikasi/kirim', headers=auth, json={'title': 'A', 'message': 'B'})

    assert resp.status_code == 503
    assert resp.get_json()['message'] == 'Gagal mengirim notifikasi'
    # Tidak disimpan sebagai template kalau gagal terkirim
    assert client.get('/notifikasi/template', headers=auth).get_json() == []


def test_layanan_notifikasi_menolak(app, client, auth, monkeypatch):
    app.config['NOTIFICATION_SERVICE_URL'] = 'http://notif.local/send'
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: FakeResponse(500))

    resp = client.post('/notifikasi/kirim', headers=auth, json={'title': 'A', 'message': 'B'})

    assert resp.status_code == 503


def test_dijadwalkan_tanpa_jadwal(client, auth):
    resp = client.post('/notifikasi/kirim', headers=auth,
                       json={'title': 'A', 'message': 'B', 'kirim_sekarang': False})

    assert resp.status_code == 400


def test_dijadwalkan_tanpa_layanan_notifikasi(client, auth, penerima):
    resp = client.post('/notifikasi/kirim', headers=auth, json={
        'title': 'Promo', 'message': 'Besok pagi', 'audience': 'users',
        'kirim_sekarang': False, 'jadwal': '2026-01-01T09:00'
    })

    assert resp.status_code == 200
    body = resp.get_json()
    assert body['message'] == 'Notifikasi dijadwalkan untuk 2 penerima pada 2026-01-01T09:00:00'
    assert body['jadwal'] == '2026-01-01T09:00:00'


def test_jadwal_bukan_iso_8601(client, auth, monkeypatch):
    monkeypatch.setattr(requests, 'post', lambda *a, **kw: FakeResponse())

    resp = client.post('/notifikasi/kirim', headers=auth,
                       json={'title': 'A', 'message': 'B', 'kirim_sekarang': False, 'jadwal': 'besok pagi'})

    assert resp.status_code == 400
    assert client.get('/notifikasi/template', headers=auth).get_json() == []
