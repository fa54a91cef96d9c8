from decimal import Decimal


def test_statistik_tanpa_data(client, auth):
    body = client.get('/statistik', headers=auth).get_json()

    assert body['total_users'] == 0
    assert body['total_transactions'] == 0
    assert Decimal(body['total_revenue']) == 0
    assert body['average_rating'] == 0
    assert body['monthly_growth']['users_percent'] == 0
    assert body['monthly_growth']['revenue_percent'] == 0


def test_statistik_agregat(client, auth, buat, lalu):
    lama = buat.user('Lama', created_at=lalu(hari=90))
    baru = buat.user('Baru', created_at=lalu(hari=2))
    buat.mitra('A')
    mitra = buat.mitra('B', status='terverifikasi')
    layanan = buat.layanan()

    buat.topup(lama.id, status='approved')
    buat.topup(lama.id, status='pending')
    buat.topup(baru.id, status='pending')
    buat.topup(baru.id, status='rejected')

    buat.tagihan(lama, mitra, layanan, nominal='100000', status='completed', rating=5, order_date=lalu(hari=60))
    buat.tagihan(baru, mitra, layanan, nominal='50000', status='completed', rating=4, order_date=lalu(hari=1))
    buat.tagihan(baru, mitra, layanan, nominal='70000', status='cancelled', rating=1)
    buat.tagihan(baru, mitra, layanan, nominal='30000', status='processing')

    body = client.get('/statistik', headers=auth).get_json()

    assert body['total_users'] == 2
    assert body['total_mitras'] == 2
    assert body['pending_topups'] == 2
    assert body['completed_services'] == 2
    assert body['total_transactions'] == 3
    assert Decimal(body['total_revenue']) == Decimal('150000')
    # Rata-rata semua tagihan yang punya rating: (5 + 4 + 1) / 3
    assert body['average_rating'] == 3.3

    growth = body['monthly_growth']
    assert growth['users'] == 1
    assert Decimal(growth['revenue']) == Decimal('50000')
    assert growth['users_percent'] == 50.0
    assert round(growth['revenue_percent'], 2) == 33.33
