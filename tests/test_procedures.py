from decimal import Decimal

import pytest

from smartcare_admin.models import db, User, TopUp
from smartcare_admin.procedures import (call_procedure, ProcedureError,
                                        TargetTidakDitemukan, StatusSudahBerubah)


def test_prosedur_tidak_dikenal(app):
    with pytest.raises(ProcedureError):
        call_procedure('hapus_semua_saldo')


def test_tambah_saldo(buat):
    user = buat.user(saldo='1000')

    call_procedure('tambah_saldo', user_id_input=user.id, jumlah_input='2500.50')

    assert db.session.get(User, user.id).saldo == Decimal('3500.50')


@pytest.mark.parametrize('jumlah', [0, -1, 'abc', 'NaN', 'Infinity', '-Infinity'])
def test_jumlah_tidak_valid(buat, jumlah):
    user = buat.user(saldo='1000')

    with pytest.raises(ProcedureError):
        call_procedure('tambah_saldo', user_id_input=user.id, jumlah_input=jumlah)

    assert db.session.get(User, user.id).saldo == Decimal('1000')


def test_target_tidak_ada(app):
    with pytest.raises(TargetTidakDitemukan) as err:
        call_procedure('tambah_saldo_mitra', mitra_id_input='tidak-ada', jumlah_input=1000)

    assert err.value.status_code == 404


def test_konfirmasi_topup_sekali_saja(buat):
    user = buat.user(saldo='0')
    topup = buat.topup(user.id, nominal='10000')

    call_procedure('konfirmasi_topup', topup_id_input=topup.id)
    with pytest.raises(StatusSudahBerubah):
        call_procedure('konfirmasi_topup', topup_id_input=topup.id)

    assert db.session.get(TopUp, topup.id).status == 'approved'
    assert db.session.get(User, user.id).saldo == Decimal('10000')
