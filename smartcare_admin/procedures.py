# smartcare_admin/procedures.py
"""
Prosedur backend yang dipanggil berdasarkan nama.

Setiap prosedur berjalan di dalam SATU transaksi database: kalau salah satu
langkah gagal, semua perubahan di-rollback. Saldo selalu diubah dengan satu
UPDATE atomik (saldo = saldo + jumlah), tidak pernah baca-lalu-tulis.
"""
import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from .models import db, utcnow, User, Mitra, TopUp, TRANSISI_TOPUP, TOPUP_PENDING

log = logging.getLogger(__name__)


class ProcedureError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class TargetTidakDitemukan(ProcedureError):
    status_code = 404


class StatusSudahBerubah(ProcedureError):
    status_code = 409


def _jumlah_positif(jumlah):
    try:
        jumlah = Decimal(str(jumlah))
    except (InvalidOperation, ValueError):
        raise ProcedureError('Nominal tidak valid.')
    if not jumlah.is_finite():
        raise ProcedureError('Nominal tidak valid.')
    if jumlah <= 0:
        raise ProcedureError('Nominal harus lebih dari 0')
    return jumlah


def _kredit(model, target_id, jumlah, label):
    result = db.session.execute(
        update(model)
        .where(model.id == target_id)
        .values(saldo=model.saldo + jumlah, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise TargetTidakDitemukan(f'{label} tidak ditemukan.')


def tambah_saldo(user_id_input, jumlah_input):
    """Menambah saldo user secara atomik."""
    jumlah = _jumlah_positif(jumlah_input)
    _kredit(User, user_id_input, jumlah, 'User')
    return jumlah


def tambah_saldo_mitra(mitra_id_input, jumlah_input):
    """Menambah saldo mitra secara atomik (sama seperti tambah_saldo untuk user)."""
    jumlah = _jumlah_positif(jumlah_input)
    _kredit(Mitra, mitra_id_input, jumlah, 'Mitra')
    return jumlah


def konfirmasi_topup(topup_id_input):
    """
    Menyetujui top up dan menambah saldo user dalam satu transaksi.

    Status hanya berpindah dari 'pending', jadi pemanggilan kedua untuk
    top up yang sama ditolak dan tidak menambah saldo dua kali.
    """
    topup = db.session.get(TopUp, topup_id_input)
    if not topup:
        raise TargetTidakDitemukan('Top up tidak ditemukan.')

    user_id, nominal = topup.user_id, topup.nominal
    status_baru = TRANSISI_TOPUP[TOPUP_PENDING]['konfirmasi']
    result = db.session.execute(
        update(TopUp)
        .where(TopUp.id == topup_id_input, TopUp.status == TOPUP_PENDING)
        .values(status=status_baru, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise StatusSudahBerubah('Top up ini sudah diproses sebelumnya.')

    tambah_saldo(user_id, nominal)
    return {'topup_id': topup_id_input, 'user_id': user_id, 'nominal': nominal}


PROCEDURES = {
    'tambah_saldo': tambah_saldo,
    'tambah_saldo_mitra': tambah_saldo_mitra,
    'konfirmasi_topup': konfirmasi_topup,
}


def call_procedure(name, **params):
    """Menjalankan prosedur berdasarkan nama lalu commit; rollback jika ada yang gagal."""
    procedure = PROCEDURES.get(name)
    if procedure is None:
        raise ProcedureError(f"Prosedur '{name}' tidak dikenal.")

    try:
        result = procedure(**params)
        db.session.commit()
    except (ProcedureError, SQLAlchemyError):
        db.session.rollback()
        raise
    log.info('Prosedur %s selesai: %s', name, params)
    return result
