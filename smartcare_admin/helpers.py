# smartcare_admin/helpers.py
import logging

from flask import current_app
from flask_restx import abort
from sqlalchemy import update

from .local_store import LocalStore
from .models import db, utcnow

log = logging.getLogger(__name__)


def gagal(pesan, error):
    """Rollback, catat error aslinya, lalu kirim pesan umum ke dashboard (500)."""
    db.session.rollback()
    log.error('%s: %s', pesan, error, exc_info=error)
    abort(500, pesan)


def cocok_pencarian(rows, term, *keys):
    """
    Filter substring (case-insensitive) atas baris yang sudah diambil.
    Kosong = semua baris. Key boleh bertitik untuk data gabungan, misal 'user.nama'.
    """
    if not term:
        return list(rows)
    term = term.lower()

    def ambil(row, key):
        value = row
        for part in key.split('.'):
            value = value.get(part) if isinstance(value, dict) else None
        return value or ''

    return [row for row in rows if any(term in str(ambil(row, k)).lower() for k in keys)]


def local_store():
    return LocalStore(current_app.config['LOCAL_STORE_DIR'])


def format_rupiah(nominal):
    # 150000 -> "Rp 150.000"
    return 'Rp ' + f'{int(nominal):,}'.replace(',', '.')


def jalankan_transisi(model, row_id, transisi, label, aksi=None, status_tujuan=None, extra_values=None):
    """
    Mengubah status satu baris sesuai tabel transisi.

    UPDATE hanya berlaku jika status di database masih sama dengan yang
    dibaca (compare-and-set), jadi dua admin yang memproses baris yang sama
    tidak saling menimpa: yang kalah mendapat 409.
    """
    row = db.session.get(model, row_id)
    if not row:
        abort(404, f'{label} tidak ditemukan.')

    status_lama = row.status
    tersedia = transisi.get(status_lama, {})
    if aksi is not None:
        status_baru = tersedia.get(aksi)
    else:
        status_baru = status_tujuan if status_tujuan in tersedia.values() else None
    if status_baru is None:
        abort(400, f"Perubahan '{aksi or status_tujuan}' tidak valid untuk {label.lower()} berstatus {status_lama}.")

    values = {'status': status_baru, 'updated_at': utcnow()}
    if extra_values:
        values.update(extra_values(status_baru))
    result = db.session.execute(
        update(model)
        .where(model.id == row_id, model.status == status_lama)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.session.rollback()
        abort(409, f'Status {label.lower()} sudah diubah oleh sesi lain. Muat ulang data.')

    db.session.commit()
    log.info('%s %s: %s -> %s', label, row_id, status_lama, status_baru)
    return status_lama, status_baru
