# smartcare_admin/local_store.py
"""
Penyimpanan lokal per instance untuk data yang tidak disinkron ke backend
(template notifikasi dan pengaturan aplikasi).

Satu file JSON per key, selalu dibaca dan ditulis utuh. Tidak ada versi
atau migrasi: kalau folder dihapus, datanya hilang.
"""
import json
import logging
import os
import tempfile
import threading

log = logging.getLogger(__name__)

TEMPLATE_NOTIFIKASI = 'notification_templates'
PENGATURAN_APLIKASI = 'app_settings'

# Satu lock per file, dipakai bersama oleh semua objek LocalStore di proses ini
_locks = {}
_locks_guard = threading.Lock()


def _lock_untuk(path):
    with _locks_guard:
        return _locks.setdefault(path, threading.RLock())


class LocalStore:
    def __init__(self, directory):
        self.directory = directory

    def _path(self, key):
        return os.path.join(self.directory, f'{key}.json')

    def read(self, key, default=None):
        path = self._path(key)
        with _lock_untuk(path):
            if not os.path.exists(path):
                return default
            with open(path, encoding='utf-8') as fh:
                return json.load(fh)

    def write(self, key, value):
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        with _lock_untuk(path):
            # File sementara unik per penulis, lalu diganti sekaligus
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f'.{key}-', suffix='.tmp')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                    json.dump(value, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_path, path)
            except OSError:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        log.debug('Local store %s ditulis', key)
        return value

    def update(self, key, fn, default=None):
        """Baca-ubah-tulis satu dokumen di bawah lock yang sama; fn(dokumen) -> dokumen baru."""
        path = self._path(key)
        with _lock_untuk(path):
            return self.write(key, fn(self.read(key, default)))
