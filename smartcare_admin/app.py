# smartcare_admin/app.py

import logging
import os

from flask import Flask
from flask_cors import CORS
from flask_restx import Api

# Import dari file kita sendiri
from .config import Config
from .models import db
from .procedures import ProcedureError
from .resources import NAMESPACES

log = logging.getLogger(__name__)


def create_app(config=Config):
    # --- 1. INISIALISASI APLIKASI ---
    app = Flask(__name__)
    app.config.from_object(config)
    if not app.config.get('LOCAL_STORE_DIR'):
        app.config['LOCAL_STORE_DIR'] = os.path.join(app.instance_path, 'local_store')

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    # Izinkan dashboard (frontend) memanggil API dari origin lain
    CORS(app)

    db.init_app(app)
    api = Api(app,
              doc='/api-docs/',
              title='SmartCare Admin API',
              description='Layanan untuk dashboard admin SmartCare: mitra, user, layanan, top up, tagihan, chat, notifikasi.',
              authorizations={'apiKey': {'type': 'apiKey', 'in': 'header', 'name': 'Authorization'}},
              security='apiKey')

    # --- 2. NAMESPACE (satu per menu dashboard) ---
    for ns in NAMESPACES:
        api.add_namespace(ns)

    # --- 3. ERROR DARI PROSEDUR BACKEND ---
    @api.errorhandler(ProcedureError)
    def handle_procedure_error(error):
        log.warning('Prosedur gagal: %s', error.message)
        return {'message': error.message}, error.status_code

    # --- 4. BUAT TABEL ---
    if app.config.get('CREATE_TABLES'):
        with app.app_context():
            db.create_all()

    return app


def main():
    # Port 3005 untuk smartcare-admin
    create_app().run(port=int(os.getenv('PORT', 3005)), debug=True)


# Jalankan sebagai modul (import relatif): python -m smartcare_admin.app, atau perintah smartcare-admin
if __name__ == '__main__':
    main()
