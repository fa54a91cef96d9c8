# smartcare_admin/config.py

import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Koneksi ke database backend SmartCare
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL_SMARTCARE', 'mysql+pymysql://root:@localhost:3306/db_smartcare')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CREATE_TABLES = os.getenv('CREATE_TABLES', '1') == '1'

    # --- SESI ADMIN ---
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'ini-rahasia-banget-dan-harus-diganti-nanti')
    JWT_EXPIRES_HOURS = int(os.getenv('JWT_EXPIRES_HOURS', '24'))
    ADMIN_ACCESS_CODE = os.getenv('ADMIN_ACCESS_CODE', '011090')

    # ID pengirim untuk semua pesan chat dari admin
    ADMIN_CHAT_ID = os.getenv('ADMIN_CHAT_ID', 'admin')

    # Folder untuk template notifikasi & pengaturan (per instance, tidak disinkron ke backend)
    LOCAL_STORE_DIR = os.getenv('LOCAL_STORE_DIR')

    # Kosong = pengiriman notifikasi hanya disimulasikan
    NOTIFICATION_SERVICE_URL = os.getenv('NOTIFICATION_SERVICE_URL')
    NOTIFICATION_TIMEOUT = int(os.getenv('NOTIFICATION_TIMEOUT', '10'))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    CREATE_TABLES = True
    JWT_SECRET_KEY = 'rahasia-untuk-test-saja-minimal-32-byte'
    ADMIN_ACCESS_CODE = '011090'
    NOTIFICATION_SERVICE_URL = None
