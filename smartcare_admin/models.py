# smartcare_admin/models.py

import uuid
from datetime import datetime, timezone
from decimal import Decimal # Wajib untuk uang

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    # Disimpan tanpa tzinfo, selalu UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


def _uang(value):
    # Selalu kirim uang sebagai string di JSON
    return str(value) if value is not None else None


# --- STATUS & TRANSISI ---
# aksi -> status tujuan, per status asal. Aksi yang tidak ada di sini tidak boleh dijalankan.
MITRA_PENDING = 'pending'
MITRA_TERVERIFIKASI = 'terverifikasi'
MITRA_DITOLAK = 'ditolak'
MITRA_SUSPENDED = 'suspended'

TRANSISI_MITRA = {
    MITRA_PENDING: {'verifikasi': MITRA_TERVERIFIKASI, 'tolak': MITRA_DITOLAK},
    MITRA_TERVERIFIKASI: {'suspend': MITRA_SUSPENDED},
    MITRA_SUSPENDED: {'aktifkan': MITRA_TERVERIFIKASI},
    MITRA_DITOLAK: {},
}

TOPUP_PENDING = 'pending'
TOPUP_APPROVED = 'approved'
TOPUP_REJECTED = 'rejected'

TRANSISI_TOPUP = {
    TOPUP_PENDING: {'konfirmasi': TOPUP_APPROVED, 'tolak': TOPUP_REJECTED},
    TOPUP_APPROVED: {},
    TOPUP_REJECTED: {},
}

TAGIHAN_PENDING = 'pending'
TAGIHAN_PROCESSING = 'processing'
TAGIHAN_COMPLETED = 'completed'
TAGIHAN_CANCELLED = 'cancelled'

TRANSISI_TAGIHAN = {
    TAGIHAN_PENDING: {'proses': TAGIHAN_PROCESSING, 'batalkan': TAGIHAN_CANCELLED},
    TAGIHAN_PROCESSING: {'selesai': TAGIHAN_COMPLETED, 'batalkan': TAGIHAN_CANCELLED},
    TAGIHAN_COMPLETED: {},
    TAGIHAN_CANCELLED: {},
}


def aksi_tersedia(transisi, status):
    """Daftar aksi yang valid dari status saat ini (urutan sesuai tabel transisi)."""
    return list(transisi.get(status, {}).keys())


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    nama = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(150), nullable=False)
    phone_number = db.Column(db.String(30), nullable=True)
    profile_picture_url = db.Column(db.String(500), nullable=True)
    # Gunakan Numeric/Decimal untuk uang, BUKAN float
    saldo = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'nama': self.nama,
            'email': self.email,
            'phone_number': self.phone_number,
            'profile_picture_url': self.profile_picture_url,
            'saldo': _uang(self.saldo),
            'created_at': _iso(self.created_at)
        }


class Mitra(db.Model):
    __tablename__ = 'mitra'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    nama_toko = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(150), nullable=False)
    alamat = db.Column(db.String(255), nullable=False)
    phone_number = db.Column(db.String(30), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # (pending, terverifikasi, ditolak, suspended)
    status = db.Column(db.String(20), nullable=False, default=MITRA_PENDING, index=True)
    saldo = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'nama_toko': self.nama_toko,
            'email': self.email,
            'alamat': self.alamat,
            'phone_number': self.phone_number,
            'description': self.description,
            'status': self.status,
            'saldo': _uang(self.saldo),
            'created_at': _iso(self.created_at),
            'aksi': aksi_tersedia(TRANSISI_MITRA, self.status)
        }


class Layanan(db.Model):
    __tablename__ = 'layanan'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    nama_layanan = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    base_price = db.Column(db.Numeric(15, 2), nullable=True)
    icon_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'nama_layanan': self.nama_layanan,
            'description': self.description,
            'base_price': _uang(self.base_price),
            'icon_url': self.icon_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class MitraLayanan(db.Model):
    # Harga per mitra untuk satu layanan (many-to-many)
    __tablename__ = 'mitra_layanan'

    mitra_id = db.Column(db.String(36), db.ForeignKey('mitra.id'), primary_key=True)
    layanan_id = db.Column(db.String(36), db.ForeignKey('layanan.id'), primary_key=True)
    price = db.Column(db.Numeric(15, 2), nullable=False)
    is_available = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    mitra = db.relationship('Mitra', lazy='joined')

    def to_dict(self):
        return {
            'mitra_id': self.mitra_id,
            'layanan_id': self.layanan_id,
            'nama_toko': self.mitra.nama_toko if self.mitra else None,
            'price': _uang(self.price),
            'is_available': self.is_available
        }


class Tagihan(db.Model):
    __tablename__ = 'tagihan'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    mitra_id = db.Column(db.String(36), db.ForeignKey('mitra.id'), nullable=False, index=True)
    layanan_id = db.Column(db.String(36), db.ForeignKey('layanan.id'), nullable=False)
    nominal = db.Column(db.Numeric(15, 2), nullable=False)
    # (pending, processing, completed, cancelled)
    status = db.Column(db.String(20), nullable=False, default=TAGIHAN_PENDING, index=True)
    payment_method = db.Column(db.String(50), nullable=True)
    order_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    completion_date = db.Column(db.DateTime, nullable=True)
    rating = db.Column(db.Integer, nullable=True)
    review = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = db.relationship('User', lazy='joined')
    mitra = db.relationship('Mitra', lazy='joined')
    layanan = db.relationship('Layanan', lazy='joined')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'mitra_id': self.mitra_id,
            'layanan_id': self.layanan_id,
            'nominal': _uang(self.nominal),
            'status': self.status,
            'payment_method': self.payment_method,
            'order_date': _iso(self.order_date),
            'completion_date': _iso(self.completion_date),
            'rating': self.rating,
            'review': self.review,
            'user': {'nama': self.user.nama, 'email': self.user.email} if self.user else None,
            'mitra': {'nama_toko': self.mitra.nama_toko} if self.mitra else None,
            'layanan': {'nama_layanan': self.layanan.nama_layanan} if self.layanan else None,
            'aksi': aksi_tersedia(TRANSISI_TAGIHAN, self.status)
        }


class TopUp(db.Model):
    __tablename__ = 'topup'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    nominal = db.Column(db.Numeric(15, 2), nullable=False)
    payment_method = db.Column(db.String(50), nullable=False)
    # (pending, approved, rejected)
    status = db.Column(db.String(20), nullable=False, default=TOPUP_PENDING, index=True)
    transaction_code = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = db.relationship('User', lazy='joined')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'nominal': _uang(self.nominal),
            'payment_method': self.payment_method,
            'status': self.status,
            'transaction_code': self.transaction_code,
            'created_at': _iso(self.created_at),
            'user': {'nama': self.user.nama, 'email': self.user.email} if self.user else None,
            'aksi': aksi_tersedia(TRANSISI_TOPUP, self.status)
        }


class Chat(db.Model):
    __tablename__ = 'chat'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    # sender_id bisa ID user/mitra atau literal ID admin, jadi BUKAN foreign key
    sender_id = db.Column(db.String(36), nullable=False, index=True)
    sender_type = db.Column(db.String(10), nullable=False) # (user, mitra, admin)
    receiver_id = db.Column(db.String(36), nullable=False, index=True)
    receiver_type = db.Column(db.String(10), nullable=False)
    message = db.Column(db.Text, nullable=False)
    read_by_sender = db.Column(db.Boolean, nullable=False, default=True)
    read_by_receiver = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'sender_id': self.sender_id,
            'sender_type': self.sender_type,
            'receiver_id': self.receiver_id,
            'receiver_type': self.receiver_type,
            'message': self.message,
            'read_by_sender': self.read_by_sender,
            'read_by_receiver': self.read_by_receiver,
            'created_at': _iso(self.created_at)
        }


class AdminCredential(db.Model):
    # Read-only dari sisi dashboard
    __tablename__ = 'admin_credentials'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(150), nullable=False, unique=True)
    role = db.Column(db.String(30), nullable=False, default='admin')
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'role': self.role,
            'created_at': _iso(self.created_at)
        }


class AdminSession(db.Model):
    # Satu baris per login; token JWT membawa id baris ini
    __tablename__ = 'admin_session'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
    revoked_at = db.Column(db.DateTime, nullable=True)

    @property
    def is_active(self):
        return self.revoked_at is None and self.expires_at > utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'role': 'admin',
            'created_at': _iso(self.created_at),
            'expires_at': _iso(self.expires_at)
        }
