# smartcare_admin/resources/chat.py
"""
Live chat admin. Ini bukan kanal real-time: pesan baru dari user/mitra baru
terlihat setelah room dibuka ulang.
"""
import logging

from flask import current_app
from flask_restx import Namespace, fields, abort
from sqlalchemy import and_, case, func, or_, update
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal
from ..jwt_utils import AdminResource
from ..models import db, Chat, User, Mitra

log = logging.getLogger(__name__)

chat_ns = Namespace('chat', description='Percakapan admin dengan user dan mitra')

ADMIN_TYPE = 'admin'

# tipe lawan bicara -> (model, kolom nama)
LAWAN = {
    'user': (User, 'nama'),
    'mitra': (Mitra, 'nama_toko'),
}

pesan_input = chat_ns.model('PesanInput', {
    'message': fields.String(required=True, description='Isi pesan')
})


def _rooms_per_tipe(tipe):
    model, kolom_nama = LAWAN[tipe]
    ringkasan = (
        db.session.query(
            Chat.sender_id,
            func.max(Chat.created_at).label('terakhir'),
            func.sum(case((Chat.read_by_receiver.is_(False), 1), else_=0)).label('belum_dibaca')
        )
        .filter(Chat.receiver_type == ADMIN_TYPE, Chat.sender_type == tipe)
        .group_by(Chat.sender_id)
        .order_by(func.max(Chat.created_at).desc())
        .all()
    )
    if not ringkasan:
        return []

    profil = {p.id: p for p in model.query.filter(model.id.in_([r.sender_id for r in ringkasan])).all()}
    rooms = []
    for r in ringkasan:
        pengirim = profil.get(r.sender_id)
        # Pengirim yang sudah tidak ada di tabel user/mitra dilewati
        if not pengirim:
            continue
        terakhir = (
            Chat.query.filter(_filter_percakapan(r.sender_id, tipe))
            .order_by(Chat.created_at.desc())
            .first()
        )
        rooms.append({
            'id': r.sender_id,
            'type': tipe,
            'name': getattr(pengirim, kolom_nama),
            'email': pengirim.email,
            'last_message': terakhir.message if terakhir else None,
            'unread_count': int(r.belum_dibaca or 0)
        })
    return rooms


def _filter_percakapan(lawan_id, tipe):
    return or_(
        and_(Chat.sender_id == lawan_id, Chat.sender_type == tipe, Chat.receiver_type == ADMIN_TYPE),
        and_(Chat.receiver_id == lawan_id, Chat.receiver_type == tipe, Chat.sender_type == ADMIN_TYPE)
    )


def _tipe_valid(tipe):
    if tipe not in LAWAN:
        abort(400, "Tipe percakapan harus 'user' atau 'mitra'.")


@chat_ns.route('/rooms')
class ChatRoomList(AdminResource):
    def get(self):
        """(R)EAD: Room chat: user dulu, lalu mitra, masing-masing terbaru dulu"""
        try:
            rooms = _rooms_per_tipe('user') + _rooms_per_tipe('mitra')
        except SQLAlchemyError as e:
            gagal('Gagal memuat ruang chat', e)
        return rooms


@chat_ns.route('/rooms/<string:tipe>/<string:lawan_id>/pesan')
@chat_ns.param('tipe', 'user atau mitra')
@chat_ns.param('lawan_id', 'ID user/mitra')
class ChatPesan(AdminResource):
    def get(self, tipe, lawan_id):
        """(R)EAD: Semua pesan dalam satu room (terlama dulu), lalu tandai sudah dibaca admin"""
        _tipe_valid(tipe)
        try:
            pesan = (
                Chat.query.filter(_filter_percakapan(lawan_id, tipe))
                .order_by(Chat.created_at.asc())
                .all()
            )
            hasil = [p.to_dict() for p in pesan]
            db.session.execute(
                update(Chat)
                .where(Chat.sender_id == lawan_id, Chat.sender_type == tipe,
                       Chat.receiver_type == ADMIN_TYPE, Chat.read_by_receiver.is_(False))
                .values(read_by_receiver=True)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as e:
            gagal('Gagal memuat pesan', e)
        return hasil

    @chat_ns.expect(pesan_input)
    def post(self, tipe, lawan_id):
        """(C)REATE: Kirim pesan dari admin"""
        _tipe_valid(tipe)
        data = chat_ns.payload or {}
        isi = (data.get('message') or '').strip()
        if not isi:
            abort(400, 'Pesan tidak boleh kosong.')

        admin_id = current_app.config['ADMIN_CHAT_ID']
        pesan = Chat(
            sender_id=admin_id,
            sender_type=ADMIN_TYPE,
            receiver_id=lawan_id,
            receiver_type=tipe,
            message=isi,
            read_by_sender=True,
            read_by_receiver=False
        )
        try:
            db.session.add(pesan)
            db.session.commit()
        except SQLAlchemyError as e:
            gagal('Gagal mengirim pesan', e)

        log.info('Pesan admin ke %s %s', tipe, lawan_id)
        return pesan.to_dict(), 201
