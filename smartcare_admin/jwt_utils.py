# smartcare_admin/jwt_utils.py
import datetime
from functools import wraps

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError
from flask import current_app, request, g
from flask_restx import Resource, abort

from .models import db, utcnow, AdminSession


def create_session_token():
    """Membuat baris sesi admin baru dan token JWT yang menunjuk ke sesi itu."""
    expires_at = utcnow() + datetime.timedelta(hours=current_app.config['JWT_EXPIRES_HOURS'])
    session = AdminSession(expires_at=expires_at)
    db.session.add(session)
    db.session.commit()

    token = jwt.encode(
        {
            'sid': session.id,
            'role': 'admin',
            'exp': expires_at.replace(tzinfo=datetime.timezone.utc)
        },
        current_app.config['JWT_SECRET_KEY'],
        algorithm='HS256'
    )
    return token, session


def verify_jwt_token(token):
    """
    Verify JWT token and return payload (claims).
    Raises ExpiredSignatureError, InvalidTokenError on failure.
    """
    if token.startswith("Bearer "):
        token = token.split(" ", 1)[1]
    return jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=["HS256"])


def require_admin(f):
    """
    Decorator untuk Resource flask-restx: token wajib ada, valid, dan sesinya
    belum logout. Sesi yang aktif disimpan di g.admin_session.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization")
        if not auth:
            abort(401, 'Silakan login terlebih dahulu.')

        try:
            claims = verify_jwt_token(auth)
        except ExpiredSignatureError:
            abort(401, 'Sesi sudah kedaluwarsa, silakan login ulang.')
        except InvalidTokenError:
            abort(401, 'Token tidak valid.')

        sid = claims.get('sid')
        session = db.session.get(AdminSession, sid) if sid else None
        if not session or not session.is_active:
            abort(401, 'Sesi sudah berakhir, silakan login ulang.')

        g.admin_session = session
        return f(*args, **kwargs)

    return wrapper


class AdminResource(Resource):
    # Semua method (GET/POST/PUT/DELETE) butuh sesi admin
    method_decorators = [require_admin]
