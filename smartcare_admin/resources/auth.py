# smartcare_admin/resources/auth.py

import logging

from flask import current_app, g
from flask_restx import Namespace, Resource, fields
from sqlalchemy.exc import SQLAlchemyError

from ..helpers import gagal
from ..jwt_utils import AdminResource, create_session_token
from ..models import db, utcnow

log = logging.getLogger(__name__)

auth_ns = Namespace('auth', description='Login dengan kode akses, logout, dan info sesi')

login_input = auth_ns.model('LoginInput', {
    'kode_akses': fields.String(required=True, description='Kode akses admin')
})


@auth_ns.route('/login')
class AdminLogin(Resource):
    @auth_ns.expect(login_input)
    def post(self):
        """Login admin untuk mendapatkan token sesi"""
        data = auth_ns.payload or {}

        # Perbandingan string persis, tanpa hitungan percobaan
        if data.get('kode_akses') != current_app.config['ADMIN_ACCESS_CODE']:
            log.info('Login admin gagal: kode akses salah')
            return {
                'message': 'Kode Akses Salah!',
                'description': 'Silakan masukkan kode akses yang benar'
            }, 401

        try:
            token, session = create_session_token()
        except SQLAlchemyError as e:
            gagal('Gagal membuat sesi login', e)

        log.info('Login admin berhasil, sesi %s', session.id)
        return {
            'message': 'Login Berhasil',
            'description': 'Selamat datang di SmartCare Admin',
            'token': token,
            'session': session.to_dict()
        }, 200


@auth_ns.route('/logout')
class AdminLogout(AdminResource):
    def post(self):
        """Logout: sesi dicabut, token tidak bisa dipakai lagi"""
        session = g.admin_session
        try:
            session.revoked_at = utcnow()
            db.session.commit()
        except SQLAlchemyError as e:
            gagal('Gagal logout', e)
        return {'message': 'Logout Berhasil', 'description': 'Anda telah keluar dari sistem'}, 200


@auth_ns.route('/me')
class AdminMe(AdminResource):
    def get(self):
        """(R)EAD: Info sesi admin yang sedang login"""
        return g.admin_session.to_dict()
