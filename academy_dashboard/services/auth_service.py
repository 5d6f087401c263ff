from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

from academy_dashboard.config import settings
from academy_dashboard.core.case_converter import to_domain_keys
from academy_dashboard.core.response import raise_for_error
from academy_dashboard.models import Role
from academy_dashboard.query.client import NOT_FOUND_CODE, QueryClient


logger = logging.getLogger(__name__)


class AuthError(ValueError):
    """Raised for unknown users, bad credentials or a missing session."""


def _hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    iterations = 120000
    derived = hashlib.pbkdf2_hmac('sha256', (password or '').encode('utf-8'), salt.encode('utf-8'), iterations)
    return f'pbkdf2_sha256${iterations}${salt}${derived.hex()}'


def _verify_password(password: str, password_hash: str) -> bool:
    try:
        algo, iter_raw, salt, digest_hex = password_hash.split('$', 3)
        if algo != 'pbkdf2_sha256':
            return False
        iterations = int(iter_raw)
        derived = hashlib.pbkdf2_hmac('sha256', (password or '').encode('utf-8'), salt.encode('utf-8'), iterations).hex()
        return hmac.compare_digest(derived, digest_hex)
    except ValueError:
        return False


def _public_user(row: dict) -> dict:
    user = to_domain_keys(row)
    user.pop('password', None)
    return user


def _normalize_email(email: str) -> str:
    return (email or '').strip().lower()


class AuthService:
    """User lookups backing the session store.

    Login only checks that a user with the email exists unless
    ``verify_password`` is enabled; this is a stub, not a security control.
    """

    def __init__(self, client: QueryClient, *, verify_password: bool | None = None):
        self.client = client
        self.verify_password = settings.auth_verify_password if verify_password is None else verify_password

    def login(self, email: str, password: str) -> dict:
        result = self.client.table('users').select('*').eq('email', _normalize_email(email)).limit(1).execute()
        raise_for_error(result.error, table='users')
        if not result.data:
            logger.info('auth_login_rejected reason=unknown_email')
            raise AuthError('Invalid credentials')
        row = result.data[0]
        if self.verify_password and not _verify_password(password, row.get('password') or ''):
            logger.info('auth_login_rejected reason=bad_password user_id=%s', row['id'])
            raise AuthError('Invalid credentials')
        return {'data': {'user': _public_user(row), 'token': settings.session_token_marker}}

    def register(self, *, name: str, email: str, password: str, role: str = Role.TEACHER.value) -> dict:
        row = {
            'name': (name or '').strip(),
            'email': _normalize_email(email),
            'password': _hash_password(password),
            'role': role,
        }
        result = self.client.table('users').insert(row).single().execute()
        raise_for_error(result.error, table='users')
        logger.info('auth_registered user_id=%s role=%s', result.data['id'], role)
        return {'data': {'user': _public_user(result.data), 'token': settings.session_token_marker}}

    def me(self, user_id: str | None) -> dict:
        if not user_id:
            raise AuthError('Not authenticated')
        result = self.client.table('users').select('*').eq('id', user_id).single().execute()
        if result.error is not None and result.error.code == NOT_FOUND_CODE:
            raise AuthError('Not authenticated')
        raise_for_error(result.error, table='users')
        return {'data': _public_user(result.data)}

    def logout(self) -> dict:
        # No server-side session exists for the local token marker.
        return {'data': {'success': True}}
