"""
Auth Services - Email/password authentication with identity-change notifications

LocalAuthService keeps accounts in the SQL database (werkzeug password hashes).
FirebaseAuthService talks to Firebase Authentication's Identity Toolkit REST API.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import AuthError, BackendError, ConfigurationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str
    id_token: Optional[str] = None


class AuthService:
    """
    Base auth service.

    Listeners registered with ``subscribe`` are called with the new
    ``AuthUser`` (or None) after every sign-in and sign-out.

    ``current_user_id`` answers "who is calling": the web app installs an
    identity loader reading the Flask-Login session; without a loader the
    service falls back to whoever signed in last through it (scripts).
    """

    name = 'abstract'

    def __init__(self, identity_loader: Optional[Callable[[], Optional[str]]] = None):
        self.identity_loader = identity_loader
        self._listeners: List[Callable[[Optional[AuthUser]], None]] = []
        self._signed_in: Optional[AuthUser] = None

    def initialize(self):
        pass

    def close(self):
        self._listeners.clear()
        self._signed_in = None

    def subscribe(self, listener):
        """Register an identity-change listener; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, user):
        for listener in list(self._listeners):
            listener(user)

    def current_user_id(self):
        if self.identity_loader is not None:
            return self.identity_loader()
        return self._signed_in.uid if self._signed_in else None

    def sign_in(self, email, password):
        user = self._authenticate(email.strip().lower(), password)
        self._signed_in = user
        logger.info(f'Signed in {user.email} ({user.uid})')
        self._notify(user)
        return user

    def sign_up(self, email, password):
        return self._register(email.strip().lower(), password)

    def sign_out(self):
        self._signed_in = None
        self._notify(None)

    def _authenticate(self, email, password):
        raise NotImplementedError

    def _register(self, email, password):
        raise NotImplementedError


class LocalAuthService(AuthService):
    name = 'local'

    def __init__(self, db, identity_loader=None):
        super().__init__(identity_loader)
        self.db = db

    def _authenticate(self, email, password):
        from models import Account

        account = Account.query.filter_by(email=email).first()
        if not account or not account.is_active:
            raise AuthError('There is no user record corresponding to this identifier.', 'auth/user-not-found')
        if not check_password_hash(account.password_hash, password):
            raise AuthError('The password is invalid.', 'auth/wrong-password')
        return AuthUser(uid=account.id, email=account.email)

    def _register(self, email, password):
        from models import Account

        if len(password or '') < MIN_PASSWORD_LENGTH:
            raise AuthError(f'Password should be at least {MIN_PASSWORD_LENGTH} characters', 'auth/weak-password')
        if Account.query.filter_by(email=email).first():
            raise AuthError('The email address is already in use by another account.', 'auth/email-already-in-use')

        account = Account(email=email, password_hash=generate_password_hash(password))
        self.db.session.add(account)
        try:
            self.db.session.commit()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            raise BackendError(f'Could not create account: {e}', 'internal') from e
        logger.info(f'Created account {email} ({account.id})')
        return AuthUser(uid=account.id, email=account.email)


# Identity Toolkit error message -> Firebase client SDK style code
FIREBASE_ERROR_CODES = {
    'EMAIL_NOT_FOUND': 'auth/user-not-found',
    'INVALID_PASSWORD': 'auth/wrong-password',
    'INVALID_LOGIN_CREDENTIALS': 'auth/invalid-credential',
    'USER_DISABLED': 'auth/user-disabled',
    'INVALID_EMAIL': 'auth/invalid-email',
    'EMAIL_EXISTS': 'auth/email-already-in-use',
    'WEAK_PASSWORD': 'auth/weak-password',
    'TOO_MANY_ATTEMPTS_TRY_LATER': 'auth/too-many-requests',
    'OPERATION_NOT_ALLOWED': 'auth/operation-not-allowed',
}


class FirebaseAuthService(AuthService):
    name = 'firebase'

    BASE_URL = 'https://identitytoolkit.googleapis.com/v1'
    TIMEOUT = 10

    def __init__(self, api_key, identity_loader=None, session=None):
        super().__init__(identity_loader)
        self.api_key = api_key
        self.session = session or requests.Session()

    def initialize(self):
        if not self.api_key:
            raise ConfigurationError('FIREBASE_API_KEY is not set')

    def close(self):
        super().close()
        self.session.close()

    def _call(self, endpoint, payload):
        url = f'{self.BASE_URL}/accounts:{endpoint}'
        try:
            response = self.session.post(url, params={'key': self.api_key}, json=payload, timeout=self.TIMEOUT)
        except requests.RequestException as e:
            raise AuthError(f'Network error contacting auth service: {e}', 'auth/network-request-failed') from e

        body = {}
        try:
            body = response.json()
        except ValueError:
            pass

        if not response.ok:
            raw = (body.get('error') or {}).get('message', '') or f'HTTP {response.status_code}'
            key, _, detail = raw.partition(' : ')
            code = FIREBASE_ERROR_CODES.get(key.strip(), 'auth/internal-error')
            raise AuthError(detail or raw, code)
        return body

    def _authenticate(self, email, password):
        body = self._call('signInWithPassword', {
            'email': email,
            'password': password,
            'returnSecureToken': True,
        })
        return AuthUser(uid=body['localId'], email=body.get('email', email), id_token=body.get('idToken'))

    def _register(self, email, password):
        body = self._call('signUp', {
            'email': email,
            'password': password,
            'returnSecureToken': True,
        })
        return AuthUser(uid=body['localId'], email=body.get('email', email), id_token=body.get('idToken'))


__all__ = [
    'AuthUser',
    'AuthService',
    'LocalAuthService',
    'FirebaseAuthService',
    'FIREBASE_ERROR_CODES',
]
