"""
Security Module - Authorization policy, admin access guard and the admin login flow
"""

import logging
from dataclasses import dataclass
from typing import Optional

from backend.errors import AuthorizationError, BackendError, PermissionDeniedError
from .data import get_documents

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'
ROLES_COLLECTION = 'userRoles'

PERMISSION_DENIED_HINT = (
    'Database permission denied. Please configure the security rules '
    'so signed-in users can read the userRoles collection.'
)
INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'
NOT_ADMIN_MESSAGE = 'Unauthorized: Not an admin user'

# Auth codes that all mean "these credentials do not work"
BAD_CREDENTIAL_CODES = {
    'auth/wrong-password',
    'auth/user-not-found',
    'auth/invalid-credential',
}


@dataclass(frozen=True)
class AuthorizationDecision:
    allowed: bool
    reason: str = ''
    # Lookup failure behind a denial, re-raised by the login flow
    error: Optional[BackendError] = None


class AuthorizationPolicy:
    """Decides whether a signed-in user may enter the admin area"""

    def check(self, user_id):
        raise NotImplementedError


class RolePolicy(AuthorizationPolicy):
    """Allow users holding a matching row in the userRoles collection"""

    def __init__(self, client, role=ADMIN_ROLE):
        self.client = client
        self.role = role

    def check(self, user_id):
        if not user_id:
            return AuthorizationDecision(False, 'Not signed in')
        try:
            rows = get_documents(self.client, ROLES_COLLECTION, {'userId': user_id, 'role': self.role})
        except PermissionDeniedError as e:
            logger.error(f'Role lookup for {user_id} rejected by security rules: {e}')
            return AuthorizationDecision(False, PERMISSION_DENIED_HINT, PermissionDeniedError(PERMISSION_DENIED_HINT))
        except BackendError as e:
            logger.error(f'Role lookup for {user_id} failed: {e}')
            return AuthorizationDecision(False, str(e), e)

        if not rows:
            return AuthorizationDecision(False, f'No {self.role} role for this user')
        return AuthorizationDecision(True, f'{self.role} role found')


class AccessGuard:
    """
    Perimeter guard for the admin area.

    Starts in ``loading`` until the first identity notification, then sits
    in ``authorized`` or ``unauthorized`` depending on the policy decision.
    """

    LOADING = 'loading'
    AUTHORIZED = 'authorized'
    UNAUTHORIZED = 'unauthorized'

    def __init__(self, policy):
        self.policy = policy
        self.state = self.LOADING
        self.decision = None

    def on_identity_changed(self, identity):
        """identity: a user id, an object with .uid, or None"""
        user_id = getattr(identity, 'uid', identity)
        if not user_id:
            self.decision = AuthorizationDecision(False, 'Not signed in')
        else:
            self.decision = self.policy.check(user_id)
        self.state = self.AUTHORIZED if self.decision.allowed else self.UNAUTHORIZED
        return self.state

    def bind(self, auth):
        """Follow identity changes of an auth service; returns the unsubscribe callable"""
        return auth.subscribe(self.on_identity_changed)

    @property
    def is_authorized(self):
        return self.state == self.AUTHORIZED


def sign_in_admin(client, policy, email, password):
    """
    Authenticate and require the admin policy to pass

    A user who authenticates but fails the policy is signed straight back
    out, so no authenticated-but-unauthorized session survives.

    Returns:
        AuthUser: the signed-in admin

    Raises:
        AuthError: bad credentials or other auth failures
        AuthorizationError: credentials fine, policy denied
        BackendError: the role lookup itself failed
    """
    user = client.auth.sign_in(email, password)
    decision = policy.check(user.uid)
    if not decision.allowed:
        client.auth.sign_out()
        if decision.error is not None:
            raise decision.error
        raise AuthorizationError(NOT_ADMIN_MESSAGE)
    return user


def login_error_message(error):
    """User-facing text for a failed admin login"""
    code = getattr(error, 'code', None)
    if code == 'permission-denied':
        return PERMISSION_DENIED_HINT
    if code in BAD_CREDENTIAL_CODES:
        return INVALID_CREDENTIALS_MESSAGE
    return str(error)


__all__ = [
    'ADMIN_ROLE',
    'AuthorizationDecision',
    'AuthorizationPolicy',
    'RolePolicy',
    'AccessGuard',
    'sign_in_admin',
    'login_error_message',
    'PERMISSION_DENIED_HINT',
    'INVALID_CREDENTIALS_MESSAGE',
    'NOT_ADMIN_MESSAGE',
]
