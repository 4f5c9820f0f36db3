"""Tests for the authorization policy, the access guard and the admin login flow."""

from unittest.mock import MagicMock

import pytest

from backend.errors import (
    AuthError, AuthorizationError, BackendError, PermissionDeniedError
)
from utils.security import (
    AccessGuard, RolePolicy, sign_in_admin, login_error_message,
    PERMISSION_DENIED_HINT, INVALID_CREDENTIALS_MESSAGE, NOT_ADMIN_MESSAGE
)


def test_policy_denies_without_identity(backend):
    decision = RolePolicy(backend).check(None)
    assert decision.allowed is False


def test_policy_requires_admin_row(backend, make_account):
    member = make_account('member@example.com', 'secret123', admin=False)
    admin = make_account()

    policy = RolePolicy(backend)
    assert policy.check(member.uid).allowed is False
    assert policy.check(admin.uid).allowed is True


def test_policy_permission_denied_hint():
    client = MagicMock()
    client.documents.query.side_effect = PermissionDeniedError('Missing or insufficient permissions.')

    decision = RolePolicy(client).check('user-1')
    assert decision.allowed is False
    assert decision.reason == PERMISSION_DENIED_HINT
    assert decision.error.code == 'permission-denied'


def test_policy_query_failure_denies():
    client = MagicMock()
    client.documents.query.side_effect = BackendError('unavailable', 'unavailable')

    decision = RolePolicy(client).check('user-1')
    assert decision.allowed is False
    assert decision.reason == 'unavailable'
    assert decision.error.code == 'unavailable'


def test_guard_states(backend, make_account):
    member = make_account('member@example.com', 'secret123', admin=False)
    admin = make_account()
    guard = AccessGuard(RolePolicy(backend))

    assert guard.state == AccessGuard.LOADING
    assert guard.on_identity_changed(None) == AccessGuard.UNAUTHORIZED
    assert guard.on_identity_changed(member.uid) == AccessGuard.UNAUTHORIZED
    assert guard.on_identity_changed(admin) == AccessGuard.AUTHORIZED
    assert guard.is_authorized


def test_guard_follows_auth_service(backend, make_account):
    admin = make_account()
    guard = AccessGuard(RolePolicy(backend))
    unsubscribe = guard.bind(backend.auth)

    backend.auth.sign_in(admin.email, 'secret123')
    assert guard.state == AccessGuard.AUTHORIZED

    backend.auth.sign_out()
    assert guard.state == AccessGuard.UNAUTHORIZED

    unsubscribe()
    backend.auth.sign_in(admin.email, 'secret123')
    assert guard.state == AccessGuard.UNAUTHORIZED


def test_sign_in_admin_success(backend, make_account):
    admin = make_account()
    user = sign_in_admin(backend, RolePolicy(backend), 'Admin@Example.com ', 'secret123')
    assert user.uid == admin.uid
    assert backend.current_user_id() == admin.uid


def test_sign_in_non_admin_signs_back_out(backend, make_account):
    make_account('member@example.com', 'secret123', admin=False)
    events = []
    backend.auth.subscribe(events.append)

    with pytest.raises(AuthorizationError) as exc:
        sign_in_admin(backend, RolePolicy(backend), 'member@example.com', 'secret123')

    assert str(exc.value) == NOT_ADMIN_MESSAGE
    assert backend.current_user_id() is None
    assert events[-1] is None
    assert login_error_message(exc.value) == NOT_ADMIN_MESSAGE


def test_sign_in_bad_password(backend, make_account):
    make_account()
    with pytest.raises(AuthError) as exc:
        sign_in_admin(backend, RolePolicy(backend), 'admin@example.com', 'wrong-password')
    assert exc.value.code == 'auth/wrong-password'
    assert backend.current_user_id() is None


@pytest.mark.parametrize('code', ['auth/wrong-password', 'auth/user-not-found', 'auth/invalid-credential'])
def test_bad_credentials_message(code):
    assert login_error_message(AuthError('raw message', code)) == INVALID_CREDENTIALS_MESSAGE


def test_other_errors_shown_verbatim():
    assert login_error_message(PermissionDeniedError('nope')) == PERMISSION_DENIED_HINT
    assert login_error_message(AuthError('Too many attempts', 'auth/too-many-requests')) == 'Too many attempts'


def test_sign_in_role_lookup_failure_passes_through(backend, make_account, monkeypatch):
    make_account()

    def unavailable(collection, filters=None):
        raise BackendError('backend unavailable', 'unavailable')

    monkeypatch.setattr(backend.documents, 'query', unavailable)

    with pytest.raises(BackendError) as exc:
        sign_in_admin(backend, RolePolicy(backend), 'admin@example.com', 'secret123')

    assert not isinstance(exc.value, AuthorizationError)
    assert exc.value.code == 'unavailable'
    assert login_error_message(exc.value) == 'backend unavailable'
    assert backend.current_user_id() is None


def test_sign_in_permission_denied_shows_hint(backend, make_account, monkeypatch):
    make_account()

    def denied(collection, filters=None):
        raise PermissionDeniedError('Missing or insufficient permissions.')

    monkeypatch.setattr(backend.documents, 'query', denied)

    with pytest.raises(PermissionDeniedError) as exc:
        sign_in_admin(backend, RolePolicy(backend), 'admin@example.com', 'secret123')

    assert login_error_message(exc.value) == PERMISSION_DENIED_HINT
    assert backend.current_user_id() is None
