"""Tests for the generic document access layer and the SQL document store."""

import pytest

from backend.errors import DocumentNotFoundError, NotAuthenticatedError
from utils.data import (
    create_document, update_document, delete_document,
    get_document, get_documents, timestamp_now
)


def test_timestamps_strictly_increase():
    stamps = [timestamp_now() for _ in range(500)]
    assert all(a < b for a, b in zip(stamps, stamps[1:]))
    assert stamps[0].tzinfo is not None


def test_create_requires_identity(backend):
    with pytest.raises(NotAuthenticatedError) as exc:
        create_document(backend, 'projects', {'title': 'Alpha'})
    assert exc.value.code == 'unauthenticated'
    assert str(exc.value) == 'User not authenticated'


def test_create_stamps_owner_and_timestamps(backend, make_account):
    user = make_account()
    backend.auth.sign_in(user.email, 'secret123')

    doc_id = create_document(backend, 'projects', {'title': 'Alpha', 'userId': 'someone-else'})
    doc = get_document(backend, 'projects', doc_id)

    assert doc['id'] == doc_id
    assert doc['title'] == 'Alpha'
    assert doc['userId'] == user.uid
    assert doc['createdAt'] == doc['updatedAt']
    assert doc['createdAt'].tzinfo is not None


def test_explicit_owner_needs_no_identity(backend):
    doc_id = create_document(backend, 'contactMessages', {'name': 'Visitor'}, owner_id='owner-1')
    assert get_document(backend, 'contactMessages', doc_id)['userId'] == 'owner-1'


def test_fixed_document_id(backend):
    create_document(backend, 'profiles', {'full_name': 'Ada'}, document_id='current', owner_id='owner-1')
    assert get_document(backend, 'profiles', 'current')['full_name'] == 'Ada'


def test_update_advances_updated_at_only(backend):
    doc_id = create_document(backend, 'projects', {'title': 'Alpha'}, owner_id='owner-1')
    before = get_document(backend, 'projects', doc_id)

    update_document(backend, 'projects', doc_id, {'title': 'Beta', 'createdAt': None, 'userId': 'x'})
    after = get_document(backend, 'projects', doc_id)

    assert after['title'] == 'Beta'
    assert after['createdAt'] == before['createdAt']
    assert after['userId'] == 'owner-1'
    assert after['updatedAt'] > before['updatedAt']


def test_update_missing_document_raises(backend):
    with pytest.raises(DocumentNotFoundError):
        update_document(backend, 'projects', 'does-not-exist', {'title': 'X'})


def test_delete_missing_document_is_noop(backend):
    delete_document(backend, 'projects', 'does-not-exist')


def test_delete_removes_document(backend):
    doc_id = create_document(backend, 'projects', {'title': 'Alpha'}, owner_id='owner-1')
    delete_document(backend, 'projects', doc_id)
    assert get_document(backend, 'projects', doc_id) is None


def test_get_missing_document_returns_none(backend):
    assert get_document(backend, 'projects', 'nope') is None


def test_owner_scoping(backend, make_account):
    first = make_account('first@example.com', 'secret123', admin=False)
    second = make_account('second@example.com', 'secret123', admin=False)

    backend.auth.sign_in(first.email, 'secret123')
    create_document(backend, 'skills', {'name': 'Python'})
    backend.auth.sign_in(second.email, 'secret123')
    create_document(backend, 'skills', {'name': 'Go'})

    mine = get_documents(backend, 'skills', require_owner=True)
    everyone = get_documents(backend, 'skills')

    assert [d['name'] for d in mine] == ['Go']
    assert sorted(d['name'] for d in everyone) == ['Go', 'Python']


def test_owner_scoped_query_requires_identity(backend):
    with pytest.raises(NotAuthenticatedError):
        get_documents(backend, 'skills', require_owner=True)


def test_equality_filters(backend):
    create_document(backend, 'experiences', {'title': 'Lead', 'type': 'leadership'}, owner_id='o')
    create_document(backend, 'experiences', {'title': 'Dev', 'type': 'work'}, owner_id='o')
    create_document(backend, 'experiences', {'title': 'Old', 'type': 'work', 'is_current': False}, owner_id='o')

    assert [d['title'] for d in get_documents(backend, 'experiences', {'type': 'leadership'})] == ['Lead']
    assert [d['title'] for d in get_documents(backend, 'experiences', {'is_current': False})] == ['Old']
