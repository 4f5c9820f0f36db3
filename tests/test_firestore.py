"""Tests for the Firestore document store against a mocked client."""

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from backend.errors import (
    BackendError, ConfigurationError, DocumentNotFoundError, PermissionDeniedError
)
from backend.firestore import FirestoreDocumentStore


@pytest.fixture
def firestore_client():
    return MagicMock()


@pytest.fixture
def store(firestore_client):
    store = FirestoreDocumentStore(project_id='demo', client=firestore_client)
    store.initialize()
    return store


def _snapshot(doc_id, data, exists=True):
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.to_dict.return_value = dict(data)
    return snapshot


def test_add_generated_id(store, firestore_client):
    collection = firestore_client.collection.return_value
    collection.add.return_value = (None, MagicMock(id='generated'))

    assert store.add('projects', {'id': 'ignored', 'title': 'Alpha'}) == 'generated'
    firestore_client.collection.assert_called_with('projects')
    collection.add.assert_called_once_with({'title': 'Alpha'})


def test_add_fixed_id(store, firestore_client):
    document = firestore_client.collection.return_value.document.return_value

    assert store.add('profiles', {'full_name': 'Ada'}, document_id='current') == 'current'
    firestore_client.collection.return_value.document.assert_called_with('current')
    document.set.assert_called_once_with({'full_name': 'Ada'})


def test_get(store, firestore_client):
    document = firestore_client.collection.return_value.document.return_value
    document.get.return_value = _snapshot('p1', {'title': 'Alpha'})
    assert store.get('projects', 'p1') == {'title': 'Alpha', 'id': 'p1'}

    document.get.return_value = _snapshot('p2', {}, exists=False)
    assert store.get('projects', 'p2') is None


def test_query_uses_server_side_filters(store, firestore_client):
    collection = firestore_client.collection.return_value
    filtered = collection.where.return_value.where.return_value
    filtered.stream.return_value = [_snapshot('e1', {'title': 'Lead', 'type': 'leadership'})]

    results = store.query('experiences', {'userId': 'u1', 'type': 'leadership'})

    assert results == [{'title': 'Lead', 'type': 'leadership', 'id': 'e1'}]
    first_filter = collection.where.call_args.kwargs['filter']
    second_filter = collection.where.return_value.where.call_args.kwargs['filter']
    assert (first_filter.field_path, first_filter.op_string, first_filter.value) == ('userId', '==', 'u1')
    assert (second_filter.field_path, second_filter.value) == ('type', 'leadership')


def test_query_without_filters(store, firestore_client):
    collection = firestore_client.collection.return_value
    collection.stream.return_value = []
    assert store.query('skills') == []
    collection.where.assert_not_called()


def test_permission_denied_is_translated(store, firestore_client):
    firestore_client.collection.return_value.where.return_value.stream.side_effect = \
        google_exceptions.PermissionDenied('Missing or insufficient permissions.')

    with pytest.raises(PermissionDeniedError) as exc:
        store.query('userRoles', {'userId': 'u1'})
    assert exc.value.code == 'permission-denied'


def test_update_missing_document(store, firestore_client):
    document = firestore_client.collection.return_value.document.return_value
    document.update.side_effect = google_exceptions.NotFound('No document to update')

    with pytest.raises(DocumentNotFoundError):
        store.update('projects', 'missing', {'title': 'X'})


def test_delete(store, firestore_client):
    store.delete('projects', 'p1')
    firestore_client.collection.return_value.document.return_value.delete.assert_called_once_with()


def test_other_api_errors(store, firestore_client):
    firestore_client.collection.return_value.document.return_value.get.side_effect = \
        google_exceptions.ServiceUnavailable('try later')

    with pytest.raises(BackendError) as exc:
        store.get('projects', 'p1')
    assert exc.value.code == 'internal'


def test_uninitialized_store():
    store = FirestoreDocumentStore(project_id='demo')
    with pytest.raises(BackendError):
        store.get('projects', 'p1')


def test_missing_credentials_file(tmp_path):
    store = FirestoreDocumentStore(project_id='demo', credentials_path=str(tmp_path / 'missing.json'))
    with pytest.raises(ConfigurationError):
        store.initialize()


def test_close_releases_client(store, firestore_client):
    store.close()
    firestore_client.close.assert_called_once_with()
    assert store.db is None
