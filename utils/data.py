"""
Data Access Module - Generic document CRUD against named collections
Stamps ownership and timestamps; every call goes straight to the backend
"""

import threading
from datetime import datetime, timedelta, timezone

from backend.documents import OWNER_FIELD, CREATED_FIELD, UPDATED_FIELD, META_FIELDS
from backend.errors import NotAuthenticatedError

_clock_lock = threading.Lock()
_last_stamp = None


def timestamp_now():
    """Current UTC time, strictly later than any stamp this process handed out before"""
    global _last_stamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_stamp is not None and now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
        return now


def get_current_user_id(client):
    return client.current_user_id()


def _require_user_id(client):
    user_id = get_current_user_id(client)
    if not user_id:
        raise NotAuthenticatedError()
    return user_id


def create_document(client, collection_name, data, document_id=None, owner_id=None):
    """
    Create a document stamped with its owner and both timestamps

    Args:
        client (BackendClient): initialized backend client
        collection_name (str): target collection
        data (dict): document fields; metadata keys are ignored
        document_id (str, optional): fixed id instead of a generated one
        owner_id (str, optional): owner to stamp instead of the caller

    Returns:
        str: id of the new document
    """
    owner = owner_id or _require_user_id(client)
    now = timestamp_now()
    doc_data = {k: v for k, v in data.items() if k not in META_FIELDS}
    doc_data.update({
        OWNER_FIELD: owner,
        CREATED_FIELD: now,
        UPDATED_FIELD: now,
    })
    return client.documents.add(collection_name, doc_data, document_id=document_id)


def update_document(client, collection_name, document_id, data):
    """Apply a partial update; only updatedAt is re-stamped"""
    doc_data = {k: v for k, v in data.items() if k not in META_FIELDS}
    doc_data[UPDATED_FIELD] = timestamp_now()
    client.documents.update(collection_name, document_id, doc_data)


def delete_document(client, collection_name, document_id):
    """Delete a document; deleting a missing id is a no-op"""
    client.documents.delete(collection_name, document_id)


def get_document(client, collection_name, document_id):
    return client.documents.get(collection_name, document_id)


def get_documents(client, collection_name, filters=None, require_owner=False):
    """
    List documents matching equality filters

    When require_owner is set the query is restricted to the caller's
    documents. Ordering is left to the caller so no composite index is
    needed on the owner field.
    """
    filters = dict(filters or {})
    if require_owner:
        filters[OWNER_FIELD] = _require_user_id(client)
    return client.documents.query(collection_name, filters)


__all__ = [
    'timestamp_now',
    'get_current_user_id',
    'create_document',
    'update_document',
    'delete_document',
    'get_document',
    'get_documents',
]
