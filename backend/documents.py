"""
Document Stores - Backend-neutral document CRUD and the SQL implementation
"""

import logging
import uuid
from datetime import date, datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from .errors import BackendError, DocumentNotFoundError

logger = logging.getLogger(__name__)

OWNER_FIELD = 'userId'
CREATED_FIELD = 'createdAt'
UPDATED_FIELD = 'updatedAt'
META_FIELDS = ('id', OWNER_FIELD, CREATED_FIELD, UPDATED_FIELD)


class DocumentStore:
    """
    Interface every document backend implements.

    Documents are plain dicts. Ids are opaque strings chosen by the backend
    unless the caller supplies one. ``query`` takes equality filters only
    and returns documents with their ``id`` merged in.
    """

    name = 'abstract'

    def initialize(self):
        """Open connections / create schema. Called once by BackendClient."""

    def close(self):
        """Release connections. Called once by BackendClient."""

    def add(self, collection, data, document_id=None):
        raise NotImplementedError

    def update(self, collection, document_id, data):
        raise NotImplementedError

    def delete(self, collection, document_id):
        raise NotImplementedError

    def get(self, collection, document_id):
        raise NotImplementedError

    def query(self, collection, filters=None):
        raise NotImplementedError


def _as_utc(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_json(value):
    """Make a value storable in a JSON column"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


class SqlDocumentStore(DocumentStore):
    """
    Stores every collection in a single ``documents`` table through
    Flask-SQLAlchemy. Owner and timestamps live in real columns, the rest
    of the document in a JSON column.
    """

    name = 'sql'

    def __init__(self, db):
        self.db = db

    def initialize(self):
        # Table definitions must be registered before create_all
        from models import Account, Document  # noqa: F401
        self.db.create_all()
        logger.info('SQL document store ready')

    def close(self):
        # Sessions are scoped to the app context and removed by Flask-SQLAlchemy
        logger.info('SQL document store closed')

    def _model(self):
        from models import Document
        return Document

    def _row_to_dict(self, row):
        result = dict(row.data or {})
        result['id'] = row.id
        result[OWNER_FIELD] = row.owner_id
        result[CREATED_FIELD] = _as_utc(row.created_at)
        result[UPDATED_FIELD] = _as_utc(row.updated_at)
        return result

    def _commit(self, action):
        try:
            self.db.session.commit()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            logger.error(f'Error during {action}: {e}')
            raise BackendError(f'Database error during {action}', 'internal') from e

    def add(self, collection, data, document_id=None):
        Document = self._model()
        body = {k: _to_json(v) for k, v in data.items() if k not in META_FIELDS}
        row = Document(
            collection=collection,
            id=document_id or str(uuid.uuid4()),
            owner_id=data.get(OWNER_FIELD),
            data=body,
            created_at=data.get(CREATED_FIELD),
            updated_at=data.get(UPDATED_FIELD),
        )
        self.db.session.add(row)
        self._commit(f'add to {collection}')
        return row.id

    def update(self, collection, document_id, data):
        row = self.db.session.get(self._model(), (collection, document_id))
        if row is None:
            raise DocumentNotFoundError(f'No document to update: {collection}/{document_id}')

        body = dict(row.data or {})
        for key, value in data.items():
            if key == UPDATED_FIELD:
                row.updated_at = value
            elif key not in META_FIELDS:
                body[key] = _to_json(value)
        # Reassign so the JSON column is flagged dirty
        row.data = body
        self._commit(f'update of {collection}/{document_id}')

    def delete(self, collection, document_id):
        Document = self._model()
        Document.query.filter_by(collection=collection, id=document_id).delete()
        self._commit(f'delete of {collection}/{document_id}')

    def get(self, collection, document_id):
        row = self.db.session.get(self._model(), (collection, document_id))
        if row is None:
            return None
        return self._row_to_dict(row)

    def query(self, collection, filters=None):
        Document = self._model()
        q = Document.query.filter(Document.collection == collection)
        for field, value in (filters or {}).items():
            if field == OWNER_FIELD:
                q = q.filter(Document.owner_id == value)
            else:
                q = q.filter(self._json_equals(Document.data[field], value))
        rows = q.order_by(Document.created_at.asc()).all()
        return [self._row_to_dict(row) for row in rows]

    @staticmethod
    def _json_equals(element, value):
        if isinstance(value, bool):
            return element.as_boolean() == value
        if isinstance(value, int):
            return element.as_integer() == value
        if isinstance(value, float):
            return element.as_float() == value
        return element.as_string() == str(value)


__all__ = [
    'DocumentStore',
    'SqlDocumentStore',
    'OWNER_FIELD',
    'CREATED_FIELD',
    'UPDATED_FIELD',
    'META_FIELDS',
]
