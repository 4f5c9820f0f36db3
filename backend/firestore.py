"""
Firestore Store - Cloud Firestore implementation of the document store
"""

import logging
import os
from pathlib import Path

from firebase_admin import credentials
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore as gcloud_firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .documents import DocumentStore
from .errors import BackendError, ConfigurationError, DocumentNotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


def _translate(error, action):
    """Map Google API errors onto the backend error hierarchy"""
    if isinstance(error, google_exceptions.PermissionDenied):
        return PermissionDeniedError(f'Permission denied during {action}: {error.message}')
    if isinstance(error, google_exceptions.NotFound):
        return DocumentNotFoundError(f'Not found during {action}: {error.message}')
    return BackendError(f'Firestore error during {action}: {error}', 'internal')


class FirestoreDocumentStore(DocumentStore):
    """
    Document store backed by a (named) Cloud Firestore database.

    Credentials come from ``credentials_path`` or GOOGLE_APPLICATION_CREDENTIALS,
    else application default credentials. Nothing connects until ``initialize``.
    A pre-built ``client`` skips the connection step.
    """

    name = 'firestore'

    def __init__(self, project_id=None, database_name='(default)', credentials_path=None, client=None):
        self.project_id = project_id
        self.database_name = database_name
        self.credentials_path = credentials_path or os.getenv('GOOGLE_APPLICATION_CREDENTIALS')
        self.db = client

    def initialize(self):
        if self.db is not None:
            return

        google_credentials = None
        project_id = self.project_id
        if self.credentials_path:
            if not Path(self.credentials_path).exists():
                raise ConfigurationError(f'Credentials file not found: {self.credentials_path}')
            cert = credentials.Certificate(self.credentials_path)
            google_credentials = cert.get_credential()
            project_id = project_id or cert.project_id

        if not project_id:
            raise ConfigurationError(
                'Firestore project not configured. Set FIREBASE_PROJECT_ID or '
                'GOOGLE_APPLICATION_CREDENTIALS.'
            )

        try:
            self.db = gcloud_firestore.Client(
                project=project_id,
                database=self.database_name,
                credentials=google_credentials,
            )
        except Exception as e:
            raise ConfigurationError(f'Failed to initialize Firestore: {str(e)}') from e

        logger.info(f'Connected to Firestore database: {self.database_name} in project {project_id}')

    def close(self):
        if self.db is not None:
            self.db.close()
            self.db = None

    def _collection(self, collection):
        if self.db is None:
            raise BackendError('Firestore not initialized', 'unavailable')
        return self.db.collection(collection)

    def add(self, collection, data, document_id=None):
        payload = {k: v for k, v in data.items() if k != 'id'}
        try:
            if document_id:
                self._collection(collection).document(document_id).set(payload)
                return document_id
            _, doc_ref = self._collection(collection).add(payload)
            return doc_ref.id
        except google_exceptions.GoogleAPICallError as e:
            raise _translate(e, f'add to {collection}') from e

    def update(self, collection, document_id, data):
        payload = {k: v for k, v in data.items() if k != 'id'}
        try:
            self._collection(collection).document(document_id).update(payload)
        except google_exceptions.GoogleAPICallError as e:
            raise _translate(e, f'update of {collection}/{document_id}') from e

    def delete(self, collection, document_id):
        # A missing document is not an error
        try:
            self._collection(collection).document(document_id).delete()
        except google_exceptions.GoogleAPICallError as e:
            raise _translate(e, f'delete of {collection}/{document_id}') from e

    def get(self, collection, document_id):
        try:
            doc = self._collection(collection).document(document_id).get()
        except google_exceptions.GoogleAPICallError as e:
            raise _translate(e, f'read of {collection}/{document_id}') from e
        if not doc.exists:
            return None
        result = doc.to_dict()
        result['id'] = doc.id
        return result

    def query(self, collection, filters=None):
        query = self._collection(collection)
        for field, value in (filters or {}).items():
            query = query.where(filter=FieldFilter(field, '==', value))

        try:
            results = []
            for doc in query.stream():
                item = doc.to_dict()
                item['id'] = doc.id
                results.append(item)
            return results
        except google_exceptions.GoogleAPICallError as e:
            raise _translate(e, f'query of {collection}') from e


__all__ = ['FirestoreDocumentStore']
