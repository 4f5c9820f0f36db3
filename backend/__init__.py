"""
Backend Package - Connections to the document database and the auth service

A BackendClient is built once by the app factory (or a script), initialized
explicitly, and handed to every service that needs it.
"""

import logging

from .auth import AuthService, AuthUser, FirebaseAuthService, LocalAuthService
from .documents import DocumentStore, SqlDocumentStore
from .errors import (
    AuthError,
    AuthorizationError,
    BackendError,
    ConfigurationError,
    DocumentNotFoundError,
    NotAuthenticatedError,
    PermissionDeniedError,
    UploadError,
    UploadValidationError,
)

logger = logging.getLogger(__name__)


class BackendClient:
    """Pairs a document store with an auth service under one lifecycle"""

    def __init__(self, documents, auth):
        self.documents = documents
        self.auth = auth
        self.initialized = False

    @property
    def name(self):
        return f'{self.documents.name}+{self.auth.name}'

    def initialize(self):
        if self.initialized:
            return self
        self.documents.initialize()
        self.auth.initialize()
        self.initialized = True
        logger.info(f'Backend client initialized ({self.name})')
        return self

    def shutdown(self):
        if not self.initialized:
            return
        self.auth.close()
        self.documents.close()
        self.initialized = False
        logger.info(f'Backend client shut down ({self.name})')

    def current_user_id(self):
        return self.auth.current_user_id()


def create_backend_client(config, identity_loader=None):
    """
    Build (but do not initialize) the client selected by config['BACKEND']

    Args:
        config (Mapping): Flask config or any mapping with the backend keys
        identity_loader (callable, optional): returns the calling user's id

    Returns:
        BackendClient
    """
    backend = (config.get('BACKEND') or 'sql').lower()

    if backend == 'firestore':
        from .firestore import FirestoreDocumentStore

        documents = FirestoreDocumentStore(
            project_id=config.get('FIREBASE_PROJECT_ID'),
            database_name=config.get('FIRESTORE_DATABASE') or '(default)',
            credentials_path=config.get('GOOGLE_APPLICATION_CREDENTIALS'),
        )
        auth = FirebaseAuthService(config.get('FIREBASE_API_KEY'), identity_loader=identity_loader)
    elif backend == 'sql':
        from extensions import db

        documents = SqlDocumentStore(db)
        auth = LocalAuthService(db, identity_loader=identity_loader)
    else:
        raise ConfigurationError(f'Unknown BACKEND: {backend}')

    return BackendClient(documents, auth)


__all__ = [
    'BackendClient',
    'create_backend_client',
    'AuthService',
    'AuthUser',
    'LocalAuthService',
    'FirebaseAuthService',
    'DocumentStore',
    'SqlDocumentStore',
    'BackendError',
    'NotAuthenticatedError',
    'AuthError',
    'AuthorizationError',
    'PermissionDeniedError',
    'DocumentNotFoundError',
    'ConfigurationError',
    'UploadValidationError',
    'UploadError',
]
