"""
Backend Errors - Exception hierarchy shared by every backend and service
"""


class BackendError(Exception):
    """Base error for anything raised by the remote backend or the layers above it"""

    default_code = 'unknown'

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self):
        return self.message


class NotAuthenticatedError(BackendError):
    default_code = 'unauthenticated'

    def __init__(self, message='User not authenticated', code=None):
        super().__init__(message, code)


class AuthError(BackendError):
    """Authentication failure reported by the auth service (auth/* codes)"""
    default_code = 'auth/internal-error'


class AuthorizationError(BackendError):
    """Authenticated, but the policy denied access"""
    default_code = 'unauthorized'


class PermissionDeniedError(BackendError):
    """The backend's security rules rejected the operation"""
    default_code = 'permission-denied'


class DocumentNotFoundError(BackendError):
    default_code = 'not-found'


class ConfigurationError(BackendError):
    default_code = 'configuration'


class UploadValidationError(BackendError):
    default_code = 'upload/invalid'


class UploadError(BackendError):
    default_code = 'upload/failed'


__all__ = [
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
