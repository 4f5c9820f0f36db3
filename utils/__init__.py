"""
Utils Package - Centralized utility modules initialization
"""

from .decorators import admin_required
from .data import (
    timestamp_now,
    get_current_user_id,
    create_document,
    update_document,
    delete_document,
    get_document,
    get_documents
)
from .services import (
    PROFILE_DOCUMENT_ID,
    InvalidRecordError,
    CollectionService,
    ExperienceService,
    ProfileService,
    UserRoleService,
    InboxService,
    PortfolioServices
)
from .security import (
    AuthorizationDecision,
    AuthorizationPolicy,
    RolePolicy,
    AccessGuard,
    sign_in_admin,
    login_error_message
)
from .helpers import (
    parse_date,
    sort_by_display_order,
    sort_by_date_desc,
    sort_by_created_desc,
    get_dashboard_stats
)
from .media import validate_media, upload_media
from .portfolio import load_portfolio, invalidate_portfolio_cache

__all__ = [
    # Decorators
    'admin_required',

    # Data
    'timestamp_now',
    'get_current_user_id',
    'create_document',
    'update_document',
    'delete_document',
    'get_document',
    'get_documents',

    # Services
    'PROFILE_DOCUMENT_ID',
    'InvalidRecordError',
    'CollectionService',
    'ExperienceService',
    'ProfileService',
    'UserRoleService',
    'InboxService',
    'PortfolioServices',

    # Security
    'AuthorizationDecision',
    'AuthorizationPolicy',
    'RolePolicy',
    'AccessGuard',
    'sign_in_admin',
    'login_error_message',

    # Helpers
    'parse_date',
    'sort_by_display_order',
    'sort_by_date_desc',
    'sort_by_created_desc',
    'get_dashboard_stats',

    # Media / portfolio reads
    'validate_media',
    'upload_media',
    'load_portfolio',
    'invalidate_portfolio_cache'
]
