from .auth_store import AuthStore, validate_token
from .config import ClientConfig, ConfigError, load_config
from .context import SessionContext
from .diagnostics import DiagnosticEvent, DiagnosticsSink, NullSink, RingBufferSink
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    NotFoundError,
    RequestTimeoutError,
    SchemaMismatchError,
    SessionError,
    TenantPersistenceError,
    TenantSwitchError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .gates import GateResult, PermissionGate
from .http_client import HttpClient
from .identity import IdentityResolution, IdentityResolver
from .loaders import LoadError, ProfileMembershipLoader, select_current_tenant
from .local_store import (
    AUTH_STORAGE_KEY,
    CURRENT_ASSOCIATION_KEY,
    FileLocalStore,
    LocalStore,
    MemoryLocalStore,
)
from .models import (
    Association,
    AuthSession,
    Identity,
    Membership,
    Profile,
    Role,
    SessionData,
    TenantMembership,
    UserRoleAssignment,
)
from .permissions import DEFAULT_ROLES, PERMISSION_DESCRIPTIONS, Permission
from .roles import RoleAggregator
from .session import SessionManager, SessionStatus
from .tenant_switcher import TenantSwitcher
from .ui_errors import ErrorCategory, RecoveryAction, UserFacingError, to_user_facing_error
from .violation_models import (
    Priority,
    Violation,
    ViolationCategory,
    ViolationFilters,
    ViolationFormData,
    ViolationStatus,
)
from .violation_utils import filter_violations, sort_violations

__all__ = [
    "AUTH_STORAGE_KEY",
    "ApiError",
    "Association",
    "AuthError",
    "AuthSession",
    "AuthStore",
    "CURRENT_ASSOCIATION_KEY",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "DEFAULT_ROLES",
    "DiagnosticEvent",
    "DiagnosticsSink",
    "ErrorCategory",
    "FileLocalStore",
    "ForbiddenError",
    "GateResult",
    "HttpClient",
    "Identity",
    "IdentityResolution",
    "IdentityResolver",
    "InsufficientPermissionsError",
    "InvalidCredentialsError",
    "LoadError",
    "LocalStore",
    "Membership",
    "MemoryLocalStore",
    "NotAuthenticatedError",
    "NotFoundError",
    "NullSink",
    "PERMISSION_DESCRIPTIONS",
    "Permission",
    "PermissionGate",
    "Priority",
    "Profile",
    "ProfileMembershipLoader",
    "RecoveryAction",
    "RequestTimeoutError",
    "RingBufferSink",
    "Role",
    "RoleAggregator",
    "SchemaMismatchError",
    "SessionContext",
    "SessionData",
    "SessionError",
    "SessionManager",
    "SessionStatus",
    "TenantMembership",
    "TenantPersistenceError",
    "TenantSwitchError",
    "TenantSwitcher",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "UserRoleAssignment",
    "ValidationError",
    "Violation",
    "ViolationCategory",
    "ViolationFilters",
    "ViolationFormData",
    "ViolationStatus",
    "filter_violations",
    "load_config",
    "select_current_tenant",
    "sort_violations",
    "to_user_facing_error",
    "validate_token",
]
