from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import ApiError, NotFoundError, RequestTimeoutError, SchemaMismatchError, TransportError


class ErrorCategory(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    NOT_FOUND = "not_found"
    GENERIC = "generic"


class RecoveryAction(str, Enum):
    RETRY = "retry"
    RELOAD = "reload"
    CLEAR_AND_RETRY = "clear_and_retry"
    CONTACT_SUPPORT = "contact_support"
    COMPLETE_PROFILE = "complete_profile"
    SIGN_IN = "sign_in"


@dataclass(frozen=True)
class UserFacingError:
    category: ErrorCategory
    message: str
    action: RecoveryAction
    details: str | None = None

    @property
    def retryable(self) -> bool:
        return self.category in {ErrorCategory.TIMEOUT, ErrorCategory.NETWORK}


TIMEOUT_MESSAGE = (
    "Connection timeout. This may be due to slow internet or server issues. "
    "Please check your connection and try again."
)
NETWORK_MESSAGE = "Network connection error. Please check your internet connection and try again."
CEILING_MESSAGE = "Authentication is taking too long. Please refresh the page and try again."
STARTUP_TIMEOUT_MESSAGE = "Connection timeout during startup. Please refresh the page."
NO_PROFILE_MESSAGE = "No user profile found. Please sign up or contact support."
NO_ASSOCIATIONS_MESSAGE = "No associations found for your account. Contact support."
PROFILE_FAILED_MESSAGE = "Failed to load user profile. Please try again."
ASSOCIATIONS_FAILED_MESSAGE = "Failed to load your associations. Please try again."
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password. Please check your credentials and try again."
UNEXPECTED_MESSAGE = "An unexpected error occurred"


def categorize(exc: BaseException) -> ErrorCategory:
    if isinstance(exc, (RequestTimeoutError, TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, TransportError):
        return ErrorCategory.NETWORK
    if isinstance(exc, NotFoundError) and not isinstance(exc, SchemaMismatchError):
        return ErrorCategory.NOT_FOUND
    return ErrorCategory.GENERIC


def to_user_facing_error(exc: BaseException, *, fallback: str = PROFILE_FAILED_MESSAGE) -> UserFacingError:
    """Translate a provider failure into one of the user-visible categories.

    Raw provider payloads never leak into ``message``; they are kept in
    ``details`` for diagnostics only.
    """
    category = categorize(exc)
    details = str(exc) if isinstance(exc, ApiError) else (str(exc) or type(exc).__name__)
    if category is ErrorCategory.TIMEOUT:
        return UserFacingError(category, TIMEOUT_MESSAGE, RecoveryAction.RETRY, details)
    if category is ErrorCategory.NETWORK:
        return UserFacingError(category, NETWORK_MESSAGE, RecoveryAction.RETRY, details)
    if category is ErrorCategory.NOT_FOUND:
        return UserFacingError(category, fallback, RecoveryAction.CONTACT_SUPPORT, details)
    return UserFacingError(category, fallback, RecoveryAction.RELOAD, details)
