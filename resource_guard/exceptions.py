"""
Guard exceptions.

Every failure inside the guard is one of the typed errors below. The
orchestrator converts all of them into a single AccessDeniedError
carrying the most specific category and the original error as cause.

Usage:
    from resource_guard.exceptions import AccessDeniedError

    try:
        project = service.get_project(project_id, authentication=auth)
    except AccessDeniedError as exc:
        logger.warning("Denied", category=exc.category, reason=exc.reason)
"""

from enum import Enum


class DenialCategory(str, Enum):
    """Why access was denied. Used for logs and HTTP responses."""
    ACCESS_DENIED = "access_denied"
    INVALID_AUTHORITY = "invalid_authority"
    SCOPE_NOT_FOUND = "scope_not_found"
    ACCESS_RESOLUTION = "access_resolution"
    NOT_ACCESSIBLE = "not_accessible"
    USER_RESOLUTION = "user_resolution"
    INVALID_ARGUMENT = "invalid_argument"


class GuardError(Exception):
    """Base class for all guard errors."""

    category: DenialCategory = DenialCategory.ACCESS_DENIED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAuthorityError(GuardError):
    """An authority string does not follow ROLE_<SCOPE>_<ROLE>_<RESOURCE_ID>."""

    category = DenialCategory.INVALID_AUTHORITY

    def __init__(self, authority: object, reason: str = "malformed"):
        # The raw value may reach HTTP responses; keep it on the attribute only
        super().__init__(f"Authority is invalid ({reason}).")
        self.authority = authority
        self.reason = reason


class ScopeResolutionNotFound(GuardError):
    """The resource has no accessor for a scope type, or it returned None."""

    category = DenialCategory.SCOPE_NOT_FOUND

    def __init__(self, scope_type: str, resource_type: type, message: str | None = None):
        super().__init__(
            message
            or f"No accessor for scope '{scope_type}' on {resource_type.__name__}"
        )
        self.scope_type = scope_type
        self.resource_type = resource_type


class AccessResolutionError(GuardError):
    """Invoking a scope accessor raised."""

    category = DenialCategory.ACCESS_RESOLUTION

    def __init__(self, scope_type: str, resource_type: type):
        super().__init__(
            f"Error invoking accessor for scope '{scope_type}' "
            f"on {resource_type.__name__}"
        )
        self.scope_type = scope_type
        self.resource_type = resource_type


class ResourceNotAccessibleError(GuardError):
    """A guarded value does not declare any scope accessors."""

    category = DenialCategory.NOT_ACCESSIBLE

    def __init__(self, resource: object, message: str | None = None):
        super().__init__(
            message or f"Resource of type {type(resource).__name__} is not Accessible"
        )
        self.resource_type = type(resource)


class UserResolutionError(GuardError):
    """The acting user could not be resolved."""

    category = DenialCategory.USER_RESOLUTION


class InvalidArgumentError(GuardError, ValueError):
    """
    Programming or configuration error (empty scope type, missing
    requirement list, unknown parameter name...).

    Still ends in a denial, but is logged as an error rather than a
    regular authorization outcome.
    """

    category = DenialCategory.INVALID_ARGUMENT


class AccessDeniedError(GuardError):
    """
    The single denial signal raised to callers.

    Attributes:
        reason: Human-readable explanation
        category: DenialCategory of the underlying failure
        operation: Name of the guarded operation (diagnostics only)
    """

    def __init__(
        self,
        reason: str = "Access denied",
        category: DenialCategory = DenialCategory.ACCESS_DENIED,
        operation: str | None = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.category = category
        self.operation = operation

    @classmethod
    def from_error(cls, error: GuardError, operation: str | None = None) -> "AccessDeniedError":
        """Wrap a guard error, keeping its category."""
        if isinstance(error, AccessDeniedError):
            return error
        return cls(reason=error.message, category=error.category, operation=operation)
