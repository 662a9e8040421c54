"""
Resource guard - Main facade for guarding operation results.

This is the per-invocation entry point. Given the requirements declared
for an operation, its arguments and the value it produced, it resolves
the acting user once per resolution group and releases the value only
if every group grants access.

Usage:
    guard = ResourceGuard()
    project = guard.check(
        [ScopeRequirement("team", {"USER"})],
        repository.get_project(project_id),
        authentication=authentication,
    )
"""

from typing import Any, Iterable, Mapping

import structlog

from .config import GuardSettings, get_settings
from .decision import AccessDecisionEngine
from .exceptions import (
    AccessDeniedError,
    DenialCategory,
    GuardError,
    InvalidArgumentError,
    UserResolutionError,
)
from .interfaces import Authentication, PolicyDecision, UserDetails, UserResolver
from .registry import GuardRegistry
from .requirements import ScopeRequirement, UserResolution, group_by_resolution
from .utils.logging import guard_context

# Import to register default implementations
from . import resolvers  # noqa: F401

logger = structlog.get_logger(__name__)


class ResourceGuard:
    """
    Default guard implementation.

    Combines:
    - User resolvers: explicit instances first, then GuardRegistry
    - Decision engine: evaluates each resolution group

    Groups are evaluated in declaration order and the first failing group
    stops the evaluation; resolvers of later groups are not called.
    """

    def __init__(
        self,
        resolvers: Mapping[str, UserResolver] | None = None,
        engine: AccessDecisionEngine | None = None,
        settings: GuardSettings | None = None,
    ):
        self.resolvers = dict(resolvers or {})
        self.engine = engine or AccessDecisionEngine()
        self.settings = settings or get_settings()

    # ============================================================
    # USER RESOLUTION
    # ============================================================

    def get_resolver(self, name: str) -> UserResolver:
        """
        Get a resolver by name.

        Raises:
            InvalidArgumentError: If no resolver is known under that name
        """
        if name in self.resolvers:
            return self.resolvers[name]
        try:
            return GuardRegistry.get_user_resolver(name)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e

    def resolve_user(
        self,
        resolution: UserResolution,
        arguments: Mapping[str, Any],
        authentication: Authentication | None,
    ) -> UserDetails:
        """
        Resolve the acting user for one resolution group.

        Raises:
            UserResolutionError: If the named argument is missing, or the
                resolver failed or returned something other than UserDetails
        """
        if resolution.uses_argument(self.settings.default_resolver):
            if resolution.user_id_param not in arguments:
                raise UserResolutionError(
                    f"User id param '{resolution.user_id_param}' wasn't found in the call arguments."
                )
            resolver = self.get_resolver(resolution.user_resolver)
            value = arguments[resolution.user_id_param]
        else:
            resolver = self.get_resolver(self.settings.default_resolver)
            value = authentication

        try:
            user = resolver.resolve(value)
        except UserResolutionError:
            raise
        except Exception as e:
            logger.warning("Failed to resolve user details", resolver=type(resolver).__name__, error=str(e))
            raise UserResolutionError("User details could not be resolved.") from e

        if not isinstance(user, UserDetails):
            raise UserResolutionError(
                f"Resolver {type(resolver).__name__} did not return UserDetails"
            )
        return user

    # ============================================================
    # GUARDING
    # ============================================================

    def check(
        self,
        requirements: Iterable[ScopeRequirement] | None,
        result: Any,
        *,
        arguments: Mapping[str, Any] | None = None,
        authentication: Authentication | None = None,
        operation: str | None = None,
    ) -> Any:
        """
        Release `result` if access is granted.

        Args:
            requirements: Scope requirements declared for the operation
            result: Value produced by the operation (object, collection or None)
            arguments: Call arguments by parameter name
            authentication: Authentication of the current call
            operation: Operation name, for diagnostics only

        Returns:
            `result`, unchanged

        Raises:
            AccessDeniedError: On any denial, with the underlying error as cause
        """
        with guard_context(operation):
            logger.info("Guarding operation")

            if result is None:
                logger.warning("Operation returned None. There's nothing to guard.")
                return None

            try:
                self._authorize(requirements, result, arguments or {}, authentication)
            except AccessDeniedError as e:
                e.operation = e.operation or operation
                self._log_denial(e)
                raise
            except GuardError as e:
                denial = AccessDeniedError.from_error(e, operation)
                self._log_denial(denial)
                raise denial from e

            return result

    def evaluate(
        self,
        requirements: Iterable[ScopeRequirement] | None,
        result: Any,
        *,
        arguments: Mapping[str, Any] | None = None,
        authentication: Authentication | None = None,
        operation: str | None = None,
    ) -> PolicyDecision:
        """
        Same as check() but returns a PolicyDecision (does not raise).

        The denial category is available in decision.metadata["category"].
        """
        try:
            self.check(
                requirements,
                result,
                arguments=arguments,
                authentication=authentication,
                operation=operation,
            )
        except AccessDeniedError as e:
            return PolicyDecision.deny(e.reason, category=e.category.value, operation=operation)
        return PolicyDecision.allow()

    def _authorize(
        self,
        requirements: Iterable[ScopeRequirement] | None,
        result: Any,
        arguments: Mapping[str, Any],
        authentication: Authentication | None,
    ) -> None:
        if requirements is None:
            raise InvalidArgumentError("Scope requirements are null.")

        groups = group_by_resolution(requirements)
        if not groups:
            raise InvalidArgumentError("Scope requirements are empty.")

        for resolution, group in groups.items():
            user = self.resolve_user(resolution, arguments, authentication)
            decision = self.engine.evaluate_group(group, user, result)
            if not decision.allowed:
                raise AccessDeniedError(decision.reason or "Access denied")

    def _log_denial(self, denial: AccessDeniedError) -> None:
        if denial.category == DenialCategory.INVALID_ARGUMENT:
            logger.error("Guard misconfigured", reason=denial.reason, category=denial.category.value)
        else:
            logger.warning("Access denied", reason=denial.reason, category=denial.category.value)
