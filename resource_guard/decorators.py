"""
Guard decorators for protected operations.

Usage:
    from resource_guard import guard_resource, scope

    @guard_resource(scope("team", "USER"))
    def get_project(project_id: str, authentication: Authentication) -> Project:
        ...

    @guard_resource(
        scope("subteam", "USER"),
        scope("team", "ADMIN"),  # OR - either scope is enough
    )
    async def get_subteam(subteam_id: str, auth: Authentication) -> SubTeam:
        ...

    @guard_resource(
        scope("team", "ADMIN"),
        scope("team", "ADMIN", user_id_param="member_id", user_resolver="member"),  # AND - both users
    )
    def share_project(project_id: str, member_id: str, auth: Authentication) -> Project:
        ...

The wrapped callable runs first; its return value is released only if
access is granted, otherwise AccessDeniedError is raised.
"""

import inspect
from functools import wraps
from typing import Any, Callable, Mapping

from .config import get_settings
from .exceptions import InvalidArgumentError
from .interfaces import Authentication
from .requirements import DEFAULT_RESOLVER, ScopeRequirement
from .service import ResourceGuard


def scope(
    scope_type: str,
    *roles: str,
    user_id_param: str = "",
    user_resolver: str = DEFAULT_RESOLVER,
) -> ScopeRequirement:
    """
    Shorthand for ScopeRequirement.

    Usage:
        scope("team", "ADMIN", "USER")
        scope("team", "ADMIN", user_id_param="member_id", user_resolver="member")
    """
    return ScopeRequirement(scope_type, frozenset(roles), user_id_param, user_resolver)


def guard_resource(*scopes: ScopeRequirement, guard: ResourceGuard | None = None) -> Callable:
    """
    Decorator to guard the value returned by a sync or async callable.

    Args:
        *scopes: Scope requirements, in declaration order
        guard: ResourceGuard to use (default: a new ResourceGuard per call)

    Raises:
        InvalidArgumentError: At decoration time, if no scope is declared
            or a user_id_param is not a parameter of the callable
    """
    if not scopes:
        raise InvalidArgumentError("guard_resource requires at least one scope")
    for requirement in scopes:
        if not isinstance(requirement, ScopeRequirement):
            raise InvalidArgumentError(
                f"Expected ScopeRequirement, got {type(requirement).__name__}"
            )

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)
        default_resolver = (guard.settings if guard else get_settings()).default_resolver
        _check_parameters(func, signature, scopes, default_resolver)
        operation = f"{func.__module__}.{func.__qualname__}"

        def check(result: Any, args: tuple, kwargs: dict) -> Any:
            active_guard = guard or ResourceGuard()
            arguments = _bind_arguments(signature, args, kwargs)
            authentication = _find_authentication(
                arguments, active_guard.settings.authentication_params
            )
            return active_guard.check(
                scopes,
                result,
                arguments=arguments,
                authentication=authentication,
                operation=operation,
            )

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                result = await func(*args, **kwargs)
                return check(result, args, kwargs)

            wrapper = async_wrapper
        else:
            @wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                result = func(*args, **kwargs)
                return check(result, args, kwargs)

            wrapper = sync_wrapper

        # Metadata for introspection
        wrapper.__guard_scopes__ = scopes
        return wrapper
    return decorator


def _check_parameters(
    func: Callable,
    signature: inspect.Signature,
    scopes: tuple[ScopeRequirement, ...],
    default_resolver: str,
) -> None:
    accepts_kwargs = any(
        p.kind is inspect.Parameter.VAR_KEYWORD for p in signature.parameters.values()
    )
    if accepts_kwargs:
        return

    for requirement in scopes:
        param = requirement.user_id_param
        uses_argument = requirement.user_resolution.uses_argument(default_resolver)
        if uses_argument and param not in signature.parameters:
            raise InvalidArgumentError(
                f"'{param}' is not a parameter of {func.__qualname__}"
            )


def _bind_arguments(signature: inspect.Signature, args: tuple, kwargs: dict) -> dict[str, Any]:
    """Call arguments by parameter name, defaults applied, **kwargs flattened."""
    bound = signature.bind_partial(*args, **kwargs)
    bound.apply_defaults()

    arguments: dict[str, Any] = {}
    for name, value in bound.arguments.items():
        kind = signature.parameters[name].kind
        if kind is inspect.Parameter.VAR_KEYWORD:
            arguments.update(value)
        else:
            arguments[name] = value
    return arguments


def _find_authentication(arguments: Mapping[str, Any], param_names: list[str]) -> Authentication | None:
    # Look up well-known names first (auth, authentication...)
    for name in param_names:
        value = arguments.get(name)
        if isinstance(value, Authentication):
            return value

    # Then any argument carrying an Authentication
    for value in arguments.values():
        if isinstance(value, Authentication):
            return value

    return None
