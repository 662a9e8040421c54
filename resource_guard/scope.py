"""
Scope resolution.

A resource declares, per scope type, an accessor returning the object
that represents its association in that scope (its team, its subteam,
or itself). The accessor's result is then identified through the
Identifiable contract.

Declaring accessors:

    class Project(Accessible, Identifiable):
        def __init__(self, id: str, team: Team):
            self.id = id
            self.team = team

        def get_id(self) -> str:
            return self.id

        @scope_accessor("team")
        def get_team(self) -> Team:
            return self.team

        @scope_accessor("project")
        def get_project(self) -> "Project":
            return self

Types you don't own can be registered externally:

    GuardRegistry.register_scope_accessor(Invoice, "team", lambda i: i.team)
"""

from operator import methodcaller
from typing import Any, Callable, TypeVar

from .exceptions import (
    AccessResolutionError,
    InvalidArgumentError,
    ScopeResolutionNotFound,
)
from .interfaces import Identifiable
from .registry import GuardRegistry

F = TypeVar("F", bound=Callable[..., Any])

_SCOPE_ATTR = "__guard_scope_type__"


def scope_accessor(scope_type: str) -> Callable[[F], F]:
    """
    Mark a method of an Accessible subclass as the accessor for `scope_type`.

    Usage:
        @scope_accessor("team")
        def get_team(self) -> Team:
            return self.team
    """
    if not isinstance(scope_type, str) or not scope_type:
        raise InvalidArgumentError("Scope type must be a non-empty string")

    def decorator(func: F) -> F:
        setattr(func, _SCOPE_ATTR, scope_type)
        return func
    return decorator


class Accessible:
    """
    Capability base class for guarded resources.

    Methods marked with @scope_accessor are registered in GuardRegistry
    when the subclass is created. They are called by name on the
    resource, so a subclass overriding the method (decorated or not)
    supplies the scope object.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name, attr in vars(cls).items():
            scope_type = getattr(attr, _SCOPE_ATTR, None)
            if scope_type is not None:
                GuardRegistry.register_scope_accessor(cls, scope_type, methodcaller(name))


def is_accessible(resource: Any) -> bool:
    """Check whether a value satisfies the Accessible capability contract."""
    return isinstance(resource, Accessible) or GuardRegistry.has_scope_accessors(type(resource))


def resolve_scope_object(resource: Any, scope_type: str) -> Any:
    """
    Get the object representing `resource` in `scope_type`.

    Raises:
        InvalidArgumentError: If scope_type is empty
        ScopeResolutionNotFound: If no accessor is declared, or it returned None
        AccessResolutionError: If the accessor itself raised
    """
    if not isinstance(scope_type, str) or not scope_type:
        raise InvalidArgumentError("Scope type is invalid.")

    resource_type = type(resource)
    accessor = GuardRegistry.get_scope_accessor(resource_type, scope_type)
    if accessor is None:
        raise ScopeResolutionNotFound(scope_type, resource_type)

    try:
        scope_object = accessor(resource)
    except Exception as e:
        raise AccessResolutionError(scope_type, resource_type) from e

    if scope_object is None:
        raise ScopeResolutionNotFound(
            scope_type,
            resource_type,
            f"Scope object for '{scope_type}' on {resource_type.__name__} is None",
        )

    return scope_object


def identity_of(scope_object: Any) -> str | None:
    """
    Identity string of a scope object.

    Returns None when the object is not Identifiable or has no usable
    id; such objects never match an authority.
    """
    if not isinstance(scope_object, Identifiable):
        return None

    identity = scope_object.get_id()
    if identity is None:
        return None

    identity = str(identity)
    return identity or None
