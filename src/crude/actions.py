"""Custom member and collection actions.

Beyond the five CRUD operations a REST API usually exposes extra endpoints:
*member* actions act on one record (``POST /posts/5/publish``) and
*collection* actions on the whole collection (``GET /posts/recent``). An
:class:`Action` describes such an endpoint by its path, HTTP method and an
optional ``args_to_data`` callable that turns call arguments into the
request payload.

Actions are registered with
:meth:`~crude.resources.Resources.member_action` /
:meth:`~crude.resources.Resources.collection_action`, or on a shared
:class:`~crude.nesting.NestedBehavior`, and then called as methods of the
resource node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from crude.exceptions import ConfigurationError

ArgsToData = Callable[..., Mapping[str, Any]]

RESERVED_NAMES = frozenset(
    {
        "api",
        "name",
        "plural_name",
        "prefix",
        "path",
        "kind",
        "behavior",
        "origin",
        "actions",
        "parents",
        "request",
        "list",
        "get",
        "create",
        "update",
        "delete",
        "del_",
        "belongs_to",
        "nested_in",
        "member_action",
        "collection_action",
        "find_action",
    }
)
"""Names of built-in :class:`~crude.resources.Resources` members that actions cannot shadow."""


@dataclass(frozen=True)
class Action:
    """A custom endpoint on a resource.

    Attributes:
        name: Method name the action is called by.
        path: Path segment appended after the collection (and after the id
            for member actions).
        method: Lowercase HTTP method handed to the transport.
        member: ``True`` for member actions, which take the record id as
            their first argument.
        args_to_data: Optional callable building the payload from the
            remaining call arguments.
    """

    name: str
    path: str
    method: str = "get"
    member: bool = False
    args_to_data: Optional[ArgsToData] = None

    def suffix(self, ident: Any = None) -> str:
        """Return the path suffix for a call on record *ident*."""
        if not self.member:
            return self.path
        return f"{ident}/{self.path}" if self.path else str(ident)

    def build_data(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
        """Build the request payload from the call arguments.

        Without ``args_to_data`` the first positional mapping is used, then
        the keyword arguments, then an empty payload.
        """
        if self.args_to_data is not None:
            return dict(self.args_to_data(*args, **kwargs))
        if args and isinstance(args[0], Mapping):
            return dict(args[0])
        return dict(kwargs)


def make_action(
    name: str,
    path: Optional[str],
    method: str,
    member: bool,
    args_to_data: Optional[ArgsToData] = None,
) -> Action:
    """Validate the arguments of an action declaration and build the :class:`Action`."""
    if not name or not name.isidentifier():
        raise ConfigurationError(f"Action name must be a valid identifier, got {name!r}")
    if name.startswith("_") or name in RESERVED_NAMES:
        raise ConfigurationError(f"Action name '{name}' is reserved")
    if not method:
        raise ConfigurationError(f"Action '{name}' needs an HTTP method")
    if args_to_data is not None and not callable(args_to_data):
        raise ConfigurationError(f"args_to_data of action '{name}' must be callable")
    return Action(
        name=name,
        path=name if path is None else path.strip("/"),
        method=method.lower(),
        member=member,
        args_to_data=args_to_data,
    )
