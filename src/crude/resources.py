"""Resource nodes -- where the REST mapping happens.

A :class:`Resources` node stands for one REST collection, such as
``posts``. Its operations turn Python calls into a ``(path, method,
data)`` triple and hand it to the owning :class:`~crude.root.Api`, which
assembles the URL and calls the transport:

==================================  ======  ==========================
Call                                Method  Path
==================================  ======  ==========================
``posts.list(filter)``              get     ``posts``
``posts.get(5, filter)``            get     ``posts/5``
``posts.create(props, extra)``      post    ``posts``
``posts.update(5, props, extra)``   put     ``posts/5``
``posts.delete(5, extra)``          delete  ``posts/5``
==================================  ======  ==========================

``create`` and ``update`` wrap *props* as ``post[field]`` keys and merge
them over *extra*. Nested nodes (see :mod:`crude.nesting`) are plain
``Resources`` of kind :attr:`ResourceKind.NESTED` with a path prefix such
as ``blogs/3``.
"""

from __future__ import annotations

import functools
import logging
import types
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional

from crude.actions import Action, ArgsToData, make_action
from crude.exceptions import ConfigurationError, UnknownResourceError
from crude.nesting import attach_child_factory, nest
from crude.payload import merge, wrap_keys

if TYPE_CHECKING:
    from crude.nesting import NestedBehavior
    from crude.root import Api

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    """Whether a node is declared on the API or produced by nesting."""

    TOP_LEVEL = "top_level"
    NESTED = "nested"


def _suffix(ident: Any) -> str:
    if ident is None or ident == "":
        return ""
    return str(ident)


class Resources:
    """A REST collection and its CRUD operations.

    Usually created through :meth:`crude.root.Api.resources` (top-level)
    or a child factory such as ``comments.inBlog(3)`` (nested), not
    directly.

    Args:
        api: The owning API.
        name: Singular name, used to wrap CRUD payload keys.
        plural_name: Plural name, used as the path segment.
        prefix: Path segments preceding *plural_name* (nested nodes only).
        behavior: Shared behavior of the nesting pairing (nested nodes only).
        origin: The top-level node a nested node was derived from.
    """

    def __init__(
        self,
        api: Api,
        name: str,
        plural_name: str,
        prefix: Optional[str] = None,
        *,
        behavior: Optional[NestedBehavior] = None,
        origin: Optional[Resources] = None,
    ) -> None:
        self._api = api
        self._name = name
        self._plural_name = plural_name
        self._prefix = prefix or None
        self._behavior = behavior
        self._origin = origin
        self._actions: dict[str, Action] = {}
        self._parents: dict[str, Resources] = {}

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    @property
    def api(self) -> Api:
        return self._api

    @property
    def name(self) -> str:
        return self._name

    @property
    def plural_name(self) -> str:
        return self._plural_name

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.NESTED if self._prefix else ResourceKind.TOP_LEVEL

    @property
    def behavior(self) -> Optional[NestedBehavior]:
        """Shared behavior of the nesting pairing, ``None`` for top-level nodes."""
        return self._behavior

    @property
    def origin(self) -> Optional[Resources]:
        """The top-level node this nested node was derived from."""
        return self._origin

    @property
    def path(self) -> str:
        """Collection path: ``[prefix/]plural_name``."""
        if self._prefix:
            return f"{self._prefix}/{self._plural_name}"
        return self._plural_name

    @property
    def actions(self) -> Mapping[str, Action]:
        """Actions registered directly on this node."""
        return types.MappingProxyType(self._actions)

    @property
    def parents(self) -> Mapping[str, Resources]:
        """Child factory name (``inBlog``, ``in_blog``) to parent node."""
        return types.MappingProxyType(self._parents)

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def request(self, path: Any = "", method: Any = "get", data: Optional[Mapping[str, Any]] = None) -> Any:
        """Send a request for ``[prefix/]plural_name[/path]``.

        A mapping passed as *method* is taken as *data* with method ``get``;
        a ``None`` method also means ``get``.

        Returns:
            Whatever the transport returns.
        """
        if data is None and isinstance(method, Mapping):
            data, method = method, "get"
        elif method is None:
            method = "get"
        suffix = _suffix(path)
        full_path = f"{self.path}/{suffix}" if suffix else self.path
        return self._api.request(full_path, method, data)

    def list(self, filter: Optional[Mapping[str, Any]] = None) -> Any:
        """GET the collection, with *filter* as query data."""
        return self.request("", "get", filter)

    def get(self, id: Any = None, filter: Optional[Mapping[str, Any]] = None) -> Any:
        """GET one record, or the collection if *id* is absent.

        ``get({"page": 2})`` is read as a filter without an id.
        """
        if filter is None and isinstance(id, Mapping):
            id, filter = None, id
        return self.request(id, "get", filter)

    def create(self, props: Optional[Mapping[str, Any]], extra: Optional[Mapping[str, Any]] = None) -> Any:
        """POST a new record; *props* are sent as ``name[field]`` keys."""
        return self.request("", "post", merge(extra, wrap_keys(props, self._name)))

    def update(
        self,
        id: Any,
        props: Optional[Mapping[str, Any]],
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """PUT changes to record *id*; *props* are sent as ``name[field]`` keys."""
        return self.request(id, "put", merge(extra, wrap_keys(props, self._name)))

    def delete(self, id: Any, extra: Optional[Mapping[str, Any]] = None) -> Any:
        """DELETE record *id*."""
        return self.request(id, "delete", extra)

    del_ = delete

    # ------------------------------------------------------------------ #
    # Nesting
    # ------------------------------------------------------------------ #

    def belongs_to(self, parent: Resources) -> Resources:
        """Declare that this resource can be nested under *parent*.

        Installs the ``in<Parent>`` child factory, e.g. ``comments.inBlog(3)``.
        """
        attach_child_factory(parent, self)
        return self

    def nested_in(self, parent: Resources, parent_id: Any) -> Resources:
        """Return a new node of this resource scoped under record *parent_id* of *parent*."""
        return nest(self, parent, parent_id)

    def _add_parent(self, factory_name: str, parent: Resources) -> None:
        self._parents[factory_name] = parent

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #

    def member_action(
        self,
        name: str,
        path: Optional[str] = None,
        method: str = "get",
        args_to_data: Optional[ArgsToData] = None,
    ) -> Resources:
        """Register ``node.<name>(id, ...)``, a request to ``<collection>/<id>/<path>``.

        Args:
            name: Method name of the action.
            path: Path segment after the id; defaults to *name*.
            method: HTTP method.
            args_to_data: Builds the payload from the remaining arguments.
        """
        self._actions[name] = make_action(name, path, method, True, args_to_data)
        logger.debug("Registered member action '%s' on '%s'", name, self.path)
        return self

    def collection_action(
        self,
        name: str,
        path: Optional[str] = None,
        method: str = "get",
        args_to_data: Optional[ArgsToData] = None,
    ) -> Resources:
        """Register ``node.<name>(...)``, a request to ``<collection>/<path>``."""
        self._actions[name] = make_action(name, path, method, False, args_to_data)
        logger.debug("Registered collection action '%s' on '%s'", name, self.path)
        return self

    def find_action(self, name: str) -> Optional[Action]:
        """Look up an action on this node, its shared behavior, then its origin."""
        if name in self._actions:
            return self._actions[name]
        if self._behavior is not None:
            found = self._behavior.resolve(name)
            if isinstance(found, Action):
                return found
        if self._origin is not None:
            return self._origin.find_action(name)
        return None

    def _run_action(self, action: Action, *args: Any, **kwargs: Any) -> Any:
        if action.member:
            if not args or args[0] is None or args[0] == "":
                raise ConfigurationError(f"Member action '{action.name}' requires an id")
            ident, args = args[0], args[1:]
            suffix = action.suffix(ident)
        else:
            suffix = action.suffix()
        return self.request(suffix, action.method, action.build_data(args, kwargs))

    # ------------------------------------------------------------------ #
    # Dynamic accessors
    # ------------------------------------------------------------------ #

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        parent = self._parents.get(name)
        if parent is not None:
            return functools.partial(nest, self, parent)
        if self._behavior is not None:
            found = self._behavior.resolve(name)
            if found is not None and not isinstance(found, Action):
                return types.MethodType(found, self)
        action = self.find_action(name)
        if action is not None:
            return functools.partial(self._run_action, action)
        if name.startswith("in_") or (name.startswith("in") and name[2:3].isupper()):
            raise UnknownResourceError(
                f"'{self._plural_name}' does not belong to a resource named by '{name}'; "
                "declare it with belongs_to()"
            )
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.path} ({self.kind.value})>"
