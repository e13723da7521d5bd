"""Nested resources and their shared behavior.

``comments.belongs_to(blogs)`` gives the ``comments`` node a child factory,
``comments.inBlog(3)``, which returns a new node scoped under
``blogs/3/comments``. Nesting composes: a nested node can itself be the
parent of another nesting, producing ``blogs/3/posts/7/comments``.

Every nested node of one (parent, child) pairing shares a single
:class:`NestedBehavior`, stored in the API's :class:`BehaviorRegistry`
under a key such as ``"blogComments"``. Methods and actions added to that
object are visible on all nested nodes of the pairing, including those
created earlier, because nodes hold a reference to it rather than a copy.

Example::

    comments.belongs_to(blogs)
    behavior = api.behavior("blogComments")

    @behavior.method
    def approved(node):
        return node.list({"approved": 1})

    comments.inBlog(3).approved()   # GET {base}/blogs/3/comments.json
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping, Optional, Union

from crude.actions import Action, ArgsToData, RESERVED_NAMES, make_action
from crude.exceptions import ConfigurationError, UnknownResourceError
from crude.inflection import capitalize

if TYPE_CHECKING:
    from crude.resources import Resources

logger = logging.getLogger(__name__)


def behavior_key(parent_name: str, child_plural_name: str) -> str:
    """Return the registry key of a pairing, e.g. ``("blog", "comments") -> "blogComments"``."""
    return parent_name + capitalize(child_plural_name)


def factory_names(parent_name: str) -> tuple[str, str]:
    """Return the camel-case and snake-case child factory names for *parent_name*."""
    return "in" + capitalize(parent_name), "in_" + parent_name


class NestedBehavior:
    """Customizations shared by every nested node of one (parent, child) pairing.

    Functions added with :meth:`add_method` (or the :meth:`method`
    decorator) are bound to the nested node they are looked up on, so they
    receive the node as their first argument.

    Args:
        key: Registry key, see :func:`behavior_key`.
        parent_name: Singular name of the parent resource.
        child_plural_name: Plural name of the nested resource.
    """

    def __init__(self, key: str, parent_name: str, child_plural_name: str) -> None:
        self.key = key
        self.parent_name = parent_name
        self.child_plural_name = child_plural_name
        self._methods: dict[str, Callable[..., Any]] = {}
        self._actions: dict[str, Action] = {}

    def add_method(self, name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Share *fn* as method *name* on all nested nodes of this pairing."""
        if not callable(fn):
            raise ConfigurationError(f"Behavior method '{name}' must be callable")
        if not name.isidentifier() or name.startswith("_") or name in RESERVED_NAMES:
            raise ConfigurationError(f"Behavior method name '{name}' is reserved or invalid")
        self._methods[name] = fn
        logger.debug("Added method '%s' to nested behavior '%s'", name, self.key)
        return fn

    def method(
        self, fn: Optional[Callable[..., Any]] = None, *, name: Optional[str] = None
    ) -> Any:
        """Decorator form of :meth:`add_method`.

        Usable bare (``@behavior.method``) or with an explicit name
        (``@behavior.method(name="recent")``).
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            return self.add_method(name or func.__name__, func)

        if fn is not None:
            return decorator(fn)
        return decorator

    def member_action(
        self,
        name: str,
        path: Optional[str] = None,
        method: str = "get",
        args_to_data: Optional[ArgsToData] = None,
    ) -> NestedBehavior:
        """Share a member action with all nested nodes of this pairing."""
        self._actions[name] = make_action(name, path, method, True, args_to_data)
        return self

    def collection_action(
        self,
        name: str,
        path: Optional[str] = None,
        method: str = "get",
        args_to_data: Optional[ArgsToData] = None,
    ) -> NestedBehavior:
        """Share a collection action with all nested nodes of this pairing."""
        self._actions[name] = make_action(name, path, method, False, args_to_data)
        return self

    def resolve(self, name: str) -> Union[Action, Callable[..., Any], None]:
        """Return the action or method registered under *name*, or ``None``."""
        if name in self._actions:
            return self._actions[name]
        return self._methods.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._actions or name in self._methods

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.key}>"


class BehaviorRegistry(Mapping[str, NestedBehavior]):
    """Read-only mapping of behavior key to :class:`NestedBehavior`, owned by an API.

    New entries are only created through :meth:`register`; the first
    registration of a key wins and later calls return the same object.
    """

    def __init__(self) -> None:
        self._behaviors: dict[str, NestedBehavior] = {}

    def register(self, parent_name: str, child_plural_name: str) -> NestedBehavior:
        """Return the behavior of a pairing, creating it on first use."""
        key = behavior_key(parent_name, child_plural_name)
        behavior = self._behaviors.get(key)
        if behavior is None:
            behavior = NestedBehavior(key, parent_name, child_plural_name)
            self._behaviors[key] = behavior
            logger.debug("Registered nested behavior '%s'", key)
        return behavior

    def __getitem__(self, key: str) -> NestedBehavior:
        return self._behaviors[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._behaviors)

    def __len__(self) -> int:
        return len(self._behaviors)


def _check_pairing(parent: Resources, child: Resources) -> None:
    if not getattr(parent, "name", None) or not getattr(parent, "plural_name", None):
        raise ConfigurationError(f"Cannot nest under {parent!r}: parent has no name")
    if parent.api is not child.api:
        raise ConfigurationError(
            f"Cannot nest '{child.plural_name}' under '{parent.plural_name}': "
            "resources belong to different APIs"
        )


def _register_behavior(parent: Resources, child: Resources) -> NestedBehavior:
    api = child.api
    key = behavior_key(parent.name, child.plural_name)
    if key in api or hasattr(type(api), key):
        raise ConfigurationError(
            f"Nested behavior '{key}' clashes with a resource or Api member of the same name"
        )
    return api.behaviors.register(parent.name, child.plural_name)


def attach_child_factory(parent: Resources, child: Resources) -> str:
    """Install the ``in<Parent>`` child factory for *parent* on *child*.

    Also installs the snake-case alias (``in_<parent>``) and registers the
    shared behavior of the pairing so it can be customized right away.

    Returns:
        The camel-case factory name, e.g. ``"inBlog"``.

    Raises:
        ConfigurationError: If *parent* has no name, belongs to another API,
            or the pairing's behavior key is already a resource name.
    """
    _check_pairing(parent, child)
    _register_behavior(parent, child)
    names = factory_names(parent.name)
    for name in names:
        child._add_parent(name, parent)
    logger.debug(
        "Resource '%s' belongs to '%s' (factory %s)",
        child.plural_name,
        parent.plural_name,
        names[0],
    )
    return names[0]


def nest(child: Resources, parent: Resources, parent_id: Any) -> Resources:
    """Create a node of *child*'s type scoped under record *parent_id* of *parent*.

    The prefix is the parent's own collection path followed by the id, so
    nesting under an already nested parent adds exactly one level.

    Raises:
        ConfigurationError: If the pairing is invalid or *parent_id* is empty.
    """
    _check_pairing(parent, child)
    if parent_id is None or parent_id == "":
        raise ConfigurationError(
            f"Nesting '{child.plural_name}' under '{parent.plural_name}' requires a parent id"
        )
    prefix = f"{parent.path}/{parent_id}"
    behavior = _register_behavior(parent, child)
    origin = child.origin or child
    logger.debug("Nesting '%s' under '%s'", child.plural_name, prefix)
    return type(child)(
        child.api,
        child.name,
        child.plural_name,
        prefix,
        behavior=behavior,
        origin=origin,
    )


def lookup_behavior(registry: BehaviorRegistry, key: str) -> NestedBehavior:
    """Return the behavior under *key*, raising a clear error for unknown keys."""
    try:
        return registry[key]
    except KeyError:
        known = ", ".join(sorted(registry)) or "none"
        raise UnknownResourceError(
            f"No nested behavior '{key}' (registered: {known})"
        ) from None
