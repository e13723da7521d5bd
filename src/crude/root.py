"""The API root: configuration, resource declarations, and URL assembly.

An :class:`Api` holds the base URL, the format suffix and the transport
callable. It declares top-level resources, exposes them as attributes, and
turns every ``(path, method, data)`` triple built by a
:class:`~crude.resources.Resources` node into a single transport call.

Example::

    import crude

    api = crude.api("http://example.com/api", "json", transport)
    posts = api.resources("post")
    comments = api.resources("comment").belongs_to(posts)

    posts.create({"title": "hi"})
    # transport("http://example.com/api/posts.json", "post", {"post[title]": "hi"})

    api.comments.inPost(3).get(7)
    # transport("http://example.com/api/posts/3/comments/7.json", "get", {})
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping, Optional

from crude.exceptions import ConfigurationError, UnknownResourceError
from crude.inflection import DEFAULT_PLURALIZER, Pluralizer
from crude.nesting import BehaviorRegistry, NestedBehavior, lookup_behavior
from crude.resources import Resources
from crude.template import expand

logger = logging.getLogger(__name__)

Transport = Callable[[str, str, dict], Any]


class Api:
    """Root of a declared REST API.

    Args:
        base_url: URL every request path is appended to (no trailing slash
            is added or removed).
        format: Format suffix appended as ``.<format>``; empty to omit it.
        transport: Callable ``(url, method, data)`` performing the request.
            Its return value is passed back to the caller unchanged.
        pluralizer: Pluralizer for resource names; defaults to the
            process-wide :data:`~crude.inflection.DEFAULT_PLURALIZER`.

    Raises:
        ConfigurationError: If *transport* is not callable.
    """

    def __init__(
        self,
        base_url: str,
        format: str,
        transport: Transport,
        pluralizer: Optional[Pluralizer] = None,
    ) -> None:
        if not callable(transport):
            raise ConfigurationError(f"Transport must be callable, got {transport!r}")
        self._base_url = base_url
        self._format = format or ""
        self._transport = transport
        self._pluralizer = pluralizer or DEFAULT_PLURALIZER
        self._resources: dict[str, Resources] = {}
        self._behaviors = BehaviorRegistry()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def format(self) -> str:
        return self._format

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def pluralizer(self) -> Pluralizer:
        return self._pluralizer

    @property
    def behaviors(self) -> BehaviorRegistry:
        """Shared behaviors of all nesting pairings, keyed like ``"blogComments"``."""
        return self._behaviors

    # ------------------------------------------------------------------ #
    # Declarations
    # ------------------------------------------------------------------ #

    def resources(self, name: str, plural_name: Optional[str] = None) -> Resources:
        """Declare a top-level resource and return its node.

        The node is also reachable as ``api.<plural_name>`` and
        ``api["<plural_name>"]``. Declaring the same plural again replaces
        the accessor.

        Args:
            name: Singular resource name, e.g. ``"post"``.
            plural_name: Plural path segment; derived with the API's
                pluralizer when omitted.

        Raises:
            ConfigurationError: If *name* is empty, or the plural name
                clashes with an ``Api`` member or a nested behavior key.
        """
        if not name:
            raise ConfigurationError("Resource name must not be empty")
        plural_name = plural_name or self._pluralizer.pluralize(name)
        if hasattr(type(self), plural_name):
            raise ConfigurationError(
                f"Resource '{plural_name}' clashes with Api.{plural_name}; "
                "pass a different plural_name"
            )
        if plural_name in self._behaviors:
            raise ConfigurationError(
                f"Resource '{plural_name}' clashes with the nested behavior of the same key"
            )
        node = Resources(self, name, plural_name)
        if plural_name in self._resources:
            logger.debug("Redeclaring resource '%s'", plural_name)
        self._resources[plural_name] = node
        logger.debug("Declared resource '%s' (%s)", name, plural_name)
        return node

    def resource(self, plural_name: str) -> Resources:
        """Return the declared node for *plural_name*.

        Raises:
            UnknownResourceError: If no such resource was declared.
        """
        try:
            return self._resources[plural_name]
        except KeyError:
            known = ", ".join(sorted(self._resources)) or "none"
            raise UnknownResourceError(
                f"No resource '{plural_name}' declared (declared: {known})"
            ) from None

    def behavior(self, key: str) -> NestedBehavior:
        """Return the shared behavior registered under *key*, e.g. ``"blogComments"``.

        Raises:
            UnknownResourceError: If no nesting created that key yet.
        """
        return lookup_behavior(self._behaviors, key)

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def build_url(self, path: str, data: dict[str, Any]) -> str:
        """Assemble ``base_url/path.format`` and expand its placeholders from *data*.

        Keys used by placeholders are removed from *data*.
        """
        url = f"{self._base_url}/{path}"
        if self._format:
            url = f"{url}.{self._format}"
        return expand(url, data)

    def request(self, path: str, method: Any = "get", data: Optional[Mapping[str, Any]] = None) -> Any:
        """Build the URL for *path* and invoke the transport once.

        A mapping passed as *method* is taken as *data* with method ``get``;
        a ``None`` method also means ``get``.
        The caller's *data* is copied, never mutated.

        Raises:
            MissingVariableError: If a placeholder has no value; the
                transport is not called.
        """
        if data is None and isinstance(method, Mapping):
            data, method = method, "get"
        elif method is None:
            method = "get"
        payload = dict(data or {})
        url = self.build_url(path, payload)
        method = str(method).lower()
        logger.debug("%s %s %r", method.upper(), url, payload)
        return self._transport(url, method, payload)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._resources:
            return self._resources[name]
        if name in self._behaviors:
            return self._behaviors[name]
        raise UnknownResourceError(f"No resource or nested behavior '{name}' declared")

    def __getitem__(self, plural_name: str) -> Resources:
        return self.resource(plural_name)

    def __contains__(self, plural_name: object) -> bool:
        return plural_name in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(self._resources)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self._base_url} ({self._format or 'no format'})>"


def api(
    base_url: str,
    format: str,
    transport: Transport,
    pluralizer: Optional[Pluralizer] = None,
) -> Api:
    """Create an :class:`Api`; shorthand for the constructor."""
    return Api(base_url, format, transport, pluralizer)
