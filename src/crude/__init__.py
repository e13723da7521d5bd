"""crude -- declarative REST resource URL builder.

Declare the resources of a REST API once, then call plain methods to get
correctly shaped requests::

    import crude

    api = crude.api("http://example.com/api", "json", transport)
    posts = api.resources("post")
    comments = api.resources("comment").belongs_to(posts)

    posts.list()                      # GET    .../posts.json
    posts.create({"title": "hi"})     # POST   .../posts.json  {"post[title]": "hi"}
    comments.inPost(3).delete(7)      # DELETE .../posts/3/comments/7.json

Every operation makes exactly one call to ``transport(url, method, data)``
and returns its result unchanged. Ready-made transports live in
:mod:`crude.transport`.

Modules:
    root: The API root and the :func:`api` factory.
    resources: Resource nodes and their CRUD operations.
    nesting: Child factories and shared nested behaviors.
    actions: Custom member and collection actions.
    inflection: Rule-based pluralization.
    template: ``{key}`` URL template expansion.
    payload: ``name[field]`` payload wrapping.
    transport: httpx-backed and dry-run transports.
    config: JSON definition files for the ``crude`` command.
    app: Typer application and CLI entry point.
    exceptions: Exception hierarchy with exit-code mapping.
"""

__version__ = "0.1.0"

from crude.actions import Action
from crude.exceptions import (
    ConfigurationError,
    CrudeError,
    MissingVariableError,
    UnknownResourceError,
)
from crude.inflection import Pluralizer, PluralRule, capitalize, pluralize
from crude.nesting import BehaviorRegistry, NestedBehavior
from crude.resources import ResourceKind, Resources
from crude.root import Api, api
from crude.template import expand

__all__ = [
    "Action",
    "Api",
    "BehaviorRegistry",
    "ConfigurationError",
    "CrudeError",
    "MissingVariableError",
    "NestedBehavior",
    "PluralRule",
    "Pluralizer",
    "ResourceKind",
    "Resources",
    "UnknownResourceError",
    "__version__",
    "api",
    "capitalize",
    "expand",
    "pluralize",
]
