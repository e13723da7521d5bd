"""Request commands -- build or send one resource operation.

``crude url`` composes the request with a
:class:`~crude.transport.DryRunTransport` and prints the URL, method and
payload without network traffic. ``crude call`` sends the same request
with :class:`~crude.transport.HttpxTransport` and prints the response.

Both take the operation, the plural resource name, an optional record id,
and repeatable ``--in PLURAL=ID`` options for nesting::

    crude url get comments 7 --in blogs=3
    crude url create posts --field title=hi --param token=abc
    crude call list comments --in blogs=3 --in posts=7
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from crude.config import build_api, resolve_definition
from crude.exceptions import CrudeError, InvalidUsageError
from crude.models import ApiDefinition
from crude.nesting import factory_names
from crude.output import debug, error, format_response, info, warning
from crude.resources import Resources
from crude.root import Api, Transport
from crude.template import template_variables
from crude.transport import DryRunTransport, HttpxTransport, extract_response_data

CRUD_OPERATIONS = ("list", "get", "create", "update", "delete")


def parse_pairs(items: Optional[list[str]], option: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a dict.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    pairs: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Expected KEY=VALUE for {option}, got '{item}'")
        pairs[key] = value
    return pairs


def resolve_definition_from_context(ctx: typer.Context) -> ApiDefinition:
    """Resolve the definition using the global options stored on *ctx*."""
    obj = ctx.obj or {}
    return resolve_definition(
        cli_path=obj.get("definition"),
        cli_base_url=obj.get("base_url"),
        cli_format=obj.get("format"),
    )


def load_api(ctx: typer.Context, transport: Transport) -> Api:
    """Resolve the definition and build the API bound to *transport*."""
    return build_api(resolve_definition_from_context(ctx), transport)


def resolve_node(api: Api, resource: str, nesting: Optional[list[str]]) -> Resources:
    """Return the node for *resource*, nested along the ``--in PLURAL=ID`` chain.

    Each step must be a declared ``belongs_to`` relation.

    Raises:
        UnknownResourceError: If a plural name was not declared.
        InvalidUsageError: If a step is not a declared relation.
    """
    scope: Optional[Resources] = None
    scope_id: Optional[str] = None
    for item in nesting or []:
        plural, sep, parent_id = item.partition("=")
        if not sep or not plural or not parent_id:
            raise InvalidUsageError(f"Expected PLURAL=ID for --in, got '{item}'")
        node = api[plural]
        scope = node if scope is None else _nest_declared(node, scope, scope_id)
        scope_id = parent_id

    target = api[resource]
    if scope is None:
        return target
    return _nest_declared(target, scope, scope_id)


def _nest_declared(child: Resources, parent: Resources, parent_id: Any) -> Resources:
    if factory_names(parent.name)[0] not in child.parents:
        raise InvalidUsageError(
            f"'{child.plural_name}' is not declared to belong to '{parent.plural_name}'"
        )
    return child.nested_in(parent, parent_id)


def dispatch(
    node: Resources,
    operation: str,
    ident: Optional[str],
    fields: dict[str, str],
    params: dict[str, str],
) -> Any:
    """Run *operation* on *node* and return the transport result.

    Raises:
        InvalidUsageError: For unknown operations or a missing id.
    """
    if fields and operation not in ("create", "update"):
        warning(f"--field is ignored by '{operation}'; use --param instead")

    if operation == "list":
        return node.list(params)
    if operation == "get":
        return node.get(ident, params)
    if operation == "create":
        return node.create(fields, params)
    if operation in ("update", "delete") and ident is None:
        raise InvalidUsageError(f"'{operation}' requires an id")
    if operation == "update":
        return node.update(ident, fields, params)
    if operation == "delete":
        return node.delete(ident, params)

    action = node.find_action(operation)
    if action is None:
        known = ", ".join(CRUD_OPERATIONS)
        raise InvalidUsageError(
            f"Unknown operation '{operation}' for '{node.plural_name}' (expected {known} or an action)"
        )
    if action.member:
        if ident is None:
            raise InvalidUsageError(f"Member action '{operation}' requires an id")
        return getattr(node, operation)(ident, params)
    return getattr(node, operation)(params)


def url_command(
    ctx: typer.Context,
    operation: str = typer.Argument(help="list, get, create, update, delete, or an action name."),
    resource: str = typer.Argument(help="Plural name of a declared resource."),
    ident: Optional[str] = typer.Argument(None, help="Record id."),
    nesting: Optional[list[str]] = typer.Option(
        None, "--in", help="Parent scope as PLURAL=ID; repeat for deeper nesting."
    ),
    field: Optional[list[str]] = typer.Option(
        None, "--field", "-F", help="Record field as KEY=VALUE (create/update)."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Extra data as KEY=VALUE (filters, path variables)."
    ),
) -> None:
    """Print the URL, method and payload of an operation without sending it.

    Example::

        crude url get comments 7 --in blogs=3
    """
    transport = DryRunTransport(report=False)
    try:
        api = load_api(ctx, transport)
        variables = template_variables(api.base_url)
        if variables:
            debug(f"Base URL variables: {', '.join(variables)} (pass with --param)")
        node = resolve_node(api, resource, nesting)
        prepared = dispatch(
            node, operation, ident, parse_pairs(field, "--field"), parse_pairs(param, "--param")
        )
    except CrudeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(prepared.model_dump(mode="json"))


def call_command(
    ctx: typer.Context,
    operation: str = typer.Argument(help="list, get, create, update, delete, or an action name."),
    resource: str = typer.Argument(help="Plural name of a declared resource."),
    ident: Optional[str] = typer.Argument(None, help="Record id."),
    nesting: Optional[list[str]] = typer.Option(
        None, "--in", help="Parent scope as PLURAL=ID; repeat for deeper nesting."
    ),
    field: Optional[list[str]] = typer.Option(
        None, "--field", "-F", help="Record field as KEY=VALUE (create/update)."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Extra data as KEY=VALUE (filters, path variables)."
    ),
) -> None:
    """Send an operation to the API and print the response body.

    Example::

        crude call list comments --in blogs=3 --param page=2
    """
    try:
        definition = resolve_definition_from_context(ctx)
        with HttpxTransport(
            timeout=definition.timeout, verify_ssl=definition.verify_ssl
        ) as transport:
            api = build_api(definition, transport)
            node = resolve_node(api, resource, nesting)
            response = dispatch(
                node, operation, ident, parse_pairs(field, "--field"), parse_pairs(param, "--param")
            )
            info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
            data = extract_response_data(response)
    except CrudeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if data is not None:
        format_response(data)
