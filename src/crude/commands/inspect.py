"""Inspect commands -- read-only views of names and declarations.

``crude pluralize`` shows how resource names are pluralized (including
custom rules from the definition, when one is found). ``crude resources``
lists the declared resources with their relations and actions.
"""

from __future__ import annotations

import typer

from crude.config import build_pluralizer, find_definition, load_definition
from crude.exceptions import ConfigError, CrudeError
from crude.inflection import Pluralizer
from crude.output import debug, error, print_data, print_table
from crude.transport import DryRunTransport


def pluralize_command(
    ctx: typer.Context,
    words: list[str] = typer.Argument(help="Singular names to pluralize."),
) -> None:
    """Print the plural of each word, one per line.

    Example::

        crude pluralize post child city
    """
    obj = ctx.obj or {}
    try:
        path = find_definition(obj.get("definition"))
    except ConfigError:
        debug("No definition found; using built-in plural rules")
        pluralizer = Pluralizer()
    else:
        try:
            pluralizer = build_pluralizer(load_definition(path))
        except CrudeError as exc:
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None

    for word in words:
        print_data(pluralizer.pluralize(word))


def resources_command(ctx: typer.Context) -> None:
    """List declared resources, their parents, and their actions.

    Example::

        crude resources --json
    """
    from crude.commands.request import load_api

    try:
        api = load_api(ctx, DryRunTransport(report=False))
    except CrudeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows: list[list[str]] = []
    for plural in api:
        node = api[plural]
        parents = sorted({parent.plural_name for parent in node.parents.values()})
        actions = [
            f"{name} ({'member' if action.member else 'collection'} {action.method})"
            for name, action in node.actions.items()
        ]
        rows.append([plural, node.name, ", ".join(parents), ", ".join(actions)])

    print_table(["resource", "name", "belongs_to", "actions"], rows, title=api.base_url)
