"""Init command -- write a starter definition file.

Creates ``crude.json`` (or the path given with ``--path``) declaring the
base URL, the format suffix, and any resources passed with ``--resource``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from crude.output import error, success, suggest


def init_command(
    base_url: str = typer.Option(..., "--base-url", "-b", help="Base URL of the API."),
    format: str = typer.Option("json", "--format", help="Format suffix ('' to omit)."),
    resource: Optional[list[str]] = typer.Option(
        None, "--resource", "-r", help="Singular resource name to declare; repeatable."
    ),
    path: str = typer.Option("crude.json", "--path", help="Definition file to write."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a definition file for an API.

    Example::

        crude init --base-url https://example.com/api -r post -r comment
    """
    from crude.config import save_definition
    from crude.models import ApiDefinition, ResourceConfig

    target = Path(path)
    if target.exists() and not force:
        error(f"{target} already exists (use --force to overwrite)")
        raise typer.Exit(code=1)

    definition = ApiDefinition(
        base_url=base_url,
        format=format,
        resources=[ResourceConfig(name=name) for name in resource or []],
    )
    save_definition(definition, target)

    success(f"Wrote {target}")
    suggest("Declare nesting with \"belongs_to\", then try: crude resources")
