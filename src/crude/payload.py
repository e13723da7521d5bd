"""Request payload shaping.

CRUD payloads namespace every field under the resource name, the way
Rails-style form parameters do: ``{"title": "hi"}`` for a ``post`` becomes
``{"post[title]": "hi"}``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


def wrap_keys(props: Optional[Mapping[str, Any]], name: str) -> dict[str, Any]:
    """Turn ``{"foo": "bar"}`` into ``{"<name>[foo]": "bar"}``."""
    return {f"{name}[{key}]": value for key, value in (props or {}).items()}


def merge(*sources: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge mappings left to right into a new dict; ``None`` entries are skipped.

    Later sources win on key collisions.
    """
    merged: dict[str, Any] = {}
    for source in sources:
        if source:
            merged.update(source)
    return merged
