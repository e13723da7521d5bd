"""Pydantic models shared across crude.

**Definition models** -- an API declared as JSON for the ``crude`` command
(see :mod:`crude.config`):
    :class:`PluralRuleConfig`, :class:`ActionConfig`,
    :class:`ResourceConfig`, and :class:`ApiDefinition`.

**Request models**:
    :class:`PreparedRequest`, the ``(url, method, data)`` triple a
    transport receives, as recorded by
    :class:`~crude.transport.DryRunTransport`.

All models use Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class PluralRuleConfig(BaseModel):
    """A custom pluralization rule appended after the built-in ones.

    Example::

        PluralRuleConfig(pattern="person", replacement="people", regex=False)
        PluralRuleConfig(pattern="(octop)us$", replacement=r"\\1i")
    """

    pattern: str = Field(description="Exact word, or regular expression if regex is true")
    replacement: str = Field(description="Plural word, or substitution with \\1 group references")
    regex: bool = Field(default=True, description="Treat pattern as a regular expression")
    ignore_case: bool = Field(default=True, description="Case-insensitive regex matching")


class ActionConfig(BaseModel):
    """A custom member or collection action of a resource."""

    name: str = Field(description="Method name of the action")
    path: Optional[str] = Field(
        default=None, description="Path segment; defaults to the action name"
    )
    method: str = Field(default="get", description="HTTP method")

    @field_validator("method")
    @classmethod
    def _lowercase_method(cls, value: str) -> str:
        return value.lower()


class ResourceConfig(BaseModel):
    """A declared resource and its relations."""

    name: str = Field(description="Singular resource name")
    plural: Optional[str] = Field(
        default=None, description="Plural name; derived from name when omitted"
    )
    belongs_to: list[str] = Field(
        default_factory=list,
        description="Plural names of the resources this one can be nested under",
    )
    member_actions: list[ActionConfig] = Field(default_factory=list)
    collection_actions: list[ActionConfig] = Field(default_factory=list)


class ApiDefinition(BaseModel):
    """A whole API, as stored in ``crude.json``.

    Loaded by :func:`~crude.config.load_definition` and turned into a live
    :class:`~crude.root.Api` by :func:`~crude.config.build_api`.
    """

    base_url: str = Field(description="Base URL every request path is appended to")
    format: str = Field(default="json", description="Format suffix; empty to omit")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    plural_rules: list[PluralRuleConfig] = Field(default_factory=list)
    resources: list[ResourceConfig] = Field(default_factory=list)


class PreparedRequest(BaseModel):
    """The arguments of one transport call."""

    url: str
    method: str
    data: dict[str, Any] = Field(default_factory=dict)
