"""Shared test fixtures for crude.

Provides a recording transport, ready-declared APIs, isolated definition
environments, and output state management. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from crude.output import OutputFormat, OutputManager, reset_output, set_output
from crude.root import Api, api


BASE_URL = "http://example.com/api"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Transport fixtures
# ---------------------------------------------------------------------------


class RecordingTransport:
    """Transport that records every ``(url, method, data)`` call."""

    def __init__(self, result: Any = "sent") -> None:
        self.result = result
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def __call__(self, url: str, method: str, data: dict[str, Any]) -> Any:
        self.calls.append((url, method, data))
        return self.result

    @property
    def last(self) -> Optional[tuple[str, str, dict[str, Any]]]:
        return self.calls[-1] if self.calls else None


@pytest.fixture
def transport() -> RecordingTransport:
    """A fresh recording transport."""
    return RecordingTransport()


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def root(transport: RecordingTransport) -> Api:
    """An API at ``http://example.com/api`` with the ``json`` format."""
    return api(BASE_URL, "json", transport)


@pytest.fixture
def blog_api(root: Api) -> Api:
    """An API declaring blogs, posts (under blogs) and comments (under blogs and posts)."""
    blogs = root.resources("blog")
    posts = root.resources("post").belongs_to(blogs)
    root.resources("comment").belongs_to(blogs).belongs_to(posts)
    return root


# ---------------------------------------------------------------------------
# Definition fixtures
# ---------------------------------------------------------------------------


SAMPLE_DEFINITION: dict[str, Any] = {
    "base_url": BASE_URL,
    "format": "json",
    "resources": [
        {"name": "blog"},
        {
            "name": "post",
            "belongs_to": ["blogs"],
            "member_actions": [{"name": "publish", "method": "post"}],
            "collection_actions": [{"name": "recent"}],
        },
        {"name": "comment", "belongs_to": ["blogs", "posts"]},
    ],
}


@pytest.fixture
def isolated_definition(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate definition lookup to a temporary directory.

    Clears all CRUDE_* environment variables and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in ["CRUDE_DEFINITION", "CRUDE_BASE_URL", "CRUDE_FORMAT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def definition_file(isolated_definition: Path) -> Path:
    """A ``crude.json`` holding :data:`SAMPLE_DEFINITION` in the working directory."""
    path = isolated_definition / "crude.json"
    path.write_text(json.dumps(SAMPLE_DEFINITION))
    return path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()
