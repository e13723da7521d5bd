"""Ready-made transports for :class:`~crude.root.Api`.

A transport is any callable ``(url, method, data)``. The API root calls it
exactly once per operation and hands its return value back unchanged, so
the transport alone decides the concurrency contract:

* :class:`HttpxTransport` -- blocking, backed by :class:`httpx.Client`;
  returns the :class:`httpx.Response`.
* :class:`AsyncHttpxTransport` -- backed by :class:`httpx.AsyncClient`;
  calling it returns a coroutine, which resource operations pass through
  for the caller to await.
* :class:`DryRunTransport` -- sends nothing; records and reports each call
  as a :class:`~crude.models.PreparedRequest`.

The httpx transports send the payload as query parameters for ``get`` /
``delete`` and form-encoded for every other method, which matches the
``post[title]`` style keys that ``create`` and ``update`` produce. They do
not retry.

Example::

    with HttpxTransport(timeout=10) as transport:
        api = crude.api("https://example.com", "json", transport)
        response = api.resources("post").get(5)
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from crude.exceptions import AuthError, NotFoundError, ServerError, TransportError
from crude.models import PreparedRequest
from crude.output import OutputManager, get_output

QUERY_METHODS = frozenset({"get", "delete", "head", "options"})


def request_kwargs(method: str, data: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Return the httpx keyword arguments carrying *data* for *method*."""
    if not data:
        return {}
    if method.lower() in QUERY_METHODS:
        return {"params": data}
    return {"data": data}


def map_response_error(response: httpx.Response) -> None:
    """Raise a typed exception for error HTTP status codes.

    Raises:
        AuthError: On 401 / 403.
        NotFoundError: On 404.
        ServerError: On any other status >= 400.
    """
    status = response.status_code
    if status < 400:
        return

    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

    if status in (401, 403):
        raise AuthError(full_msg)
    if status == 404:
        raise NotFoundError(full_msg)
    raise ServerError(full_msg)


def extract_response_data(response: httpx.Response) -> Any:
    """Return the JSON-decoded body, the raw text, or ``None`` for an empty body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """Blocking transport over :class:`httpx.Client`.

    Args:
        client: Client to send requests with. When omitted, one is created
            on first use and closed by :meth:`close`.
        timeout: Request timeout in seconds for a created client.
        verify_ssl: Verify SSL certificates for a created client.
        headers: Extra headers for a created client.
        raise_for_status: Map HTTP error statuses to crude exceptions.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = 30,
        verify_ssl: bool = True,
        headers: Optional[dict[str, str]] = None,
        raise_for_status: bool = True,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._raise_for_status = raise_for_status

    def __enter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout,
                verify=self._verify_ssl,
                headers=self._headers,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def __call__(self, url: str, method: str, data: Optional[dict[str, Any]] = None) -> httpx.Response:
        """Send one request and return the response.

        Raises:
            TransportError: On network / timeout errors.
            AuthError, NotFoundError, ServerError: On HTTP error statuses,
                when ``raise_for_status`` is enabled.
        """
        client = self._ensure_client()
        try:
            response = client.request(method.upper(), url, **request_kwargs(method, data))
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise TransportError(f"{method.upper()} {url} failed: {exc}") from exc
        if self._raise_for_status:
            map_response_error(response)
        return response


class AsyncHttpxTransport:
    """Non-blocking transport over :class:`httpx.AsyncClient`.

    Same arguments as :class:`HttpxTransport`. Use as an async context
    manager, or call :meth:`aclose` when done.

    Example::

        async with AsyncHttpxTransport() as transport:
            api = crude.api("https://example.com", "json", transport)
            response = await api.resources("post").list()
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30,
        verify_ssl: bool = True,
        headers: Optional[dict[str, str]] = None,
        raise_for_status: bool = True,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._raise_for_status = raise_for_status

    async def __aenter__(self) -> AsyncHttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify_ssl,
                headers=self._headers,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def __call__(self, url: str, method: str, data: Optional[dict[str, Any]] = None) -> httpx.Response:
        client = self._ensure_client()
        try:
            response = await client.request(method.upper(), url, **request_kwargs(method, data))
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise TransportError(f"{method.upper()} {url} failed: {exc}") from exc
        if self._raise_for_status:
            map_response_error(response)
        return response


class DryRunTransport:
    """Transport that sends nothing.

    Every call is appended to :attr:`requests`, reported on stderr through
    the output manager, and returned as a
    :class:`~crude.models.PreparedRequest`.

    Args:
        output: Output manager to report through; defaults to the global one.
        report: Set to ``False`` to record silently.
    """

    def __init__(self, output: Optional[OutputManager] = None, report: bool = True) -> None:
        self._output = output
        self._report = report
        self.requests: list[PreparedRequest] = []

    def __call__(self, url: str, method: str, data: Optional[dict[str, Any]] = None) -> PreparedRequest:
        prepared = PreparedRequest(url=url, method=method, data=dict(data or {}))
        self.requests.append(prepared)
        if self._report:
            output = self._output or get_output()
            output.info(f"[dry-run] {method.upper()} {url}")
            if prepared.data:
                output.info(f"  Data: {json.dumps(prepared.data, indent=2, default=str)}")
        return prepared

    @property
    def last(self) -> Optional[PreparedRequest]:
        """The most recent request, or ``None``."""
        return self.requests[-1] if self.requests else None
