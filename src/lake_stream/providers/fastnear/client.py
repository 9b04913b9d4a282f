"""
HTTP client for the FastNear data API.

Endpoints
---------
All paths live under ``/v0``:

- ``block/{h}``: the whole height (block and shards), ``null`` if skipped
- ``block/{h}/headers``: the block part only, ``null`` if skipped
- ``block/{h}/shard/{id}``: one shard
- ``block_opt/{h}``: the whole height, optimistic finality
- ``last_block/{final|optimistic}``: the latest height
- ``first_block``: the earliest height the service holds

Redirects
---------
The service answers archival heights with a redirect to another host.
httpx drops the Authorization header when a redirect crosses hosts, so
redirects are followed by hand and the token is sent on every hop.

Error Mapping
-------------
- 200: the body
- 404 with type ``BLOCK_DOES_NOT_EXIST`` or ``BLOCK_HEIGHT_TOO_HIGH``:
  `ObjectNotFoundError`, the height is not produced yet
- any other status, or a transport failure: `TransientFetchError`
"""

from __future__ import annotations

import logging
from typing import Any, Final

import httpx

from lake_stream.config import FastNearConfig
from lake_stream.types import FastNearError, ObjectNotFoundError, TransientFetchError

logger = logging.getLogger(__name__)

MAX_REDIRECTS: Final = 10
"""Redirect hops followed before giving up on a request."""

NOT_FOUND_ERROR_TYPES: Final = frozenset({"BLOCK_DOES_NOT_EXIST", "BLOCK_HEIGHT_TOO_HIGH"})
"""404 error types meaning the height simply is not there yet."""


class FastNearClient:
    """Fetches raw JSON documents from one FastNear endpoint."""

    def __init__(
        self,
        endpoint: str,
        authorization_token: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Create a client.

        Args:
            endpoint: Base URL, e.g. ``https://mainnet.neardata.xyz``.
            authorization_token: Optional bearer token.
            timeout: Per-request timeout in seconds.
            transport: Custom httpx transport, mostly for tests.
        """
        headers = {}
        if authorization_token:
            headers["Authorization"] = f"Bearer {authorization_token}"

        self._endpoint = endpoint.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._endpoint,
            headers=headers,
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: FastNearConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> FastNearClient:
        return cls(
            config.endpoint,
            config.authorization_token,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def __aenter__(self) -> FastNearClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    async def fetch(self, path: str) -> bytes:
        """
        GET a path and return the raw body of the final 200 response.

        The body may be the JSON literal ``null``; interpreting it is up to
        the caller.

        Raises:
            ObjectNotFoundError: If the height does not exist yet.
            TransientFetchError: On any other failure.
        """
        url: httpx.URL | str = path
        for _ in range(MAX_REDIRECTS):
            try:
                response = await self._http.get(url)
            except httpx.RequestError as exc:
                raise TransientFetchError(path, f"{type(exc).__name__}: {exc}") from exc

            if httpx.codes.is_redirect(response.status_code):
                location = response.headers.get("location")
                if not location:
                    raise FastNearError(
                        path, status=response.status_code, detail="redirect without location"
                    )
                url = response.url.join(location)
                logger.debug("Following redirect for %s to %s", path, url)
                continue

            return self._handle_response(path, response)

        raise TransientFetchError(path, f"exceeded {MAX_REDIRECTS} redirects")

    def _handle_response(self, path: str, response: httpx.Response) -> bytes:
        status = response.status_code
        if status == httpx.codes.OK:
            return response.content

        if status == httpx.codes.NOT_FOUND:
            error_type, error = _parse_error_body(response)
            if error_type in NOT_FOUND_ERROR_TYPES:
                raise ObjectNotFoundError(path, error)
            raise FastNearError(path, status=status, error_type=error_type, detail=error)

        logger.warning("FastNear returned HTTP %d for %s", status, path)
        raise FastNearError(path, status=status, detail=response.text)


def _parse_error_body(response: httpx.Response) -> tuple[str | None, str | None]:
    """Extract ``type`` and ``error`` from a JSON error body, if it is one."""
    try:
        body = response.json()
    except ValueError:
        return None, response.text
    if not isinstance(body, dict):
        return None, response.text
    return body.get("type"), body.get("error")
