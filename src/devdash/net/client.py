from __future__ import annotations

import httpx

from ..util.log import Log

log = Log.create({"service": "net"})

DEFAULT_TIMEOUT = 5.0


class TransportError(RuntimeError):
    """Raised when an HTTP request does not complete successfully."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HttpClient:
    """Minimal GET client over httpx."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            transport=transport,
            timeout=timeout,
            follow_redirects=True,
            headers={"accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, timeout: float | None = None) -> bytes:
        try:
            response = await self._client.get(url, timeout=timeout if timeout is not None else self.timeout)
        except httpx.TimeoutException as e:
            log.warn("request timed out", {"url": url})
            raise TransportError(url, "request timed out") from e
        except httpx.HTTPError as e:
            log.warn("request failed", {"url": url, "error": str(e)})
            raise TransportError(url, str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise TransportError(
                url,
                f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                status_code=response.status_code,
            )
        return response.content
