"""Speed test transport.

The pipeline only needs three primitives: one latency sample, one timed
download, one timed upload. ``CloudflareSpeedProbe`` implements them against
the public speed.cloudflare.com endpoints with httpx.
"""

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING, Protocol

import httpx

from whyfi.errors import SpeedTestError
from whyfi.models import BandwidthSample

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("whyfi.speedtest.probe")

CLOUDFLARE_SPEEDTEST_URL = "https://speed.cloudflare.com"

_SERVER_DURATION_RE = re.compile(r"dur=([\d.]+)")


class SpeedProbe(Protocol):
    """Measurement primitives used by the pipeline."""

    async def latency(self) -> float:
        """One round trip, in milliseconds."""
        ...

    async def download(self, nbytes: int) -> BandwidthSample: ...

    async def upload(self, nbytes: int) -> BandwidthSample: ...


def server_duration_ms(headers: httpx.Headers) -> float:
    """Server-side processing time from the ``server-timing`` header, or 0."""
    match = _SERVER_DURATION_RE.search(headers.get("server-timing", ""))
    return float(match.group(1)) if match else 0.0


class CloudflareSpeedProbe:
    """Probe backed by ``/__down`` and ``/__up``.

    Latency is the request round trip of a zero-byte download minus the
    server processing time, so it approximates network RTT.
    """

    def __init__(
        self,
        base_url: str = CLOUDFLARE_SPEEDTEST_URL,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(30.0))

    async def __aenter__(self) -> CloudflareSpeedProbe:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def latency(self) -> float:
        started = time.perf_counter()
        resp = await self._request("GET", "/__down", params={"bytes": 0})
        elapsed_ms = (time.perf_counter() - started) * 1000
        return max(elapsed_ms - server_duration_ms(resp.headers), 0.0)

    async def download(self, nbytes: int) -> BandwidthSample:
        started = time.perf_counter()
        resp = await self._request("GET", "/__down", params={"bytes": nbytes})
        elapsed_ms = (time.perf_counter() - started) * 1000
        transfer_ms = max(elapsed_ms - server_duration_ms(resp.headers), 0.0)
        return BandwidthSample(bytes=len(resp.content), duration_ms=transfer_ms)

    async def upload(self, nbytes: int) -> BandwidthSample:
        payload = b"0" * nbytes
        started = time.perf_counter()
        resp = await self._request("POST", "/__up", content=payload)
        elapsed_ms = (time.perf_counter() - started) * 1000
        transfer_ms = max(elapsed_ms - server_duration_ms(resp.headers), 0.0)
        return BandwidthSample(bytes=nbytes, duration_ms=transfer_ms)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._client.request(method, f"{self._base_url}{path}", **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("Speed test HTTP %d on %s", exc.response.status_code, path)
            raise SpeedTestError(
                f"Speed test server returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Speed test request failed on %s: %s", path, exc)
            raise SpeedTestError(f"Speed test request failed: {exc}") from exc
        return resp
