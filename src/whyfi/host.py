"""Host RPC client - the platform side of the metrics boundary.

The host (a small local service with OS-level access) exposes two read-only
operations over HTTP:

- ``GET /get_network_metrics`` → MetricSnapshot JSON
- ``GET /scan_nearby_networks`` → ``{"wifi": {...}, "networks": [...]}``

The scan is analyzed locally, so interference rules live in one place.
Any transport, HTTP status or decoding failure becomes AcquisitionError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
import pydantic

from whyfi.errors import AcquisitionError
from whyfi.interference import analyze_interference
from whyfi.models import InterferenceAnalysis, MetricSnapshot, NearbyScan

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("whyfi.host")

M = TypeVar("M", bound=pydantic.BaseModel)

DEFAULT_HOST_URL = "http://127.0.0.1:7878"
REQUEST_TIMEOUT_SEC = 30.0


class HostRpcClient:
    """MetricsSource backed by the host's HTTP endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_HOST_URL,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SEC)

    async def __aenter__(self) -> HostRpcClient:
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

    async def get_network_metrics(self) -> MetricSnapshot:
        data = await self._get("/get_network_metrics")
        return self._decode(MetricSnapshot, data, "get_network_metrics")

    async def scan_nearby_networks(self) -> NearbyScan:
        data = await self._get("/scan_nearby_networks")
        return self._decode(NearbyScan, data, "scan_nearby_networks")

    async def check_interference(self) -> InterferenceAnalysis:
        scan = await self.scan_nearby_networks()
        return analyze_interference(scan.wifi, scan.networks)

    async def _get(self, path: str) -> Any:
        try:
            resp = await self._client.get(f"{self._base_url}{path}")
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Host HTTP %d on %s: %s",
                exc.response.status_code,
                path,
                exc.response.text[:200],
            )
            raise AcquisitionError(
                f"Host returned HTTP {exc.response.status_code} for {path}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Host request failed on %s: %s", path, exc)
            raise AcquisitionError(f"Host unreachable: {exc}") from exc
        except ValueError as exc:
            logger.warning("Host sent invalid JSON on %s", path)
            raise AcquisitionError(f"Invalid JSON from host for {path}") from exc

    @staticmethod
    def _decode(model: type[M], data: Any, operation: str) -> M:
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as exc:
            logger.warning("Malformed %s payload: %s", operation, exc)
            raise AcquisitionError(f"Malformed {operation} response") from exc
