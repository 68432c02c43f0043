"""Tests for the host RPC client against an httpx mock transport."""

import httpx
import pytest

from whyfi.errors import AcquisitionError
from whyfi.host import HostRpcClient

pytestmark = pytest.mark.anyio

METRICS = {
    "wifi": {
        "connected": True,
        "ssid": "HomeNet",
        "frequency_band": "2.4 GHz",
        "channel": "ch 6, 2.4 GHz, 20 MHz",
        "link_rate_mbps": 144.0,
        "signal_dbm": -67,
        "noise_dbm": -95,
    },
    "router_ip": "10.0.0.1",
    "router_ping": {"latency_ms": 3.1, "jitter_ms": 0.8, "packet_loss_percent": 0.0},
    "internet_ping": None,
    "dns": {"servers": ["10.0.0.1"], "lookup_latency_ms": 31.0},
}

SCAN = {
    "wifi": METRICS["wifi"],
    "networks": [
        {"ssid": "Cafe", "channel": 6, "frequency_ghz": 2.4},
        {"ssid": "Upstairs", "channel": 6, "frequency_ghz": 2.4},
        {"ssid": "Office", "channel": 8, "frequency_ghz": 2.4},
    ],
}


def _client(handler) -> HostRpcClient:
    transport = httpx.MockTransport(handler)
    return HostRpcClient("http://host.test", client=httpx.AsyncClient(transport=transport))


def _routes(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/get_network_metrics":
        return httpx.Response(200, json=METRICS)
    if request.url.path == "/scan_nearby_networks":
        return httpx.Response(200, json=SCAN)
    return httpx.Response(404)


async def test_get_network_metrics():
    snapshot = await _client(_routes).get_network_metrics()
    assert snapshot.wifi.ssid == "HomeNet"
    assert snapshot.wifi.signal_dbm == -67
    assert snapshot.router_ping.latency_ms == 3.1
    assert snapshot.internet_ping is None


async def test_check_interference_analyzes_scan():
    analysis = await _client(_routes).check_interference()
    assert analysis.current_channel == 6
    assert analysis.current_frequency_ghz == 2.4
    assert analysis.snr_db == 28
    assert analysis.same_channel_count == 2
    assert analysis.overlapping_count == 1
    assert analysis.interference_level == "Moderate"
    assert [n.ssid for n in analysis.nearby_networks] == ["Cafe", "Upstairs", "Office"]


async def test_http_error_is_acquisition_error():
    client = _client(lambda request: httpx.Response(500, text="internal"))
    with pytest.raises(AcquisitionError, match="HTTP 500"):
        await client.get_network_metrics()


async def test_transport_error_is_acquisition_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AcquisitionError, match="unreachable"):
        await _client(handler).get_network_metrics()


async def test_invalid_json_is_acquisition_error():
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(AcquisitionError, match="Invalid JSON"):
        await client.get_network_metrics()


async def test_malformed_payload_is_acquisition_error():
    client = _client(lambda request: httpx.Response(200, json={"wifi": {"connected": "maybe"}}))
    with pytest.raises(AcquisitionError, match="Malformed"):
        await client.get_network_metrics()


async def test_context_manager_leaves_injected_client_open():
    http = httpx.AsyncClient(transport=httpx.MockTransport(_routes))
    async with HostRpcClient("http://host.test", client=http) as host:
        await host.get_network_metrics()
    assert not http.is_closed
    await http.aclose()
