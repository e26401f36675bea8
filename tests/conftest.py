"""Shared fakes for the IP-echo services and the Cloudflare API.

Both are served through httpx.MockTransport so the real clients (httpx and the
Cloudflare SDK) build and parse every request.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from cf_ddns.provider.cloudflare import CloudflareProvider

API_PREFIX = "/client/v4"


def envelope(result, result_info: bool = True) -> dict:
    body = {"result": result, "success": True, "errors": [], "messages": []}
    if result_info:
        count = len(result)
        body["result_info"] = {
            "page": 1,
            "per_page": 20,
            "count": count,
            "total_count": count,
            "total_pages": 1,
        }
    return body


def make_record(
    record_id: str = "rec-1",
    zone_id: str = "zone-1",
    name: str = "home.example.com",
    content: str = "203.0.113.9",
) -> dict:
    return {
        "id": record_id,
        "zone_id": zone_id,
        "zone_name": "example.com",
        "name": name,
        "type": "A",
        "content": content,
        "proxiable": True,
        "proxied": True,
        "ttl": 1,
        "locked": False,
        "meta": {
            "auto_added": False,
            "managed_by_apps": False,
            "managed_by_argo_tunnel": False,
            "source": "primary",
        },
        "created_on": "2024-01-01T00:00:00Z",
        "modified_on": "2024-01-01T00:00:00Z",
    }


# =============================================================================
# Fake Cloudflare API
# =============================================================================


class FakeCloudflareAPI:
    """In-memory Cloudflare v4 API with call tracking."""

    def __init__(
        self,
        zones: Optional[List[dict]] = None,
        records: Optional[List[dict]] = None,
        zone_status: int = 200,
        record_status: int = 200,
        update_status: int = 200,
    ):
        self.zones = [{"id": "zone-1", "name": "example.com"}] if zones is None else zones
        self.records = [make_record()] if records is None else records
        self.zone_status = zone_status
        self.record_status = record_status
        self.update_status = update_status
        self.requests: List[httpx.Request] = []

    @property
    def update_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        assert path.startswith(API_PREFIX), path
        parts = path[len(API_PREFIX) :].strip("/").split("/")

        if request.method == "GET" and parts == ["zones"]:
            if self.zone_status >= 400:
                return self._error(self.zone_status)
            return httpx.Response(200, json=envelope(self.zones))

        if request.method == "GET" and len(parts) == 3 and parts[2] == "dns_records":
            if self.record_status >= 400:
                return self._error(self.record_status)
            return httpx.Response(200, json=envelope(self.records))

        if request.method == "PUT" and len(parts) == 4 and parts[2] == "dns_records":
            if self.update_status >= 400:
                return self._error(self.update_status)
            record = make_record(record_id=parts[3], zone_id=parts[1])
            return httpx.Response(200, json=envelope(record, result_info=False))

        return httpx.Response(404, json={"success": False, "errors": [], "messages": []})

    @staticmethod
    def _error(status: int) -> httpx.Response:
        return httpx.Response(
            status,
            json={
                "result": None,
                "success": False,
                "errors": [{"code": 9109, "message": "Request rejected"}],
                "messages": [],
            },
        )

    def provider(self) -> CloudflareProvider:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return CloudflareProvider("test-token", timeout=2.0, http_client=client)


# =============================================================================
# Fake IP-echo services
# =============================================================================

# A behaviour is either a body to return with 200, an (status, body) tuple,
# "timeout" to raise a timeout, or "hang" to never answer.
Behaviour = Union[str, tuple]


class FakeEchoServices:
    """IP-echo services keyed by URL, with call and cancellation tracking.

    Requests are matched on host, so every URL needs a distinct host.
    """

    def __init__(self, behaviours: Dict[str, Behaviour]):
        self.behaviours = behaviours
        self.calls: List[str] = []
        self.cancelled: List[str] = []

    @property
    def urls(self) -> List[str]:
        return list(self.behaviours)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        url = next(u for u in self.behaviours if httpx.URL(u).host == request.url.host)
        self.calls.append(url)
        behaviour = self.behaviours[url]

        if behaviour == "timeout":
            raise httpx.ConnectTimeout("timed out", request=request)
        if behaviour == "hang":
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                self.cancelled.append(url)
                raise
        if isinstance(behaviour, tuple):
            status, body = behaviour
            return httpx.Response(status, text=body)
        return httpx.Response(200, text=behaviour)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def cloudflare_api() -> Callable[..., FakeCloudflareAPI]:
    return FakeCloudflareAPI


@pytest.fixture
def echo_services() -> Callable[..., FakeEchoServices]:
    return FakeEchoServices


@pytest.fixture
def record_factory() -> Callable[..., dict]:
    return make_record
