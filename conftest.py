import json
import uuid
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from services.common.dapr_client import DaprClient
from services.common.dependencies import get_dapr


class FakeSidecar:
    """In-memory stand-in for the Dapr HTTP API.

    Values are kept exactly as the sidecar would return them (JSON bytes),
    so tests can plant unreadable records. Building blocks listed in
    `failing` answer 500; `unreachable` makes every call a connection error.
    """

    def __init__(self):
        self.state: dict[tuple[str, str], bytes] = {}
        self.published: list[tuple[str, str, dict]] = []
        self.bindings: list[tuple[str, dict]] = []
        self.failing: set[str] = set()
        self.unreachable = False
        self.subscribers: dict[str, Callable[[dict], object]] = {}

    def client(self) -> DaprClient:
        return DaprClient("http://sidecar.test", transport=httpx.MockTransport(self.handle))

    def cloud_event(self, pubsub: str, topic: str, data: dict) -> dict:
        return {
            "specversion": "1.0",
            "id": str(uuid.uuid4()),
            "source": "orders-service",
            "type": "com.dapr.event.sent",
            "pubsubname": pubsub,
            "topic": topic,
            "datacontenttype": "application/json",
            "data": data,
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.unreachable:
            raise httpx.ConnectError("sidecar unreachable", request=request)

        _, kind, *rest = request.url.path.strip("/").split("/")
        if kind in self.failing:
            return httpx.Response(500, json={"errorCode": "ERR_FAKE", "message": f"{kind} failed"})

        if kind == "state":
            store, *key = rest
            if request.method == "POST":
                for item in json.loads(request.content):
                    self.state[(store, item["key"])] = json.dumps(item["value"]).encode()
                return httpx.Response(204)
            value = self.state.get((store, "/".join(key)))
            if value is None:
                return httpx.Response(204)
            return httpx.Response(200, content=value, headers={"content-type": "application/json"})

        if kind == "publish":
            pubsub, topic = rest
            data = json.loads(request.content)
            self.published.append((pubsub, topic, data))
            deliver = self.subscribers.get(topic)
            if deliver is not None:
                deliver(self.cloud_event(pubsub, topic, data))
            return httpx.Response(204)

        if kind == "bindings":
            self.bindings.append((rest[0], json.loads(request.content)))
            return httpx.Response(204)

        if kind == "metadata":
            return httpx.Response(200, json={"id": "test-app", "components": []})

        return httpx.Response(404)


@pytest.fixture
def sidecar() -> FakeSidecar:
    return FakeSidecar()


@pytest.fixture
def dapr(sidecar):
    client = sidecar.client()
    yield client
    client.close()


def _client_for(app, dapr):
    app.dependency_overrides[get_dapr] = lambda: dapr
    return TestClient(app)


@pytest.fixture
def orders_client(dapr):
    from services.orders_service.app.main import app

    yield _client_for(app, dapr)
    app.dependency_overrides.clear()


@pytest.fixture
def inventory_client(dapr):
    from services.inventory_service.app.main import app

    yield _client_for(app, dapr)
    app.dependency_overrides.clear()
