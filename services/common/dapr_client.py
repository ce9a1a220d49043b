"""Thin synchronous client for the Dapr sidecar HTTP API.

Only the building blocks the services use are covered: state, pub/sub,
output bindings and the metadata endpoint. Delivery, retries and storage
all belong to the sidecar; this client just maps calls onto HTTP and turns
any failure into a DaprError.
"""

import os
from typing import Any
from urllib.parse import quote

import httpx

API_VERSION = "v1.0"


def dapr_base_url() -> str:
    endpoint = os.getenv("DAPR_HTTP_ENDPOINT")
    if endpoint:
        return endpoint.rstrip("/")
    host = os.getenv("DAPR_HOST", "127.0.0.1")
    port = os.getenv("DAPR_HTTP_PORT", "3500")
    return f"http://{host}:{port}"


class DaprError(RuntimeError):
    def __init__(self, operation: str, status_code: int | None = None, detail: str = ""):
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        msg = f"dapr {operation} failed"
        if status_code is not None:
            msg += f" with status {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class DaprClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {}
        token = api_token or os.getenv("DAPR_API_TOKEN")
        if token:
            headers["dapr-api-token"] = token
        self.base_url = base_url or dapr_base_url()
        self._http = httpx.Client(base_url=self.base_url, headers=headers, transport=transport)

    def __enter__(self) -> "DaprClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, operation: str, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = self._http.request(method, f"/{API_VERSION}{path}", **kwargs)
        except httpx.HTTPError as e:
            raise DaprError(operation, detail=repr(e)) from e

        if resp.status_code >= 400:
            raise DaprError(operation, resp.status_code, resp.text)
        return resp

    def save_state(self, store: str, key: str, value: Any) -> None:
        self._request("save_state", "POST", f"/state/{store}", json=[{"key": key, "value": value}])

    def get_state(self, store: str, key: str) -> bytes | None:
        """Return the raw stored value, or None when the key has no value."""
        # Keys are free-form; keep "/", "?" and "#" inside the last path segment.
        resp = self._request("get_state", "GET", f"/state/{store}/{quote(key, safe='')}")
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.content

    def publish_event(self, pubsub: str, topic: str, data: dict) -> None:
        self._request("publish_event", "POST", f"/publish/{pubsub}/{topic}", json=data)

    def invoke_binding(
        self, name: str, operation: str, data: Any = None, metadata: dict[str, str] | None = None
    ) -> bytes:
        body = {"operation": operation, "data": data, "metadata": metadata or {}}
        return self._request("invoke_binding", "POST", f"/bindings/{name}", json=body).content

    def get_metadata(self) -> dict:
        return self._request("get_metadata", "GET", "/metadata").json()
