"""HTTP client for the interim gateway on localhost."""

from __future__ import annotations

import json
from typing import Any

import httpx

from ignition_entrypoint.client.errors import GatewayAPIError, GatewayConnectionError
from ignition_entrypoint.config.constants import LOCAL_GATEWAY_URL, POST_STEP_PATH


class GatewayClient:
    """Synchronous client for the status and commissioning endpoints."""

    def __init__(self, base_url: str = LOCAL_GATEWAY_URL, timeout: float = 5.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GatewayClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        try:
            detail = response.json().get("message", response.text)
        except (json.JSONDecodeError, AttributeError):
            detail = response.text
        raise GatewayAPIError(response.status_code, detail)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise GatewayConnectionError(
                f"Cannot connect to gateway at {self.base_url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise GatewayConnectionError(
                f"Request to {self.base_url} timed out: {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise GatewayConnectionError(
                f"Transport error talking to {self.base_url}: {exc}"
            ) from exc
        return self._handle_response(response)

    def status_text(self, path: str, *, timeout: float | None = None) -> str:
        """Return the body of a status endpoint."""
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        return self.request("GET", path, **kwargs).text

    def post_step(self, payload: dict[str, Any]) -> httpx.Response:
        """Submit one commissioning wizard step."""
        return self.request("POST", POST_STEP_PATH, json=payload)
