"""Tests for the commissioning wizard driver."""

from __future__ import annotations

import hashlib
import json

import httpx
import respx

from ignition_entrypoint.client.commissioning import (
    CommissioningClient,
    hash_password,
    make_salt,
)
from ignition_entrypoint.client.gateway import GatewayClient

POST_STEP_URL = "http://localhost:8088/post-step"


def _bodies(route) -> list[dict]:
    return [json.loads(call.request.content) for call in route.calls]


class TestPasswordHash:
    def test_salt_from_epoch_second(self):
        salt = make_salt(lambda: 1700000000.75)
        assert salt == hashlib.sha256(b"1700000000").hexdigest()[:8]
        assert len(salt) == 8

    def test_hash_format(self):
        expected = hashlib.sha256(b"secretabcd1234").hexdigest()
        assert hash_password("secret", "abcd1234") == f"[abcd1234]{expected}"


class TestCommission:
    @respx.mock
    def test_steps_in_order(self, console):
        route = respx.post(POST_STEP_URL).mock(return_value=httpx.Response(200))
        with GatewayClient() as client:
            results = CommissioningClient(client, console=console, now=lambda: 1700000000).commission(
                username="admin", password="password",
                http_port=8088, https_port=8043, use_ssl=False, start=True,
            )
        assert [r.step for r in results] == ["license", "authentication", "connections", "finished"]
        assert all(r.ok for r in results)

        bodies = _bodies(route)
        assert bodies[0] == {"id": "license", "step": "eula", "data": {"accept": True}}
        salt = make_salt(lambda: 1700000000)
        assert bodies[1] == {
            "id": "authentication",
            "step": "authSetup",
            "data": {"username": "admin", "password": hash_password("password", salt)},
        }
        assert bodies[2] == {
            "id": "connections",
            "step": "connections",
            "data": {"http": 8088, "https": 8043, "useSSL": False},
        }
        assert bodies[3] == {"id": "finished", "data": {"start": True}}

    @respx.mock
    def test_no_start_when_restoring(self, console):
        route = respx.post(POST_STEP_URL).mock(return_value=httpx.Response(200))
        with GatewayClient() as client:
            CommissioningClient(client, console=console).commission(
                username="admin", password="pw",
                http_port=8088, https_port=8043, use_ssl=True, start=False,
            )
        bodies = _bodies(route)
        assert bodies[2]["data"]["useSSL"] is True
        assert bodies[3]["data"] == {"start": False}

    @respx.mock
    def test_failed_step_does_not_stop_sequence(self, console):
        route = respx.post(POST_STEP_URL).mock(side_effect=[
            httpx.Response(200),
            httpx.Response(500, json={"message": "boom"}),
            httpx.ConnectError("refused"),
            httpx.Response(200),
        ])
        with GatewayClient() as client:
            results = CommissioningClient(client, console=console).commission(
                username="admin", password="pw",
                http_port=8088, https_port=8043, use_ssl=False, start=True,
            )
        assert route.call_count == 4
        assert [r.ok for r in results] == [True, False, False, True]
        assert "boom" in results[1].error
        assert results[0].status_code == 200
        out = console.export_text()
        assert "commissioning step 'authentication' failed" in out
        assert "commissioning step 'connections' failed" in out
