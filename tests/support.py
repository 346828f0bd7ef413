"""Test helpers: a scripted httpx backend and unsigned JWT builder."""

from __future__ import annotations

import base64
import json
from typing import Any

import httpx

BASE_URL = "http://portal.test/api/v1"


class ScriptedBackend:
    """Fake backend for `httpx.MockTransport`.

    Responses are queued in order; every request is recorded so tests can
    assert on what went over the wire.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response] = []

    def queue(self, status_code: int, body: Any = None) -> "ScriptedBackend":
        if body is None:
            self._responses.append(httpx.Response(status_code))
        else:
            self._responses.append(httpx.Response(status_code, json=body))
        return self

    def queue_raw(self, status_code: int, text: str) -> "ScriptedBackend":
        """Queue a body verbatim (e.g. JSON with `NaN`, which `json=` refuses)."""

        headers = {"content-type": "application/json"}
        self._responses.append(httpx.Response(status_code, content=text.encode("utf-8"), headers=headers))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._responses.pop(0)

    @property
    def bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/api/v1/") for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_token(payload: dict[str, Any]) -> str:
    def segment(data: dict[str, Any]) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{segment({'alg': 'none', 'typ': 'JWT'})}.{segment(payload)}.signature"
