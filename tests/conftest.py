"""Shared fixtures: isolated settings and a scripted transport."""

from __future__ import annotations

import pytest
from support import BASE_URL, ScriptedBackend

from adapters.http_client import ApiClient
from core.config import AppSettings


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url=BASE_URL,
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
def api(settings, backend) -> ApiClient:
    return ApiClient(settings, transport=backend.transport())
