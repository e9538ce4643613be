"""
Pytest Configuration

Shared fixtures for the suite: settings isolation from ``HTTPENVELOPE_*``
environment variables, an envelope factory, and the HTTPX mock transport
fixtures from :mod:`tests.fixtures.http_mocking`.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional

import pytest

from HttpEnvelope.response import ResponseEnvelope
from HttpEnvelope.settings import reset_settings_for_tests

from tests.fixtures.http_mocking import mock_api  # noqa: F401


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop HTTPENVELOPE_* variables and cached settings around every test."""
    for key in list(os.environ):
        if key.upper().startswith("HTTPENVELOPE_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings_for_tests()
    yield
    reset_settings_for_tests()


@pytest.fixture
def make_envelope() -> Callable[..., ResponseEnvelope]:
    """Factory building envelopes with sensible defaults."""

    def _make(
        *,
        content_type: Optional[str] = None,
        payload: Any = None,
        http_code: Any = 200,
        url: Optional[str] = "https://api.example.com/item/1234.json?sort=name",
        headers: Optional[Any] = None,
        request_id: str = "req-1",
        logger: Optional[logging.Logger] = None,
        **info: Any,
    ) -> ResponseEnvelope:
        header_pairs = list(headers or [])
        if content_type is not None:
            header_pairs.append(("Content-Type", content_type))
        return ResponseEnvelope(
            request_id,
            {"http_code": http_code, "url": url, **info},
            header_pairs,
            payload,
            logger=logger,
        )

    return _make
