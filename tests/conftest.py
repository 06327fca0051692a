"""
Pytest configuration and shared fixtures for hanami_action tests.
"""

from collections.abc import Callable
from typing import Any

import pytest


@pytest.fixture
def make_environ() -> Callable[..., dict[str, Any]]:
    """Provide a factory for minimal WSGI-style environs."""

    def factory(method: str = "GET", path: str = "/", **extra: Any) -> dict[str, Any]:
        environ: dict[str, Any] = {
            "REQUEST_METHOD": method,
            "PATH_INFO": path,
            "QUERY_STRING": "",
        }
        environ.update(extra)
        return environ

    return factory


@pytest.fixture
def sample_accept_header() -> str:
    """Provide a browser-like Accept header."""
    return "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
