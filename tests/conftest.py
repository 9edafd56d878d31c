"""
This file contains shared fixtures for all tests.

The tests run without a cluster: kubernetes API objects are mocked and the
reconciler talks to an in-memory state store.
"""
import logging
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
from kubernetes import client

from tests.helpers import FakeStateStore, build_web_body


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("tests.weboperator")


@pytest.fixture
def web_body() -> Dict[str, Any]:
    return build_web_body()


@pytest.fixture
def store(web_body: Dict[str, Any]) -> FakeStateStore:
    """A state store holding the 'site' Web and nothing else."""
    return FakeStateStore(web_body)


@pytest.fixture
def mock_k8s_api() -> MagicMock:
    """A CustomObjectsApi double."""
    return MagicMock(spec=client.CustomObjectsApi)


@pytest.fixture
def k8s_apis() -> Dict[str, MagicMock]:
    return {
        "core_v1": MagicMock(spec=client.CoreV1Api),
        "apps_v1": MagicMock(spec=client.AppsV1Api),
        "custom_objects_api": MagicMock(spec=client.CustomObjectsApi),
    }


@pytest.fixture
def to_thread_inline(monkeypatch):
    """Runs asyncio.to_thread callables inline so MagicMocks stay on one thread."""

    async def to_thread_mock(func, *args, **kwargs):
        return func(*args, **kwargs)

    monkeypatch.setattr("asyncio.to_thread", to_thread_mock)
