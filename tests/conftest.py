"""Pytest configuration and fixtures for tracerelay tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest

from tests.utils import FakeSession, FakeTraceClient

if TYPE_CHECKING:
    from tracerelay.core.batch_processor import BatchRunner


@pytest.fixture
def fake_client() -> FakeTraceClient:
    """A trace client that records inserts instead of calling the API."""
    return FakeTraceClient()


@pytest.fixture
def fake_session() -> FakeSession:
    """A requests session that records POSTs instead of sending them."""
    return FakeSession()


@pytest.fixture
def batch_runner() -> Generator[BatchRunner, None, None]:
    """A private BatchRunner, stopped after the test."""
    from tracerelay.core.batch_processor import BatchRunner

    runner = BatchRunner()
    yield runner
    runner.stop(timeout=1.0)
