"""Test utilities for tracerelay."""

from .test_helpers import (
    BASE_TIME,
    FakeResponse,
    FakeSession,
    FakeTraceClient,
    create_test_span,
    create_test_trace,
)

__all__ = [
    "BASE_TIME",
    "create_test_span",
    "create_test_trace",
    "FakeTraceClient",
    "FakeSession",
    "FakeResponse",
]
