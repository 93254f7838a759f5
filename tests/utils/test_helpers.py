"""Common test utilities for tracerelay tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tracerelay.core.types import RecordedTrace, SpanKind, SpanRecord

BASE_TIME = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def create_test_span(
    span_id: int | str = 1,
    parent_span_id: int | str | None = None,
    name: str = "test-span",
    kind: SpanKind | None = None,
    start_offset_us: int = 0,
    duration_us: int = 1000,
    labels: dict[str, str] | None = None,
    backtrace: list[Any] | None = None,
) -> SpanRecord:
    """
    Create a minimal test span for unit tests.

    Args:
        span_id: Span id (default: 1)
        parent_span_id: Parent id, None for a root span
        name: Span name
        kind: Span kind (default: SpanKind.SERVER)
        start_offset_us: Start time relative to BASE_TIME, in microseconds
        duration_us: Span duration in microseconds
        labels: Span labels
        backtrace: Captured frames

    Returns:
        SpanRecord instance for testing
    """
    from tracerelay.core.types import SpanKind, SpanRecord

    start = BASE_TIME + timedelta(microseconds=start_offset_us)
    return SpanRecord(
        name=name,
        span_id=span_id,
        parent_span_id=parent_span_id,
        start_time=start,
        end_time=start + timedelta(microseconds=duration_us),
        kind=kind if kind is not None else SpanKind.SERVER,
        labels=dict(labels or {}),
        backtrace=list(backtrace or []),
    )


def create_test_trace(
    spans: list[SpanRecord] | None = None,
    trace_id: str | None = None,
) -> RecordedTrace:
    """
    Create a trace with a server root span and a client child by default.

    Args:
        spans: Spans to use instead of the default pair
        trace_id: 32-character hex string (default: 'a' * 32)
    """
    from tracerelay.core.types import RecordedTrace, SpanKind, TraceContext

    if spans is None:
        spans = [
            create_test_span(span_id=1, name="root", kind=SpanKind.SERVER, duration_us=5000),
            create_test_span(
                span_id=2,
                parent_span_id=1,
                name="child",
                kind=SpanKind.CLIENT,
                start_offset_us=1000,
                duration_us=2000,
            ),
        ]
    return RecordedTrace(TraceContext(trace_id=trace_id or "a" * 32), spans)


class FakeTraceClient:
    """Stands in for TraceServiceClient; records patch_traces calls."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._error = error

    def patch_traces(self, project_id: str | None = None, traces: Any = None) -> None:
        if self._error is not None:
            raise self._error
        self.calls.append({"project_id": project_id, "traces": traces})

    @property
    def inserted_traces(self) -> list[Any]:
        return [trace for call in self.calls for trace in call["traces"].traces]


class FakeResponse:
    def __init__(self, status_code: int = 202) -> None:
        self.status_code = status_code


class FakeSession:
    """Stands in for requests.Session; records POSTs."""

    def __init__(self, status_code: int = 202, error: Exception | None = None) -> None:
        self.posts: list[dict[str, Any]] = []
        self.closed = False
        self._status_code = status_code
        self._error = error

    def post(self, url: str, data: Any = None, headers: dict[str, str] | None = None, timeout: Any = None) -> FakeResponse:
        if self._error is not None:
            raise self._error
        self.posts.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        return FakeResponse(self._status_code)

    def close(self) -> None:
        self.closed = True
