"""Core types and data structures for tracerelay."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

from .exceptions import InvalidTraceError

TRACERELAY_LIBRARY_NAME = "tracerelay"
TRACERELAY_VERSION = "0.1.0"

SpanId = Union[int, str]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SpanKind(Enum):
    """Span kinds understood by the reporters."""

    UNSPECIFIED = 0
    CLIENT = 1
    SERVER = 2
    PRODUCER = 3
    CONSUMER = 4


@dataclass
class StackFrame:
    """A single captured stack frame. Any field may be missing."""

    line: Optional[int] = None
    file: Optional[str] = None
    function: Optional[str] = None
    class_name: Optional[str] = None


@dataclass
class SpanRecord:
    """
    A finished span as handed over by the tracer.

    Reporters read and re-serialize these; the only mutation allowed is
    merging labels into the root span during enrichment.
    """

    name: str
    span_id: SpanId
    start_time: datetime
    end_time: datetime
    parent_span_id: Optional[SpanId] = None
    kind: SpanKind = SpanKind.UNSPECIFIED
    labels: Dict[str, str] = field(default_factory=dict)
    backtrace: List[Union[StackFrame, Dict[str, Any]]] = field(default_factory=list)

    @property
    def span_id_int(self) -> int:
        return span_id_to_int(self.span_id)

    @property
    def parent_span_id_int(self) -> Optional[int]:
        if self.parent_span_id is None:
            return None
        return span_id_to_int(self.parent_span_id)


@dataclass
class TraceContext:
    """Identity of the trace a set of spans belongs to."""

    trace_id: str


@runtime_checkable
class TracerInterface(Protocol):
    """What a reporter needs from the tracer that produced a trace."""

    def context(self) -> TraceContext: ...

    def spans(self) -> Sequence[SpanRecord]: ...

    def add_root_label(self, key: str, value: str) -> None: ...


class RecordedTrace:
    """
    A completed trace: its context plus the ordered spans, root first.

    Satisfies TracerInterface so it can be passed straight to a reporter.
    """

    def __init__(self, context: TraceContext, spans: Optional[Sequence[SpanRecord]] = None) -> None:
        self._context = context
        self._spans: List[SpanRecord] = list(spans or [])

    def __repr__(self) -> str:
        return f"RecordedTrace(trace_id={self._context.trace_id}, spans={len(self._spans)})"

    def context(self) -> TraceContext:
        return self._context

    def spans(self) -> List[SpanRecord]:
        return self._spans

    def add_root_label(self, key: str, value: str) -> None:
        """Set a label on the root span. No-op for an empty trace."""
        if self._spans:
            self._spans[0].labels[key] = value

    def validate(self) -> None:
        """
        Check parent links and timing.

        Raises:
            InvalidTraceError: If a parent id does not refer to an earlier
                span or a span ends before it starts.
        """
        seen: set[int] = set()
        for span in self._spans:
            parent = span.parent_span_id_int
            # The root may continue a span started in another process.
            if parent is not None and seen and parent not in seen:
                raise InvalidTraceError(
                    f"Span {span.name!r} refers to unknown parent {parent:x}"
                )
            if span.end_time < span.start_time:
                raise InvalidTraceError(f"Span {span.name!r} ends before it starts")
            seen.add(span.span_id_int)


def span_id_to_int(span_id: SpanId) -> int:
    """Normalize a span id to an unsigned integer. Strings are read as hex."""
    if isinstance(span_id, str):
        return int(span_id, 16)
    return int(span_id)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware ones are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_microseconds(value: datetime) -> int:
    """Microseconds since the Unix epoch. Naive datetimes are taken as UTC."""
    delta = ensure_utc(value) - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
