"""Conversion of traces to Google Cloud Trace v1 spans."""

from __future__ import annotations

from typing import TYPE_CHECKING, override

from google.cloud import trace_v1

from ...backtrace import format_backtrace
from ...labels import STACKTRACE
from ...types import SpanKind, ensure_utc
from .base import FormatAdapter

if TYPE_CHECKING:
    from ...types import SpanRecord, TracerInterface

CloudSpanKind = trace_v1.TraceSpan.SpanKind

SPAN_KIND_MAP: dict[SpanKind, CloudSpanKind] = {
    SpanKind.CLIENT: CloudSpanKind.RPC_CLIENT,
    SpanKind.SERVER: CloudSpanKind.RPC_SERVER,
}


def convert_cloud_spans(tracer: "TracerInterface") -> list[trace_v1.TraceSpan]:
    """Map every span of ``tracer`` to a TraceSpan, preserving order."""
    return [convert_cloud_span(span) for span in tracer.spans()]


def convert_cloud_span(span: "SpanRecord") -> trace_v1.TraceSpan:
    kind = SPAN_KIND_MAP.get(span.kind, CloudSpanKind.SPAN_KIND_UNSPECIFIED)

    labels = dict(span.labels)
    labels[STACKTRACE] = format_backtrace(span.backtrace)

    return trace_v1.TraceSpan(
        name=span.name,
        start_time=ensure_utc(span.start_time),
        end_time=ensure_utc(span.end_time),
        span_id=span.span_id_int,
        parent_span_id=span.parent_span_id_int or 0,
        labels=labels,
        kind=kind,
    )


class CloudFormatAdapter(FormatAdapter):
    """FormatAdapter producing ``google.cloud.trace_v1.TraceSpan`` messages."""

    def __repr__(self) -> str:
        return "CloudFormatAdapter()"

    @property
    @override
    def name(self) -> str:
        return "cloud"

    @override
    def convert(self, tracer: "TracerInterface") -> list[trace_v1.TraceSpan]:
        return convert_cloud_spans(tracer)
