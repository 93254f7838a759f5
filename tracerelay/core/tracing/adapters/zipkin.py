"""Conversion of traces to the Zipkin v2 JSON span format.

See https://zipkin.io/zipkin-api/#/default/post_spans for the schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, override

from ...labels import EnvironmentSource, default_environment
from ...types import SpanKind, to_microseconds
from .base import FormatAdapter

if TYPE_CHECKING:
    from ...types import TracerInterface

B3_FLAGS_HEADER = "HTTP_X_B3_FLAGS"

# Zipkin has no "unspecified" kind; unmapped kinds leave the field out.
SPAN_KIND_MAP: dict[SpanKind, str] = {
    SpanKind.CLIENT: "CLIENT",
    SpanKind.SERVER: "SERVER",
    SpanKind.PRODUCER: "PRODUCER",
    SpanKind.CONSUMER: "CONSUMER",
}


@dataclass(frozen=True)
class LocalEndpoint:
    """The service reporting the spans."""

    service_name: str
    ipv4: str
    port: int

    def to_dict(self) -> dict[str, Any]:
        return {"serviceName": self.service_name, "ipv4": self.ipv4, "port": self.port}


def format_span_id(span_id: int) -> str:
    """Lowercase hex, zero-padded to 16 characters."""
    return f"{span_id:016x}"


def convert_zipkin_spans(
    tracer: "TracerInterface",
    headers: Mapping[str, str],
    local_endpoint: LocalEndpoint,
) -> list[dict[str, Any]]:
    """
    Build the Zipkin JSON payload for a trace.

    Args:
        tracer: The finished trace
        headers: CGI-style request headers, read for ``X-B3-Flags``
        local_endpoint: Endpoint attached to every span

    Returns:
        List of span dicts ready for ``json.dumps``
    """
    spans = tracer.spans()
    if not spans:
        return []

    trace_id = tracer.context().trace_id

    # Debug asks the collector to keep the span regardless of sampling.
    is_debug = headers.get(B3_FLAGS_HEADER) == "1"

    # Shared means this process continues a span started elsewhere.
    is_shared = bool(spans[0].parent_span_id_int)

    zipkin_spans = []
    for span in spans:
        start = to_microseconds(span.start_time)
        end = to_microseconds(span.end_time)
        parent = span.parent_span_id_int

        zipkin_span: dict[str, Any] = {
            "traceId": trace_id,
            "name": span.name,
            "parentId": format_span_id(parent) if parent else None,
            "id": format_span_id(span.span_id_int),
            "timestamp": start,
            "duration": end - start,
            "debug": is_debug,
            "shared": is_shared,
            "localEndpoint": local_endpoint.to_dict(),
            "tags": dict(span.labels),
        }
        if span.kind in SPAN_KIND_MAP:
            zipkin_span["kind"] = SPAN_KIND_MAP[span.kind]

        zipkin_spans.append(zipkin_span)

    return zipkin_spans


class ZipkinFormatAdapter(FormatAdapter):
    """FormatAdapter producing Zipkin v2 span dicts."""

    def __init__(
        self,
        local_endpoint: LocalEndpoint,
        environment_source: EnvironmentSource = default_environment,
    ) -> None:
        self._local_endpoint = local_endpoint
        self._environment_source = environment_source

    def __repr__(self) -> str:
        return f"ZipkinFormatAdapter(service={self._local_endpoint.service_name})"

    @property
    @override
    def name(self) -> str:
        return "zipkin"

    @property
    def local_endpoint(self) -> LocalEndpoint:
        return self._local_endpoint

    @override
    def convert(self, tracer: "TracerInterface") -> list[dict[str, Any]]:
        headers = self._environment_source().headers
        return convert_zipkin_spans(tracer, headers, self._local_endpoint)
