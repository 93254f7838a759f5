"""Format adapters mapping traces to backend wire objects."""

from .base import FormatAdapter
from .cloud import CloudFormatAdapter, convert_cloud_span, convert_cloud_spans
from .zipkin import LocalEndpoint, ZipkinFormatAdapter, convert_zipkin_spans, format_span_id

__all__ = [
    # Base
    "FormatAdapter",
    # Adapters
    "CloudFormatAdapter",
    "ZipkinFormatAdapter",
    "LocalEndpoint",
    # Conversions
    "convert_cloud_spans",
    "convert_cloud_span",
    "convert_zipkin_spans",
    "format_span_id",
]
