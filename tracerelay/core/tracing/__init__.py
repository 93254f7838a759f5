"""Span conversion and delivery for tracerelay."""

from .adapters import (
    CloudFormatAdapter,
    FormatAdapter,
    LocalEndpoint,
    ZipkinFormatAdapter,
    convert_cloud_spans,
    convert_zipkin_spans,
    format_span_id,
)
from .delivery import (
    BatchedDelivery,
    DeliveryChannel,
    SyncDelivery,
    ZipkinHTTPDelivery,
    build_zipkin_url,
)

__all__ = [
    # Adapters
    "FormatAdapter",
    "CloudFormatAdapter",
    "ZipkinFormatAdapter",
    "LocalEndpoint",
    "convert_cloud_spans",
    "convert_zipkin_spans",
    "format_span_id",
    # Delivery
    "DeliveryChannel",
    "SyncDelivery",
    "BatchedDelivery",
    "ZipkinHTTPDelivery",
    "build_zipkin_url",
]
