"""Delivery channels sending converted spans to a backend."""

from .base import DeliveryChannel
from .cloud import DEFAULT_BATCH_IDENTIFIER, BatchedDelivery, SyncDelivery, build_trace, insert_traces
from .http import DEFAULT_ZIPKIN_ENDPOINT, ZipkinHTTPDelivery, build_zipkin_url

__all__ = [
    "DeliveryChannel",
    # Cloud Trace
    "SyncDelivery",
    "BatchedDelivery",
    "DEFAULT_BATCH_IDENTIFIER",
    "build_trace",
    "insert_traces",
    # Zipkin
    "ZipkinHTTPDelivery",
    "DEFAULT_ZIPKIN_ENDPOINT",
    "build_zipkin_url",
]
