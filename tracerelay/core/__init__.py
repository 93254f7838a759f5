"""Core module for tracerelay."""

from .types import (
    TRACERELAY_VERSION,
    RecordedTrace,
    SpanKind,
    SpanRecord,
    StackFrame,
    TraceContext,
    TracerInterface,
)
from .exceptions import ConfigurationError, InvalidTraceError, TraceRelayError
from .backtrace import capture_backtrace, format_backtrace
from .labels import LabelEnricher, RequestEnvironment, default_environment
from .batch_processor import BatchJob, BatchJobConfig, BatchRunner
from .config import CloudReporterConfig, ZipkinReporterConfig
from .reporter import Reporter, create_cloud_reporter, create_zipkin_reporter

__all__ = [
    # Reporter
    "Reporter",
    "create_cloud_reporter",
    "create_zipkin_reporter",
    # Config
    "CloudReporterConfig",
    "ZipkinReporterConfig",
    # Types
    "SpanKind",
    "SpanRecord",
    "StackFrame",
    "TraceContext",
    "TracerInterface",
    "RecordedTrace",
    "TRACERELAY_VERSION",
    # Errors
    "TraceRelayError",
    "InvalidTraceError",
    "ConfigurationError",
    # Enrichment
    "LabelEnricher",
    "RequestEnvironment",
    "default_environment",
    "format_backtrace",
    "capture_backtrace",
    # Batching
    "BatchJob",
    "BatchJobConfig",
    "BatchRunner",
]
