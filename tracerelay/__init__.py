"""tracerelay: report finished traces to Google Cloud Trace or Zipkin."""

from .core import (
    BatchJobConfig,
    CloudReporterConfig,
    ConfigurationError,
    InvalidTraceError,
    LabelEnricher,
    RecordedTrace,
    Reporter,
    RequestEnvironment,
    SpanKind,
    SpanRecord,
    StackFrame,
    TraceContext,
    TracerInterface,
    TraceRelayError,
    ZipkinReporterConfig,
    create_cloud_reporter,
    create_zipkin_reporter,
)
from .core.logger import LogLevel, configure_logger, get_log_level, set_log_level
from .core.tracing import (
    BatchedDelivery,
    CloudFormatAdapter,
    DeliveryChannel,
    FormatAdapter,
    LocalEndpoint,
    SyncDelivery,
    ZipkinFormatAdapter,
    ZipkinHTTPDelivery,
)
from .core.types import TRACERELAY_VERSION

__version__ = TRACERELAY_VERSION

__all__ = [
    # Reporters
    "Reporter",
    "create_cloud_reporter",
    "create_zipkin_reporter",
    # Config
    "CloudReporterConfig",
    "ZipkinReporterConfig",
    "BatchJobConfig",
    # Types
    "SpanKind",
    "SpanRecord",
    "StackFrame",
    "TraceContext",
    "TracerInterface",
    "RecordedTrace",
    "RequestEnvironment",
    "LabelEnricher",
    # Errors
    "TraceRelayError",
    "InvalidTraceError",
    "ConfigurationError",
    # Logger
    "LogLevel",
    "configure_logger",
    "set_log_level",
    "get_log_level",
    # Adapters
    "FormatAdapter",
    "CloudFormatAdapter",
    "ZipkinFormatAdapter",
    "LocalEndpoint",
    # Delivery
    "DeliveryChannel",
    "SyncDelivery",
    "BatchedDelivery",
    "ZipkinHTTPDelivery",
]
