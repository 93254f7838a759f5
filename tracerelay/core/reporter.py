"""Reporters: enrich, convert and deliver a finished trace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .batch_processor import BatchJobConfig, BatchRunner
from .config import CloudReporterConfig, ZipkinReporterConfig
from .exceptions import ConfigurationError
from .labels import EnvironmentSource, LabelEnricher, RequestEnvironment, default_environment
from .tracing.adapters import CloudFormatAdapter, FormatAdapter, LocalEndpoint, ZipkinFormatAdapter
from .tracing.delivery import BatchedDelivery, DeliveryChannel, SyncDelivery, ZipkinHTTPDelivery

if TYPE_CHECKING:
    import requests
    from google.cloud.trace_v1 import TraceServiceClient

    from .types import TracerInterface

logger = logging.getLogger(__name__)


class Reporter:
    """
    Reports finished traces to one backend.

    Composed of an optional LabelEnricher, a FormatAdapter and a
    DeliveryChannel. ``report`` never raises; losing a trace must not
    affect the host application.
    """

    def __init__(
        self,
        adapter: FormatAdapter,
        channel: DeliveryChannel,
        enricher: LabelEnricher | None = None,
    ) -> None:
        self._adapter = adapter
        self._channel = channel
        self._enricher = enricher

    def __repr__(self) -> str:
        return f"Reporter(adapter={self._adapter.name}, channel={self._channel.name})"

    @property
    def adapter(self) -> FormatAdapter:
        return self._adapter

    @property
    def channel(self) -> DeliveryChannel:
        return self._channel

    def report(self, tracer: "TracerInterface") -> bool:
        """
        Report a finished trace.

        Returns:
            True if the backend accepted (or the queue took) the trace, False
            if there was nothing to send or delivery failed
        """
        try:
            self.process_spans(tracer)
            spans = self._adapter.convert(tracer)
            if not spans:
                return False
            return self._channel.deliver(tracer.context().trace_id, spans)
        except Exception as e:
            logger.error(f"Reporting the Trace data via {self._adapter.name} failed: {e}", exc_info=e)
            return False

    def process_spans(self, tracer: "TracerInterface", environment: RequestEnvironment | None = None) -> None:
        """Apply pre-conversion enrichment, if this reporter has any."""
        if self._enricher is not None:
            self._enricher.enrich(tracer, environment)

    def close(self) -> None:
        self._channel.close()


def create_cloud_reporter(
    project_id: str | None = None,
    client: "TraceServiceClient | None" = None,
    async_enabled: bool | None = None,
    batch_config: BatchJobConfig | None = None,
    identifier: str | None = None,
    credentials_path: str | None = None,
    client_options: dict[str, Any] | None = None,
    batch_runner: BatchRunner | None = None,
    environment_source: EnvironmentSource = default_environment,
    config: CloudReporterConfig | None = None,
) -> Reporter:
    """
    Create a reporter for Google Cloud Trace.

    Args:
        project_id: Cloud project; falls back to GOOGLE_CLOUD_PROJECT, then
            the project of the default credentials
        client: TraceServiceClient to use; built from the config if omitted
        async_enabled: Queue traces on a background batch job instead of
            inserting them inline. Can also be set via TRACERELAY_ASYNC.
        batch_config: Batch size, call period and worker count for async mode
        identifier: Batch job identifier (default: stackdriver-trace)
        credentials_path: Service account JSON file for the client
        client_options: Passed through to TraceServiceClient
        batch_runner: Runner owning the batch job (default: shared runner)
        environment_source: Callable returning the current request environment
        config: Full config; other arguments are ignored when given

    Returns:
        Configured Reporter

    Raises:
        ConfigurationError: If no project id can be determined
    """
    if config is None:
        config = CloudReporterConfig.from_env(
            project_id=project_id,
            async_enabled=async_enabled,
            batch=batch_config,
            identifier=identifier,
            credentials_path=credentials_path,
            client_options=client_options,
        )

    project = config.project_id or _default_project_id()
    if not project:
        raise ConfigurationError(
            "No Google Cloud project id configured. Pass project_id or set GOOGLE_CLOUD_PROJECT."
        )

    if client is None:
        client = _build_trace_client(config)

    channel: DeliveryChannel
    if config.async_enabled:
        channel = BatchedDelivery(
            client,
            project,
            identifier=config.identifier,
            batch_config=config.batch,
            batch_runner=batch_runner,
        )
    else:
        channel = SyncDelivery(client, project)

    logger.debug(f"Cloud reporter created for project {project} using {channel.name}")
    return Reporter(CloudFormatAdapter(), channel, LabelEnricher(environment_source))


def create_zipkin_reporter(
    service_name: str | None = None,
    host: str | None = None,
    port: int | None = None,
    endpoint: str | None = None,
    timeout: float | None = None,
    session: "requests.Session | None" = None,
    environment_source: EnvironmentSource = default_environment,
    config: ZipkinReporterConfig | None = None,
) -> Reporter:
    """
    Create a reporter for a Zipkin collector.

    Args:
        service_name: Name of this service, used in localEndpoint
        host: Collector host, also reported as localEndpoint.ipv4
        port: Collector port, also reported as localEndpoint.port
        endpoint: Span reporting path (default: /api/v2/spans)
        timeout: Optional request timeout in seconds
        session: requests.Session to send with
        environment_source: Callable returning the current request environment
        config: Full config; other arguments are ignored when given

    Returns:
        Configured Reporter
    """
    if config is None:
        config = ZipkinReporterConfig.from_env(
            service_name=service_name,
            host=host,
            port=port,
            endpoint=endpoint,
            timeout=timeout,
        )

    local_endpoint = LocalEndpoint(service_name=config.service_name, ipv4=config.host, port=config.port)
    adapter = ZipkinFormatAdapter(local_endpoint, environment_source)
    channel = ZipkinHTTPDelivery(config.url, session=session, timeout=config.timeout)

    logger.debug(f"Zipkin reporter created for {config.url}")
    return Reporter(adapter, channel)


def _default_project_id() -> str | None:
    import google.auth
    from google.auth.exceptions import DefaultCredentialsError

    try:
        _, project = google.auth.default()
    except DefaultCredentialsError:
        return None
    return project


def _build_trace_client(config: CloudReporterConfig) -> "TraceServiceClient":
    from google.cloud import trace_v1

    credentials = None
    if config.credentials_path:
        from google.oauth2 import service_account

        credentials = service_account.Credentials.from_service_account_file(config.credentials_path)

    return trace_v1.TraceServiceClient(credentials=credentials, client_options=config.client_options)
