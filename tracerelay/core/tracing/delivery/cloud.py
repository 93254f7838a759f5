"""Delivery of traces to Google Cloud Trace, inline or through a batch job."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, override

from google.cloud import trace_v1

from ...batch_processor import BatchJobConfig, BatchRunner
from .base import DeliveryChannel

if TYPE_CHECKING:
    from google.cloud.trace_v1 import TraceServiceClient

logger = logging.getLogger(__name__)

DEFAULT_BATCH_IDENTIFIER = "stackdriver-trace"


def build_trace(project_id: str, trace_id: str, spans: list[trace_v1.TraceSpan]) -> trace_v1.Trace:
    """Wrap converted spans in the trace container keyed by ``trace_id``."""
    return trace_v1.Trace(project_id=project_id, trace_id=trace_id, spans=spans)


def insert_traces(client: "TraceServiceClient", project_id: str, traces: list[trace_v1.Trace]) -> None:
    """Send traces in a single PatchTraces call."""
    client.patch_traces(project_id=project_id, traces=trace_v1.Traces(traces=traces))


class SyncDelivery(DeliveryChannel):
    """Inserts each trace with one blocking call on the caller's thread."""

    def __init__(self, client: "TraceServiceClient", project_id: str) -> None:
        self._client = client
        self._project_id = project_id

    def __repr__(self) -> str:
        return f"SyncDelivery(project={self._project_id})"

    @property
    @override
    def name(self) -> str:
        return "cloud-sync"

    @override
    def deliver(self, trace_id: str, spans: list[Any]) -> bool:
        if not spans:
            return False

        try:
            insert_traces(self._client, self._project_id, [build_trace(self._project_id, trace_id, spans)])
            logger.debug(f"Reported trace {trace_id} with {len(spans)} spans")
            return True
        except Exception as e:
            logger.error(f"Reporting the Trace data failed: {e}", exc_info=e)
            return False


class BatchedDelivery(DeliveryChannel):
    """
    Queues traces on a shared batch job; workers insert them in batches.

    ``deliver`` only enqueues. Ownership of the queued Trace passes to the job.
    """

    def __init__(
        self,
        client: "TraceServiceClient",
        project_id: str,
        identifier: str = DEFAULT_BATCH_IDENTIFIER,
        batch_config: BatchJobConfig | None = None,
        batch_runner: BatchRunner | None = None,
    ) -> None:
        self._client = client
        self._project_id = project_id
        self._identifier = identifier
        self._runner = batch_runner or BatchRunner.get_instance()
        self._runner.register_job(identifier, self._insert_batch, batch_config)

    def __repr__(self) -> str:
        return f"BatchedDelivery(project={self._project_id}, identifier={self._identifier})"

    @property
    @override
    def name(self) -> str:
        return "cloud-batched"

    @property
    def identifier(self) -> str:
        return self._identifier

    @override
    def deliver(self, trace_id: str, spans: list[Any]) -> bool:
        if not spans:
            return False

        try:
            return self._runner.submit_item(self._identifier, build_trace(self._project_id, trace_id, spans))
        except Exception as e:
            logger.error(f"Queueing the Trace data failed: {e}", exc_info=e)
            return False

    def _insert_batch(self, traces: list[trace_v1.Trace]) -> None:
        insert_traces(self._client, self._project_id, traces)
