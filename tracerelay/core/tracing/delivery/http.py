"""Delivery of Zipkin spans over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any, override

import requests

from .base import DeliveryChannel

logger = logging.getLogger(__name__)

DEFAULT_ZIPKIN_ENDPOINT = "/api/v2/spans"


def build_zipkin_url(host: str, port: int, endpoint: str = DEFAULT_ZIPKIN_ENDPOINT) -> str:
    return f"http://{host}:{port}{endpoint}"


class ZipkinHTTPDelivery(DeliveryChannel):
    """
    POSTs the span list as JSON to a Zipkin collector.

    A completed request counts as success; the response is not inspected
    beyond logging error statuses.
    """

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self._url = url
        self._session = session or requests.Session()
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"ZipkinHTTPDelivery(url={self._url})"

    @property
    @override
    def name(self) -> str:
        return "zipkin-http"

    @property
    def url(self) -> str:
        return self._url

    @override
    def deliver(self, trace_id: str, spans: list[Any]) -> bool:
        if not spans:
            return False

        try:
            body = json.dumps(spans)
            response = self._session.post(
                self._url,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except (requests.RequestException, TypeError, ValueError) as e:
            logger.error(f"Failed to report trace {trace_id} to {self._url}: {e}")
            return False

        if response.status_code >= 400:
            logger.warning(f"Zipkin collector at {self._url} answered {response.status_code} for trace {trace_id}")
        else:
            logger.debug(f"Reported trace {trace_id} with {len(spans)} spans to {self._url}")
        return True

    @override
    def close(self) -> None:
        self._session.close()
