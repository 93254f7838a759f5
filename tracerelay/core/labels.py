"""Common trace labels derived from the ambient request environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence

from .types import TRACERELAY_LIBRARY_NAME, TRACERELAY_VERSION, TracerInterface

logger = logging.getLogger(__name__)

# Stackdriver Trace common labels
AGENT = "/agent"
COMPONENT = "/component"
ERROR_MESSAGE = "/error/message"
ERROR_NAME = "/error/name"
HTTP_CLIENT_CITY = "/http/client_city"
HTTP_CLIENT_COUNTRY = "/http/client_country"
HTTP_CLIENT_PROTOCOL = "/http/client_protocol"
HTTP_CLIENT_REGION = "/http/client_region"
HTTP_HOST = "/http/host"
HTTP_METHOD = "/http/method"
HTTP_REDIRECTED_URL = "/http/redirected_url"
HTTP_STATUS_CODE = "/http/status_code"
HTTP_URL = "/http/url"
HTTP_USER_AGENT = "/http/user_agent"
PID = "/pid"
STACKTRACE = "/stacktrace"
TID = "/tid"

GAE_APPLICATION_ERROR = "g.co/gae/application_error"
GAE_APP_MODULE = "g.co/gae/app/module"
GAE_APP_MODULE_VERSION = "g.co/gae/app/module_version"
GAE_APP_VERSION = "g.co/gae/app/version"

REDIRECT_STATUS_CODES = frozenset({301, 302})

# label -> header names to probe, first present wins
LABEL_HEADER_MAP: dict[str, tuple[str, ...]] = {
    HTTP_URL: ("REQUEST_URI",),
    HTTP_METHOD: ("REQUEST_METHOD",),
    HTTP_CLIENT_PROTOCOL: ("SERVER_PROTOCOL",),
    HTTP_USER_AGENT: ("HTTP_USER_AGENT",),
    HTTP_HOST: ("HTTP_HOST", "SERVER_NAME"),
    GAE_APP_MODULE: ("GAE_SERVICE",),
    GAE_APP_MODULE_VERSION: ("GAE_VERSION",),
    HTTP_CLIENT_CITY: ("HTTP_X_APPENGINE_CITY",),
    HTTP_CLIENT_REGION: ("HTTP_X_APPENGINE_REGION",),
    HTTP_CLIENT_COUNTRY: ("HTTP_X_APPENGINE_COUNTRY",),
}


@dataclass
class RequestEnvironment:
    """
    Snapshot of the request being traced.

    ``headers`` uses CGI/WSGI naming (``REQUEST_METHOD``, ``HTTP_HOST``, ...).
    ``status_code`` is None outside of a request.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: Optional[int] = None
    response_headers: Sequence[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_wsgi(
        cls,
        environ: Mapping[str, str],
        status: str | int | None = None,
        response_headers: Iterable[tuple[str, str]] | None = None,
    ) -> RequestEnvironment:
        """
        Build from a WSGI environ and the arguments given to start_response.

        Args:
            environ: The WSGI environ dict
            status: Status line such as ``"302 Found"`` or a bare int
            response_headers: Header pairs passed to start_response
        """
        headers = dict(environ)
        if "REQUEST_URI" not in headers and "PATH_INFO" in headers:
            uri = headers.get("SCRIPT_NAME", "") + headers["PATH_INFO"]
            if headers.get("QUERY_STRING"):
                uri = f"{uri}?{headers['QUERY_STRING']}"
            headers["REQUEST_URI"] = uri

        return cls(
            headers=headers,
            status_code=_parse_status(status),
            response_headers=list(response_headers or []),
        )


def default_environment() -> RequestEnvironment:
    """Process environment with no response information."""
    return RequestEnvironment(headers=os.environ)


EnvironmentSource = Callable[[], RequestEnvironment]


class LabelEnricher:
    """
    Adds the standard request labels to a trace's root span.

    The environment is read from ``environment_source`` unless one is passed
    to ``enrich`` directly.
    """

    def __init__(
        self,
        environment_source: EnvironmentSource = default_environment,
        agent: str | None = None,
    ) -> None:
        self._environment_source = environment_source
        self._agent = agent or f"{TRACERELAY_LIBRARY_NAME} {TRACERELAY_VERSION}"

    def enrich(self, tracer: TracerInterface, environment: RequestEnvironment | None = None) -> None:
        """Merge request labels into the root span. Never raises."""
        try:
            env = environment if environment is not None else self._environment_source()
            self._add_common_labels(tracer, env)
        except Exception as e:
            logger.warning(f"Failed to add common labels to trace: {e}")

    def _add_common_labels(self, tracer: TracerInterface, env: RequestEnvironment) -> None:
        if env.status_code in REDIRECT_STATUS_CODES:
            location = _find_header(env.response_headers, "Location")
            if location is not None:
                tracer.add_root_label(HTTP_REDIRECTED_URL, location)

        # Unknown outside of a request; recorded empty so the label is always present.
        status = "" if env.status_code is None else str(env.status_code)
        tracer.add_root_label(HTTP_STATUS_CODE, status)

        for label_key, header_keys in LABEL_HEADER_MAP.items():
            value = detect_key(header_keys, env.headers)
            if value:
                tracer.add_root_label(label_key, value)

        tracer.add_root_label(PID, str(os.getpid()))
        tracer.add_root_label(AGENT, self._agent)


def detect_key(keys: Iterable[str], headers: Mapping[str, str]) -> Optional[str]:
    """Value of the first key present in ``headers``."""
    for key in keys:
        if key in headers:
            return headers[key]
    return None


def _find_header(headers: Iterable[tuple[str, str]], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value.strip()
    return None


def _parse_status(status: str | int | None) -> Optional[int]:
    if status is None or isinstance(status, int):
        return status
    code = status.split(" ", 1)[0]
    return int(code) if code.isdigit() else None
