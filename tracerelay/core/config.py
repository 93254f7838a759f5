"""Reporter configuration.

Values resolve with precedence: explicit argument > environment variable >
built-in default.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .batch_processor import BatchJobConfig
from .exceptions import ConfigurationError
from .tracing.delivery import DEFAULT_BATCH_IDENTIFIER, DEFAULT_ZIPKIN_ENDPOINT, build_zipkin_url

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CloudReporterConfig:
    project_id: Optional[str] = None
    credentials_path: Optional[str] = None
    async_enabled: bool = False
    identifier: str = DEFAULT_BATCH_IDENTIFIER
    batch: BatchJobConfig = field(default_factory=BatchJobConfig)
    client_options: Optional[dict[str, Any]] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> CloudReporterConfig:
        """
        Build a config from ``GOOGLE_CLOUD_PROJECT``, ``GOOGLE_APPLICATION_CREDENTIALS``
        and ``TRACERELAY_ASYNC``. Non-None keyword overrides win.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "project_id": env.get("GOOGLE_CLOUD_PROJECT"),
            "credentials_path": env.get("GOOGLE_APPLICATION_CREDENTIALS"),
            "async_enabled": env.get("TRACERELAY_ASYNC", "").strip().lower() in _TRUE_VALUES,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass
class ZipkinReporterConfig:
    service_name: str
    host: str
    port: int
    endpoint: str = DEFAULT_ZIPKIN_ENDPOINT
    timeout: Optional[float] = None

    @property
    def url(self) -> str:
        return build_zipkin_url(self.host, self.port, self.endpoint)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> ZipkinReporterConfig:
        """
        Build a config from ``ZIPKIN_SERVICE_NAME``, ``ZIPKIN_HOST``, ``ZIPKIN_PORT``
        and ``ZIPKIN_ENDPOINT``. Non-None keyword overrides win.

        Raises:
            ConfigurationError: If service name, host or port is missing or the
                port is not an integer
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "service_name": env.get("ZIPKIN_SERVICE_NAME"),
            "host": env.get("ZIPKIN_HOST"),
            "port": env.get("ZIPKIN_PORT"),
            "endpoint": env.get("ZIPKIN_ENDPOINT") or DEFAULT_ZIPKIN_ENDPOINT,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        missing = [key for key in ("service_name", "host") if not values.get(key)]
        if values.get("port") is None:
            missing.append("port")
        if missing:
            raise ConfigurationError(f"Missing Zipkin reporter settings: {', '.join(missing)}")

        try:
            values["port"] = int(values["port"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid Zipkin port: {values['port']!r}") from e

        return cls(**values)
