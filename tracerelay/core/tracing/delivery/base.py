"""Base interface for delivery channels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class DeliveryChannel(ABC):
    """
    Sends converted spans to a backend.

    ``deliver`` never raises: failures are logged and reported as False.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in log messages."""

    @abstractmethod
    def deliver(self, trace_id: str, spans: list[Any]) -> bool:
        """Send the spans of one trace. Returns True on success."""

    def close(self) -> None:
        """Release any resources held by the channel."""
