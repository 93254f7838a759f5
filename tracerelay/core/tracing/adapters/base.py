"""Base interface for format adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ...types import TracerInterface


class FormatAdapter(ABC):
    """
    Converts a trace into the span objects a backend expects.

    Adapters must not mutate the trace and must return the same output
    for the same unmodified trace.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in log messages."""

    @abstractmethod
    def convert(self, tracer: "TracerInterface") -> list[Any]:
        """Return the wire spans for ``tracer``; empty if there is nothing to send."""
