"""Exceptions raised by tracerelay.

None of these cross Reporter.report(); they surface at construction time
or from explicit validation calls.
"""


class TraceRelayError(Exception):
    """Base class for tracerelay errors."""


class InvalidTraceError(TraceRelayError, ValueError):
    """A trace violates the parent-link or timing invariants."""


class ConfigurationError(TraceRelayError):
    """A reporter could not be configured from the given options."""
