"""Domain exceptions shared by the routing and crime services."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Malformed request input; surfaced to callers as a 400."""


class UpstreamUnavailableError(RuntimeError):
    """An external service timed out, failed or returned nothing usable."""


class OSRMUnavailableError(UpstreamUnavailableError):
    pass


class CrimeFeedUnavailableError(UpstreamUnavailableError):
    pass


class OutOfCoverageError(LookupError):
    """Coordinates fall outside the police feed's coverage area."""
