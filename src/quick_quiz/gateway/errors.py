"""Failure kinds reported by quiz generators."""

from __future__ import annotations

__all__ = [
    "GatewayError",
    "UpstreamStatusError",
    "InvalidPayloadError",
    "EnvelopeDecodeError",
    "PayloadDecodeError",
    "TransportError",
    "UpstreamTimeoutError",
]


class GatewayError(RuntimeError):
    """Base class for every quiz generation failure."""


class UpstreamStatusError(GatewayError):
    """The service answered with a non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        message = f"upstream failure (status {status_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code


class InvalidPayloadError(GatewayError):
    """The service answered, but the body could not be decoded."""


class EnvelopeDecodeError(InvalidPayloadError):
    """The outer response object was not the expected JSON envelope."""


class PayloadDecodeError(InvalidPayloadError):
    """The JSON-encoded quiz carried inside the envelope is not valid JSON."""


class TransportError(GatewayError):
    """The request never produced a response."""


class UpstreamTimeoutError(TransportError):
    """The service did not respond within the configured timeout."""
