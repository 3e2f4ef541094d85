"""Quiz generation gateway: agent client, HTTP route, remote client."""

from .client import (
    QuizGateway,
    QuizGenerator,
    build_prompt,
    decode_envelope,
    decode_payload,
)
from .errors import (
    EnvelopeDecodeError,
    GatewayError,
    InvalidPayloadError,
    PayloadDecodeError,
    TransportError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)
from .remote import RemoteQuizService

__all__ = [
    "QuizGateway",
    "QuizGenerator",
    "RemoteQuizService",
    "build_prompt",
    "decode_envelope",
    "decode_payload",
    "GatewayError",
    "UpstreamStatusError",
    "InvalidPayloadError",
    "EnvelopeDecodeError",
    "PayloadDecodeError",
    "TransportError",
    "UpstreamTimeoutError",
]
