"""HTTP client for the agent service that writes quizzes.

The service wraps its answer twice: the HTTP body is a JSON envelope whose
``data`` field is itself a JSON-encoded string holding the quiz. Each layer
is decoded separately so failures point at the layer that broke.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx

from ..core.credentials import MissingCredentialError
from .errors import (
    EnvelopeDecodeError,
    PayloadDecodeError,
    TransportError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)

__all__ = [
    "DEFAULT_ENDPOINT",
    "QuizGateway",
    "QuizGenerator",
    "build_prompt",
    "decode_envelope",
    "decode_payload",
]

DEFAULT_ENDPOINT = "https://trytruffle.ai/api/v0/run"

logger = logging.getLogger(__name__)


class QuizGenerator(Protocol):
    """Anything that turns quiz parameters into a decoded quiz payload."""

    def generate(
        self, topic: Any, question_count: Any, difficulty: Any
    ) -> Any: ...


def build_prompt(
    topic: object, question_count: object, difficulty: object
) -> str:
    """Return the instruction sent to the agent."""

    return (
        f"Create a quiz on {topic} with {question_count} questions "
        f"at {difficulty} difficulty."
    )


def decode_envelope(response: httpx.Response) -> str:
    """Extract the JSON-encoded quiz string from the outer envelope."""

    try:
        envelope = response.json()
    except ValueError as exc:
        raise EnvelopeDecodeError(
            f"invalid upstream payload: body is not JSON ({exc})"
        ) from exc
    if not isinstance(envelope, dict):
        raise EnvelopeDecodeError(
            "invalid upstream payload: expected an object, got "
            f"{type(envelope).__name__}"
        )
    data = envelope.get("data")
    if not isinstance(data, str):
        raise EnvelopeDecodeError(
            "invalid upstream payload: 'data' field is missing or not a string"
        )
    return data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_payload(raw: str) -> Any:
    """Parse the inner quiz document.

    ``NaN`` and ``Infinity`` are rejected so the relayed quiz can always be
    serialized again.
    """

    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        raise PayloadDecodeError(
            f"invalid upstream payload: inner data is not JSON ({exc})"
        ) from exc


class QuizGateway:
    """Forward quiz requests to the agent service.

    Arguments are not validated here; callers are expected to pass a
    checked request. The decoded quiz is returned exactly as the service
    produced it.
    """

    def __init__(
        self,
        *,
        api_key: str,
        agent_id: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise MissingCredentialError(
                "An API key is required to call the quiz agent service."
            )
        if not api_key.isascii():
            raise MissingCredentialError(
                "The API key contains non-ASCII characters; check its value."
            )
        self._api_key = api_key
        self.agent_id = agent_id
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    def generate(
        self, topic: Any, question_count: Any, difficulty: Any
    ) -> Any:
        prompt = build_prompt(topic, question_count, difficulty)
        body = {
            "agent_id": self.agent_id,
            "input_data": prompt,
            "json_mode": True,
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
        }
        logger.info(
            "Requesting quiz from agent service",
            extra={
                "endpoint": self.endpoint,
                "topic": str(topic),
                "question_count": question_count,
                "difficulty": str(difficulty),
            },
        )
        try:
            with httpx.Client(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = client.post(
                    self.endpoint, json=body, headers=headers
                )
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(
                f"transport failure: no response within {self.timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"transport failure: {exc}") from exc

        if not response.is_success:
            raise UpstreamStatusError(response.status_code)

        quiz = decode_payload(decode_envelope(response))
        logger.info(
            "Agent service returned quiz payload",
            extra={"status_code": response.status_code},
        )
        return quiz
