"""Client for a running quiz server's ``/api/generate`` route."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import (
    PayloadDecodeError,
    TransportError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)

__all__ = ["RemoteQuizService"]

logger = logging.getLogger(__name__)


class RemoteQuizService:
    """Request quizzes from ``quiz serve`` over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 90.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/generate"

    def generate(
        self, topic: Any, question_count: Any, difficulty: Any
    ) -> Any:
        body = {
            "topic": topic,
            "numQuestions": question_count,
            "difficulty": str(difficulty),
        }
        logger.info("Requesting quiz from server", extra={"url": self.url})
        try:
            with httpx.Client(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = client.post(self.url, json=body)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(
                f"transport failure: no response within {self.timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"transport failure: {exc}") from exc

        if not response.is_success:
            detail = ""
            try:
                detail = str(response.json().get("error", ""))
            except (ValueError, AttributeError):
                pass
            raise UpstreamStatusError(response.status_code, detail)

        try:
            return response.json()
        except ValueError as exc:
            raise PayloadDecodeError(
                f"invalid upstream payload: quiz server sent non-JSON ({exc})"
            ) from exc
