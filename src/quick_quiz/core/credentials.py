"""Credential lookup for the agent service."""

from __future__ import annotations

import os
from typing import Mapping

from dotenv import load_dotenv

__all__ = ["MissingCredentialError", "load_api_key"]


class MissingCredentialError(RuntimeError):
    """Raised when the agent service credential is not configured."""


def load_api_key(
    env_var: str, *, env: Mapping[str, str] | None = None
) -> str:
    """Return the API key stored in ``env_var``.

    ``.env`` is loaded first (without overriding the real environment) when
    reading from ``os.environ``.
    """

    if env is None:
        load_dotenv()
        env = os.environ
    api_key = (env.get(env_var) or "").strip()
    if not api_key:
        raise MissingCredentialError(
            f"{env_var} not found in environment. Set it or add it to .env"
        )
    return api_key
