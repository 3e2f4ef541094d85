"""FastAPI application exposing the quiz generation route."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import uvicorn
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.config import ConfigError, QuizConfig, load_config
from ..core.credentials import MissingCredentialError, load_api_key
from ..core.logging import configure_logger
from ..core.workspace import WorkspaceError, ensure_workspace
from .client import QuizGateway, QuizGenerator
from .errors import GatewayError

__all__ = [
    "GENERATION_ERROR",
    "build_gateway",
    "create_app",
    "main",
]

GENERATION_ERROR = "Error generating quiz"
INVALID_REQUEST_ERROR = "Invalid quiz request"

logger = logging.getLogger(__name__)


def create_app(gateway: QuizGenerator) -> FastAPI:
    """Build the application around ``gateway``."""

    app = FastAPI(title="quick-quiz")

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Rejected malformed quiz request",
            extra={"path": request.url.path, "errors": exc.errors()},
        )
        return JSONResponse({"error": INVALID_REQUEST_ERROR}, status_code=400)

    @app.exception_handler(Exception)
    async def _unexpected_error(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unexpected error generating quiz",
            exc_info=exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        return JSONResponse({"error": GENERATION_ERROR}, status_code=500)

    @app.post("/api/generate")
    def generate_quiz(payload: dict = Body(...)) -> Any:
        topic = payload.get("topic")
        num_questions = payload.get("numQuestions")
        difficulty = payload.get("difficulty")
        try:
            quiz = gateway.generate(topic, num_questions, difficulty)
        except GatewayError as exc:
            logger.error(
                "Error generating quiz",
                extra={
                    "error_type": type(exc).__name__,
                    "detail": str(exc),
                    "status_code": getattr(exc, "status_code", None),
                },
            )
            return JSONResponse({"error": GENERATION_ERROR}, status_code=500)
        return JSONResponse(quiz)

    @app.get("/healthz")
    def healthz() -> dict:
        return {"ok": True}

    return app


def build_gateway(
    config: QuizConfig, *, env: Optional[Mapping[str, str]] = None
) -> QuizGateway:
    """Create a gateway from configuration, failing on missing secrets."""

    api_key = load_api_key(config.gateway.api_key_env, env=env)
    if not config.gateway.agent_id:
        raise MissingCredentialError(
            "No agent id configured. "
            "Set gateway.agent_id or TRUFFLE_AGENT_ID."
        )
    return QuizGateway(
        api_key=api_key,
        agent_id=config.gateway.agent_id,
        endpoint=config.gateway.endpoint,
        timeout=config.gateway.timeout_seconds,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz serve",
        description="Serve the quiz generation API.",
    )
    parser.add_argument("--config", type=Path, help="Path to a TOML config.")
    parser.add_argument("--host", help="Override server.host.")
    parser.add_argument("--port", type=int, help="Override server.port.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror logs to stderr.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(explicit_path=args.config)
        layout = ensure_workspace()
        gateway = build_gateway(config)
    except (ConfigError, WorkspaceError, MissingCredentialError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    _, log_path = configure_logger(
        "quick_quiz",
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=args.verbose or config.logging.verbose,
        filename="serve.log",
    )
    host = args.host or config.server.host
    port = args.port if args.port is not None else config.server.port
    logger.info(
        "Starting quiz server",
        extra={"host": host, "port": port, "log_path": str(log_path)},
    )

    uvicorn.run(create_app(gateway), host=host, port=port)
    return 0
