from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from coach.config import CoachSettings
from coach.errors import CoachError
from coach.gate import LICENSE_HEADER
from coach.generation import GenerationClient, OpenAIGenerationClient
from coach.pipeline import run_recommendations

LOGGER = logging.getLogger("careercoach.coach")
RECOMMENDATIONS_PATH = "/api/recommendations"

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, OPTIONS",
    "access-control-allow-headers": f"content-type, {LICENSE_HEADER}",
}


def envelope(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=content,
        status_code=status_code,
        media_type="application/json",
        headers=CORS_HEADERS,
    )


def error_envelope(exc: Exception) -> JSONResponse:
    if isinstance(exc, CoachError):
        return envelope(exc.to_content(), exc.status_code)
    return envelope({"error": str(exc) or exc.__class__.__name__}, 500)


def create_app(
    *,
    settings: CoachSettings | None = None,
    generator: GenerationClient | None = None,
) -> FastAPI:
    resolved_settings = settings or CoachSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_client: OpenAIGenerationClient | None = None
        if generator is None and resolved_settings.openai_api_key:
            owned_client = OpenAIGenerationClient(
                api_key=resolved_settings.openai_api_key,
                model=resolved_settings.model,
            )
        app.state.settings = resolved_settings
        app.state.generator = generator or owned_client
        try:
            yield
        finally:
            if owned_client is not None:
                await owned_client.aclose()

    app = FastAPI(title="Career Coach", version="0.1.0", lifespan=lifespan)

    @app.middleware("http")
    async def observability_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - started) * 1000
            LOGGER.exception(
                json.dumps(
                    {
                        "event": "request_complete",
                        "request_id": request_id,
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": 500,
                        "duration_ms": round(duration_ms, 3),
                        "error": str(exc),
                    }
                )
            )
            response = error_envelope(exc)
            response.headers["x-request-id"] = request_id
            return response

        duration_ms = (time.perf_counter() - started) * 1000
        response.headers["x-request-id"] = request_id
        LOGGER.info(
            json.dumps(
                {
                    "event": "request_complete",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 3),
                    "source_ip": request.client.host if request.client else None,
                }
            )
        )
        return response

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "coach"}

    @app.options(RECOMMENDATIONS_PATH)
    async def recommendations_preflight() -> JSONResponse:
        return envelope({"ok": True})

    @app.post(RECOMMENDATIONS_PATH)
    async def recommendations(request: Request) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        try:
            result = await run_recommendations(
                settings=request.app.state.settings,
                generator=request.app.state.generator,
                license_key=request.headers.get(LICENSE_HEADER),
                body=await request.body(),
                request_id=request_id,
            )
        except CoachError as exc:
            return error_envelope(exc)
        except Exception as exc:
            LOGGER.exception(
                json.dumps(
                    {"event": "unhandled_error", "request_id": request_id, "error": str(exc)}
                )
            )
            return error_envelope(exc)
        return envelope(result)

    return app


app = create_app()
