"""REST API routes for lyric analysis."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from lyric_assistant.config import Settings, load_settings, log_settings_banner
from lyric_assistant.errors import ConfigurationError
from lyric_assistant.models.analysis import (
    AnalysisRequest,
    AnalysisResponse,
    ErrorResponse,
)
from lyric_assistant.pipeline import LyricsPipeline, build_pipeline

log = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "AI 分析失敗，請檢查 API Key、網路或 Prompt 格式要求。"


def configuration_error_message(error: ConfigurationError) -> str:
    return f"配置錯誤：{error.setting} 未設置。"


def create_app(
    pipeline: LyricsPipeline | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Without an explicit pipeline, one is built from the environment at startup.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_settings_banner(settings)
        if getattr(app.state, "pipeline", None) is None:
            app.state.pipeline = build_pipeline(settings)
        yield

    app = FastAPI(
        title="AI Lyric Assistant API",
        description="Lyric analysis with LLM, styled speech synthesis and history",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.post("/lyrics", response_model=None)
    async def analyze_lyrics(body: AnalysisRequest) -> AnalysisResponse | JSONResponse:
        """Analyze lyrics and return the analysis with a link to the spoken audio."""
        try:
            analysis = await app.state.pipeline.run(body)
        except ConfigurationError as e:
            log.critical("Configuration error: %s", e)
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(message=configuration_error_message(e)).model_dump(),
            )
        except Exception as e:
            log.error("LLM/TTS pipeline failed: %s", e, exc_info=True)
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(message=ANALYSIS_FAILED_MESSAGE).model_dump(),
            )

        return AnalysisResponse(analysis=analysis.to_payload())

    @app.get("/api/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok"}

    # Mounted last so the API routes take precedence.
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        log.info("Static directory %s not found, serving API only", static_dir)

    return app
