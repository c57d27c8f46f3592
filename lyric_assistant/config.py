"""Environment-driven settings."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

log = logging.getLogger(__name__)

DEFAULT_MODEL_ID = "gemini-2.5-flash"
DEFAULT_PORT = 3000
DEFAULT_DB_PORT = 3306


def _env(*names: str, default: str | None = None) -> str | None:
    """Return the first non-empty variable among ``names``."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return default


def _env_flag(name: str) -> bool:
    return (os.environ.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Runtime configuration.

    Only the LLM credential and the bucket name are guarded at request time;
    everything else is used as-is by the client it configures.
    """

    gemini_api_key: str | None = None
    llm_model: str = DEFAULT_MODEL_ID
    gcp_project_id: str | None = None
    gcs_bucket_name: str | None = None

    db_host: str | None = None
    db_user: str | None = None
    db_password: str | None = None
    db_name: str | None = None
    db_port: int = DEFAULT_DB_PORT
    database_url: str | None = None

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    static_dir: str = "public"
    use_mock_analysis: bool = False


def load_settings() -> Settings:
    """Load ``.env`` (if present) and build Settings from the environment.

    Railway-style ``MYSQL*`` variables take precedence over ``DB_*``.
    """
    load_dotenv()
    return Settings(
        gemini_api_key=_env("GEMINI_API_KEY"),
        llm_model=_env("LLM_MODEL", default=DEFAULT_MODEL_ID),
        gcp_project_id=_env("GCP_PROJECT_ID"),
        gcs_bucket_name=_env("GCS_BUCKET_NAME"),
        db_host=_env("MYSQLHOST", "DB_HOST"),
        db_user=_env("MYSQLUSER", "DB_USER"),
        db_password=_env("MYSQLPASSWORD", "DB_PASSWORD"),
        db_name=_env("MYSQLDATABASE", "DB_NAME"),
        db_port=int(_env("MYSQLPORT", "DB_PORT", default=str(DEFAULT_DB_PORT))),
        database_url=_env("DATABASE_URL"),
        host=_env("HOST", default="0.0.0.0"),
        port=int(_env("PORT", default=str(DEFAULT_PORT))),
        static_dir=_env("STATIC_DIR", default="public"),
        use_mock_analysis=_env_flag("USE_MOCK_ANALYSIS"),
    )


def log_settings_banner(settings: Settings) -> None:
    """Log a configuration summary without secrets."""
    log.info("--- Configuration ---")
    log.info("GCP_PROJECT_ID: %r", settings.gcp_project_id)
    if settings.use_mock_analysis:
        log.info("LLM client: mock analysis (no API calls)")
    else:
        log.info(
            "LLM client: %s via OpenAI-compatible API (key %s)",
            settings.llm_model,
            "loaded" if settings.gemini_api_key else "MISSING",
        )
    log.info("TTS client: Google Cloud Text-to-Speech (service account)")
    log.info("GCS bucket: %r", settings.gcs_bucket_name)
    if settings.database_url:
        log.info("Database: DATABASE_URL override")
    else:
        log.info("Database host: %r", settings.db_host)
    log.info("---------------------")
