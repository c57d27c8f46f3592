"""Insert-only persistence of completed analyses."""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Protocol, runtime_checkable

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from lyric_assistant.config import Settings
from lyric_assistant.models.history import AnalysisHistory, Base, HistoryRecord

log = logging.getLogger(__name__)

POOL_SIZE = 10


@runtime_checkable
class HistoryRecorder(Protocol):
    """Interface for history persistence; ``record`` returns the new row id."""

    async def record(self, record: HistoryRecord) -> int: ...


def _unverified_ssl_context() -> ssl.SSLContext:
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def create_history_engine(settings: Settings) -> Engine:
    """Build the pooled MySQL engine.

    At most POOL_SIZE connections are open; further callers block until one
    is returned. Remote hosts are reached over TLS without certificate checks.
    """
    if settings.database_url:
        return create_engine(settings.database_url, pool_pre_ping=True)

    url = URL.create(
        "mysql+pymysql",
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )
    connect_args = {}
    if settings.db_host != "localhost":
        connect_args["ssl"] = _unverified_ssl_context()
    return create_engine(
        url,
        pool_size=POOL_SIZE,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def init_db(engine: Engine) -> None:
    """Create ``analysis_history`` if missing; failures are logged, not raised."""
    try:
        Base.metadata.create_all(bind=engine)
        log.info("analysis_history table checked")
    except SQLAlchemyError as e:
        log.error("Could not initialize history table: %s", e)


class HistoryStore:
    """SQLAlchemy-backed ``analysis_history`` writer."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine)

    def _insert(self, record: HistoryRecord) -> int:
        with self._session_factory() as session:
            row = AnalysisHistory(
                input_lyrics=record.input_lyrics,
                output_analysis=record.output_analysis,
                gender_used=record.gender_used,
                audio_file_url=record.audio_file_url,
            )
            session.add(row)
            session.commit()
            return row.id

    async def record(self, record: HistoryRecord) -> int:
        inserted_id = await asyncio.to_thread(self._insert, record)
        log.info("Saved analysis history (ID: %s)", inserted_id)
        return inserted_id
