"""History record: pydantic view and the ``analysis_history`` table."""

from __future__ import annotations

from pydantic import BaseModel, Field
from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AnalysisHistory(Base):
    __tablename__ = "analysis_history"

    id              = Column(Integer, primary_key=True, autoincrement=True)
    input_lyrics    = Column(Text)
    output_analysis = Column(Text)
    gender_used     = Column(Text)
    audio_file_url  = Column(Text)


class HistoryRecord(BaseModel):
    """One completed analysis, as appended to ``analysis_history``."""

    input_lyrics: str
    output_analysis: str = Field(description="JSON-serialized analysis result")
    gender_used: str
    audio_file_url: str | None = None
    inserted_id: int | None = Field(default=None, description="Assigned by the database")
