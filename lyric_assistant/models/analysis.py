"""Request, result and response models for lyric analysis."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MALE = "MALE"
FEMALE = "FEMALE"

# The ten vocal styles the model is allowed to choose from.
VOCAL_STYLES: tuple[str, ...] = (
    "平靜",
    "悲傷",
    "緊張",
    "充滿希望",
    "敘事",
    "歡快",
    "友善",
    "憤怒",
    "莊嚴",
    "浪漫",
)


class AnalysisRequest(BaseModel):
    """Body of ``POST /lyrics``.

    ``gender`` is normally "MALE" or "FEMALE" ("RANDOM" is resolved by the
    client). Anything else is accepted and voiced as female; non-string
    values are coerced to text rather than rejected.
    """

    lyrics: str | None = None
    gender: str | None = None

    @field_validator("lyrics", "gender", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class AnalysisResult(BaseModel):
    """Structured analysis returned by the model, plus derived fields.

    Fields are exchanged under their Chinese keys (aliases). Keys the model
    adds beyond the required four are kept as extras. ``BPM`` and ``和弦`` may
    take any JSON shape (a number, a string, chords grouped by section...);
    they only have to be present and non-empty.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    emotion: str = Field(alias="情感", description="Emotion, Chinese text only")
    tempo: Any = Field(alias="BPM", description="Tempo in BPM")
    chord_progression: Any = Field(alias="和弦", description="Chord progression")
    vocal_style: str = Field(alias="語音風格", description="One of VOCAL_STYLES")

    # Derived, populated by the pipeline in this order.
    synthesis_style_id: str | None = Field(default=None, alias="英文語音風格(TTS用)")
    audio_url: str | None = Field(default=None, alias="音頻檔案連結")

    @field_validator("emotion", "vocal_style")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("tempo", "chord_progression")
    @classmethod
    def _present(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be empty")
        if isinstance(value, (list, dict)) and not value:
            raise ValueError("must not be empty")
        return value

    def to_payload(self) -> dict[str, Any]:
        """Serialize under the Chinese keys, as sent to clients and stored."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AnalysisResponse(BaseModel):
    success: Literal[True] = True
    analysis: dict[str, Any]


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    message: str
