from pydantic import BaseModel, ConfigDict, Field


class ProsodySetting(BaseModel):
    """SSML prosody attributes for one synthesis style."""

    model_config = ConfigDict(frozen=True)

    rate: str = Field(description="Relative speaking rate, e.g. '85%'")
    pitch: str = Field(description="Pitch offset in semitones, e.g. '-0.5st'")
