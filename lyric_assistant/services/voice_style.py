"""Vocal style → synthesis style → prosody lookups."""

from __future__ import annotations

from lyric_assistant.models.voice import ProsodySetting

DEFAULT_STYLE = "default"

STYLE_MAP: dict[str, str] = {
    "平靜": "calm",
    "悲傷": "sad",
    "緊張": "tension",
    "充滿希望": "hopeful",
    "敘事": "narrative",
    "歡快": "joyful",
    "友善": "friendly",
    "憤怒": "angry",
    "莊嚴": "solemn",
    "浪漫": "romantic",
}

# Deviation from a neutral delivery grows with emotional intensity.
PROSODY_MAP: dict[str, ProsodySetting] = {
    "sad": ProsodySetting(rate="85%", pitch="-0.5st"),
    "calm": ProsodySetting(rate="95%", pitch="+0st"),
    "tension": ProsodySetting(rate="115%", pitch="+3st"),
    "hopeful": ProsodySetting(rate="105%", pitch="+2st"),
    "narrative": ProsodySetting(rate="100%", pitch="+1st"),
    "joyful": ProsodySetting(rate="125%", pitch="+4st"),
    "friendly": ProsodySetting(rate="105%", pitch="+1.5st"),
    "angry": ProsodySetting(rate="120%", pitch="-1st"),
    "solemn": ProsodySetting(rate="80%", pitch="0st"),
    "romantic": ProsodySetting(rate="90%", pitch="+1st"),
}

DEFAULT_PROSODY = ProsodySetting(rate="100%", pitch="+1st")


def to_synthesis_style(vocal_style: str | None) -> str:
    """Map a Chinese vocal style label to its synthesis style identifier.

    Only exact labels match; anything else, including labels with stray
    whitespace, maps to DEFAULT_STYLE.
    """
    if vocal_style is None:
        return DEFAULT_STYLE
    return STYLE_MAP.get(vocal_style, DEFAULT_STYLE)


def prosody_for(style: str | None) -> ProsodySetting:
    """Return the rate/pitch pair for a synthesis style, DEFAULT_PROSODY if unknown."""
    if style is None:
        return DEFAULT_PROSODY
    return PROSODY_MAP.get(style, DEFAULT_PROSODY)
