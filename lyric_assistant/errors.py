"""Exceptions raised by the lyric analysis pipeline."""

from __future__ import annotations


class LyricAssistantError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(LyricAssistantError):
    """A required setting is missing; raised before any external call."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} is not configured")


class InvalidModelOutputError(LyricAssistantError, ValueError):
    """The model returned text that is not valid JSON."""

    def __init__(self, message: str, raw: str | None = None):
        self.raw = raw
        super().__init__(message)


class MalformedAnalysisError(InvalidModelOutputError):
    """The model returned JSON, but not a usable analysis record."""
