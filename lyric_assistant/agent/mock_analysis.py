"""Mock analysis data for development and offline runs."""

import logging

from lyric_assistant.models.analysis import AnalysisResult

log = logging.getLogger(__name__)


def get_mock_analysis() -> AnalysisResult:
    """Return a canned analysis in the shape the model is asked to produce."""
    return AnalysisResult.model_validate(
        {
            "情感": "懷念而溫暖，帶著淡淡的不捨",
            "BPM": 92,
            "和弦": "C - G - Am - F",
            "語音風格": "充滿希望",
        }
    )


class MockLyricsAnalyzer:
    """Stands in for LyricsAnalyzer without calling the model."""

    async def analyze(self, prompt: str) -> AnalysisResult:
        log.info("Using mock analysis data")
        return get_mock_analysis()
