"""The lyric analysis pipeline.

Steps run strictly in order for each request:

1. resolve lyrics (placeholder when blank) and build the prompt
2. LLM analysis, parsed and validated
3. vocal style → synthesis style
4. storage configuration check
5. speech synthesis
6. upload → public URL
7. history row (best effort)

Every step except the history write is fail-fast: its exception aborts the
request. A failed history write is logged and the caller still gets the
analysis and audio URL.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Protocol

from lyric_assistant.agent.lyrics_agent import LyricsAnalyzer
from lyric_assistant.agent.mock_analysis import MockLyricsAnalyzer
from lyric_assistant.agent.prompts import build_analysis_prompt, resolve_lyrics
from lyric_assistant.config import Settings
from lyric_assistant.models.analysis import AnalysisRequest, AnalysisResult
from lyric_assistant.models.history import HistoryRecord
from lyric_assistant.services.audio_storage import AudioStorage, GcsAudioStorage
from lyric_assistant.services.history_store import (
    HistoryRecorder,
    HistoryStore,
    create_history_engine,
    init_db,
)
from lyric_assistant.services.speech_service import (
    GoogleSpeechSynthesizer,
    SpeechSynthesizer,
)
from lyric_assistant.services.voice_style import to_synthesis_style

log = logging.getLogger(__name__)

UNKNOWN_GENDER = "UNKNOWN"


class Analyzer(Protocol):
    async def analyze(self, prompt: str) -> AnalysisResult: ...


class LyricsPipeline:
    """Coordinates one analysis request across the injected collaborators."""

    def __init__(
        self,
        analyzer: Analyzer,
        synthesizer: SpeechSynthesizer,
        storage: AudioStorage,
        history: HistoryRecorder,
    ):
        self.analyzer = analyzer
        self.synthesizer = synthesizer
        self.storage = storage
        self.history = history

    async def run(self, request: AnalysisRequest) -> AnalysisResult:
        start = time.time()
        lyrics = resolve_lyrics(request.lyrics)
        log.info("Analyzing lyrics: %r...", lyrics[:15])

        prompt = build_analysis_prompt(lyrics)
        analysis = await self.analyzer.analyze(prompt)

        style = to_synthesis_style(analysis.vocal_style)
        analysis.synthesis_style_id = style
        log.info("[TTS] vocal style %s → synthesis style %s", analysis.vocal_style, style)

        self.storage.ensure_configured()
        audio = await self.synthesizer.synthesize(lyrics, style, request.gender)
        analysis.audio_url = await self.storage.upload(audio)

        await self._record_history(lyrics, analysis, request.gender)

        log.info("Analysis completed in %.2fs", time.time() - start)
        return analysis

    async def _record_history(
        self, lyrics: str, analysis: AnalysisResult, gender: str | None
    ) -> None:
        # Nothing here may fail the request, serialization included.
        try:
            record = HistoryRecord(
                input_lyrics=lyrics,
                output_analysis=json.dumps(analysis.to_payload(), ensure_ascii=False),
                gender_used=gender or UNKNOWN_GENDER,
                audio_file_url=analysis.audio_url,
            )
            record.inserted_id = await self.history.record(record)
        except Exception as e:
            log.error("Failed to save analysis history: %s", e, exc_info=True)


def build_pipeline(settings: Settings, debug: bool = False) -> LyricsPipeline:
    """Construct the production pipeline once per process."""
    if settings.use_mock_analysis:
        analyzer: Analyzer = MockLyricsAnalyzer()
    else:
        analyzer = LyricsAnalyzer(
            api_key=settings.gemini_api_key, model=settings.llm_model, debug=debug
        )

    engine = create_history_engine(settings)
    init_db(engine)

    return LyricsPipeline(
        analyzer=analyzer,
        synthesizer=GoogleSpeechSynthesizer(),
        storage=GcsAudioStorage(settings.gcs_bucket_name, project=settings.gcp_project_id),
        history=HistoryStore(engine),
    )
