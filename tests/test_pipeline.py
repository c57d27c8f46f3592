import json

import pytest

from conftest import GOOD_ANALYSIS, FakeAnalyzer, FakeHistory, FakeStorage, FakeSynthesizer
from lyric_assistant.agent.mock_analysis import MockLyricsAnalyzer
from lyric_assistant.agent.prompts import DEFAULT_LYRICS
from lyric_assistant.config import Settings
from lyric_assistant.errors import (
    ConfigurationError,
    InvalidModelOutputError,
    MalformedAnalysisError,
)
from lyric_assistant.models.analysis import AnalysisRequest, AnalysisResult
from lyric_assistant.pipeline import LyricsPipeline, build_pipeline


class TestLyricsPipeline:
    @pytest.mark.asyncio
    async def test_full_run(self, pipeline, analyzer, synthesizer, storage, history):
        result = await pipeline.run(AnalysisRequest(lyrics="月亮代表我的心", gender="MALE"))

        assert result.synthesis_style_id == "sad"
        assert result.audio_url == (
            "https://storage.googleapis.com/lyrics-audio/audio-1700000000000-abc1234.mp3"
        )
        assert '"月亮代表我的心"' in analyzer.prompts[0]
        assert synthesizer.calls == [("月亮代表我的心", "sad", "MALE")]
        assert storage.uploads == [b"ID3fake-mp3"]

        (record,) = history.records
        assert record.input_lyrics == "月亮代表我的心"
        assert record.gender_used == "MALE"
        assert record.audio_file_url == result.audio_url
        assert record.inserted_id == 1
        stored = json.loads(record.output_analysis)
        assert stored["語音風格"] == "悲傷"
        assert stored["英文語音風格(TTS用)"] == "sad"
        assert stored["音頻檔案連結"] == result.audio_url

    @pytest.mark.asyncio
    async def test_required_fields_survive(self, pipeline):
        payload = (await pipeline.run(AnalysisRequest(lyrics="x"))).to_payload()
        assert list(payload)[:6] == [
            "情感",
            "BPM",
            "和弦",
            "語音風格",
            "英文語音風格(TTS用)",
            "音頻檔案連結",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lyrics", [None, "", "   "])
    async def test_blank_lyrics_use_placeholder(self, pipeline, analyzer, synthesizer, lyrics):
        await pipeline.run(AnalysisRequest(lyrics=lyrics, gender="FEMALE"))
        assert f'"{DEFAULT_LYRICS}"' in analyzer.prompts[0]
        assert synthesizer.calls[0][0] == DEFAULT_LYRICS

    @pytest.mark.asyncio
    async def test_missing_gender_saved_as_unknown(self, pipeline, synthesizer, history):
        await pipeline.run(AnalysisRequest(lyrics="x"))
        assert synthesizer.calls[0][2] is None
        assert history.records[0].gender_used == "UNKNOWN"

    @pytest.mark.asyncio
    async def test_unknown_vocal_style_uses_default(self, synthesizer, storage, history):
        raw = json.dumps({"情感": "興奮", "BPM": "140", "和弦": "E - B", "語音風格": "激昂"})
        pipeline = LyricsPipeline(FakeAnalyzer(raw), synthesizer, storage, history)

        result = await pipeline.run(AnalysisRequest(lyrics="x"))

        assert result.synthesis_style_id == "default"
        assert synthesizer.calls[0][1] == "default"

    @pytest.mark.asyncio
    async def test_invalid_json_stops_before_synthesis(self, synthesizer, storage, history):
        pipeline = LyricsPipeline(FakeAnalyzer("oops, not json"), synthesizer, storage, history)

        with pytest.raises(InvalidModelOutputError):
            await pipeline.run(AnalysisRequest(lyrics="x"))

        assert synthesizer.calls == []
        assert storage.uploads == []
        assert history.records == []

    @pytest.mark.asyncio
    async def test_malformed_analysis_stops_before_synthesis(self, synthesizer, storage, history):
        pipeline = LyricsPipeline(FakeAnalyzer('{"情感": "悲傷"}'), synthesizer, storage, history)

        with pytest.raises(MalformedAnalysisError):
            await pipeline.run(AnalysisRequest(lyrics="x"))

        assert synthesizer.calls == []
        assert history.records == []

    @pytest.mark.asyncio
    async def test_missing_bucket_fails_before_tts(self, analyzer, synthesizer, history):
        pipeline = LyricsPipeline(analyzer, synthesizer, FakeStorage(bucket_name=None), history)

        with pytest.raises(ConfigurationError) as exc_info:
            await pipeline.run(AnalysisRequest(lyrics="x"))

        assert exc_info.value.setting == "GCS_BUCKET_NAME"
        assert synthesizer.calls == []
        assert history.records == []

    @pytest.mark.asyncio
    async def test_synthesis_failure_aborts(self, analyzer, storage, history):
        class BrokenSynthesizer(FakeSynthesizer):
            async def synthesize(self, text, style, gender):
                raise RuntimeError("TTS quota exceeded")

        pipeline = LyricsPipeline(analyzer, BrokenSynthesizer(), storage, history)

        with pytest.raises(RuntimeError):
            await pipeline.run(AnalysisRequest(lyrics="x"))

        assert storage.uploads == []
        assert history.records == []

    @pytest.mark.asyncio
    async def test_history_failure_is_swallowed(self, analyzer, synthesizer, storage, caplog):
        pipeline = LyricsPipeline(analyzer, synthesizer, storage, FakeHistory(fail=True))

        result = await pipeline.run(AnalysisRequest(lyrics="x", gender="FEMALE"))

        assert result.audio_url.startswith("https://storage.googleapis.com/")
        assert "Failed to save analysis history" in caplog.text

    @pytest.mark.asyncio
    async def test_unserializable_analysis_skips_history(self, synthesizer, storage, history, caplog):
        class SetAnalyzer(FakeAnalyzer):
            async def analyze(self, prompt):
                return AnalysisResult.model_validate(dict(GOOD_ANALYSIS, 標籤={"抒情"}))

        pipeline = LyricsPipeline(SetAnalyzer(), synthesizer, storage, history)

        result = await pipeline.run(AnalysisRequest(lyrics="x"))

        assert result.audio_url.startswith("https://storage.googleapis.com/")
        assert history.records == []
        assert "Failed to save analysis history" in caplog.text


class TestBuildPipeline:
    def test_mock_pipeline(self):
        pipeline = build_pipeline(Settings(use_mock_analysis=True, database_url="sqlite://"))
        assert isinstance(pipeline.analyzer, MockLyricsAnalyzer)
        assert pipeline.storage.bucket_name is None

    def test_real_analyzer_uses_settings(self):
        settings = Settings(
            gemini_api_key="key",
            llm_model="gemini-2.5-pro",
            gcs_bucket_name="lyrics-audio",
            database_url="sqlite://",
        )
        pipeline = build_pipeline(settings)
        assert pipeline.analyzer.api_key == "key"
        assert pipeline.analyzer.model == "gemini-2.5-pro"
        assert pipeline.storage.bucket_name == "lyrics-audio"
