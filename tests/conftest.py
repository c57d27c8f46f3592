"""Fakes for the external collaborators of the pipeline."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from lyric_assistant.agent.lyrics_agent import parse_analysis
from lyric_assistant.errors import ConfigurationError
from lyric_assistant.models.history import HistoryRecord
from lyric_assistant.pipeline import LyricsPipeline
from lyric_assistant.services.audio_storage import public_url

GOOD_ANALYSIS = {
    "情感": "悲傷而平靜",
    "BPM": 72,
    "和弦": "Am - F - C - G",
    "語音風格": "悲傷",
}


class FakeCompletions:
    def __init__(self, content: str):
        self.content = content
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_openai_client(content: str) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content)))


class FakeAnalyzer:
    def __init__(self, raw: str = json.dumps(GOOD_ANALYSIS, ensure_ascii=False)):
        self.raw = raw
        self.prompts: list[str] = []

    async def analyze(self, prompt: str):
        self.prompts.append(prompt)
        return parse_analysis(self.raw)


class FakeSynthesizer:
    def __init__(self, audio: bytes = b"ID3fake-mp3"):
        self.audio = audio
        self.calls: list[tuple] = []

    async def synthesize(self, text, style, gender):
        self.calls.append((text, style, gender))
        return self.audio


class FakeStorage:
    def __init__(self, bucket_name: str | None = "lyrics-audio"):
        self.bucket_name = bucket_name
        self.uploads: list[bytes] = []

    def ensure_configured(self):
        if not self.bucket_name:
            raise ConfigurationError("GCS_BUCKET_NAME")

    async def upload(self, audio: bytes) -> str:
        self.ensure_configured()
        self.uploads.append(audio)
        return public_url(self.bucket_name, "audio-1700000000000-abc1234.mp3")


class FakeHistory:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: list[HistoryRecord] = []

    async def record(self, record: HistoryRecord) -> int:
        if self.fail:
            raise RuntimeError("database unavailable")
        self.records.append(record)
        return len(self.records)


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def history():
    return FakeHistory()


@pytest.fixture
def pipeline(analyzer, synthesizer, storage, history):
    return LyricsPipeline(
        analyzer=analyzer, synthesizer=synthesizer, storage=storage, history=history
    )
