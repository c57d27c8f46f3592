from __future__ import annotations

import logging
import time
from html import escape
from typing import Protocol, runtime_checkable

from google.cloud import texttospeech

from lyric_assistant.models.analysis import MALE
from lyric_assistant.models.voice import ProsodySetting
from lyric_assistant.services.voice_style import prosody_for

log = logging.getLogger(__name__)

LANGUAGE_CODE = "cmn-CN"
MALE_VOICE = "cmn-CN-Wavenet-B"
FEMALE_VOICE = "cmn-CN-Wavenet-A"


@runtime_checkable
class SpeechSynthesizer(Protocol):
    """Interface for text-to-speech backends.

    ``synthesize`` takes the text, a synthesis style identifier and the
    requested gender, and returns MP3 bytes.
    """

    async def synthesize(self, text: str, style: str, gender: str | None) -> bytes: ...


def voice_for_gender(gender: str | None) -> str:
    """MALE gets the male voice; every other value gets the female voice."""
    return MALE_VOICE if gender == MALE else FEMALE_VOICE


def build_ssml(text: str, prosody: ProsodySetting) -> str:
    """Wrap text in a <speak><prosody> envelope carrying rate and pitch."""
    return (
        "<speak>"
        f'<prosody rate="{prosody.rate}" pitch="{prosody.pitch}">'
        f"{escape(text, quote=False)}"
        "</prosody>"
        "</speak>"
    )


class GoogleSpeechSynthesizer:
    """Google Cloud Text-to-Speech backend.

    Authenticates through GOOGLE_APPLICATION_CREDENTIALS. The async client is
    created lazily inside the running event loop.
    """

    def __init__(self, client: texttospeech.TextToSpeechAsyncClient | None = None):
        self._client = client

    def _get_client(self) -> texttospeech.TextToSpeechAsyncClient:
        if self._client is None:
            self._client = texttospeech.TextToSpeechAsyncClient()
        return self._client

    async def synthesize(self, text: str, style: str, gender: str | None) -> bytes:
        prosody = prosody_for(style)
        voice_name = voice_for_gender(gender)
        ssml = build_ssml(text, prosody)

        start = time.time()
        response = await self._get_client().synthesize_speech(
            input=texttospeech.SynthesisInput(ssml=ssml),
            voice=texttospeech.VoiceSelectionParams(
                language_code=LANGUAGE_CODE, name=voice_name
            ),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.MP3
            ),
        )
        log.info(
            "Synthesized %d bytes with %s (style=%s, rate=%s, pitch=%s) in %.2fs",
            len(response.audio_content),
            voice_name,
            style,
            prosody.rate,
            prosody.pitch,
            time.time() - start,
        )
        return response.audio_content
