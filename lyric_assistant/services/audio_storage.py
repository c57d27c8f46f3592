from __future__ import annotations

import asyncio
import logging
import random
import string
import time
from typing import Protocol, runtime_checkable

from google.cloud import storage

from lyric_assistant.errors import ConfigurationError

log = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"
CONTENT_TYPE = "audio/mp3"
# Each object name is unique per request, so published audio never changes.
CACHE_CONTROL = "public, max-age=31536000"
SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 7


@runtime_checkable
class AudioStorage(Protocol):
    """Interface for audio artifact storage.

    ``ensure_configured`` must raise ConfigurationError before any upload is
    attempted; ``upload`` returns the public URL of the stored object.
    """

    def ensure_configured(self) -> None: ...

    async def upload(self, audio: bytes) -> str: ...


def generate_audio_filename(
    now_ms: int | None = None, rng: random.Random | None = None
) -> str:
    """Return ``audio-<epoch ms>-<7 chars of [0-9a-z]>.mp3``.

    Timestamp plus random suffix; there is no existence check.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    rng = rng or random
    suffix = "".join(rng.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"audio-{now_ms}-{suffix}.mp3"


def public_url(bucket_name: str, object_name: str) -> str:
    return f"{PUBLIC_URL_BASE}/{bucket_name}/{object_name}"


class GcsAudioStorage:
    """Publicly readable MP3 objects in a Google Cloud Storage bucket."""

    def __init__(
        self,
        bucket_name: str | None,
        project: str | None = None,
        client: storage.Client | None = None,
    ):
        self.bucket_name = bucket_name
        self.project = project
        self._client = client

    def _get_client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client(project=self.project)
        return self._client

    def ensure_configured(self) -> None:
        if not self.bucket_name:
            raise ConfigurationError("GCS_BUCKET_NAME")

    def _upload_blocking(self, object_name: str, audio: bytes) -> None:
        blob = self._get_client().bucket(self.bucket_name).blob(object_name)
        blob.cache_control = CACHE_CONTROL
        blob.upload_from_string(
            audio, content_type=CONTENT_TYPE, predefined_acl="publicRead"
        )

    async def upload(self, audio: bytes) -> str:
        self.ensure_configured()
        object_name = generate_audio_filename()
        await asyncio.to_thread(self._upload_blocking, object_name, audio)
        url = public_url(self.bucket_name, object_name)
        log.info("Uploaded audio to GCS: %s", url)
        return url
