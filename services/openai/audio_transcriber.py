"""Audio transcription helper built on OpenAI's transcription models."""

import io
import logging
from typing import Optional

from openai import AsyncOpenAI

from utils.errors import AnalysisError

DEFAULT_TRANSCRIBE_MODEL = "whisper-1"

_MIME_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "mp4",
    "audio/aac": "m4a",
    "audio/ogg": "oga",
    "audio/opus": "ogg",
    "audio/flac": "flac",
    "audio/x-flac": "flac",
}


def filename_for_mime(mime_type: Optional[str]) -> str:
    """Return an upload filename whose extension the transcription API accepts.

    Browsers usually record `audio/webm;codecs=opus`; parameters are ignored
    and an unknown or missing type falls back to WAV.
    """
    mime = (mime_type or "").lower().split(";", 1)[0].strip()
    return f"audio.{_MIME_EXTENSIONS.get(mime, 'wav')}"


class AudioTranscriber:
    """Create text transcriptions from recorded audio."""

    def __init__(self, client: AsyncOpenAI, *, model: str = DEFAULT_TRANSCRIBE_MODEL) -> None:
        if client is None:
            raise ValueError("OpenAI client is required for transcription.")
        self.client = client
        self.model = model

    async def transcribe(self, audio_bytes: bytes, *, mime_type: Optional[str] = None) -> str:
        """Return the whitespace-trimmed transcript of `audio_bytes`."""
        if not audio_bytes:
            raise ValueError("audio_bytes must contain data for transcription.")

        audio_file = io.BytesIO(audio_bytes)
        audio_file.name = filename_for_mime(mime_type)

        try:
            response = await self.client.audio.transcriptions.create(
                model=self.model,
                file=audio_file,
            )
        except Exception as exc:
            logging.error("OpenAI transcription request failed: %s", exc)
            raise AnalysisError("Transcription request failed") from exc

        transcript = getattr(response, "text", None)
        if transcript is None:
            raise AnalysisError("Transcription response did not include text.")
        return transcript.strip()
