"""
Google Cloud Speech integration for:
- transcribe_file(path): converts if needed, then returns the joined transcript

The file goes through a small pipeline before it reaches the recognizer:
raw bytes -> base64 payload -> recognition request. Each step is a plain
function so it can be checked on its own.
"""

import asyncio
import base64
import logging
import os
from dataclasses import dataclass

from google.cloud import speech

from services.audio_converter import convert_to_canonical, needs_conversion

logger = logging.getLogger(__name__)


class TranscriptionError(RuntimeError):
    pass


class AudioNotFoundError(TranscriptionError):
    pass


@dataclass(frozen=True)
class AudioBytes:
    source_path: str
    data: bytes


@dataclass(frozen=True)
class EncodedAudio:
    source_path: str
    content: str  # base64


@dataclass(frozen=True)
class RecognitionRequest:
    content: str
    encoding: str
    sample_rate_hertz: int
    language_code: str


@dataclass(frozen=True)
class TranscriptionResult:
    source_path: str
    transcript: str


def read_audio(path):
    with open(path, "rb") as fh:
        return AudioBytes(source_path=path, data=fh.read())


def encode_audio(audio):
    return EncodedAudio(
        source_path=audio.source_path,
        content=base64.b64encode(audio.data).decode("ascii"),
    )


def build_request(encoded, config):
    return RecognitionRequest(
        content=encoded.content,
        encoding="LINEAR16",
        sample_rate_hertz=config.sample_rate_hertz,
        language_code=config.language_code,
    )


def join_transcripts(results):
    """
    results: one list of alternative transcripts per recognition result,
    best first. Takes the first alternative of each and joins with newlines.
    """
    lines = []
    for i, alternatives in enumerate(results):
        if not alternatives:
            raise TranscriptionError(f"Recognition result {i} has no alternatives")
        lines.append(alternatives[0])
    return "\n".join(lines)


class GoogleSpeechRecognizer:
    """Adapter around speech.SpeechClient. The client is built on first use."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            # Uses Application Default Credentials (GOOGLE_APPLICATION_CREDENTIALS)
            self._client = speech.SpeechClient()
        return self._client

    def recognize(self, request):
        config = speech.RecognitionConfig(
            encoding=getattr(speech.RecognitionConfig.AudioEncoding, request.encoding),
            sample_rate_hertz=request.sample_rate_hertz,
            language_code=request.language_code,
        )
        audio = speech.RecognitionAudio(content=base64.b64decode(request.content))
        response = self.client.recognize(config=config, audio=audio)
        return [[alt.transcript for alt in result.alternatives] for result in response.results]


async def transcribe_file(path, config, recognizer):
    """
    Transcribe a stored upload. Raises AudioNotFoundError when the file is
    missing and TranscriptionError for every other failure.
    """
    if not os.path.isfile(path):
        raise AudioNotFoundError(f"Audio file not found: {path}")

    try:
        if needs_conversion(path, config):
            path = await convert_to_canonical(path, config)

        request = build_request(encode_audio(read_audio(path)), config)
        results = await asyncio.to_thread(recognizer.recognize, request)
        transcript = join_transcripts(results)
    except TranscriptionError:
        raise
    except Exception as exc:
        raise TranscriptionError(f"Transcription failed: {exc}") from exc

    logger.info("Recognized %d result(s) for %s", len(results), path)
    return TranscriptionResult(source_path=path, transcript=transcript)
