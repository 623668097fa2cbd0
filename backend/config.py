"""
Central configuration. Loads environment variables from ../.env and resolves
them once into a RelayConfig that is handed to the services.
"""
import os
from dataclasses import dataclass, field
from dotenv import load_dotenv
from pathlib import Path
from types import MappingProxyType
from typing import FrozenSet, Mapping

# Load .env from project root
root = Path(__file__).resolve().parents[1]
load_dotenv(root / ".env")

BACKEND_DIR = Path(__file__).resolve().parent

# Declared media types accepted by /upload-audio
ALLOWED_MIME_TYPES = frozenset({"audio/wav", "audio/mpeg", "audio/flac", "audio/mp4"})

CANONICAL_EXTENSION = ".wav"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class RelayConfig:
    api_key: str
    upload_folder: Path = BACKEND_DIR / "uploads"
    allowed_mime_types: FrozenSet[str] = ALLOWED_MIME_TYPES
    # source extension -> canonical extension
    conversions: Mapping[str, str] = field(default_factory=lambda: {".m4a": CANONICAL_EXTENSION})
    canonical_extension: str = CANONICAL_EXTENSION
    sample_rate_hertz: int = 16000
    language_code: str = "en-US"
    gemini_model: str = "gemini-2.5-flash-lite"
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: str = "*"

    def __post_init__(self):
        # read-only views so nothing can change them after startup
        object.__setattr__(self, "allowed_mime_types", frozenset(self.allowed_mime_types))
        object.__setattr__(self, "conversions", MappingProxyType(dict(self.conversions)))

    def require_api_key(self):
        if not self.api_key:
            raise ConfigError("GOOGLE_CLOUD_API_KEY not set in environment (.env)")


def _parse_conversions(raw):
    """'m4a, .ogg' -> {'.m4a': '.wav', '.ogg': '.wav'}"""
    conversions = {}
    for item in raw.split(","):
        ext = item.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext != CANONICAL_EXTENSION:
            conversions[ext] = CANONICAL_EXTENSION
    return conversions


def load_config(environ=None):
    env = os.environ if environ is None else environ

    port = env.get("PORT", "4000")
    try:
        port = int(port)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {port!r}")

    return RelayConfig(
        api_key=env.get("GOOGLE_CLOUD_API_KEY", ""),
        upload_folder=Path(env.get("UPLOAD_FOLDER") or BACKEND_DIR / "uploads"),
        conversions=_parse_conversions(env.get("CONVERT_FORMATS", "m4a")),
        language_code=env.get("SPEECH_LANGUAGE") or "en-US",
        gemini_model=env.get("GEMINI_MODEL") or "gemini-2.5-flash-lite",
        host=env.get("HOST") or "0.0.0.0",
        port=port,
        cors_origins=env.get("CORS_ORIGINS") or "*",
    )
