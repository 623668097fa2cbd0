# backend/services/storage_service.py

import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    """The upload is missing or its declared media type is not allowed."""


@dataclass(frozen=True)
class UploadedFile:
    original_name: str
    stored_path: str
    mime_type: str
    size_bytes: int
    created_at: datetime


def ensure_upload_folder(config):
    os.makedirs(config.upload_folder, exist_ok=True)


def _open_unique(folder, filename):
    """
    Exclusively create <millis>-<filename> inside folder.
    If that name is taken the timestamp is bumped until a free one is found,
    so an existing upload is never overwritten.
    """
    stamp = time.time_ns() // 1_000_000
    while True:
        path = os.path.join(folder, f"{stamp}-{filename}")
        try:
            return path, open(path, "xb")
        except FileExistsError:
            stamp += 1


def _stored_name(original):
    """Sanitise the stem and keep the lowercased extension: '录音.M4A' -> 'audio.m4a'."""
    stem, ext = original.rsplit(".", 1) if "." in original else (original, "")
    stem = secure_filename(stem) or "audio"
    ext = secure_filename(ext).lower()
    return f"{stem}.{ext}" if ext else stem


def save_upload(file, config):
    """
    Persist a werkzeug FileStorage into the upload folder.
    Returns an UploadedFile; raises UploadRejected before writing anything
    when the file is missing or its mimetype is not allowed.
    """
    if file is None or not file.filename:
        raise UploadRejected("File upload failed. Ensure you are uploading a valid audio file.")

    if file.mimetype not in config.allowed_mime_types:
        raise UploadRejected("Only WAV, MP3, FLAC, and M4A audio files are allowed")

    filename = _stored_name(file.filename)
    path, fh = _open_unique(str(config.upload_folder), filename)
    try:
        with fh:
            file.save(fh)
    except OSError:
        # drop the partial file
        os.remove(path)
        raise

    uploaded = UploadedFile(
        original_name=file.filename,
        stored_path=path,
        mime_type=file.mimetype,
        size_bytes=os.path.getsize(path),
        created_at=datetime.now(timezone.utc),
    )
    logger.info("Stored upload %s (%d bytes)", path, uploaded.size_bytes)
    return uploaded
