# backend/services/audio_converter.py

import asyncio
import logging
import os

logger = logging.getLogger(__name__)


class ConversionError(RuntimeError):
    pass


def needs_conversion(path, config):
    ext = os.path.splitext(path)[1].lower()
    return ext in config.conversions


def reserve_output(path, config):
    """
    Exclusively create the sibling file ffmpeg will write into.
    Tries <base>.wav first, then <base>-1.wav, <base>-2.wav, ... so an
    existing file (another upload, an earlier conversion) is never replaced.
    """
    base, ext = os.path.splitext(path)
    target_ext = config.conversions.get(ext.lower(), config.canonical_extension)
    candidate = base + target_ext
    n = 0
    while True:
        try:
            with open(candidate, "xb"):
                return candidate
        except FileExistsError:
            n += 1
            candidate = f"{base}-{n}{target_ext}"


async def convert_to_canonical(input_path, config):
    """
    Re-encode input_path to 16-bit mono PCM WAV at the configured sample rate
    using ffmpeg. Returns the output path. The source file is left in place.
    """
    try:
        output_path = reserve_output(input_path, config)
    except OSError as exc:
        raise ConversionError(f"cannot create output for {input_path}: {exc}") from exc

    # -y only ever overwrites the empty file reserved above
    cmd = [
        "ffmpeg",
        "-y",
        "-i", input_path,
        "-acodec", "pcm_s16le",
        "-ac", "1",
        "-ar", str(config.sample_rate_hertz),
        output_path,
    ]
    logger.info("Converting %s -> %s", input_path, output_path)

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        os.remove(output_path)
        raise ConversionError("ffmpeg executable not found") from exc

    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        os.remove(output_path)
        error_msg = stderr.decode("utf-8", errors="replace") if stderr else "No stderr"
        logger.error("ffmpeg failed (exit %s). stderr: %s", proc.returncode, error_msg)
        raise ConversionError(f"ffmpeg failed to convert {input_path}: {error_msg}")

    return output_path
