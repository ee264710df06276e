"""
Processing Pipeline

Host-side glue around the core: input gating, decode → render → encode,
output naming and writing.

A run either completes or fails as a whole. The result file is written
to a temporary file next to the target and moved into place, so a
failed run never leaves a partial file behind.
"""

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import tempfile
from typing import Optional

from .audio_io import decode, guess_mime_type
from .errors import OversizeError, UnsupportedFormatError
from .filter_spec import FilterConfig, REFERENCE_CURVE
from .renderer import OfflineRenderer
from .wav_encoder import encode_wav


logger = logging.getLogger(__name__)


SUPPORTED_AUDIO_TYPES: tuple[str, ...] = (
    "audio/wav",
    "audio/mpeg",
    "audio/mp3",
    "audio/ogg",
    "audio/aac",
    "audio/m4a",
    "audio/x-m4a",
    "audio/mp4",
    "audio/webm",
    "audio/flac",
)

# 1 GiB
MAX_FILE_SIZE = 1024 * 1024 * 1024

OUTPUT_SUFFIX = "-EQ"


@dataclass(frozen=True)
class ProcessingConfig:
    """
    Settings of one processing run.

    Attributes:
        curve: EQ curve applied to the audio
        accepted_types: MIME types allowed past the input gate
        max_file_size: Maximum input size in bytes
    """
    curve: tuple[FilterConfig, ...] = REFERENCE_CURVE
    accepted_types: tuple[str, ...] = SUPPORTED_AUDIO_TYPES
    max_file_size: int = MAX_FILE_SIZE


DEFAULT_CONFIG = ProcessingConfig()


def validate_input(
    mime_type: Optional[str],
    size: int,
    config: ProcessingConfig = DEFAULT_CONFIG,
) -> None:
    """
    Reject inputs before any decoding happens.

    Raises:
        UnsupportedFormatError: MIME type not accepted
        OversizeError: Input larger than the size limit
    """
    if mime_type not in config.accepted_types:
        raise UnsupportedFormatError(
            "Unsupported file type. Please use a standard audio format "
            "(WAV, MP3, OGG, AAC, M4A, FLAC)"
        )
    if size > config.max_file_size:
        raise OversizeError(f"File size must be at most {config.max_file_size} bytes")


def derive_output_name(file_name: str) -> str:
    """
    Insert "-EQ" before the extension, or append it without one.

    Examples:
        song.mp3 → song-EQ.mp3
        archive.tar.gz → archive.tar-EQ.gz
        README → README-EQ
    """
    dot = file_name.rfind(".")
    if dot == -1:
        return file_name + OUTPUT_SUFFIX
    return file_name[:dot] + OUTPUT_SUFFIX + file_name[dot:]


def default_output_path(input_path: str | Path) -> Path:
    """
    Output path next to the input.

    The output is always WAV data; the name keeps the input's extension,
    matching the name the browser download used.
    """
    path = Path(input_path)
    return path.with_name(derive_output_name(path.name))


def process_bytes(
    raw: bytes,
    mime_type: Optional[str],
    config: ProcessingConfig = DEFAULT_CONFIG,
) -> bytes:
    """
    Run the complete pipeline on in-memory data.

    Args:
        raw: Encoded input audio
        mime_type: Declared MIME type of the input
        config: Processing settings

    Returns:
        16-bit PCM WAV file content
    """
    validate_input(mime_type, len(raw), config)
    buffer = decode(raw, mime_type)
    logger.info(
        "Decoded %d channel(s), %d frames @ %d Hz",
        buffer.channel_count, buffer.frame_count, buffer.sample_rate,
    )
    rendered = OfflineRenderer(config.curve).render(buffer)
    return encode_wav(rendered)


def process_file(
    input_path: str | Path,
    output_path: Optional[str | Path] = None,
    config: ProcessingConfig = DEFAULT_CONFIG,
) -> Path:
    """
    Process an audio file and write the equalized WAV.

    Args:
        input_path: Source audio file
        output_path: Target path (default: "<name>-EQ<ext>" next to the input)
        config: Processing settings

    Returns:
        Path of the written file

    Raises:
        FileNotFoundError: Input does not exist
        AudioEqError: Any pipeline failure
    """
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    mime_type = guess_mime_type(path)
    # Gate on the file size before reading anything
    validate_input(mime_type, path.stat().st_size, config)

    wav = process_bytes(path.read_bytes(), mime_type, config)
    target = Path(output_path) if output_path is not None else default_output_path(path)
    write_atomic(target, wav)
    logger.info("Wrote %s (%d bytes)", target, len(wav))
    return target


def write_atomic(target: str | Path, data: bytes) -> None:
    """
    Write data so that the target is either complete or untouched.
    """
    target = Path(target)
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
