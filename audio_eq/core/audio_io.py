"""
Audio I/O Module

Decodes audio data into a uniform sample buffer. Codec work is delegated
to libraries; this module only maps MIME types onto them and normalizes
the result.

Technical assumptions:
- WAV, FLAC and OGG are decoded with soundfile (libsndfile)
- MP3, AAC, M4A/MP4 and WebM are decoded with pydub (requires ffmpeg)
- Samples are returned as float32 in range [-1.0, 1.0]
- Layout is (frames, channels), always 2D, even for mono
- NO resampling, NO downmix
"""

from dataclasses import dataclass
import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional
import numpy as np
import soundfile as sf

from .errors import DecodeError, DecoderUnavailableError


logger = logging.getLogger(__name__)


# MIME type → decoder backend
SOUNDFILE_MIME_TYPES = {
    "audio/wav": "WAV",
    "audio/flac": "FLAC",
    "audio/ogg": "OGG",
}

PYDUB_MIME_TYPES = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/ogg": "ogg",
    "audio/aac": "aac",
    "audio/m4a": "mp4",
    "audio/x-m4a": "mp4",
    "audio/mp4": "mp4",
    "audio/webm": "webm",
}

# Extensions the platform mimetypes table may not know (or maps differently)
_EXTENSION_MIME_TYPES = {
    ".wav": "audio/wav",
    ".wave": "audio/wav",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".opus": "audio/ogg",
    ".aac": "audio/aac",
    ".m4a": "audio/x-m4a",
    ".mp4": "audio/mp4",
    ".webm": "audio/webm",
    ".flac": "audio/flac",
}


@dataclass
class SampleBuffer:
    """
    Decoded or rendered multi-channel audio.

    Stages never modify a buffer in place; each stage returns a new one.

    Attributes:
        data: float32 samples, Shape: (frames, channels)
        sample_rate: Sample rate in Hz
    """
    data: np.ndarray
    sample_rate: int

    def __post_init__(self):
        """Validate data integrity."""
        data = np.asarray(self.data, dtype=np.float32)
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        elif data.ndim != 2:
            raise ValueError("Audio array must be 1D or 2D")
        self.data = data
        if int(self.sample_rate) != self.sample_rate or self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be a positive integer, got: {self.sample_rate}")
        self.sample_rate = int(self.sample_rate)

    @classmethod
    def from_channels(cls, channels: list[np.ndarray], sample_rate: int) -> "SampleBuffer":
        """
        Build a buffer from separate channel arrays.

        Raises:
            ValueError: Channels differ in length
        """
        if not channels:
            return cls(np.zeros((0, 0), dtype=np.float32), sample_rate)
        lengths = {len(ch) for ch in channels}
        if len(lengths) != 1:
            raise ValueError(f"All channels must have the same length, got: {sorted(lengths)}")
        return cls(np.column_stack(channels), sample_rate)

    @property
    def channel_count(self) -> int:
        return self.data.shape[1]

    @property
    def frame_count(self) -> int:
        return self.data.shape[0]

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / self.sample_rate

    def get_channel(self, channel: int) -> np.ndarray:
        """
        Extract a single channel.

        Args:
            channel: Channel index (0 = left/mono)

        Returns:
            1D copy of the channel samples
        """
        if not 0 <= channel < self.channel_count:
            raise ValueError(
                f"Channel {channel} out of range for {self.channel_count} channel(s)"
            )
        return self.data[:, channel].copy()


def guess_mime_type(file_path: str | Path) -> Optional[str]:
    """
    Derive the audio MIME type of a local file from its extension.

    Returns:
        MIME type or None if unknown
    """
    suffix = Path(file_path).suffix.lower()
    if suffix in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(str(file_path))
    return mime_type


def decode(raw: bytes, mime_type: str) -> SampleBuffer:
    """
    Decode audio bytes into a sample buffer.

    NO automatic conversion of sample rate or channel count.

    Args:
        raw: Encoded audio data
        mime_type: Declared MIME type

    Returns:
        SampleBuffer with float32 samples

    Raises:
        DecodeError: Malformed data or unsupported type
        DecoderUnavailableError: ffmpeg is needed but not installed
    """
    if not raw:
        raise DecodeError("No audio data")

    if mime_type in SOUNDFILE_MIME_TYPES:
        try:
            return _decode_soundfile(raw, mime_type)
        except DecodeError as sf_error:
            # libsndfile lacks some ogg codecs (older builds: no opus)
            if mime_type not in PYDUB_MIME_TYPES:
                raise
            logger.debug("soundfile could not decode %s, trying pydub", mime_type)
            try:
                return _decode_pydub(raw, mime_type)
            except DecoderUnavailableError:
                raise sf_error
    if mime_type in PYDUB_MIME_TYPES:
        return _decode_pydub(raw, mime_type)

    raise DecodeError(f"Unsupported audio type: {mime_type}")


def _decode_soundfile(raw: bytes, mime_type: str) -> SampleBuffer:
    """
    Decode with soundfile.

    soundfile uses libsndfile and returns the samples without
    unwanted conversions.
    """
    try:
        data, sample_rate = sf.read(io.BytesIO(raw), dtype="float32", always_2d=True)
    except (sf.SoundFileError, RuntimeError, ValueError, TypeError) as e:
        raise DecodeError(f"Invalid {SOUNDFILE_MIME_TYPES[mime_type]} data: {e}") from e

    logger.debug(
        "Decoded %s with soundfile: %d frames, %d channel(s), %d Hz",
        mime_type, data.shape[0], data.shape[1], sample_rate,
    )
    return SampleBuffer(data=data, sample_rate=sample_rate)


def _decode_pydub(raw: bytes, mime_type: str) -> SampleBuffer:
    """
    Decode with pydub.

    Requires ffmpeg in system PATH for decoding. A missing ffmpeg/ffprobe
    is reported as DecoderUnavailableError, not as bad input.
    """
    try:
        from pydub import AudioSegment
        from pydub.exceptions import CouldntDecodeError
    except ImportError:
        raise ImportError("pydub is not installed. Please install with 'pip install pydub'.")

    fmt = PYDUB_MIME_TYPES[mime_type]
    try:
        audio = AudioSegment.from_file(io.BytesIO(raw), format=fmt)
    except CouldntDecodeError as e:
        raise DecodeError(f"Invalid {fmt} data: {e}") from e
    except OSError as e:
        # subprocess could not start ffmpeg/ffprobe
        raise DecoderUnavailableError(
            f"ffmpeg not found. Install ffmpeg to decode {fmt} files ({e})"
        ) from e
    except (IndexError, KeyError, ValueError) as e:
        # unreadable stream info from ffprobe
        raise DecodeError(f"Invalid {fmt} data: {e}") from e

    channels = audio.channels
    samples = np.array(audio.get_array_of_samples())

    # pydub returns signed integers of sample_width bytes
    full_scale = float(1 << (8 * audio.sample_width - 1))
    samples = (samples.astype(np.float64) / full_scale).astype(np.float32)
    samples = samples.reshape(-1, channels)

    logger.debug(
        "Decoded %s with pydub: %d frames, %d channel(s), %d Hz",
        mime_type, samples.shape[0], channels, audio.frame_rate,
    )
    return SampleBuffer(data=samples, sample_rate=audio.frame_rate)
