"""
WAV Encoder

Serializes a sample buffer as canonical 16-bit PCM WAV (RIFF).

Format:
- 44-byte header: RIFF chunk, 16-byte "fmt " chunk (PCM), "data" chunk
- Interleaved little-endian int16 samples, frame by frame
- No metadata chunks

Quantization:
- Clamp to [-1.0, 1.0]
- Negative samples × 32768, non-negative samples × 32767
- Truncate toward zero
- NaN and ±Inf are rejected, never encoded
The asymmetric scaling maps -1.0 → -32768 and 1.0 → 32767 exactly and
must stay as is for byte-identical output.
"""

import struct
import warnings
import numpy as np

from .audio_io import SampleBuffer
from .errors import WavEncodeError


WAV_HEADER_SIZE = 44
PCM_FORMAT_TAG = 1
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8

_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")
_U32_MAX = 0xFFFFFFFF


def quantize_pcm16(samples: np.ndarray) -> np.ndarray:
    """
    Convert float samples to int16 PCM values.

    Args:
        samples: Float samples of any shape

    Returns:
        int16 array of the same shape

    Raises:
        WavEncodeError: Samples contain NaN or ±Inf
    """
    x = np.asarray(samples, dtype=np.float64)
    if not np.all(np.isfinite(x)):
        raise WavEncodeError("Audio data contains non-finite samples (NaN or Inf)")
    x = np.clip(x, -1.0, 1.0)
    scaled = np.where(x < 0, x * 32768.0, x * 32767.0)
    return np.trunc(scaled).astype(np.int16)


def build_header(channel_count: int, sample_rate: int, frame_count: int) -> bytes:
    """
    Build the 44-byte WAV header.

    Raises:
        WavEncodeError: Values do not fit the header fields
    """
    if not 0 < channel_count <= 0xFFFF:
        raise WavEncodeError(f"Channel count out of range for WAV: {channel_count}")
    block_align = channel_count * BYTES_PER_SAMPLE
    if block_align > 0xFFFF:
        raise WavEncodeError(f"Block align out of range for WAV: {block_align}")

    data_bytes = frame_count * block_align
    byte_rate = sample_rate * block_align
    if 36 + data_bytes > _U32_MAX:
        raise WavEncodeError(f"Audio too long for a WAV file ({data_bytes} data bytes)")
    if not 0 < sample_rate <= _U32_MAX or byte_rate > _U32_MAX:
        raise WavEncodeError(f"Sample rate out of range for WAV: {sample_rate}")

    return _HEADER_STRUCT.pack(
        b"RIFF",
        36 + data_bytes,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        channel_count,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_bytes,
    )


def encode_wav(buffer: SampleBuffer) -> bytes:
    """
    Encode a buffer as 16-bit PCM WAV.

    Args:
        buffer: Rendered audio

    Returns:
        WAV file content, exactly 44 + frames × channels × 2 bytes

    Raises:
        WavEncodeError: Buffer cannot be represented as WAV or contains
            non-finite samples
    """
    header = build_header(buffer.channel_count, buffer.sample_rate, buffer.frame_count)
    pcm = quantize_pcm16(buffer.data).astype("<i2", copy=False)

    if np.any(np.abs(buffer.data) > 1.0):
        warnings.warn(
            "Audio data exceeds [-1.0, 1.0]. Clipping will be applied.",
            UserWarning,
        )

    # (frames, channels) in C order is already frame-interleaved
    return header + pcm.tobytes(order="C")
