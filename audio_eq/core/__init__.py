"""
Core DSP module - fully testable without GUI dependencies.

This module contains all processing logic:
- Audio decoding (WAV, FLAC, OGG, MP3, AAC, M4A, WebM)
- Biquad filter design and cascading
- Offline rendering of the EQ curve
- 16-bit PCM WAV encoding
"""

from .audio_io import SampleBuffer, decode, guess_mime_type
from .biquad import BiquadCoefficients, BiquadStage, design_biquad
from .errors import (
    AudioEqError,
    UnsupportedFormatError,
    OversizeError,
    DecodeError,
    DecoderUnavailableError,
    EmptyBufferError,
    FilterConfigError,
    FilterDesignError,
    RenderError,
    WavEncodeError,
)
from .filter_chain import FilterChain
from .filter_spec import FilterConfig, REFERENCE_CURVE, DEFAULT_Q
from .pipeline import (
    ProcessingConfig,
    SUPPORTED_AUDIO_TYPES,
    MAX_FILE_SIZE,
    validate_input,
    derive_output_name,
    process_bytes,
    process_file,
)
from .renderer import OfflineRenderer, render
from .wav_encoder import encode_wav, quantize_pcm16

__all__ = [
    "SampleBuffer",
    "decode",
    "guess_mime_type",
    "BiquadCoefficients",
    "BiquadStage",
    "design_biquad",
    "AudioEqError",
    "UnsupportedFormatError",
    "OversizeError",
    "DecodeError",
    "DecoderUnavailableError",
    "EmptyBufferError",
    "FilterConfigError",
    "FilterDesignError",
    "RenderError",
    "WavEncodeError",
    "FilterChain",
    "FilterConfig",
    "REFERENCE_CURVE",
    "DEFAULT_Q",
    "ProcessingConfig",
    "SUPPORTED_AUDIO_TYPES",
    "MAX_FILE_SIZE",
    "validate_input",
    "derive_output_name",
    "process_bytes",
    "process_file",
    "OfflineRenderer",
    "render",
    "encode_wav",
    "quantize_pcm16",
]
