"""
Pipeline Errors

Every failure aborts the whole run. There is no partial or degraded output,
so callers only need to catch AudioEqError to reset to an idle state.
"""


class AudioEqError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedFormatError(AudioEqError):
    """Input MIME type is not in the accepted set."""


class OversizeError(AudioEqError):
    """Input exceeds the size limit."""


class DecodeError(AudioEqError):
    """Audio data could not be decoded."""


class DecoderUnavailableError(AudioEqError):
    """External decoder (ffmpeg/ffprobe) is missing or could not be started."""


class EmptyBufferError(AudioEqError):
    """Decoded buffer has no channels or no frames."""


class FilterConfigError(AudioEqError, ValueError):
    """Invalid filter definition."""


class FilterDesignError(AudioEqError):
    """Coefficient computation produced non-finite values."""


class RenderError(AudioEqError):
    """Rendered output is not usable (non-finite samples)."""


class WavEncodeError(AudioEqError):
    """Buffer cannot be represented in a 16-bit PCM WAV container."""
