"""
Utility module for Audio EQ.

Contains helper functions used by both GUI and CLI.
"""

from .formatting import (
    format_time,
    format_frequency,
    format_gain,
    format_sample_rate,
    format_channels,
    format_file_size,
    format_filter,
    format_audio_summary,
)

__all__ = [
    "format_time",
    "format_frequency",
    "format_gain",
    "format_sample_rate",
    "format_channels",
    "format_file_size",
    "format_filter",
    "format_audio_summary",
]
