"""
Audio EQ - applies a fixed equalization curve to audio files and exports
16-bit PCM WAV.
"""

__version__ = "1.0.0"
