"""
Filter Chain

Series (cascade) connection of biquad stages.

Technical details:
- Stages are ordered ascending by frequency (stable sort)
- Cascade topology: the whole signal passes through stage 1 before
  any sample enters stage 2
- Identical coefficients for all channels, fresh state per channel
"""

from typing import Iterable
import numpy as np

from .biquad import BiquadStage
from .filter_spec import FilterConfig, sort_by_frequency


class FilterChain:
    """
    Cascade of biquad stages for one sample rate.

    Usage:
        chain = FilterChain(REFERENCE_CURVE, sample_rate=44100)
        filtered = chain.process_channel(samples)
    """

    def __init__(self, curve: Iterable[FilterConfig], sample_rate: int):
        self.sample_rate = sample_rate
        self.stages: list[BiquadStage] = [
            BiquadStage(config, sample_rate) for config in sort_by_frequency(curve)
        ]

    @property
    def num_stages(self) -> int:
        """Number of filters in the chain."""
        return len(self.stages)

    def process_channel(self, samples: np.ndarray) -> np.ndarray:
        """
        Run one channel through all stages in order.

        Args:
            samples: 1D input signal

        Returns:
            1D float64 output signal of equal length
        """
        result = np.asarray(samples, dtype=np.float64)
        if result.ndim != 1:
            raise ValueError("Signal must be 1D (one channel)")
        if not self.stages:
            return result.copy()
        for stage in self.stages:
            result = stage.process(result)
        return result

    def magnitude_db(self, freqs: np.ndarray) -> np.ndarray:
        """
        Combined magnitude response of the chain.

        Args:
            freqs: Frequencies in Hz

        Returns:
            Magnitude in dB (ref: 1.0)
        """
        freqs = np.atleast_1d(np.asarray(freqs, dtype=np.float64))
        response = np.ones(len(freqs), dtype=np.complex128)
        for stage in self.stages:
            response *= stage.frequency_response(freqs)
        magnitude = np.abs(response)
        with np.errstate(divide="ignore"):
            return 20 * np.log10(magnitude)
