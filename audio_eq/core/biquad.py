"""
Biquad Filter Stage

Second-order IIR filter with coefficients from the Audio EQ Cookbook
(R. Bristow-Johnson).

Technical specification:
- Direct form I recurrence:
  y[n] = b0·x[n] + b1·x[n-1] + b2·x[n-2] - a1·y[n-1] - a2·y[n-2]
- All coefficients normalized by a0
- float64 arithmetic, zero initial state, no clamping

Frequencies at or above Nyquist are clamped to Nyquist. At Nyquist the
cookbook formulas degenerate (pole/zero cancellation on the unit circle),
so the limit responses are used instead:
- peaking, lowpass, highshelf: pass-through
- highpass: silence
- lowshelf: broadband gain A²
"""

from dataclasses import dataclass
import math
import numpy as np
from scipy import signal

from .errors import FilterDesignError
from .filter_spec import FilterConfig


@dataclass(frozen=True)
class BiquadCoefficients:
    """
    Normalized biquad coefficients (a0 = 1).

    The feedback coefficients keep their cookbook sign, i.e. they are
    subtracted in the recurrence.
    """
    b0: float
    b1: float
    b2: float
    a1: float
    a2: float

    @property
    def b(self) -> np.ndarray:
        """Feed-forward coefficients for scipy.signal."""
        return np.array([self.b0, self.b1, self.b2])

    @property
    def a(self) -> np.ndarray:
        """Feedback coefficients for scipy.signal (with leading a0 = 1)."""
        return np.array([1.0, self.a1, self.a2])


IDENTITY = BiquadCoefficients(1.0, 0.0, 0.0, 0.0, 0.0)


def design_biquad(config: FilterConfig, sample_rate: int) -> BiquadCoefficients:
    """
    Compute biquad coefficients for a filter definition.

    Args:
        config: Filter definition
        sample_rate: Sample rate in Hz

    Returns:
        Normalized coefficients

    Raises:
        FilterDesignError: Invalid sample rate or non-finite coefficients
    """
    if sample_rate <= 0:
        raise FilterDesignError(f"Sample rate must be positive, got: {sample_rate}")

    nyquist = sample_rate / 2
    if config.freq >= nyquist:
        return _nyquist_limit(config)

    try:
        A = 10 ** (config.gain / 40)
    except OverflowError as e:
        raise FilterDesignError(f"Gain out of range: {config.gain} dB") from e
    if A == 0.0:
        raise FilterDesignError(f"Gain out of range: {config.gain} dB")
    omega =2 * math.pi * config.freq / sample_rate
    sin_w = math.sin(omega)
    cos_w = math.cos(omega)
    alpha = sin_w / (2 * config.effective_q)

    if config.type == "peaking":
        b0 = 1 + alpha * A
        b1 = -2 * cos_w
        b2 = 1 - alpha * A
        a0 = 1 + alpha / A
        a1 = -2 * cos_w
        a2 = 1 - alpha / A
    elif config.type == "lowshelf":
        k = 2 * math.sqrt(A) * alpha
        b0 = A * ((A + 1) - (A - 1) * cos_w + k)
        b1 = 2 * A * ((A - 1) - (A + 1) * cos_w)
        b2 = A * ((A + 1) - (A - 1) * cos_w - k)
        a0 = (A + 1) + (A - 1) * cos_w + k
        a1 = -2 * ((A - 1) + (A + 1) * cos_w)
        a2 = (A + 1) + (A - 1) * cos_w - k
    elif config.type == "highshelf":
        k = 2 * math.sqrt(A) * alpha
        b0 = A * ((A + 1) + (A - 1) * cos_w + k)
        b1 = -2 * A * ((A - 1) + (A + 1) * cos_w)
        b2 = A * ((A + 1) + (A - 1) * cos_w - k)
        a0 = (A + 1) - (A - 1) * cos_w + k
        a1 = 2 * ((A - 1) - (A + 1) * cos_w)
        a2 = (A + 1) - (A - 1) * cos_w - k
    elif config.type == "lowpass":
        b0 = (1 - cos_w) / 2
        b1 = 1 - cos_w
        b2 = (1 - cos_w) / 2
        a0 = 1 + alpha
        a1 = -2 * cos_w
        a2 = 1 - alpha
    elif config.type == "highpass":
        b0 = (1 + cos_w) / 2
        b1 = -(1 + cos_w)
        b2 = (1 + cos_w) / 2
        a0 = 1 + alpha
        a1 = -2 * cos_w
        a2 = 1 - alpha
    else:
        raise FilterDesignError(f"Unknown filter type: {config.type}")

    coeffs = (b0 / a0, b1 / a0, b2 / a0, a1 / a0, a2 / a0)
    if not all(math.isfinite(c) for c in coeffs):
        raise FilterDesignError(
            f"Non-finite coefficients for {config.type} @ {config.freq} Hz "
            f"(gain={config.gain} dB, Q={config.effective_q})"
        )
    return BiquadCoefficients(*coeffs)


def _nyquist_limit(config: FilterConfig) -> BiquadCoefficients:
    """Limit response for a filter clamped to Nyquist."""
    if config.type == "highpass":
        return BiquadCoefficients(0.0, 0.0, 0.0, 0.0, 0.0)
    if config.type == "lowshelf":
        try:
            gain = 10 ** (config.gain / 20)
        except OverflowError as e:
            raise FilterDesignError(f"Gain out of range: {config.gain} dB") from e
        return BiquadCoefficients(gain, 0.0, 0.0, 0.0, 0.0)
    return IDENTITY


class BiquadStage:
    """
    One filter of the EQ curve, bound to a sample rate.

    The stage itself holds no sample state: every call to process()
    starts from x1 = x2 = y1 = y2 = 0, so one stage can serve any
    number of channels.

    Usage:
        stage = BiquadStage(FilterConfig("peaking", 1000, 6.0, 1.0), 44100)
        filtered = stage.process(samples)
    """

    def __init__(self, config: FilterConfig, sample_rate: int):
        self.config = config
        self.sample_rate = sample_rate
        self.coefficients = design_biquad(config, sample_rate)

    def __repr__(self) -> str:
        return (
            f"BiquadStage({self.config.type} @ {self.config.freq} Hz, "
            f"{self.config.gain:+.1f} dB, Q={self.config.effective_q})"
        )

    def process(self, samples: np.ndarray) -> np.ndarray:
        """
        Filter one channel.

        Samples are processed strictly in index order.

        Args:
            samples: 1D input signal

        Returns:
            1D float64 output signal of equal length
        """
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError("Signal must be 1D (one channel)")
        if len(samples) == 0:
            return samples.copy()
        return signal.lfilter(self.coefficients.b, self.coefficients.a, samples)

    def frequency_response(self, freqs: np.ndarray) -> np.ndarray:
        """
        Complex frequency response at the given frequencies.

        Args:
            freqs: Frequencies in Hz

        Returns:
            Complex response H(e^jω)
        """
        freqs = np.atleast_1d(np.asarray(freqs, dtype=np.float64))
        _, h = signal.freqz(
            self.coefficients.b,
            self.coefficients.a,
            worN=freqs,
            fs=self.sample_rate,
        )
        return h
