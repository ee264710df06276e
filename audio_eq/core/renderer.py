"""
Offline Renderer

Applies the EQ curve to a complete buffer (batch, not streaming).

Technical details:
- One FilterChain per sample rate; coefficients shared by all channels
- Channels are filtered independently and merged by channel index
- Output has the same shape and sample rate as the input
- Non-finite output fails the run instead of being encoded
"""

import logging
from typing import Iterable, Optional
import numpy as np

from .audio_io import SampleBuffer
from .errors import EmptyBufferError, RenderError
from .filter_chain import FilterChain
from .filter_spec import FilterConfig, REFERENCE_CURVE


logger = logging.getLogger(__name__)


class OfflineRenderer:
    """
    Renders sample buffers through an EQ curve.

    Usage:
        renderer = OfflineRenderer()             # reference curve
        renderer = OfflineRenderer(my_curve)     # injected curve
        rendered = renderer.render(buffer)
    """

    def __init__(self, curve: Optional[Iterable[FilterConfig]] = None):
        self.curve: tuple[FilterConfig, ...] = tuple(
            REFERENCE_CURVE if curve is None else curve
        )

    def build_chain(self, sample_rate: int) -> FilterChain:
        """Create the filter cascade for a sample rate."""
        return FilterChain(self.curve, sample_rate)

    def render(self, buffer: SampleBuffer) -> SampleBuffer:
        """
        Filter every channel of a buffer.

        Args:
            buffer: Decoded input

        Returns:
            New buffer, same channel count, frame count and sample rate

        Raises:
            EmptyBufferError: No channels or no frames
            RenderError: Output contains NaN/Inf
        """
        if buffer.channel_count == 0:
            raise EmptyBufferError("Audio buffer has no channels")
        if buffer.frame_count == 0:
            raise EmptyBufferError("Audio buffer has no frames")

        chain = self.build_chain(buffer.sample_rate)
        logger.debug(
            "Rendering %d channel(s) x %d frames @ %d Hz through %d stage(s)",
            buffer.channel_count, buffer.frame_count, buffer.sample_rate, chain.num_stages,
        )

        output = np.empty((buffer.frame_count, buffer.channel_count), dtype=np.float32)
        for ch in range(buffer.channel_count):
            output[:, ch] = chain.process_channel(buffer.data[:, ch])

        if not np.all(np.isfinite(output)):
            raise RenderError("Rendered audio contains non-finite samples")

        return SampleBuffer(data=output, sample_rate=buffer.sample_rate)


def render(buffer: SampleBuffer, curve: Optional[Iterable[FilterConfig]] = None) -> SampleBuffer:
    """Render a buffer through a curve (reference curve by default)."""
    return OfflineRenderer(curve).render(buffer)
