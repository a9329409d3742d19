"""Core streaming reduction modules."""

from wavedump.core.accumulator import AccumulatorState, BucketAccumulator, WaveformState
from wavedump.core.extractor import Frame, extract_channel
from wavedump.core.normalizer import perceptual_loudness, perceptual_loudness_array

__all__ = [
    "AccumulatorState",
    "BucketAccumulator",
    "WaveformState",
    "Frame",
    "extract_channel",
    "perceptual_loudness",
    "perceptual_loudness_array",
]
