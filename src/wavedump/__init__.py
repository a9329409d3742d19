"""Streaming perceptual waveform summaries of 16-bit audio."""

from wavedump.config import WaveDumpConfig, parse_size
from wavedump.core.accumulator import BucketAccumulator, WaveformState
from wavedump.core.stream import WaveDumpStream, WaveformSummary
from wavedump.io.exporter import WaveformExporter
from wavedump.pipeline import WaveDumpPipeline

__version__ = "0.1.0"
__all__ = [
    "WaveDumpConfig",
    "parse_size",
    "BucketAccumulator",
    "WaveformState",
    "WaveDumpStream",
    "WaveformSummary",
    "WaveformExporter",
    "WaveDumpPipeline",
]
