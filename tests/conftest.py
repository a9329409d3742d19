"""Shared fixtures: synthetic 16-bit signals and frames."""

import numpy as np
import pytest

from wavedump.config import WaveDumpConfig
from wavedump.core.extractor import Frame

TEST_SR = 22050
FULL_SCALE = 32767


def make_frames(signal: np.ndarray, channels: int = 1, frame_size: int = 256):
    """Interleave ``signal`` on every channel and split into frames."""
    planar = np.tile(np.asarray(signal, dtype=np.int16), (channels, 1))
    interleaved = np.ascontiguousarray(planar.T).reshape(-1)
    frames = []
    for start in range(0, len(signal), frame_size):
        stop = min(start + frame_size, len(signal))
        frames.append(Frame(data=interleaved[start * channels:stop * channels], channels=channels))
    return frames


@pytest.fixture
def config():
    return WaveDumpConfig(width=10, height=100, bucket_size=64)


@pytest.fixture
def dc_signal(config):
    """Full-scale DC filling every column exactly."""
    return np.full(config.capacity, FULL_SCALE, dtype=np.int16)


@pytest.fixture
def ramp_signal(config):
    """One amplitude per column, rising from quiet to full scale."""
    levels = np.linspace(0.01, 1.0, config.width)
    return np.repeat((levels * FULL_SCALE).astype(np.int16), config.bucket_size)


@pytest.fixture
def sine_signal():
    """One second of a 440 Hz sine at half scale, float."""
    t = np.linspace(0, 1.0, TEST_SR, endpoint=False)
    return (0.5 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)


@pytest.fixture
def frame_factory():
    return make_frames
