"""
Perceptual (decibel-floor) loudness normalization.

Maps a raw 16-bit sample to a loudness value in [0, 1]: full scale is 1.0,
-60 dBFS and below collapse to 0.0, and digital silence is exactly 0.0.
"""

import math

import numpy as np

INT16_MAX = 32767

# Loudness floor in dBFS
DB_FLOOR = -60.0


def perceptual_loudness(sample: int) -> float:
    """
    Loudness of a single 16-bit sample.

    Args:
        sample: Raw signed 16-bit value.

    Returns:
        ``(20*log10(|x|) + 60) / 60`` clamped to [0, 1], where
        ``x = sample / INT16_MAX``. Zero maps to 0.0 without a log.
    """
    x = sample / INT16_MAX
    if x == 0.0:
        return 0.0
    db = 20.0 * math.log10(abs(x))
    return min(1.0, max(0.0, (db - DB_FLOOR) / -DB_FLOOR))


def perceptual_loudness_array(samples: np.ndarray) -> np.ndarray:
    """
    Vectorised :func:`perceptual_loudness` over an array of samples.

    Returns:
        float64 array with the same length as ``samples``.
    """
    x = np.abs(np.asarray(samples, dtype=np.float64)) / INT16_MAX
    out = np.zeros_like(x)
    nonzero = x > 0.0
    db = 20.0 * np.log10(x[nonzero])
    out[nonzero] = np.clip((db - DB_FLOOR) / -DB_FLOOR, 0.0, 1.0)
    return out
