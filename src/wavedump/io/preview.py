"""
PNG preview of a rendered waveform.

Draws one vertical bar per column, bottom-aligned, so a dump can be
checked by eye without a separate renderer.
"""

from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import Image


def render_preview(
    samples: Sequence[int],
    height: int,
    color: Tuple[int, int, int] = (255, 255, 255),
    background: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """
    Build an (height, width, 3) uint8 image of column heights.

    Args:
        samples: Pixel height per column, each in [0, height].
        height: Image height in pixels.
        color: Bar colour.
        background: Fill colour.
    """
    heights = np.clip(np.asarray(samples, dtype=np.int64), 0, height)
    width = len(heights)

    # Row index counted from the bottom edge
    rows = np.arange(height)[::-1][:, None]
    mask = rows < heights[None, :]

    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:] = background
    img[mask] = color
    return img


def save_preview(
    samples: Sequence[int],
    height: int,
    output_path: Union[str, Path],
) -> Path:
    """Write :func:`render_preview` output as a PNG and return its path."""
    output_path = Path(output_path)
    Image.fromarray(render_preview(samples, height)).save(output_path)
    return output_path
