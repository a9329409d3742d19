"""
Waveform rendering and sidecar serialization.

Rescales committed RMS columns against the stream peak with an
exponential curve, truncates to integer pixel heights, and writes the
result as a comma-joined sequence or a compact JSON record.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from wavedump.core.accumulator import WaveformState
from wavedump.errors import SidecarWriteFailure, ZeroPeakRescale

log = logging.getLogger(__name__)

# Columns never written by the accumulator render at this height
NO_DATA_PIXEL = 0


def rescale_column(value: float, peak: float, height: int) -> int:
    """
    Perceptual pixel height of one column.

    ``height * exp((value / peak) * e - e)``, truncated toward zero and
    clamped to [0, height]. ``value == peak`` maps to ``height``.

    Raises:
        ZeroPeakRescale: If ``peak`` is not positive.
    """
    if not peak > 0.0:
        raise ZeroPeakRescale(f"Cannot rescale against peak {peak}")
    pixel = int(height * math.exp((value / peak) * math.e - math.e))
    return min(height, max(0, pixel))


def render_columns(
    columns: np.ndarray,
    peak: float,
    height: int,
    written: Optional[int] = None,
) -> list[int]:
    """
    Render every column to an integer pixel height.

    Args:
        columns: RMS value per column.
        peak: Maximum RMS over committed columns.
        height: Maximum pixel height.
        written: Number of leading columns that were committed. Columns
            from this index on render as :data:`NO_DATA_PIXEL`. Defaults to
            all columns.

    Returns:
        One integer per column, each in [0, height].

    Raises:
        ZeroPeakRescale: If ``peak`` is zero.
    """
    if not peak > 0.0:
        raise ZeroPeakRescale(
            "Peak RMS is zero: the stream was silent or shorter than one bucket"
        )

    n = len(columns)
    written = n if written is None else written
    ratio = np.asarray(columns[:written], dtype=np.float64) / peak
    pixels = np.trunc(height * np.exp(ratio * math.e - math.e))
    pixels = np.clip(pixels, 0, height).astype(np.int64)

    return [int(p) for p in pixels] + [NO_DATA_PIXEL] * (n - written)


def serialize_sequence(samples: list[int]) -> str:
    """Comma-join pixel heights with no spaces and no trailing comma."""
    return ",".join(str(int(s)) for s in samples)


def parse_sequence(sequence: str) -> list[int]:
    """Inverse of :func:`serialize_sequence`."""
    if not sequence:
        return []
    return [int(s) for s in sequence.split(",")]


@dataclass
class WaveformRecord:
    """The persisted sidecar: dimensions plus one height per column."""

    width: int
    height: int
    samples: list[int]

    @property
    def sequence(self) -> str:
        return serialize_sequence(self.samples)


class WaveformExporter:
    """
    Renders a finalized :class:`WaveformState` and persists it.

    The sidecar layout is ``{"width":W,"height":H,"samples":[...]}`` with
    no whitespace.
    """

    def render(self, state: WaveformState) -> list[int]:
        """
        Render the state's columns.

        Raises:
            ZeroPeakRescale: If the stream produced no non-zero column.
        """
        return render_columns(
            state.columns, state.peak, state.height, written=state.column_cursor
        )

    def render_silence(self, state: WaveformState) -> list[int]:
        """All-zero fallback used when the peak is zero."""
        return [NO_DATA_PIXEL] * state.width

    def build_record(self, state: WaveformState, samples: list[int]) -> WaveformRecord:
        return WaveformRecord(width=state.width, height=state.height, samples=list(samples))

    def to_dict(self, record: WaveformRecord) -> dict[str, Any]:
        """
        Return the record as a dictionary (for in-memory use).

        Key order matches the on-disk layout.
        """
        return {
            "width": record.width,
            "height": record.height,
            "samples": list(record.samples),
        }

    def to_json(self, record: WaveformRecord) -> str:
        return json.dumps(self.to_dict(record), separators=(",", ":"))

    def export_json(
        self,
        record: WaveformRecord,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Write the record to a JSON file.

        Args:
            record: Rendered waveform.
            output_path: Destination path.

        Returns:
            Path to written file.

        Raises:
            SidecarWriteFailure: If the file cannot be opened or written.
        """
        output_path = Path(output_path)
        payload = self.to_json(record)

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as exc:
            raise SidecarWriteFailure(
                exc.errno, f"dumping failed: {exc.strerror or exc}", str(output_path)
            ) from exc

        log.debug("Wrote waveform record to %s", output_path)
        return output_path


def load_record(path: Union[str, Path]) -> WaveformRecord:
    """Read a sidecar written by :meth:`WaveformExporter.export_json`."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return WaveformRecord(
        width=int(data["width"]),
        height=int(data["height"]),
        samples=[int(s) for s in data["samples"]],
    )
