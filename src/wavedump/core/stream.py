"""
Streaming waveform dump driven by a pull-based frame source.

Architecture Overview
---------------------
::

    Frame source  ──request_frame()──►  Frame | None (end-of-stream)
        │
        ▼
    WaveDumpStream.filter_frame(frame)
        │
        ├─► extract_frame        (channel 0, strided view)
        ├─► perceptual_loudness  (dB floor at -60 dBFS)
        ├─► BucketAccumulator    (RMS per bucket, running peak)
        └─► sink(frame)          (pass-through, unchanged)

    end-of-stream ──► WaveDumpStream.finish()
        ├─► WaveformExporter.render   (exponential rescale to pixels)
        └─► WaveformExporter.export_json (optional sidecar)

The stream is single-threaded and synchronous. It owns its
:class:`WaveformState` exclusively for its whole lifetime.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from wavedump.config import WaveDumpConfig
from wavedump.core.accumulator import BucketAccumulator, WaveformState
from wavedump.core.extractor import Frame, extract_frame
from wavedump.core.normalizer import perceptual_loudness_array
from wavedump.errors import InvalidFrame, SidecarWriteFailure, StreamAborted, ZeroPeakRescale
from wavedump.io.exporter import WaveformExporter, WaveformRecord

log = logging.getLogger(__name__)

FrameSource = Callable[[], Optional[Frame]]
FrameSink = Callable[[Optional[Frame]], None]


@dataclass
class WaveformSummary:
    """Result of a finished stream."""

    record: WaveformRecord
    sequence: str
    columns_written: int
    peak: float
    samples_seen: int = 0
    samples_discarded: int = 0
    silent: bool = False
    sidecar: Optional[Path] = None

    # Raw RMS per column, for callers that want the unrendered values
    columns: list[float] = field(default_factory=list)


class WaveDumpStream:
    """
    Pass-through audio filter that summarizes its input as a waveform.

    Parameters
    ----------
    config:
        Validated dump configuration.
    sink:
        Optional callable receiving every frame unchanged, and ``None`` at
        end-of-stream.
    exporter:
        Renderer/serializer, defaults to :class:`WaveformExporter`.
    """

    def __init__(
        self,
        config: WaveDumpConfig,
        sink: Optional[FrameSink] = None,
        exporter: Optional[WaveformExporter] = None,
    ):
        config.validate()
        self.config = config
        self.sink = sink
        self.exporter = exporter or WaveformExporter()
        self.accumulator = BucketAccumulator(WaveformState.from_config(config))
        self.summary: Optional[WaveformSummary] = None
        self._frame_index: int = 0

    @property
    def state(self) -> WaveformState:
        return self.accumulator.state

    def _check_aborted(self) -> None:
        if self.accumulator.aborted:
            raise StreamAborted("Stream was aborted by an invalid frame")

    def filter_frame(self, frame: Frame) -> Frame:
        """
        Observe one frame and forward it to the sink.

        Raises:
            InvalidFrame: If the frame is malformed. Nothing is absorbed and
                the stream is aborted.
            StreamAborted: If an earlier frame aborted the stream.
        """
        self._check_aborted()
        try:
            samples = extract_frame(frame)
        except InvalidFrame:
            log.debug("Invalid frame %d, aborting stream", self._frame_index)
            self.accumulator.abort()
            raise
        self.accumulator.absorb(perceptual_loudness_array(samples))
        self._frame_index += 1

        if self.sink is not None:
            self.sink(frame)
        return frame

    def request_frame(self, source: FrameSource) -> Optional[Frame]:
        """
        Pull one frame from ``source`` and process it.

        Returns:
            The frame, or None once the source reports end-of-stream (at
            which point the stream is finished).
        """
        self._check_aborted()
        frame = source()
        if frame is None:
            self.finish()
            return None
        return self.filter_frame(frame)

    def run(self, source: FrameSource) -> WaveformSummary:
        """Pull frames until end-of-stream and return the summary."""
        while self.request_frame(source) is not None:
            pass
        return self.summary

    def run_frames(self, frames: Iterable[Frame]) -> WaveformSummary:
        """Convenience wrapper around :meth:`run` for any iterable."""
        it = iter(frames)
        return self.run(lambda: next(it, None))

    def finish(self) -> WaveformSummary:
        """
        Finalize the accumulator, render, and write the sidecar.

        Idempotent: later calls return the first summary.

        Raises:
            ZeroPeakRescale: Only when ``config.on_silence == "raise"``.
            StreamAborted: If an invalid frame aborted the stream.
        """
        self._check_aborted()
        if self.summary is not None:
            return self.summary

        state = self.accumulator.finalize()
        silent = False
        try:
            samples = self.exporter.render(state)
        except ZeroPeakRescale:
            if self.config.on_silence == "raise":
                raise
            log.warning(
                "Peak is zero after %d samples (%d columns), rendering silence",
                state.samples_seen, state.column_cursor,
            )
            samples = self.exporter.render_silence(state)
            silent = True

        record = self.exporter.build_record(state, samples)
        state.rendered_sequence = record.sequence

        sidecar = None
        if self.config.sidecar_path is not None:
            try:
                sidecar = self.exporter.export_json(record, self.config.sidecar_path)
            except SidecarWriteFailure as exc:
                log.warning("%s", exc)

        self.summary = WaveformSummary(
            record=record,
            sequence=state.rendered_sequence,
            columns_written=state.column_cursor,
            peak=state.peak,
            samples_seen=state.samples_seen,
            samples_discarded=state.samples_discarded,
            silent=silent,
            sidecar=sidecar,
            columns=[float(v) for v in state.columns],
        )
        log.debug(
            "Stream finished: %d frames, %d/%d columns, peak %.4f",
            self._frame_index, state.column_cursor, state.width, state.peak,
        )

        if self.sink is not None:
            self.sink(None)
        return self.summary
