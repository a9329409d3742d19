"""
Bucket accumulation of perceptual loudness into RMS columns.

Every ``bucket_size`` loudness values are reduced to one root-mean-square
value and written to the next output column. The running peak across all
committed columns is tracked for the final rescale.

Samples arriving after the last column is written are discarded, and an
unfinished bucket at end-of-stream is dropped rather than committed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from wavedump.config import WaveDumpConfig
from wavedump.errors import (
    ColumnOverflow,
    InvalidConfiguration,
    StreamAborted,
    StreamFinalized,
)

log = logging.getLogger(__name__)


class AccumulatorState(enum.Enum):
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"
    ABORTED = "aborted"


@dataclass
class WaveformState:
    """All mutable reduction state for one stream."""

    width: int
    height: int
    bucket_size: int

    # Columns at or beyond column_cursor hold no data (0.0)
    columns: np.ndarray = field(init=False)
    peak: float = 0.0
    accumulated_square_sum: float = 0.0
    sample_counter: int = 0
    column_cursor: int = 0

    # Bookkeeping
    samples_seen: int = 0
    samples_discarded: int = 0
    rendered_sequence: Optional[str] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0 or self.bucket_size <= 0:
            raise InvalidConfiguration(
                f"Invalid waveform state {self.width}x{self.height}, "
                f"bucket_size={self.bucket_size}"
            )
        self.columns = np.zeros(self.width, dtype=np.float64)

    @classmethod
    def from_config(cls, config: WaveDumpConfig) -> "WaveformState":
        return cls(
            width=config.width,
            height=config.height,
            bucket_size=config.bucket_size,
        )

    @property
    def is_full(self) -> bool:
        """True once every column has been written."""
        return self.column_cursor >= self.width

    @property
    def written(self) -> np.ndarray:
        """The committed columns only."""
        return self.columns[:self.column_cursor]


class BucketAccumulator:
    """
    State machine driving a :class:`WaveformState`.

    The accumulator starts in ``ACCUMULATING`` and moves to ``FINALIZED``
    once, at end-of-stream, or to ``ABORTED`` when the stream fails.
    Committing a bucket does not change state.
    """

    def __init__(self, state: WaveformState):
        self.state = state
        self.status = AccumulatorState.ACCUMULATING

    @classmethod
    def from_config(cls, config: WaveDumpConfig) -> "BucketAccumulator":
        return cls(WaveformState.from_config(config))

    @property
    def finalized(self) -> bool:
        return self.status is AccumulatorState.FINALIZED

    @property
    def aborted(self) -> bool:
        return self.status is AccumulatorState.ABORTED

    def _check_open(self) -> None:
        if self.aborted:
            raise StreamAborted("Stream was aborted, no further samples accepted")
        if self.finalized:
            raise StreamFinalized("Cannot absorb samples after end-of-stream")

    def _commit(self, rms: float) -> None:
        st = self.state
        if st.column_cursor >= st.width:
            raise ColumnOverflow(
                f"Column {st.column_cursor} out of range for width {st.width}"
            )
        st.columns[st.column_cursor] = rms
        st.peak = max(st.peak, rms)
        st.column_cursor += 1
        st.accumulated_square_sum = 0.0
        st.sample_counter = 0

    def push(self, value: float) -> None:
        """Absorb one loudness value."""
        self.absorb(np.array([value], dtype=np.float64))

    def absorb(self, values: np.ndarray) -> int:
        """
        Absorb a block of loudness values in stream order.

        Args:
            values: 1-D loudness values in [0, 1].

        Returns:
            Number of columns committed by this call.
        """
        self._check_open()
        st = self.state
        values = np.asarray(values, dtype=np.float64)
        n = len(values)
        st.samples_seen += n
        committed = 0
        pos = 0

        while pos < n:
            if st.is_full:
                dropped = n - pos
                st.samples_discarded += dropped
                log.debug("All %d columns written, discarding %d samples", st.width, dropped)
                break

            # Top up the open bucket
            if st.sample_counter > 0:
                take = min(st.bucket_size - st.sample_counter, n - pos)
                chunk = values[pos:pos + take]
                st.accumulated_square_sum += float(np.dot(chunk, chunk))
                st.sample_counter += take
                pos += take
                if st.sample_counter == st.bucket_size:
                    self._commit(float(np.sqrt(st.accumulated_square_sum / st.bucket_size)))
                    committed += 1
                continue

            # Whole buckets in one pass
            n_full = min((n - pos) // st.bucket_size, st.width - st.column_cursor)
            if n_full > 0:
                span = n_full * st.bucket_size
                block = values[pos:pos + span].reshape(n_full, st.bucket_size)
                rms = np.sqrt(np.einsum("ij,ij->i", block, block) / st.bucket_size)
                for value in rms:
                    self._commit(float(value))
                committed += n_full
                pos += span
                continue

            # Remainder opens a new bucket
            chunk = values[pos:]
            st.accumulated_square_sum = float(np.dot(chunk, chunk))
            st.sample_counter = len(chunk)
            pos = n

        return committed

    def finalize(self) -> WaveformState:
        """
        Enter ``FINALIZED`` and return the state for rendering.

        Any partially filled bucket is dropped. Calling this twice is
        harmless.
        """
        if self.aborted:
            raise StreamAborted("Cannot finalize an aborted stream")
        if self.finalized:
            return self.state

        st = self.state
        if st.sample_counter:
            log.debug("Dropping %d samples of unfinished bucket", st.sample_counter)
            st.samples_discarded += st.sample_counter
        st.accumulated_square_sum = 0.0
        st.sample_counter = 0
        self.status = AccumulatorState.FINALIZED
        return st

    def abort(self) -> None:
        """Enter ``ABORTED``. Every later absorb or finalize raises."""
        if self.status is AccumulatorState.ACCUMULATING:
            self.state.accumulated_square_sum = 0.0
            self.state.sample_counter = 0
        self.status = AccumulatorState.ABORTED
