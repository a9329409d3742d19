"""Tests for waveform rendering and sidecar serialization."""

import json
import math

import numpy as np
import pytest

from wavedump.core.accumulator import WaveformState
from wavedump.errors import SidecarWriteFailure, ZeroPeakRescale
from wavedump.io.exporter import (
    NO_DATA_PIXEL,
    WaveformExporter,
    WaveformRecord,
    load_record,
    parse_sequence,
    render_columns,
    rescale_column,
    serialize_sequence,
)


def _state(columns, height=100, written=None):
    columns = np.asarray(columns, dtype=np.float64)
    state = WaveformState(width=len(columns), height=height, bucket_size=1)
    state.columns[:] = columns
    state.column_cursor = len(columns) if written is None else written
    state.peak = float(columns[:state.column_cursor].max()) if state.column_cursor else 0.0
    return state


class TestRescale:
    def test_peak_maps_to_height(self):
        """A column at the peak renders at full height."""
        assert rescale_column(0.7, 0.7, 240) == 240

    def test_zero_value_matches_formula(self):
        """A zero column follows the exponential formula."""
        assert rescale_column(0.0, 0.5, 240) == int(240 * math.exp(-math.e))

    def test_truncates_toward_zero(self):
        """Pixel heights are truncated toward zero."""
        expected = 100 * math.exp(0.5 * math.e - math.e)
        assert rescale_column(0.5, 1.0, 100) == int(expected)

    def test_monotonic(self):
        """Rescaling preserves ordering and stays within range."""
        peak = 0.8
        values = np.linspace(0.0, peak, 200)
        pixels = [rescale_column(v, peak, 240) for v in values]
        assert pixels == sorted(pixels)
        assert all(0 <= p <= 240 for p in pixels)

    def test_zero_peak_raises(self):
        """Rescaling against a zero peak raises."""
        with pytest.raises(ZeroPeakRescale):
            rescale_column(0.0, 0.0, 100)


class TestRenderColumns:
    def test_matches_scalar_rescale(self):
        """Vectorised rendering agrees with the scalar rescale."""
        columns = np.array([0.1, 0.4, 0.9, 0.3])
        pixels = render_columns(columns, 0.9, 240)
        assert pixels == [rescale_column(v, 0.9, 240) for v in columns]

    def test_all_at_peak(self):
        """Columns all at the peak render at full height."""
        assert render_columns(np.full(5, 0.42), 0.42, 64) == [64] * 5

    def test_unwritten_columns_render_as_no_data(self):
        """Columns that were never written render as no-data."""
        columns = np.array([0.5, 1.0, 0.0, 0.0])
        pixels = render_columns(columns, 1.0, 240, written=2)
        assert pixels[1] == 240
        assert pixels[2:] == [NO_DATA_PIXEL, NO_DATA_PIXEL]

    def test_written_silent_column_uses_formula(self):
        """A written silent column still goes through the formula."""
        pixels = render_columns(np.array([0.0, 1.0]), 1.0, 240)
        assert pixels[0] == int(240 * math.exp(-math.e))

    def test_zero_peak_raises(self):
        """Rendering with a zero peak raises."""
        with pytest.raises(ZeroPeakRescale):
            render_columns(np.zeros(4), 0.0, 100)

    def test_output_length_is_width(self):
        """One pixel height is produced per column."""
        assert len(render_columns(np.ones(7), 1.0, 10, written=3)) == 7


class TestSequence:
    def test_serialize(self):
        """Heights are comma-joined."""
        assert serialize_sequence([0, 3, 12, 240]) == "0,3,12,240"

    def test_no_trailing_comma(self):
        """The sequence has no trailing comma."""
        assert not serialize_sequence([1, 2, 3]).endswith(",")

    def test_single_value(self):
        """A single column serializes without separators."""
        assert serialize_sequence([7]) == "7"

    def test_parse(self):
        """Parsing reverses serialization."""
        assert parse_sequence("0,3,12,240") == [0, 3, 12, 240]
        assert parse_sequence("") == []


class TestWaveformExporter:
    def test_render_state(self):
        """State rendering honours the column cursor."""
        exporter = WaveformExporter()
        state = _state([0.2, 0.5, 0.0], height=50, written=2)
        pixels = exporter.render(state)
        assert pixels[1] == 50
        assert pixels[2] == NO_DATA_PIXEL

    def test_render_silent_state_raises(self):
        """A silent state cannot be rescaled."""
        with pytest.raises(ZeroPeakRescale):
            WaveformExporter().render(_state([0.0, 0.0]))

    def test_render_silence(self):
        """The silence fallback is all zeros."""
        state = _state([0.0, 0.0, 0.0])
        assert WaveformExporter().render_silence(state) == [0, 0, 0]

    def test_to_dict_layout(self):
        """Record keys follow the sidecar layout order."""
        exporter = WaveformExporter()
        record = WaveformRecord(width=3, height=10, samples=[1, 2, 10])
        assert list(exporter.to_dict(record)) == ["width", "height", "samples"]

    def test_to_json_is_compact(self):
        """The JSON record carries no whitespace."""
        record = WaveformRecord(width=3, height=240, samples=[0, 3, 240])
        assert WaveformExporter().to_json(record) == '{"width":3,"height":240,"samples":[0,3,240]}'

    def test_export_json_round_trip(self, tmp_path):
        """A written sidecar loads back to the same record."""
        exporter = WaveformExporter()
        state = _state([0.1, 0.3, 0.6, 0.9], height=240)
        record = exporter.build_record(state, exporter.render(state))

        path = exporter.export_json(record, tmp_path / "wave.json")

        loaded = load_record(path)
        assert loaded == record
        assert loaded.sequence == record.sequence
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["width"] == 4
        assert data["height"] == 240
        assert len(data["samples"]) == 4

    def test_export_json_failure(self, tmp_path):
        """An unwritable sidecar path raises SidecarWriteFailure."""
        record = WaveformRecord(width=1, height=1, samples=[1])
        with pytest.raises(SidecarWriteFailure):
            WaveformExporter().export_json(record, tmp_path / "missing" / "wave.json")
