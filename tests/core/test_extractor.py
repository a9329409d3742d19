"""Tests for channel-0 sample extraction."""

import numpy as np
import pytest

from wavedump.core.extractor import Frame, extract_channel, extract_frame
from wavedump.errors import InvalidFrame


class TestExtractChannel:
    def test_stereo_takes_left(self):
        """Stereo extraction reads every other value starting at the left channel."""
        data = np.array([1, 2, 3, 4, 5, 6], dtype=np.int16)
        np.testing.assert_array_equal(extract_channel(data, 2, 3), [1, 3, 5])

    def test_mono_is_identity(self):
        """With one channel the view covers every sample."""
        data = np.arange(8, dtype=np.int16)
        np.testing.assert_array_equal(extract_channel(data, 1, 8), data)

    def test_six_channels(self):
        """Stride follows the channel count for wide layouts."""
        data = np.arange(24, dtype=np.int16)
        np.testing.assert_array_equal(extract_channel(data, 6, 4), [0, 6, 12, 18])

    def test_returns_view(self):
        """Extraction is a view over the frame, not a copy."""
        data = np.arange(12, dtype=np.int16)
        out = extract_channel(data, 3, 4)
        assert np.shares_memory(out, data)

    def test_reads_only_n_samples(self):
        """Only the requested number of samples is read."""
        data = np.arange(12, dtype=np.int16)
        assert len(extract_channel(data, 2, 2)) == 2

    def test_zero_channels_rejected(self):
        """A frame without channels is rejected."""
        with pytest.raises(InvalidFrame):
            extract_channel(np.zeros(4, dtype=np.int16), 0, 4)

    def test_float_samples_rejected(self):
        """Float samples are not accepted."""
        with pytest.raises(InvalidFrame):
            extract_channel(np.zeros(4, dtype=np.float32), 1, 4)

    def test_int32_samples_rejected(self):
        """Only 16-bit signed samples are accepted."""
        with pytest.raises(InvalidFrame):
            extract_channel(np.zeros(4, dtype=np.int32), 1, 4)

    def test_short_buffer_rejected(self):
        """A buffer too short for the declared layout is rejected."""
        with pytest.raises(InvalidFrame):
            extract_channel(np.zeros(5, dtype=np.int16), 2, 3)

    def test_list_rejected(self):
        """Plain Python lists are not frames."""
        with pytest.raises(InvalidFrame):
            extract_channel([1, 2, 3], 1, 3)


class TestFrame:
    def test_n_samples(self):
        """n_samples counts samples per channel."""
        frame = Frame(data=np.zeros(10, dtype=np.int16), channels=2)
        assert frame.n_samples == 5

    def test_from_planar_interleaves(self):
        """Planar input is interleaved channel by channel."""
        planar = np.array([[1, 2, 3], [10, 20, 30]], dtype=np.int16)
        frame = Frame.from_planar(planar)
        assert frame.channels == 2
        np.testing.assert_array_equal(frame.data, [1, 10, 2, 20, 3, 30])
        np.testing.assert_array_equal(extract_frame(frame), [1, 2, 3])

    def test_from_planar_mono(self):
        """A 1-D planar array becomes a mono frame."""
        frame = Frame.from_planar(np.array([7, 8, 9], dtype=np.int16))
        assert frame.channels == 1
        assert frame.n_samples == 3
