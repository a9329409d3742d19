"""
Error taxonomy for the waveform dump engine.

Configuration and frame errors abort a stream. Sidecar failures and the
zero-peak condition are recoverable and are normally handled by
:class:`wavedump.core.stream.WaveDumpStream`.
"""


class WaveDumpError(Exception):
    """Base class for every error raised by wavedump."""


class InvalidConfiguration(WaveDumpError, ValueError):
    """Width, height or bucket size is unusable. Raised before any sample is read."""


class InvalidFrame(WaveDumpError, ValueError):
    """An input frame has zero channels or is not 16-bit signed."""


class ColumnOverflow(WaveDumpError, RuntimeError):
    """A bucket was committed with every column already written."""


class ZeroPeakRescale(WaveDumpError, ArithmeticError):
    """Peak RMS is zero at finalize, so columns cannot be rescaled."""


class SidecarWriteFailure(WaveDumpError, OSError):
    """The sidecar record could not be opened or written."""


class StreamFinalized(WaveDumpError, RuntimeError):
    """Samples were pushed after end-of-stream."""


class StreamAborted(WaveDumpError, RuntimeError):
    """The stream was aborted by an earlier invalid frame."""


class AudioLoadError(WaveDumpError, OSError):
    """An audio file could not be decoded."""
