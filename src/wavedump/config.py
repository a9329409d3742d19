"""
Configuration for a waveform dump.

A :class:`WaveDumpConfig` is built once, before streaming begins, and is
validated eagerly so that no invalid value ever reaches the accumulator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from wavedump.errors import InvalidConfiguration

DEFAULT_SIZE = "600x240"

INT64_MAX = 2**63 - 1

# Abbreviations accepted in place of an explicit "WxH"
NAMED_SIZES: dict[str, tuple[int, int]] = {
    "ntsc": (720, 480),
    "pal": (720, 576),
    "qntsc": (352, 240),
    "qpal": (352, 288),
    "sqcif": (128, 96),
    "qcif": (176, 144),
    "cif": (352, 288),
    "qqvga": (160, 120),
    "qvga": (320, 240),
    "vga": (640, 480),
    "svga": (800, 600),
    "xga": (1024, 768),
    "sxga": (1280, 1024),
    "uxga": (1600, 1200),
    "hd480": (852, 480),
    "hd720": (1280, 720),
    "hd1080": (1920, 1080),
}

SILENCE_POLICIES = ("zeros", "raise")

_SIZE_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


def parse_size(size: str) -> tuple[int, int]:
    """
    Parse a ``"WxH"`` string (or a named size) into ``(width, height)``.

    Raises:
        InvalidConfiguration: If the string is malformed or either
            dimension is not a positive integer.
    """
    named = NAMED_SIZES.get(size.strip().lower())
    if named is not None:
        return named

    match = _SIZE_RE.match(size)
    if match is None:
        raise InvalidConfiguration(f"Invalid size '{size}', expected WxH")

    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise InvalidConfiguration(
            f"Invalid size '{size}': width and height must be positive"
        )
    return width, height


@dataclass
class WaveDumpConfig:
    """
    Fixed parameters of one waveform dump.

    Attributes:
        width: Number of output columns.
        height: Maximum pixel height of a column.
        bucket_size: Samples reduced into each column. 0 is invalid.
        sidecar_path: Where to persist the JSON record, or None to skip.
        on_silence: ``"zeros"`` renders an all-zero waveform when the peak
            is zero, ``"raise"`` propagates :class:`ZeroPeakRescale`.
    """

    width: int = 600
    height: int = 240
    bucket_size: int = 0
    sidecar_path: Optional[Path] = None
    on_silence: str = "zeros"

    def __post_init__(self):
        if self.sidecar_path is not None:
            self.sidecar_path = Path(self.sidecar_path)
        self.validate()

    def validate(self) -> None:
        """Raise :class:`InvalidConfiguration` for any unusable field."""
        for name in ("width", "height", "bucket_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(
                    f"{name} must be an integer, got {value!r}"
                )

        if self.width <= 0:
            raise InvalidConfiguration(f"width must be positive, got {self.width}")
        if self.height <= 0:
            raise InvalidConfiguration(f"height must be positive, got {self.height}")
        if self.bucket_size == 0:
            raise InvalidConfiguration(
                "bucket_size (samples per column) must be set, 0 is invalid"
            )
        if not 0 < self.bucket_size <= INT64_MAX:
            raise InvalidConfiguration(
                f"bucket_size must be in [1, {INT64_MAX}], got {self.bucket_size}"
            )
        if self.on_silence not in SILENCE_POLICIES:
            raise InvalidConfiguration(
                f"on_silence must be one of {SILENCE_POLICIES}, got {self.on_silence!r}"
            )

    @property
    def capacity(self) -> int:
        """Total samples that fit before every column is written."""
        return self.width * self.bucket_size

    @classmethod
    def from_options(
        cls,
        size: str = DEFAULT_SIZE,
        bucket_size: int = 0,
        json: Union[str, Path, None] = None,
        on_silence: str = "zeros",
    ) -> "WaveDumpConfig":
        """
        Build a config from filter-style options.

        Args:
            size: Output size as ``"WxH"`` or a named size.
            bucket_size: Samples per column.
            json: Optional sidecar path.
            on_silence: Zero-peak policy.
        """
        width, height = parse_size(size)
        return cls(
            width=width,
            height=height,
            bucket_size=bucket_size,
            sidecar_path=Path(json) if json else None,
            on_silence=on_silence,
        )
