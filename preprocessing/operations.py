"""
Image operations that preprocessing strategies are built from.

Each operation is a frozen dataclass describing one transform and its
parameters. Operations carry no behavior beyond their ImageMagick argument
encoding: engines interpret them through a single dispatch function, so the
same strategy means the same thing whichever engine runs it.

Usage:
    from preprocessing.operations import Resize, Sharpen

    ops = (Resize(1500, 1500), Sharpen(sigma=1.5))
    args = magick_args(ops)   # ["-resize", "1500x1500", "-sharpen", "0x1.5"]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union


def _num(value: float) -> str:
    """Format a number the way ImageMagick geometry arguments expect."""
    return f"{value:g}"


@dataclass(frozen=True)
class AutoOrient:
    """Apply the EXIF orientation tag and reset it."""

    def magick_args(self) -> list[str]:
        return ["-auto-orient"]


@dataclass(frozen=True)
class Deskew:
    """Straighten a slightly skewed image.

    Attributes:
        threshold: Percentage threshold. ImageMagick uses it as the deskew
            threshold; the OpenCV engine uses it as the share of the shorter
            image side a line must span to vote for the skew angle.
    """

    threshold: float = 40.0

    def magick_args(self) -> list[str]:
        return ["-deskew", f"{_num(self.threshold)}%"]


@dataclass(frozen=True)
class Sharpen:
    """Unsharp mask with a Gaussian of the given sigma."""

    sigma: float

    def magick_args(self) -> list[str]:
        return ["-sharpen", f"0x{_num(self.sigma)}"]


@dataclass(frozen=True)
class AdaptiveSharpen:
    """Sharpen more strongly near edges than in flat regions."""

    sigma: float

    def magick_args(self) -> list[str]:
        return ["-adaptive-sharpen", f"0x{_num(self.sigma)}"]


@dataclass(frozen=True)
class Contrast:
    """Increase contrast, once per pass."""

    passes: int = 1

    def magick_args(self) -> list[str]:
        return ["-contrast"] * self.passes


@dataclass(frozen=True)
class Resize:
    """Scale to fit inside a bounding box, preserving aspect ratio."""

    width: int
    height: int

    def magick_args(self) -> list[str]:
        return ["-resize", f"{self.width}x{self.height}"]


@dataclass(frozen=True)
class Blur:
    """Gaussian blur with the given sigma."""

    sigma: float

    def magick_args(self) -> list[str]:
        return ["-blur", f"0x{_num(self.sigma)}"]


@dataclass(frozen=True)
class Median:
    """Median filter over a square neighborhood."""

    size: int = 3

    def magick_args(self) -> list[str]:
        return ["-median", str(self.size)]


@dataclass(frozen=True)
class Rotate:
    """Rotate clockwise by the given angle, expanding the canvas."""

    degrees: float

    def magick_args(self) -> list[str]:
        return ["-rotate", _num(self.degrees)]


Operation = Union[
    AutoOrient,
    Deskew,
    Sharpen,
    AdaptiveSharpen,
    Contrast,
    Resize,
    Blur,
    Median,
    Rotate,
]


def magick_args(operations: Iterable[Operation]) -> list[str]:
    """Flatten a sequence of operations into ImageMagick arguments."""
    args: list[str] = []
    for op in operations:
        args.extend(op.magick_args())
    return args
