"""
Image engine interface and implementations.

An engine reads an image file, applies a sequence of operations and writes
the result to a new file. Two engines are available, selected by
``config.IMAGE_ENGINE``:

- ``magick``: shells out to ImageMagick's ``convert``.
- ``opencv``: runs in-process with Pillow for loading and OpenCV for pixels.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

import cv2
import numpy as np
from PIL import Image

import config
from errors import EngineUnavailable, ProcessingError

from . import filters
from .operations import (
    AdaptiveSharpen,
    AutoOrient,
    Blur,
    Contrast,
    Deskew,
    Median,
    Operation,
    Resize,
    Rotate,
    Sharpen,
    magick_args,
)

logger = logging.getLogger(__name__)

# EXIF tag holding the camera orientation
_EXIF_ORIENTATION = 0x0112


class ImageEngine(Protocol):
    """Interface for image processing engines."""

    def transform(
        self,
        source: Path,
        destination: Path,
        operations: Iterable[Operation],
    ) -> None:
        """Apply operations to ``source`` and write the result to ``destination``.

        Raises:
            ProcessingError: If the image cannot be processed.
            EngineUnavailable: If the engine itself is not installed.
        """


@dataclass
class MagickImageEngine:
    """Engine backed by the ImageMagick command line."""

    binary: str | None = None
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.binary is None:
            self.binary = config.MAGICK_BINARY
        if self.timeout is None:
            self.timeout = config.ENGINE_TIMEOUT_SECONDS

    def build_command(
        self,
        source: Path,
        destination: Path,
        operations: Iterable[Operation],
    ) -> list[str]:
        # "[0]" selects the first frame of multi-frame inputs (GIF, TIFF)
        return [self.binary, f"{source}[0]", *magick_args(operations), str(destination)]

    def transform(
        self,
        source: Path,
        destination: Path,
        operations: Iterable[Operation],
    ) -> None:
        command = self.build_command(source, destination, operations)
        logger.debug("Running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise EngineUnavailable(
                f"ImageMagick executable not found: {self.binary}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProcessingError(
                f"{self.binary} timed out after {self.timeout:g}s"
            ) from exc

        if completed.returncode != 0:
            raise ProcessingError(
                f"{self.binary} exited with status {completed.returncode}: "
                f"{completed.stderr.strip()}"
            )


def apply_operation(
    img: np.ndarray,
    op: Operation,
    orientation: int = 1,
) -> tuple[np.ndarray, int]:
    """Apply one operation to an image array.

    Args:
        img: Input image (RGB or grayscale, uint8).
        op: Operation to apply.
        orientation: EXIF orientation still pending on ``img``.

    Returns:
        Tuple of the new image and the orientation still pending on it.
    """
    if isinstance(op, AutoOrient):
        return filters.apply_exif_orientation(img, orientation), 1
    if isinstance(op, Deskew):
        return filters.deskew(img, op.threshold), orientation
    if isinstance(op, Sharpen):
        return filters.sharpen(img, op.sigma), orientation
    if isinstance(op, AdaptiveSharpen):
        return filters.adaptive_sharpen(img, op.sigma), orientation
    if isinstance(op, Contrast):
        return filters.increase_contrast(img, op.passes), orientation
    if isinstance(op, Resize):
        return filters.resize_to_fit(img, op.width, op.height), orientation
    if isinstance(op, Blur):
        return filters.gaussian_blur(img, op.sigma), orientation
    if isinstance(op, Median):
        return filters.median_filter(img, op.size), orientation
    if isinstance(op, Rotate):
        return filters.rotate_image(img, op.degrees), orientation
    raise TypeError(f"Unsupported operation: {type(op).__name__}")


@dataclass
class OpenCVImageEngine:
    """In-process engine using Pillow to load and OpenCV to filter."""

    def load(self, source: Path) -> tuple[np.ndarray, int]:
        """Load an image as an RGB or grayscale array plus its EXIF orientation."""
        try:
            with Image.open(source) as image:
                orientation = int(image.getexif().get(_EXIF_ORIENTATION, 1))
                if image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")
                return np.array(image), orientation
        except (OSError, Image.DecompressionBombError) as exc:
            raise ProcessingError(f"Cannot read image {source}: {exc}") from exc

    def save(self, img: np.ndarray, destination: Path) -> None:
        if img.ndim == 3:
            img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
        if not cv2.imwrite(str(destination), img):
            raise ProcessingError(f"Cannot write image {destination}")

    def transform(
        self,
        source: Path,
        destination: Path,
        operations: Iterable[Operation],
    ) -> None:
        img, orientation = self.load(source)
        try:
            for op in operations:
                img, orientation = apply_operation(img, op, orientation)
        except (cv2.error, ValueError) as exc:
            raise ProcessingError(f"Image operation failed on {source}: {exc}") from exc
        self.save(img, destination)


_ENGINES: dict[str, type] = {
    "magick": MagickImageEngine,
    "opencv": OpenCVImageEngine,
}


def get_image_engine() -> ImageEngine:
    """Instantiate the configured image engine."""
    return get_image_engine_by_name(config.IMAGE_ENGINE)


def get_image_engine_by_name(engine_name: str) -> ImageEngine:
    """Instantiate an image engine by name."""
    engine_cls = _ENGINES.get(engine_name)
    if engine_cls is None:
        raise ValueError(f"Unknown image engine: {engine_name}")
    return engine_cls()


def available_engines() -> list[str]:
    return sorted(_ENGINES)
