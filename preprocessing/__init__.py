"""
Image preprocessing for barcode decoding.

This module turns a source image into alternative versions that a decoder
may find easier to read: reoriented, deskewed, sharpened, contrast-enhanced
or denoised. Every version is written to a new artifact file.

Key components:
- operations: Frozen dataclasses describing single transforms
- strategies: The fixed, ordered strategy catalog and its priority classes
- engines: ImageMagick (subprocess) and OpenCV (in-process) engines
- filters: Pure numpy/OpenCV filter functions behind the in-process engine
- artifacts: Collision-free artifact naming with scoped cleanup
- runner: run_strategy() ties a strategy, an engine and an artifact set together
"""

from .artifacts import ArtifactSet
from .engines import (
    ImageEngine,
    MagickImageEngine,
    OpenCVImageEngine,
    apply_operation,
    available_engines,
    get_image_engine,
    get_image_engine_by_name,
)
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
from .runner import run_strategy
from .strategies import (
    STRATEGY_CATALOG,
    PreprocessingStrategy,
    StrategyClass,
    get_strategy,
    manual_rotation,
    strategies_in_class,
)

__all__ = [
    # Artifacts
    "ArtifactSet",
    # Engines
    "ImageEngine",
    "MagickImageEngine",
    "OpenCVImageEngine",
    "apply_operation",
    "available_engines",
    "get_image_engine",
    "get_image_engine_by_name",
    # Operations
    "AdaptiveSharpen",
    "AutoOrient",
    "Blur",
    "Contrast",
    "Deskew",
    "Median",
    "Operation",
    "Resize",
    "Rotate",
    "Sharpen",
    "magick_args",
    # Strategies
    "STRATEGY_CATALOG",
    "PreprocessingStrategy",
    "StrategyClass",
    "get_strategy",
    "manual_rotation",
    "strategies_in_class",
    "run_strategy",
]
