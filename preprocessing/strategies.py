"""
Preprocessing strategy catalog.

The catalog is a fixed, ordered tuple of immutable strategies. Strategies are
grouped into priority classes; within a class the order is the declaration
order below.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from config import DENOISE_RESIZE_BOX, DESKEW_THRESHOLD_PERCENT, ENHANCE_RESIZE_BOX

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
)


class StrategyClass(str, Enum):
    """Priority class of a strategy."""

    ROTATION = "rotation"
    ENHANCEMENT = "enhancement"
    BLUR = "blur"


@dataclass(frozen=True)
class PreprocessingStrategy:
    """A named image transform: an ordered tuple of operations.

    Attributes:
        name: Identifier used in logs, artifact names and attempt outcomes.
        strategy_class: Priority class used for ordering.
        operations: Operations applied in order by the image engine.
    """

    name: str
    strategy_class: StrategyClass
    operations: tuple[Operation, ...]


_ENHANCE_BOX = Resize(*ENHANCE_RESIZE_BOX)
_DENOISE_BOX = Resize(*DENOISE_RESIZE_BOX)

STRATEGY_CATALOG: tuple[PreprocessingStrategy, ...] = (
    PreprocessingStrategy("auto_rotate", StrategyClass.ROTATION, (AutoOrient(),)),
    PreprocessingStrategy(
        "rotation_sequence", StrategyClass.ROTATION, (Deskew(DESKEW_THRESHOLD_PERCENT),)
    ),
    PreprocessingStrategy("sharpening", StrategyClass.ENHANCEMENT, (Sharpen(3),)),
    PreprocessingStrategy(
        "contrast_enhancement", StrategyClass.ENHANCEMENT, (Contrast(passes=2),)
    ),
    PreprocessingStrategy("adaptive_sharpen", StrategyClass.ENHANCEMENT, (AdaptiveSharpen(2),)),
    PreprocessingStrategy(
        "basic_enhancement", StrategyClass.ENHANCEMENT, (_ENHANCE_BOX, Sharpen(1.5))
    ),
    PreprocessingStrategy(
        "gaussian_blur_light", StrategyClass.BLUR, (_DENOISE_BOX, Blur(2), Sharpen(1.5))
    ),
    PreprocessingStrategy("median_blur", StrategyClass.BLUR, (_DENOISE_BOX, Median(3))),
    PreprocessingStrategy(
        "adaptive_blur", StrategyClass.BLUR, (_DENOISE_BOX, Blur(3), Sharpen(2))
    ),
    PreprocessingStrategy(
        "bilateral_filter_denoising", StrategyClass.BLUR, (_DENOISE_BOX, AdaptiveSharpen(1))
    ),
)


def strategies_in_class(
    strategy_class: StrategyClass,
    catalog: tuple[PreprocessingStrategy, ...] = STRATEGY_CATALOG,
) -> list[PreprocessingStrategy]:
    """Return the strategies of one class in catalog order."""
    return [s for s in catalog if s.strategy_class is strategy_class]


def manual_rotation(angle: int) -> PreprocessingStrategy:
    """Build the raw rotation strategy for a fixed angle."""
    return PreprocessingStrategy(
        name=f"manual_rotation_{angle}",
        strategy_class=StrategyClass.ROTATION,
        operations=(Rotate(angle),),
    )


def get_strategy(name: str) -> PreprocessingStrategy:
    """Look up a catalog strategy by name."""
    for strategy in STRATEGY_CATALOG:
        if strategy.name == name:
            return strategy
    raise ValueError(f"Unknown preprocessing strategy: {name!r}")
