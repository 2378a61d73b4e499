"""Run one preprocessing strategy against a source image."""

from __future__ import annotations

import logging
from pathlib import Path

from .artifacts import ArtifactSet
from .engines import ImageEngine
from .strategies import PreprocessingStrategy

logger = logging.getLogger(__name__)


def run_strategy(
    engine: ImageEngine,
    source: Path,
    strategy: PreprocessingStrategy,
    artifacts: ArtifactSet,
) -> Path:
    """Apply a strategy to ``source`` and return the new artifact path.

    The artifact is tracked by ``artifacts`` before the engine runs, so a
    partially written file is still cleaned up when the engine fails.

    Raises:
        ProcessingError: If the engine fails for this strategy.
        FileNotFoundError: If ``source`` does not exist.
    """
    source = Path(source)
    if not source.is_file():
        raise FileNotFoundError(f"Source image not found: {source}")

    destination = artifacts.reserve(source, strategy.name)
    logger.debug("Applying %s to %s -> %s", strategy.name, source.name, destination.name)
    engine.transform(source, destination, strategy.operations)
    return destination
