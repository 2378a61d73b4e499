"""
Scan orchestration: the retry state machine around preprocessing and decoding.

The orchestrator walks a fixed sequence of states. Each state yields the
attempts it owns; the first attempt that decodes anything ends the run.

    TRY_ORIGINAL -> TRY_ROTATION_STRATEGIES -> TRY_MANUAL_ROTATIONS
                 -> TRY_OTHER_STRATEGIES -> EXHAUSTED

All artifacts created along the way belong to one ArtifactSet whose ``with``
block releases them on every exit path. The source image itself is never
deleted here.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import config
from decoding import DEFAULT_PROFILES, AttemptOutcome, DecodeProfile, Decoder, attempt_scan
from errors import NoCodeDetected, ProcessingError, ScanCancelled
from preprocessing import (
    STRATEGY_CATALOG,
    ArtifactSet,
    ImageEngine,
    PreprocessingStrategy,
    StrategyClass,
    manual_rotation,
    run_strategy,
    strategies_in_class,
)

logger = logging.getLogger(__name__)

ORIGINAL_METHOD = "original"


class ScanState(str, Enum):
    TRY_ORIGINAL = "try_original"
    TRY_ROTATION_STRATEGIES = "try_rotation_strategies"
    TRY_MANUAL_ROTATIONS = "try_manual_rotations"
    TRY_OTHER_STRATEGIES = "try_other_strategies"
    EXHAUSTED = "exhausted"


NEXT_STATE = {
    ScanState.TRY_ORIGINAL: ScanState.TRY_ROTATION_STRATEGIES,
    ScanState.TRY_ROTATION_STRATEGIES: ScanState.TRY_MANUAL_ROTATIONS,
    ScanState.TRY_MANUAL_ROTATIONS: ScanState.TRY_OTHER_STRATEGIES,
    ScanState.TRY_OTHER_STRATEGIES: ScanState.EXHAUSTED,
}


@dataclass
class ScanOrchestrator:
    """Runs the preprocessing/decode retry loop for one image at a time.

    The orchestrator holds no per-request state, so one instance can serve
    concurrent requests; each ``scan()`` call owns its own ArtifactSet.

    Attributes:
        engine: Image engine used for preprocessing strategies.
        decoder: Decoder used for every attempt.
        catalog: Strategy catalog (rotation, enhancement and blur classes).
        profiles: Decoder profiles tried per attempt, in order.
        rotation_angles: Angles for the manual rotation state.
        artifact_dir: Where artifacts go (None = next to the source image).
    """

    engine: ImageEngine
    decoder: Decoder
    catalog: tuple[PreprocessingStrategy, ...] = STRATEGY_CATALOG
    profiles: tuple[DecodeProfile, ...] = DEFAULT_PROFILES
    rotation_angles: tuple[int, ...] = field(
        default_factory=lambda: tuple(config.MANUAL_ROTATION_ANGLES)
    )
    artifact_dir: Path | None = None

    def strategies_for(self, state: ScanState) -> list[PreprocessingStrategy]:
        """Return the preprocessing strategies a state tries, in order."""
        if state is ScanState.TRY_ROTATION_STRATEGIES:
            return strategies_in_class(StrategyClass.ROTATION, self.catalog)
        if state is ScanState.TRY_MANUAL_ROTATIONS:
            return [manual_rotation(angle) for angle in self.rotation_angles]
        if state is ScanState.TRY_OTHER_STRATEGIES:
            return (
                strategies_in_class(StrategyClass.ENHANCEMENT, self.catalog)
                + strategies_in_class(StrategyClass.BLUR, self.catalog)
            )
        return []

    def plan(self) -> list[str]:
        """List every attempt method in the order a failing scan would try them."""
        methods = [ORIGINAL_METHOD]
        state = NEXT_STATE[ScanState.TRY_ORIGINAL]
        while state is not ScanState.EXHAUSTED:
            methods.extend(strategy.name for strategy in self.strategies_for(state))
            state = NEXT_STATE[state]
        return methods

    def scan(
        self,
        image_path: Path,
        cancel_event: threading.Event | None = None,
    ) -> AttemptOutcome:
        """Decode an image, falling back through the strategy states.

        Args:
            image_path: The uploaded (unmodified) image.
            cancel_event: Optional event; when set, the scan stops before the
                next attempt. Only library callers set it: the web routes
                pass none and rely on the per-invocation timeouts.

        Returns:
            The first successful attempt.

        Raises:
            NoCodeDetected: If every state is exhausted.
            ScanCancelled: If ``cancel_event`` was set.
        """
        image_path = Path(image_path)
        with ArtifactSet(self.artifact_dir) as artifacts:
            state = ScanState.TRY_ORIGINAL
            while state is not ScanState.EXHAUSTED:
                outcome = self._run_state(state, image_path, artifacts, cancel_event)
                if outcome is not None:
                    logger.info(
                        "Decoded %s using %s (%s artifacts created)",
                        image_path.name, outcome.method, len(artifacts),
                    )
                    return outcome
                logger.debug("State %s found nothing in %s", state.value, image_path.name)
                state = NEXT_STATE[state]

        raise NoCodeDetected("No valid barcode or QR code detected after all attempts")

    def _run_state(
        self,
        state: ScanState,
        image_path: Path,
        artifacts: ArtifactSet,
        cancel_event: threading.Event | None,
    ) -> AttemptOutcome | None:
        if state is ScanState.TRY_ORIGINAL:
            _check_cancelled(cancel_event)
            result = attempt_scan(self.decoder, image_path, self.profiles)
            return AttemptOutcome(ORIGINAL_METHOD, result) if result is not None else None

        for strategy in self.strategies_for(state):
            _check_cancelled(cancel_event)
            try:
                processed_path = run_strategy(self.engine, image_path, strategy, artifacts)
            except ProcessingError as exc:
                logger.info("Preprocessing failed for %s: %s", strategy.name, exc)
                continue

            result = attempt_scan(self.decoder, processed_path, self.profiles)
            if result is not None:
                return AttemptOutcome(strategy.name, result)

        return None


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ScanCancelled("Scan cancelled before completion")
