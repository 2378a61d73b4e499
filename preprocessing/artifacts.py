"""Intermediate artifact naming and scoped cleanup.

An ``ArtifactSet`` belongs to exactly one scan run. Every artifact path is
reserved through it (created atomically so concurrent requests never collide)
and tracked immediately, before the engine writes anything. Leaving the
``with`` block deletes every tracked file once, whatever the exit path.
"""

from __future__ import annotations

import logging
import os
import tempfile
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


class ArtifactSet:
    """Tracks the intermediate files created during one scan run."""

    def __init__(self, directory: Path | None = None, suffix: str = ".png") -> None:
        self.directory = Path(directory) if directory is not None else None
        self.suffix = suffix
        self.token = uuid.uuid4().hex[:12]
        self._paths: list[Path] = []

    def __enter__(self) -> ArtifactSet:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def reserve(self, source: Path, label: str) -> Path:
        """Atomically create an empty artifact file and start tracking it.

        The name combines the source stem, the strategy label and the run
        token; ``mkstemp`` adds a random part and guarantees exclusive creation.
        """
        source = Path(source)
        directory = self.directory if self.directory is not None else source.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(
            prefix=f"{source.stem}_{label}_{self.token}_",
            suffix=self.suffix,
            dir=directory,
        )
        os.close(fd)
        path = Path(name)
        self._paths.append(path)
        return path

    def cleanup(self) -> dict:
        """Delete every tracked artifact exactly once.

        Failures are logged and do not stop the remaining deletions.
        """
        counts = {"deleted": 0, "missing": 0, "failed": 0}
        paths, self._paths = self._paths, []
        for path in paths:
            try:
                path.unlink()
            except FileNotFoundError:
                counts["missing"] += 1
                continue
            except OSError as exc:
                logger.error("Error cleaning up processed file %s: %s", path, exc)
                counts["failed"] += 1
                continue
            counts["deleted"] += 1
        if paths:
            logger.debug(
                "Artifact cleanup for run %s: %s deleted, %s missing, %s failed",
                self.token, counts["deleted"], counts["missing"], counts["failed"],
            )
        return counts
