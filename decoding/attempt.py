"""Decode attempt stage: try each profile until one yields output."""

from __future__ import annotations

import logging
from pathlib import Path

from errors import DecodeProfileError

from .decoders import Decoder
from .parsing import parse_decoder_output
from .profiles import DEFAULT_PROFILES, DecodeProfile
from .types import ScanOutcome

logger = logging.getLogger(__name__)


def attempt_scan(
    decoder: Decoder,
    image_path: Path,
    profiles: tuple[DecodeProfile, ...] = DEFAULT_PROFILES,
) -> ScanOutcome | None:
    """Run the decoder with each profile in order.

    A profile that fails to run is logged and skipped. The first profile
    producing non-empty output decides the result.

    Returns:
        The parsed result, or None when every profile came back empty or failed.
    """
    for profile in profiles:
        try:
            raw = decoder.decode(Path(image_path), profile)
        except DecodeProfileError as exc:
            logger.info("Scan attempt failed with profile %s: %s", profile.name, exc)
            continue

        result = parse_decoder_output(raw)
        if result is not None:
            logger.debug("Profile %s decoded %s", profile.name, Path(image_path).name)
            return result

    return None
