"""Decoder parameter profiles, tried in order until one yields output."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DecodeProfile:
    """A named parameter set for one decode attempt.

    Attributes:
        name: Identifier used in logs.
        zbar_args: Arguments passed to zbarimg before the image path.
        symbols: Symbologies to enable (pyzbar names), or None for all.
    """

    name: str
    zbar_args: tuple[str, ...]
    symbols: tuple[str, ...] | None = None


DEFAULT_PROFILES: tuple[DecodeProfile, ...] = (
    DecodeProfile("default", ("--quiet",)),
    DecodeProfile(
        "no_cache",
        ("--quiet", "-S*.enable", "--set", "*.disable-cache=true"),
    ),
    DecodeProfile(
        "high_y_density",
        ("--quiet", "-S*.enable", "--set", "*.y-density=500"),
    ),
    DecodeProfile(
        "qr_high_density",
        ("--quiet", "-Sdisable", "-Sqrcode.enable", "--set", "qrcode.y-density=500"),
        symbols=("QRCODE",),
    ),
)
