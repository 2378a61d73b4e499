"""
Decoder interface and local implementations.

A decoder reads an image file with one parameter profile and returns raw,
newline-delimited text: one payload per line, QR payloads prefixed with
``config.QR_PREFIX``. Empty text means nothing was found. Two decoders are
available, selected by ``config.DECODER_BACKEND``:

- ``zbarimg``: shells out to the zbar command line tool.
- ``pyzbar``: calls the zbar library in-process through pyzbar.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image

import config
from errors import DecodeProfileError, EngineUnavailable

from .profiles import DecodeProfile

logger = logging.getLogger(__name__)

# Symbology labels zbarimg puts in front of each payload
_ZBAR_SYMBOLOGY_PREFIX = re.compile(
    r"^(EAN-2|EAN-5|EAN-8|EAN-13|UPC-A|UPC-E|ISBN-10|ISBN-13|COMPOSITE|I2/5|"
    r"DataBar|DataBar-Exp|Codabar|CODE-39|CODE-93|CODE-128|PDF417|SQ-Code):"
)


class Decoder(Protocol):
    """Interface for barcode/QR decoders."""

    def decode(self, image_path: Path, profile: DecodeProfile) -> str:
        """Decode ``image_path`` with ``profile`` and return raw output.

        Raises:
            DecodeProfileError: If the decoder could not run for this profile.
            EngineUnavailable: If the decoder itself is not installed.
        """


def normalize_zbarimg_output(stdout: str) -> str:
    """Drop zbarimg's symbology labels except the QR marker."""
    lines = []
    for line in stdout.splitlines():
        if line.startswith(config.QR_PREFIX):
            lines.append(line)
        else:
            lines.append(_ZBAR_SYMBOLOGY_PREFIX.sub("", line, count=1))
    return "\n".join(lines)


@dataclass
class ZbarImgDecoder:
    """Decoder backed by the ``zbarimg`` command line tool."""

    binary: str | None = None
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.binary is None:
            self.binary = config.ZBARIMG_BINARY
        if self.timeout is None:
            self.timeout = config.DECODER_TIMEOUT_SECONDS

    def decode(self, image_path: Path, profile: DecodeProfile) -> str:
        command = [self.binary, *profile.zbar_args, str(image_path)]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise EngineUnavailable(f"zbarimg executable not found: {self.binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise DecodeProfileError(
                f"zbarimg timed out after {self.timeout:g}s with profile {profile.name}"
            ) from exc

        if completed.returncode == config.ZBARIMG_NO_SYMBOLS_EXIT_CODE:
            return ""
        if completed.returncode != 0:
            raise DecodeProfileError(
                f"zbarimg exited with status {completed.returncode} "
                f"with profile {profile.name}: {completed.stderr.strip()}"
            )
        return normalize_zbarimg_output(completed.stdout)


def _load_pyzbar():
    """Import pyzbar lazily; it needs the zbar shared library at import time."""
    try:
        from pyzbar.pyzbar import ZBarSymbol, decode
        from pyzbar.pyzbar_error import PyZbarError
    except ImportError as exc:
        raise EngineUnavailable(f"pyzbar is not available: {exc}") from exc
    return decode, ZBarSymbol, PyZbarError


@dataclass
class PyzbarDecoder:
    """In-process decoder using pyzbar.

    Only the profile's symbology restriction applies; zbar density and cache
    settings are not exposed by pyzbar.
    """

    def decode(self, image_path: Path, profile: DecodeProfile) -> str:
        decode, symbol_enum, pyzbar_error = _load_pyzbar()
        symbols = [symbol_enum[name] for name in profile.symbols] if profile.symbols else None
        try:
            with Image.open(image_path) as image:
                image.load()
                found = decode(image, symbols=symbols)
        except (OSError, Image.DecompressionBombError, pyzbar_error) as exc:
            raise DecodeProfileError(
                f"pyzbar failed on {image_path} with profile {profile.name}: {exc}"
            ) from exc

        lines = []
        for symbol in found:
            data = symbol.data.decode("utf-8", errors="replace")
            if symbol.type == "QRCODE":
                lines.append(f"{config.QR_PREFIX}{data}")
            else:
                lines.append(data)
        return "\n".join(lines)


_DECODERS: dict[str, type] = {
    "zbarimg": ZbarImgDecoder,
    "pyzbar": PyzbarDecoder,
}


def get_decoder() -> Decoder:
    """Instantiate the configured decoder."""
    return get_decoder_by_name(config.DECODER_BACKEND)


def get_decoder_by_name(decoder_name: str) -> Decoder:
    """Instantiate a decoder by name."""
    decoder_cls = _DECODERS.get(decoder_name)
    if decoder_cls is None:
        raise ValueError(f"Unknown decoder: {decoder_name}")
    return decoder_cls()


def available_decoders() -> list[str]:
    return sorted(_DECODERS)
