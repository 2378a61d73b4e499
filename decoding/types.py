"""
Type definitions for the decoding module.

This module defines the normalized results returned by every decoder and the
attempt record the orchestrator uses to report which method succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class SymbolType(str, Enum):
    """Kind of code a payload was decoded from."""

    BARCODE = "Barcode"
    QRCODE = "QRCode"


# symbolType value used for results wrapping several codes
MULTIPLE = "Multiple"


@dataclass(frozen=True)
class ScanResult:
    """A single decoded code.

    Attributes:
        symbol_type: Barcode or QRCode.
        data: Decoded text.
    """

    symbol_type: SymbolType
    data: str

    def to_dict(self) -> dict:
        return {"symbolType": self.symbol_type.value, "data": self.data}


@dataclass(frozen=True)
class MultipleScanResult:
    """Several codes reported by the decoder in one pass, in output order."""

    results: tuple[ScanResult, ...]

    def to_dict(self) -> dict:
        return {
            "symbolType": MULTIPLE,
            "codes": [result.to_dict() for result in self.results],
        }


ScanOutcome = Union[ScanResult, MultipleScanResult]


@dataclass(frozen=True)
class AttemptOutcome:
    """Which method produced a result, and the result itself.

    Attributes:
        method: "original", a catalog strategy name, or "manual_rotation_<angle>".
        result: The decoded result.
    """

    method: str
    result: ScanOutcome
