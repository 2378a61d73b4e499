"""Parse raw decoder output into normalized scan results."""

from __future__ import annotations

from config import QR_PREFIX

from .types import MultipleScanResult, ScanOutcome, ScanResult, SymbolType


def parse_line(line: str) -> ScanResult:
    """Classify one output line.

    A line carrying the QR marker is a QR code with the marker removed; any
    other line is a barcode whose text is kept as is.
    """
    if line.startswith(QR_PREFIX):
        return ScanResult(SymbolType.QRCODE, line[len(QR_PREFIX):])
    return ScanResult(SymbolType.BARCODE, line)


def parse_decoder_output(raw: str | None) -> ScanOutcome | None:
    """Parse newline-delimited decoder output.

    Returns:
        None for empty output, a ScanResult for one line, or a
        MultipleScanResult preserving line order for several lines.

    Examples:
        >>> parse_decoder_output("QR-Code:HELLO")
        ScanResult(symbol_type=<SymbolType.QRCODE: 'QRCode'>, data='HELLO')
    """
    if not raw:
        return None

    lines = [line.rstrip("\r") for line in raw.strip().split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        return None

    results = [parse_line(line) for line in lines]
    if len(results) == 1:
        return results[0]
    return MultipleScanResult(tuple(results))
