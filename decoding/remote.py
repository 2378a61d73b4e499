"""
Remote decoding service client.

Sends an image to an HTTP decoding service (api.qrserver.com compatible) and
normalizes its JSON answer. The expected payload is a list of entries, each
with a ``type`` and a ``symbol`` list of ``{"data", "error"}`` objects:

    [{"type": "qrcode", "symbol": [{"seq": 0, "data": "HELLO", "error": null}]}]

The shape is checked explicitly; anything else is a RemoteDecodeError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

import config
from errors import RemoteDecodeError

from .types import MultipleScanResult, ScanOutcome, ScanResult, SymbolType

logger = logging.getLogger(__name__)


def parse_remote_payload(payload) -> ScanOutcome | None:
    """Convert a decoding service payload into a scan result.

    Returns:
        None when the service read the image but found no code.

    Raises:
        RemoteDecodeError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, list):
        raise RemoteDecodeError(
            f"Expected a JSON list from the decoding service, got {type(payload).__name__}"
        )

    results: list[ScanResult] = []
    for entry in payload:
        if not isinstance(entry, dict) or not isinstance(entry.get("symbol"), list):
            raise RemoteDecodeError("Decoding service entry is missing its symbol list")
        if entry.get("type", "qrcode") == "qrcode":
            symbol_type = SymbolType.QRCODE
        else:
            symbol_type = SymbolType.BARCODE
        for symbol in entry["symbol"]:
            if not isinstance(symbol, dict):
                raise RemoteDecodeError("Decoding service symbol is not an object")
            data = symbol.get("data")
            if data:
                results.append(ScanResult(symbol_type, str(data)))
            elif symbol.get("error"):
                logger.info("Decoding service reported: %s", symbol["error"])

    if not results:
        return None
    if len(results) == 1:
        return results[0]
    return MultipleScanResult(tuple(results))


@dataclass
class RemoteDecoder:
    """Client for a remote decoding service."""

    url: str | None = None
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.url is None:
            self.url = config.REMOTE_DECODER_URL
        if self.timeout is None:
            self.timeout = config.REMOTE_DECODER_TIMEOUT_SECONDS

    def decode_bytes(
        self,
        image_data: bytes,
        filename: str = "image.png",
        content_type: str = "image/png",
    ) -> ScanOutcome | None:
        """Upload image bytes and return the decoded result, or None."""
        try:
            response = requests.post(
                self.url,
                files={"file": (filename, image_data, content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RemoteDecodeError(f"Decoding service request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteDecodeError("Decoding service returned invalid JSON") from exc

        logger.debug("Decoding service response: %s", payload)
        return parse_remote_payload(payload)
