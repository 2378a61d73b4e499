"""
Barcode and QR decoding.

Decoding is delegated to an external decoder; this package invokes it with a
sequence of parameter profiles and normalizes its output.

Key components:
- types: ScanResult, MultipleScanResult, AttemptOutcome, SymbolType
- parsing: parse_decoder_output() for newline-delimited decoder output
- profiles: DecodeProfile and the default profile order
- decoders: zbarimg (subprocess) and pyzbar (in-process) decoders
- attempt: attempt_scan() tries profiles until one yields output
- remote: RemoteDecoder for the HTTP decoding service variant
"""

from .attempt import attempt_scan
from .decoders import (
    Decoder,
    PyzbarDecoder,
    ZbarImgDecoder,
    available_decoders,
    get_decoder,
    get_decoder_by_name,
    normalize_zbarimg_output,
)
from .parsing import parse_decoder_output, parse_line
from .profiles import DEFAULT_PROFILES, DecodeProfile
from .remote import RemoteDecoder, parse_remote_payload
from .types import (
    MULTIPLE,
    AttemptOutcome,
    MultipleScanResult,
    ScanOutcome,
    ScanResult,
    SymbolType,
)

__all__ = [
    "attempt_scan",
    "Decoder",
    "PyzbarDecoder",
    "ZbarImgDecoder",
    "available_decoders",
    "get_decoder",
    "get_decoder_by_name",
    "normalize_zbarimg_output",
    "parse_decoder_output",
    "parse_line",
    "DEFAULT_PROFILES",
    "DecodeProfile",
    "RemoteDecoder",
    "parse_remote_payload",
    "MULTIPLE",
    "AttemptOutcome",
    "MultipleScanResult",
    "ScanOutcome",
    "ScanResult",
    "SymbolType",
]
