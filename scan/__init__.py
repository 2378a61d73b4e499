"""Scanning service package."""

from .orchestrator import NEXT_STATE, ORIGINAL_METHOD, ScanOrchestrator, ScanState
from .service import (
    build_orchestrator,
    decode_remote_upload,
    scan_path,
    scan_upload,
    store_upload,
    validate_upload,
)

__all__ = [
    "NEXT_STATE",
    "ORIGINAL_METHOD",
    "ScanOrchestrator",
    "ScanState",
    "build_orchestrator",
    "decode_remote_upload",
    "scan_path",
    "scan_upload",
    "store_upload",
    "validate_upload",
]
