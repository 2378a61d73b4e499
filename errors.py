"""Exception types shared by the preprocessing, decoding and scan layers.

Every error carries the HTTP status and the public error label the web layer
uses when it reaches the request boundary. Only ``NoCodeDetected`` and the
server-side errors are expected to get that far; ``ProcessingError`` and
``DecodeProfileError`` are recovered from inside the pipeline.
"""

from __future__ import annotations


class ScannerError(Exception):
    """Base class for all scanner errors."""

    status_code = 500
    error = "Server error"


class UploadRejected(ScannerError):
    """Upload is missing, not an image, or too large."""

    status_code = 400
    error = "File upload error"


class ProcessingError(ScannerError):
    """The image engine failed to apply one preprocessing strategy."""


class DecodeProfileError(ScannerError):
    """The decoder failed to run with one parameter profile."""


class EngineUnavailable(ScannerError):
    """A configured external executable cannot be found."""


class NoCodeDetected(ScannerError):
    """Every strategy and profile was exhausted without a result."""

    status_code = 400
    error = "Could not detect any valid barcode or QR code"


class RemoteDecodeError(ScannerError):
    """The remote decoding service failed or answered with a malformed payload."""

    error = "Decoding service error"


class ScanCancelled(ScannerError):
    """The scan was cancelled before it finished."""

    error = "Scan cancelled"
