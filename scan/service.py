"""Scan service entrypoints for reuse across CLI and web."""

from __future__ import annotations

import logging
import random
import threading
import time
from pathlib import Path

import config
from decoding import AttemptOutcome, Decoder, RemoteDecoder, ScanOutcome, get_decoder_by_name
from errors import NoCodeDetected, UploadRejected
from preprocessing import ImageEngine, get_image_engine_by_name

from .orchestrator import ScanOrchestrator

logger = logging.getLogger(__name__)


def build_orchestrator(
    engine_name: str | None = None,
    decoder_name: str | None = None,
    engine: ImageEngine | None = None,
    decoder: Decoder | None = None,
) -> ScanOrchestrator:
    """Build an orchestrator from configured or named collaborators."""
    if engine is None:
        engine = get_image_engine_by_name(engine_name or config.IMAGE_ENGINE)
    if decoder is None:
        decoder = get_decoder_by_name(decoder_name or config.DECODER_BACKEND)
    return ScanOrchestrator(
        engine=engine,
        decoder=decoder,
        artifact_dir=config.ARTIFACT_DIR,
    )


def validate_upload(
    image_data: bytes | None,
    content_type: str | None,
    max_bytes: int = config.MAX_UPLOAD_BYTES,
) -> None:
    """Reject uploads that are missing, not images, or too large.

    Raises:
        UploadRejected: With a message suitable for the client.
    """
    if image_data is None:
        raise UploadRejected("No image file provided")
    if not content_type or not content_type.startswith(config.ALLOWED_CONTENT_TYPE_PREFIX):
        raise UploadRejected("Only image files are allowed!")
    if len(image_data) > max_bytes:
        raise UploadRejected(f"File too large (limit {max_bytes} bytes)")
    if not image_data:
        raise UploadRejected("Uploaded file is empty")


def unique_upload_name(filename: str | None) -> str:
    """Timestamp plus random suffix, keeping the original extension."""
    suffix = Path(filename).suffix.lower() if filename else ""
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"


def store_upload(image_data: bytes, filename: str | None, upload_dir: Path) -> Path:
    """Write upload bytes to a new, exclusively created file."""
    upload_dir = Path(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    while True:
        path = upload_dir / unique_upload_name(filename)
        try:
            with path.open("xb") as handle:
                handle.write(image_data)
        except FileExistsError:
            continue
        return path


def remove_upload(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.error("Error cleaning up file %s: %s", path, exc)


def scan_path(
    image_path: Path,
    orchestrator: ScanOrchestrator,
    cancel_event: threading.Event | None = None,
) -> AttemptOutcome:
    """Scan an image already on disk. The file is left in place."""
    image_path = Path(image_path)
    if not image_path.is_file():
        raise FileNotFoundError(f"Image not found: {image_path}")
    return orchestrator.scan(image_path, cancel_event=cancel_event)


def scan_upload(
    image_data: bytes,
    filename: str | None,
    content_type: str | None,
    orchestrator: ScanOrchestrator,
    upload_dir: Path = config.UPLOAD_DIR,
    max_bytes: int = config.MAX_UPLOAD_BYTES,
    cancel_event: threading.Event | None = None,
) -> AttemptOutcome:
    """Validate, store and scan an uploaded image, then remove the stored file.

    ``cancel_event`` is forwarded to ``ScanOrchestrator.scan`` for library
    callers; the web routes do not set it.
    """
    validate_upload(image_data, content_type, max_bytes)
    stored = store_upload(image_data, filename, upload_dir)
    logger.info("Processing file: %s", stored.name)
    try:
        return orchestrator.scan(stored, cancel_event=cancel_event)
    finally:
        remove_upload(stored)


def decode_remote_upload(
    image_data: bytes,
    filename: str | None,
    content_type: str | None,
    remote: RemoteDecoder,
    max_bytes: int = config.MAX_UPLOAD_BYTES,
) -> ScanOutcome:
    """Validate an upload and decode it with the remote service in one attempt."""
    validate_upload(image_data, content_type, max_bytes)
    result = remote.decode_bytes(
        image_data,
        filename=filename or "image.png",
        content_type=content_type or "image/png",
    )
    if result is None:
        raise NoCodeDetected("No barcode found in the image")
    return result
