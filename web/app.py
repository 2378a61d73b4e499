"""
FastAPI application for the barcode scanner.

Routes:
- GET  /        - Upload form
- GET  /health  - Liveness check
- POST /scan    - Full preprocessing/decode pipeline, JSON result (field "image")
- POST /decode  - Same pipeline, minimal HTML result (field "barcode")
- POST /upload  - Single attempt against the remote decoding service (field "image")
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from starlette.concurrency import run_in_threadpool
from starlette.responses import HTMLResponse, JSONResponse

import config
from decoding import RemoteDecoder, available_decoders
from errors import ScannerError, UploadRejected
from logging_utils import add_logging_args, configure_logging, uvicorn_log_level
from preprocessing import available_engines
from scan import ScanOrchestrator, build_orchestrator, decode_remote_upload, scan_upload

from .schemas import ErrorOut, HealthOut, ScanResponse, to_response
from .templates import ERROR_TEMPLATE, RESULT_TEMPLATE, UPLOAD_FORM_TEMPLATE, render

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {400: {"model": ErrorOut}, 500: {"model": ErrorOut}}


async def read_upload(upload: UploadFile | None, max_bytes: int) -> bytes:
    """Read at most ``max_bytes + 1`` bytes so oversized uploads are detectable."""
    if upload is None:
        raise UploadRejected("No image file provided")
    return await upload.read(max_bytes + 1)


def create_app(
    orchestrator: ScanOrchestrator | None = None,
    remote_decoder: RemoteDecoder | None = None,
    upload_dir: Path | None = None,
    max_upload_bytes: int = config.MAX_UPLOAD_BYTES,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Barcode Scanner", version="0.1.0", docs_url="/docs", redoc_url="/redoc")

    orchestrator = orchestrator or build_orchestrator()
    remote_decoder = remote_decoder or RemoteDecoder()
    upload_dir = Path(upload_dir) if upload_dir is not None else config.UPLOAD_DIR

    app.state.orchestrator = orchestrator
    app.state.remote_decoder = remote_decoder

    @app.exception_handler(ScannerError)
    async def _scanner_error_handler(request: Request, exc: ScannerError):
        if exc.status_code >= 500:
            logger.error("Request to %s failed: %s", request.url.path, exc)
        else:
            logger.info("Request to %s rejected: %s", request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error, "details": str(exc)},
        )

    # Return 400 for request validation errors (malformed form bodies)
    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "File upload error", "details": str(exc)},
        )

    @app.exception_handler(Exception)
    async def _server_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error while processing %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "details": str(exc)},
        )

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------
    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index():
        """Upload form."""
        return render(UPLOAD_FORM_TEMPLATE, max_upload_mb=max_upload_bytes // (1024 * 1024))

    @app.get("/health", response_model=HealthOut)
    async def health():
        return HealthOut(status="ok")

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------
    @app.post("/scan", response_model=ScanResponse, responses=_ERROR_RESPONSES)
    async def scan(image: UploadFile | None = File(None)):
        """Decode an uploaded image with the full fallback pipeline."""
        data = await read_upload(image, max_upload_bytes)
        outcome = await run_in_threadpool(
            scan_upload,
            data,
            image.filename,
            image.content_type,
            orchestrator,
            upload_dir,
            max_upload_bytes,
        )
        return to_response(outcome.result)

    @app.post("/decode", response_class=HTMLResponse, include_in_schema=False)
    async def decode_form(barcode: UploadFile | None = File(None)):
        """Form variant of /scan rendering the result as HTML."""
        try:
            data = await read_upload(barcode, max_upload_bytes)
            outcome = await run_in_threadpool(
                scan_upload,
                data,
                barcode.filename,
                barcode.content_type,
                orchestrator,
                upload_dir,
                max_upload_bytes,
            )
        except ScannerError as exc:
            logger.info("Decode failed: %s", exc)
            return HTMLResponse(
                render(ERROR_TEMPLATE, error=exc.error, details=str(exc)),
                status_code=exc.status_code,
            )

        response = to_response(outcome.result)
        codes = getattr(response, "codes", [response])
        return HTMLResponse(render(RESULT_TEMPLATE, codes=codes))

    @app.post("/upload", response_model=ScanResponse, responses=_ERROR_RESPONSES)
    async def upload(image: UploadFile | None = File(None)):
        """Decode an uploaded image with the remote service, without preprocessing."""
        data = await read_upload(image, max_upload_bytes)
        result = await run_in_threadpool(
            decode_remote_upload,
            data,
            image.filename,
            image.content_type,
            remote_decoder,
            max_upload_bytes,
        )
        return to_response(result)

    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"Launch the barcode scanner API (port {config.SERVER_PORT})."
    )
    parser.add_argument("--host", default=config.SERVER_HOST, help="Interface to bind")
    parser.add_argument("--port", type=int, default=config.SERVER_PORT, help="Port to listen on")
    parser.add_argument("--engine", choices=available_engines(), help="Image engine override")
    parser.add_argument("--decoder", choices=available_decoders(), help="Decoder override")
    add_logging_args(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the web server."""
    parser = build_parser()
    args = parser.parse_args(argv)

    import uvicorn

    level = configure_logging(args.log_level, args.verbose, args.quiet)

    app = create_app(orchestrator=build_orchestrator(args.engine, args.decoder))

    logger.info("Starting Barcode Scanner on http://%s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=uvicorn_log_level(level))
    return 0


if __name__ == "__main__":
    main()
