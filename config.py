"""Central configuration for the barcode scanner service.

All tunable parameters are defined here with descriptive names. Deployment
values (port, engine selection, remote service URL) can be overridden through
environment variables; everything else is a plain constant.
"""

import os
from pathlib import Path

# =============================================================================
# UPLOADS
# =============================================================================

# Directory where uploaded images are stored while a request is processed
UPLOAD_DIR = Path(os.environ.get("BARSCAN_UPLOAD_DIR", Path(__file__).parent / "uploads"))

# Maximum accepted upload size in bytes (10MB)
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Uploads must declare a content type with this prefix
ALLOWED_CONTENT_TYPE_PREFIX = "image/"

# =============================================================================
# PREPROCESSING ENGINE
# =============================================================================

# Image engine selection ("magick" shells out to ImageMagick, "opencv" runs in-process)
IMAGE_ENGINE = os.environ.get("BARSCAN_IMAGE_ENGINE", "magick")

# ImageMagick executable ("convert" for IM6, "magick" for IM7)
MAGICK_BINARY = os.environ.get("BARSCAN_MAGICK_BINARY", "convert")

# Upper bound for a single image engine invocation
ENGINE_TIMEOUT_SECONDS = 30.0

# Directory for intermediate artifacts (None = next to the source image)
ARTIFACT_DIR: Path | None = None

# Angles tried after the orientation strategies fail (clockwise degrees)
MANUAL_ROTATION_ANGLES = (0, 90, 180, 270)

# =============================================================================
# STRATEGY PARAMETERS
# =============================================================================

# Deskew threshold as a percentage (ImageMagick -deskew semantics)
DESKEW_THRESHOLD_PERCENT = 40.0

# Bounding boxes used by the resize-first strategies
ENHANCE_RESIZE_BOX = (1500, 1500)
DENOISE_RESIZE_BOX = (2000, 2000)

# Linear gain applied per contrast pass by the in-process engine
CONTRAST_PASS_GAIN = 1.2

# Skew angles below this are treated as already straight (degrees)
MIN_DESKEW_ANGLE = 0.5

# =============================================================================
# DECODER
# =============================================================================

# Decoder selection ("zbarimg" shells out, "pyzbar" runs in-process)
DECODER_BACKEND = os.environ.get("BARSCAN_DECODER", "zbarimg")

# zbarimg executable
ZBARIMG_BINARY = os.environ.get("BARSCAN_ZBARIMG_BINARY", "zbarimg")

# Upper bound for a single decoder invocation
DECODER_TIMEOUT_SECONDS = 15.0

# zbarimg exits with this status when the image holds no symbols
ZBARIMG_NO_SYMBOLS_EXIT_CODE = 4

# Marker that identifies QR payloads in decoder output
QR_PREFIX = "QR-Code:"

# =============================================================================
# REMOTE DECODING SERVICE
# =============================================================================

REMOTE_DECODER_URL = os.environ.get(
    "BARSCAN_REMOTE_DECODER_URL", "https://api.qrserver.com/v1/read-qr-code/"
)

REMOTE_DECODER_TIMEOUT_SECONDS = 30.0

# =============================================================================
# WEB SERVER
# =============================================================================

SERVER_HOST = os.environ.get("HOST", "127.0.0.1")
SERVER_PORT = int(os.environ.get("PORT", "3000"))
