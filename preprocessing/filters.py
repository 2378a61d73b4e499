"""
Pixel-level filters used by the in-process image engine.

All functions are pure: they take an input array and return a new array
without mutating the original. Inputs are uint8 images, either 2D grayscale
or 3D RGB.
"""

from __future__ import annotations

import cv2
import numpy as np

from config import CONTRAST_PASS_GAIN, MIN_DESKEW_ANGLE

# White canvas for areas uncovered by arbitrary-angle rotations
_BACKGROUND = 255


def _validate_image(img: np.ndarray) -> None:
    """Validate an input image array.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img has invalid dimensions or is empty.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """Convert an RGB, RGBA or grayscale image to a 2D grayscale copy."""
    _validate_image(img)
    if img.ndim == 2:
        return img.copy()
    channels = img.shape[2]
    if channels == 1:
        return img[:, :, 0].copy()
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_RGB2GRAY)
    if channels == 4:
        return cv2.cvtColor(img[:, :, :3], cv2.COLOR_RGB2GRAY)
    raise ValueError(
        f"Unsupported number of channels: {channels}. Expected 1, 3 (RGB), or 4 (RGBA)."
    )


def resize_to_fit(img: np.ndarray, max_width: int, max_height: int) -> np.ndarray:
    """Scale an image so it fits inside a box, preserving aspect ratio.

    Like ImageMagick's ``-resize WxH`` this enlarges small images as well as
    shrinking large ones, so one side always ends up touching the box.

    Raises:
        ValueError: If the box is not positive or the image is invalid.
    """
    _validate_image(img)
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Resize box must be positive, got {max_width}x{max_height}")

    height, width = img.shape[:2]
    scale = min(max_width / width, max_height / height)
    new_width = max(1, int(round(width * scale)))
    new_height = max(1, int(round(height * scale)))

    if (new_width, new_height) == (width, height):
        return img.copy()

    interpolation = cv2.INTER_CUBIC if scale > 1 else cv2.INTER_AREA
    return cv2.resize(img, (new_width, new_height), interpolation=interpolation)


def rotate_image(img: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate clockwise, expanding the canvas to keep every pixel.

    Right angles are exact; other angles fill the uncovered corners white.
    """
    _validate_image(img)
    angle = degrees % 360
    if angle == 0:
        return img.copy()
    if angle == 90:
        return cv2.rotate(img, cv2.ROTATE_90_CLOCKWISE)
    if angle == 180:
        return cv2.rotate(img, cv2.ROTATE_180)
    if angle == 270:
        return cv2.rotate(img, cv2.ROTATE_90_COUNTERCLOCKWISE)

    height, width = img.shape[:2]
    center = (width / 2, height / 2)
    # OpenCV treats positive angles as counter-clockwise
    matrix = cv2.getRotationMatrix2D(center, -angle, 1.0)
    cos, sin = abs(matrix[0, 0]), abs(matrix[0, 1])
    new_width = int(round(height * sin + width * cos))
    new_height = int(round(height * cos + width * sin))
    matrix[0, 2] += new_width / 2 - center[0]
    matrix[1, 2] += new_height / 2 - center[1]
    border = _BACKGROUND if img.ndim == 2 else (_BACKGROUND,) * img.shape[2]
    return cv2.warpAffine(
        img, matrix, (new_width, new_height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=border,
    )


def apply_exif_orientation(img: np.ndarray, orientation: int) -> np.ndarray:
    """Transform pixels so an image with the given EXIF orientation displays upright."""
    _validate_image(img)
    if orientation == 2:
        return cv2.flip(img, 1)
    if orientation == 3:
        return cv2.rotate(img, cv2.ROTATE_180)
    if orientation == 4:
        return cv2.flip(img, 0)
    if orientation == 5:
        return cv2.transpose(img)
    if orientation == 6:
        return cv2.rotate(img, cv2.ROTATE_90_CLOCKWISE)
    if orientation == 7:
        return cv2.flip(cv2.transpose(img), -1)
    if orientation == 8:
        return cv2.rotate(img, cv2.ROTATE_90_COUNTERCLOCKWISE)
    return img.copy()


def estimate_skew_angle(img: np.ndarray, threshold: float) -> float | None:
    """Estimate the skew of barcode bars from near-vertical Hough lines.

    Args:
        img: Input image.
        threshold: Percentage of the shorter image side a line must span.

    Returns:
        Median deviation from vertical in degrees, or None if no bars are found.
    """
    gray = to_grayscale(img)
    edges = cv2.Canny(gray, 50, 150, apertureSize=3)
    votes = max(30, int(min(gray.shape[:2]) * threshold / 100))
    lines = cv2.HoughLines(edges, 1, np.pi / 180, votes)
    if lines is None:
        return None

    angles = []
    for line in lines:
        theta_deg = float(np.degrees(line[0][1]))
        if theta_deg < 30:
            angles.append(theta_deg)
        elif theta_deg > 150:
            angles.append(theta_deg - 180)

    if not angles:
        return None
    return float(np.median(angles))


def deskew(img: np.ndarray, threshold: float) -> np.ndarray:
    """Rotate an image so detected barcode bars become vertical."""
    angle = estimate_skew_angle(img, threshold)
    if angle is None or abs(angle) < MIN_DESKEW_ANGLE:
        return img.copy()

    height, width = img.shape[:2]
    matrix = cv2.getRotationMatrix2D((width // 2, height // 2), angle, 1.0)
    return cv2.warpAffine(
        img, matrix, (width, height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_REPLICATE,
    )


def sharpen(img: np.ndarray, sigma: float) -> np.ndarray:
    """Unsharp mask: add back the difference from a Gaussian blur."""
    _validate_image(img)
    blurred = cv2.GaussianBlur(img, (0, 0), sigmaX=sigma)
    return cv2.addWeighted(img, 1.5, blurred, -0.5, 0)


def adaptive_sharpen(img: np.ndarray, sigma: float) -> np.ndarray:
    """Sharpen in proportion to local edge strength."""
    sharpened = sharpen(img, sigma)
    gray = to_grayscale(img)
    grad_x = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
    grad_y = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
    magnitude = cv2.magnitude(grad_x, grad_y)
    peak = float(magnitude.max())
    if peak == 0:
        return img.copy()
    weight = magnitude / peak
    if img.ndim == 3:
        weight = weight[:, :, np.newaxis]
    blended = img.astype(np.float32) * (1 - weight) + sharpened.astype(np.float32) * weight
    return np.clip(blended, 0, 255).astype(np.uint8)


def increase_contrast(img: np.ndarray, passes: int = 1) -> np.ndarray:
    """Stretch intensities away from mid-gray, once per pass."""
    _validate_image(img)
    result = img.astype(np.float32)
    for _ in range(passes):
        result = (result - 128.0) * CONTRAST_PASS_GAIN + 128.0
        result = np.clip(result, 0, 255)
    return result.astype(np.uint8)


def gaussian_blur(img: np.ndarray, sigma: float) -> np.ndarray:
    _validate_image(img)
    return cv2.GaussianBlur(img, (0, 0), sigmaX=sigma)


def median_filter(img: np.ndarray, size: int) -> np.ndarray:
    _validate_image(img)
    ksize = size if size % 2 == 1 else size + 1
    return cv2.medianBlur(img, max(3, ksize))
