"""Image helpers for captured pages: cropping, resizing and JPEG payloads.

These utilities operate on numpy image arrays (BGR) using OpenCV. Crop
rectangles are ``(x, y, width, height)`` tuples in pixel coordinates.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

Rect = Tuple[int, int, int, int]

MIN_CROP_SIZE = 50
DEFAULT_CROP_RATIO = 0.75
MAX_IMAGE_SIZE_KB = 500
FALLBACK_MAX_DIMENSION = 1024
THUMBNAIL_MAX_DIMENSION = 200


def default_crop_rect(width: int, height: int, ratio: float = DEFAULT_CROP_RATIO) -> Rect:
    """Return a rectangle covering ``ratio`` of the image, centred.

    Doxygen:
    - @param width: Image width in pixels.
    - @param height: Image height in pixels.
    - @param ratio: Fraction of each side to keep.
    - @return: (x, y, w, h) rectangle.
    """
    crop_w = int(round(width * ratio))
    crop_h = int(round(height * ratio))
    return (width - crop_w) // 2, (height - crop_h) // 2, crop_w, crop_h


def clamp_crop_rect(rect: Rect, width: int, height: int, min_size: int = MIN_CROP_SIZE) -> Rect:
    """Move and shrink ``rect`` so it lies inside a ``width`` x ``height`` image.

    The rectangle keeps at least ``min_size`` pixels per side unless the
    image itself is smaller.
    """
    x, y, w, h = (int(v) for v in rect)
    min_w = min(min_size, width)
    min_h = min(min_size, height)
    w = max(min_w, min(w, width))
    h = max(min_h, min(h, height))
    x = max(0, min(x, width - w))
    y = max(0, min(y, height - h))
    return x, y, w, h


def crop_image(img: np.ndarray, rect: Optional[Rect] = None) -> np.ndarray:
    """Crop ``img`` to ``rect`` (clamped); the default is the centred 75% rect."""
    height, width = img.shape[:2]
    if rect is None:
        rect = default_crop_rect(width, height)
    x, y, w, h = clamp_crop_rect(rect, width, height)
    return img[y:y + h, x:x + w].copy()


def resize_to_max_dimension(img: np.ndarray, max_dimension: int) -> np.ndarray:
    """Scale the longer side down to ``max_dimension`` keeping the aspect ratio.

    Images that already fit are returned unchanged (as a copy).
    """
    height, width = img.shape[:2]
    longest = max(width, height)
    if longest <= max_dimension:
        return img.copy()
    scale = max_dimension / float(longest)
    new_size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    return cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)


def encode_jpeg(img: np.ndarray, quality: float = 0.8) -> bytes:
    """Encode ``img`` as JPEG; ``quality`` is a 0..1 fraction.

    Doxygen:
    - @throws RuntimeError: If OpenCV fails to encode the image.
    """
    q = int(round(max(0.0, min(1.0, quality)) * 100))
    ok, buf = cv2.imencode(".jpg", img, [int(cv2.IMWRITE_JPEG_QUALITY), q])
    if not ok:
        raise RuntimeError("Failed to encode image as JPEG")
    return buf.tobytes()


def compress_image_bytes(img: np.ndarray, max_size_kb: int = MAX_IMAGE_SIZE_KB) -> bytes:
    """JPEG-encode ``img`` under ``max_size_kb`` where possible.

    Quality starts at 0.8 and drops by 0.1 while the payload is too large
    and quality stays above 0.1. If that is not enough, the image is
    resized to 1024 px and encoded at 0.7.
    """
    limit = max_size_kb * 1024
    quality = 0.8
    data = encode_jpeg(img, quality)
    while len(data) > limit and quality > 0.1 + 1e-9:
        quality -= 0.1
        data = encode_jpeg(img, quality)
    if len(data) > limit:
        logger.debug("JPEG still %d bytes at lowest quality; resizing", len(data))
        data = encode_jpeg(resize_to_max_dimension(img, FALLBACK_MAX_DIMENSION), 0.7)
    return data


def compress_image_base64(img: np.ndarray, max_size_kb: int = MAX_IMAGE_SIZE_KB) -> str:
    return base64.b64encode(compress_image_bytes(img, max_size_kb)).decode("ascii")


def create_thumbnail_base64(img: np.ndarray, max_dimension: int = THUMBNAIL_MAX_DIMENSION) -> str:
    thumb = resize_to_max_dimension(img, max_dimension)
    return base64.b64encode(encode_jpeg(thumb, 0.6)).decode("ascii")
