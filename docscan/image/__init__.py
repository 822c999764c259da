"""Image-level helpers for captured pages (crop, resize, JPEG payloads)."""

from .processing import (
    clamp_crop_rect,
    compress_image_base64,
    create_thumbnail_base64,
    crop_image,
    default_crop_rect,
    resize_to_max_dimension,
)

__all__ = [
    "clamp_crop_rect",
    "compress_image_base64",
    "create_thumbnail_base64",
    "crop_image",
    "default_crop_rect",
    "resize_to_max_dimension",
]
