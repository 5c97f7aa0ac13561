"""
Image loading and saving for the stripe tool.
"""

import logging
import os

import cv3  # For basic image I/O and resizing
import numpy as np
from PIL import Image
from pillow_heif import register_heif_opener  # For HEIC file support

from .errors import EncodingError, InputError

# Register HEIF opener with Pillow to enable HEIC support
register_heif_opener()

INPUT_FILETYPES = [
    ("Image files", "*.jpg *.jpeg *.png *.bmp *.heic *.heif"),
    ("All files", "*.*"),
]


def calc_preview_size(width, height, max_long_side):
    """
    Fit an image size into a square of max_long_side, preserving aspect.

    Images already small enough keep their size. Each dimension is rounded
    to the nearest integer, halves rounding up.

    Returns:
        tuple: (preview_width, preview_height)
    """
    long_side = max(width, height)
    if long_side <= max_long_side:
        return width, height

    scale = max_long_side / long_side
    preview_w = max(1, int(np.floor(width * scale + 0.5)))
    preview_h = max(1, int(np.floor(height * scale + 0.5)))
    return preview_w, preview_h


def make_preview(image, max_long_side):
    """
    Build the downscaled preview raster.

    Args:
        image: numpy array (H, W, C) at full resolution
        max_long_side: Longest allowed preview side

    Returns:
        A new numpy array, never sharing memory with image
    """
    height, width = image.shape[:2]
    preview_w, preview_h = calc_preview_size(width, height, max_long_side)
    if (preview_w, preview_h) == (width, height):
        return image.copy()
    return cv3.resize(image, preview_w, preview_h)


def read_image(file_path):
    """
    Load an image file as an RGB numpy array.

    HEIC/HEIF files go through Pillow with pillow-heif, everything else
    through cv3, which already returns RGB.

    Raises:
        InputError: If the file is missing or cannot be decoded
    """
    if not file_path:
        raise InputError("No image file selected")

    is_heic = file_path.lower().endswith(('.heic', '.heif'))

    if is_heic:
        try:
            with Image.open(file_path) as pil_image:
                image = np.array(pil_image.convert('RGB'))
        except Exception as e:
            raise InputError(f"Could not load HEIC image - {e}") from e
    else:
        try:
            image = cv3.imread(file_path)
        except Exception as e:
            raise InputError(f"Could not load image - {e}") from e

    if image is None or image.size == 0:
        raise InputError("Could not load image")

    logging.info(f"Loaded {os.path.basename(file_path)} ({image.shape[1]}x{image.shape[0]})")
    return image


def save_image(image, file_path):
    """
    Encode a numpy image and write it to disk.

    The format follows the file extension (PNG for the exports).

    Raises:
        EncodingError: If the image cannot be encoded or written
    """
    try:
        pil_image = Image.fromarray(np.ascontiguousarray(image))
        pil_image.save(file_path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise EncodingError(f"Could not save {os.path.basename(file_path)} - {e}") from e

    logging.info(f"Image saved to {file_path}")
    return file_path
