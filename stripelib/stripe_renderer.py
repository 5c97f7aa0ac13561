"""
StripeRenderer - Recolors each mapped row with the pixel sampled on the curve.
"""

import numpy as np


def render(source, scanline_map, out=None):
    """
    Render the stripe effect.

    Every valid row of the output is filled with the single source color at
    (x, y), x clamped into the image. Invalid rows keep whatever the output
    already holds, which is the untouched source row when out is omitted.

    Args:
        source: numpy array (H, W) or (H, W, C)
        scanline_map: ScanlineMap with exactly H entries
        out: Optional destination array with the same shape as source

    Returns:
        The rendered numpy array (out itself when given)
    """
    if source is None:
        raise ValueError("No source image to render")

    height, width = source.shape[:2]
    if len(scanline_map) != height:
        raise ValueError(
            f"Scanline map has {len(scanline_map)} rows, image has {height}")

    if out is None:
        out = source.copy()
    elif out.shape != source.shape:
        raise ValueError("Destination must have the same shape as the source")

    if width == 0:
        return out

    rows = scanline_map.valid_rows()
    if len(rows) == 0:
        return out

    cols = np.clip(scanline_map.xs[rows], 0, width - 1)
    colors = source[rows, cols]

    # Broadcast one color across each full row
    out[rows] = colors[:, np.newaxis]
    return out


def draw_sample_markers(image, scanline_map, color=(255, 255, 255), radius=1):
    """
    Mark the sampled pixel of each valid row.

    Draws a small square around (x, y) per row, used by the preview overlay
    so the sampling path stays visible. Modifies image in place.

    Args:
        image: numpy array (H, W, C) with the same height as the map
        scanline_map: ScanlineMap for the image
        color: Marker color, trimmed to the image's channel count
        radius: Half size of the marker in pixels
    """
    height, width = image.shape[:2]
    if width == 0 or height == 0:
        return image

    color = np.asarray(color, dtype=image.dtype)
    if image.ndim == 3:
        channels = image.shape[2]
        if len(color) < channels:
            color = np.concatenate([color, np.full(channels - len(color), 255, dtype=image.dtype)])
        color = color[:channels]
    else:
        color = color[0]

    for y in scanline_map.valid_rows():
        x = min(max(int(scanline_map.xs[y]), 0), width - 1)
        y0, y1 = max(0, y - radius), min(height, y + radius + 1)
        x0, x1 = max(0, x - radius), min(width, x + radius + 1)
        image[y0:y1, x0:x1] = color
    return image
