"""
Display Adapter: Fields to Pixels

Maps the simulation fields to a grayscale image, one pixel per cell:

    intensity = clamp(A - B, 0, 1) * 255

The clamp only happens here; the simulation itself is never clamped.
Values are truncated to uint8 the same way a plain integer cast would.
"""

import logging
import os
import time

import numpy as np
from PIL import Image
from scipy.ndimage import zoom

from .grid import Grid

log = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0)


def _as_array(field):
    if isinstance(field, Grid):
        return field.view()
    return np.asarray(field, dtype=np.float64)


def to_grayscale(a, b):
    """Return an (H, W) uint8 image of clamp(A - B, 0, 1) * 255."""
    diff = _as_array(a) - _as_array(b)
    # NaN cells (blown-up simulation) draw as black rather than garbage
    diff = np.nan_to_num(diff, nan=0.0)
    np.clip(diff, 0.0, 1.0, out=diff)
    return (diff * 255).astype(np.uint8)


def to_rgb(a, b):
    """Return an (H, W, 3) uint8 image with the gray value in every channel."""
    gray = to_grayscale(a, b)
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


def upscale(pixels, scale):
    """Nearest-neighbor enlarge an (H, W) or (H, W, C) image by an int factor."""
    scale = int(scale)
    if scale <= 1:
        return pixels
    if pixels.ndim == 3:
        factors = (scale, scale, 1)
    else:
        factors = (scale, scale)
    return zoom(pixels, factors, order=0, mode="nearest", grid_mode=True)


def compose(pixels, width, height, background=BACKGROUND):
    """Place an RGB raster at the top-left of a width x height canvas.

    Canvas pixels beyond the raster's extent keep the background color;
    raster pixels beyond the canvas are cropped.
    """
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = background
    h = min(height, pixels.shape[0])
    w = min(width, pixels.shape[1])
    if pixels.ndim == 2:
        canvas[:h, :w] = pixels[:h, :w, np.newaxis]
    else:
        canvas[:h, :w] = pixels[:h, :w, :3]
    return canvas


def timestamp_name(t=None):
    """File stem like 2024-05-01T13-45-09 for the given epoch seconds."""
    if t is None:
        t = time.time()
    return time.strftime("%Y-%m-%dT%H-%M-%S", time.localtime(t))


def save_png(pixels, directory="images", name=None):
    """Write pixels as a PNG in directory and return the path.

    The name defaults to the current local time. An existing file is never
    overwritten: a numeric suffix is added instead.
    """
    os.makedirs(directory, exist_ok=True)
    stem = name or timestamp_name()
    path = os.path.join(directory, f"{stem}.png")
    n = 1
    while os.path.exists(path):
        path = os.path.join(directory, f"{stem}_{n}.png")
        n += 1
    Image.fromarray(np.ascontiguousarray(pixels)).save(path)
    log.info("Image saved: %s", path)
    return path
