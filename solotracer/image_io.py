"""
Pixel buffer resampling and image output.

Pixel buffers are row-major lists of RGB byte triples. Output goes to
plain-text PPM (P3) directly, or through Pillow for any other format.
"""

from __future__ import annotations
import logging
import math
from pathlib import Path
from typing import List, Sequence, Union
import numpy as np

from .vec3 import RGB

logger = logging.getLogger(__name__)


def downscale(
    pixels: Sequence[RGB],
    src_width: int,
    src_height: int,
    dest_width: int,
    dest_height: int
) -> List[RGB]:
    """Resample a pixel buffer with nearest-neighbour sampling.

    Destination pixel (i, j) takes source pixel
    (floor(i * src_w / dest_w), floor(j * src_h / dest_h)).

    Raises:
        ValueError: If the buffer does not hold src_width * src_height pixels
    """
    if len(pixels) != src_width * src_height:
        raise ValueError(
            f"Expected {src_width * src_height} pixels for {src_width}x{src_height}, got {len(pixels)}"
        )

    x_ratio = src_width / dest_width
    y_ratio = src_height / dest_height

    resampled = []
    for j in range(dest_height):
        src_y = math.floor(j * y_ratio)
        for i in range(dest_width):
            src_x = math.floor(i * x_ratio)
            resampled.append(pixels[src_y * src_width + src_x])
    return resampled


def write_ppm(
    filename: Union[str, Path],
    width: int,
    height: int,
    pixels: Sequence[RGB],
    max_value: int = 255
) -> None:
    """Write pixels as a plain-text (P3) PPM file.

    Args:
        filename: Output path
        width: Image width
        height: Image height
        pixels: Row-major RGB triples
        max_value: Channel value that the viewer maps to full brightness
    """
    lines = ["P3", f"{width} {height}", str(max_value)]
    lines.extend(f"{r} {g} {b}" for r, g, b in pixels)
    Path(filename).write_text("\n".join(lines) + "\n")
    logger.info("Wrote %dx%d PPM to %s", width, height, filename)


def pixels_to_array(pixels: Sequence[RGB], width: int, height: int, max_value: int = 255) -> np.ndarray:
    """Convert a pixel buffer to a (height, width, 3) uint8 array.

    Channels are rescaled by 255 / max_value so the array looks the way a
    PPM viewer would show the same buffer.
    """
    arr = np.asarray(pixels, dtype=np.float64).reshape(height, width, 3)
    if max_value != 255:
        arr = arr * (255.0 / max_value)
    return np.clip(arr, 0, 255).astype(np.uint8)


def save_image(
    filename: Union[str, Path],
    width: int,
    height: int,
    pixels: Sequence[RGB],
    max_value: int = 255
) -> None:
    """Save a pixel buffer to file.

    The extension picks the format: .ppm is written as plain text, anything
    else goes through Pillow.
    """
    if str(filename).lower().endswith('.ppm'):
        write_ppm(filename, width, height, pixels, max_value)
        return

    from PIL import Image as PILImage

    pil_image = PILImage.fromarray(pixels_to_array(pixels, width, height, max_value))
    pil_image.save(filename)
    logger.info("Wrote %dx%d image to %s", width, height, filename)
