"""
Pixel Field - Angles sampled from rendered text or an image

The source is drawn onto the surface, read back once, and each cell takes the
single pixel at its origin (no averaging over the cell):

    grayscale = (r + g + b) / 3
    angle     = round(grayscale / 255 * 2pi, 2)
    mask      = alpha > 0
"""

import logging
import math
import numpy as np
from typing import Optional

from .base import BaseFieldStrategy
from ..core.field import FlowField
from ..core.palette import Gradient
from ..core.surface import Surface

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


def sample_pixels(pixels: np.ndarray, cell_size: int, decimals: int = 2):
    """
    Sample an RGBA buffer at every cell origin.

    Args:
        pixels: (height, width, 4) array, values 0-255
        cell_size: Cell edge length in pixels
        decimals: Rounding applied to the angles

    Returns:
        (angles, mask) flat row-major arrays of length columns * rows
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError("Pixels must be an HxWx4 RGBA array")

    height, width = pixels.shape[:2]
    columns = width // cell_size
    rows = height // cell_size

    samples = pixels[0:rows * cell_size:cell_size, 0:columns * cell_size:cell_size]
    samples = samples.reshape(-1, 4).astype(np.float64)

    grayscale = (samples[:, 0] + samples[:, 1] + samples[:, 2]) / 3
    angles = np.round(grayscale / 255 * TWO_PI, decimals)
    mask = samples[:, 3] > 0
    return angles, mask


class PixelFieldStrategy(BaseFieldStrategy):
    """Field derived from rasterized glyphs (or an image) on the surface"""

    name = "pixel"
    description = "Angles from the grayscale of rendered text, spawn only on glyphs"
    restricts_spawn = True

    def text_size(self, width: int) -> float:
        """Font size that scales with surface width"""
        text = self.config.text or " "
        return width / len(text) * self.config.text_scale

    def fill(self, width: int, height: int):
        """Fill used for the source text"""
        if self.config.gradient == 'radial':
            return Gradient.radial(width, height)
        if self.config.gradient == 'linear':
            return Gradient.linear(width, height)
        return self.config.text_color

    def draw_source(self, surface: Surface) -> None:
        """Draw the field source onto the surface"""
        width, height = surface.width, surface.height
        if self.config.source_image:
            surface.draw_image(self.config.source_image)
        else:
            surface.render_text(
                self.config.text,
                self.config.font,
                self.text_size(width),
                width / 2,
                height / 2,
                align="center",
                fill=self.fill(width, height),
            )

    def from_pixels(self, pixels: np.ndarray) -> FlowField:
        """Build a field straight from an RGBA buffer"""
        height, width = np.asarray(pixels).shape[:2]
        angles, mask = sample_pixels(pixels, self.config.cell_size, self.config.angle_decimals)
        return self._make_field(width, height, angles, mask)

    def build(self, width: int, height: int, surface: Optional[Surface] = None) -> FlowField:
        if surface is None:
            raise ValueError("Pixel field needs a surface to render its source on")

        if width <= 0 or height <= 0:
            return FlowField.empty(width, height, self.config.cell_size)

        if (surface.width, surface.height) != (width, height):
            surface.resize(width, height)

        surface.clear()
        self.draw_source(surface)
        pixels = surface.read_pixels(0, 0, width, height)
        surface.clear()

        field = self.from_pixels(pixels)
        logger.debug(
            "Pixel field %dx%d: %d of %d cells on source",
            field.columns, field.rows, int(field.mask.sum()), len(field),
        )
        return field
