"""
Render Surface - The drawing capabilities the simulation relies on

The core only needs to read pixels back, rasterize text, stroke polylines and
clear. `RasterSurface` provides all of it on top of a Pillow RGBA image so the
effect can run headless (export) or be blitted into a preview window.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .palette import Gradient, parse_color, solid_fill

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Fill = Union[str, Tuple[int, ...], Gradient]


class Surface(Protocol):
    """What the flow effect needs from its host surface"""

    width: int
    height: int

    def resize(self, width: int, height: int) -> None: ...

    def clear(self, color=None) -> None: ...

    def read_pixels(self, x: int, y: int, w: int, h: int) -> np.ndarray: ...

    def render_text(self, text: str, font: str, size: float, x: float, y: float,
                    align: str = "center", fill: Fill = "#ffffff") -> None: ...

    def draw_image(self, image: Union[str, Path, Image.Image]) -> None: ...

    def stroke_polyline(self, points: Sequence[Point], color, width: int = 1) -> None: ...

    def to_array(self) -> np.ndarray: ...


class RasterSurface:
    """
    Pillow-backed RGBA surface.

    Example:
        surface = RasterSurface(200, 100)
        surface.render_text("HI", "Impact", 60, 100, 50)
        pixels = surface.read_pixels(0, 0, 200, 100)  # (100, 200, 4) uint8
    """

    def __init__(self, width: int, height: int):
        self.width = 0
        self.height = 0
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        """Replace the backing image; previous contents are dropped"""
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self.image = Image.new('RGBA', (self.width, self.height), (0, 0, 0, 0))
        self.draw = ImageDraw.Draw(self.image)

    def clear(self, color=None) -> None:
        """Fill with a color, or make fully transparent when color is None"""
        if self.width == 0 or self.height == 0:
            return
        fill = (0, 0, 0, 0) if color is None else parse_color(color)
        self.draw.rectangle((0, 0, self.width, self.height), fill=fill)

    def read_pixels(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        """RGBA block of shape (h, w, 4), row-major"""
        pixels = np.array(self.image, dtype=np.uint8).reshape(self.height, self.width, 4)
        return pixels[y:y + h, x:x + w].copy()

    def to_array(self) -> np.ndarray:
        return self.read_pixels(0, 0, self.width, self.height)

    def render_text(
        self,
        text: str,
        font: str,
        size: float,
        x: float,
        y: float,
        align: str = "center",
        fill: Fill = "#ffffff"
    ) -> None:
        """
        Rasterize text anchored at (x, y) and composite it over the surface.

        Args:
            text: String to draw
            font: Font name or path to a TrueType/OpenType file
            size: Font size in pixels
            x, y: Anchor point; y is the vertical middle of the text
            align: "left", "center" or "right" relative to x
            fill: Color or Gradient
        """
        if not text or self.width == 0 or self.height == 0:
            return

        typeface = load_font(font, size)

        # Glyph coverage as a mask, then fill it with the color/gradient
        coverage = Image.new('L', (self.width, self.height), 0)
        coverage_draw = ImageDraw.Draw(coverage)
        left, top, right, bottom = coverage_draw.textbbox((0, 0), text, font=typeface)
        text_w = right - left
        text_h = bottom - top

        if align == "center":
            origin_x = x - text_w / 2 - left
        elif align == "right":
            origin_x = x - text_w - left
        else:
            origin_x = x - left
        origin_y = y - text_h / 2 - top

        coverage_draw.text((origin_x, origin_y), text, font=typeface, fill=255)

        if isinstance(fill, Gradient):
            rgb = fill.render(self.width, self.height)
        else:
            rgb = solid_fill(fill, self.width, self.height)

        layer = np.dstack([rgb, np.array(coverage, dtype=np.uint8)])
        self._composite(layer)

    def draw_image(self, image: Union[str, Path, Image.Image]) -> None:
        """Paste an image scaled to fit and centered, keeping its alpha"""
        if isinstance(image, (str, Path)):
            path = Path(image)
            if not path.exists():
                raise FileNotFoundError(f"File not found: {path}")
            image = Image.open(path)

        if image.mode != 'RGBA':
            image = image.convert('RGBA')

        if self.width == 0 or self.height == 0 or image.width == 0 or image.height == 0:
            return

        scale = min(self.width / image.width, self.height / image.height)
        new_size = (max(1, int(image.width * scale)), max(1, int(image.height * scale)))
        fitted = image.resize(new_size, Image.LANCZOS)

        canvas = Image.new('RGBA', (self.width, self.height), (0, 0, 0, 0))
        offset = ((self.width - new_size[0]) // 2, (self.height - new_size[1]) // 2)
        canvas.paste(fitted, offset)
        self._composite(np.array(canvas, dtype=np.uint8))

    def stroke_polyline(self, points: Sequence[Point], color, width: int = 1) -> None:
        """One connected path through points, oldest first"""
        if len(points) < 2:
            return
        self.draw.line([(float(px), float(py)) for px, py in points],
                       fill=parse_color(color), width=width)

    def _composite(self, layer: np.ndarray) -> None:
        overlay = Image.fromarray(layer.astype(np.uint8), 'RGBA')
        self.image.alpha_composite(overlay)


def load_font(name: str, size: float) -> ImageFont.ImageFont:
    """Open a font by name or path, falling back to Pillow's default font"""
    pixel_size = max(1, int(round(size)))
    candidates = [name, f"{name}.ttf", f"{name.lower()}.ttf"]

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, pixel_size)
        except OSError:
            continue

    logger.debug("Font %r not found, using Pillow default at %dpx", name, pixel_size)
    return ImageFont.load_default(size=pixel_size)
