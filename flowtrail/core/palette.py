"""
Palette & Gradients

Particle colors come from a fixed palette, one pick per particle.
Source text is filled with a canvas-style gradient so the field gets
varied angles across the glyphs.
"""

import numpy as np
from PIL import ImageColor
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


Color = Tuple[int, int, int]           # RGB 0-255
ColorA = Tuple[int, int, int, int]     # RGBA 0-255
Stop = Tuple[float, Color]


def parse_color(value) -> ColorA:
    """Parse "#rrggbb", "blue", "rgb(...)" or an RGB(A) tuple into RGBA"""
    if isinstance(value, str):
        rgb = ImageColor.getrgb(value)
    else:
        rgb = tuple(int(c) for c in value)

    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    return (rgb[0], rgb[1], rgb[2], rgb[3])


def pick_color(rng: np.random.Generator, palette: Sequence) -> ColorA:
    """Uniform pick from a palette"""
    return parse_color(palette[int(rng.integers(0, len(palette)))])


# Stops used for the source text (offsets follow the canvas convention)
LINEAR_STOPS: List[Stop] = [
    (0.2, (255, 0, 0)),
    (0.4, (0, 255, 0)),
    (0.6, (150, 100, 100)),
    (0.8, (0, 255, 255)),
]

RADIAL_STOPS: List[Stop] = [
    (0.2, (0, 0, 255)),
    (0.4, (200, 255, 0)),
    (0.6, (0, 0, 255)),
    (0.8, (0, 0, 0)),
]


@dataclass
class Gradient:
    """
    Linear or radial color gradient rendered to an RGB array.

    Linear runs from `start` to `end`. Radial runs between two concentric
    circles of radius `r0` and `r1` around `start`. Before the first stop the
    first color is used, after the last stop the last one.
    """
    kind: str
    stops: List[Stop]
    start: Tuple[float, float] = (0.0, 0.0)
    end: Tuple[float, float] = (1.0, 1.0)
    r0: float = 0.0
    r1: float = 1.0

    @classmethod
    def linear(cls, width: int, height: int, stops: List[Stop] = None) -> 'Gradient':
        """Diagonal gradient over the whole surface"""
        return cls('linear', stops or LINEAR_STOPS, start=(0.0, 0.0), end=(float(width), float(height)))

    @classmethod
    def radial(cls, width: int, height: int, stops: List[Stop] = None) -> 'Gradient':
        """Radial gradient from the surface center out to its width"""
        center = (width / 2, height / 2)
        return cls('radial', stops or RADIAL_STOPS, start=center, end=center, r0=10.0, r1=float(width))

    def positions(self, width: int, height: int) -> np.ndarray:
        """Gradient parameter t for every pixel, shape (height, width)"""
        ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)

        if self.kind == 'radial':
            dist = np.hypot(xs - self.start[0], ys - self.start[1])
            span = self.r1 - self.r0
            if span == 0:
                return np.zeros((height, width))
            return (dist - self.r0) / span

        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            return np.zeros((height, width))
        return ((xs - self.start[0]) * dx + (ys - self.start[1]) * dy) / length_sq

    def render(self, width: int, height: int) -> np.ndarray:
        """RGB uint8 array of shape (height, width, 3)"""
        t = self.positions(width, height)
        offsets = np.array([s[0] for s in self.stops], dtype=np.float64)
        colors = np.array([s[1] for s in self.stops], dtype=np.float64)

        result = np.empty((height, width, 3), dtype=np.float64)
        for channel in range(3):
            # np.interp clamps to the end colors outside the stop range
            result[:, :, channel] = np.interp(t, offsets, colors[:, channel])

        return np.clip(np.round(result), 0, 255).astype(np.uint8)


def solid_fill(color, width: int, height: int) -> np.ndarray:
    """RGB array filled with one color"""
    rgba = parse_color(color)
    result = np.empty((height, width, 3), dtype=np.uint8)
    result[:, :] = rgba[:3]
    return result
