"""
Noise Field - Angles from seeded Perlin noise over the cell grid
"""

import math
import numpy as np
from typing import Optional

from .base import UnmaskedFieldStrategy
from ..core.config import FlowConfig


class NoiseGenerator:
    """Seeded 2D Perlin noise, evaluated on integer grid coordinates"""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

        # Pre-generate permutation table and gradients
        self._perm = self._generate_permutation()
        self._grad = self._generate_gradients()

    def _generate_permutation(self) -> np.ndarray:
        perm = np.arange(256, dtype=np.int32)
        self.rng.shuffle(perm)
        return np.concatenate([perm, perm])

    def _generate_gradients(self) -> np.ndarray:
        angles = self.rng.random(256) * 2 * np.pi
        return np.column_stack([np.cos(angles), np.sin(angles)])

    def perlin(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
        scale: float = 10.0,
        octaves: int = 1,
        persistence: float = 0.5,
        lacunarity: float = 2.0
    ) -> np.ndarray:
        """Fractal Perlin noise in roughly [-1, 1] at the given points"""
        result = np.zeros(np.shape(xs), dtype=np.float64)

        amplitude = 1.0
        max_amplitude = 0.0
        freq = 1.0

        for _ in range(max(1, octaves)):
            result += self._single_octave(xs, ys, scale / freq) * amplitude
            max_amplitude += amplitude
            amplitude *= persistence
            freq *= lacunarity

        return result / max_amplitude

    def _single_octave(self, xs: np.ndarray, ys: np.ndarray, scale: float) -> np.ndarray:
        px = (np.asarray(xs, dtype=np.float64) / scale) % 256
        py = (np.asarray(ys, dtype=np.float64) / scale) % 256

        x0 = np.floor(px).astype(np.int32) & 255
        y0 = np.floor(py).astype(np.int32) & 255
        x1 = (x0 + 1) & 255
        y1 = (y0 + 1) & 255

        rx = px - np.floor(px)
        ry = py - np.floor(py)

        # 6t^5 - 15t^4 + 10t^3
        u = rx * rx * rx * (rx * (rx * 6 - 15) + 10)
        v = ry * ry * ry * (ry * (ry * 6 - 15) + 10)

        aa = self._perm[self._perm[x0] + y0]
        ab = self._perm[self._perm[x0] + y1]
        ba = self._perm[self._perm[x1] + y0]
        bb = self._perm[self._perm[x1] + y1]

        def grad_dot(hash_arr, dx, dy):
            g = self._grad[hash_arr % 256]
            return g[..., 0] * dx + g[..., 1] * dy

        g_aa = grad_dot(aa, rx, ry)
        g_ab = grad_dot(ab, rx, ry - 1)
        g_ba = grad_dot(ba, rx - 1, ry)
        g_bb = grad_dot(bb, rx - 1, ry - 1)

        top = g_aa + u * (g_ba - g_aa)
        bottom = g_ab + u * (g_bb - g_ab)
        return top + v * (bottom - top)


class NoiseFieldStrategy(UnmaskedFieldStrategy):
    """Organic drifting field: angle = perlin(col, row) * curve * 2pi"""

    name = "noise"
    description = "Perlin noise angles, scaled by curve"

    def __init__(self, config: Optional[FlowConfig] = None):
        super().__init__(config)
        self.noise = NoiseGenerator(self.config.seed)

    def angle_at(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        values = self.noise.perlin(
            cols, rows,
            scale=self.config.noise_scale,
            octaves=self.config.noise_octaves,
        )
        return values * self.config.curve * 2 * math.pi
