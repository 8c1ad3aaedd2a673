"""
Curve Field - Closed-form trigonometric angle field

    angle = (cos(col * zoom) + sin(row * zoom)) * curve
"""

import numpy as np

from .base import UnmaskedFieldStrategy


class CurveFieldStrategy(UnmaskedFieldStrategy):
    """Swirling field with no pixel read-back"""

    name = "procedural"
    description = "Sine/cosine swirl controlled by zoom and curve"

    def angle_at(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        zoom = self.config.zoom
        return (np.cos(cols * zoom) + np.sin(rows * zoom)) * self.config.curve
