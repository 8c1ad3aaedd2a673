"""
Base Strategy - Abstract base class for flow field construction
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ..core.config import FlowConfig
from ..core.field import FlowField
from ..core.surface import Surface


class BaseFieldStrategy(ABC):
    """Builds a FlowField covering a surface of a given size"""

    # Strategy metadata
    name: str = "base"
    description: str = "Base strategy"

    # Whether particles may only spawn on masked cells
    restricts_spawn: bool = False

    def __init__(self, config: Optional[FlowConfig] = None):
        self.config = config or FlowConfig()

    @abstractmethod
    def build(self, width: int, height: int, surface: Optional[Surface] = None) -> FlowField:
        """Build a complete field for a width x height surface."""
        pass

    def _grid_shape(self, width: int, height: int) -> Tuple[int, int]:
        """(columns, rows) with trailing partial cells clamped away"""
        cell = self.config.cell_size
        return max(0, width) // cell, max(0, height) // cell

    def _cell_indices(self, columns: int, rows: int) -> Tuple[np.ndarray, np.ndarray]:
        """Column and row index per cell, row-major"""
        rows_idx, cols_idx = np.mgrid[0:rows, 0:columns]
        return cols_idx.reshape(-1), rows_idx.reshape(-1)

    def _make_field(self, width: int, height: int, angles: np.ndarray, mask: np.ndarray) -> FlowField:
        return FlowField(
            width=width,
            height=height,
            cell_size=self.config.cell_size,
            angles=angles,
            mask=mask,
            restricts_spawn=self.restricts_spawn,
        )


class UnmaskedFieldStrategy(BaseFieldStrategy):
    """Base for closed-form fields where every cell is a valid spawn point"""

    @abstractmethod
    def angle_at(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        """Angle for each (col, row) pair"""
        pass

    def build(self, width: int, height: int, surface: Optional[Surface] = None) -> FlowField:
        columns, rows = self._grid_shape(width, height)
        if columns == 0 or rows == 0:
            return FlowField.empty(width, height, self.config.cell_size)

        cols_idx, rows_idx = self._cell_indices(columns, rows)
        angles = self.angle_at(cols_idx, rows_idx)
        mask = np.ones(columns * rows, dtype=bool)
        return self._make_field(width, height, angles, mask)
