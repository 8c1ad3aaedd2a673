"""
Flow Field - Grid of directional values sampled by particles

One angle (radians) per cell, stored row-major: index = row * columns + col.
Strategies in `flowtrail.procedural` fill it; this module only holds and
looks up the data.
"""

import math
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Cell:
    """One grid unit: pixel origin, angle and whether it lies on the source"""
    x: int
    y: int
    angle: float
    mask: bool


@dataclass
class FlowField:
    """
    Immutable-by-convention grid of angles.

    Example:
        field = FlowField.empty(100, 100, cell_size=10)
        cell = field.lookup(42.5, 17.0)
        if cell is not None:
            heading = cell.angle
    """
    width: int
    height: int
    cell_size: int
    angles: np.ndarray
    mask: np.ndarray
    restricts_spawn: bool = False
    _cells: Optional[List[Cell]] = field(default=None, repr=False)

    def __post_init__(self):
        self.columns = max(0, self.width) // self.cell_size
        self.rows = max(0, self.height) // self.cell_size

        count = self.columns * self.rows
        self.angles = np.asarray(self.angles, dtype=np.float64).reshape(-1)
        self.mask = np.asarray(self.mask, dtype=bool).reshape(-1)
        if self.angles.size != count or self.mask.size != count:
            raise ValueError(
                f"Field of {self.columns}x{self.rows} cells needs {count} values, "
                f"got {self.angles.size} angles and {self.mask.size} mask flags"
            )

        cols = np.arange(count) % max(self.columns, 1)
        rows = np.arange(count) // max(self.columns, 1)
        self.xs = (cols * self.cell_size).astype(np.int64)
        self.ys = (rows * self.cell_size).astype(np.int64)

    @classmethod
    def empty(cls, width: int, height: int, cell_size: int) -> 'FlowField':
        """Field with no data at all (zero-sized surface)"""
        columns = max(0, width) // cell_size
        rows = max(0, height) // cell_size
        return cls(
            width=width,
            height=height,
            cell_size=cell_size,
            angles=np.zeros(columns * rows),
            mask=np.zeros(columns * rows, dtype=bool),
        )

    def __len__(self) -> int:
        return self.columns * self.rows

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def cells(self) -> List[Cell]:
        """All cells in row-major order"""
        if self._cells is None:
            self._cells = [
                Cell(int(x), int(y), float(a), bool(m))
                for x, y, a, m in zip(self.xs, self.ys, self.angles, self.mask)
            ]
        return self._cells

    def cell(self, index: int) -> Optional[Cell]:
        """Cell at a flat index, or None when the index is out of range"""
        if index < 0 or index >= len(self):
            return None
        return Cell(
            int(self.xs[index]),
            int(self.ys[index]),
            float(self.angles[index]),
            bool(self.mask[index]),
        )

    def index_at(self, x: float, y: float) -> int:
        """Flat index for a surface position (may be out of range)"""
        col = math.floor(x / self.cell_size)
        row = math.floor(y / self.cell_size)
        return row * self.columns + col

    def lookup(self, x: float, y: float) -> Optional[Cell]:
        """Cell under a surface position, None means "no field data here" """
        return self.cell(self.index_at(x, y))

    def angle_grid(self) -> np.ndarray:
        """Angles as a (rows, columns) array"""
        return self.angles.reshape(self.rows, self.columns)

    def masked_indices(self) -> np.ndarray:
        return np.flatnonzero(self.mask)
