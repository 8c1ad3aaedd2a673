"""
Flow Effect - Ties the surface, the flow field and the particles together

Example:
    effect = FlowEffect(FlowConfig(text="FLOW"))
    effect.configure(800, 400)
    effect.create_particles()

    for i in range(120):
        effect.render_frame(i * 1000 / 60)
        frame = effect.snapshot()
"""

import logging
import numpy as np
from typing import List, Optional

from .config import FlowConfig
from .field import FlowField
from .particle import ParticleSystem
from .surface import RasterSurface, Surface
from ..procedural import BaseFieldStrategy, get_strategy

logger = logging.getLogger(__name__)

GRID_COLOR = (128, 128, 128, 90)
FPS_COLOR = "#ffffff"
FPS_FONT = "Courier"
FPS_FONT_SIZE = 16


class FlowEffect:
    """Owns one surface, its current field and the particle system"""

    def __init__(
        self,
        config: Optional[FlowConfig] = None,
        surface: Optional[Surface] = None,
        strategy: Optional[BaseFieldStrategy] = None
    ):
        self.config = config or FlowConfig()
        self.surface = surface if surface is not None else RasterSurface(0, 0)
        self.strategy = strategy or get_strategy(self.config.field_mode)(self.config)

        self.rng = np.random.default_rng(self.config.seed)
        self.field = FlowField.empty(0, 0, self.config.cell_size)
        self.system = ParticleSystem(self.config, self.field, self.rng)

        self.debug = False
        self.fps = 0
        self._prev_timestamp = 0.0

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    def configure(self, width: int, height: int) -> FlowField:
        """Size the surface (width snapped to the cell grid) and rebuild the field"""
        width = max(0, int(width))
        width -= width % self.config.cell_size
        self.surface.resize(width, max(0, int(height)))
        return self.build_field(self.surface.width, self.surface.height)

    def build_field(self, width: int, height: int) -> FlowField:
        """Build a new field and swap it in whole"""
        flow_field = self.strategy.build(width, height, self.surface)
        self.field = flow_field
        self.system.set_field(flow_field)
        logger.debug(
            "Built %s field %dx%d (generation %d)",
            self.strategy.name, flow_field.columns, flow_field.rows, self.system.generation,
        )
        return flow_field

    def create_particles(self) -> None:
        self.system.populate()

    def step(self) -> None:
        """Advance the simulation one tick"""
        self.system.step()

    def render(self) -> None:
        """Draw every particle's trail"""
        self.system.render(self.surface)

    def toggle_debug(self) -> bool:
        self.debug = not self.debug
        return self.debug

    def clear(self) -> None:
        self.surface.clear(self.config.background)

    def render_frame(self, timestamp: float) -> None:
        """
        Draw one full frame then advance the particles.

        Args:
            timestamp: Frame time in milliseconds, used for the FPS readout
        """
        self.clear()

        if self.debug:
            self.draw_grid()
            self.update_fps(timestamp)
            self.draw_fps()
            self.draw_source()

        self.render()
        self.step()

    def update_fps(self, timestamp: float) -> int:
        delta = timestamp - self._prev_timestamp
        if delta > 0:
            self.fps = round(1000 / delta)
        self._prev_timestamp = timestamp
        return self.fps

    def draw_grid(self) -> None:
        """Cell boundaries over the whole surface"""
        cell = self.config.cell_size
        for col in range(1, self.field.columns + 1):
            self.surface.stroke_polyline([(cell * col, 0), (cell * col, self.height)], GRID_COLOR)
        for row in range(1, self.field.rows + 1):
            self.surface.stroke_polyline([(0, cell * row), (self.width, cell * row)], GRID_COLOR)

    def draw_fps(self) -> None:
        self.surface.render_text(f"{self.fps} fps", FPS_FONT, FPS_FONT_SIZE, 8, 12,
                                 align="left", fill=FPS_COLOR)

    def draw_source(self) -> None:
        """Overlay whatever the field was sampled from"""
        draw_source = getattr(self.strategy, 'draw_source', None)
        if draw_source is not None:
            draw_source(self.surface)

    def snapshot(self) -> np.ndarray:
        """Current frame as an RGBA array"""
        return self.surface.read_pixels(0, 0, self.width, self.height)

    def run(self, frames: int, fps: Optional[int] = None) -> List[np.ndarray]:
        """Render frames headless and return them as RGBA arrays"""
        fps = fps or self.config.fps
        if not self.system.particles:
            self.create_particles()

        result = []
        for i in range(frames):
            self.render_frame(i * 1000 / fps)
            result.append(self.snapshot())
        return result
