"""
Live Preview Window

Runs the flow effect in real time. The surface follows the window size and
the field is rebuilt on every resize.

Controls:
    SPACE       - Toggle debug overlay (grid, field source, fps)
    P           - Pause/resume the simulation
    S           - Save current frame as PNG
    ESC/Q       - Quit

Requires: pygame (pip install pygame)
"""

import numpy as np
from typing import Any, Optional, Tuple
from dataclasses import dataclass

from .config import FlowConfig
from .effect import FlowEffect
from .exporter import FrameExporter

# Try to import pygame
try:
    import pygame
    from pygame.locals import *
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False
    pygame = None


# =============================================================================
# Preview Configuration
# =============================================================================

@dataclass
class PreviewConfig:
    """Configuration for the preview window"""
    window_width: int = 1000
    window_height: int = 600
    window_title: str = "Flow Trails"
    background_color: Tuple[int, int, int] = (12, 8, 20)
    fps: int = 60


# =============================================================================
# Preview Window
# =============================================================================

class PreviewWindow:
    """
    Real-time flow effect window.

    Example:
        preview = PreviewWindow(FlowConfig(text="FLOW"))
        preview.run()
    """

    def __init__(
        self,
        config: Optional[FlowConfig] = None,
        preview_config: Optional[PreviewConfig] = None,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError(
                "pygame is required for preview. Install with: pip install pygame"
            )

        self.config = config or FlowConfig()
        self.preview_config = preview_config or PreviewConfig(fps=self.config.fps)
        self.effect = FlowEffect(self.config)
        self.effect.debug = debug

        self.paused = False
        self.saved_frames = 0

        self._init_pygame()

    def _init_pygame(self):
        pygame.init()
        pygame.display.set_caption(self.preview_config.window_title)

        self.screen = pygame.display.set_mode(
            (self.preview_config.window_width, self.preview_config.window_height),
            pygame.RESIZABLE
        )
        self.clock = pygame.time.Clock()

        self.effect.configure(self.preview_config.window_width, self.preview_config.window_height)
        self.effect.create_particles()

    def _array_to_surface(self, array: np.ndarray) -> Any:
        """Convert RGBA numpy array to pygame surface"""
        h, w = array.shape[:2]
        surf = pygame.Surface((w, h), pygame.SRCALPHA)

        # Pygame expects (width, height) but numpy is (height, width)
        pygame.surfarray.pixels3d(surf)[:] = array[:, :, :3].swapaxes(0, 1)
        pygame.surfarray.pixels_alpha(surf)[:] = array[:, :, 3].swapaxes(0, 1)

        return surf

    def run(self):
        """Run the preview window main loop"""
        running = True

        while running:
            self.clock.tick(self.preview_config.fps)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_key(event.key)
                elif event.type == pygame.VIDEORESIZE:
                    self._handle_resize(event.w, event.h)

            if not self.paused:
                self.effect.render_frame(pygame.time.get_ticks())

            self._render()
            pygame.display.flip()

        pygame.quit()

    def _handle_key(self, key: int) -> bool:
        """Handle keyboard input. Returns False to quit."""
        if key in (K_ESCAPE, K_q):
            return False
        elif key == K_SPACE:
            self.effect.toggle_debug()
        elif key == K_p:
            self.paused = not self.paused
        elif key == K_s:
            self._save_frame()
        return True

    def _handle_resize(self, width: int, height: int):
        """Resize the window and rebuild the field for the new size"""
        self.preview_config.window_width = width
        self.preview_config.window_height = height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.effect.configure(width, height)

    def _render(self):
        self.screen.fill(self.preview_config.background_color)
        frame = self.effect.snapshot()
        if frame.size:
            self.screen.blit(self._array_to_surface(frame), (0, 0))

    def _save_frame(self):
        """Save current frame as PNG"""
        filename = f"flow_{self.saved_frames:04d}.png"
        FrameExporter.to_png(self.effect.snapshot(), filename)
        self.saved_frames += 1
        print(f"Saved: {filename}")


# =============================================================================
# Convenience Functions
# =============================================================================

def preview(config: Optional[FlowConfig] = None, width: int = 1000, height: int = 600,
            debug: bool = False) -> None:
    """
    Open a live window for a config.

    Args:
        config: Flow configuration
        width, height: Initial window size
        debug: Start with the debug overlay on
    """
    if not PYGAME_AVAILABLE:
        print("Preview requires pygame. Install with: pip install pygame")
        print("Alternatively, export to GIF and view in external program.")
        return

    config = config or FlowConfig()
    window = PreviewWindow(
        config,
        PreviewConfig(window_width=width, window_height=height, fps=config.fps),
        debug=debug,
    )
    window.run()


def check_pygame_available() -> bool:
    """Check if pygame is available for preview"""
    return PYGAME_AVAILABLE
