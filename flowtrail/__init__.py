"""
Flow Trails - Particle trails steered by text-derived or procedural flow fields
"""

from .core import (
    FlowConfig, FlowField, Cell, FlowEffect, Particle, ParticleSystem,
    RasterSurface, FrameExporter, PresetManager, preview,
)
from .procedural import STRATEGIES, get_strategy

__version__ = "0.1.0"
__all__ = [
    'FlowConfig',
    'FlowField',
    'Cell',
    'FlowEffect',
    'Particle',
    'ParticleSystem',
    'RasterSurface',
    'FrameExporter',
    'PresetManager',
    'STRATEGIES',
    'get_strategy',
    'build_field',
    'render_animation',
    'preview',
]


def build_field(width: int, height: int, config: FlowConfig = None) -> FlowField:
    """
    Build a flow field for a surface size without running any particles.

    Args:
        width: Surface width in pixels
        height: Surface height in pixels
        config: Flow configuration (defaults if None)

    Returns:
        The FlowField for that size
    """
    config = config or FlowConfig()
    strategy = get_strategy(config.field_mode)(config)
    return strategy.build(width, height, RasterSurface(width, height))


def render_animation(
    output_path: str,
    config: FlowConfig = None,
    width: int = 800,
    height: int = 400,
    frames: int = 120,
    format: str = 'gif',
    warmup: int = 0,
    debug: bool = False,
):
    """
    Render the effect headless and export it.

    Args:
        output_path: GIF file, or directory for PNG frames
        config: Flow configuration (defaults if None)
        width: Surface width (snapped down to a multiple of cell_size)
        height: Surface height
        frames: Number of frames to export
        format: Output format ('gif', 'frames')
        warmup: Simulation steps to run before the first exported frame
        debug: Draw the debug overlay into the frames

    Returns:
        Path to the output file(s)
    """
    config = config or FlowConfig()
    if format not in ('gif', 'frames'):
        raise ValueError(f"Unknown format: {format}")

    effect = FlowEffect(config)
    effect.configure(width, height)
    effect.create_particles()
    effect.debug = debug

    for _ in range(warmup):
        effect.step()

    rendered = effect.run(frames)

    if format == 'gif':
        return FrameExporter.to_gif(rendered, output_path, duration=max(1, round(1000 / config.fps)))
    return FrameExporter.to_frames(rendered, output_path)
