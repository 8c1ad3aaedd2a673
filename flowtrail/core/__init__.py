"""
Flow Trails - Core
"""

from .config import FlowConfig, DEFAULT_PALETTE, FIELD_MODES, HEADING_MODES, GRADIENT_KINDS
from .field import Cell, FlowField
from .palette import Gradient, parse_color, pick_color, solid_fill
from .surface import Surface, RasterSurface, load_font
from .particle import Particle, ParticleState, ParticleSystem
from .effect import FlowEffect
from .exporter import FrameExporter
from .presets import (
    # Data structures
    FlowPreset,
    # Manager
    PresetManager,
    # Convenience
    get_preset_manager, get_preset, list_presets,
    # Built-in presets dict
    BUILTIN_PRESETS,
)
from .preview import PreviewConfig, PreviewWindow, preview, check_pygame_available

__all__ = [
    # Configuration
    'FlowConfig', 'DEFAULT_PALETTE', 'FIELD_MODES', 'HEADING_MODES', 'GRADIENT_KINDS',
    # Field
    'Cell', 'FlowField',
    # Colors
    'Gradient', 'parse_color', 'pick_color', 'solid_fill',
    # Surface
    'Surface', 'RasterSurface', 'load_font',
    # Particles
    'Particle', 'ParticleState', 'ParticleSystem',
    # Effect
    'FlowEffect',
    # Export
    'FrameExporter',
    # Presets
    'FlowPreset', 'PresetManager',
    'get_preset_manager', 'get_preset', 'list_presets',
    'BUILTIN_PRESETS',
    # Live preview
    'PreviewConfig', 'PreviewWindow', 'preview', 'check_pygame_available',
]
