"""
Field Strategies - Ways to turn a surface into a flow field
"""

from .base import BaseFieldStrategy, UnmaskedFieldStrategy
from .pixels import PixelFieldStrategy, sample_pixels
from .curve import CurveFieldStrategy
from .noise import NoiseFieldStrategy, NoiseGenerator

# Strategy registry for easy access
STRATEGIES = {
    'pixel': PixelFieldStrategy,
    'text': PixelFieldStrategy,  # Alias
    'image': PixelFieldStrategy,  # Alias
    'procedural': CurveFieldStrategy,
    'curve': CurveFieldStrategy,  # Alias
    'noise': NoiseFieldStrategy,
    'perlin': NoiseFieldStrategy,  # Alias
}


def get_strategy(name: str) -> type:
    """Get strategy class by name"""
    name = name.lower()
    if name not in STRATEGIES:
        raise ValueError(f"Unknown field strategy: {name}. Available: {sorted(STRATEGIES)}")
    return STRATEGIES[name]


__all__ = [
    'BaseFieldStrategy',
    'UnmaskedFieldStrategy',
    'PixelFieldStrategy',
    'CurveFieldStrategy',
    'NoiseFieldStrategy',
    'NoiseGenerator',
    'sample_pixels',
    'STRATEGIES',
    'get_strategy',
]
