"""
Flow Configuration - Immutable settings shared by the field and the particles
"""

from dataclasses import dataclass, field, asdict, replace, fields
from typing import Any, Dict, Optional, Tuple


FIELD_MODES = ('pixel', 'procedural', 'noise')
HEADING_MODES = ('smoothed', 'direct')
GRADIENT_KINDS = ('radial', 'linear', 'solid')

DEFAULT_PALETTE: Tuple[str, ...] = (
    "#4C026B", "#730D9E", "#9622C7", "#B44AE0", "#CD72F2", "blue", "orange",
)


@dataclass(frozen=True)
class FlowConfig:
    """Configuration for a flow field effect"""
    # Particles
    particle_count: int = 1000
    max_trail_length: int = 170
    speed_range: Tuple[float, float] = (0.4, 1.4)
    turning_range: Tuple[float, float] = (0.1, 0.3)
    spawn_attempts: int = 40
    heading_mode: str = "smoothed"

    # Field
    cell_size: int = 10  # surface width should be a multiple of this
    field_mode: str = "pixel"
    angle_decimals: int = 2

    # Procedural field
    zoom: float = 0.5
    curve: float = 0.6

    # Noise field
    noise_scale: float = 12.0
    noise_octaves: int = 2

    # Field source
    text: str = "HAZADUS"
    font: str = "Impact"
    text_scale: float = 1.8
    source_image: Optional[str] = None
    gradient: str = "radial"
    text_color: str = "#ffffff"

    # Rendering
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    line_width: int = 1
    background: Optional[str] = None  # None = transparent
    fps: int = 60

    seed: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.cell_size, int) or self.cell_size <= 0:
            raise ValueError(f"cell_size must be a positive integer, got {self.cell_size!r}")
        if self.particle_count < 0:
            raise ValueError(f"particle_count must be >= 0, got {self.particle_count}")
        if self.max_trail_length < 1:
            raise ValueError(f"max_trail_length must be >= 1, got {self.max_trail_length}")
        if self.spawn_attempts < 0:
            raise ValueError(f"spawn_attempts must be >= 0, got {self.spawn_attempts}")
        if self.field_mode not in FIELD_MODES:
            raise ValueError(f"Unknown field mode: {self.field_mode}. Available: {list(FIELD_MODES)}")
        if self.heading_mode not in HEADING_MODES:
            raise ValueError(f"Unknown heading mode: {self.heading_mode}. Available: {list(HEADING_MODES)}")
        if self.gradient not in GRADIENT_KINDS:
            raise ValueError(f"Unknown gradient: {self.gradient}. Available: {list(GRADIENT_KINDS)}")
        if len(self.palette) == 0:
            raise ValueError("palette must contain at least one color")
        for name in ('speed_range', 'turning_range'):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} is inverted: {low} > {high}")

        # YAML and JSON hand back lists
        object.__setattr__(self, 'palette', tuple(self.palette))
        object.__setattr__(self, 'speed_range', tuple(self.speed_range))
        object.__setattr__(self, 'turning_range', tuple(self.turning_range))

    @property
    def reset_timer(self) -> int:
        """Countdown a particle starts with after every reseed"""
        return self.max_trail_length * 2

    @property
    def restricts_spawn(self) -> bool:
        return self.field_mode == 'pixel'

    def replace(self, **changes) -> 'FlowConfig':
        """Copy with some fields changed (validated again)"""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain types for YAML serialization"""
        data = asdict(self)
        data['palette'] = list(self.palette)
        data['speed_range'] = list(self.speed_range)
        data['turning_range'] = list(self.turning_range)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlowConfig':
        """Create from dictionary, ignoring keys this version doesn't know"""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)
