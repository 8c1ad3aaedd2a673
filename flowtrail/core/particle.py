"""
Flow Particles

Particles that steer by the flow field and leave a bounded trail behind.

Lifecycle per particle:
- active: timer counting down, heading follows the field, trail grows
- draining: timer expired, particle stopped, trail shrinks one point per step
- reseed: trail collapsed to one point, particle restarts somewhere new

Particles never interact, so the system updates them one after another in
any order. Particles are re-initialized in place and never reallocated.
"""

import math
import numpy as np
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional, Tuple

from .config import FlowConfig
from .field import FlowField
from .palette import ColorA, pick_color


Point = Tuple[float, float]


class ParticleState(Enum):
    """Where a particle is in its lifecycle"""
    ACTIVE = "active"
    DRAINING = "draining"
    RESEED = "reseed"


@dataclass
class Particle:
    """State of a single trailing particle"""
    speed: float
    turning_rate: float
    color: ColorA
    max_trail_length: int
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    target_heading: float = 0.0
    timer: int = 0
    trail: Deque[Point] = field(default_factory=deque)

    def __post_init__(self):
        self.trail = deque(self.trail, maxlen=self.max_trail_length)

    @classmethod
    def create(cls, config: FlowConfig, rng: np.random.Generator) -> 'Particle':
        """New particle with its fixed speed, turning rate and color drawn once"""
        speed_low, speed_high = config.speed_range
        turn_low, turn_high = config.turning_range
        return cls(
            speed=float(rng.uniform(speed_low, speed_high)),
            turning_rate=float(rng.uniform(turn_low, turn_high)),
            color=pick_color(rng, config.palette),
            max_trail_length=config.max_trail_length,
        )

    @property
    def state(self) -> ParticleState:
        if self.timer >= 1:
            return ParticleState.ACTIVE
        if len(self.trail) > 1:
            return ParticleState.DRAINING
        return ParticleState.RESEED

    @property
    def points(self) -> List[Point]:
        return list(self.trail)

    def reset(self, flow_field: FlowField, config: FlowConfig, rng: np.random.Generator) -> None:
        """
        Move to a new start point and restart the trail and timer.

        Masked fields get a bounded number of tries at a cell on the source;
        if none hits (or the field is empty) the position is drawn uniformly
        over the whole surface instead.
        """
        spawn = None
        if flow_field.restricts_spawn and len(flow_field) > 0:
            for _ in range(config.spawn_attempts):
                index = int(rng.integers(0, len(flow_field)))
                if flow_field.mask[index]:
                    spawn = (float(flow_field.xs[index]), float(flow_field.ys[index]))
                    break

        if spawn is None:
            spawn = (
                float(rng.random() * flow_field.width) if flow_field.width > 0 else 0.0,
                float(rng.random() * flow_field.height) if flow_field.height > 0 else 0.0,
            )

        self.x, self.y = spawn
        self.timer = config.reset_timer
        self.trail.clear()
        self.trail.append((self.x, self.y))

    def steer(self, target: float, smoothed: bool = True) -> None:
        """Turn toward target, one turning-rate step at a time when smoothed"""
        self.target_heading = target
        if not smoothed:
            self.heading = target
        elif self.heading > target:
            self.heading -= self.turning_rate
        elif self.heading < target:
            self.heading += self.turning_rate
        else:
            # Exact hit snaps to the turning rate itself, kept as-is
            self.heading = self.turning_rate

    def update(self, flow_field: FlowField, config: FlowConfig, rng: np.random.Generator) -> None:
        """Advance one simulation step"""
        self.timer -= 1

        if self.timer >= 1:
            cell = flow_field.lookup(self.x, self.y)
            if cell is not None:
                self.steer(cell.angle, smoothed=config.heading_mode == 'smoothed')

            self.x += math.cos(self.heading) * self.speed
            self.y += math.sin(self.heading) * self.speed
            # deque maxlen drops the oldest point
            self.trail.append((self.x, self.y))
        elif len(self.trail) > 1:
            self.trail.popleft()
        else:
            self.reset(flow_field, config, rng)


class ParticleSystem:
    """
    Fixed-size collection of flow particles.

    Example:
        system = ParticleSystem(config, field)
        system.populate()

        # Each frame
        system.render(surface)
        system.step()
    """

    def __init__(
        self,
        config: FlowConfig,
        flow_field: FlowField,
        rng: Optional[np.random.Generator] = None
    ):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.field = flow_field
        self.generation = 0
        self.particles: List[Particle] = []

    def set_field(self, flow_field: FlowField) -> None:
        """Swap in a freshly built field; the next step reads only the new one"""
        self.field = flow_field
        self.generation += 1

    def populate(self, count: Optional[int] = None) -> None:
        """Create particles once, each starting with a reset"""
        count = self.config.particle_count if count is None else count
        for _ in range(count):
            particle = Particle.create(self.config, self.rng)
            particle.reset(self.field, self.config, self.rng)
            self.particles.append(particle)

    def step(self) -> None:
        flow_field = self.field
        for particle in self.particles:
            particle.update(flow_field, self.config, self.rng)

    def render(self, surface) -> None:
        """Stroke every particle's trail, whatever its state"""
        for particle in self.particles:
            surface.stroke_polyline(particle.points, particle.color, self.config.line_width)

    def clear(self) -> None:
        self.particles.clear()

    def __len__(self) -> int:
        return len(self.particles)

    def state_counts(self) -> dict:
        counts = {state: 0 for state in ParticleState}
        for particle in self.particles:
            counts[particle.state] += 1
        return counts
