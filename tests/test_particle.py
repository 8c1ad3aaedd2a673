"""
Tests for particle motion, trails and reseeding.
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from flowtrail.core.config import FlowConfig
from flowtrail.core.field import FlowField
from flowtrail.core.particle import Particle, ParticleState, ParticleSystem
from flowtrail.procedural import CurveFieldStrategy, PixelFieldStrategy


def make_particle(**kwargs):
    defaults = dict(speed=1.0, turning_rate=0.2, color=(255, 0, 0, 255), max_trail_length=10)
    defaults.update(kwargs)
    return Particle(**defaults)


def procedural_field(width=100, height=100, config=None):
    config = config or FlowConfig(field_mode='procedural')
    return CurveFieldStrategy(config).build(width, height)


def half_masked_field(cell_size=10):
    """40x20 field where only the left half is on the source"""
    pixels = np.zeros((20, 40, 4), dtype=np.uint8)
    pixels[:, :20] = (128, 128, 128, 255)
    return PixelFieldStrategy(FlowConfig(cell_size=cell_size)).from_pixels(pixels)


def test_create_draws_within_ranges():
    config = FlowConfig(seed=1)
    rng = np.random.default_rng(1)
    for _ in range(50):
        particle = Particle.create(config, rng)
        assert 0.4 <= particle.speed <= 1.4
        assert 0.1 <= particle.turning_rate <= 0.3
        assert particle.max_trail_length == 170


def test_reset_sets_timer_and_single_point_trail():
    config = FlowConfig(field_mode='procedural', max_trail_length=5)
    particle = make_particle(max_trail_length=5)
    particle.reset(procedural_field(), config, np.random.default_rng(0))
    assert particle.timer == 10
    assert particle.points == [(particle.x, particle.y)]


def test_trail_never_exceeds_max_length():
    config = FlowConfig(field_mode='procedural', max_trail_length=5, particle_count=30, seed=2)
    system = ParticleSystem(config, procedural_field(config=config))
    system.populate()

    for _ in range(60):
        system.step()
        for particle in system.particles:
            assert 1 <= len(particle.trail) <= 5


def test_drain_then_reseed_cycle():
    config = FlowConfig(field_mode='procedural', max_trail_length=3)
    field = procedural_field(config=config)
    rng = np.random.default_rng(4)
    particle = make_particle(max_trail_length=3)
    particle.reset(field, config, rng)

    for _ in range(5):
        particle.update(field, config, rng)
    assert particle.state is ParticleState.ACTIVE
    assert len(particle.trail) == 3

    particle.update(field, config, rng)
    assert particle.state is ParticleState.DRAINING
    assert len(particle.trail) == 2

    particle.update(field, config, rng)
    assert len(particle.trail) == 1
    assert particle.state is ParticleState.RESEED

    particle.update(field, config, rng)
    assert particle.timer == config.reset_timer
    assert len(particle.trail) == 1
    assert particle.state is ParticleState.ACTIVE
    assert 0 <= particle.x < 100
    assert 0 <= particle.y < 100


def test_draining_particle_does_not_move():
    config = FlowConfig(field_mode='procedural', max_trail_length=3)
    field = procedural_field(config=config)
    rng = np.random.default_rng(5)
    particle = make_particle(max_trail_length=3, x=50.0, y=50.0, timer=1)
    particle.trail.extend([(48.0, 50.0), (49.0, 50.0), (50.0, 50.0)])

    particle.update(field, config, rng)
    assert (particle.x, particle.y) == (50.0, 50.0)
    assert particle.points == [(49.0, 50.0), (50.0, 50.0)]


def test_masked_spawn_lands_on_source_cells():
    config = FlowConfig(spawn_attempts=200)
    field = half_masked_field()
    masked_origins = {(field.xs[i], field.ys[i]) for i in field.masked_indices()}
    rng = np.random.default_rng(6)

    for _ in range(100):
        particle = make_particle()
        particle.reset(field, config, rng)
        assert (particle.x, particle.y) in masked_origins


def test_spawn_falls_back_to_whole_surface():
    config = FlowConfig(spawn_attempts=5)
    pixels = np.zeros((20, 40, 4), dtype=np.uint8)
    field = PixelFieldStrategy(config).from_pixels(pixels)
    rng = np.random.default_rng(7)

    for _ in range(50):
        particle = make_particle()
        particle.reset(field, config, rng)
        assert 0 <= particle.x < 40
        assert 0 <= particle.y < 20


def test_spawn_on_empty_field():
    config = FlowConfig()
    particle = make_particle()
    particle.reset(FlowField.empty(0, 0, 10), config, np.random.default_rng(8))
    assert (particle.x, particle.y) == (0.0, 0.0)
    assert len(particle.trail) == 1


def test_unrestricted_field_spawns_anywhere():
    config = FlowConfig(field_mode='procedural')
    field = procedural_field(config=config)
    rng = np.random.default_rng(9)
    positions = []
    for _ in range(200):
        particle = make_particle()
        particle.reset(field, config, rng)
        positions.append((particle.x, particle.y))

    # Not snapped to cell origins
    assert any(x % 10 != 0 for x, _ in positions)


def test_smoothed_steer_moves_one_step():
    particle = make_particle(heading=0.0)
    particle.steer(1.0, smoothed=True)
    assert particle.heading == pytest.approx(0.2)
    assert particle.target_heading == 1.0

    particle = make_particle(heading=1.0)
    particle.steer(0.0, smoothed=True)
    assert particle.heading == pytest.approx(0.8)


def test_smoothed_exact_match_snaps_to_turning_rate():
    particle = make_particle(heading=0.5, turning_rate=0.25)
    particle.steer(0.5, smoothed=True)
    assert particle.heading == 0.25


def test_smoothed_heading_rises_by_turning_rate_each_step():
    rate = 0.3
    target = 2.05
    particle = make_particle(heading=0.0, turning_rate=rate)
    headings = [particle.heading]
    for _ in range(10):
        particle.steer(target, smoothed=True)
        headings.append(particle.heading)

    first_past = next(i for i, h in enumerate(headings) if h > target)
    for i in range(first_past):
        assert headings[i + 1] - headings[i] == pytest.approx(rate)
    assert headings[first_past] - target <= rate
    # Once past, it steps back down toward the target
    assert headings[first_past + 1] == pytest.approx(headings[first_past] - rate)


def test_direct_steer_snaps_to_target():
    particle = make_particle(heading=0.0)
    particle.steer(2.5, smoothed=False)
    assert particle.heading == 2.5


def test_update_direct_uses_cell_angle():
    config = FlowConfig(field_mode='procedural', heading_mode='direct', zoom=0.11, curve=16)
    field = procedural_field(config=config)
    particle = make_particle(x=5.0, y=5.0, timer=10)
    particle.trail.append((5.0, 5.0))

    particle.update(field, config, np.random.default_rng(10))
    assert particle.heading == 16.0
    assert particle.x == pytest.approx(5.0 + math.cos(16.0))
    assert particle.y == pytest.approx(5.0 + math.sin(16.0))
    assert len(particle.trail) == 2


def test_update_outside_field_keeps_heading_and_moves():
    config = FlowConfig(field_mode='procedural', heading_mode='direct')
    field = procedural_field(config=config)
    particle = make_particle(x=5.0, y=-15.0, heading=1.0, timer=10)
    particle.trail.append((5.0, -15.0))

    particle.update(field, config, np.random.default_rng(11))
    assert particle.heading == 1.0
    assert particle.x == pytest.approx(5.0 + math.cos(1.0))
    assert particle.y == pytest.approx(-15.0 + math.sin(1.0))
    assert len(particle.trail) == 2


def test_update_below_field_keeps_heading():
    config = FlowConfig(field_mode='procedural', heading_mode='direct')
    field = procedural_field(config=config)
    particle = make_particle(x=5.0, y=150.0, heading=1.0, timer=10)
    particle.trail.append((5.0, 150.0))

    particle.update(field, config, np.random.default_rng(12))
    assert field.lookup(5.0, 150.0) is None
    assert particle.heading == 1.0
    assert len(particle.trail) == 2


def test_set_field_bumps_generation():
    config = FlowConfig(field_mode='procedural', particle_count=5)
    system = ParticleSystem(config, procedural_field(config=config))
    system.populate()
    assert system.generation == 0

    new_field = procedural_field(200, 100, config)
    system.set_field(new_field)
    assert system.generation == 1
    assert system.field is new_field
    assert len(system) == 5


def test_state_counts_cover_all_particles():
    config = FlowConfig(field_mode='procedural', particle_count=40, max_trail_length=4, seed=12)
    system = ParticleSystem(config, procedural_field(config=config))
    system.populate()
    for _ in range(7):
        system.step()
    counts = system.state_counts()
    assert sum(counts.values()) == 40
    assert set(counts) == set(ParticleState)


def test_seeded_systems_are_reproducible():
    config = FlowConfig(field_mode='procedural', particle_count=10, seed=13)
    first = ParticleSystem(config, procedural_field(config=config))
    second = ParticleSystem(config, procedural_field(config=config))
    first.populate()
    second.populate()
    for _ in range(20):
        first.step()
        second.step()
    assert [p.points for p in first.particles] == [p.points for p in second.particles]
