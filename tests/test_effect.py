"""
Tests for the FlowEffect orchestrator.
"""

import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from flowtrail import FlowConfig, FlowEffect, build_field, render_animation
from flowtrail.procedural import CurveFieldStrategy, PixelFieldStrategy


def procedural_effect(**kwargs):
    settings = dict(field_mode='procedural', particle_count=20, seed=1)
    settings.update(kwargs)
    return FlowEffect(FlowConfig(**settings))


def test_strategy_follows_field_mode():
    assert isinstance(procedural_effect().strategy, CurveFieldStrategy)
    assert isinstance(FlowEffect(FlowConfig()).strategy, PixelFieldStrategy)


def test_configure_snaps_width_to_cell_grid():
    effect = procedural_effect()
    field = effect.configure(105, 50)
    assert (effect.width, effect.height) == (100, 50)
    assert (field.columns, field.rows) == (10, 5)
    assert effect.field is field


def test_configure_again_swaps_field():
    effect = procedural_effect()
    effect.configure(100, 50)
    effect.create_particles()
    effect.configure(200, 100)
    assert effect.system.generation == 2
    assert effect.system.field is effect.field
    assert len(effect.field) == 200
    assert len(effect.system) == 20


def test_step_moves_particles():
    effect = procedural_effect()
    effect.configure(100, 100)
    effect.create_particles()
    before = [p.points for p in effect.system.particles]
    effect.step()
    after = [p.points for p in effect.system.particles]
    assert before != after


def test_render_draws_trails():
    effect = procedural_effect(particle_count=50)
    effect.configure(100, 100)
    effect.create_particles()
    for _ in range(5):
        effect.step()
    effect.render()
    assert effect.snapshot()[:, :, 3].max() > 0


def test_toggle_debug_has_no_simulation_effect():
    plain = procedural_effect()
    debug = procedural_effect()
    for effect in (plain, debug):
        effect.configure(100, 100)
        effect.create_particles()

    assert debug.toggle_debug() is True
    for i in range(5):
        plain.render_frame(i * 16)
        debug.render_frame(i * 16)

    assert [p.points for p in plain.system.particles] == [p.points for p in debug.system.particles]
    assert debug.toggle_debug() is False


def test_debug_frame_draws_grid():
    effect = procedural_effect(particle_count=0)
    effect.configure(100, 100)
    effect.debug = True
    effect.render_frame(0)
    alpha = effect.snapshot()[:, :, 3]
    # Vertical grid line at x=10
    assert alpha[:, 10].min() > 0


def test_update_fps():
    effect = procedural_effect()
    assert effect.update_fps(20.0) == 50
    # Repeated timestamp keeps the last value
    assert effect.update_fps(20.0) == 50
    assert effect.update_fps(40.0) == 50


def test_run_returns_frames():
    effect = procedural_effect()
    effect.configure(60, 40)
    frames = effect.run(3)
    assert len(frames) == 3
    assert all(frame.shape == (40, 60, 4) for frame in frames)
    assert len(effect.system) == 20


def test_zero_size_surface_still_steps():
    effect = procedural_effect()
    field = effect.configure(0, 0)
    assert field.is_empty
    effect.create_particles()
    effect.render_frame(0)
    assert all(len(p.trail) >= 1 for p in effect.system.particles)


def test_pixel_mode_spawns_on_text():
    effect = FlowEffect(FlowConfig(text="FLOW", particle_count=30, seed=2))
    field = effect.configure(400, 200)
    assert field.restricts_spawn
    assert field.mask.any()

    effect.create_particles()
    origins = {(field.xs[i], field.ys[i]) for i in field.masked_indices()}
    on_text = sum((p.x, p.y) in origins for p in effect.system.particles)
    assert on_text == 30


def test_build_field_convenience():
    field = build_field(50, 30, FlowConfig(field_mode='procedural'))
    assert (field.columns, field.rows) == (5, 3)


def test_render_animation_writes_gif(tmp_path):
    output = tmp_path / "flow.gif"
    config = FlowConfig(field_mode='procedural', particle_count=20, seed=3)
    result = render_animation(str(output), config, width=60, height=40, frames=4)
    assert Path(result) == output
    assert output.exists()


def test_render_animation_writes_frames(tmp_path):
    config = FlowConfig(field_mode='noise', particle_count=10, seed=4)
    paths = render_animation(str(tmp_path / "frames"), config, width=40, height=40,
                             frames=3, format='frames', warmup=5)
    assert len(paths) == 3
    assert all(p.exists() for p in paths)
