"""
Tests for color parsing and gradient rendering.
"""

import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from flowtrail.core.config import DEFAULT_PALETTE
from flowtrail.core.palette import Gradient, parse_color, pick_color, solid_fill


def test_parse_color_forms():
    assert parse_color("blue") == (0, 0, 255, 255)
    assert parse_color("#4C026B") == (76, 2, 107, 255)
    assert parse_color((1, 2, 3)) == (1, 2, 3, 255)
    assert parse_color((1, 2, 3, 4)) == (1, 2, 3, 4)


def test_pick_color_is_from_palette():
    rng = np.random.default_rng(0)
    allowed = {parse_color(c) for c in DEFAULT_PALETTE}
    picks = {pick_color(rng, DEFAULT_PALETTE) for _ in range(200)}
    assert picks <= allowed
    assert len(picks) > 1


def test_radial_gradient_center_uses_first_stop():
    image = Gradient.radial(200, 100).render(200, 100)
    assert image.shape == (100, 200, 3)
    assert tuple(image[50, 100]) == (0, 0, 255)


def test_radial_gradient_far_corner_is_past_last_stop():
    gradient = Gradient.radial(200, 100)
    assert gradient.r0 == 10.0
    assert gradient.r1 == 200.0
    # Distance ~112 from center, t ~0.54, between the 0.4 and 0.6 stops
    corner = gradient.render(200, 100)[0, 0]
    assert corner[2] > 0


def test_linear_gradient_ends_clamp():
    image = Gradient.linear(100, 100).render(100, 100)
    assert tuple(image[0, 0]) == (255, 0, 0)
    assert tuple(image[99, 99]) == (0, 255, 255)


def test_gradient_interpolates_between_stops():
    gradient = Gradient('linear', [(0.0, (0, 0, 0)), (1.0, (200, 100, 0))],
                        start=(0.0, 0.0), end=(10.0, 0.0))
    row = gradient.render(11, 1)[0]
    assert tuple(row[5]) == (100, 50, 0)


def test_solid_fill():
    image = solid_fill("orange", 4, 3)
    assert image.shape == (3, 4, 3)
    assert np.all(image == (255, 165, 0))
