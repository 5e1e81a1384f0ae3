"""Tests for drawing the world onto render sinks."""

from dataclasses import replace
from types import SimpleNamespace

import pytest

from square_invaders.engine import (
    BrailleCanvas, GameRenderer,
    PLAYER_ALIVE_COLOR, PLAYER_DEAD_COLOR, BODY_COLOR
)
from square_invaders.entities import create_bullet
from square_invaders.systems import entity_color, render
from square_invaders.world import create_world


class RecordingSink:
    """Render sink that remembers every square it was asked to paint."""

    def __init__(self):
        self.squares = []

    def fill_square(self, x, y, size, color):
        self.squares.append((x, y, size, color))


def _fake_term(width: int = 80, height: int = 40):
    return SimpleNamespace(width=width, height=height, normal='')


# ---------------------------------------------------------------------------
# render()
# ---------------------------------------------------------------------------

def test_render_draws_player_then_invaders_then_bullets():
    world = create_world()
    world = world.with_bullets([create_bullet(5, 6, 0, -7)])
    sink = RecordingSink()

    render(world, sink)

    assert len(sink.squares) == 1 + 24 + 1
    assert sink.squares[0] == (200, 370, 15, PLAYER_ALIVE_COLOR)
    assert sink.squares[1] == (30, 30, 15, BODY_COLOR)
    assert sink.squares[-1] == (5, 6, 3, BODY_COLOR)


def test_dead_player_uses_its_own_color():
    world = create_world()
    world = world.with_player(replace(world.player, dead=True))
    sink = RecordingSink()

    render(world, sink)

    assert sink.squares[0][3] == PLAYER_DEAD_COLOR
    assert len({PLAYER_ALIVE_COLOR, PLAYER_DEAD_COLOR, BODY_COLOR}) == 3


def test_entity_color_rejects_non_entities():
    with pytest.raises(TypeError):
        entity_color(object())


# ---------------------------------------------------------------------------
# BrailleCanvas
# ---------------------------------------------------------------------------

def test_braille_pixels_combine_into_one_cell():
    canvas = BrailleCanvas(4, 2)
    canvas.set_pixel(0, 0, 10)
    canvas.set_pixel(1, 3, 20)

    char, color = canvas.get_char(0, 0)
    assert char == chr(0x2800 + 0x01 + 0x80)
    assert color == 20


def test_braille_ignores_out_of_range_pixels():
    canvas = BrailleCanvas(2, 2)
    canvas.set_pixel(-1, 0)
    canvas.set_pixel(4, 0)
    canvas.set_pixel(0, 8)
    assert all(canvas.get_char(cx, cy)[0] == '' for cx in range(2) for cy in range(2))


# ---------------------------------------------------------------------------
# GameRenderer as a sink
# ---------------------------------------------------------------------------

def _lit_pixels(renderer: GameRenderer):
    lit = []
    canvas = renderer.braille
    for py in range(canvas.pixel_height):
        for px in range(canvas.pixel_width):
            cell = canvas.canvas[py // 4][px // 2]
            bit = [b for dx, dy, b in canvas.DOTS if dx == px % 2 and dy == py % 4][0]
            if cell & bit:
                lit.append((px, py))
    return lit


def test_world_fits_inside_border():
    renderer = GameRenderer(_fake_term(80, 40))
    left, top = renderer.to_pixels(0, 0)
    right, bottom = renderer.to_pixels(400, 400)

    assert left >= 2 and top >= 4
    assert right <= (renderer.width - 1) * 2
    assert bottom <= (renderer.game_height - 1) * 4


def test_tiny_bullet_still_covers_a_dot():
    renderer = GameRenderer(_fake_term(80, 40))
    renderer.fill_square(200, 200, 3, BODY_COLOR)
    assert len(_lit_pixels(renderer)) >= 1


def test_square_scales_with_size():
    renderer = GameRenderer(_fake_term(80, 40))
    renderer.fill_square(100, 100, 15, BODY_COLOR)
    small = len(_lit_pixels(renderer))

    renderer.begin_frame()
    renderer.fill_square(100, 100, 60, BODY_COLOR)
    large = len(_lit_pixels(renderer))

    assert large > small > 0


def test_offscreen_squares_stay_off_the_border():
    renderer = GameRenderer(_fake_term(80, 40))
    renderer.fill_square(-39, -39, 15, BODY_COLOR)
    for px, py in _lit_pixels(renderer):
        assert px >= 2 and py >= 4
