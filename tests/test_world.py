"""Tests for world creation and the World value."""

import dataclasses

import pytest

from square_invaders.config import WIDTH, HEIGHT, PLAYER_SIZE
from square_invaders.entities import create_bullet
from square_invaders.world import World, create_world, create_invaders


def test_player_starts_bottom_center_and_alive():
    world = create_world()
    assert world.player.body.x == WIDTH / 2
    assert world.player.body.y == HEIGHT - 2 * PLAYER_SIZE
    assert world.player.body.size == PLAYER_SIZE
    assert not world.player.dead


def test_world_starts_with_24_invaders_and_no_bullets():
    world = create_world()
    assert len(world.invaders) == 24
    assert world.bullets == ()
    assert world.entity_count() == 25


def test_invader_layout_interleaves_rows():
    invaders = create_invaders()
    positions = [(inv.body.x, inv.body.y) for inv in invaders]

    assert positions[0] == (30, 30)
    assert positions[1] == (60, 60)
    assert positions[2] == (90, 90)
    assert positions[3] == (120, 30)
    assert positions[8] == (30, 90)
    assert positions[23] == (240, 90)

    for i, (x, y) in enumerate(positions):
        assert x == 30 + 30 * (i % 8)
        assert y == 30 + 30 * (i % 3)


def test_invaders_start_at_patrol_origin():
    for inv in create_invaders():
        assert inv.patrol_offset == 0
        assert inv.speed_x == pytest.approx(0.3)


def test_create_world_is_deterministic():
    assert create_world() == create_world()


def test_world_is_immutable():
    world = create_world()
    with pytest.raises(dataclasses.FrozenInstanceError):
        world.player = None


def test_with_bullets_returns_new_world():
    world = create_world()
    bullet = create_bullet(1, 2, 0, 0)
    updated = world.with_bullets([bullet])

    assert isinstance(updated.bullets, tuple)
    assert updated.bullets == (bullet,)
    assert world.bullets == ()
    assert updated.player is world.player
