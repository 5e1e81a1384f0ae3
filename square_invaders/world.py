"""
World State
============
The complete simulation state: one player, the invaders, the bullets.

A World is a value. Systems take one and return a new one; the game
loop swaps the stored World once per tick.
"""

from dataclasses import dataclass, field, replace
from typing import Tuple

from loguru import logger

from .config import (
    WIDTH, HEIGHT, PLAYER_SIZE,
    INVADER_COUNT, INVADER_COLUMNS, INVADER_ROWS,
    INVADER_ORIGIN, INVADER_SPACING
)
from .entities import Player, Invader, Bullet, create_player, create_invader


@dataclass(frozen=True)
class World:
    """Owns every entity. Entities never point back at the World."""
    player: Player
    invaders: Tuple[Invader, ...] = field(default_factory=tuple)
    bullets: Tuple[Bullet, ...] = field(default_factory=tuple)

    def with_player(self, player: Player) -> 'World':
        return replace(self, player=player)

    def with_invaders(self, invaders) -> 'World':
        return replace(self, invaders=tuple(invaders))

    def with_bullets(self, bullets) -> 'World':
        return replace(self, bullets=tuple(bullets))

    def entity_count(self) -> int:
        """Return the number of entities, player included."""
        return 1 + len(self.invaders) + len(self.bullets)


def create_invaders() -> Tuple[Invader, ...]:
    """
    Lay out the starting invaders.

    Columns cycle mod 8 and rows cycle mod 3 over the same index, so
    the rows interleave instead of forming a clean 8x3 grid.
    """
    return tuple(
        create_invader(
            INVADER_ORIGIN + INVADER_SPACING * (i % INVADER_COLUMNS),
            INVADER_ORIGIN + INVADER_SPACING * (i % INVADER_ROWS),
        )
        for i in range(INVADER_COUNT)
    )


def create_world() -> World:
    """Create a fresh world: player near the bottom, invaders up top."""
    player = create_player(WIDTH / 2, HEIGHT - 2 * PLAYER_SIZE)
    world = World(player=player, invaders=create_invaders(), bullets=())
    logger.debug('Created world with {} invaders', len(world.invaders))
    return world
