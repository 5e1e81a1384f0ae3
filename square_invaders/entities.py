"""
Entity Definitions
===================
Immutable dataclasses for everything that lives in the world.

Every entity wraps a Body (shared square geometry) and adds its own
payload. Systems never mutate an entity; they build a new one with
dataclasses.replace().
"""

from dataclasses import dataclass, replace
from typing import Union

from .config import (
    PLAYER_SIZE, INVADER_SIZE, BULLET_SIZE, INVADER_SPEED
)


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Body:
    """Axis-aligned square: upper-left corner plus side length."""
    x: float
    y: float
    size: float

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f'Body size must be positive, got {self.size}')

    def moved(self, dx: float, dy: float) -> 'Body':
        """Return a copy shifted by (dx, dy)."""
        return replace(self, x=self.x + dx, y=self.y + dy)


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass(frozen=True)
class Player:
    """The player square. Death is a flag, the player is never removed."""
    body: Body
    dead: bool = False


@dataclass(frozen=True)
class Invader:
    """Patrolling enemy square."""
    body: Body
    patrol_offset: float = 0.0  # Distance swept from spawn along x
    speed_x: float = INVADER_SPEED


@dataclass(frozen=True)
class Bullet:
    """Projectile with constant velocity. velocity_y > 0 means it fell from an invader."""
    body: Body
    velocity_x: float = 0.0
    velocity_y: float = 0.0

    @property
    def from_invader(self) -> bool:
        return self.velocity_y > 0


Entity = Union[Player, Invader, Bullet]


# =============================================================================
# FACTORIES
# =============================================================================

def create_player(x: float, y: float) -> Player:
    """Create a living player at (x, y)."""
    return Player(Body(x, y, PLAYER_SIZE))


def create_invader(x: float, y: float) -> Invader:
    """Create an invader at the start of its patrol."""
    return Invader(Body(x, y, INVADER_SIZE), patrol_offset=0.0, speed_x=INVADER_SPEED)


def create_bullet(x: float, y: float, vx: float, vy: float) -> Bullet:
    """Create a bullet travelling at (vx, vy) per tick."""
    return Bullet(Body(x, y, BULLET_SIZE), velocity_x=vx, velocity_y=vy)
