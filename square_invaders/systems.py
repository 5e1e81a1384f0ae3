"""
Simulation Systems
===================
Functions that turn one World into the next.

Each system takes a World (plus whatever input or randomness it needs)
and returns a new World. tick() runs them in a fixed order; render()
hands the result to a sink.
"""

from dataclasses import replace
from typing import List

from loguru import logger

from .config import (
    PLAYER_STEP, PATROL_MIN, PATROL_MAX,
    PLAYER_BULLET_VELOCITY, INVADER_BULLET_VELOCITY_Y,
    INVADER_BULLET_SPREAD, INVADER_FIRE_THRESHOLD
)
from .controls import Command, InputSnapshot
from .engine import PLAYER_ALIVE_COLOR, PLAYER_DEAD_COLOR, BODY_COLOR
from .entities import Player, Invader, Bullet, Entity, create_bullet
from .geometry import intersects, is_on_screen
from .world import World, create_world


# =============================================================================
# MOVEMENT SYSTEMS
# =============================================================================

def update_bullets_system(world: World) -> World:
    """Move every bullet by its velocity. Off-screen bullets are culled later."""
    return world.with_bullets(
        replace(b, body=b.body.moved(b.velocity_x, b.velocity_y))
        for b in world.bullets
    )


def _patrol(invader: Invader) -> Invader:
    # Reverse once the offset has left the patrol range
    if PATROL_MIN <= invader.patrol_offset <= PATROL_MAX:
        speed_factor = 1
    else:
        speed_factor = -1
    speed_x = speed_factor * invader.speed_x

    return replace(
        invader,
        body=invader.body.moved(speed_x, 0.0),
        patrol_offset=invader.patrol_offset + speed_x,
        speed_x=speed_x,
    )


def update_invaders_system(world: World) -> World:
    """Advance every invader one step along its patrol."""
    return world.with_invaders(_patrol(inv) for inv in world.invaders)


def update_player_system(world: World, controls: InputSnapshot) -> World:
    """
    Check the player for bullet hits, then apply movement input.

    Runs against this tick's bullets before any removal. A dead player
    stays where it died and ignores input.
    """
    player = world.player
    dead = player.dead or any(intersects(player, b) for b in world.bullets)

    if dead:
        if not player.dead:
            logger.info('Player destroyed at ({:.1f}, {:.1f})',
                        player.body.x, player.body.y)
            return world.with_player(replace(player, dead=True))
        return world

    dx = 0.0
    if controls.is_held(Command.MOVE_LEFT):
        dx -= PLAYER_STEP
    if controls.is_held(Command.MOVE_RIGHT):
        dx += PLAYER_STEP

    if dx == 0.0:
        return world
    return world.with_player(replace(player, body=player.body.moved(dx, 0.0)))


# =============================================================================
# SPAWN SYSTEMS
# =============================================================================

def _invader_below(invader: Invader, invaders) -> bool:
    """True if another invader sits in this invader's column, lower down."""
    x = invader.body.x
    for other in invaders:
        if other is invader:
            continue
        box = other.body
        if box.x <= x <= box.x + box.size and box.y > invader.body.y:
            return True
    return False


def spawn_invader_bullets_system(world: World, rng) -> World:
    """
    Let invaders at the bottom of their column fire.

    Every invader consumes one rng.random() draw per tick, eligible or
    not; a spawned bullet takes one more for its sideways drift. A
    scripted random source therefore lines up with invader order.
    """
    spawned: List[Bullet] = []
    for invader in world.invaders:
        fires = rng.random() > INVADER_FIRE_THRESHOLD
        if not fires or _invader_below(invader, world.invaders):
            continue

        box = invader.body
        spawned.append(create_bullet(
            box.x,
            box.y + box.size + 1,
            # Uniform over [-spread, spread)
            (rng.random() * 2 - 1) * INVADER_BULLET_SPREAD,
            INVADER_BULLET_VELOCITY_Y,
        ))

    if not spawned:
        return world

    logger.debug('{} invader bullet(s) spawned', len(spawned))
    return world.with_bullets(world.bullets + tuple(spawned))


def spawn_player_bullet_system(world: World, controls: InputSnapshot) -> World:
    """
    Fire from the player's top edge while fire is held.

    There is no cooldown: one bullet per tick for as long as the key
    stays held.
    """
    player = world.player
    if player.dead or not controls.is_held(Command.FIRE):
        return world

    box = player.body
    vx, vy = PLAYER_BULLET_VELOCITY
    bullet = create_bullet(box.x + box.size / 2, box.y, vx, vy)
    return world.with_bullets(world.bullets + (bullet,))


# =============================================================================
# COLLISION SYSTEMS
# =============================================================================

def remove_colliding_bodies_system(world: World) -> World:
    """
    Drop invaders hit by bullets, and bullets that hit an invader or
    left the screen. Bullets never collide with each other and the
    player is never removed here.
    """
    invaders = tuple(
        inv for inv in world.invaders
        if not any(intersects(inv, b) for b in world.bullets)
    )
    bullets = tuple(
        b for b in world.bullets
        if is_on_screen(b) and not any(intersects(b, inv) for inv in world.invaders)
    )

    if len(invaders) == len(world.invaders) and len(bullets) == len(world.bullets):
        return world
    return replace(world, invaders=invaders, bullets=bullets)


def restart_system(world: World, controls: InputSnapshot) -> World:
    """Replace the whole world when restart is held."""
    if controls.is_held(Command.RESTART):
        logger.info('Restart requested')
        return create_world()
    return world


# =============================================================================
# PIPELINE
# =============================================================================

def tick(world: World, controls: InputSnapshot, rng) -> World:
    """Advance the simulation by one tick."""
    world = update_bullets_system(world)
    world = update_invaders_system(world)
    world = update_player_system(world, controls)
    world = spawn_invader_bullets_system(world, rng)
    world = spawn_player_bullet_system(world, controls)
    world = remove_colliding_bodies_system(world)
    world = restart_system(world, controls)
    return world


# =============================================================================
# RENDERING
# =============================================================================

def entity_color(entity: Entity) -> int:
    """Pick the draw color for an entity."""
    if isinstance(entity, Player):
        return PLAYER_DEAD_COLOR if entity.dead else PLAYER_ALIVE_COLOR
    if isinstance(entity, (Invader, Bullet)):
        return BODY_COLOR
    raise TypeError(f'Not an entity: {entity!r}')


def render(world: World, sink) -> None:
    """
    Draw the world onto a sink: player first, then invaders, then
    bullets. The sink needs fill_square(x, y, size, color).
    """
    draw_order = [world.player, *world.invaders, *world.bullets]
    for entity in draw_order:
        box = entity.body
        sink.fill_square(box.x, box.y, box.size, entity_color(entity))
