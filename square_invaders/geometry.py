"""
Collision Geometry
===================
Square-vs-square overlap and screen-bounds checks.
"""

from .config import WIDTH, HEIGHT, SCREEN_MARGIN
from .entities import Body


def _body_of(thing) -> Body:
    """Accept either an entity or a bare Body."""
    if isinstance(thing, Body):
        return thing
    return thing.body


def intersects(a, b) -> bool:
    """
    Check inclusive AABB overlap between two squares.

    An entity never intersects itself, even though its bounds
    trivially touch. Identity decides that, not geometry.
    """
    if a is b:
        return False

    box1 = _body_of(a)
    box2 = _body_of(b)

    return not (
        box1.x + box1.size < box2.x or
        box1.x > box2.x + box2.size or
        box1.y + box1.size < box2.y or
        box1.y > box2.y + box2.size
    )


def is_on_screen(thing) -> bool:
    """True while the corner is inside the screen plus its margin."""
    box = _body_of(thing)
    return (
        -SCREEN_MARGIN < box.x < WIDTH + SCREEN_MARGIN and
        -SCREEN_MARGIN < box.y < HEIGHT + SCREEN_MARGIN
    )
