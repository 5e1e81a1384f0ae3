"""
Controls
=========
Keyboard handling and the per-tick input snapshot.

Key events only ever write into the InputHandler. The update pipeline
reads an immutable InputSnapshot taken at the start of each tick.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional

from .config import KEY_HOLD_TICKS


class Command(Enum):
    """Logical commands the simulation understands."""
    MOVE_LEFT = 'move-left'
    MOVE_RIGHT = 'move-right'
    FIRE = 'fire'
    RESTART = 'restart'


# Plain character keys
KEY_BINDINGS = {
    'a': Command.MOVE_LEFT,
    'd': Command.MOVE_RIGHT,
    ' ': Command.FIRE,
    'r': Command.RESTART,
}

# blessed sequence names
SEQUENCE_BINDINGS = {
    'KEY_LEFT': Command.MOVE_LEFT,
    'KEY_RIGHT': Command.MOVE_RIGHT,
    'KEY_UP': Command.FIRE,
}


@dataclass(frozen=True)
class InputSnapshot:
    """Commands held at the instant the snapshot was taken."""
    held: FrozenSet[Command] = field(default_factory=frozenset)

    def is_held(self, command: Command) -> bool:
        return command in self.held

    @classmethod
    def of(cls, *commands: Command) -> 'InputSnapshot':
        return cls(frozenset(commands))


class InputHandler:
    """
    Tracks held commands with frame-based timers.

    Terminals report key presses (and auto-repeat) but never key
    releases, so each press keeps a command held for hold_duration
    ticks. A command is released when its timer runs out.
    """

    def __init__(self, hold_duration: int = KEY_HOLD_TICKS,
                 on_fire_released: Optional[Callable[[], None]] = None):
        self.keys_held: Dict[Command, int] = {}  # command -> ticks remaining
        self.hold_duration = hold_duration
        self.on_fire_released = on_fire_released

        # One-shot triggers (consumed on read)
        self._quit_triggered = False
        self._toggle_fps = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''

        if key_str == 'q' or key.name == 'KEY_ESCAPE':
            self._quit_triggered = True
            return

        if key_str == 'f':
            self._toggle_fps = True
            return

        command = None
        if key.is_sequence:
            command = SEQUENCE_BINDINGS.get(key.name)
        elif key_str:
            command = KEY_BINDINGS.get(key_str)

        if command is not None:
            self.press(command)

    def press(self, command: Command) -> None:
        """Mark a command held, refreshing its timer."""
        self.keys_held[command] = self.hold_duration

    def update(self) -> None:
        """Update hold timers (call once per tick, after the snapshot)."""
        expired = []
        for command, ticks in self.keys_held.items():
            self.keys_held[command] = ticks - 1
            if self.keys_held[command] <= 0:
                expired.append(command)
        for command in expired:
            del self.keys_held[command]
            if command is Command.FIRE and self.on_fire_released is not None:
                self.on_fire_released()

    def snapshot(self) -> InputSnapshot:
        """Freeze the currently held commands."""
        return InputSnapshot(frozenset(self.keys_held))

    def consume_quit(self) -> bool:
        """Check and consume quit trigger."""
        triggered = self._quit_triggered
        self._quit_triggered = False
        return triggered

    def consume_toggle_fps(self) -> bool:
        """Check and consume FPS toggle trigger."""
        triggered = self._toggle_fps
        self._toggle_fps = False
        return triggered
