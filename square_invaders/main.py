#!/usr/bin/env python3
"""
SQUARE_INVADERS - Terminal Arcade
==================================
Dodge the falling shots, clear the invaders.

Controls:
    A / LEFT    - Move left
    D / RIGHT   - Move right
    SPACE / UP  - Fire (hold for continuous fire)
    R           - Restart
    F           - Toggle FPS display
    Q/ESC       - Quit
"""

import argparse
import random
import sys
import time

from blessed import Terminal
from loguru import logger

from .config import TICK_INTERVAL, MAX_TICKS_PER_FRAME, KEY_HOLD_TICKS, MIN_WIDTH, MIN_HEIGHT
from .controls import Command, InputHandler
from .engine import (
    GameRenderer, GRAY_DARK, GRAY_MED, GRAY_DARKER,
    NEON_MAGENTA, NEON_YELLOW, NEON_RED, NEON_CYAN
)
from .systems import tick, render
from .world import World, create_world


# =============================================================================
# UI RENDERING
# =============================================================================

def render_ui(world: World, renderer: GameRenderer, tick_count: int):
    """Render the HUD in the bottom rows."""
    ui_y = renderer.game_height
    width = renderer.width

    # Separator line with title
    renderer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.put_string(2, ui_y, ' SQUARE_INVADERS ', NEON_MAGENTA)

    status_text = f' INVADERS:{len(world.invaders)}  BULLETS:{len(world.bullets)} '
    renderer.put_string(max(0, width - len(status_text) - 1), ui_y, status_text, NEON_YELLOW)

    # Row 1: player status + tick counter
    if world.player.dead:
        renderer.put_string(2, ui_y + 1, 'DESTROYED - hold R to restart', NEON_RED)
    else:
        renderer.put_string(2, ui_y + 1, 'ALIVE', NEON_CYAN)
    tick_text = f'TICK:{tick_count}'
    renderer.put_string(max(0, width - len(tick_text) - 2), ui_y + 1, tick_text, GRAY_MED)

    # Row 2: controls
    controls = 'A/D:Move  SPACE:Fire  R:Restart  Q:Quit'
    renderer.put_string(2, ui_y + 2, controls, GRAY_DARKER)

    # FPS counter (top-right)
    if renderer.show_fps:
        fps_text = f'FPS:{renderer.current_fps:.0f}'
        renderer.put_string(width - len(fps_text) - 2, 0, fps_text, GRAY_MED)


def render_border(renderer: GameRenderer):
    """Frame the playfield."""
    renderer.draw_box(0, 0, renderer.width, renderer.game_height, GRAY_DARK, '#')


# =============================================================================
# GAME STATE
# =============================================================================

class Game:
    """Holds the current World and the collaborators around it."""

    def __init__(self, term: Terminal, rng: random.Random,
                 hold_duration: int = KEY_HOLD_TICKS, bell: bool = True):
        self.term = term
        self.rng = rng
        self.renderer = GameRenderer(term)
        self.input_handler = InputHandler(
            hold_duration=hold_duration,
            on_fire_released=self._ring_bell if bell else None,
        )

        self.running = True
        self.tick_count = 0
        self.world = create_world()

    def _ring_bell(self):
        print('\a', end='', flush=True)

    def update(self):
        """Advance the world by one tick."""
        controls = self.input_handler.snapshot()

        self.world = tick(self.world, controls, self.rng)
        self.input_handler.update()

        if controls.is_held(Command.RESTART):
            self.tick_count = 0
        else:
            self.tick_count += 1

    def render(self):
        """Draw the current world and HUD."""
        if (self.term.width, self.term.height) != (self.renderer.width, self.renderer.height):
            self.renderer.resize(self.term.width, self.term.height)
            print(self.term.home + self.term.clear, end='', flush=True)

        self.renderer.begin_frame()
        render_border(self.renderer)
        render(self.world, self.renderer)
        render_ui(self.world, self.renderer, self.tick_count)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.input_handler.consume_quit():
            self.running = False

        if self.input_handler.consume_toggle_fps():
            self.renderer.show_fps = not self.renderer.show_fps


# =============================================================================
# MAIN LOOP
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='square-invaders',
        description='Terminal arcade: dodge and shoot patrolling invader squares.'
    )
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for invader fire randomness')
    parser.add_argument('--tick-ms', type=float, default=TICK_INTERVAL * 1000,
                        help='Simulation tick interval in milliseconds (default: %(default)s)')
    parser.add_argument('--hold-ticks', type=int, default=KEY_HOLD_TICKS,
                        help='Ticks a key stays held after its last press (default: %(default)s)')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Write logs to this file')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Log level for --log-file (default: %(default)s)')
    parser.add_argument('--no-bell', action='store_true',
                        help='Do not ring the terminal bell when fire is released')
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.tick_ms <= 0:
        parser.error('--tick-ms must be positive')
    if args.hold_ticks <= 0:
        parser.error('--hold-ticks must be positive')
    return args


def configure_logging(log_file=None, level: str = 'INFO'):
    """Route logs to a file; the terminal belongs to the game while it runs."""
    logger.remove()
    if log_file:
        logger.add(log_file, level=level)


def main(argv=None):
    """Entry point. Sets up terminal and runs the fixed-timestep game loop."""
    args = parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    frame_time = args.tick_ms / 1000.0
    rng = random.Random(args.seed)
    logger.info('Starting on {}x{} terminal, tick {}ms, seed {}',
                term.width, term.height, args.tick_ms, args.seed)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = Game(term, rng, hold_duration=args.hold_ticks, bell=not args.no_bell)

        last_time = time.perf_counter()
        accumulator = 0.0
        fps_timer = 0.0
        fps_frame_count = 0

        # Initial clear (only time we clear the whole screen)
        print(term.home + term.clear, end='', flush=True)

        try:
            while game.running:
                now = time.perf_counter()
                delta = now - last_time
                last_time = now

                # Clamp delta to prevent spiral of death
                delta = min(delta, frame_time * 5)

                accumulator += delta
                fps_timer += delta

                game.handle_input()

                # Fixed-timestep updates
                ticks = 0
                while accumulator >= frame_time and ticks < MAX_TICKS_PER_FRAME:
                    game.update()
                    accumulator -= frame_time
                    ticks += 1
                    fps_frame_count += 1

                game.render()

                if fps_timer >= 0.5:
                    game.renderer.current_fps = fps_frame_count / fps_timer
                    fps_frame_count = 0
                    fps_timer = 0.0

                # Sleep for remaining frame time
                elapsed = time.perf_counter() - now
                sleep_time = frame_time - elapsed
                if sleep_time > 0.001:
                    time.sleep(sleep_time * 0.9)
        except KeyboardInterrupt:
            logger.info('Interrupted')

        # Restore terminal
        print(term.normal, end='', flush=True)

    logger.info('Stopped after {} ticks', game.tick_count)


if __name__ == '__main__':
    main()
