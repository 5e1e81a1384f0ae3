"""
Rendering Engine
=================
Double-buffered terminal renderer with a braille sub-pixel canvas.

The 400x400 world is scaled into the playable area of the terminal.
Each character cell holds a 2x4 grid of braille dots, so squares are
painted at eight times character resolution.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import math

from blessed import Terminal

from .config import WIDTH, HEIGHT, HUD_ROWS


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255
BLACK = 0

PLAYER_ALIVE_COLOR = NEON_CYAN
PLAYER_DEAD_COLOR = NEON_RED
BODY_COLOR = NEON_MAGENTA


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = transparent/default

    def matches(self, other: 'Cell') -> bool:
        """Check if two cells are visually identical."""
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )

    def reset(self):
        """Reset to empty state."""
        self.char = ' '
        self.fg_color = 7
        self.bg_color = -1


class DoubleBuffer:
    """
    Double-buffered terminal renderer.

    Writes to a back buffer, then swaps to front buffer,
    only updating cells that changed. No screen clears needed.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal  # Cache reset sequence

    def _init_buffers(self):
        """Initialize both buffers with empty cells."""
        self.front = [
            [Cell() for _ in range(self.width)]
            for _ in range(self.height)
        ]
        self.back = [
            [Cell() for _ in range(self.width)]
            for _ in range(self.height)
        ]

    def resize(self, width: int, height: int):
        """Handle terminal resize."""
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        """Clear the back buffer by resetting cells in-place."""
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = -1):
        """Put a character in the back buffer at exact position."""
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = -1):
        """Put a string in the back buffer."""
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def present(self) -> str:
        """Swap buffers and generate output for changed cells only."""
        output_parts = []
        normal = self._normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                front_cell = self.front[y][x]

                if not back_cell.matches(front_cell):
                    output_parts.append(self.term.move_xy(x, y))
                    # Reset colors to prevent bleed
                    output_parts.append(normal)
                    if back_cell.bg_color >= 0:
                        output_parts.append(self.term.on_color(back_cell.bg_color))
                    output_parts.append(self.term.color(back_cell.fg_color))
                    output_parts.append(back_cell.char if back_cell.char else ' ')

        # Swap: back becomes the new front, old front becomes next back
        self.front, self.back = self.back, self.front

        return ''.join(output_parts)


class BrailleCanvas:
    """
    Sub-pixel rendering using Unicode Braille patterns.

    Each character cell maps to a 2x4 pixel grid.
    """

    # Braille dot bit positions: (column, row, bit_value)
    DOTS = [
        (0, 0, 0x01), (0, 1, 0x02), (0, 2, 0x04), (0, 3, 0x40),
        (1, 0, 0x08), (1, 1, 0x10), (1, 2, 0x20), (1, 3, 0x80),
    ]
    BASE = 0x2800

    def __init__(self, char_width: int, char_height: int):
        self.char_width = char_width
        self.char_height = char_height
        self.pixel_width = char_width * 2
        self.pixel_height = char_height * 4
        self.canvas: List[List[int]] = []
        self.colors: List[List[int]] = []
        self.clear()

    def clear(self):
        """Clear the canvas."""
        self.canvas = [
            [0 for _ in range(self.char_width)]
            for _ in range(self.char_height)
        ]
        self.colors = [
            [WHITE for _ in range(self.char_width)]
            for _ in range(self.char_height)
        ]

    def set_pixel(self, px: int, py: int, color: int = WHITE):
        """Set a sub-pixel dot at pixel coordinates."""
        if 0 <= px < self.pixel_width and 0 <= py < self.pixel_height:
            char_x = px // 2
            char_y = py // 4
            dot_x = px % 2
            dot_y = py % 4

            for dx, dy, bit in self.DOTS:
                if dx == dot_x and dy == dot_y:
                    self.canvas[char_y][char_x] |= bit
                    self.colors[char_y][char_x] = color
                    break

    def get_char(self, cx: int, cy: int) -> Tuple[str, int]:
        """Get the braille character and color at a cell position."""
        if 0 <= cx < self.char_width and 0 <= cy < self.char_height:
            pattern = self.canvas[cy][cx]
            if pattern > 0:
                return chr(self.BASE + pattern), self.colors[cy][cx]
        return '', WHITE

    def blit_to_buffer(self, buffer: DoubleBuffer, offset_x: int = 0, offset_y: int = 0):
        """Render braille canvas onto the buffer. Only overlays empty cells."""
        for cy in range(self.char_height):
            for cx in range(self.char_width):
                char, color = self.get_char(cx, cy)
                if char:
                    bx = cx + offset_x
                    by = cy + offset_y
                    if 0 <= bx < buffer.width and 0 <= by < buffer.height:
                        current = buffer.back[by][bx]
                        if current.char == ' ':
                            buffer.put(bx, by, char, color)


@dataclass
class GameRenderer:
    """
    High-level game renderer and the render sink for the world.

    The playfield is framed by a one-cell border; world coordinates are
    scaled uniformly into the area inside it and centered.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)
    braille: BrailleCanvas = field(init=False)

    # FPS display
    show_fps: bool = False
    current_fps: float = 50.0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)
        self.braille = BrailleCanvas(self.term.width, self.game_height)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Height of the playable area (excluding UI rows)."""
        return self.buffer.height - HUD_ROWS

    @property
    def scale(self) -> float:
        """Braille dots per world unit."""
        inner_w = max(1, (self.width - 2) * 2)
        inner_h = max(1, (self.game_height - 2) * 4)
        return min(inner_w / WIDTH, inner_h / HEIGHT)

    def to_pixels(self, x: float, y: float) -> Tuple[float, float]:
        """Map world coordinates to braille dot coordinates."""
        scale = self.scale
        inner_w = (self.width - 2) * 2
        inner_h = (self.game_height - 2) * 4
        origin_x = 2 + (inner_w - WIDTH * scale) / 2
        origin_y = 4 + (inner_h - HEIGHT * scale) / 2
        return origin_x + x * scale, origin_y + y * scale

    def fill_square(self, x: float, y: float, size: float, color: int):
        """Paint a filled square. Always covers at least one dot."""
        left, top = self.to_pixels(x, y)
        right, bottom = self.to_pixels(x + size, y + size)

        px0, py0 = math.floor(left), math.floor(top)
        px1 = max(px0, math.ceil(right) - 1)
        py1 = max(py0, math.ceil(bottom) - 1)

        # Keep dots off the border
        min_x, max_x = 2, (self.width - 1) * 2 - 1
        min_y, max_y = 4, (self.game_height - 1) * 4 - 1

        for py in range(max(py0, min_y), min(py1, max_y) + 1):
            for px in range(max(px0, min_x), min(px1, max_x) + 1):
                self.braille.set_pixel(px, py, color)

    def begin_frame(self):
        """Begin rendering a new frame."""
        self.buffer.clear_back()
        self.braille.clear()

    def end_frame(self) -> str:
        """Finalize frame: blit braille overlay and present."""
        self.braille.blit_to_buffer(self.buffer)
        return self.buffer.present()

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        self.buffer.put_string(x, y, text, fg_color)

    def resize(self, width: int, height: int):
        """Handle terminal resize."""
        self.buffer.resize(width, height)
        self.braille = BrailleCanvas(width, self.game_height)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#'):
        """Draw a rectangular border."""
        for i in range(w):
            self.buffer.put(x + i, y, char, color)
            self.buffer.put(x + i, y + h - 1, char, color)
        for j in range(1, h - 1):
            self.buffer.put(x, y + j, char, color)
            self.buffer.put(x + w - 1, y + j, char, color)
