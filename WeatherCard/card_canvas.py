"""Canvas abstraction for the weather card - allows swapping terminal output with image backends."""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont


class CardCanvas(ABC):
    """Abstract canvas laid out as a grid of character cells."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Get canvas width in character cells."""
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        """Get canvas height in character cells."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear the entire canvas."""
        pass

    @abstractmethod
    def draw_text(self, x: int, y: int, text: str, r: int, g: int, b: int) -> None:
        """
        Draw a single line of text starting at a cell.

        Args:
            x: Column (0-based)
            y: Row (0-based)
            text: Text to draw; anything past the right edge is dropped
            r: Red component (0-255)
            g: Green component (0-255)
            b: Blue component (0-255)
        """
        pass


class TextCanvas(CardCanvas):
    """
    Character-grid canvas used for terminal output and tests.

    Colours are kept per cell so tests can check them; `to_text()` drops them.
    """

    def __init__(self, width: int = 64, height: int = 12):
        self._width = width
        self._height = height
        self._cells = self._blank()

    def _blank(self) -> List[List[Tuple[str, Tuple[int, int, int]]]]:
        return [[(" ", (0, 0, 0)) for _ in range(self._width)] for _ in range(self._height)]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self._cells = self._blank()

    def draw_text(self, x: int, y: int, text: str, r: int, g: int, b: int) -> None:
        if not 0 <= y < self._height:
            return
        for i, char in enumerate(text):
            col = x + i
            if 0 <= col < self._width:
                self._cells[y][col] = (char, (r, g, b))

    def get_line(self, y: int) -> str:
        """Text of one row without trailing blanks."""
        return "".join(char for char, _ in self._cells[y]).rstrip()

    def get_color(self, x: int, y: int) -> Tuple[int, int, int]:
        if 0 <= x < self._width and 0 <= y < self._height:
            return self._cells[y][x][1]
        return (0, 0, 0)

    def to_text(self) -> str:
        """Multi-line string representation, trailing blank rows removed."""
        lines = [self.get_line(y) for y in range(self._height)]
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)


class PILCanvas(CardCanvas):
    """
    PIL-based canvas for rendering the card to PNG images.

    Cells are `cell_width` x `cell_height` pixels, matching a 7x13 bitmap font.
    """

    def __init__(
        self,
        width: int = 64,
        height: int = 12,
        cell_width: int = 7,
        cell_height: int = 13,
        scale: int = 2,
        background: Tuple[int, int, int] = (0, 0, 0),
        font_path: Optional[str] = None
    ):
        """
        Initialize PIL canvas.

        Args:
            width: Canvas width in cells
            height: Canvas height in cells
            cell_width: Pixels per cell horizontally
            cell_height: Pixels per cell vertically
            scale: Scale factor for output image (makes it bigger for viewing)
            background: Background colour
            font_path: TrueType font to use instead of Pillow's default font
        """
        self._width = width
        self._height = height
        self._cell_width = cell_width
        self._cell_height = cell_height
        self._scale = scale
        self._background = background
        self._font = self._load_font(font_path)
        self.clear()

    def _load_font(self, font_path: Optional[str]):
        if font_path:
            try:
                return ImageFont.truetype(font_path, self._cell_height - 2)
            except OSError as exc:
                logging.warning(f"Could not load font {font_path}: {exc}; using default font")
        return ImageFont.load_default()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (self._width * self._cell_width, self._height * self._cell_height)

    def clear(self) -> None:
        self._image = Image.new("RGB", self.pixel_size, self._background)
        self._draw = ImageDraw.Draw(self._image)

    def draw_text(self, x: int, y: int, text: str, r: int, g: int, b: int) -> None:
        text = text[:max(0, self._width - x)]
        if not text or not 0 <= y < self._height:
            return
        position = (x * self._cell_width, y * self._cell_height)
        self._draw.text(position, text, fill=(r, g, b), font=self._font)

    def save(self, filename: str) -> None:
        """
        Save canvas to PNG file (scaled up for visibility).

        Args:
            filename: Output filename (e.g., "card.png")
        """
        if self._scale > 1:
            width, height = self.pixel_size
            scaled = self._image.resize(
                (width * self._scale, height * self._scale),
                Image.NEAREST  # Nearest neighbor keeps the bitmap font crisp
            )
            scaled.save(filename)
        else:
            self._image.save(filename)

    def get_image(self):
        """Get the PIL Image object (for advanced usage)."""
        return self._image
