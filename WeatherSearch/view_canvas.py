"""Canvas abstraction for the search view - allows swapping the terminal with test backends."""
import sys
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TextIO, Tuple

from PIL import Image, ImageDraw, ImageFont


class ViewCanvas(ABC):
    """Abstract canvas interface: rows of colored text."""

    @abstractmethod
    def clear(self) -> None:
        """Remove everything drawn so far."""
        pass

    @abstractmethod
    def draw_text(self, row: int, text: str, r: int, g: int, b: int) -> None:
        """
        Draw one row of text.

        Args:
            row: Row index (0-based, top to bottom)
            text: Text to draw
            r: Red component (0-255)
            g: Green component (0-255)
            b: Blue component (0-255)
        """
        pass

    def flush(self) -> None:
        """Push the finished frame to the output, if the backend buffers."""
        pass


class ConsoleCanvas(ViewCanvas):
    """Canvas that prints frames to a terminal stream."""

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        """
        Initialize console canvas.

        Args:
            stream: Output stream (defaults to stdout)
            color: Emit 24-bit ANSI color codes
        """
        self._stream = stream or sys.stdout
        self._color = color
        self._rows: Dict[int, Tuple[str, Tuple[int, int, int]]] = {}

    def clear(self) -> None:
        self._rows = {}

    def draw_text(self, row: int, text: str, r: int, g: int, b: int) -> None:
        self._rows[row] = (text, (r, g, b))

    def flush(self) -> None:
        lines = []
        for row in sorted(self._rows):
            text, (r, g, b) = self._rows[row]
            if self._color:
                text = f"\033[38;2;{r};{g};{b}m{text}\033[0m"
            lines.append(text)
        if lines:
            self._stream.write("\n".join(lines) + "\n\n")
            self._stream.flush()


class FakeViewCanvas(ViewCanvas):
    """
    Fake canvas implementation for testing - stores rows in memory.

    Every flush records a frame so tests can inspect each transition.
    """

    def __init__(self):
        self._rows: Dict[int, Tuple[str, Tuple[int, int, int]]] = {}
        self.frames: List[List[str]] = []

    def clear(self) -> None:
        self._rows = {}

    def draw_text(self, row: int, text: str, r: int, g: int, b: int) -> None:
        self._rows[row] = (text, (r, g, b))

    def flush(self) -> None:
        self.frames.append(self.lines())

    def lines(self) -> List[str]:
        """Current rows, top to bottom."""
        return [self._rows[row][0] for row in sorted(self._rows)]

    def get_color(self, row: int) -> Tuple[int, int, int]:
        """Color of a row, black if nothing was drawn there."""
        if row in self._rows:
            return self._rows[row][1]
        return (0, 0, 0)

    def to_text(self) -> str:
        return "\n".join(self.lines())


class PILCanvas(ViewCanvas):
    """
    PIL-based canvas for rendering to PNG images.

    Useful for sharing a snapshot of a lookup without a terminal.
    """

    def __init__(self, width: int = 480, row_height: int = 18, max_rows: int = 8, scale: int = 1):
        """
        Initialize PIL canvas.

        Args:
            width: Image width in pixels
            row_height: Height of one text row in pixels
            max_rows: Number of rows the image has room for
            scale: Scale factor for the saved image
        """
        self._width = width
        self._row_height = row_height
        self._height = row_height * max_rows
        self._scale = scale
        self._font = ImageFont.load_default()
        self.clear()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self._image = Image.new("RGB", (self._width, self._height), (0, 0, 0))
        self._draw = ImageDraw.Draw(self._image)

    def draw_text(self, row: int, text: str, r: int, g: int, b: int) -> None:
        # The bitmap default font only covers latin-1; icons become "?"
        safe_text = text.encode("latin-1", "replace").decode("latin-1")
        self._draw.text((4, row * self._row_height + 2), safe_text, fill=(r, g, b), font=self._font)

    def save(self, filename: str) -> None:
        """
        Save canvas to PNG file.

        Args:
            filename: Output filename (e.g., "weather.png")
        """
        if self._scale > 1:
            scaled = self._image.resize(
                (self._width * self._scale, self._height * self._scale),
                Image.NEAREST
            )
            scaled.save(filename)
        else:
            self._image.save(filename)

    def get_image(self):
        """Get the PIL Image object (for advanced usage)."""
        return self._image
