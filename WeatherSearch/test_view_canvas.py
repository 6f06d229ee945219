"""Tests for view canvas backends."""
import io
import pytest
from PIL import Image
from display_state import ErrorState, LoadingState
from layout import LOADING_TEXT, paint, render
from view_canvas import ConsoleCanvas, FakeViewCanvas, PILCanvas


def test_fake_canvas_draw_and_clear():
    """Test drawing rows and clearing them."""
    canvas = FakeViewCanvas()

    canvas.draw_text(1, "second", 1, 2, 3)
    canvas.draw_text(0, "first", 255, 255, 255)

    assert canvas.lines() == ["first", "second"]
    assert canvas.get_color(1) == (1, 2, 3)

    canvas.clear()

    assert canvas.lines() == []
    assert canvas.get_color(1) == (0, 0, 0)


def test_fake_canvas_records_frames():
    """Test that each paint is recorded as a frame."""
    canvas = FakeViewCanvas()

    paint(canvas, render(LoadingState("London")))
    paint(canvas, render(ErrorState("City not found")))

    assert canvas.frames == [[LOADING_TEXT], ["City not found"]]
    assert canvas.to_text() == "City not found"


def test_console_canvas_plain():
    """Test console output without color."""
    stream = io.StringIO()
    canvas = ConsoleCanvas(stream=stream, color=False)

    paint(canvas, render(ErrorState("City not found", "check spelling")))

    assert stream.getvalue() == "City not found\ncheck spelling\n\n"


def test_console_canvas_color():
    """Test console output with ANSI colors."""
    stream = io.StringIO()
    canvas = ConsoleCanvas(stream=stream, color=True)

    canvas.draw_text(0, "hot", 255, 0, 0)
    canvas.flush()

    assert stream.getvalue() == "\033[38;2;255;0;0mhot\033[0m\n\n"


def test_console_canvas_empty_frame():
    """Test that an empty frame prints nothing."""
    stream = io.StringIO()
    canvas = ConsoleCanvas(stream=stream, color=False)

    canvas.clear()
    canvas.flush()

    assert stream.getvalue() == ""


def test_pil_canvas_save(tmp_path):
    """Test PNG snapshot, including non-latin glyphs."""
    canvas = PILCanvas(width=200, row_height=10, max_rows=4, scale=2)
    canvas.draw_text(0, "☀️ 21°C Clear", 255, 200, 0)

    filename = tmp_path / "weather.png"
    canvas.save(str(filename))

    with Image.open(filename) as image:
        assert image.size == (400, 80)


def test_pil_canvas_clear():
    """Test that clearing resets to a black image."""
    canvas = PILCanvas(width=50, row_height=10, max_rows=2)
    canvas.draw_text(0, "XXXX", 255, 255, 255)
    canvas.clear()

    image = canvas.get_image()
    assert image.getbbox() is None
