"""Layout and rendering logic for the search view - pure functions for testability."""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from display_state import DisplayState, ErrorState, IdleState, LoadingState, SuccessState
from weather_data import WeatherResult, round_half_up

DEFAULT_ICON = "🌤️"

# Checked in order, first match wins: "Partly Cloudy with Rain" is a cloud.
ICON_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("clear", "sunny"), "☀️"),
    (("cloudy", "cloud"), "☁️"),
    (("rain", "drizzle"), "🌧️"),
    (("thunderstorm", "thunder"), "⛈️"),
    (("snow",), "❄️"),
    (("fog", "mist"), "🌫️"),
    (("wind",), "💨"),
]

UNIT_LABELS: Dict[str, Dict[str, str]] = {
    "metric": {"temp": "°C", "speed": "km/h", "pressure": "hPa", "distance": "km"},
    "imperial": {"temp": "°F", "speed": "mph", "pressure": "mb", "distance": "mi"},
}

LOADING_TEXT = "Fetching weather data..."


class DrawOp:
    """Represents a drawing operation (for testing/layout calculation)."""
    def __init__(self, op_type: str, **kwargs):
        self.op_type = op_type
        self.kwargs = kwargs


@dataclass(frozen=True)
class WeatherCard:
    """Formatted fields of the weather result panel."""
    city: str
    country: str
    last_updated: str
    cache_badge_visible: bool
    icon: str
    temperature: str
    temperature_unit: str
    condition: str
    feels_like: str
    humidity: str
    wind_speed: str
    pressure: str
    visibility: str
    description: str


@dataclass(frozen=True)
class ViewModel:
    """Everything a frontend needs to show for one display state."""
    loading_visible: bool = False
    submit_enabled: bool = True
    error_visible: bool = False
    error_title: str = ""
    error_message: str = ""
    weather_visible: bool = False
    weather: Optional[WeatherCard] = None


def get_weather_icon(condition: Optional[str]) -> str:
    """
    Map a free-text condition to an icon glyph.

    Args:
        condition: Condition label, e.g. "Partially cloudy"

    Returns:
        Icon for the first matching category, or the default icon
    """
    condition_lower = (condition or "").lower()
    for keywords, icon in ICON_RULES:
        if any(keyword in condition_lower for keyword in keywords):
            return icon
    return DEFAULT_ICON


def format_timestamp(instant: datetime) -> str:
    """Format like en-US toLocaleString: "Mon, Jan 15, 2024, 02:30 PM"."""
    return f"{instant:%a}, {instant:%b} {instant.day}, {instant:%Y}, {instant:%I}:{instant:%M} {instant:%p}"


def get_temperature_color(temp_c: float) -> Tuple[int, int, int]:
    """
    Get RGB color for temperature using a simple gradient.

    Cold (< 0°C) = blue
    Cool (0-15°C) = cyan
    Mild (15-25°C) = green/yellow
    Warm (25-35°C) = yellow/orange
    Hot (> 35°C) = red

    Args:
        temp_c: Temperature in Celsius

    Returns:
        Tuple of (r, g, b) values (0-255)
    """
    if temp_c < 0:
        return (0, 0, 255)
    elif temp_c < 15:
        ratio = temp_c / 15.0
        return (0, int(255 * ratio), 255)
    elif temp_c < 25:
        ratio = (temp_c - 15) / 10.0
        return (int(255 * ratio), 255, int(255 * (1 - ratio)))
    elif temp_c < 35:
        ratio = (temp_c - 25) / 10.0
        return (255, int(255 * (1 - ratio * 0.5)), 0)
    else:
        ratio = min((temp_c - 35) / 10.0, 1.0)
        return (255, int(255 * (1 - ratio)), 0)


def build_weather_card(result: WeatherResult, units: str = "metric") -> WeatherCard:
    """Format a WeatherResult for display, rounding every number to an integer."""
    labels = UNIT_LABELS[units]
    current = result.current
    observed_at = current.observed_at
    last_updated = format_timestamp(observed_at) if observed_at else "Unknown"

    return WeatherCard(
        city=result.city,
        country=result.country,
        last_updated=f"Last updated: {last_updated}",
        cache_badge_visible=result.cached,
        icon=get_weather_icon(current.conditions),
        temperature=str(round_half_up(current.temp)),
        temperature_unit=labels["temp"],
        condition=current.conditions or "Unknown",
        feels_like=f"Feels like {round_half_up(current.feels_like)}{labels['temp']}",
        humidity=f"{round_half_up(current.humidity)}%",
        wind_speed=f"{round_half_up(current.wind_speed)} {labels['speed']}",
        pressure=f"{round_half_up(current.pressure)} {labels['pressure']}",
        visibility=f"{round_half_up(current.visibility)} {labels['distance']}",
        description=current.description or "No description available",
    )


def render(state: DisplayState, units: str = "metric") -> ViewModel:
    """
    Compute the view for a display state.

    Exactly one region is visible per state, so moving to a new state
    always hides whatever the previous one showed.
    """
    if isinstance(state, LoadingState):
        return ViewModel(loading_visible=True, submit_enabled=False)
    if isinstance(state, ErrorState):
        return ViewModel(error_visible=True, error_title=state.title, error_message=state.message)
    if isinstance(state, SuccessState):
        return ViewModel(weather_visible=True, weather=build_weather_card(state.result, units))
    if isinstance(state, IdleState):
        return ViewModel()
    raise TypeError(f"Unknown display state: {state!r}")


def calculate_layout(view: ViewModel, units: str = "metric") -> List[DrawOp]:
    """
    Calculate text rows for a view.

    This is a pure function that returns drawing operations,
    making it easy to test without actual rendering.

    Args:
        view: View model to lay out
        units: Unit system, used to color the temperature

    Returns:
        List of DrawOp objects, one "text" op per row
    """
    ops = []

    def text(row_text: str, color: Tuple[int, int, int] = (220, 220, 220)) -> None:
        ops.append(DrawOp("text", text=row_text, row=len(ops), r=color[0], g=color[1], b=color[2]))

    if view.loading_visible:
        text(LOADING_TEXT, (255, 165, 0))
    if view.error_visible:
        text(view.error_title, (255, 0, 0))
        if view.error_message:
            text(view.error_message, (255, 80, 80))
    if view.weather_visible and view.weather is not None:
        card = view.weather
        heading = f"{card.city}, {card.country}" if card.country else card.city
        if card.cache_badge_visible:
            heading += "  [cached]"
        text(heading, (255, 255, 255))
        text(card.last_updated, (150, 150, 150))

        temp = int(card.temperature)
        temp_c = (temp - 32) * 5 / 9 if units == "imperial" else temp
        text(f"{card.icon}  {card.temperature}{card.temperature_unit}  {card.condition}", get_temperature_color(temp_c))
        text(card.feels_like)
        text(f"Humidity {card.humidity}  Wind {card.wind_speed}")
        text(f"Pressure {card.pressure}  Visibility {card.visibility}")
        text(card.description, (180, 180, 180))

    return ops


def paint(canvas, view: ViewModel, units: str = "metric") -> None:
    """
    Draw a view onto a canvas.

    Args:
        canvas: ViewCanvas instance (console, fake or PIL)
        view: View model to draw
        units: Unit system of the view
    """
    canvas.clear()
    for op in calculate_layout(view, units):
        if op.op_type == "text":
            canvas.draw_text(
                op.kwargs["row"],
                op.kwargs["text"],
                op.kwargs["r"],
                op.kwargs["g"],
                op.kwargs["b"]
            )
    canvas.flush()
