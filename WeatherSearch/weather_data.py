"""Weather domain model - pure data structures independent of any frontend."""
import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Tuple

UNKNOWN_CITY = "Unknown"


@dataclass
class CurrentConditions:
    """Snapshot of present weather at the resolved location."""
    temp: float
    feels_like: float
    conditions: str  # e.g., "Partially cloudy", "Rain, Overcast"
    humidity: float  # percent
    wind_speed: float
    pressure: float
    visibility: float
    description: str
    observed: Optional[str] = None  # raw "datetime" value from the backend

    @property
    def observed_at(self) -> Optional[datetime]:
        """Observation time, or None when the backend value can't be parsed."""
        return parse_observation_time(self.observed)


@dataclass
class WeatherResult:
    """A single successful lookup as returned by /api/weather."""
    current: CurrentConditions
    resolved_address: Optional[str] = None  # "City, Country"
    address: Optional[str] = None  # what the user typed, echoed back
    cached: bool = False

    @property
    def city(self) -> str:
        return split_address(self.resolved_address, self.address)[0]

    @property
    def country(self) -> str:
        return split_address(self.resolved_address, self.address)[1]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (-2.5 -> -2, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def split_address(resolved_address: Optional[str], address: Optional[str] = None) -> Tuple[str, str]:
    """
    Split a resolved address into display city and country.

    Only the first comma separates the two parts, so "Springfield, IL, USA"
    gives ("Springfield", "IL, USA").

    Args:
        resolved_address: Provider-supplied "City, Country" string
        address: Plain address used when there is no resolved address

    Returns:
        Tuple of (city, country); country is "" when absent
    """
    if resolved_address:
        city, _, country = resolved_address.partition(",")
        return city.strip() or UNKNOWN_CITY, country.strip()
    return (address or "").strip() or UNKNOWN_CITY, ""


def parse_observation_time(value: Any, today: Optional[date] = None) -> Optional[datetime]:
    """
    Parse the backend's observation timestamp.

    Accepts a full ISO 8601 datetime, a bare "HH:MM:SS" time of day (combined
    with today's date), or a UNIX epoch number.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        clock = time.fromisoformat(text)
    except ValueError:
        return None
    return datetime.combine(today or date.today(), clock)


def _as_float(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' is not a number: {value!r}")
    return float(value)


def _as_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"'{key}' is not a string: {value!r}")
    return value


def _as_bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' is not a boolean: {value!r}")
    return value


def parse_weather_result(data: Any) -> WeatherResult:
    """
    Build a WeatherResult from a decoded /api/weather JSON body.

    Raises:
        ValueError: If the body doesn't have the expected shape
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    current = data.get("currentConditions")
    if not isinstance(current, dict):
        raise ValueError("missing 'currentConditions' block")

    conditions = CurrentConditions(
        temp=_as_float(current, "temp"),
        feels_like=_as_float(current, "feelslike"),
        conditions=_as_str(current, "conditions") or "",
        humidity=_as_float(current, "humidity"),
        wind_speed=_as_float(current, "windspeed"),
        pressure=_as_float(current, "pressure"),
        visibility=_as_float(current, "visibility"),
        description=_as_str(current, "description") or "",
        observed=current.get("datetime"),
    )

    return WeatherResult(
        current=conditions,
        resolved_address=_as_str(data, "resolvedAddress"),
        address=_as_str(data, "address"),
        cached=_as_bool(data, "cached"),
    )
