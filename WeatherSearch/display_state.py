"""Display states for a single search: Idle, Loading, Success or Error."""
from dataclasses import dataclass
from typing import Union

from weather_data import WeatherResult


@dataclass(frozen=True)
class IdleState:
    """Nothing searched yet."""


@dataclass(frozen=True)
class LoadingState:
    """A request is in flight."""
    city: str


@dataclass(frozen=True)
class SuccessState:
    result: WeatherResult


@dataclass(frozen=True)
class ErrorState:
    title: str
    message: str = ""


DisplayState = Union[IdleState, LoadingState, SuccessState, ErrorState]
