"""Weather fetcher abstraction - allows swapping the backend used for lookups."""
from abc import ABC, abstractmethod
from typing import Optional

from weather_data import WeatherResult


class WeatherProviderBase(ABC):
    """Abstract base class for weather lookups by city name."""

    @abstractmethod
    def fetch(self, city: str) -> WeatherResult:
        """
        Fetch current weather for a city.

        Args:
            city: Trimmed, non-empty city name (not yet URL-escaped)

        Returns:
            WeatherResult: Current weather for the resolved location

        Raises:
            WeatherFetchError: If the lookup fails
        """
        pass


class WeatherFetchError(Exception):
    """Exception raised when a lookup fails (network, HTTP or parse error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
