"""Provider that talks to the weather backend's /api/weather endpoint."""
import logging
from typing import Optional
from urllib.parse import quote, urlencode

import requests

from weather_data import WeatherResult, parse_weather_result
from weather_provider import WeatherProviderBase, WeatherFetchError

UNITS = ("metric", "imperial")


class ApiWeatherProvider(WeatherProviderBase):
    """
    Weather provider backed by the weather API service.

    The backend proxies an upstream weather source and caches results
    server-side; responses say whether they were served from that cache.
    """

    WEATHER_PATH = "/api/weather"
    HEALTH_PATH = "/health"

    def __init__(
        self,
        base_url: str,
        units: str = "metric",
        timeout: Optional[float] = None
    ):
        """
        Initialize the provider.

        Args:
            base_url: Backend root, e.g. "http://localhost:8080"
            units: "metric" or "imperial", forwarded to the backend
            timeout: HTTP timeout in seconds (None waits indefinitely)
        """
        if units not in UNITS:
            raise ValueError(f"Unsupported units: {units}")
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.timeout = timeout

    def build_url(self, city: str) -> str:
        """Full lookup URL with the city percent-escaped (spaces become %20)."""
        query = urlencode({"city": city, "units": self.units}, quote_via=quote)
        return f"{self.base_url}{self.WEATHER_PATH}?{query}"

    def fetch(self, city: str) -> WeatherResult:
        """
        Fetch current weather for a city.

        Returns:
            WeatherResult: Parsed response body

        Raises:
            WeatherFetchError: If the request or parsing fails
        """
        url = self.build_url(city)
        logging.info(f"Requesting weather: {url}")

        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during weather request: {e}")
            raise WeatherFetchError(str(e)) from e

        logging.info(f"API response status: {response.status_code}")

        if not response.ok:
            self._handle_error_response(response)

        try:
            data = response.json()
            result = parse_weather_result(data)
        except ValueError as e:
            logging.error(f"Failed to parse weather response: {e}", exc_info=True)
            raise WeatherFetchError(f"Failed to parse response: {e}", status_code=response.status_code) from e

        logging.info(
            "Weather for %s: %s, %s (cached=%s)",
            result.resolved_address or city,
            result.current.temp,
            result.current.conditions,
            result.cached,
        )
        return result

    def _handle_error_response(self, response: requests.Response) -> None:
        """Raise with the backend's "error" field, falling back to the HTTP status."""
        message = f"HTTP error! status: {response.status_code}"
        try:
            error_data = response.json()
        except ValueError:
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
        else:
            logging.error(f"Weather API error response: {error_data}")
            if isinstance(error_data, dict) and error_data.get("error"):
                message = str(error_data["error"])
        raise WeatherFetchError(message, status_code=response.status_code)

    def health_check(self) -> bool:
        """
        Check whether the backend is up.

        Returns:
            bool: True if /health answers 2xx with status "healthy"
        """
        url = f"{self.base_url}{self.HEALTH_PATH}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during health check: {e}")
            return False

        if not response.ok:
            logging.warning(f"Health check failed with status {response.status_code}")
            return False
        try:
            data = response.json()
        except ValueError:
            logging.warning("Health check returned non-JSON body")
            return False
        healthy = isinstance(data, dict) and data.get("status") == "healthy"
        logging.info(f"Health check: {'healthy' if healthy else data}")
        return healthy
