"""Search controller: owns the display state machine for city lookups."""
import logging
import threading
from typing import Callable, List

from display_state import DisplayState, ErrorState, IdleState, LoadingState, SuccessState
from weather_provider import WeatherProviderBase, WeatherFetchError

EMPTY_CITY_MESSAGE = "Please enter a city name"
FALLBACK_ERROR_MESSAGE = "Failed to fetch weather data"

StateListener = Callable[[DisplayState], None]


class SearchController:
    """
    Mediates between user input, the weather provider and the view.

    State goes Idle -> Loading -> Success | Error -> Loading -> ...
    and is replaced wholesale on every transition. Only one search may be
    in flight; a submission arriving while another is loading is rejected
    and leaves the current state untouched.
    """

    def __init__(self, provider: WeatherProviderBase):
        """
        Initialize the controller.

        Args:
            provider: Weather provider used for lookups
        """
        self.provider = provider
        self._state: DisplayState = IdleState()
        self._listeners: List[StateListener] = []
        self._in_flight = threading.Lock()

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, LoadingState)

    def add_listener(self, listener: StateListener) -> None:
        """Call listener with every new state."""
        self._listeners.append(listener)

    def _set_state(self, state: DisplayState) -> None:
        logging.debug(f"Display state: {type(self._state).__name__} -> {type(state).__name__}")
        self._state = state
        for listener in self._listeners:
            listener(state)

    def submit(self, city_input: str) -> DisplayState:
        """
        Run one search for the given input.

        Args:
            city_input: Raw text from the user; surrounding whitespace is ignored

        Returns:
            DisplayState: The state after the search resolved (or the current
            state if the submission was rejected)
        """
        city = (city_input or "").strip()
        if not self._in_flight.acquire(blocking=False):
            logging.warning(f"Search for '{city}' rejected: another search is in progress")
            return self._state

        try:
            if not city:
                logging.info("Empty city submitted, skipping request")
                self._set_state(ErrorState(EMPTY_CITY_MESSAGE))
                return self._state

            self._set_state(LoadingState(city))
            logging.info(f"Searching weather for '{city}'")
            try:
                result = self.provider.fetch(city)
            except WeatherFetchError as e:
                logging.error(f"Weather lookup for '{city}' failed: {e}")
                self._set_state(ErrorState(e.message or FALLBACK_ERROR_MESSAGE))
            except Exception as exc:
                logging.exception("Unexpected error during weather lookup: %s", exc)
                self._set_state(ErrorState(str(exc) or FALLBACK_ERROR_MESSAGE))
            else:
                self._set_state(SuccessState(result))
        finally:
            # Interrupts skip the handlers above but must not leave us loading
            if self.is_loading:
                self._set_state(IdleState())
            self._in_flight.release()

        return self._state
