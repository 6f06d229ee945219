"""Command-line weather lookup against the weather API backend."""
import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from api_weather_provider import UNITS, ApiWeatherProvider
from display_state import SuccessState
from layout import paint, render
from search_controller import SearchController
from view_canvas import ConsoleCanvas, PILCanvas

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_EXAMPLE_CITIES = "London,Tokyo,New York,Jakarta"
EXIT_COMMANDS = ("exit", "quit")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("weather-search", description="Look up current weather by city")
    parser.add_argument("--city", help="City to look up right away")
    parser.add_argument("--interactive", action="store_true", help="Keep prompting for cities")
    parser.add_argument("--base-url", help="Weather API root (default: WEATHER_API_BASE_URL)")
    parser.add_argument("--units", choices=list(UNITS), help="Unit system (default: WEATHER_UNITS)")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds (default: no timeout)")
    parser.add_argument("--snapshot", help="Save the final view as a PNG")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--health", action="store_true", help="Check the backend and exit")
    parser.add_argument("--log-file")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config(args: argparse.Namespace) -> Tuple[str, str, Optional[float], List[str]]:
    load_dotenv()
    base_url = args.base_url or os.getenv("WEATHER_API_BASE_URL", DEFAULT_BASE_URL)
    units = args.units or os.getenv("WEATHER_UNITS", "metric")
    timeout_raw = os.getenv("WEATHER_TIMEOUT")
    examples_raw = os.getenv("WEATHER_EXAMPLE_CITIES", DEFAULT_EXAMPLE_CITIES)

    if units not in UNITS:
        raise SystemExit(f"Invalid WEATHER_UNITS: {units} (expected one of {', '.join(UNITS)})")

    timeout = args.timeout
    if timeout is None and timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError as exc:
            raise SystemExit(f"Invalid WEATHER_TIMEOUT: {exc}") from exc
    if timeout is not None and timeout <= 0:
        raise SystemExit(f"Timeout must be positive, got {timeout}")

    examples = [city.strip() for city in examples_raw.split(",") if city.strip()]

    logging.info("Configuration loaded: base_url=%s units=%s timeout=%s", base_url, units, timeout)
    return base_url, units, timeout, examples


def build_controller(base_url: str, units: str, timeout: Optional[float], canvas) -> SearchController:
    provider = ApiWeatherProvider(base_url=base_url, units=units, timeout=timeout)
    controller = SearchController(provider)
    controller.add_listener(lambda state: paint(canvas, render(state, units), units))
    logging.info("Search controller ready (backend=%s)", base_url)
    return controller


def resolve_input(text: str, examples: List[str]) -> str:
    """Map an example number ("2") to its city; anything else is a city name."""
    choice = text.strip()
    if choice.isdigit() and 1 <= int(choice) <= len(examples):
        return examples[int(choice) - 1]
    return choice


def interactive_loop(controller: SearchController, examples: List[str], input_fn=input, output=None) -> None:
    output = output or sys.stdout
    if examples:
        listing = "  ".join(f"[{index}] {city}" for index, city in enumerate(examples, start=1))
        output.write(f"Examples: {listing}\n")

    while True:
        try:
            text = input_fn("City (or 'exit' to quit): ")
        except EOFError:
            break
        if text.strip().lower() in EXIT_COMMANDS:
            break
        controller.submit(resolve_input(text, examples))


def save_snapshot(controller: SearchController, units: str, filename: str) -> None:
    canvas = PILCanvas()
    paint(canvas, render(controller.state, units), units)
    canvas.save(filename)
    logging.info("Snapshot saved to %s", filename)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    base_url, units, timeout, examples = load_config(args)

    if args.health:
        provider = ApiWeatherProvider(base_url=base_url, units=units, timeout=timeout)
        healthy = provider.health_check()
        print("healthy" if healthy else "unhealthy")
        return 0 if healthy else 1

    if not args.city and not args.interactive:
        raise SystemExit("Nothing to do: pass --city and/or --interactive")

    canvas = ConsoleCanvas(color=not args.no_color and sys.stdout.isatty())
    controller = build_controller(base_url, units, timeout, canvas)

    try:
        if args.city:
            controller.submit(args.city)
        if args.interactive:
            interactive_loop(controller, examples)
    except KeyboardInterrupt:
        logging.info("Stopping search")

    if args.snapshot:
        save_snapshot(controller, units, args.snapshot)

    return 0 if isinstance(controller.state, SuccessState) else 1


if __name__ == "__main__":
    sys.exit(main())
