"""Tests for the command-line entry point."""
import io
import pytest
from unittest.mock import Mock, patch
import main
from view_canvas import FakeViewCanvas


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real environment and .env files out of config loading."""
    for name in ("WEATHER_API_BASE_URL", "WEATHER_UNITS", "WEATHER_TIMEOUT", "WEATHER_EXAMPLE_CITIES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(main, "load_dotenv", lambda: None)


@pytest.fixture
def api_body():
    return {
        "resolvedAddress": "Tokyo, Japan",
        "currentConditions": {
            "datetime": "08:15:00",
            "temp": 9.6,
            "feelslike": 7.1,
            "humidity": 55.0,
            "windspeed": 14.0,
            "pressure": 1020.0,
            "visibility": 10.0,
            "conditions": "Clear",
            "description": "Clear conditions throughout the day."
        },
        "cached": True
    }


def make_response(status_code, json_data):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = json_data
    return response


def test_load_config_defaults():
    """Test defaults when nothing is configured."""
    args = main.parse_args([])
    base_url, units, timeout, examples = main.load_config(args)

    assert base_url == main.DEFAULT_BASE_URL
    assert units == "metric"
    assert timeout is None
    assert examples == ["London", "Tokyo", "New York", "Jakarta"]


def test_load_config_env_and_flags(monkeypatch):
    """Test that flags override the environment."""
    monkeypatch.setenv("WEATHER_API_BASE_URL", "http://env.test")
    monkeypatch.setenv("WEATHER_UNITS", "imperial")
    monkeypatch.setenv("WEATHER_TIMEOUT", "2.5")
    monkeypatch.setenv("WEATHER_EXAMPLE_CITIES", "Oslo, ,Lima")

    base_url, units, timeout, examples = main.load_config(main.parse_args([]))
    assert (base_url, units, timeout, examples) == ("http://env.test", "imperial", 2.5, ["Oslo", "Lima"])

    args = main.parse_args(["--base-url", "http://flag.test", "--units", "metric", "--timeout", "1"])
    base_url, units, timeout, _ = main.load_config(args)
    assert (base_url, units, timeout) == ("http://flag.test", "metric", 1.0)


def test_load_config_invalid_units(monkeypatch):
    """Test bad unit system in the environment."""
    monkeypatch.setenv("WEATHER_UNITS", "kelvin")
    with pytest.raises(SystemExit):
        main.load_config(main.parse_args([]))


def test_load_config_invalid_timeout(monkeypatch):
    """Test bad timeout in the environment."""
    monkeypatch.setenv("WEATHER_TIMEOUT", "soon")
    with pytest.raises(SystemExit):
        main.load_config(main.parse_args([]))


def test_resolve_input_examples():
    """Test example numbers map to cities."""
    examples = ["London", "Tokyo"]
    assert main.resolve_input("2", examples) == "Tokyo"
    assert main.resolve_input(" 1 ", examples) == "London"
    assert main.resolve_input("3", examples) == "3"
    assert main.resolve_input("Paris", examples) == "Paris"


def test_build_controller_paints_each_state(api_body):
    """Test that the canvas is repainted on every transition."""
    canvas = FakeViewCanvas()
    controller = main.build_controller("http://weather.test", "metric", None, canvas)

    with patch('api_weather_provider.requests.get') as mock_get:
        mock_get.return_value = make_response(200, api_body)
        controller.submit("Tokyo")

    assert canvas.frames[0] == ["Fetching weather data..."]
    assert canvas.frames[-1][0] == "Tokyo, Japan  [cached]"


def test_interactive_loop():
    """Test prompting until exit, with example shortcuts."""
    controller = Mock()
    answers = iter(["1", "  Paris ", "", "exit", "never reached"])
    output = io.StringIO()

    main.interactive_loop(controller, ["London"], input_fn=lambda _prompt: next(answers), output=output)

    assert [call.args[0] for call in controller.submit.call_args_list] == ["London", "Paris", ""]
    assert "[1] London" in output.getvalue()


def test_interactive_loop_eof():
    """Test that end of input leaves the loop."""
    controller = Mock()

    def raise_eof(_prompt):
        raise EOFError

    main.interactive_loop(controller, [], input_fn=raise_eof, output=io.StringIO())

    controller.submit.assert_not_called()


def test_main_city_success(api_body, capsys):
    """Test one-shot lookup from --city."""
    with patch('api_weather_provider.requests.get') as mock_get:
        mock_get.return_value = make_response(200, api_body)
        exit_code = main.main(["--city", "Tokyo", "--base-url", "http://weather.test", "--no-color"])

    assert exit_code == 0
    mock_get.assert_called_once_with("http://weather.test/api/weather?city=Tokyo&units=metric", timeout=None)
    out = capsys.readouterr().out
    assert "Tokyo, Japan  [cached]" in out
    assert "Feels like 7°C" in out


def test_main_city_error(capsys):
    """Test one-shot lookup that fails."""
    with patch('api_weather_provider.requests.get') as mock_get:
        mock_get.return_value = make_response(404, {"error": "City not found"})
        exit_code = main.main(["--city", "Atlantis", "--no-color"])

    assert exit_code == 1
    assert "City not found" in capsys.readouterr().out


def test_main_snapshot(api_body, tmp_path):
    """Test saving a PNG of the final view."""
    snapshot = tmp_path / "weather.png"
    with patch('api_weather_provider.requests.get') as mock_get:
        mock_get.return_value = make_response(200, api_body)
        main.main(["--city", "Tokyo", "--snapshot", str(snapshot), "--no-color"])

    assert snapshot.exists()


def test_main_health(capsys):
    """Test --health."""
    with patch('api_weather_provider.requests.get') as mock_get:
        mock_get.return_value = make_response(200, {"status": "healthy"})
        exit_code = main.main(["--health"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "healthy"


def test_main_nothing_to_do():
    """Test that running without --city or --interactive exits."""
    with pytest.raises(SystemExit):
        main.main([])
