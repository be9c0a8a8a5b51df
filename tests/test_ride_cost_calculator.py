"""Tests for the interactive command line front end."""

from unittest.mock import Mock, patch

import pytest

import ride_cost_calculator
from ride_cost_calculator import (
    collect_passengers,
    display_results,
    format_distance,
    prompt_float,
)
from ride_config import RideCostConfig
from ride_errors import LocationNotFoundError
from ride_session import RideSession
from ride_structures import FuelPriceQuote
from tests.factories import make_segment


@pytest.mark.unit
class TestFormatting:
    def test_format_distance(self):
        assert format_distance(150, False) == "150.0 km"
        assert format_distance(10, True) == "10.0 km*"

    def test_prompt_float_uses_default(self):
        with patch("builtins.input", return_value=""):
            assert prompt_float("Mileage", 15) == 15.0

    def test_prompt_float_reprompts_on_bad_input(self, capsys):
        with patch("builtins.input", side_effect=["abc", "nan", "0", "12.5"]):
            assert prompt_float("Mileage", 15, minimum=0, allow_equal=False) == 12.5
        out = capsys.readouterr().out
        assert out.count("Invalid input") == 2
        assert "above 0" in out


@pytest.mark.unit
class TestDisplay:
    def test_breakdown(self, vehicle, primary_route, capsys):
        session = RideSession(vehicle, primary_route)
        session.add_resolved_passenger(
            "Asha", make_segment((19.07, 72.87), (18.52, 73.85), 50, was_estimated=True))

        display_results(session, session.breakdown())

        out = capsys.readouterr().out
        assert "200.0 km" in out
        assert "13.33 litres" in out
        assert "Rs 1,200.00" in out
        assert "Rs 260.00" in out
        assert "Rs 1,460.00" in out
        assert "50.0 km*" in out
        assert "NOTE: An asterisk" in out

    def test_no_passengers_no_note(self, vehicle, primary_route, capsys):
        session = RideSession(vehicle, primary_route)
        display_results(session, session.breakdown())
        out = capsys.readouterr().out
        assert "Passenger Breakdown" not in out
        assert "NOTE" not in out


@pytest.mark.unit
def test_collect_passengers_reports_failures(capsys):
    session = Mock()
    session.add_passenger.side_effect = [LocationNotFoundError("nope")]
    with patch("builtins.input", side_effect=["Asha", "Atlantis", "Pune", ""]):
        collect_passengers(session)
    out = capsys.readouterr().out
    assert LocationNotFoundError.user_message in out
    assert "Asha was not added" in out


@pytest.mark.unit
def test_main_runs_offline_session(config):
    session = Mock()
    with patch.object(ride_cost_calculator.RideCostConfig, "from_env", return_value=config), \
            patch.object(ride_cost_calculator, "FuelPriceFeed") as feed, \
            patch.object(ride_cost_calculator, "start_session", return_value=session) as start, \
            patch.object(ride_cost_calculator, "collect_passengers"), \
            patch.object(ride_cost_calculator, "display_results"), \
            patch("builtins.input", side_effect=["", ""]):
        feed.return_value.current_price.return_value = FuelPriceQuote(102.0)

        assert ride_cost_calculator.main([]) == 0

    vehicle = start.call_args.args[1]
    assert vehicle.average_mileage_km_per_litre == 15
    assert vehicle.fuel_price_per_litre == 102.0
    session.save.assert_not_called()


@pytest.mark.unit
def test_main_without_api_key(capsys):
    with patch.object(ride_cost_calculator.RideCostConfig, "from_env",
                      return_value=RideCostConfig(ors_api_key="")):
        assert ride_cost_calculator.main([]) == 1
    assert "ORS_API_KEY" in capsys.readouterr().out


@pytest.mark.unit
def test_main_with_bad_environment(monkeypatch, capsys):
    monkeypatch.setenv("REQUEST_TIMEOUT", "fast")
    with patch("ride_config.load_dotenv"), \
            patch.object(ride_cost_calculator, "start_session") as start:
        assert ride_cost_calculator.main([]) == 1
    assert "FATAL ERROR: The REQUEST_TIMEOUT" in capsys.readouterr().out
    start.assert_not_called()
