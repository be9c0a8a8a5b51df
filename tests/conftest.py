import pytest

from ride_config import RideCostConfig
from ride_structures import RouteSegment, Vehicle
from tests.factories import make_segment


@pytest.fixture
def config() -> RideCostConfig:
    """Config with a fake key and no retry delay."""
    return RideCostConfig(ors_api_key="test-key", request_retry_delay=0.0,
                          ride_api_url="http://rides.test/api")


@pytest.fixture
def vehicle() -> Vehicle:
    return Vehicle(average_mileage_km_per_litre=15, fuel_price_per_litre=100)


@pytest.fixture
def primary_route() -> RouteSegment:
    """A 150 km route from Mumbai towards Pune."""
    return make_segment((19.07, 72.87), (18.52, 73.85), distance_km=150)
