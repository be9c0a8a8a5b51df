"""Tests for fuel, maintenance and per-passenger cost allocation."""

import math

import pytest

from cost_allocator import (
    allocate,
    base_cost,
    cost_multiplier,
    fuel_cost,
    maintenance_cost,
    overlap_discount,
    quote_passenger,
)
from ride_errors import InvalidSegmentError, InvalidVehicleError
from ride_structures import Passenger, Vehicle
from tests.factories import make_segment


def _passenger(name, segment, cost=0.0):
    return Passenger(name=name, segment=segment, cost=cost)


@pytest.mark.unit
class TestSegmentCosts:
    def test_fuel_maintenance_and_base(self, vehicle):
        assert fuel_cost(150, vehicle) == pytest.approx(1000)
        assert maintenance_cost(150, vehicle) == pytest.approx(200)
        assert base_cost(150, vehicle) == pytest.approx(1200)

    def test_zero_distance_costs_nothing(self, vehicle):
        assert base_cost(0, vehicle) == 0

    def test_free_fuel_costs_nothing(self):
        assert base_cost(100, Vehicle(12, 0)) == 0

    @pytest.mark.parametrize("distance", [-1, math.inf, math.nan])
    def test_invalid_distance(self, vehicle, distance):
        with pytest.raises(InvalidSegmentError):
            fuel_cost(distance, vehicle)


@pytest.mark.unit
class TestAllocate:
    def test_primary_route_only(self, vehicle, primary_route):
        breakdown = allocate(primary_route, vehicle, [])

        assert breakdown.fuel_cost == pytest.approx(1000)
        assert breakdown.maintenance_cost == pytest.approx(200)
        assert breakdown.base_cost == pytest.approx(1200)
        assert breakdown.total_cost == pytest.approx(1200)
        assert breakdown.total_distance == pytest.approx(150)
        assert breakdown.total_fuel_litres == pytest.approx(10)
        assert breakdown.passenger_costs == {}
        assert breakdown.pending is None

    def test_fully_overlapping_passenger(self, vehicle, primary_route):
        segment = make_segment((19.07, 72.87), (18.52, 73.85), distance_km=50)

        quote = quote_passenger(primary_route, vehicle, [], segment)

        assert quote.overlap_discount == 1.0
        assert quote.cost_multiplier == pytest.approx(0.65)
        assert quote.base_cost == pytest.approx(400)
        assert quote.cost == pytest.approx(260)

        rider = _passenger("Asha", segment, quote.cost)
        breakdown = allocate(primary_route, vehicle, [rider])
        assert breakdown.total_cost == pytest.approx(1460)
        assert breakdown.total_distance == pytest.approx(200)
        assert breakdown.passenger_costs == {rider.id: pytest.approx(260)}

    def test_pending_quote_is_not_in_totals(self, vehicle, primary_route):
        segment = make_segment((19.07, 72.87), (18.52, 73.85), distance_km=50)

        breakdown = allocate(primary_route, vehicle, [], pending=segment)

        assert breakdown.pending.cost == pytest.approx(260)
        assert breakdown.total_cost == pytest.approx(1200)
        assert breakdown.total_distance == pytest.approx(150)

    def test_non_overlapping_passenger_pays_count_discount_only(self, vehicle, primary_route):
        far_away = make_segment((28.6, 77.2), (28.4, 77.0), distance_km=30)

        quote = quote_passenger(primary_route, vehicle, [], far_away)

        assert quote.overlap_discount == 0.0
        assert quote.cost_multiplier == pytest.approx(0.95)
        assert quote.cost == pytest.approx(240 * 0.95)

    def test_overlap_with_existing_passenger_counts(self, vehicle, primary_route):
        delhi = make_segment((28.6, 77.2), (28.4, 77.0), distance_km=30)
        same_as_first = make_segment((28.4, 77.0), (28.6, 77.2), distance_km=30)
        first = _passenger("Ravi", delhi, 100.0)

        quote = quote_passenger(primary_route, vehicle, [first], same_as_first)

        assert quote.overlap_discount == 1.0
        assert quote.cost_multiplier == pytest.approx(1 - 0.3 - 0.10)

    def test_inputs_not_mutated(self, vehicle, primary_route):
        riders = [_passenger("Ravi", make_segment((19.0, 73.0), (18.6, 73.5), 40), 123.0)]
        snapshot = list(riders)

        allocate(primary_route, vehicle, riders,
                 pending=make_segment((19.0, 73.0), (18.7, 73.2), 20))

        assert riders == snapshot
        assert riders[0].cost == 123.0

    @pytest.mark.parametrize("bad_vehicle", [
        Vehicle(0, 100),
        Vehicle(-5, 100),
        Vehicle(math.nan, 100),
        Vehicle(15, -1),
        Vehicle(15, math.inf),
    ])
    def test_invalid_vehicle(self, bad_vehicle, primary_route):
        with pytest.raises(InvalidVehicleError):
            allocate(primary_route, bad_vehicle, [])

    def test_invalid_primary_distance(self, vehicle):
        with pytest.raises(InvalidSegmentError):
            allocate(make_segment((0, 0), (1, 1), distance_km=-3), vehicle, [])

    def test_invalid_pending_distance(self, vehicle, primary_route):
        with pytest.raises(InvalidSegmentError):
            allocate(primary_route, vehicle, [],
                     pending=make_segment((0, 0), (1, 1), distance_km=math.nan))


@pytest.mark.unit
class TestCostMultiplier:
    def test_formula(self):
        assert cost_multiplier(0.5, 2) == pytest.approx(1 - 0.15 - 0.10)

    def test_reaches_zero_exactly(self):
        # 1 - 0.3 - 14 * 0.05 == 0
        assert cost_multiplier(1.0, 14) == pytest.approx(0.0)

    def test_clamped_at_zero(self):
        assert cost_multiplier(1.0, 15) == 0.0
        assert cost_multiplier(0.0, 40) == 0.0

    def test_crowded_ride_never_charges_negative(self, vehicle, primary_route):
        riders = [
            _passenger(f"rider-{i}", make_segment((19.0, 73.0), (18.6, 73.5), 10), 1.0)
            for i in range(20)
        ]
        quote = quote_passenger(primary_route, vehicle, riders,
                                make_segment((19.07, 72.87), (18.52, 73.85), 50))
        assert quote.cost_multiplier == 0.0
        assert quote.cost == 0.0


@pytest.mark.unit
def test_overlap_discount_uses_primary_when_no_passengers(primary_route):
    inside = make_segment((19.0, 73.0), (18.6, 73.5))
    assert overlap_discount(inside, primary_route, []) == pytest.approx(1.0)
