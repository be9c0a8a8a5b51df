# Splits the running cost of a shared car journey between the organizer and passengers.

from collections.abc import Sequence

from ride_errors import InvalidSegmentError, InvalidVehicleError
from ride_structures import (
    CostBreakdown,
    Passenger,
    PassengerQuote,
    RouteSegment,
    Vehicle,
    is_finite_number,
)
from route_overlap import best_overlap, overlap

# Maintenance is charged as a fixed share of fuel cost.
MAINTENANCE_RATE = 0.20
# Discount per unit of overlap with an existing route.
OVERLAP_DISCOUNT_RATE = 0.3
# Discount per passenger on board, the new one included.
PER_PASSENGER_DISCOUNT_RATE = 0.05
# Keeps passenger costs from going negative once enough people share the ride.
MIN_COST_MULTIPLIER = 0.0


def validate_vehicle(vehicle: Vehicle) -> None:
    mileage = vehicle.average_mileage_km_per_litre
    price = vehicle.fuel_price_per_litre
    if not is_finite_number(mileage) or mileage <= 0:
        raise InvalidVehicleError(
            f"Average mileage must be a positive number, got {mileage!r}")
    if not is_finite_number(price) or price < 0:
        raise InvalidVehicleError(
            f"Fuel price must be a non-negative number, got {price!r}")


def validate_distance(distance_km: float) -> None:
    if not is_finite_number(distance_km) or distance_km < 0:
        raise InvalidSegmentError(
            f"Segment distance must be a non-negative number, got {distance_km!r}")


def fuel_cost(distance_km: float, vehicle: Vehicle) -> float:
    validate_distance(distance_km)
    return (distance_km / vehicle.average_mileage_km_per_litre) * vehicle.fuel_price_per_litre


def maintenance_cost(distance_km: float, vehicle: Vehicle) -> float:
    return fuel_cost(distance_km, vehicle) * MAINTENANCE_RATE


def base_cost(distance_km: float, vehicle: Vehicle) -> float:
    """Fuel plus the maintenance surcharge for driving ``distance_km``."""
    return fuel_cost(distance_km, vehicle) + maintenance_cost(distance_km, vehicle)


def overlap_discount(segment: RouteSegment, primary: RouteSegment,
                     passengers: Sequence[Passenger]) -> float:
    """Best overlap of ``segment`` against the primary route or any passenger's segment."""
    return max(overlap(segment, primary),
               best_overlap(segment, [p.segment for p in passengers]))


def cost_multiplier(discount: float, total_passengers: int) -> float:
    multiplier = (1
                  - discount * OVERLAP_DISCOUNT_RATE
                  - total_passengers * PER_PASSENGER_DISCOUNT_RATE)
    return max(MIN_COST_MULTIPLIER, multiplier)


def quote_passenger(primary: RouteSegment, vehicle: Vehicle,
                    passengers: Sequence[Passenger],
                    segment: RouteSegment) -> PassengerQuote:
    """Prices a new passenger's segment against the riders already on board."""
    validate_vehicle(vehicle)
    validate_distance(primary.distance_km)
    segment_base = base_cost(segment.distance_km, vehicle)
    discount = overlap_discount(segment, primary, passengers)
    multiplier = cost_multiplier(discount, len(passengers) + 1)
    return PassengerQuote(
        segment=segment,
        base_cost=segment_base,
        overlap_discount=discount,
        cost_multiplier=multiplier,
        cost=segment_base * multiplier,
    )


def allocate(primary: RouteSegment, vehicle: Vehicle,
             passengers: Sequence[Passenger],
             pending: RouteSegment | None = None) -> CostBreakdown:
    """Computes the cost breakdown for a ride.

    Totals cover the primary route and ``passengers``. When ``pending`` is
    given its quote is attached to the breakdown but not counted in the
    totals, since that passenger has not been added yet.
    """
    validate_vehicle(vehicle)
    for p in passengers:
        validate_distance(p.distance_km)

    route_fuel = fuel_cost(primary.distance_km, vehicle)
    route_maintenance = route_fuel * MAINTENANCE_RATE
    route_base = route_fuel + route_maintenance

    total_distance = primary.distance_km + sum(p.distance_km for p in passengers)
    passenger_costs = {p.id: p.cost for p in passengers}

    quote = None
    if pending is not None:
        quote = quote_passenger(primary, vehicle, passengers, pending)

    return CostBreakdown(
        fuel_cost=route_fuel,
        maintenance_cost=route_maintenance,
        base_cost=route_base,
        total_distance=total_distance,
        total_fuel_litres=total_distance / vehicle.average_mileage_km_per_litre,
        passenger_costs=passenger_costs,
        total_cost=route_base + sum(passenger_costs.values()),
        pending=quote,
    )
