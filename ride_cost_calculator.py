# Main script to share the running cost of a car journey between passengers.

import argparse
import logging
import math

from api_adapters import FuelPriceFeed, NominatimAdapter, OpenRouteServiceAdapter
from ride_config import RideCostConfig
from ride_errors import RideCostError
from ride_session import RideSession, SegmentResolver
from ride_store import ApiRideStore
from ride_structures import CostBreakdown, Vehicle

logger = logging.getLogger(__name__)


def format_distance(distance_km: float, estimated: bool) -> str:
    """Formats a distance as 'XX.X km', marking estimated distances with an asterisk."""
    distance_str = f"{distance_km:.1f} km"
    if estimated:
        return f"{distance_str}*"
    return distance_str


def format_money(amount: float) -> str:
    return f"Rs {amount:,.2f}"


def prompt_float(message: str, default: float, minimum: float | None = None,
                 allow_equal: bool = True) -> float:
    """Asks for a number until a valid one is entered."""
    while True:
        raw = input(f"{message} [Default: {default:g}]: ") or str(default)
        try:
            value = float(raw)
            if not math.isfinite(value):
                raise ValueError(raw)
        except ValueError:
            print("Invalid input. Please enter a number.")
            continue
        if minimum is not None and (value < minimum or (not allow_equal and value == minimum)):
            print(f"Please enter a number {'at least' if allow_equal else 'above'} {minimum:g}.")
            continue
        return value


# --- Core Logic ---

def start_session(resolver: SegmentResolver, vehicle: Vehicle) -> RideSession:
    """Keeps asking for the primary route until it resolves."""
    while True:
        start = input("Enter the Start Location: ")
        end = input("Enter the End Location: ")
        print("\nCalculating route...")
        try:
            return RideSession.start(resolver, vehicle, start, end)
        except RideCostError as e:
            print(f"   ! {e.user_message}")
            logger.debug(f"Route failed: {e}")


def collect_passengers(session: RideSession):
    """Adds passengers one at a time until a blank name is entered."""
    print("\nAdd passengers joining part of the route (leave the name blank to finish).")
    while True:
        name = input("\nPassenger Name: ").strip()
        if not name:
            return
        pickup = input("Pickup Location: ")
        drop = input("Drop Location: ")
        print("Calculating optimized cost...")
        try:
            passenger = session.add_passenger(name, pickup, drop)
        except RideCostError as e:
            print(f"   ! {e.user_message} {name} was not added.")
            continue
        print(f"   > Added {passenger.name}: "
              f"{format_distance(passenger.distance_km, passenger.segment.was_estimated)}, "
              f"{format_money(passenger.cost)}")


def display_results(session: RideSession, breakdown: CostBreakdown):
    """Formats and prints the cost breakdown."""
    route = session.route
    passengers = session.passengers

    print("\nHere is the cost breakdown.")
    print(f"Route: {route.start.address} -> {route.end.address}\n")

    any_estimated = route.was_estimated or any(
        p.segment.was_estimated for p in passengers)
    if any_estimated:
        print("NOTE: An asterisk (*) marks a distance estimated because the routing service was unavailable.\n")

    divider = "-" * 60
    print(divider)
    print(f"{'Total Distance:':<28}{breakdown.total_distance:.1f} km")
    print(f"{'Total Fuel Required:':<28}{breakdown.total_fuel_litres:.2f} litres")
    print(f"{'Primary Route:':<28}{format_distance(route.distance_km, route.was_estimated)}")
    print(f"{'Base Route Cost:':<28}{format_money(breakdown.base_cost)}")
    print(divider)

    if passengers:
        print("Passenger Breakdown")
        for p in passengers:
            print(f"  {p.name}")
            print(f"    {p.segment.start.address} -> {p.segment.end.address}")
            print(f"    Distance: {format_distance(p.distance_km, p.segment.was_estimated):<14}"
                  f"Cost: {format_money(breakdown.passenger_costs[p.id])}")
        print(divider)

    print(f"{'Total Cost:':<28}{format_money(breakdown.total_cost)}")
    if passengers:
        print("*Costs optimized based on route overlap and shared journey")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Ride Cost Calculator: split fuel and maintenance costs with passengers.")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose mode to see the exact API calls being made.")
    parser.add_argument('--save', action='store_true',
                        help="Save the finished ride to the ride API.")
    parser.add_argument('--offline-price', action='store_true',
                        help="Skip the fuel price feed and use the configured default.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = RideCostConfig.from_env()
        resolver = SegmentResolver(NominatimAdapter(config),
                                   OpenRouteServiceAdapter(config), config)
    except ValueError as e:
        print(e)
        return 1

    print("Welcome to the Ride Cost Calculator.")
    print("This tool splits the fuel and maintenance cost of a trip")
    print("between you and the passengers who join part of the way.\n")

    if args.offline_price:
        default_price = config.default_fuel_price
    else:
        quote = FuelPriceFeed(config).current_price()
        default_price = round(quote.price_per_litre, 2)
        if quote.was_estimated:
            print("Fuel price feed unavailable, using the default price.")

    mileage = prompt_float("Enter your vehicle's average mileage in km/L", 15,
                           minimum=0, allow_equal=False)
    price = prompt_float("Enter the fuel price per litre", default_price, minimum=0)
    vehicle = Vehicle(average_mileage_km_per_litre=mileage, fuel_price_per_litre=price)

    session = start_session(resolver, vehicle)
    collect_passengers(session)
    display_results(session, session.breakdown())

    if args.save:
        try:
            session.save(ApiRideStore(config))
            print("\nRide saved.")
        except RideCostError as e:
            print(f"\n{e.user_message}")
            return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
