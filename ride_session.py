# Resolves addresses into priced route segments and keeps the passengers of one ride.

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from api_adapters import LocationResolver, RouteDistanceResolver
from cost_allocator import allocate, quote_passenger, validate_distance, validate_vehicle
from ride_config import RideCostConfig
from ride_errors import (
    InvalidPassengerError,
    NoRouteFoundError,
    ResolverUnavailableError,
)
from ride_store import RideStore
from ride_structures import (
    CostBreakdown,
    DistanceResult,
    Location,
    Passenger,
    PassengerQuote,
    ResolutionStatus,
    RideMetrics,
    RouteSegment,
    Vehicle,
)

logger = logging.getLogger(__name__)


class SegmentResolver:
    """The single path from a pair of addresses to a RouteSegment.

    Geocoding failures always reach the caller, since there is no safe
    default for an address. A routing provider that cannot be reached is
    replaced by the configured default distance instead.
    """

    def __init__(self, locator: LocationResolver, router: RouteDistanceResolver,
                 config: RideCostConfig):
        self.locator = locator
        self.router = router
        self.config = config

    def resolve_locations(self, start_address: str, end_address: str) -> tuple[Location, Location]:
        """Geocodes both endpoints concurrently and waits for both."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            start = pool.submit(self.locator.resolve, start_address)
            end = pool.submit(self.locator.resolve, end_address)
            return start.result(), end.result()

    def resolve_distance(self, start: Location, end: Location) -> DistanceResult:
        try:
            km = self.router.distance(start.coordinates, end.coordinates)
            return DistanceResult(distance_km=km, status=ResolutionStatus.RESOLVED)
        except ResolverUnavailableError as e:
            logger.warning(
                f"Routing unavailable for '{start.address}' -> '{end.address}', "
                f"using default {self.config.default_distance_km} km: {e}")
            return DistanceResult(distance_km=self.config.default_distance_km,
                                  status=ResolutionStatus.ESTIMATED, error=e)
        except NoRouteFoundError as e:
            logger.info(f"No route for '{start.address}' -> '{end.address}': {e}")
            return DistanceResult(distance_km=None,
                                  status=ResolutionStatus.FAILED, error=e)

    def resolve_segment(self, start_address: str, end_address: str) -> RouteSegment:
        start, end = self.resolve_locations(start_address, end_address)
        result = self.resolve_distance(start, end)
        if not result.ok:
            raise result.error
        return RouteSegment(start=start, end=end,
                            distance_km=result.distance_km,
                            was_estimated=result.was_estimated)


class RideSession:
    """One vehicle, one primary route and the passengers added so far.

    Passengers are only ever appended. Quoting and appending happen under a
    per-session lock, because each new passenger's discount depends on the
    passengers already on board.
    """

    def __init__(self, vehicle: Vehicle, route: RouteSegment,
                 resolver: SegmentResolver | None = None):
        validate_vehicle(vehicle)
        self.vehicle = vehicle
        self.route = route
        self.resolver = resolver
        self._passengers: list[Passenger] = []
        self._lock = threading.Lock()
        validate_distance(route.distance_km)

    @classmethod
    def start(cls, resolver: SegmentResolver, vehicle: Vehicle,
              start_address: str, end_address: str) -> "RideSession":
        validate_vehicle(vehicle)
        route = resolver.resolve_segment(start_address, end_address)
        logger.info(
            f"Primary route {route.start.address} -> {route.end.address}: "
            f"{route.distance_km:.1f} km{' (estimated)' if route.was_estimated else ''}")
        return cls(vehicle, route, resolver)

    @property
    def passengers(self) -> tuple[Passenger, ...]:
        with self._lock:
            return tuple(self._passengers)

    def quote(self, segment: RouteSegment) -> PassengerQuote:
        with self._lock:
            return quote_passenger(self.route, self.vehicle, self._passengers, segment)

    def add_passenger(self, name: str, pickup_address: str, drop_address: str) -> Passenger:
        """Resolves a passenger's segment and adds them to the ride.

        Nothing is appended if any step fails.
        """
        name = self._check_name(name)
        if self.resolver is None:
            raise RuntimeError("This session has no segment resolver")
        segment = self.resolver.resolve_segment(pickup_address, drop_address)
        return self.add_resolved_passenger(name, segment)

    def add_resolved_passenger(self, name: str, segment: RouteSegment) -> Passenger:
        name = self._check_name(name)
        with self._lock:
            quote = quote_passenger(self.route, self.vehicle, self._passengers, segment)
            passenger = Passenger(name=name, segment=segment, cost=quote.cost)
            self._passengers.append(passenger)
        logger.info(
            f"Added passenger {name}: {segment.distance_km:.1f} km, "
            f"overlap {quote.overlap_discount:.2f}, cost {quote.cost:.2f}")
        return passenger

    def breakdown(self, pending: RouteSegment | None = None) -> CostBreakdown:
        with self._lock:
            return allocate(self.route, self.vehicle, self._passengers, pending)

    def to_metrics(self) -> RideMetrics:
        with self._lock:
            passengers = list(self._passengers)
        totals = allocate(self.route, self.vehicle, passengers)
        return RideMetrics(
            route=self.route,
            vehicle=self.vehicle,
            passengers=passengers,
            total_cost=totals.total_cost,
            cost_per_passenger=totals.passenger_costs,
            total_distance=totals.total_distance,
        )

    def save(self, store: RideStore) -> RideMetrics:
        metrics = self.to_metrics()
        store.save(metrics)
        return metrics

    @staticmethod
    def _check_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidPassengerError("Passenger name must not be empty")
        return name
