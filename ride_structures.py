# Defines the standardized, internal data structures for the ride cost engine.

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


@dataclass(frozen=True)
class Coordinates:
    """A standardized representation of geographic coordinates."""
    lat: float
    lng: float

    def __post_init__(self):
        if not (-90 <= self.lat <= 90 and -180 <= self.lng <= 180):
            raise ValueError(
                f"Coordinates out of range: lat={self.lat}, lng={self.lng}")


@dataclass(frozen=True)
class Location(Coordinates):
    """Coordinates plus the address they were resolved from.

    Coordinates may be zero-valued placeholders until the address is resolved.
    """
    address: str = ""

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng)

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng, "address": self.address}


@dataclass(frozen=True)
class RouteSegment:
    """A pickup/drop pair plus its road distance."""
    start: Location
    end: Location
    distance_km: float
    # True when the routing provider was unreachable and the default was used.
    was_estimated: bool = False


@dataclass(frozen=True)
class Vehicle:
    """Fuel economy and fuel price for one cost calculation session."""
    average_mileage_km_per_litre: float
    fuel_price_per_litre: float


@dataclass(frozen=True)
class Passenger:
    """A rider on part of the route; cost is always derived, never entered."""
    name: str
    segment: RouteSegment
    cost: float
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def distance_km(self) -> float:
        return self.segment.distance_km


class ResolutionStatus(Enum):
    RESOLVED = "resolved"
    ESTIMATED = "estimated"
    FAILED = "failed"


@dataclass
class DistanceResult:
    """Outcome of a distance lookup: a real distance, a default, or a failure."""
    distance_km: float | None
    status: ResolutionStatus
    error: Exception | None = None

    @property
    def was_estimated(self) -> bool:
        return self.status is ResolutionStatus.ESTIMATED

    @property
    def ok(self) -> bool:
        return self.status is not ResolutionStatus.FAILED


@dataclass
class FuelPriceQuote:
    price_per_litre: float
    currency: str = "INR"
    was_estimated: bool = False


@dataclass
class PassengerQuote:
    """The priced terms for a passenger segment that has not been added yet."""
    segment: RouteSegment
    base_cost: float
    overlap_discount: float
    cost_multiplier: float
    cost: float


@dataclass
class CostBreakdown:
    """Cost of the primary route plus every passenger already on board."""
    fuel_cost: float
    maintenance_cost: float
    base_cost: float
    total_distance: float
    total_fuel_litres: float
    passenger_costs: dict[str, float]
    total_cost: float
    pending: PassengerQuote | None = None


@dataclass
class RideMetrics:
    """A finalized ride, as handed to the ride record store."""
    route: RouteSegment
    vehicle: Vehicle
    passengers: list[Passenger]
    total_cost: float
    cost_per_passenger: dict[str, float]
    total_distance: float
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "route": {
                "startLocation": self.route.start.to_dict(),
                "endLocation": self.route.end.to_dict(),
                "distance": self.route.distance_km,
            },
            "passengers": [
                {
                    "id": p.id,
                    "name": p.name,
                    "pickupLocation": p.segment.start.to_dict(),
                    "dropLocation": p.segment.end.to_dict(),
                    "distance": p.distance_km,
                    "cost": p.cost,
                }
                for p in self.passengers
            ],
            "vehicle": {
                "averageMileage": self.vehicle.average_mileage_km_per_litre,
                "fuelPrice": self.vehicle.fuel_price_per_litre,
            },
            "totalCost": self.total_cost,
            "costPerPassenger": dict(self.cost_per_passenger),
            "totalDistance": self.total_distance,
            "createdAt": self.created_at.isoformat(),
        }


def is_finite_number(value) -> bool:
    """True for real, finite numbers (bools excluded)."""
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))
