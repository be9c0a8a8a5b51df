# Save/list contract for finalized rides, with an in-memory and an HTTP backend.
#
# Both backends deal in ride documents: the RideMetrics.to_dict() shape the
# ride API accepts and returns.

import logging
import threading
from abc import ABC, abstractmethod

from api_adapters import request_json
from ride_config import RideCostConfig
from ride_errors import ProviderRejectedError, ResolverUnavailableError, RideStoreError
from ride_structures import RideMetrics

logger = logging.getLogger(__name__)


class RideStore(ABC):

    @abstractmethod
    def save(self, metrics: RideMetrics) -> dict:
        """Persists one finalized ride and returns the stored document."""

    @abstractmethod
    def list(self) -> list[dict]:
        """Returns stored ride documents, newest first."""


class InMemoryRideStore(RideStore):
    """Keeps rides in process memory. Used by tests and offline runs."""

    def __init__(self):
        self._rides: list[dict] = []
        self._lock = threading.Lock()

    def save(self, metrics: RideMetrics) -> dict:
        document = metrics.to_dict()
        with self._lock:
            self._rides.append(document)
        return document

    def list(self) -> list[dict]:
        with self._lock:
            rides = list(self._rides)
        # createdAt is a UTC ISO timestamp, so string order is time order.
        return sorted(rides, key=lambda r: r["createdAt"], reverse=True)


class ApiRideStore(RideStore):
    """Stores rides through the ride API's ``/rides`` resource."""

    def __init__(self, config: RideCostConfig):
        self.config = config
        self.url = f"{config.ride_api_url.rstrip('/')}/rides"

    def save(self, metrics: RideMetrics) -> dict:
        saved = self._request("POST", "Saving ride", json=metrics.to_dict())
        if not isinstance(saved, dict):
            raise RideStoreError("Ride API returned an unexpected payload")
        logger.info(f"Saved ride with total cost {metrics.total_cost:.2f}")
        return saved

    def list(self) -> list[dict]:
        rides = self._request("GET", "Listing rides")
        if not isinstance(rides, list):
            raise RideStoreError("Ride API returned an unexpected payload")
        return rides

    def _request(self, method: str, operation_name: str, **kwargs):
        try:
            return request_json(method, self.url, self.config,
                                operation_name=operation_name,
                                client_error=RideStoreError, **kwargs)
        except (ResolverUnavailableError, ProviderRejectedError) as e:
            raise RideStoreError(f"Ride API unavailable: {e}", details=e.details) from e
