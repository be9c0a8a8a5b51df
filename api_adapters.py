# Contains the adapter classes for communicating with external mapping and ride APIs.

import logging
from abc import ABC, abstractmethod

import requests

from request_retry import with_retry
from ride_config import RideCostConfig
from ride_errors import (
    InvalidAddressError,
    LocationNotFoundError,
    NoRouteFoundError,
    ProviderRejectedError,
    RideCostError,
    ResolverUnavailableError,
)
from ride_structures import Coordinates, FuelPriceQuote, Location, is_finite_number

logger = logging.getLogger(__name__)


class LocationResolver(ABC):
    """Blueprint for geocoding clients."""

    @abstractmethod
    def resolve(self, address: str) -> Location:
        """Converts a free-text address into a Location with coordinates."""


class RouteDistanceResolver(ABC):
    """Blueprint for routing clients."""

    @abstractmethod
    def distance(self, origin: Coordinates, destination: Coordinates) -> float:
        """Returns the road distance in kilometres between two coordinates."""


def request_json(method: str, url: str, config: RideCostConfig,
                 operation_name: str,
                 client_error: type[RideCostError] = RideCostError,
                 **kwargs):
    """Sends one HTTP request with the configured timeout and retry policy.

    Timeouts, connection failures, 429 and 5xx responses are retried and end
    as ResolverUnavailableError. 401 and 403 raise ProviderRejectedError. Any
    other non-2xx status, or a body that is not JSON, raises ``client_error``.
    Only the transient cases are retried.
    """
    def attempt():
        try:
            response = requests.request(
                method, url, timeout=config.request_timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise ResolverUnavailableError(
                f"{operation_name} timed out after {config.request_timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise ResolverUnavailableError(
                f"{operation_name} network error: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise ResolverUnavailableError(
                f"{operation_name} failed with status {response.status_code}",
                details={"status_code": response.status_code})
        if response.status_code in (401, 403):
            raise ProviderRejectedError(
                f"{operation_name} refused with status {response.status_code}",
                details={"status_code": response.status_code})
        if response.status_code >= 400:
            raise client_error(
                f"{operation_name} rejected with status {response.status_code}",
                details={"status_code": response.status_code})
        try:
            return response.json()
        except ValueError as e:
            raise client_error(f"{operation_name} returned a non-JSON body") from e

    return with_retry(attempt, config.retry, operation_name=operation_name)


class NominatimAdapter(LocationResolver):
    """The adapter for the OpenStreetMap Nominatim geocoder."""

    def __init__(self, config: RideCostConfig):
        self.config = config

    def resolve(self, address: str) -> Location:
        query = (address or "").strip()
        if not query:
            raise InvalidAddressError("Address must not be empty")

        logger.debug(f"[Nominatim] Geocoding address: '{query}'...")
        params = {
            'q': query,
            'format': 'json',
            'limit': 1,
        }
        if self.config.geocode_country_codes:
            params['countrycodes'] = self.config.geocode_country_codes
        data = request_json(
            "GET", self.config.nominatim_url, self.config,
            operation_name=f"Geocoding '{query}'",
            client_error=LocationNotFoundError,
            params=params,
            headers={'User-Agent': self.config.geocode_user_agent},
        )

        if not isinstance(data, list) or not data:
            logger.info(f"No coordinates found for address: {query}")
            raise LocationNotFoundError(
                f"No coordinates found for address: {query}",
                details={"address": query})
        try:
            top = data[0]
            lat, lng = float(top['lat']), float(top['lon'])
            # Out-of-range values are rejected by Coordinates itself.
            return Location(lat=lat, lng=lng,
                            address=top.get('display_name') or query)
        except (KeyError, TypeError, ValueError) as e:
            raise LocationNotFoundError(
                f"Could not parse geocoding result for: {query}",
                details={"address": query}) from e


class OpenRouteServiceAdapter(RouteDistanceResolver):
    """The adapter for the OpenRouteService driving directions API."""

    def __init__(self, config: RideCostConfig):
        if not config.ors_api_key:
            raise ValueError(
                "FATAL ERROR: The ORS_API_KEY environment variable is not set.")
        self.config = config

    def distance(self, origin: Coordinates, destination: Coordinates) -> float:
        # OpenRouteService takes lng,lat order.
        params = {
            'api_key': self.config.ors_api_key,
            'start': f"{origin.lng},{origin.lat}",
            'end': f"{destination.lng},{destination.lat}",
        }
        logger.debug(
            f"[ORS] Routing {origin.lat},{origin.lng} -> {destination.lat},{destination.lng}")
        data = request_json(
            "GET", self.config.ors_url, self.config,
            operation_name="Route calculation",
            client_error=NoRouteFoundError,
            params=params,
        )

        try:
            meters = data['features'][0]['properties']['summary']['distance']
        except (KeyError, IndexError, TypeError) as e:
            raise NoRouteFoundError("No route feature in routing response") from e
        if not is_finite_number(meters) or meters < 0:
            raise NoRouteFoundError(f"Invalid distance value received: {meters!r}")
        return meters / 1000


class FuelPriceFeed:
    """Client for the fuel price endpoint of the ride API.

    An unreachable or malformed feed yields the configured default price,
    flagged as estimated.
    """

    def __init__(self, config: RideCostConfig):
        self.config = config

    def current_price(self) -> FuelPriceQuote:
        url = f"{self.config.ride_api_url.rstrip('/')}/fuel-prices"
        try:
            data = request_json("GET", url, self.config,
                                operation_name="Fuel price lookup")
        except RideCostError as e:
            return self._default_quote(e)

        price = data.get('price') if isinstance(data, dict) else None
        if not is_finite_number(price) or price < 0:
            return self._default_quote(f"invalid fuel price {price!r}")
        return FuelPriceQuote(price_per_litre=float(price),
                              currency=data.get('currency', 'INR'))

    def _default_quote(self, reason) -> FuelPriceQuote:
        logger.warning(
            f"Fuel price feed unavailable, using default "
            f"{self.config.default_fuel_price}: {reason}")
        return FuelPriceQuote(price_per_litre=self.config.default_fuel_price,
                              was_estimated=True)
