# Configuration for the provider adapters and fallback values.
#
# Keys and endpoints are read from environment variables (optionally via a
# .env file) and passed explicitly into every adapter; nothing is hard-coded.

import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from request_retry import RetryConfig


@dataclass(frozen=True)
class RideCostConfig:
    ors_api_key: str = ""
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    geocode_country_codes: str = "in"
    geocode_user_agent: str = "ride-cost-share/1.0"
    ors_url: str = "https://api.openrouteservice.org/v2/directions/driving-car"
    ride_api_url: str = "http://localhost:5000/api"
    request_timeout: float = 10.0
    request_max_attempts: int = 3
    request_retry_delay: float = 1.0
    default_distance_km: float = 10.0
    default_fuel_price: float = 100.0

    def __post_init__(self):
        if self.request_max_attempts < 1:
            raise ValueError(
                f"FATAL ERROR: REQUEST_MAX_ATTEMPTS must be at least 1, got {self.request_max_attempts}.")
        if not math.isfinite(self.request_timeout) or self.request_timeout <= 0:
            raise ValueError(
                f"FATAL ERROR: REQUEST_TIMEOUT must be a positive number, got {self.request_timeout}.")
        for name in ("request_retry_delay", "default_distance_km", "default_fuel_price"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(
                    f"FATAL ERROR: {name.upper()} must be a non-negative number, got {value}.")

    @property
    def retry(self) -> RetryConfig:
        return RetryConfig(max_attempts=self.request_max_attempts,
                           delay=self.request_retry_delay)

    @classmethod
    def from_env(cls) -> "RideCostConfig":
        """Builds a config from the environment, falling back to the defaults above."""
        load_dotenv()
        defaults = cls()
        return cls(
            ors_api_key=os.getenv("ORS_API_KEY", defaults.ors_api_key),
            nominatim_url=os.getenv("NOMINATIM_URL", defaults.nominatim_url),
            geocode_country_codes=os.getenv(
                "GEOCODE_COUNTRY_CODES", defaults.geocode_country_codes),
            geocode_user_agent=os.getenv(
                "GEOCODE_USER_AGENT", defaults.geocode_user_agent),
            ors_url=os.getenv("ORS_URL", defaults.ors_url),
            ride_api_url=os.getenv("RIDE_API_URL", defaults.ride_api_url),
            request_timeout=_env_number(
                "REQUEST_TIMEOUT", defaults.request_timeout, float),
            request_max_attempts=_env_number(
                "REQUEST_MAX_ATTEMPTS", defaults.request_max_attempts, int),
            request_retry_delay=_env_number(
                "REQUEST_RETRY_DELAY", defaults.request_retry_delay, float),
            default_distance_km=_env_number(
                "DEFAULT_DISTANCE_KM", defaults.default_distance_km, float),
            default_fuel_price=_env_number(
                "DEFAULT_FUEL_PRICE", defaults.default_fuel_price, float),
        )


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(
            f"FATAL ERROR: The {name} environment variable must be a number, got '{raw}'.") from None
