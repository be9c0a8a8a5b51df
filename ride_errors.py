# Exception hierarchy for the ride cost engine.
#
# Transient errors may succeed on retry; permanent errors never will. Every
# class carries a short message the front end can show the user as-is.

from typing import Any


class RideCostError(Exception):
    """Base exception for all ride cost errors."""
    user_message = "Something went wrong while calculating the ride cost."

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransientError(RideCostError):
    """Errors that may succeed on retry."""


class ResolverUnavailableError(TransientError):
    """Geocoding, routing or record service timed out, refused or returned 5xx."""
    user_message = "The map service is not responding right now. Please try again shortly."


class PermanentError(RideCostError):
    """Errors that will not succeed on retry."""


class ProviderRejectedError(PermanentError):
    """The provider refused the request (bad key, usage policy block)."""
    user_message = "The map service refused the request. Check the API key and settings."


class LocationNotFoundError(PermanentError):
    user_message = "We couldn't find that address. Please check it and try again."


class NoRouteFoundError(PermanentError):
    """The routing provider answered but gave no usable route."""
    user_message = "No drivable route was found between those locations."


class InvalidAddressError(PermanentError, ValueError):
    user_message = "Please enter an address."


class InvalidVehicleError(PermanentError, ValueError):
    user_message = "Mileage must be above zero and fuel price cannot be negative."


class InvalidSegmentError(PermanentError, ValueError):
    user_message = "The route distance is invalid."


class InvalidPassengerError(PermanentError, ValueError):
    user_message = "Please fill in the passenger's name."


class RideStoreError(PermanentError):
    user_message = "The ride could not be saved."
