"""Position acquisition with a precise-then-relaxed fallback."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.constants import (
    HIGH_ACCURACY_TIMEOUT_SECONDS,
    RELAXED_MAXIMUM_AGE_SECONDS,
    RELAXED_TIMEOUT_SECONDS,
)
from ..core.exceptions import LocationCancelledError, LocationUnavailableError
from .model import GeoPoint

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    def get_position(self, *, high_accuracy: bool, timeout_s: float, maximum_age_s: float) -> GeoPoint:
        """Return a fix or raise LocationUnavailableError."""

        raise NotImplementedError


@dataclass(frozen=True)
class PositionRequest:
    high_accuracy: bool
    timeout_s: float
    maximum_age_s: float


HIGH_ACCURACY = PositionRequest(high_accuracy=True, timeout_s=HIGH_ACCURACY_TIMEOUT_SECONDS, maximum_age_s=0.0)
RELAXED = PositionRequest(
    high_accuracy=False,
    timeout_s=RELAXED_TIMEOUT_SECONDS,
    maximum_age_s=RELAXED_MAXIMUM_AGE_SECONDS,
)


def _raise_if_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise LocationCancelledError("Location request was cancelled")


def acquire_position(provider: LocationProvider, *, cancel: Optional[threading.Event] = None) -> GeoPoint:
    """Try a high-accuracy fix, then retry once with relaxed accuracy.

    The cancel event is honoured before each attempt and after each result;
    a cancelled acquisition never returns a position.
    """

    last_error: Optional[LocationUnavailableError] = None
    for request in (HIGH_ACCURACY, RELAXED):
        _raise_if_cancelled(cancel)
        try:
            point = provider.get_position(
                high_accuracy=request.high_accuracy,
                timeout_s=request.timeout_s,
                maximum_age_s=request.maximum_age_s,
            )
        except LocationCancelledError:
            raise
        except LocationUnavailableError as e:
            logger.debug("position attempt failed (high_accuracy=%s): %s", request.high_accuracy, e)
            last_error = e
            continue
        _raise_if_cancelled(cancel)
        return point

    raise LocationUnavailableError(str(last_error) if last_error else "Location unavailable")


class StaticLocationProvider:
    """Provider over coordinates already captured by the client device."""

    def __init__(self, lat: Optional[float], lng: Optional[float]):
        self._lat = lat
        self._lng = lng

    def get_position(self, *, high_accuracy: bool, timeout_s: float, maximum_age_s: float) -> GeoPoint:
        if self._lat is None or self._lng is None:
            raise LocationUnavailableError("No coordinates supplied")
        try:
            lat = float(self._lat)
            lng = float(self._lng)
        except (TypeError, ValueError):
            raise LocationUnavailableError("Coordinates are not numeric")
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise LocationUnavailableError("Coordinates are not finite")
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            raise LocationUnavailableError("Coordinates are out of bounds")
        return GeoPoint(lat=lat, lng=lng)
