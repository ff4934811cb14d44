from __future__ import annotations

from dataclasses import dataclass

from .distance import distance_meters


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate pair in decimal degrees."""

    lat: float
    lng: float

    def distance_to(self, other: "GeoPoint") -> float:
        return distance_meters(self.lat, self.lng, other.lat, other.lng)

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}
