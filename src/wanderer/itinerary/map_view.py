"""
Map projection of an itinerary's spots.

Only spots carrying both coordinates become markers. The map centers on the first
such spot, or on the configured default center when none have coordinates.
"""

from __future__ import annotations

from wanderer.config.settings import MapCenter
from wanderer.domain.models import MapMarker, MapView, TouristSpot


def build_map_view(spots: list[TouristSpot], *, default_center: MapCenter) -> MapView:
    markers = [
        MapMarker(
            id=spot.id,
            name=spot.name,
            location=spot.location,
            lat=spot.latitude,
            lon=spot.longitude,
            description=spot.description,
            municipality=spot.municipality,
        )
        for spot in spots
        if spot.has_coordinates
    ]
    if markers:
        return MapView(center_lat=markers[0].lat, center_lon=markers[0].lon, markers=markers)
    return MapView(center_lat=default_center.lat, center_lon=default_center.lon, markers=[])
