"""Map surface backed by folium; renders the current marker set to Leaflet HTML."""

from __future__ import annotations

from dataclasses import dataclass
import itertools
import logging
import math
from pathlib import Path

import folium

from .constants import MAP_CENTER, MAP_ZOOM

LOGGER = logging.getLogger(__name__)

TILES_URL = "https://{s}.basemaps.cartocdn.com/rastertiles/voyager/{z}/{x}/{y}{r}.png"
TILES_ATTRIBUTION = (
    '&copy; <a href="https://openstreetmap.org/copyright">OpenStreetMap</a> '
    '&copy; <a href="https://carto.com/attributions">CARTO</a>'
)

LatLng = tuple[float, float]


def marker_icon_html(color: str) -> str:
    return (
        f'<div style="width:18px;height:18px;border-radius:50%;background:{color};'
        f'border:3px solid #fff;box-shadow:0 0 0 2px {color}88"></div>'
    )


@dataclass(slots=True)
class MarkerSpec:
    position: LatLng
    color: str
    popup_html: str
    popup_open: bool = False


class FoliumMapSurface:
    """In-memory marker set and view; ``build()`` turns them into a ``folium.Map``."""

    def __init__(self, center: LatLng = MAP_CENTER, zoom: int = MAP_ZOOM):
        self.center = center
        self.zoom = zoom
        self.bounds: tuple[LatLng, LatLng] | None = None
        self.max_zoom: int | None = None
        self.markers: dict[int, MarkerSpec] = {}
        self.revision = 0
        self._ids = itertools.count(1)

    def _touch(self) -> None:
        self.revision += 1

    def add_marker(self, position: LatLng, *, color: str, popup_html: str) -> int:
        marker_id = next(self._ids)
        self.markers[marker_id] = MarkerSpec(position, color, popup_html)
        self._touch()
        return marker_id

    def remove_marker(self, marker: int) -> None:
        if self.markers.pop(marker, None) is not None:
            self._touch()

    def marker_position(self, marker: int) -> LatLng:
        return self.markers[marker].position

    def fit_bounds(self, bounds: tuple[LatLng, LatLng], *, max_zoom: int) -> None:
        (south, west), (north, east) = bounds
        if not all(math.isfinite(v) for v in (south, west, north, east)):
            raise ValueError(f"non-finite bounds: {bounds}")
        if south > north or west > east:
            raise ValueError(f"inverted bounds: {bounds}")

        if south == north and west == east:
            self.set_view((south, west), max_zoom)
            return
        self.bounds = bounds
        self.max_zoom = max_zoom
        self._touch()

    def set_view(self, center: LatLng, zoom: int) -> None:
        self.center = center
        self.zoom = zoom
        self.bounds = None
        self._touch()

    def open_popup(self, marker: int) -> None:
        for marker_id, item in self.markers.items():
            item.popup_open = marker_id == marker
        self._touch()

    def invalidate_size(self) -> None:
        # Size is fixed by the HTML container; nothing to recompute.
        self._touch()

    def build(self) -> folium.Map:
        fmap = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
        folium.TileLayer(
            tiles=TILES_URL,
            attr=TILES_ATTRIBUTION,
            name="CARTO Voyager",
            subdomains="abcd",
            max_zoom=19,
        ).add_to(fmap)

        for item in self.markers.values():
            folium.Marker(
                location=list(item.position),
                icon=folium.DivIcon(
                    html=marker_icon_html(item.color),
                    icon_size=(18, 18),
                    icon_anchor=(9, 9),
                ),
                popup=folium.Popup(item.popup_html, show=item.popup_open),
            ).add_to(fmap)

        if self.bounds is not None:
            (south, west), (north, east) = self.bounds
            fmap.fit_bounds([[south, west], [north, east]], max_zoom=self.max_zoom)
        return fmap

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.build().save(str(path))
        LOGGER.debug("Map written to %s (%s markers)", path, len(self.markers))
