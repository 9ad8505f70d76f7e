"""Marker lifecycle on a map surface."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from html import escape
import logging
from typing import Protocol

from .constants import (
    ALL_REGIONS,
    FIT_MAX_ZOOM,
    FIT_PADDING,
    FOCUS_EPSILON,
    FOCUS_ZOOM,
    LOCS,
    category_for,
)
from .model import Alert
from .regions import filter_locations

LOGGER = logging.getLogger(__name__)

LatLng = tuple[float, float]
Bounds = tuple[LatLng, LatLng]


class MapSurface(Protocol):
    def add_marker(self, position: LatLng, *, color: str, popup_html: str) -> Hashable: ...

    def remove_marker(self, marker: Hashable) -> None: ...

    def marker_position(self, marker: Hashable) -> LatLng: ...

    def fit_bounds(self, bounds: Bounds, *, max_zoom: int) -> None: ...

    def set_view(self, center: LatLng, zoom: int) -> None: ...

    def open_popup(self, marker: Hashable) -> None: ...

    def invalidate_size(self) -> None: ...


def padded_bounds(points: list[LatLng], ratio: float = FIT_PADDING) -> Bounds:
    """Bounding box of ``points`` grown by ``ratio`` of its span on each side."""

    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    south, north = min(lats), max(lats)
    west, east = min(lons), max(lons)
    lat_pad = (north - south) * ratio
    lon_pad = (east - west) * ratio
    return (south - lat_pad, west - lon_pad), (north + lat_pad, east + lon_pad)


def popup_html(name: str, alert: Alert) -> str:
    cat = category_for(alert.category)
    parts = [
        '<div dir="rtl" style="text-align:right;min-width:120px">',
        f'<strong style="display:block;font-size:0.93em">{escape(name)}</strong>',
        f'<div style="color:{cat.color};font-size:0.8em;margin-top:2px">{cat.icon} {escape(alert.title)}</div>',
    ]
    if alert.description:
        parts.append(f'<div style="color:#888;font-size:0.77em;margin-top:1px">{escape(alert.description)}</div>')
    parts.append("</div>")
    return "".join(parts)


class MarkerRenderer:
    """Owns every marker on the surface; nothing else adds or removes them."""

    def __init__(
        self,
        surface: MapSurface,
        locations: Mapping[str, LatLng] = LOCS,
        padding: float = FIT_PADDING,
        max_zoom: int = FIT_MAX_ZOOM,
        focus_zoom: int = FOCUS_ZOOM,
        epsilon: float = FOCUS_EPSILON,
    ):
        self.surface = surface
        self.locations = locations
        self.padding = padding
        self.max_zoom = max_zoom
        self.focus_zoom = focus_zoom
        self.epsilon = epsilon
        self._markers: list[Hashable] = []

    @property
    def marker_count(self) -> int:
        return len(self._markers)

    def clear(self) -> None:
        markers, self._markers = self._markers, []
        for marker in markers:
            self.surface.remove_marker(marker)

    def place(self, alert: Alert, region_id: str = ALL_REGIONS) -> int:
        """Add one marker per located, in-region location and fit the view to them."""

        color = category_for(alert.category).color
        placed = 0
        for name in filter_locations(alert.locations, region_id):
            position = self.locations.get(name)
            if position is None:
                continue
            marker = self.surface.add_marker(position, color=color, popup_html=popup_html(name, alert))
            self._markers.append(marker)
            placed += 1

        if self._markers:
            points = [self.surface.marker_position(m) for m in self._markers]
            try:
                self.surface.fit_bounds(padded_bounds(points, self.padding), max_zoom=self.max_zoom)
            except Exception as exc:  # noqa: BLE001
                LOGGER.debug("fit_bounds failed, keeping previous view: %s", exc)
        return placed

    def render(self, alert: Alert | None, region_id: str = ALL_REGIONS) -> int:
        self.clear()
        if alert is None:
            return 0
        return self.place(alert, region_id)

    def focus(self, name: str) -> bool:
        position = self.locations.get(name)
        if position is None:
            return False

        try:
            self.surface.set_view(position, self.focus_zoom)
            for marker in self._markers:
                lat, lon = self.surface.marker_position(marker)
                if abs(lat - position[0]) < self.epsilon and abs(lon - position[1]) < self.epsilon:
                    self.surface.open_popup(marker)
                    break
        except Exception as exc:  # noqa: BLE001
            LOGGER.debug("focus on %s failed: %s", name, exc)
        return True

    def resize(self) -> None:
        self.surface.invalidate_size()
