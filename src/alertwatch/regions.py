"""Region membership lookups over the static region table."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .constants import ALL_REGIONS, REGIONS, Region


def region_of(location: str, regions: Mapping[str, Region] = REGIONS) -> str | None:
    for region in regions.values():
        if region.id != ALL_REGIONS and location in region.cities:
            return region.id
    return None


def _cities(region_id: str, regions: Mapping[str, Region]) -> frozenset[str]:
    return regions[region_id].cities


def matches(locations: Sequence[str], region_id: str, regions: Mapping[str, Region] = REGIONS) -> bool:
    """True for the wildcard region or when any location falls inside ``region_id``."""

    if region_id == ALL_REGIONS:
        return True
    cities = _cities(region_id, regions)
    return any(loc in cities for loc in locations)


def filter_locations(
    locations: tuple[str, ...], region_id: str, regions: Mapping[str, Region] = REGIONS
) -> tuple[str, ...]:
    """Keep the locations inside ``region_id`` in their original order.

    The wildcard region hands back ``locations`` itself.
    """

    if region_id == ALL_REGIONS:
        return locations
    cities = _cities(region_id, regions)
    return tuple(loc for loc in locations if loc in cities)


def count_in_region(locations: Sequence[str], region_id: str, regions: Mapping[str, Region] = REGIONS) -> int:
    if region_id == ALL_REGIONS:
        return len(locations)
    cities = _cities(region_id, regions)
    return sum(1 for loc in locations if loc in cities)
