"""
Procedural US geography: states, metros and sub-metro cells.

Nothing here is stored. Each level is a pure function of its parent, so
recomputing from the same parent always yields the same children.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from .rng import MASK_32, SeededStream, hash_string

logger = logging.getLogger(__name__)

CLIMATE_ARCHETYPES = (
    "marine_west",
    "mediterranean",
    "desert",
    "humid_subtropical",
    "humid_continental",
    "mountain",
)

# region -> (center (lat, lng), spread (lat, lng), member states)
REGIONS: Dict[str, Tuple[Tuple[float, float], Tuple[float, float], Tuple[str, ...]]] = {
    "WEST": (
        (39.0, -119.0),
        (6.0, 8.0),
        ("WA", "OR", "CA", "NV", "ID", "UT", "AZ", "NM", "CO", "MT", "WY", "AK", "HI"),
    ),
    "MIDWEST": (
        (41.0, -93.0),
        (5.0, 6.0),
        ("ND", "SD", "NE", "KS", "MN", "IA", "MO", "WI", "IL", "MI", "IN", "OH"),
    ),
    "SOUTH": (
        (33.0, -86.0),
        (5.0, 7.0),
        ("OK", "TX", "AR", "LA", "MS", "AL", "GA", "FL", "SC", "NC", "TN", "KY", "VA", "WV"),
    ),
    "NORTHEAST": (
        (42.0, -73.0),
        (3.0, 4.0),
        ("PA", "NY", "NJ", "CT", "RI", "MA", "VT", "NH", "ME", "DC", "MD", "DE"),
    ),
}

STATE_NAMES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut",
    "DC": "District of Columbia", "DE": "Delaware", "FL": "Florida",
    "GA": "Georgia", "HI": "Hawaii", "IA": "Iowa", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "KS": "Kansas", "KY": "Kentucky",
    "LA": "Louisiana", "MA": "Massachusetts", "MD": "Maryland", "ME": "Maine",
    "MI": "Michigan", "MN": "Minnesota", "MO": "Missouri", "MS": "Mississippi",
    "MT": "Montana", "NC": "North Carolina", "ND": "North Dakota",
    "NE": "Nebraska", "NH": "New Hampshire", "NJ": "New Jersey",
    "NM": "New Mexico", "NV": "Nevada", "NY": "New York", "OH": "Ohio",
    "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania",
    "RI": "Rhode Island", "SC": "South Carolina", "SD": "South Dakota",
    "TN": "Tennessee", "TX": "Texas", "UT": "Utah", "VA": "Virginia",
    "VT": "Vermont", "WA": "Washington", "WI": "Wisconsin",
    "WV": "West Virginia", "WY": "Wyoming",
}

DESERT_STATES = frozenset({"AZ", "NV", "NM"})
MOUNTAIN_STATES = frozenset({"CO", "WY", "MT", "UT", "ID"})
# West coast simplified
MEDITERRANEAN_STATES = frozenset({"CA", "OR"})
COASTAL_STATES = frozenset(
    {
        "WA", "OR", "CA", "AK", "HI", "TX", "LA", "MS", "AL", "FL", "GA", "SC",
        "NC", "VA", "MD", "DE", "NJ", "NY", "CT", "RI", "MA", "NH", "ME",
    }
)

METRO_ADJECTIVES = (
    "Central", "North", "South", "East", "West", "Heights", "Valley", "Coastal", "Inland",
)
METRO_NOUNS = ("Metro", "Hub", "Corridor", "Basin", "Plain", "Ridge")


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float
    region: str
    climate: str
    coastal: bool


@dataclass(frozen=True)
class USState:
    code: str
    name: str
    lat: float
    lng: float
    region: str
    climate: str
    coastal: bool

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng, self.region, self.climate, self.coastal)


@dataclass(frozen=True)
class Metro:
    id: str
    state_code: str
    name: str
    lat: float
    lng: float
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class Cell:
    id: str
    metro_id: str
    lat: float
    lng: float
    tags: Tuple[str, ...]


def derive_climate(code: str, region: str) -> str:
    if code in DESERT_STATES:
        return "desert"
    if code in MOUNTAIN_STATES:
        return "mountain"
    if code in MEDITERRANEAN_STATES:
        return "mediterranean"
    if region == "WEST":
        return "marine_west"
    if region == "SOUTH":
        return "humid_subtropical"
    return "humid_continental"


@lru_cache(maxsize=None)
def derive_states() -> Tuple[USState, ...]:
    """All states with procedurally jittered centroids around their region center."""
    states: List[USState] = []
    for region, (center, spread, codes) in REGIONS.items():
        for code in codes:
            rnd = SeededStream(hash_string(f"{region}-{code}"))
            lat = center[0] + rnd.jitter(spread[0])
            lng = center[1] + rnd.jitter(spread[1])
            states.append(
                USState(
                    code=code,
                    name=STATE_NAMES.get(code, code),
                    lat=lat,
                    lng=lng,
                    region=region,
                    climate=derive_climate(code, region),
                    coastal=code in COASTAL_STATES,
                )
            )
    logger.debug(f"Derived {len(states)} state centroids")
    return tuple(states)


def state_by_code(code: str) -> USState:
    for state in derive_states():
        if state.code == code.upper():
            return state
    raise KeyError(f"Unknown state code '{code}'.")


def metros_for_state(state: USState) -> List[Metro]:
    """3-6 metros per state, jittered +/-0.9 lat and +/-1.2 lng around the centroid."""
    count = max(3, min(6, (len(state.name) % 6) + 3))
    base_seed = hash_string(f"metro:{state.code}:{state.lat!r}:{state.lng!r}")
    prefix = state.name.split(" ")[0]
    metros: List[Metro] = []
    for i in range(count):
        rnd = SeededStream((base_seed + i) & MASK_32)
        lat = state.lat + rnd.jitter(1.8)
        lng = state.lng + rnd.jitter(2.4)
        name = f"{prefix} {rnd.choice(METRO_ADJECTIVES)} {rnd.choice(METRO_NOUNS)}"
        tags = []
        if state.coastal and rnd() > 0.4:
            tags.append("coastal")
        if state.climate == "mountain" and rnd() > 0.4:
            tags.append("mountain")
        if rnd() > 0.6:
            tags.append("urban")
        if rnd() > 0.7:
            tags.append("inland")
        metros.append(
            Metro(
                id=f"{state.code}-M{i + 1}",
                state_code=state.code,
                name=name,
                lat=lat,
                lng=lng,
                tags=tuple(tags),
            )
        )
    return metros


def cells_for_metro(metro: Metro) -> List[Cell]:
    """3-5 small cells within +/-0.3 degrees of the metro centroid."""
    count = 3 + hash_string(metro.id) % 3
    base_seed = hash_string(f"cell:{metro.id}")
    cells: List[Cell] = []
    for i in range(count):
        rnd = SeededStream((base_seed + i) & MASK_32)
        lat = metro.lat + rnd.jitter(0.6)
        lng = metro.lng + rnd.jitter(0.6)
        tag = "urban" if rnd() > 0.5 else "suburban"
        cells.append(
            Cell(id=f"{metro.id}-C{i + 1}", metro_id=metro.id, lat=lat, lng=lng, tags=(tag,))
        )
    return cells


def metro_by_id(metro_id: str) -> Metro:
    state_code = metro_id.split("-")[0]
    for metro in metros_for_state(state_by_code(state_code)):
        if metro.id == metro_id:
            return metro
    raise KeyError(f"Unknown metro id '{metro_id}'.")


def cell_by_id(cell_id: str) -> Cell:
    metro_id = cell_id.rsplit("-", 1)[0]
    for cell in cells_for_metro(metro_by_id(metro_id)):
        if cell.id == cell_id:
            return cell
    raise KeyError(f"Unknown cell id '{cell_id}'.")


def resolve_point(
    state_code: str,
    metro_id: Optional[str] = None,
    cell_id: Optional[str] = None,
) -> GeoPoint:
    """
    Resolve the forecast point for a place in the hierarchy.

    Metros and cells keep their state's region, climate archetype and
    coastal flag; only the coordinates change.
    """
    state = state_by_code(state_code)
    if cell_id is not None:
        cell = cell_by_id(cell_id)
        lat, lng = cell.lat, cell.lng
    elif metro_id is not None:
        metro = metro_by_id(metro_id)
        lat, lng = metro.lat, metro.lng
    else:
        return state.point
    return GeoPoint(lat, lng, state.region, state.climate, state.coastal)


__all__ = [
    "CLIMATE_ARCHETYPES",
    "Cell",
    "GeoPoint",
    "Metro",
    "REGIONS",
    "USState",
    "cell_by_id",
    "cells_for_metro",
    "derive_climate",
    "derive_states",
    "metro_by_id",
    "metros_for_state",
    "resolve_point",
    "state_by_code",
]
