from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

OccupancyQuery = Callable[[str], int]


@dataclass(frozen=True)
class Yard:
    id: str
    name: str
    capacity: int
    city: str | None = None
    province: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class YardRegistry:
    """Static lookup from yard id to its configuration."""

    def __init__(self, yards: Iterable[Yard]) -> None:
        self._yards = {yard.id: yard for yard in yards}

    def ids(self) -> frozenset[str]:
        return frozenset(self._yards)

    def capacity_of(self, yard_id: str) -> int | None:
        yard = self._yards.get(yard_id)
        return yard.capacity if yard else None


DEFAULT_YARDS = (
    Yard(id="yard1", name="Downtown Yard", capacity=50, city="Toronto", province="ON", latitude=43.65107, longitude=-79.347015),
    Yard(id="yard2", name="Uptown Yard", capacity=75, city="Toronto", province="ON", latitude=43.662892, longitude=-79.395656),
    Yard(id="yard3", name="Midtown Yard", capacity=60, city="Toronto", province="ON", latitude=43.667709, longitude=-79.394777),
)

default_registry = YardRegistry(DEFAULT_YARDS)
