"""
Region Data Structures

Data classes representing protected regions and their properties.

Geometry is a closed union: every region holds exactly one of Cuboid or
Polygon. Parent links are stored as ids and resolved through the RegionSet
that owns the region, never as direct object references.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from .exceptions import CircularInheritanceError
from .region_types import RegionType, FlagState, DEFAULT_MIN_Y, DEFAULT_MAX_Y


@dataclass(frozen=True)
class BlockVector:
    """Immutable integer 3D block position."""
    x: int
    y: int
    z: int

    @staticmethod
    def minimum(a: "BlockVector", b: "BlockVector") -> "BlockVector":
        """Component-wise minimum of two vectors."""
        return BlockVector(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z))

    @staticmethod
    def maximum(a: "BlockVector", b: "BlockVector") -> "BlockVector":
        """Component-wise maximum of two vectors."""
        return BlockVector(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z))


@dataclass(frozen=True)
class BlockVector2D:
    """Immutable integer 2D block position on the x/z plane."""
    x: int
    z: int


@dataclass(frozen=True)
class Cuboid:
    """
    Axis-aligned box.

    minimum <= maximum on every axis; use from_corners() when the two
    corners come in arbitrary order.
    """
    minimum: BlockVector
    maximum: BlockVector

    def __post_init__(self):
        if (
            self.minimum.x > self.maximum.x or
            self.minimum.y > self.maximum.y or
            self.minimum.z > self.maximum.z
        ):
            raise ValueError(
                f"Cuboid minimum {self.minimum} exceeds maximum {self.maximum}"
            )

    @classmethod
    def from_corners(cls, pt1: BlockVector, pt2: BlockVector) -> "Cuboid":
        """Build a cuboid from any two opposite corners."""
        return cls(
            minimum=BlockVector.minimum(pt1, pt2),
            maximum=BlockVector.maximum(pt1, pt2),
        )

    @property
    def region_type(self) -> RegionType:
        return RegionType.CUBOID


@dataclass(frozen=True)
class Polygon:
    """
    2D footprint extruded over a height range.

    Point order is significant and preserved on save.
    """
    points: tuple[BlockVector2D, ...]
    min_y: int = DEFAULT_MIN_Y
    max_y: int = DEFAULT_MAX_Y

    def __post_init__(self):
        if not self.points:
            raise ValueError("Polygon needs at least one point")
        # Accept any sequence but store a tuple so the geometry stays hashable
        object.__setattr__(self, "points", tuple(self.points))

    @property
    def region_type(self) -> RegionType:
        return RegionType.POLYGON


Geometry = Union[Cuboid, Polygon]


def is_valid_flag_key(key: str) -> bool:
    """
    A flag key is one character other than "_", or two characters of
    which at least one is "_" (e.g. "T_", "_X").
    """
    if len(key) == 1:
        return key != "_"
    return len(key) == 2 and "_" in key


@dataclass
class RegionFlags:
    """
    Flag-state table.

    Keys follow is_valid_flag_key(). A key that is not present is UNSET,
    and setting a key to UNSET removes it.
    """
    states: dict[str, FlagState] = field(default_factory=dict)

    def get(self, key: str) -> FlagState:
        return self.states.get(key, FlagState.UNSET)

    def set(self, key: str, state: FlagState) -> None:
        if not is_valid_flag_key(key):
            raise ValueError(f"Invalid flag key: '{key}'")
        if state == FlagState.UNSET:
            self.states.pop(key, None)
        else:
            self.states[key] = state

    def items(self):
        """(key, state) pairs for every flag that is not UNSET."""
        return self.states.items()

    def __len__(self) -> int:
        return len(self.states)


@dataclass
class Domain:
    """Individual players plus groups, used for owners and members."""
    players: set[str] = field(default_factory=set)
    groups: set[str] = field(default_factory=set)

    def add_player(self, name: str) -> None:
        self.players.add(name)

    def add_group(self, name: str) -> None:
        self.groups.add(name)

    def is_empty(self) -> bool:
        return not self.players and not self.groups


@dataclass
class ProtectedRegion:
    """
    A named region with geometry, metadata and an optional parent.

    All regions have:
    - Unique ID (the key in its RegionSet)
    - Geometry (Cuboid or Polygon)
    - Priority, flags, owners and members
    - Optional greeting/farewell messages
    - Optional parent ID, only changed through RegionSet.set_parent()
    """
    region_id: str
    geometry: Geometry
    priority: int = 0
    flags: RegionFlags = field(default_factory=RegionFlags)
    owners: Domain = field(default_factory=Domain)
    members: Domain = field(default_factory=Domain)
    greeting: Optional[str] = None
    farewell: Optional[str] = None
    parent_id: Optional[str] = None

    @property
    def region_type(self) -> RegionType:
        return self.geometry.region_type


class RegionSet(Mapping):
    """
    Id-indexed table of regions.

    Adding a region whose id is already present replaces the old one.
    Parent links are walked by id lookup, so a walk can always be bounded
    by the ids it has already seen.
    """

    def __init__(self, regions: Optional[Union[Mapping, list]] = None):
        self._regions: dict[str, ProtectedRegion] = {}
        if isinstance(regions, Mapping):
            regions = regions.values()
        for region in regions or []:
            self.add(region)

    def __getitem__(self, region_id: str) -> ProtectedRegion:
        return self._regions[region_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._regions)

    def __len__(self) -> int:
        return len(self._regions)

    def __repr__(self) -> str:
        return f"RegionSet({list(self._regions)})"

    def add(self, region: ProtectedRegion) -> None:
        """Insert or replace a region by its id."""
        self._regions[region.region_id] = region

    def remove(self, region_id: str) -> Optional[ProtectedRegion]:
        return self._regions.pop(region_id, None)

    def ancestors(self, region_id: str) -> list[str]:
        """
        IDs on the attached parent chain of a region, nearest first.

        Stops at a dangling parent id or at an id already visited.
        """
        chain = []
        seen = {region_id}
        current = self._regions[region_id].parent_id
        while current is not None and current in self._regions and current not in seen:
            chain.append(current)
            seen.add(current)
            current = self._regions[current].parent_id
        return chain

    def set_parent(self, region_id: str, parent_id: Optional[str]) -> None:
        """
        Attach (or with None, detach) the parent of a region.

        Raises:
            KeyError: If either id is not in the set
            CircularInheritanceError: If the child is the parent itself or
                one of the parent's ancestors
        """
        region = self._regions[region_id]
        if parent_id is None:
            region.parent_id = None
            return

        if parent_id not in self._regions:
            raise KeyError(parent_id)
        if parent_id == region_id or region_id in self.ancestors(parent_id):
            raise CircularInheritanceError(region_id, parent_id)

        region.parent_id = parent_id

    def get_parent(self, region_id: str) -> Optional[ProtectedRegion]:
        parent_id = self._regions[region_id].parent_id
        if parent_id is None:
            return None
        return self._regions.get(parent_id)

    def snapshot(self) -> "RegionSet":
        """Shallow copy: a new table over the same region objects."""
        return RegionSet(self._regions)
