"""
Region Type Definitions

Strict enumeration of region geometry types, flag states and
per-record failure kinds.
"""

from enum import Enum, auto


# Polygon height range used when a record leaves it out
DEFAULT_MIN_Y = 0
DEFAULT_MAX_Y = 128


class RegionType(Enum):
    """
    Geometry discriminator stored in the "type" field of a record.

    - CUBOID: Axis-aligned box between two corners
    - POLYGON: 2D footprint extruded from min-y to max-y
    """
    CUBOID = "cuboid"
    POLYGON = "polygon"

    @classmethod
    def from_string(cls, value: str) -> "RegionType":
        """Parse region type from string (exact match)."""
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(
            f"Invalid region type: '{value}'. "
            f"Valid types: {[m.value for m in cls]}"
        )


class FlagState(Enum):
    """
    State of a single permission flag.

    UNSET means "not decided here"; it is never written to disk.
    """
    ALLOW = "+"
    DENY = "-"
    UNSET = ""

    @classmethod
    def from_prefix(cls, prefix: str) -> "FlagState":
        """Map a token prefix character to a state (UNSET if unrecognized)."""
        if prefix == "+":
            return cls.ALLOW
        if prefix == "-":
            return cls.DENY
        return cls.UNSET


class FailureKind(Enum):
    """Why a single record was dropped during decoding."""
    INCOMPLETE_DATA = auto()
    UNKNOWN_TYPE = auto()


class LinkIssueKind(Enum):
    """Why a declared parent link was not attached."""
    UNKNOWN_PARENT = auto()
    CIRCULAR_INHERITANCE = auto()
