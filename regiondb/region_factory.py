"""
Region Factory

Builds one ProtectedRegion from one document record, and writes it back.

Each record produces a RegionBuildResult: either a region (plus its
declared parent id, still unresolved) or a failure describing why the
record was dropped. Failures never escape build(), so one bad record
cannot abort a load.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from .codecs import (
    decode_vector3, decode_vector2, encode_vector3, encode_vector2,
    decode_flags, encode_flags, decode_domain, encode_domain,
)
from .exceptions import IncompleteDataError
from .logging_utils import RegionLogger
from .region_data import ProtectedRegion, Cuboid, Polygon, Geometry
from .region_types import RegionType, FailureKind, DEFAULT_MIN_Y, DEFAULT_MAX_Y


@dataclass
class RegionBuildResult:
    """Result of decoding a single region record."""
    region_id: str
    success: bool
    region: Optional[ProtectedRegion] = None
    declared_parent: Optional[str] = None
    failure: Optional[FailureKind] = None
    message: str = ""
    suggested_fix: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "region_id": self.region_id,
            "success": self.success,
            "region_type": self.region.region_type.value if self.region else None,
            "declared_parent": self.declared_parent,
            "failure": self.failure.name if self.failure else None,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
        }


def _read_int(record: dict, key: str, default: int) -> int:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _read_string(record: dict, key: str) -> Optional[str]:
    value = record.get(key)
    if value is None:
        return None
    return str(value)


class RegionFactory:
    """
    Decodes and encodes region records.

    Record fields:
        type            "cuboid" or "polygon"
        pt1, pt2        cuboid corners, [x, y, z]
        points          polygon points, [[x, z], ...]
        min-y, max-y    polygon height range
        priority        int
        flags           ["+A", "-T_", ...]
        owners, member  {owners: [...], groups: [...]}
        greeting        enter message
        farewell        leave message
        parent          id of another record
    """

    MODULE_NAME = "RegionFactory"

    def __init__(self, logger: Optional[RegionLogger] = None, source: str = "dict"):
        self.logger = logger or RegionLogger(self.MODULE_NAME)
        self.source = source

    # ========================================
    # DECODING
    # ========================================

    def build(self, region_id: str, record: dict) -> RegionBuildResult:
        """
        Build one region from its record.

        Args:
            region_id: Top-level key of the record
            record: Mapping of record fields

        Returns:
            RegionBuildResult with the region or the reason it was dropped
        """
        type_name = _read_string(record, "type") or ""

        try:
            region_type = RegionType.from_string(type_name)
        except ValueError:
            self.logger.warning(
                "Unknown region type",
                region_id=region_id,
                region_type=type_name,
                source=self.source,
                suggested_fix="Set type to 'cuboid' or 'polygon'",
            )
            return RegionBuildResult(
                region_id=region_id,
                success=False,
                failure=FailureKind.UNKNOWN_TYPE,
                message=f"unknown region type: {type_name}",
                suggested_fix="Set type to 'cuboid' or 'polygon'",
            )

        try:
            geometry = self._build_geometry(region_type, record)
        except IncompleteDataError as e:
            self.logger.warning(
                "Bad region definition",
                reason=str(e),
                region_id=region_id,
                region_type=region_type,
                source=self.source,
            )
            return RegionBuildResult(
                region_id=region_id,
                success=False,
                failure=FailureKind.INCOMPLETE_DATA,
                message=str(e),
                suggested_fix="Check the geometry fields of this region",
            )

        region = ProtectedRegion(
            region_id=region_id,
            geometry=geometry,
            priority=_read_int(record, "priority", 0),
            flags=decode_flags(record.get("flags")),
            owners=decode_domain(record.get("owners")),
            members=decode_domain(record.get("member")),
            greeting=_read_string(record, "greeting"),
            farewell=_read_string(record, "farewell"),
        )

        parent_id = _read_string(record, "parent")

        return RegionBuildResult(
            region_id=region_id,
            success=True,
            region=region,
            declared_parent=parent_id or None,
        )

    def _build_geometry(self, region_type: RegionType, record: dict) -> Geometry:
        if region_type == RegionType.CUBOID:
            pt1 = decode_vector3(record.get("pt1"))
            pt2 = decode_vector3(record.get("pt2"))
            return Cuboid.from_corners(pt1, pt2)

        points = record.get("points")
        if not isinstance(points, list) or not points:
            raise IncompleteDataError("polygon expected, points not defined")

        return Polygon(
            points=tuple(decode_vector2(p) for p in points),
            min_y=_read_int(record, "min-y", DEFAULT_MIN_Y),
            max_y=_read_int(record, "max-y", DEFAULT_MAX_Y),
        )

    # ========================================
    # ENCODING
    # ========================================

    def encode(self, region: ProtectedRegion) -> dict[str, Any]:
        """Write every field of a region into a record."""
        geometry = region.geometry
        record: dict[str, Any] = {"type": region.region_type.value}

        if isinstance(geometry, Cuboid):
            record["pt1"] = encode_vector3(geometry.minimum)
            record["pt2"] = encode_vector3(geometry.maximum)
        elif isinstance(geometry, Polygon):
            record["points"] = [encode_vector2(p) for p in geometry.points]
            record["min-y"] = geometry.min_y
            record["max-y"] = geometry.max_y
        else:
            raise TypeError(f"Unsupported geometry: {type(geometry).__name__}")

        record["priority"] = region.priority
        record["flags"] = encode_flags(region.flags)
        record["owners"] = encode_domain(region.owners)
        record["member"] = encode_domain(region.members)

        if region.greeting is not None:
            record["greeting"] = region.greeting
        if region.farewell is not None:
            record["farewell"] = region.farewell
        if region.parent_id is not None:
            record["parent"] = region.parent_id

        return record
