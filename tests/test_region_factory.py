"""
Region Factory Tests

Decoding single records into regions and writing them back.
"""

import pytest

from regiondb import (
    BlockVector,
    BlockVector2D,
    Cuboid,
    Domain,
    FailureKind,
    FlagState,
    Polygon,
    ProtectedRegion,
    RegionFactory,
    RegionFlags,
)


@pytest.fixture
def factory(logger) -> RegionFactory:
    return RegionFactory(logger, source="test.yml")


def test_build_cuboid(factory) -> None:
    result = factory.build("spawn", {"type": "cuboid", "pt1": [5, 0, 5], "pt2": [1, 10, 1]})

    assert result.success, result.message
    assert result.region.geometry == Cuboid(BlockVector(1, 0, 1), BlockVector(5, 10, 5))
    assert result.region.region_id == "spawn"
    assert result.declared_parent is None


def test_build_polygon(factory) -> None:
    result = factory.build("field", {
        "type": "polygon",
        "points": [[0, 0], [10, 0], [10, 10], [0, 10]],
        "min-y": 20,
        "max-y": 90,
    })

    assert result.success, result.message
    geometry = result.region.geometry
    assert isinstance(geometry, Polygon)
    assert geometry.points == (
        BlockVector2D(0, 0), BlockVector2D(10, 0), BlockVector2D(10, 10), BlockVector2D(0, 10),
    )
    assert (geometry.min_y, geometry.max_y) == (20, 90)


def test_build_polygon_height_defaults(factory) -> None:
    result = factory.build("field", {"type": "polygon", "points": [[1, 2]]})

    assert result.success
    assert (result.region.geometry.min_y, result.region.geometry.max_y) == (0, 128)


def test_build_metadata(factory) -> None:
    """
    Validates:
        - priority, flags, greeting, farewell are attached
        - owners come from "owners", members from "member"
        - parent is captured but not resolved
    """
    result = factory.build("shop", {
        "type": "cuboid",
        "pt1": [0, 0, 0],
        "pt2": [4, 4, 4],
        "priority": 3,
        "flags": ["+A", "-T_"],
        "owners": {"owners": ["alice"], "groups": ["staff"]},
        "member": {"owners": ["bob"]},
        "members": {"owners": ["ignored"]},
        "greeting": "Welcome",
        "farewell": "Bye",
        "parent": "town",
    })

    region = result.region
    assert region.priority == 3
    assert region.flags.get("A") == FlagState.ALLOW
    assert region.flags.get("T_") == FlagState.DENY
    assert region.owners == Domain(players={"alice"}, groups={"staff"})
    assert region.members == Domain(players={"bob"})
    assert region.greeting == "Welcome"
    assert region.farewell == "Bye"
    assert region.parent_id is None
    assert result.declared_parent == "town"


def test_build_metadata_defaults(factory) -> None:
    region = factory.build("a", {"type": "cuboid", "pt1": [0, 0, 0], "pt2": [1, 1, 1]}).region

    assert region.priority == 0
    assert len(region.flags) == 0
    assert region.owners.is_empty() and region.members.is_empty()
    assert region.greeting is None and region.farewell is None


@pytest.mark.parametrize("priority", ["high", None, [1], True])
def test_build_non_numeric_priority_defaults(factory, priority) -> None:
    record = {"type": "cuboid", "pt1": [0, 0, 0], "pt2": [1, 1, 1], "priority": priority}
    assert factory.build("a", record).region.priority == 0


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
@pytest.mark.parametrize("field_name, record, read_back, default", [
    ("priority", {"type": "cuboid", "pt1": [0, 0, 0], "pt2": [1, 1, 1]},
     lambda r: r.priority, 0),
    ("min-y", {"type": "polygon", "points": [[0, 0]]},
     lambda r: r.geometry.min_y, 0),
    ("max-y", {"type": "polygon", "points": [[0, 0]]},
     lambda r: r.geometry.max_y, 128),
])
def test_build_non_finite_numbers_default(factory, value, field_name, record, read_back, default) -> None:
    """
    Validates:
        - .inf, -.inf and .nan fall back to the field default
        - The record still builds
    """
    result = factory.build("a", {**record, field_name: value})

    assert result.success, result.message
    assert read_back(result.region) == default


def test_build_float_numbers_truncate(factory) -> None:
    record = {"type": "polygon", "points": [[0, 0]], "min-y": 12.9, "priority": 2.5}

    region = factory.build("a", record).region

    assert region.geometry.min_y == 12
    assert region.priority == 2


def test_build_empty_parent_is_none(factory) -> None:
    record = {"type": "cuboid", "pt1": [0, 0, 0], "pt2": [1, 1, 1], "parent": ""}
    assert factory.build("a", record).declared_parent is None


@pytest.mark.parametrize("record", [
    {"type": "cuboid", "pt2": [1, 1, 1]},
    {"type": "cuboid", "pt1": [0, 0], "pt2": [1, 1, 1]},
    {"type": "cuboid", "pt1": [0, 0, 0], "pt2": [1, "x", 1]},
    {"type": "polygon"},
    {"type": "polygon", "points": []},
    {"type": "polygon", "points": [[0, 0], [1, 2, 3]]},
    {"type": "polygon", "points": "0,0"},
])
def test_build_incomplete_data(factory, logger, record) -> None:
    """
    Validates:
        - Missing or malformed geometry is reported, not raised
        - Exactly one warning names the region id
    """
    result = factory.build("broken", record)

    assert not result.success
    assert result.region is None
    assert result.failure == FailureKind.INCOMPLETE_DATA

    warnings = logger.get_warnings()
    assert len(warnings) == 1
    assert warnings[0]["region_id"] == "broken"


@pytest.mark.parametrize("record", [
    {"type": "sphere", "pt1": [0, 0, 0]},
    {"type": "Cuboid", "pt1": [0, 0, 0], "pt2": [1, 1, 1]},
    {"pt1": [0, 0, 0], "pt2": [1, 1, 1]},
    {"type": ""},
])
def test_build_unknown_type(factory, logger, record) -> None:
    result = factory.build("odd", record)

    assert not result.success
    assert result.failure == FailureKind.UNKNOWN_TYPE
    assert len(logger.get_warnings("Unknown region type")) == 1


def test_encode_writes_every_field(factory) -> None:
    flags = RegionFlags()
    flags.set("A", FlagState.DENY)
    region = ProtectedRegion(
        region_id="plot",
        geometry=Polygon(points=(BlockVector2D(1, 2), BlockVector2D(3, 4)), min_y=5, max_y=60),
        priority=2,
        flags=flags,
        owners=Domain(players={"alice"}),
        members=Domain(groups={"guests"}),
        greeting="hi",
        farewell="bye",
        parent_id="town",
    )

    assert factory.encode(region) == {
        "type": "polygon",
        "points": [[1, 2], [3, 4]],
        "min-y": 5,
        "max-y": 60,
        "priority": 2,
        "flags": ["-A"],
        "owners": {"owners": ["alice"], "groups": []},
        "member": {"owners": [], "groups": ["guests"]},
        "greeting": "hi",
        "farewell": "bye",
        "parent": "town",
    }


def test_encode_cuboid_omits_unset_optionals(factory) -> None:
    region = ProtectedRegion(
        region_id="box",
        geometry=Cuboid(BlockVector(-1, 0, -1), BlockVector(1, 2, 1)),
    )

    record = factory.encode(region)

    assert record["pt1"] == [-1, 0, -1]
    assert record["pt2"] == [1, 2, 1]
    assert "greeting" not in record
    assert "farewell" not in record
    assert "parent" not in record


def test_encode_then_build_matches(factory) -> None:
    region = ProtectedRegion(
        region_id="box",
        geometry=Cuboid(BlockVector(0, 0, 0), BlockVector(9, 9, 9)),
        priority=-4,
        owners=Domain(players={"x"}, groups={"y"}),
        greeting="",
    )

    rebuilt = factory.build("box", factory.encode(region))

    assert rebuilt.region == region
