"""
Shared fixtures for the region database tests.
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from regiondb import (
    RegionLogger,
    RegionSet,
    ProtectedRegion,
    Cuboid,
    BlockVector,
)


class FakeRegionManager:
    """Stands in for the live region manager."""

    def __init__(self, regions: Optional[RegionSet] = None):
        self.regions = regions if regions is not None else RegionSet()
        self.set_calls = 0

    def get_regions(self) -> RegionSet:
        return self.regions

    def set_regions(self, regions: RegionSet) -> None:
        self.regions = regions
        self.set_calls += 1


@pytest.fixture
def logger() -> RegionLogger:
    """Logger that only collects entries in memory."""
    return RegionLogger("Test", console_output=False, file_output=False)


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write YAML text into tmp_path and return the file path."""
    def _write(text: str, name: str = "regions.yml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


def make_cuboid(region_id: str, parent_id: Optional[str] = None) -> ProtectedRegion:
    """Small cuboid region for tests that only care about ids and links."""
    return ProtectedRegion(
        region_id=region_id,
        geometry=Cuboid(BlockVector(0, 0, 0), BlockVector(1, 1, 1)),
        parent_id=parent_id,
    )
