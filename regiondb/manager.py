"""
Region Manager Interfaces

The region manager (spatial index, containment and overlap resolution)
lives outside this package. The database only needs to pull a region set
from it and push one into it.
"""

from abc import ABC, abstractmethod
from typing import Optional, Protocol

from .region_data import RegionSet


class RegionManager(Protocol):
    """Anything that holds the live region set."""

    def get_regions(self) -> RegionSet:
        ...

    def set_regions(self, regions: RegionSet) -> None:
        ...


class ProtectionDatabase(ABC):
    """
    Persistent store for a region set.

    load() and save() with a manager are thin wrappers: load then push the
    published set into the manager, or pull the manager's set then save.
    """

    @abstractmethod
    def load(self, manager: Optional[RegionManager] = None):
        """Read the backing store and publish the decoded regions."""

    @abstractmethod
    def save(self, manager: Optional[RegionManager] = None) -> None:
        """Write the published regions to the backing store."""

    @abstractmethod
    def get_regions(self) -> RegionSet:
        """Currently published regions."""

    @abstractmethod
    def set_regions(self, regions) -> None:
        """Replace the published regions."""
