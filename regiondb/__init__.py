#==============================================================================
# RegionDB - Package Initialization
#==============================================================================
# File: __init__.py
# Description: YAML persistence for protected regions
#==============================================================================

"""
RegionDB: YAML Persistence for Protected Regions

Stores cuboid and polygon regions together with their priority, flags,
owners, members, greeting/farewell messages and parent links.

Usage:
    from regiondb import YAMLRegionDatabase

    db = YAMLRegionDatabase("worlds/world/regions.yml")
    result = db.load()
    for failure in result.failures:
        print(failure.region_id, failure.message)

    db.save()
"""

__version__ = "0.1.0"

from .region_types import RegionType, FlagState, FailureKind, LinkIssueKind
from .region_data import (
    BlockVector,
    BlockVector2D,
    Cuboid,
    Polygon,
    RegionFlags,
    Domain,
    ProtectedRegion,
    RegionSet,
)
from .exceptions import (
    RegionDatabaseError,
    DatabaseIOError,
    IncompleteDataError,
    CircularInheritanceError,
)
from .region_factory import RegionFactory, RegionBuildResult
from .inheritance import InheritanceLinker, LinkIssue
from .manager import RegionManager, ProtectionDatabase
from .database import YAMLRegionDatabase, LoadResult
from .config import DatabaseConfig
from .logging_utils import RegionLogger, LogLevel

__all__ = [
    # Types
    "RegionType",
    "FlagState",
    "FailureKind",
    "LinkIssueKind",
    # Data structures
    "BlockVector",
    "BlockVector2D",
    "Cuboid",
    "Polygon",
    "RegionFlags",
    "Domain",
    "ProtectedRegion",
    "RegionSet",
    # Errors
    "RegionDatabaseError",
    "DatabaseIOError",
    "IncompleteDataError",
    "CircularInheritanceError",
    # Pipeline
    "RegionFactory",
    "RegionBuildResult",
    "InheritanceLinker",
    "LinkIssue",
    # Database
    "RegionManager",
    "ProtectionDatabase",
    "YAMLRegionDatabase",
    "LoadResult",
    # Config / logging
    "DatabaseConfig",
    "RegionLogger",
    "LogLevel",
]
