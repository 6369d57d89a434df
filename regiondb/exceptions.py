"""
Region Database Errors

Only DatabaseIOError is meant to reach callers of the database. The other
errors are raised inside a single record or link and recovered there.
"""


class RegionDatabaseError(Exception):
    """Base class for all region database errors."""


class DatabaseIOError(RegionDatabaseError):
    """The backing file could not be read, parsed or written."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class IncompleteDataError(RegionDatabaseError, ValueError):
    """A region record is missing geometry or has malformed geometry."""


class CircularInheritanceError(RegionDatabaseError):
    """Setting a parent would create a cycle in the inheritance graph."""

    def __init__(self, region_id: str, parent_id: str):
        super().__init__(
            f"Setting '{parent_id}' as parent of '{region_id}' creates a cycle"
        )
        self.region_id = region_id
        self.parent_id = parent_id
