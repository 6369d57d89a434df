"""
Inheritance Linker

Second pass of a load: turns the parent ids declared in the document into
parent links inside a RegionSet.

Links are processed in the order the regions were declared. A link is
dropped (and the region left as a root) when the parent id is unknown or
when following declared parents from the candidate leads back to the
region itself. Every region on a declared cycle is therefore rejected, no
matter which of them comes first in the file.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import CircularInheritanceError
from .logging_utils import RegionLogger
from .region_data import RegionSet
from .region_types import LinkIssueKind


@dataclass
class LinkIssue:
    """A declared parent link that was not attached."""
    region_id: str
    parent_id: str
    kind: LinkIssueKind

    def to_dict(self) -> dict:
        return {
            "region_id": self.region_id,
            "parent_id": self.parent_id,
            "kind": self.kind.name,
        }


class InheritanceLinker:
    """Resolves declared parent ids into parent links."""

    MODULE_NAME = "InheritanceLinker"

    def __init__(self, logger: Optional[RegionLogger] = None):
        self.logger = logger or RegionLogger(self.MODULE_NAME)

    def link(
        self,
        regions: RegionSet,
        pending: list[tuple[str, str]],
    ) -> list[LinkIssue]:
        """
        Attach declared parents.

        Args:
            regions: Fully decoded regions, all currently parentless
            pending: (region_id, declared_parent_id) pairs in file order

        Returns:
            Links that were rejected, in processing order
        """
        declared = dict(pending)
        issues = []

        for region_id, parent_id in pending:
            if region_id not in regions:
                continue

            if parent_id not in regions:
                self.logger.warning(
                    "Unknown region parent",
                    region_id=region_id,
                    parent_id=parent_id,
                    suggested_fix="Define the parent region or remove the parent field",
                )
                issues.append(LinkIssue(region_id, parent_id, LinkIssueKind.UNKNOWN_PARENT))
                continue

            if self._leads_back(region_id, parent_id, regions, declared):
                self._reject_circular(region_id, parent_id, issues)
                continue

            try:
                regions.set_parent(region_id, parent_id)
            except CircularInheritanceError:
                self._reject_circular(region_id, parent_id, issues)

        self.logger.debug(
            "Parent links resolved",
            declared=len(pending),
            rejected=len(issues),
        )
        return issues

    def _reject_circular(
        self,
        region_id: str,
        parent_id: str,
        issues: list[LinkIssue],
    ) -> None:
        self.logger.warning(
            "Circular inheritance detected",
            region_id=region_id,
            parent_id=parent_id,
            suggested_fix="Break the cycle by removing one of the parent fields",
        )
        issues.append(LinkIssue(region_id, parent_id, LinkIssueKind.CIRCULAR_INHERITANCE))

    @staticmethod
    def _leads_back(
        region_id: str,
        parent_id: str,
        regions: RegionSet,
        declared: dict[str, str],
    ) -> bool:
        """Follow declared parents from parent_id; True if region_id is reached."""
        seen = set()
        current: Optional[str] = parent_id
        while current is not None and current in regions and current not in seen:
            if current == region_id:
                return True
            seen.add(current)
            current = declared.get(current)
        return False
