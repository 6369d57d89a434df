"""
YAML Region Database

Loads and saves the full region set of one world from a single YAML file.

Load pipeline:
    read file -> build each record -> link parents -> publish

Only file-level problems (missing, unreadable or unparsable file, failed
write) are raised, as DatabaseIOError. Everything else is logged and
recovered: bad records are dropped, bad parent links are left unattached,
and a document whose root is not a mapping yields no regions.
"""

import contextlib
import os
import stat
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .config import DatabaseConfig
from .exceptions import DatabaseIOError
from .inheritance import InheritanceLinker, LinkIssue
from .logging_utils import RegionLogger
from .manager import ProtectionDatabase, RegionManager
from .region_data import RegionSet
from .region_factory import RegionFactory, RegionBuildResult


@dataclass
class LoadResult:
    """Outcome of decoding one document."""
    success: bool
    regions: RegionSet = field(default_factory=RegionSet)
    failures: list[RegionBuildResult] = field(default_factory=list)
    link_issues: list[LinkIssue] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "region_count": len(self.regions),
            "region_ids": list(self.regions),
            "failures": [f.to_dict() for f in self.failures],
            "link_issues": [i.to_dict() for i in self.link_issues],
            "message": self.message,
        }


class YAMLRegionDatabase(ProtectionDatabase):
    """
    Region database backed by one YAML file.

    Responsibilities:
    - Decode the document into a fresh RegionSet on every load
    - Publish the set only once decoding and linking are done
    - Write every region field back on save, replacing the file atomically

    Thread Safety: load() and save() hold one lock for their whole
    read/decode/publish or snapshot/encode/write sequence.
    """

    MODULE_NAME = "YAMLRegionDatabase"

    def __init__(
        self,
        path: str | Path,
        config: Optional[DatabaseConfig] = None,
        logger: Optional[RegionLogger] = None,
    ):
        """
        Construct the database. No file is read or written here.

        Args:
            path: YAML file holding the regions
            config: Document and logging settings
            logger: Diagnostics sink shared with the factory and linker
        """
        self.path = Path(path)
        self.config = config or DatabaseConfig()
        self.logger = logger or RegionLogger(
            self.MODULE_NAME,
            log_dir=self.config.get_log_dir(),
            console_output=self.config.console_output,
        )

        self._lock = threading.Lock()
        self._regions = RegionSet()

        self.logger.log_init(path=self.path, **self.config.to_dict())

    # ========================================
    # LOADING
    # ========================================

    def load(self, manager: Optional[RegionManager] = None) -> LoadResult:
        """
        Read the file and publish its regions.

        Args:
            manager: If given, receives the published set

        Returns:
            LoadResult with the regions plus everything that was dropped

        Raises:
            DatabaseIOError: If the file cannot be read or parsed. The
                previously published regions are kept.
        """
        with self._lock:
            data = self._read_document()
            result = self.decode_document(data, source=str(self.path))
            if result.success:
                self._regions = result.regions

        if manager is not None and result.success:
            manager.set_regions(result.regions)

        return result

    def decode_document(self, data: Any, source: str = "dict") -> LoadResult:
        """
        Decode a parsed document without publishing it.

        Expected format:
        {
            "region_id": { region record },
            ...
        }
        """
        if not isinstance(data, dict):
            self.logger.warning(
                "Failed to read protection database",
                reason="root node not a mapping",
                source=source,
                suggested_fix="The document must map region ids to region records",
            )
            return LoadResult(success=False, message="root node not a mapping")

        factory = RegionFactory(self.logger.child(RegionFactory.MODULE_NAME), source=source)
        linker = InheritanceLinker(self.logger.child(InheritanceLinker.MODULE_NAME))

        regions = RegionSet()
        pending: list[tuple[str, str]] = []
        failures: list[RegionBuildResult] = []

        for key, record in data.items():
            region_id = str(key)
            if not isinstance(record, dict):
                self.logger.debug("Skipping non-mapping entry", region_id=region_id)
                continue

            result = factory.build(region_id, record)
            if not result.success:
                failures.append(result)
                continue

            if region_id in regions:
                # 1 and "1" both map to id "1"; the later record replaces the earlier one
                pending = [p for p in pending if p[0] != region_id]
            regions.add(result.region)
            if result.declared_parent:
                pending.append((region_id, result.declared_parent))

        link_issues = linker.link(regions, pending)

        self.logger.info(
            "Regions loaded",
            source=source,
            regions_loaded=len(regions),
            records_dropped=len(failures),
            links_rejected=len(link_issues),
        )

        return LoadResult(
            success=True,
            regions=regions,
            failures=failures,
            link_issues=link_issues,
        )

    def _read_document(self) -> Any:
        try:
            # utf-8-sig drops a leading byte order mark if one is present
            with open(self.path, "r", encoding="utf-8-sig") as f:
                return yaml.safe_load(f)
        except OSError as e:
            self.logger.error(
                "Failed to open region database",
                path=self.path,
                error=str(e),
                suggested_fix="Check that the file exists and is readable",
            )
            raise DatabaseIOError(f"Cannot read {self.path}: {e}", path=str(self.path)) from e
        except yaml.YAMLError as e:
            self.logger.error(
                "Failed to parse region database",
                path=self.path,
                error=str(e),
            )
            raise DatabaseIOError(f"Cannot parse {self.path}: {e}", path=str(self.path)) from e

    # ========================================
    # SAVING
    # ========================================

    def save(self, manager: Optional[RegionManager] = None) -> None:
        """
        Write all published regions to the file.

        Args:
            manager: If given, its regions are published first

        Raises:
            DatabaseIOError: If the file cannot be written. The previous
                file on disk is left as it was.
        """
        with self._lock:
            if manager is not None:
                self._regions = self._as_region_set(manager.get_regions())

            document = self.encode_document(self._regions.snapshot())
            self._write_document(document)

        self.logger.info("Regions saved", path=self.path, region_count=len(document))

    def encode_document(self, regions: RegionSet) -> dict[str, Any]:
        factory = RegionFactory(self.logger.child(RegionFactory.MODULE_NAME))
        return {region_id: factory.encode(region) for region_id, region in regions.items()}

    def _write_document(self, document: dict[str, Any]) -> None:
        tmp_name = None
        try:
            directory = self.path.parent
            if self.config.create_parent_dirs:
                directory.mkdir(parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    document,
                    f,
                    default_flow_style=self.config.flow_style,
                    indent=self.config.indent,
                    allow_unicode=True,
                    sort_keys=False,
                )
                f.flush()
                if self.config.fsync:
                    os.fsync(f.fileno())

            # mkstemp creates the file 0600; keep the mode of the file being replaced
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)

        except (OSError, yaml.YAMLError) as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            self.logger.error(
                "Failed to save region database",
                path=self.path,
                error=str(e),
                suggested_fix="Check permissions and free space for the target directory",
            )
            raise DatabaseIOError(f"Cannot write {self.path}: {e}", path=str(self.path)) from e

    # ========================================
    # PUBLISHED REGIONS
    # ========================================

    def get_regions(self) -> RegionSet:
        return self._regions

    def set_regions(self, regions) -> None:
        """Replace the published regions. Raises ValueError on key/id mismatch."""
        with self._lock:
            self._regions = self._as_region_set(regions)

    @staticmethod
    def _as_region_set(regions) -> RegionSet:
        """
        Accept a RegionSet as is, or a plain id -> region mapping whose
        keys must equal the ids of the regions they map to.
        """
        if isinstance(regions, RegionSet):
            return regions

        mismatched = [
            key for key, region in regions.items()
            if key != region.region_id
        ]
        if mismatched:
            raise ValueError(
                f"Region map keys do not match region ids: {mismatched}"
            )
        return RegionSet(regions)
