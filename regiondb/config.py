#==============================================================================
# RegionDB - Configuration
#==============================================================================
# File: config.py
# Description: Settings for the YAML region database and its loggers
#==============================================================================

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class DatabaseConfig:
    """
    Region database configuration.

    Controls the shape of the written document and where diagnostics go.
    """
    # Output document style
    flow_style: bool = True
    indent: int = 2

    # File handling
    create_parent_dirs: bool = True
    fsync: bool = True

    # Diagnostics
    log_dir: Optional[str] = None
    console_output: bool = True

    def get_log_dir(self, base_dir: Optional[Path] = None) -> Optional[Path]:
        """Get absolute path to the log directory, if one is configured."""
        if not self.log_dir:
            return None
        path = Path(self.log_dir)
        if path.is_absolute():
            return path
        if base_dir:
            return base_dir / path
        return Path.cwd() / path

    def to_dict(self) -> dict:
        return {
            "flow_style": self.flow_style,
            "indent": self.indent,
            "create_parent_dirs": self.create_parent_dirs,
            "fsync": self.fsync,
            "log_dir": self.log_dir,
            "console_output": self.console_output,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DatabaseConfig":
        return cls(
            flow_style=data.get("flow_style", True),
            indent=data.get("indent", 2),
            create_parent_dirs=data.get("create_parent_dirs", True),
            fsync=data.get("fsync", True),
            log_dir=data.get("log_dir"),
            console_output=data.get("console_output", True),
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path, section: str = "database") -> "DatabaseConfig":
        """
        Load settings from a YAML file.

        Settings may sit at the top level or under a named section, e.g.
        database: {flow_style: false, indent: 4}
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        if isinstance(data.get(section), dict):
            data = data[section]
        return cls.from_dict(data)
