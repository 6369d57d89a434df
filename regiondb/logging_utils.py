"""
Region Database - Structured Logging

All diagnostics are:
- Structured (JSON)
- Timestamped
- Module-scoped
- Kept in memory so callers can inspect what was dropped and why

Loggers are passed into each component explicitly. Nothing here touches
process-wide logging state.
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RegionLogger:
    """
    Structured JSON logger used as the diagnostics sink.

    All log entries include:
    - timestamp: ISO 8601 format
    - module: Source module name
    - level: Severity level
    - message: Human-readable message
    - Additional context fields (region_id, path, reason, ...)
    """

    def __init__(
        self,
        module_name: str,
        log_dir: Optional[Path] = None,
        console_output: bool = True,
        file_output: bool = True,
    ):
        """
        Initialize logger for a specific module.

        Args:
            module_name: Name of the module (e.g., "RegionFactory")
            log_dir: Directory for log files
            console_output: Whether to print to console
            file_output: Whether to write to file
        """
        self.module_name = module_name
        self.log_dir = log_dir
        self.console_output = console_output
        self.file_output = file_output
        self._log_file = None
        self._entries = []

        if log_dir and file_output:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self._log_file = self.log_dir / f"{module_name.lower()}_{timestamp}.jsonl"

    def child(self, module_name: str) -> "RegionLogger":
        """
        Create a logger for a sub-component that shares this logger's sink.

        Entries logged through the child are also visible from the parent,
        so a single logger handed to the database collects diagnostics from
        the factory and linker as well.
        """
        child = RegionLogger(
            module_name,
            console_output=self.console_output,
            file_output=False,
        )
        child._log_file = self._log_file
        child.file_output = self.file_output
        child._entries = self._entries
        return child

    def _format_entry(
        self,
        level: LogLevel,
        message: str,
        **kwargs: Any
    ) -> dict:
        """Create structured log entry."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "module": self.module_name,
            "level": level.value,
            "message": message,
        }

        for key, value in kwargs.items():
            if isinstance(value, Path):
                value = str(value)
            elif isinstance(value, Enum):
                value = value.value
            entry[key] = value

        return entry

    def _output(self, entry: dict) -> None:
        """Output log entry to configured destinations."""
        json_str = json.dumps(entry, default=str)

        if self.console_output:
            level = entry["level"]
            colors = {
                "DEBUG": "\033[36m",     # Cyan
                "INFO": "\033[32m",      # Green
                "WARNING": "\033[33m",   # Yellow
                "ERROR": "\033[31m",     # Red
            }
            reset = "\033[0m"
            color = colors.get(level, "")
            print(f"{color}[{entry['module']}] {entry['message']}{reset}")

            for key in entry:
                if key not in ["timestamp", "module", "level", "message"]:
                    print(f"  {key}: {entry[key]}")

        if self._log_file and self.file_output:
            with open(self._log_file, "a", encoding="utf-8") as f:
                f.write(json_str + "\n")

        self._entries.append(entry)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._output(self._format_entry(LogLevel.DEBUG, message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._output(self._format_entry(LogLevel.INFO, message, **kwargs))

    def warning(
        self,
        message: str,
        reason: Optional[str] = None,
        suggested_fix: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Log a recoverable problem.

        Args:
            message: What went wrong
            reason: Why it went wrong
            suggested_fix: How the data could be corrected
        """
        if reason:
            kwargs["reason"] = reason
        if suggested_fix:
            kwargs["suggested_fix"] = suggested_fix
        self._output(self._format_entry(LogLevel.WARNING, message, **kwargs))

    def error(
        self,
        message: str,
        reason: Optional[str] = None,
        suggested_fix: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """Log error message with required context."""
        if reason:
            kwargs["reason"] = reason
        if suggested_fix:
            kwargs["suggested_fix"] = suggested_fix
        self._output(self._format_entry(LogLevel.ERROR, message, **kwargs))

    def log_init(self, **params: Any) -> None:
        """Log module initialization with parameters."""
        self.debug(f"{self.module_name} initialized", **params)

    def get_entries(self, level: Optional[LogLevel] = None) -> list[dict]:
        """Get all log entries, optionally filtered by level."""
        if level is None:
            return self._entries.copy()
        return [e for e in self._entries if e["level"] == level.value]

    def get_warnings(self, message: Optional[str] = None) -> list[dict]:
        """Get warning entries, optionally only those with an exact message."""
        warnings = self.get_entries(LogLevel.WARNING)
        if message is None:
            return warnings
        return [e for e in warnings if e["message"] == message]

    def get_error_count(self) -> int:
        """Count error entries."""
        return len(self.get_entries(LogLevel.ERROR))

    def clear(self) -> None:
        """Drop all collected entries (shared with child loggers)."""
        self._entries.clear()

    def get_summary(self) -> dict:
        """Get summary of all log entries."""
        counts = {"DEBUG": 0, "INFO": 0, "WARNING": 0, "ERROR": 0}
        for entry in self._entries:
            counts[entry["level"]] += 1
        return {
            "module": self.module_name,
            "total_entries": len(self._entries),
            "by_level": counts,
            "log_file": str(self._log_file) if self._log_file else None,
        }
