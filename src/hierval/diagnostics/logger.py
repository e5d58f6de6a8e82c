"""Run-scoped diagnostics for hierarchy validation.

Collects per-file diagnostics during a single validation run. The publish
manifest reconciler consults the collected errors to flag files, and the CLI
can flush them to a report file for the build log.
"""

import json
import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from hierval.utils.paths import normalize_path

logger = logging.getLogger(__name__)


class ErrorLevel(str, Enum):
    """Diagnostic severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErrorCode(str, Enum):
    """Diagnostic codes emitted by the pipeline."""
    # Structural
    MISSING_FIELD = "hierarchy-missing-field"
    DUPLICATE_UID = "hierarchy-duplicate-uid"
    UNRESOLVED_CHILD = "hierarchy-unresolved-child"
    INVALID_CHILD_KIND = "hierarchy-invalid-child-kind"
    ORPHAN_UNIT = "hierarchy-orphan-unit"
    CYCLE = "hierarchy-cycle"
    RULE_FAILURE = "hierarchy-rule-failure"
    # Localization
    TOKEN_MISSING_IN_FALLBACK = "token-missing-in-fallback"
    TOKEN_SHAPE_MISMATCH = "token-shape-mismatch"
    FALLBACK_NODE_MISSING = "fallback-node-missing"
    DEPENDENCY_UNRESOLVED = "dependency-unresolved"
    # Partial publish
    PARENT_EXCLUDED = "parent-excluded"
    # Remote
    DRYSYNC_ERROR = "drysync-error"
    # Reported for a file by an earlier build stage sharing the ledger
    CONTENT_ERROR = "content-error"


STRUCTURAL_CODES = frozenset({
    ErrorCode.MISSING_FIELD,
    ErrorCode.DUPLICATE_UID,
    ErrorCode.UNRESOLVED_CHILD,
    ErrorCode.INVALID_CHILD_KIND,
    ErrorCode.ORPHAN_UNIT,
    ErrorCode.CYCLE,
    ErrorCode.RULE_FAILURE,
})

TOKEN_CODES = frozenset({
    ErrorCode.TOKEN_MISSING_IN_FALLBACK,
    ErrorCode.TOKEN_SHAPE_MISMATCH,
    ErrorCode.FALLBACK_NODE_MISSING,
    ErrorCode.DEPENDENCY_UNRESOLVED,
})

_LOG_LEVELS = {
    ErrorLevel.ERROR: logging.ERROR,
    ErrorLevel.WARNING: logging.WARNING,
    ErrorLevel.INFO: logging.INFO,
}


@dataclass
class LogItem:
    """A single diagnostic recorded during a run."""
    level: ErrorLevel
    code: ErrorCode
    message: str
    file: str | None = None           # Docset-relative source path
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "level": self.level.value,
            "code": self.code.value,
            "message": self.message,
            "file": self.file,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        location = f" ({self.file})" if self.file else ""
        return f"[{self.level.value.upper()}] {self.code.value}: {self.message}{location}"


class ValidationLogger:
    """Collects diagnostics keyed by source file for one validation run."""

    def __init__(self, write_log: Callable[[LogItem], None] | None = None):
        """Initialize the logger.

        Args:
            write_log: Optional callback receiving every item as it is logged,
                       typically the host build's own log writer
        """
        self.write_log = write_log
        self.run_id = f"run-{datetime.now(UTC):%Y%m%d-%H%M%S}-{str(uuid.uuid4())[:8]}"
        self.items: list[LogItem] = []
        self._files_with_error: set[str] = set()
        self._lock = threading.Lock()

    def log(self, level: ErrorLevel, code: ErrorCode, message: str, file: str | None = None) -> LogItem:
        """Record a diagnostic.

        Args:
            level: Severity
            code: Diagnostic code
            message: Human readable message
            file: Source path the diagnostic belongs to, if any

        Returns:
            The recorded item
        """
        file = normalize_path(file) if file else None
        item = LogItem(level=level, code=code, message=message, file=file)

        with self._lock:
            self.items.append(item)
            if level == ErrorLevel.ERROR and file:
                self._files_with_error.add(file)

        logger.log(_LOG_LEVELS[level], str(item))
        if self.write_log:
            self.write_log(item)
        return item

    def error(self, code: ErrorCode, message: str, file: str | None = None) -> LogItem:
        return self.log(ErrorLevel.ERROR, code, message, file)

    def warning(self, code: ErrorCode, message: str, file: str | None = None) -> LogItem:
        return self.log(ErrorLevel.WARNING, code, message, file)

    def info(self, code: ErrorCode, message: str, file: str | None = None) -> LogItem:
        return self.log(ErrorLevel.INFO, code, message, file)

    @property
    def has_file_with_error(self) -> bool:
        """Whether any file has an error-level diagnostic."""
        return bool(self._files_with_error)

    def file_has_error(self, file: str | None) -> bool:
        """Whether the given source path has an error-level diagnostic."""
        if not file:
            return False
        return normalize_path(file) in self._files_with_error

    @property
    def files_with_errors(self) -> set[str]:
        return set(self._files_with_error)

    def files_with_codes(self, codes: frozenset[ErrorCode]) -> set[str]:
        """Source paths carrying an error with one of the given codes."""
        return {
            item.file for item in self.items
            if item.file and item.level == ErrorLevel.ERROR and item.code in codes
        }

    def get_error_counts(self) -> dict[str, int]:
        """Get item counts by level."""
        counts = {level.value: 0 for level in ErrorLevel}

        for item in self.items:
            counts[item.level.value] += 1

        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": "1.0.0",
            "run_id": self.run_id,
            "total_items": len(self.items),
            "items_by_level": self.get_error_counts(),
            "files_with_errors": sorted(self._files_with_error),
            "items": [item.to_dict() for item in self.items],
        }

    def flush_to_filesystem(self, report_dir: Path) -> Path | None:
        """Write collected diagnostics to ``report_dir/<run_id>.json``.

        Returns:
            Path to the report file, or None if nothing was collected
        """
        if not self.items:
            logger.debug(f"No diagnostics to flush for run {self.run_id}")
            return None

        report_dir.mkdir(parents=True, exist_ok=True)
        report_file = report_dir / f"{self.run_id}.json"
        with open(report_file, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Flushed {len(self.items)} diagnostics to: {report_file}")
        return report_file
