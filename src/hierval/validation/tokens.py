"""Localized token validation against the fallback (default-locale) docset.

Only used for localization builds. A localized node may carry fewer tokens
than its default-locale counterpart but never tokens the counterpart lacks,
and every file the node depends on must resolve locally or in the fallback
docset. Nothing here touches the network.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ..constants import DEFAULT_LOCALE
from ..diagnostics import ErrorCode, ValidationLogger
from ..errors import NodeLoadError
from ..loader import DocsetNodeLoader
from ..models.node import ContentNode
from ..utils.paths import normalize_path

logger = logging.getLogger(__name__)


def load_dependency_map(dependency_file_path: str | Path | None) -> dict[str, list[str]]:
    """Load the build's dependency manifest.

    Expected shape::

        {"dependencies": {"learn/intro/1-overview.yml": [{"path": "includes/a.md", "type": "include"}]}}

    Entries may also be plain path strings. A missing file means no dependencies.

    Raises:
        NodeLoadError: If the file exists but is not valid JSON
    """
    if not dependency_file_path:
        return {}

    path = Path(dependency_file_path)
    if not path.exists():
        logger.debug(f"Dependency manifest not found, assuming no dependencies: {path}")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise NodeLoadError(str(path), f"invalid JSON: {e}")
    except UnicodeDecodeError:
        raise NodeLoadError(str(path), "invalid UTF-8")

    if not isinstance(data, dict):
        raise NodeLoadError(str(path), "expected a JSON object")
    dependencies = data.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        raise NodeLoadError(str(path), "'dependencies' must be a JSON object")

    dependency_map: dict[str, list[str]] = {}
    for source, entries in dependencies.items():
        if entries is not None and not isinstance(entries, list):
            raise NodeLoadError(str(path), f"dependencies of '{source}' must be a list")
        paths = []
        for entry in entries or []:
            dep_path = entry.get("path") if isinstance(entry, dict) else entry
            if isinstance(dep_path, str) and dep_path:
                paths.append(normalize_path(dep_path))
        dependency_map[normalize_path(source)] = paths

    return dependency_map


def _shape_mismatches(local: Any, fallback: Any, path: str) -> Iterator[tuple[ErrorCode, str]]:
    """Yield (code, message) for every place ``local`` is not covered by ``fallback``."""
    if isinstance(local, dict):
        if not isinstance(fallback, dict):
            yield ErrorCode.TOKEN_SHAPE_MISMATCH, f"Token '{path}' is a mapping but not in the fallback node"
            return
        for key, value in local.items():
            child_path = f"{path}.{key}"
            if key not in fallback:
                yield ErrorCode.TOKEN_MISSING_IN_FALLBACK, f"Token '{child_path}' does not exist in the fallback node"
            else:
                yield from _shape_mismatches(value, fallback[key], child_path)
    elif isinstance(local, list):
        if not isinstance(fallback, list):
            yield ErrorCode.TOKEN_SHAPE_MISMATCH, f"Token '{path}' is a list but not in the fallback node"
            return
        if len(local) != len(fallback):
            yield (
                ErrorCode.TOKEN_SHAPE_MISMATCH,
                f"Token '{path}' has {len(local)} items, fallback node has {len(fallback)}"
            )
            return
        for index, (item, fallback_item) in enumerate(zip(local, fallback)):
            yield from _shape_mismatches(item, fallback_item, f"{path}[{index}]")
    elif isinstance(fallback, (dict, list)):
        yield ErrorCode.TOKEN_SHAPE_MISMATCH, f"Token '{path}' is a scalar but not in the fallback node"


class TokenValidator:
    """Checks localized nodes against their default-locale counterparts."""

    def __init__(
        self,
        dependency_file_path: str | Path | None,
        nodes: list[ContentNode],
        docset_path: str | Path,
        fallback_docset_path: str | Path | None,
        validation_logger: ValidationLogger,
    ):
        self.nodes = nodes
        self.docset_path = Path(docset_path)
        self.fallback_docset_path = Path(fallback_docset_path) if fallback_docset_path else None
        self.validation_logger = validation_logger
        self.dependency_map = load_dependency_map(dependency_file_path)
        self.fallback_loader = (
            DocsetNodeLoader(self.fallback_docset_path, DEFAULT_LOCALE)
            if self.fallback_docset_path else None
        )
        self.failed_files: set[str] = set()

    def validate(self) -> bool:
        """Validate every node; failures are logged per node.

        Returns:
            True if every node passed
        """
        if self.fallback_docset_path is None:
            logger.info("No fallback docset configured; only dependency resolution is checked")

        for node in self.nodes:
            if not node.source_path:
                continue  # Reported by structural validation
            if not self.validate_node(node):
                self.failed_files.add(node.source_path)

        logger.info(f"Token validation done: {len(self.failed_files)} of {len(self.nodes)} nodes failed")
        return not self.failed_files

    def validate_node(self, node: ContentNode) -> bool:
        """Validate one node. Independent of every other node."""
        valid = self._validate_dependencies(node)

        if self.fallback_loader is not None and node.tokens:
            valid = self._validate_tokens(node) and valid

        return valid

    def _validate_dependencies(self, node: ContentNode) -> bool:
        valid = True
        for dependency in self.dependency_map.get(node.source_path, []):
            if (self.docset_path / dependency).is_file():
                continue

            # Missing locally: needs resolution from the fallback docset
            if self.fallback_docset_path and (self.fallback_docset_path / dependency).is_file():
                continue

            valid = False
            where = "locally or in the fallback docset" if self.fallback_docset_path else "and no fallback docset is configured"
            self.validation_logger.error(
                ErrorCode.DEPENDENCY_UNRESOLVED,
                f"Dependency '{dependency}' of {node.label} cannot be resolved {where}",
                file=node.source_path
            )
        return valid

    def _validate_tokens(self, node: ContentNode) -> bool:
        try:
            fallback_node = self.fallback_loader.load_file(node.source_path, node.kind)
        except NodeLoadError as e:
            self.validation_logger.error(
                ErrorCode.FALLBACK_NODE_MISSING,
                f"No usable fallback for {node.label}: {e.reason}",
                file=node.source_path
            )
            return False

        valid = True
        for key, value in node.tokens.items():
            if key not in fallback_node.tokens:
                mismatches = [(ErrorCode.TOKEN_MISSING_IN_FALLBACK, f"Token '{key}' does not exist in the fallback node")]
            else:
                mismatches = list(_shape_mismatches(value, fallback_node.tokens[key], key))

            for code, message in mismatches:
                valid = False
                self.validation_logger.error(code, f"{message} ({node.label})", file=node.source_path)

        return valid
