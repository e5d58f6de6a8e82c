"""Loading of content nodes from a docset.

The content parser upstream writes a node manifest listing the hierarchy
files of the build:

    {"files": [{"sourcePath": "learn/intro/index.yml", "type": "Module"}, ...]}

Each listed file is a YAML document with a ``uid``, the child list for its
kind (``modules`` for learning paths, ``units`` for modules) and any number of
localizable fields, which become the node's tokens.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from hierval.errors import NodeLoadError
from hierval.models.node import ContentNode, NodeKind
from hierval.utils.paths import normalize_path

logger = logging.getLogger(__name__)

CHILD_KEYS: dict[NodeKind, str] = {
    NodeKind.LEARNING_PATH: "modules",
    NodeKind.MODULE: "units",
}

STRUCTURAL_KEYS = {"uid", "type", "modules", "units"}


def parse_kind(value: Any) -> NodeKind | None:
    """Map manifest/YAML type names ("LearningPath", "module", ...) to NodeKind."""
    if not isinstance(value, str):
        return None
    key = value.strip().lower().replace("_", "").replace("-", "")
    try:
        return NodeKind(key)
    except ValueError:
        return None


def node_from_document(document: dict[str, Any], source_path: str, kind: NodeKind | None, locale: str) -> ContentNode:
    """Build a ContentNode from a parsed YAML document."""
    kind = kind or parse_kind(document.get("type"))

    children: list[str] = []
    if kind in CHILD_KEYS:
        raw_children = document.get(CHILD_KEYS[kind]) or []
        children = [str(child) for child in raw_children]

    uid = document.get("uid")
    return ContentNode(
        uid=str(uid) if uid else None,
        source_path=normalize_path(source_path),
        kind=kind,
        children=children,
        locale=locale,
        tokens={key: value for key, value in document.items() if key not in STRUCTURAL_KEYS},
    )


class DocsetNodeLoader:
    """Reads hierarchy nodes from one docset directory."""

    def __init__(self, docset_path: str | Path, locale: str):
        self.docset_path = Path(docset_path)
        self.locale = locale

    def exists(self, source_path: str) -> bool:
        return (self.docset_path / normalize_path(source_path)).is_file()

    def load_file(self, source_path: str, kind: NodeKind | None = None) -> ContentNode:
        """Load a single node file.

        Args:
            source_path: Docset-relative path of the YAML file
            kind: Kind declared by the node manifest, if any

        Returns:
            The parsed node

        Raises:
            NodeLoadError: If the file is missing, unreadable, not UTF-8 or not a YAML mapping
        """
        file_path = self.docset_path / normalize_path(source_path)
        try:
            with open(file_path, encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except OSError as e:
            raise NodeLoadError(str(file_path), str(e))
        except UnicodeDecodeError:
            raise NodeLoadError(str(file_path), "invalid UTF-8")
        except yaml.YAMLError as e:
            raise NodeLoadError(str(file_path), f"invalid YAML: {e}")

        if not isinstance(document, dict):
            raise NodeLoadError(str(file_path), "expected a YAML mapping")

        return node_from_document(document, source_path, kind, self.locale)

    def load_manifest(self, manifest_file_path: str | Path) -> list[ContentNode]:
        """Load every node listed in the node manifest, in manifest order.

        Raises:
            NodeLoadError: If the manifest or a listed file cannot be read
        """
        manifest_path = Path(manifest_file_path)
        try:
            with open(manifest_path, encoding="utf-8") as f:
                manifest = json.load(f)
        except OSError as e:
            raise NodeLoadError(str(manifest_path), str(e))
        except UnicodeDecodeError:
            raise NodeLoadError(str(manifest_path), "invalid UTF-8")
        except json.JSONDecodeError as e:
            raise NodeLoadError(str(manifest_path), f"invalid JSON: {e}")

        entries = manifest.get("files", []) if isinstance(manifest, dict) else []
        nodes = []
        for entry in entries:
            source_path = entry.get("sourcePath") if isinstance(entry, dict) else None
            if not source_path:
                logger.warning(f"Skipping manifest entry without sourcePath: {entry}")
                continue
            nodes.append(self.load_file(source_path, parse_kind(entry.get("type"))))

        logger.info(f"Loaded {len(nodes)} hierarchy nodes from {manifest_path}")
        return nodes


def load_nodes(manifest_file_path: str | Path, docset_path: str | Path, locale: str) -> list[ContentNode]:
    """Convenience wrapper around DocsetNodeLoader.load_manifest."""
    return DocsetNodeLoader(docset_path, locale).load_manifest(manifest_file_path)
