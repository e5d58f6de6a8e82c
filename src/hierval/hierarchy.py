"""Projection of validated nodes into the raw hierarchy document."""

import json
import logging
from pathlib import Path

from hierval.models.hierarchy import HierarchyItem, RawHierarchy
from hierval.models.node import ContentNode

logger = logging.getLogger(__name__)


def generate_hierarchy(nodes: list[ContentNode], output_path: str) -> RawHierarchy:
    """Build the hierarchy for a list of validated nodes.

    Deterministic: item order and root order follow the input order. Nodes
    without a uid, source path or kind cannot be projected and are skipped;
    structural validation has already reported them.

    Args:
        nodes: Validated nodes, in manifest order
        output_path: Docset output path recorded on the hierarchy

    Returns:
        A new, immutable RawHierarchy
    """
    referenced = {child for node in nodes for child in node.children}

    items = []
    roots = []
    for node in nodes:
        if not node.uid or not node.source_path or node.kind is None:
            continue

        items.append(HierarchyItem(
            uid=node.uid,
            type=node.kind,
            source_relative_path=node.source_path,
            children=tuple(node.children),
            title=node.title,
            locale=node.locale,
        ))
        if node.uid not in referenced and node.uid not in roots:
            roots.append(node.uid)

    logger.debug(f"Generated hierarchy with {len(items)} items and {len(roots)} roots")
    return RawHierarchy(output_path=output_path, roots=tuple(roots), items=tuple(items))


def write_hierarchy(hierarchy: RawHierarchy, path: str | Path) -> Path:
    """Write the hierarchy as indented JSON and return the file path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(hierarchy.model_dump(mode="json", by_alias=True), f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote hierarchy to {path}")
    return path
