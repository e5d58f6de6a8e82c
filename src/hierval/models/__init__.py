"""Pydantic data models for hierval inputs and outputs."""

from hierval.models.hierarchy import HierarchyItem, RawHierarchy
from hierval.models.node import ContentNode, NodeKind
from hierval.models.publish import PublishItem, PublishManifest
from hierval.models.sync import DrySyncMessage, ValidationResult

__all__ = [
    "ContentNode",
    "NodeKind",
    "HierarchyItem",
    "RawHierarchy",
    "PublishItem",
    "PublishManifest",
    "DrySyncMessage",
    "ValidationResult",
]
