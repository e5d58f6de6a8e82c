"""Models for learning-content nodes loaded from a docset."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class NodeKind(str, Enum):
    """Hierarchy node kinds."""
    LEARNING_PATH = "learningpath"
    MODULE = "module"
    UNIT = "unit"


# Which child kinds each node kind may reference
ALLOWED_CHILD_KINDS: dict[NodeKind, set[NodeKind]] = {
    NodeKind.LEARNING_PATH: {NodeKind.MODULE},
    NodeKind.MODULE: {NodeKind.UNIT},
    NodeKind.UNIT: set(),
}


class ContentNode(BaseModel):
    """One unit of the content hierarchy.

    Structural fields are typed; everything localizable (title, summary,
    prerequisites, ...) lives in ``tokens``.
    """
    uid: str | None = None
    source_path: str | None = Field(alias="sourcePath", default=None)  # POSIX, docset-relative
    kind: NodeKind | None = None
    children: list[str] = Field(default_factory=list)  # Ordered child uids
    locale: str = "en-us"
    tokens: dict[str, Any] = Field(default_factory=dict)

    @property
    def title(self) -> str | None:
        title = self.tokens.get("title")
        return title if isinstance(title, str) else None

    @property
    def label(self) -> str:
        """Name used in diagnostics when the uid may be missing."""
        return self.uid or self.source_path or "<unknown>"

    model_config = {"populate_by_name": True}
