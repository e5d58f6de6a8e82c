"""Models for the raw hierarchy document sent to the hierarchy service."""

from pydantic import BaseModel, ConfigDict, Field

from hierval.models.node import NodeKind


class HierarchyItem(BaseModel):
    """Projection of one validated node."""
    uid: str
    type: NodeKind
    source_relative_path: str = Field(alias="sourceRelativePath")
    children: tuple[str, ...] = ()
    title: str | None = None
    locale: str = "en-us"

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)


class RawHierarchy(BaseModel):
    """Serializable hierarchy built once per validation run.

    Never mutated after construction; a new run builds a new one.
    """
    output_path: str = Field(alias="outputPath")
    roots: tuple[str, ...] = ()  # Uids not referenced as a child, in input order
    items: tuple[HierarchyItem, ...] = ()

    def get_item(self, uid: str) -> HierarchyItem | None:
        for item in self.items:
            if item.uid == uid:
                return item
        return None

    model_config = ConfigDict(frozen=True, populate_by_name=True)
