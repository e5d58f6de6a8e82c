"""Models for the publish manifest produced by the build."""

from pydantic import BaseModel, ConfigDict, Field


class PublishItem(BaseModel):
    """One published file entry."""
    source_path: str | None = Field(alias="sourcePath", default=None)
    output_path: str | None = Field(alias="outputPath", default=None)
    has_error: bool = Field(alias="hasError", default=False)

    # Other build stages own the remaining keys; keep them on write-back
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class PublishManifest(BaseModel):
    """Ordered collection of published files."""
    files: list[PublishItem] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="allow")
