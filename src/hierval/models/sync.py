"""Models for the hierarchy dry-sync protocol."""

from pydantic import BaseModel, ConfigDict, Field

from hierval.models.hierarchy import RawHierarchy


class ValidationResult(BaseModel):
    """Validation verdict for one locale, as returned by the hierarchy service."""
    branch: str | None = None
    locale: str
    is_valid: bool = Field(alias="isValid")
    message: str | None = ""

    model_config = ConfigDict(populate_by_name=True)


class DrySyncMessage(BaseModel):
    """Request envelope for a dry-sync call."""
    hierarchy: RawHierarchy
    locale: str
    branch: str
    docset_name: str = Field(alias="docsetName")
    repo_url: str = Field(alias="repoUrl")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    model_config = ConfigDict(populate_by_name=True)
