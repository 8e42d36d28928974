"""
Data models for the eCFR agency statistics system.
"""

from datetime import date
from typing import List, Optional, Dict, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator


class CfrRef(BaseModel):
    """A title number and optional chapter scoping an agency's regulations."""
    model_config = ConfigDict(frozen=True)

    title: int
    chapter: Optional[str] = None


class Agency(BaseModel):
    """Federal agency and the CFR locations it owns."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    slug: str
    cfr_refs: List[CfrRef] = Field(
        default_factory=list,
        validation_alias=AliasChoices("cfr_refs", "cfr_references"),
    )


class Title(BaseModel):
    """Entry of the eCFR title catalog."""
    number: int
    name: str
    latest_amended_on: Optional[date] = None
    latest_issue_date: Optional[date] = None
    up_to_date_as_of: Optional[date] = None
    reserved: bool = False


class TitleCatalog(BaseModel):
    """Response of the titles endpoint."""
    titles: List[Title] = Field(default_factory=list)


class HierarchyNode(BaseModel):
    """Node of a title's structure document (title, chapter, subchapter, part...)."""
    identifier: Optional[str] = None
    label: Optional[str] = None
    label_level: Optional[str] = None
    label_description: Optional[str] = None
    type: str
    reserved: bool = False
    size: Optional[int] = None
    children: List["HierarchyNode"] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, value):
        return [] if value is None else value


class TitleVersion(BaseModel):
    """One recorded change event for a title."""
    model_config = ConfigDict(populate_by_name=True)

    identifier: str
    name: Optional[str] = ""
    version_date: Optional[date] = Field(None, alias="date")
    issue_date: date
    amendment_date: date
    substantive: bool = False
    removed: bool = False
    part: Optional[str] = None
    subpart: Optional[str] = None
    title: Optional[Union[int, str]] = None
    type: Optional[str] = None


class VersionList(BaseModel):
    """Response of the versions endpoint."""
    content_versions: List[TitleVersion] = Field(default_factory=list)


class HistoricalChange(BaseModel):
    """Substantive change to a title, with a link to the rendered text."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: int
    issue_date: date
    amendment_date: date
    description: str
    ref_uri: str


class StatisticsResult(BaseModel):
    """Aggregated statistics for one agency."""
    agency: Agency
    word_count: int = 0
    checksum: str = ""
    changes: List[HistoricalChange] = Field(default_factory=list)
    changes_by_date: Dict[str, int] = Field(default_factory=dict)
    regs_by_title: Dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def number_of_titles(self) -> int:
        """Number of distinct titles the agency references."""
        return len(self.regs_by_title)
