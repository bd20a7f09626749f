from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PageFilter(BaseModel):
    """One include or exclude clause of a page query.

    Each non-empty list must match for the clause to match.  A list matches
    when the page carries any of its values, or all of them when the
    corresponding ``all_*`` flag is set.
    """

    model_config = ConfigDict(extra="forbid")

    tags: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    all_tags: bool = False
    all_categories: bool = False


class PageCriteria(BaseModel):
    model_config = ConfigDict(extra="forbid")

    include: Optional[PageFilter] = None
    exclude: Optional[PageFilter] = None
