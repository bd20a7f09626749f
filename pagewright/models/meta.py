"""Page metadata: built-in defaults overlaid by handler defaults and frontmatter."""

from datetime import date, datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PageMeta(BaseModel):
    """Merged metadata for one page.

    Frontmatter keys use camelCase (``publishDate``); the attributes are
    snake_case.  Keys the model does not know about (handler-specific
    extensions) are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str = ""
    author: str = ""
    publish_date: datetime = Field(default=EPOCH, alias="publishDate")
    update_date: datetime = Field(default=EPOCH, alias="updateDate")
    draft: bool = False
    tags: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    static: bool = False
    handler: Optional[str] = None

    @field_validator("publish_date", "update_date", mode="before")
    @classmethod
    def _widen_date(cls, value):
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)
        return value

    @field_validator("publish_date", "update_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # TOML local datetimes and ISO strings without an offset are naive.
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
