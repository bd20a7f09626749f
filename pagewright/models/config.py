"""Typed site configuration, validated once when the config file is loaded."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Stages every build runs around the configured operations.
START_OPERATION = "@start"
END_OPERATION = "@end"
RENDER_OPERATION = "@render"


class SiteSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = "My Pagewright Site"
    url: str = ""


class ContentSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = "content"


class OutputSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = "dist"


class StaticSection(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    path: str = "static"
    output: str = "static"
    copy_files: bool = Field(default=True, alias="copy")


class TransformSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    operations: List[str] = Field(default_factory=list)

    @field_validator("operations")
    @classmethod
    def _unique_operations(cls, value: List[str]) -> List[str]:
        seen: set = set()
        for operation in value:
            if operation in seen:
                raise ValueError(f"transform operation '{operation}' is listed more than once")
            seen.add(operation)
        return value


class BuildSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    concurrency: int = Field(
        default=3,
        ge=1,
        description="Maximum number of page tasks in flight per phase.",
    )


class HandlerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    extensions: List[str] = Field(default_factory=list)
    handler: str
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("extensions")
    @classmethod
    def _dotted_extensions(cls, value: List[str]) -> List[str]:
        for extension in value:
            if not extension.startswith(".") or len(extension) < 2:
                raise ValueError(f"extension '{extension}' must start with '.'")
        return value


class SiteConfig(BaseModel):
    """The whole configuration document, with defaults for every section."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    site: SiteSection = Field(default_factory=SiteSection)
    content: ContentSection = Field(default_factory=ContentSection)
    output: OutputSection = Field(default_factory=OutputSection)
    static: StaticSection = Field(default_factory=StaticSection)
    transform: TransformSection = Field(default_factory=TransformSection)
    build: BuildSection = Field(default_factory=BuildSection)
    handlers: Dict[str, HandlerConfig] = Field(default_factory=dict)
