"""The Page entity: one unit of output, identified by its output path."""

import logging
import posixpath
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from pagewright.errors import BuildError
from pagewright.models.meta import PageMeta

if TYPE_CHECKING:
    from pagewright.handlers.base import ContentHandler
    from pagewright.services.site import Site

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = "index.html"


class Page:
    """A page and its working state.

    ``path`` is the output-root-relative path with a leading ``/`` and never
    changes.  ``contents`` is handler-owned: it changes shape between
    transform stages and the pipeline never looks inside it.
    """

    def __init__(
        self,
        site: "Site",
        path: str,
        handler: "ContentHandler",
        content_path: Optional[str] = None,
    ) -> None:
        if not path.startswith("/"):
            raise BuildError(f"page path '{path}' must be absolute")

        self.site = site
        self._path = path
        self._handler = handler
        self.content_path = content_path

        self.contents: Any = None
        # Metadata as read from the page itself (frontmatter or sidecar file).
        self.raw_meta: Dict[str, Any] = {}
        self._meta: Optional[PageMeta] = None

        self.output_time: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"Page({self._path!r}, handler={self._handler.name!r})"

    @property
    def path(self) -> str:
        return self._path

    @property
    def handler(self) -> "ContentHandler":
        return self._handler

    @property
    def meta(self) -> PageMeta:
        """Built-in defaults, then handler defaults, then the page's own metadata."""
        if self._meta is None:
            merged = {**self._handler.default_meta, **self.raw_meta}
            try:
                self._meta = PageMeta.model_validate(merged)
            except ValueError as exc:
                raise BuildError(f"invalid metadata for page '{self.source_path}'", data=str(exc)) from exc
        return self._meta

    def set_meta(self, raw_meta: Dict[str, Any]) -> None:
        self.raw_meta = dict(raw_meta)
        self._meta = None

    def assign_handler(self, handler: "ContentHandler") -> None:
        """Move ownership to *handler*; only the classify step calls this."""
        self._handler = handler
        self._meta = None

    # ── Paths ─────────────────────────────────────────────────────────────────

    @property
    def source_path(self) -> str:
        """A path suitable for log messages."""
        return self.content_path or self._path

    @property
    def absolute_content_path(self) -> Path:
        if not self.content_path:
            raise BuildError(f"page '{self._path}' has no content file")
        return self.site.content_root / self.content_path.lstrip("/")

    @property
    def absolute_metadata_path(self) -> Path:
        """Sidecar metadata file: the content file with ``.toml`` appended."""
        content = self.absolute_content_path
        return content.with_name(content.name + ".toml")

    @property
    def output_path(self) -> str:
        """Output-root-relative file path, e.g. ``/falcon9/index.html``."""
        return posixpath.join(self._path, OUTPUT_FILENAME)

    @property
    def filesystem_output_path(self) -> Path:
        return self.site.output_root / self.output_path.lstrip("/")

    # ── Links ─────────────────────────────────────────────────────────────────

    def link(self, target: Union[str, "Page"], absolute: bool = False) -> str:
        """Return the path from this page to *target* (an output path or a page).

        With *absolute*, the configured site URL joined with the target path
        is returned instead.
        """
        target_path = target.path if isinstance(target, Page) else posixpath.join("/", target)
        if absolute:
            return self.site.config.site.url.rstrip("/") + target_path
        return posixpath.relpath(target_path, self._path)

    def static(self, filename: str) -> str:
        """Return the path from this page to *filename* under the static output root."""
        static_path = posixpath.join("/", self.site.config.static.output, filename)
        return posixpath.relpath(static_path, self._path)

    # ── Lifecycle helpers ─────────────────────────────────────────────────────

    async def ingest(self) -> None:
        await self.site.ingest_page(self)

    async def transform(self, operation: Optional[str] = None) -> None:
        await self.site.transform_page(self, operation)

    async def render(self, variant: str, data: Any = None) -> str:
        return await self.site.render_page(self, variant, data)

    async def output(self) -> None:
        await self.site.output_page(self)

    def stamp_output(self) -> None:
        self.output_time = datetime.now(timezone.utc)
