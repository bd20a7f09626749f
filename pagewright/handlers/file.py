"""Non-text assets (images, downloads, …) copied into the output tree.

Metadata comes from an optional sidecar file next to the asset, named after
it with ``.toml`` appended (``photo.jpg.toml``).  Pages are static unless
the sidecar or the handler options say otherwise.
"""

import asyncio
import logging
import posixpath
import shutil
from pathlib import Path
from typing import Any, Dict

from pagewright.errors import BuildError
from pagewright.handlers.base import DEFAULT_VARIANT, ContentHandler
from pagewright.services.frontmatter import parse_metadata
from pagewright.services.page import Page
from pagewright.services.template import TemplateResult

logger = logging.getLogger(__name__)


class FileContentHandler(ContentHandler):
    @property
    def default_meta(self) -> Dict[str, Any]:
        return {"static": True, **super().default_meta}

    async def register(self) -> None:
        self.add_render_variant(DEFAULT_VARIANT, self.render_page)

    def output_relative_path(self, page: Page) -> str:
        """The page path with the asset's original extension, ``/gallery`` -> ``gallery.png``."""
        if not page.content_path:
            raise BuildError(f"page '{page.path}' has no content file to copy")
        stem = page.path.strip("/") or "index"
        return stem + Path(page.content_path).suffix

    def output_file(self, page: Page) -> Path:
        return page.site.output_root / self.output_relative_path(page)

    async def ingest(self, page: Page) -> None:
        source = page.absolute_content_path
        if not source.is_file():
            raise BuildError(f"content file '{source}' does not exist")

        sidecar = page.absolute_metadata_path
        if sidecar.is_file():
            try:
                text = await asyncio.to_thread(sidecar.read_text, encoding="utf-8")
            except OSError as exc:
                raise BuildError(f"could not read metadata file '{sidecar}'") from exc
            page.set_meta(parse_metadata(text, page.source_path))

        page.contents = source

    def render_page(self, page: Page, variant: str, data: Any = None) -> TemplateResult:
        # The rendered form of an asset is the link to its copy.
        if not page.content_path:
            return page.path
        return posixpath.join("/", self.output_relative_path(page))

    async def output(self, page: Page) -> None:
        source = page.absolute_content_path
        destination = self.output_file(page)
        logger.debug("File: copying '%s' to '%s'", source, destination)
        try:
            await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copy2, source, destination)
        except OSError as exc:
            raise BuildError(f"could not copy '{source}' to '{destination}'") from exc
