"""The content handler contract and the shared text handler.

A handler is constructed with ``(site, name, options, extensions)``, one per
``[handlers.<name>]`` table of the site configuration.  Subclasses override
:meth:`ContentHandler.register` to declare their transform operations and
render variants, and the ``ingest``/``output`` pair to move bytes in and out.
"""

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Union

from pagewright.errors import BuildError
from pagewright.models.config import RENDER_OPERATION
from pagewright.services.frontmatter import parse_metadata, split_frontmatter
from pagewright.services.template import TemplateResult, template_to_string

if TYPE_CHECKING:
    from pagewright.services.page import Page
    from pagewright.services.site import Site

logger = logging.getLogger(__name__)

GlobalTransformCallback = Callable[[str], Any]
TransformCallback = Callable[["Page", str, Any], Any]
RenderCallback = Callable[["Page", str, Any], Union[TemplateResult, Awaitable[TemplateResult]]]

_GLOBAL_SUFFIXES = ("-pre", "-post")

DEFAULT_VARIANT = "@page"


async def _resolve(value: Any) -> Any:
    """Await *value* if the callback turned out to be a coroutine function."""
    if inspect.isawaitable(value):
        return await value
    return value


def stage_of(operation: str) -> str:
    """Strip a ``-pre``/``-post`` suffix from a global operation name."""
    for suffix in _GLOBAL_SUFFIXES:
        if operation.endswith(suffix):
            return operation[: -len(suffix)]
    return operation


class ContentHandler:
    """Base class for every content handler."""

    def __init__(
        self,
        site: "Site",
        name: str,
        options: Optional[Dict[str, Any]] = None,
        extensions: Optional[List[str]] = None,
    ) -> None:
        self.site = site
        self.name = name
        self.options: Dict[str, Any] = dict(options or {})
        self.extensions: List[str] = list(extensions or [])

        self.global_transform_operations: Dict[str, GlobalTransformCallback] = {}
        self.transform_operations: Dict[str, TransformCallback] = {}
        self.render_variants: Dict[str, RenderCallback] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def default_meta(self) -> Dict[str, Any]:
        """Metadata merged beneath every page's own metadata."""
        return dict(self.options.get("meta", {}))

    # ── Registration ──────────────────────────────────────────────────────────

    async def setup(self) -> None:
        """Add the built-in ``@render`` operation, then run :meth:`register`."""
        self.add_transform_operation(RENDER_OPERATION, self._render_default_variant)
        await _resolve(self.register())

    async def register(self) -> None:
        """Declare transform operations and render variants."""

    async def unregister(self) -> None:
        pass

    def add_global_transform_operation(self, operation: str, callback: GlobalTransformCallback) -> None:
        """Run *callback* once per build around stage *operation*.

        ``<stage>-pre`` runs before any page enters the stage, ``<stage>``
        and ``<stage>-post`` after every page has left it.  Existing
        callbacks for the same name are replaced.
        """
        self.site.ensure_transform_operation(stage_of(operation))
        self.global_transform_operations[operation] = callback

    def add_transform_operation(self, operation: str, callback: TransformCallback) -> None:
        self.site.ensure_transform_operation(operation)
        self.transform_operations[operation] = callback

    def add_render_variant(self, variant: str, callback: RenderCallback) -> None:
        self.render_variants[variant] = callback

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def add_content(self, content_path: str) -> "Page":
        """Create the page for a content file; *content_path* is content-root relative."""
        return self.site.pages.create_page_from_filename(content_path, self)

    async def ingest(self, page: "Page") -> None:
        logger.warning("Handler '%s' should override 'ingest' (page '%s')", self.name, page.source_path)

    async def inherit_page(self, page: "Page", previous: "ContentHandler") -> None:
        """Adapt *page*, ingested by *previous*, now that this handler owns it."""

    def split_frontmatter(self, page: "Page") -> None:
        """Split ``page.contents`` into metadata and body, and parse the metadata."""
        meta, body = split_frontmatter(page.contents)
        page.contents = body
        page.set_meta(parse_metadata(meta, page.source_path))

    async def transform_global(self, operation: str) -> None:
        callback = self.global_transform_operations.get(operation)
        if callback is not None:
            logger.debug("Handler '%s': running global operation '%s'", self.name, operation)
            await _resolve(callback(operation))

    async def transform(self, page: "Page", operation: str) -> None:
        callback = self.transform_operations.get(operation)
        # Handlers that do not take part in a stage are skipped.
        if callback is None:
            return

        page.contents = await _resolve(callback(page, operation, page.contents))
        if page.contents is None:
            logger.warning(
                "Page contents are empty after running transform operation '%s' of handler '%s' on '%s'",
                operation,
                self.name,
                page.source_path,
            )

    async def render(self, page: "Page", variant: str, data: Any = None) -> str:
        callback = self.render_variants.get(variant)
        if callback is None:
            logger.warning(
                "Handler '%s' has no render callback for the '%s' variant (used on '%s')",
                self.name,
                variant,
                page.source_path,
            )
            return ""
        return template_to_string(await _resolve(callback(page, variant, data)))

    async def output(self, page: "Page") -> None:
        logger.warning("Handler '%s' should override 'output' (page '%s')", self.name, page.source_path)

    async def _render_default_variant(self, page: "Page", operation: str, contents: Any) -> str:
        return await self.site.render_page(page, DEFAULT_VARIANT)


class TextContentHandler(ContentHandler):
    """Reads UTF-8 content with frontmatter and writes ``page.contents`` as text."""

    async def ingest(self, page: "Page") -> None:
        filename = page.absolute_content_path
        try:
            page.contents = await asyncio.to_thread(filename.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise BuildError(f"could not read content file '{filename}'") from exc

        self.split_frontmatter(page)

    async def output(self, page: "Page") -> None:
        destination = page.filesystem_output_path
        logger.debug("Handler '%s': writing '%s' to '%s'", self.name, page.source_path, destination)

        contents = page.contents if page.contents is not None else ""
        try:
            await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(destination.write_text, str(contents), encoding="utf-8")
        except OSError as exc:
            raise BuildError(f"could not write output file '{destination}'") from exc
