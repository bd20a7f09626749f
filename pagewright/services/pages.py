"""Page registry: output path → Page, plus page queries."""

import logging
import posixpath
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from pagewright.errors import BuildError
from pagewright.models.criteria import PageCriteria, PageFilter
from pagewright.services.page import Page

if TYPE_CHECKING:
    from pagewright.handlers.base import ContentHandler
    from pagewright.services.site import Site

logger = logging.getLogger(__name__)


def path_from_filename(content_path: str) -> str:
    """Return the output path for a content-root-relative filename.

    ``index.md`` → ``/``, ``a/index.md`` → ``/a``, ``a/b/c.gif`` → ``/a/b/c``.
    """
    directory, filename = posixpath.split(posixpath.join("/", content_path))
    name, _ext = posixpath.splitext(filename)
    if name == "index":
        return posixpath.normpath(directory)
    return posixpath.join(directory, name)


def _matches_values(page_values: List[str], wanted: List[str], require_all: bool) -> bool:
    if not wanted:
        return True
    present = set(page_values)
    if require_all:
        return all(value in present for value in wanted)
    return any(value in present for value in wanted)


def matches_filter(page: Page, clause: PageFilter) -> bool:
    meta = page.meta
    return _matches_values(meta.tags, clause.tags, clause.all_tags) and _matches_values(
        meta.categories, clause.categories, clause.all_categories
    )


class PageRegistry:
    def __init__(self, site: "Site") -> None:
        self.site = site
        self._pages: Dict[str, Page] = {}

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(list(self._pages.values()))

    def __contains__(self, path: str) -> bool:
        return path in self._pages

    def remove_all(self) -> None:
        self._pages.clear()

    def create_page(
        self,
        path: str,
        handler: "ContentHandler",
        content_path: Optional[str] = None,
    ) -> Page:
        if path in self._pages:
            existing = self._pages[path]
            raise BuildError(
                f"cannot add duplicate page '{path}' (already created from '{existing.source_path}')",
                data={"path": path, "content_path": content_path},
            )
        page = Page(self.site, path, handler, content_path)
        self._pages[path] = page
        logger.debug("Pages: created '%s' for '%s' (handler '%s')", path, page.source_path, handler.name)
        return page

    def create_page_from_filename(self, content_path: str, handler: "ContentHandler") -> Page:
        return self.create_page(path_from_filename(content_path), handler, content_path)

    def get_page(self, path: str) -> Page:
        page = self._pages.get(path)
        if page is None:
            message = f"no page with path '{path}'"
            _root, ext = posixpath.splitext(path)
            if ext:
                message += f" (page paths have no extension; did you mean '{path_from_filename(path)}'?)"
            raise BuildError(message)
        return page

    def get_page_from(self, page: Page, relative_content_path: str) -> Page:
        """Resolve *relative_content_path* against *page*'s content directory."""
        if not page.content_path:
            raise BuildError(
                f"cannot resolve '{relative_content_path}' relative to page '{page.path}' without a content file"
            )
        directory = posixpath.dirname(posixpath.join("/", page.content_path))
        resolved = posixpath.normpath(posixpath.join(directory, relative_content_path))
        return self.get_page(path_from_filename(resolved))

    def get_pages(self, criteria: Optional[PageCriteria] = None) -> List[Page]:
        """Return listable pages, newest first, filtered by *criteria*."""
        pages = [page for page in self._pages.values() if not page.meta.static and not page.meta.draft]
        # sorted() is stable, so pages with equal dates keep creation order.
        pages = sorted(pages, key=lambda page: page.meta.publish_date, reverse=True)

        if criteria is not None:
            if criteria.include is not None:
                pages = [page for page in pages if matches_filter(page, criteria.include)]
            if criteria.exclude is not None:
                pages = [page for page in pages if not matches_filter(page, criteria.exclude)]

        return pages
