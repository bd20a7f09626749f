"""Hand-written HTML pages.

The body may be a fragment or a whole document; only what is inside
``<body>`` is kept.  Pages without a ``title`` in their frontmatter take it
from the document's ``<title>`` or first ``<h1>``.
"""

import logging
from typing import Any

from bs4 import BeautifulSoup

from pagewright.handlers.base import DEFAULT_VARIANT, ContentHandler, TextContentHandler
from pagewright.handlers.layout import html_page, page_main
from pagewright.services.page import Page
from pagewright.services.template import TemplateResult, raw

logger = logging.getLogger(__name__)


def _extract_title(soup: BeautifulSoup) -> str:
    title_tag = soup.find("title")
    if title_tag and title_tag.get_text(strip=True):
        return title_tag.get_text(strip=True)
    h1 = soup.find("h1")
    if h1:
        return h1.get_text(strip=True)
    return ""


def _extract_body(soup: BeautifulSoup) -> str:
    body = soup.find("body")
    if body is None:
        return ""
    return "".join(str(child) for child in body.contents).strip()


class HtmlContentHandler(TextContentHandler):
    async def register(self) -> None:
        self.add_render_variant(DEFAULT_VARIANT, self.render_page)

    async def ingest(self, page: Page) -> None:
        await super().ingest(page)
        self.adopt_document(page)

    async def inherit_page(self, page: Page, previous: ContentHandler) -> None:
        self.adopt_document(page)

    def adopt_document(self, page: Page) -> None:
        """Reduce ``page.contents`` to its body markup and fill in a missing title."""
        if not isinstance(page.contents, str):
            return

        soup = BeautifulSoup(page.contents, "lxml")
        page.contents = _extract_body(soup)

        if "title" not in page.raw_meta:
            title = _extract_title(soup)
            if title:
                logger.debug("HTML: using document title '%s' for '%s'", title, page.source_path)
                page.set_meta({**page.raw_meta, "title": title})

    def render_page(self, page: Page, variant: str, data: Any = None) -> TemplateResult:
        return html_page(page, body=page_main(page, raw(page.contents or "")))
