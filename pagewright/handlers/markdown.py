"""Markdown pages rendered with Python-Markdown."""

import logging
from typing import Any

import markdown

from pagewright.handlers.base import DEFAULT_VARIANT, TextContentHandler
from pagewright.handlers.layout import html_page, page_main
from pagewright.services.page import Page
from pagewright.services.template import TemplateResult, raw

logger = logging.getLogger(__name__)

DEFAULT_MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


class MarkdownContentHandler(TextContentHandler):
    """Options: ``markdown_extensions`` (list of Python-Markdown extension names)."""

    async def register(self) -> None:
        self.add_render_variant(DEFAULT_VARIANT, self.render_page)

    def to_html(self, text: str) -> str:
        extensions = self.options.get("markdown_extensions", DEFAULT_MARKDOWN_EXTENSIONS)
        return markdown.markdown(text or "", extensions=extensions)

    def render_page(self, page: Page, variant: str, data: Any = None) -> TemplateResult:
        return html_page(page, body=page_main(page, raw(self.to_html(page.contents))))
