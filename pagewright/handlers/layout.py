"""Page layout shared by the built-in text handlers."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from markupsafe import Markup

from pagewright.services.page import Page
from pagewright.services.template import TemplateResult, template_to_raw

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=True,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def _render(name: str, **values: Any) -> Markup:
    return Markup(_environment.get_template(name).render(**values))


def html_page(
    page: Page,
    body: TemplateResult,
    head: TemplateResult = None,
    title: Optional[str] = None,
) -> Markup:
    """Wrap *body* in a complete HTML document for *page*."""
    return _render(
        "document.html",
        stylesheet=page.static("style.css"),
        title=title if title is not None else page.meta.title,
        head=template_to_raw(head),
        body=template_to_raw(body),
    )


def page_header(page: Page) -> Markup:
    return _render("header.html", home=page.link("/"), site_title=page.site.meta.title)


def page_footer(page: Page) -> Markup:
    return _render(
        "footer.html",
        source=page.source_path,
        generated=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )


def page_main(page: Page, text: TemplateResult) -> Markup:
    """Header, a text section holding *text*, and footer."""
    return _render("main.html", header=page_header(page), text=template_to_raw(text), footer=page_footer(page))
