"""Escaped-string helpers used by render variants.

Plain strings and numbers are HTML-escaped when a result is flattened;
:class:`markupsafe.Markup` values pass through untouched.  :func:`html`
renders a trusted Jinja2 snippet with autoescaping, so::

    html("<strong>{{ label }}</strong>", label="a <b> is escaped")

renders ``<strong>a &lt;b&gt; is escaped</strong>``.
"""

from typing import Any, Union

from jinja2 import Environment, StrictUndefined
from markupsafe import Markup, escape

# Already-safe markup.
Raw = Markup

TemplateResult = Union[Markup, str, int, float, list, tuple, None]

_environment = Environment(autoescape=True, undefined=StrictUndefined, keep_trailing_newline=True)


def raw(contents: str) -> Markup:
    """Mark *contents* as already-safe markup."""
    return Markup(contents)


def html(markup: str, **values: Any) -> Markup:
    """Render the trusted Jinja2 snippet *markup*, escaping every value that is not markup."""
    return Markup(_environment.from_string(markup).render(**values))


def template_to_string(template: TemplateResult) -> str:
    """Flatten *template* to a fully escaped string."""
    if template is None:
        return ""
    if isinstance(template, (list, tuple)):
        return "".join(template_to_string(item) for item in template)
    if isinstance(template, (Markup, str, int, float)):
        return str(escape(template))
    return ""


def template_to_raw(template: TemplateResult) -> Markup:
    """Flatten *template* and wrap the result so it is not escaped again."""
    return Markup(template_to_string(template))
