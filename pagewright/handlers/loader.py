"""Resolve the ``handler`` value of a handler configuration to a class."""

import importlib
import logging
from typing import Dict, Type

from pagewright.errors import BuildError
from pagewright.handlers.base import ContentHandler

logger = logging.getLogger(__name__)

# Built-in handlers, imported lazily so their libraries load only when used.
BUILTIN_HANDLERS: Dict[str, str] = {
    "markdown": "pagewright.handlers.markdown:MarkdownContentHandler",
    "html": "pagewright.handlers.html:HtmlContentHandler",
    "file": "pagewright.handlers.file:FileContentHandler",
}


def load_handler_class(reference: str) -> Type[ContentHandler]:
    """Return the handler class named by *reference*.

    *reference* is a built-in name (``markdown``, ``html``, ``file``) or an
    import reference of the form ``package.module:ClassName``.
    """
    target = BUILTIN_HANDLERS.get(reference, reference)
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise BuildError(
            f"handler '{reference}' is neither a built-in handler "
            f"({', '.join(sorted(BUILTIN_HANDLERS))}) nor a 'module:ClassName' reference"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise BuildError(f"could not import handler module '{module_name}'") from exc

    handler_class = getattr(module, attribute, None)
    if not isinstance(handler_class, type) or not issubclass(handler_class, ContentHandler):
        raise BuildError(f"'{target}' is not a content handler class")
    return handler_class
