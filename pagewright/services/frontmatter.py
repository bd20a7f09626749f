"""TOML frontmatter splitting and parsing."""

import re
import tomllib
from typing import Any, Dict, Tuple

from pagewright.errors import BuildError

_DELIMITER_RE = re.compile(r"^\+\+\+\r?$", re.MULTILINE)


def split_frontmatter(text: str) -> Tuple[str, str]:
    """Split *text* into ``(metadata_block, body)``.

    The metadata block is everything before the first line consisting of
    exactly ``+++`` and the body everything after it.  Without a delimiter
    the whole text is body.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    match = _DELIMITER_RE.search(text)
    if not match:
        return "", text

    meta = text[: match.start()]
    body = text[match.end():]
    if body.startswith("\n"):
        body = body[1:]
    return meta, body


def parse_metadata(block: str, source: str) -> Dict[str, Any]:
    """Parse a TOML metadata *block*; *source* names the page in error messages."""
    if not block.strip():
        return {}
    try:
        return tomllib.loads(block)
    except tomllib.TOMLDecodeError as exc:
        raise BuildError(f"could not parse metadata for page '{source}': {exc}") from exc
