"""Shared fixtures: sites rooted in a temporary directory and file writers."""

from pathlib import Path
from typing import Callable, Iterable

import pytest

from pagewright.models.config import SiteConfig, SiteSection, TransformSection
from pagewright.services.site import Site


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write() -> Callable[[Path, str], Path]:
    return _write


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write ``config.toml`` under ``tmp_path`` next to an empty content root."""

    def _write_config(text: str) -> Path:
        (tmp_path / "content").mkdir(exist_ok=True)
        return _write(tmp_path / "config.toml", text)

    return _write_config


@pytest.fixture
def make_site(tmp_path: Path) -> Callable[..., Site]:
    """Build sites whose content root exists under ``tmp_path``, with no handlers loaded."""

    def _make_site(operations: Iterable[str] = ("@render",), url: str = "") -> Site:
        (tmp_path / "content").mkdir(exist_ok=True)
        config = SiteConfig(
            site=SiteSection(title="Test Site", url=url),
            transform=TransformSection(operations=list(operations)),
        )
        return Site(config, root=tmp_path)

    return _make_site


@pytest.fixture
def site(make_site) -> Site:
    return make_site()
