"""Tests for configuration loading (Site.load_config) and handler loading."""

import asyncio

import pytest

from pagewright.errors import BuildError
from pagewright.handlers.loader import load_handler_class
from pagewright.handlers.markdown import MarkdownContentHandler
from pagewright.services.site import Site

_MINIMAL = """
[site]
title = "Rockets"
url = "https://example.com"

[transform]
operations = ["@render"]

[handlers.markdown]
extensions = [".md"]
handler = "markdown"
"""


class TestLoadConfig:
    def test_loads_sections_and_handlers(self, tmp_path, write_config):
        config_path = write_config(_MINIMAL)
        site = Site()
        asyncio.run(site.load_config(config_path))

        assert site.meta.title == "Rockets"
        assert site.root == tmp_path
        assert site.content_root == tmp_path / "content"
        assert site.output_root == tmp_path / "dist"
        assert site.static_output_root == tmp_path / "dist" / "static"
        assert site.concurrency == 3
        assert isinstance(site.get_handler("markdown"), MarkdownContentHandler)

    def test_handler_options_and_concurrency(self, write_config):
        config_path = write_config(
            _MINIMAL
            + '\n[handlers.markdown.options]\nmarkdown_extensions = ["tables"]\n\n[build]\nconcurrency = 7\n',
        )
        site = Site()
        asyncio.run(site.load_config(config_path))
        assert site.get_handler("markdown").options == {"markdown_extensions": ["tables"]}
        assert site.concurrency == 7

    def test_reload_discards_handlers_and_pages(self, write_config):
        config_path = write_config(_MINIMAL)
        site = Site()
        asyncio.run(site.load_config(config_path))
        first = site.get_handler("markdown")
        site.pages.create_page("/x", first)

        asyncio.run(site.load_config(config_path))
        assert site.get_handler("markdown") is not first
        assert len(site.pages) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(BuildError, match="could not open configuration file"):
            asyncio.run(Site().load_config(tmp_path / "missing.toml"))

    def test_malformed_toml_reports_location(self, write_config):
        config_path = write_config("[site\ntitle = 1\n")
        with pytest.raises(BuildError, match="line 1"):
            asyncio.run(Site().load_config(config_path))

    def test_unknown_section_rejected(self, write_config):
        config_path = write_config(_MINIMAL + "\n[cache]\nenabled = true\n")
        with pytest.raises(BuildError, match="invalid configuration file") as exc_info:
            asyncio.run(Site().load_config(config_path))
        assert exc_info.value.data

    def test_zero_concurrency_rejected(self, write_config):
        config_path = write_config(_MINIMAL + "\n[build]\nconcurrency = 0\n")
        with pytest.raises(BuildError, match="invalid configuration file"):
            asyncio.run(Site().load_config(config_path))

    def test_extension_without_dot_rejected(self, write_config):
        config_path = write_config(_MINIMAL.replace('[".md"]', '["md"]'))
        with pytest.raises(BuildError, match="invalid configuration file"):
            asyncio.run(Site().load_config(config_path))

    def test_render_operation_required(self, write_config):
        config_path = write_config(_MINIMAL.replace('["@render"]', '["minify"]'))
        with pytest.raises(BuildError, match="'@render'"):
            asyncio.run(Site().load_config(config_path))

    def test_duplicate_extension_across_handlers(self, write_config):
        config_path = write_config(
            _MINIMAL + '\n[handlers.other]\nextensions = [".md"]\nhandler = "html"\n',
        )
        with pytest.raises(BuildError, match="already claimed"):
            asyncio.run(Site().load_config(config_path))

    def test_missing_content_directory(self, write_config):
        config_path = write_config(_MINIMAL + '\n[content]\npath = "nowhere"\n')
        with pytest.raises(BuildError, match="content directory"):
            asyncio.run(Site().load_config(config_path))


class TestLoadHandlerClass:
    def test_builtin_names(self):
        from pagewright.handlers.file import FileContentHandler
        from pagewright.handlers.html import HtmlContentHandler

        assert load_handler_class("markdown") is MarkdownContentHandler
        assert load_handler_class("html") is HtmlContentHandler
        assert load_handler_class("file") is FileContentHandler

    def test_module_reference(self):
        assert load_handler_class("pagewright.handlers.markdown:MarkdownContentHandler") is MarkdownContentHandler

    def test_unknown_name(self):
        with pytest.raises(BuildError, match="neither a built-in handler"):
            load_handler_class("restructuredtext")

    def test_missing_module(self):
        with pytest.raises(BuildError, match="could not import handler module"):
            load_handler_class("no_such_module_here:Handler")

    def test_not_a_handler(self):
        with pytest.raises(BuildError, match="is not a content handler class"):
            load_handler_class("pagewright.errors:BuildError")
