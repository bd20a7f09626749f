"""Tests for pagewright.services.registry.HandlerRegistry."""

import asyncio

import pytest

from pagewright.errors import BuildError
from pagewright.handlers.base import ContentHandler


class TestAdd:
    def test_dispatch_by_extension(self, site):
        markdown = ContentHandler(site, "markdown", extensions=[".md", ".markdown"])
        asyncio.run(site.handlers.add(markdown))
        assert site.handlers.get_handler_for_extension(".md") is markdown
        assert site.handlers.get_handler_for_extension(".markdown") is markdown
        assert site.handlers.has_extension(".md")
        assert site.handlers.has("markdown")

    def test_two_handlers_claiming_one_extension_fail(self, site):
        asyncio.run(site.handlers.add(ContentHandler(site, "first", extensions=[".md"])))
        with pytest.raises(BuildError, match="extension '.md' already claimed by 'first'"):
            asyncio.run(site.handlers.add(ContentHandler(site, "second", extensions=[".md"])))
        assert not site.handlers.has("second")

    def test_same_name_replaces_and_frees_extensions(self, site):
        asyncio.run(site.handlers.add(ContentHandler(site, "md", extensions=[".md", ".txt"])))
        replacement = ContentHandler(site, "md", extensions=[".md", ".markdown"])
        asyncio.run(site.handlers.add(replacement))

        assert len(site.handlers) == 1
        assert site.handlers.get_handler_for_extension(".markdown") is replacement
        assert not site.handlers.has_extension(".txt")

    def test_registration_adds_render_operation(self, site):
        handler = ContentHandler(site, "bare", extensions=[".md"])
        asyncio.run(site.handlers.add(handler))
        assert "@render" in handler.transform_operations


class TestLookup:
    def test_extension_match_is_exact_and_case_sensitive(self, site):
        asyncio.run(site.handlers.add(ContentHandler(site, "md", extensions=[".md"])))
        with pytest.raises(BuildError, match="no content handler for extension '.MD'"):
            site.handlers.get_handler_for_extension(".MD")
        with pytest.raises(BuildError):
            site.handlers.get_handler_for_extension("md")

    def test_unknown_name(self, site):
        with pytest.raises(BuildError, match="site configuration"):
            site.handlers.get("missing")

    def test_remove_all(self, site):
        asyncio.run(site.handlers.add(ContentHandler(site, "md", extensions=[".md"])))
        site.handlers.remove_all()
        assert len(site.handlers) == 0
        assert not site.handlers.has_extension(".md")

    def test_remove_frees_extensions(self, site):
        asyncio.run(site.handlers.add(ContentHandler(site, "md", extensions=[".md"])))
        asyncio.run(site.handlers.remove("md"))
        assert not site.handlers.has("md")
        asyncio.run(site.handlers.add(ContentHandler(site, "other", extensions=[".md"])))
        assert site.handlers.get_handler_for_extension(".md").name == "other"
