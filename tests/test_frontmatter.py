"""Tests for pagewright.services.frontmatter."""

from datetime import date

import pytest

from pagewright.errors import BuildError
from pagewright.services.frontmatter import parse_metadata, split_frontmatter


class TestSplitFrontmatter:
    def test_splits_on_delimiter_line(self):
        meta, body = split_frontmatter('title = "Home"\n+++\n# Hi\n')
        assert meta == 'title = "Home"\n'
        assert body == "# Hi\n"

    def test_only_first_delimiter_splits(self):
        meta, body = split_frontmatter('a = 1\n+++\nbody\n+++\nmore\n')
        assert meta == "a = 1\n"
        assert body == "body\n+++\nmore\n"

    def test_leading_delimiter_gives_empty_metadata(self):
        meta, body = split_frontmatter("+++\n# Title\n\n+++\nmore")
        assert meta == ""
        assert body == "# Title\n\n+++\nmore"

    def test_trailing_whitespace_is_not_a_delimiter(self):
        meta, body = split_frontmatter("a = 1\n+++ \nbody\n")
        assert meta == ""
        assert body == "a = 1\n+++ \nbody\n"

    def test_no_delimiter_is_all_body(self):
        meta, body = split_frontmatter("# Just content\n")
        assert meta == ""
        assert body == "# Just content\n"

    def test_delimiter_must_be_whole_line(self):
        meta, body = split_frontmatter("a +++ b\n++++\ntext")
        assert meta == ""
        assert body == "a +++ b\n++++\ntext"

    def test_crlf_line_endings(self):
        meta, body = split_frontmatter('title = "x"\r\n+++\r\nbody')
        assert parse_metadata(meta, "page.md") == {"title": "x"}
        assert body == "body"


class TestParseMetadata:
    def test_parses_toml(self):
        meta = parse_metadata('title = "Post"\ntags = ["a", "b"]\npublishDate = 2021-01-02\n', "post.md")
        assert meta == {"title": "Post", "tags": ["a", "b"], "publishDate": date(2021, 1, 2)}

    def test_empty_block(self):
        assert parse_metadata("  \n", "post.md") == {}

    def test_malformed_toml_reports_location(self):
        with pytest.raises(BuildError) as exc_info:
            parse_metadata("title = \n", "post.md")
        assert "post.md" in exc_info.value.message
        assert "line" in exc_info.value.message
