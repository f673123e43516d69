"""Tests for diaryx_site.parser.links."""

import pytest

from diaryx_site.models import LinkReference
from diaryx_site.parser.frontmatter import Mapping, Scalar, Sequence
from diaryx_site.parser.links import (
    extract_document_targets,
    extract_link_references,
    is_document_target,
)


class TestExtractLinkReferences:
    """Tests for extract_link_references function."""

    def test_plain_link(self):
        """[text](target) yields text and target."""
        assert extract_link_references("[Resume](Resume.md)") == [
            LinkReference(text="Resume", target="Resume.md")
        ]

    def test_angle_bracket_target(self):
        """Angle brackets around a target with spaces are stripped."""
        refs = extract_link_references("[Projects](<Projects Overview.md>)")

        assert refs == [LinkReference(text="Projects", target="Projects Overview.md")]

    def test_multiple_links_in_order(self):
        """All links in one string are returned in order."""
        refs = extract_link_references("See [A](A.md) and [B](<dir/B.md>).")

        assert [ref.target for ref in refs] == ["A.md", "dir/B.md"]

    def test_empty_and_unusual_text(self):
        """Link text may be empty or contain punctuation."""
        refs = extract_link_references("[](A.md) [Q&A: part (1)!](B.md)")

        assert [ref.text for ref in refs] == ["", "Q&A: part (1)!"]

    def test_no_links(self):
        """Plain text has no links."""
        assert extract_link_references("just a string") == []


class TestDocumentTargets:
    """Tests for filtering links down to markdown documents."""

    @pytest.mark.parametrize(
        ("target", "expected"),
        [
            ("Resume.md", True),
            ("dir/Child.md", True),
            ("https://example.com", False),
            ("Resume.pdf", False),
            ("image.png", False),
        ],
    )
    def test_is_document_target(self, target, expected):
        """Only .md targets are navigable."""
        assert is_document_target(target) is expected

    def test_single_string_value(self):
        """A scalar value is scanned like a one-item list."""
        assert extract_document_targets(Scalar("[Parent](<../Parent.md>)")) == ["../Parent.md"]

    def test_list_value_filters_non_documents(self):
        """URLs and other files are dropped from a list value."""
        value = Sequence(
            (
                Scalar("[Resume](<Resume.md>)"),
                Scalar("[Site](https://example.com)"),
                Scalar("[PDF](Resume.pdf)"),
                Scalar("[Projects](<Projects Overview.md>)"),
            )
        )

        assert extract_document_targets(value) == ["Resume.md", "Projects Overview.md"]

    def test_mapping_items_ignored(self):
        """Sub-maps inside a list contribute no targets."""
        value = Sequence((Mapping((("path", Scalar("[X](X.md)")),)), Scalar("[Y](Y.md)")))

        assert extract_document_targets(value) == ["Y.md"]
