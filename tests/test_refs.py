"""Tests for tag and link collection."""

from blockmark.adapters.markdown_parser import MarkdownParser
from blockmark.core.refs import collect_links, collect_tags, collect_wiki_links, iter_inlines


def test_collect_tags_in_order():
    """Test tags are listed once each, in document order."""
    doc = MarkdownParser().parse("Hello #world and #Elixir\n\n- more #world #next")
    assert collect_tags(doc) == ["world", "Elixir", "next"]


def test_tags_keep_case():
    """Test differently-cased tags are distinct here."""
    doc = MarkdownParser().parse("#Tag #tag")
    assert collect_tags(doc) == ["Tag", "tag"]


def test_tags_in_code_ignored():
    """Test tags in inline code and code blocks are not collected."""
    doc = MarkdownParser().parse("`#inline`\n\n```\n#fenced\n```\n\n#real")
    assert collect_tags(doc) == ["real"]


def test_collect_links():
    doc = MarkdownParser().parse(
        "[[Note A]] and [site](https://a.example)\n\n## [[Note B]] [[Note A]]"
    )
    assert collect_wiki_links(doc) == ["Note A", "Note B"]
    assert collect_links(doc) == ["https://a.example"]


def test_image_blocks_have_no_inlines():
    doc = MarkdownParser().parse("![alt #x](k.png)")
    assert list(iter_inlines(doc)) == []
    assert collect_tags(doc) == []
