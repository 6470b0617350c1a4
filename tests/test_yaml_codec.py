"""Tests for YAML frontmatter handling."""

import pytest

from blockmark.adapters.yaml_codec import YamlFrontmatter


@pytest.fixture
def fm():
    return YamlFrontmatter()


def test_split_with_frontmatter(fm):
    text = "---\ntitle: T\n---\n\n# Body"
    front, body = fm.split(text)
    # trailing blank lines go with the frontmatter
    assert front == "---\ntitle: T\n---\n\n"
    assert body == "# Body"


def test_split_without_frontmatter(fm):
    assert fm.split("# Body\n") == ("", "# Body\n")


def test_decode(fm):
    meta, body = fm.decode("---\ntitle: Note\ntags: [a, b]\n---\ntext")
    assert meta == {"title": "Note", "tags": ["a", "b"]}
    assert body == "text"


def test_decode_non_mapping(fm):
    """Test a scalar frontmatter decodes to an empty mapping."""
    meta, body = fm.decode("---\njust a string\n---\nbody")
    assert meta == {}
    assert body == "body"


def test_join(fm):
    """Test frontmatter and body are separated by one blank line."""
    assert fm.join("", "# Body") == "# Body"
    assert fm.join("---\ntitle: T\n---\n\n\n", "# Body") == "---\ntitle: T\n---\n\n# Body"
    assert fm.join("---\ntitle: T\n---", "") == "---\ntitle: T\n---\n"
