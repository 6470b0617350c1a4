"""Tests for the JSON document codec."""

import json

import pytest

from blockmark.adapters.json_codec import (
    block_to_dict,
    document_from_dict,
    document_to_dict,
    inline_to_dict,
)
from blockmark.adapters.markdown_parser import MarkdownParser
from blockmark.core.model import Link, Tag, Text
from blockmark.errors import BlockmarkError, DocumentFormatError


@pytest.fixture
def parser():
    return MarkdownParser()


def test_inline_dicts():
    """Test each inline kind carries its own fields."""
    assert inline_to_dict(Text("mv-0:0", "hi")) == {"id": "mv-0:0", "kind": "text", "text": "hi"}
    assert inline_to_dict(Tag("mv-0:1", "work")) == {"id": "mv-0:1", "kind": "tag", "label": "work"}
    link = Link("mv-0:2", "http://x", (Text("mv-0:2:t0", "x"),))
    assert inline_to_dict(link) == {
        "id": "mv-0:2",
        "kind": "link",
        "children": [{"id": "mv-0:2:t0", "kind": "text", "text": "x"}],
        "url": "http://x",
    }


def test_block_dicts(parser):
    doc = parser.parse("## Sub\n\n```sh\nls\n```\n\n![pic](k.png)")
    heading, code, image = (block_to_dict(b) for b in doc)

    assert heading["kind"] == "heading"
    assert heading["level"] == 2
    assert heading["inlines"] == [{"id": "mv-0:0", "kind": "text", "text": "Sub"}]
    assert code == {
        "id": "mv-1",
        "kind": "code",
        "source": "```sh\nls\n```",
        "content": "ls",
        "language": "sh",
    }
    assert image == {
        "id": "mv-2",
        "kind": "image",
        "source": "![pic](k.png)",
        "image_key": "k.png",
        "alt_text": "pic",
    }


def test_document_dict_is_json_serializable(parser):
    doc = parser.parse("# T\n\n*a* **b** `c` [[d]] [e](f) #g")
    text = json.dumps(document_to_dict(doc))
    assert json.loads(text)["blocks"][0]["id"] == "mv-0"


def test_document_from_dict(parser):
    """Test decoding rebuilds blocks from id and source only."""
    doc = parser.parse("# T\n\nbody")
    data = json.loads(json.dumps(document_to_dict(doc)))
    assert document_from_dict(data, parser) == doc


def test_document_from_dict_ignores_stale_fields(parser):
    """Test structure comes from the source, not the client's fields."""
    data = {"blocks": [{"id": "mv-3", "source": "- item", "kind": "heading", "level": 9}]}
    doc = document_from_dict(data, parser)
    assert doc.blocks[0].kind == "list_item"
    assert doc.block_ids() == ["mv-3"]


@pytest.mark.parametrize(
    "data",
    [
        None,
        [],
        {},
        {"blocks": "nope"},
        {"blocks": ["x"]},
        {"blocks": [{"source": "x"}]},
        {"blocks": [{"id": "", "source": "x"}]},
        {"blocks": [{"id": "mv-0"}]},
        {"blocks": [{"id": "mv-0", "source": 3}]},
        {"blocks": [{"id": "mv-0", "source": "a"}, {"id": "mv-0", "source": "b"}]},
    ],
)
def test_document_from_dict_rejects(parser, data):
    """Test malformed payloads raise a format error."""
    with pytest.raises(DocumentFormatError):
        document_from_dict(data, parser)


def test_format_error_hierarchy():
    assert issubclass(DocumentFormatError, BlockmarkError)
    assert issubclass(DocumentFormatError, ValueError)
