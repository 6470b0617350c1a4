"""JSON-ready dicts for documents, blocks and inline spans.

Decoding only needs each block's id and source: the structure is always
re-derived by the parser, so a client cannot send a block whose fields
disagree with its source.
"""

from typing import Any

from ..core.model import (
    Block,
    CodeBlock,
    Document,
    Heading,
    ImageBlock,
    Inline,
    Link,
    Tag,
    is_text_block,
)
from ..core.ports import BlockParserStrategy
from ..errors import DocumentFormatError


def inline_to_dict(inline: Inline) -> dict[str, Any]:
    out: dict[str, Any] = {"id": inline.id, "kind": inline.kind}
    if isinstance(inline, Tag):
        out["label"] = inline.label
    elif hasattr(inline, "children"):
        out["children"] = [inline_to_dict(c) for c in inline.children]  # type: ignore[union-attr]
        if isinstance(inline, Link):
            out["url"] = inline.url
    else:
        out["text"] = inline.text  # type: ignore[union-attr]
    return out


def block_to_dict(block: Block) -> dict[str, Any]:
    out: dict[str, Any] = {"id": block.id, "kind": block.kind, "source": block.source}
    if isinstance(block, Heading):
        out["level"] = block.level
    if is_text_block(block):
        out["inlines"] = [inline_to_dict(i) for i in block.inlines]  # type: ignore[union-attr]
    elif isinstance(block, CodeBlock):
        out["content"] = block.content
        out["language"] = block.language
    elif isinstance(block, ImageBlock):
        out["image_key"] = block.image_key
        out["alt_text"] = block.alt_text
    return out


def document_to_dict(document: Document) -> dict[str, Any]:
    return {"blocks": [block_to_dict(b) for b in document.blocks]}


def document_from_dict(data: Any, parser: BlockParserStrategy) -> Document:
    """
    Rebuild a Document from {"blocks": [{"id": ..., "source": ...}, ...]}.

    Raises DocumentFormatError on anything else, including duplicate ids.
    """
    if not isinstance(data, dict) or not isinstance(data.get("blocks"), list):
        raise DocumentFormatError("document must be an object with a 'blocks' list")

    blocks: list[Block] = []
    seen: set[str] = set()
    for i, item in enumerate(data["blocks"]):
        if not isinstance(item, dict):
            raise DocumentFormatError(f"block {i} is not an object")
        block_id = item.get("id")
        source = item.get("source")
        if not isinstance(block_id, str) or not block_id:
            raise DocumentFormatError(f"block {i} has no string 'id'")
        if not isinstance(source, str):
            raise DocumentFormatError(f"block {block_id} has no string 'source'")
        if block_id in seen:
            raise DocumentFormatError(f"duplicate block id {block_id}")
        seen.add(block_id)
        blocks.append(parser.parse_block(source, block_id))
    return Document(blocks=tuple(blocks))
