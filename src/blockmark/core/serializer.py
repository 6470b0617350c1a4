"""Document -> markdown."""

from .model import Block, Document

BLOCK_SEPARATOR = "\n\n"


def block_to_markdown(block: Block) -> str:
    return block.source


def to_markdown(document: Document) -> str:
    """
    Join each block's stored source with a blank line.

    Sources are captured verbatim at parse/update time and never rebuilt from
    the structured fields, so untouched blocks round-trip exactly.
    """
    return BLOCK_SEPARATOR.join(block_to_markdown(b) for b in document.blocks)
