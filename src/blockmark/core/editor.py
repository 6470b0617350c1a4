"""Block-level edit operations driven by discrete user actions.

The editor holds no document state: every method takes a Document value and
returns a new one (or None when the action does not apply). The session that
owns the "current" document and the focused block lives outside this package.
"""

import logging

from .model import (
    Block,
    BlockId,
    Document,
    ImageBlock,
    InsertResult,
    MergeResult,
    SplitResult,
    inline_text,
    is_text_block,
    markup_before,
    source_length,
)
from .ports import BlockParserStrategy, IdAssigner
from .serializer import to_markdown

logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class Editor:
    def __init__(self, parser: BlockParserStrategy, ids: IdAssigner):
        self.parser = parser
        self.ids = ids

    # Lookup

    def find_block(self, document: Document, block_id: BlockId) -> Block | None:
        return document.find_block(block_id)

    def block_source(self, document: Document, block_id: BlockId) -> str | None:
        return document.block_source(block_id)

    # Document model operations

    def update_block(self, document: Document, block_id: BlockId, new_source: str) -> Document:
        """Re-classify new_source as a single block that keeps block_id."""
        idx = document.index_of(block_id)
        if idx is None:
            logger.debug("update_block: no block %s", block_id)
            return document
        replacement = self.parser.parse_block(new_source, block_id)
        blocks = document.blocks[:idx] + (replacement,) + document.blocks[idx + 1 :]
        return Document(blocks=blocks)

    def insert_block_after(
        self, document: Document, after_id: BlockId | None, block: Block
    ) -> Document:
        """
        Insert block right after after_id, or at the head when after_id is
        None. An unknown anchor, or a block whose id is already taken, leaves
        the document unchanged.
        """
        if document.index_of(block.id) is not None:
            logger.debug("insert_block_after: id %s already present", block.id)
            return document
        if after_id is None:
            return Document(blocks=(block,) + document.blocks)
        idx = document.index_of(after_id)
        if idx is None:
            logger.debug("insert_block_after: no anchor %s", after_id)
            return document
        blocks = document.blocks[: idx + 1] + (block,) + document.blocks[idx + 1 :]
        return Document(blocks=blocks)

    def new_block(self, document: Document, after: BlockId | None = None) -> InsertResult | None:
        """Insert an empty paragraph; None if the anchor does not exist."""
        if after is not None and document.index_of(after) is None:
            return None
        new_id = self.ids.mint_block_id(document.block_ids())
        block = self.parser.parse_block("", new_id)
        return InsertResult(self.insert_block_after(document, after, block), new_id)

    def new_image_block(
        self,
        document: Document,
        image_key: str,
        alt_text: str = "",
        after: BlockId | None = None,
    ) -> InsertResult | None:
        """
        Insert an image block; None if the anchor does not exist or if
        `![alt_text](image_key)` would not parse back as an image (a key with
        ")", an alt with "]" or a line break).
        """
        if after is not None and document.index_of(after) is None:
            return None
        new_id = self.ids.mint_block_id(document.block_ids())
        block = self.parser.parse_block(f"![{alt_text}]({image_key})", new_id)
        if not isinstance(block, ImageBlock):
            logger.debug("new_image_block: %r / %r is not an image source", image_key, alt_text)
            return None
        return InsertResult(self.insert_block_after(document, after, block), new_id)

    def remove_block(self, document: Document, block_id: BlockId) -> Document:
        if document.index_of(block_id) is None:
            return document
        return Document(blocks=tuple(b for b in document.blocks if b.id != block_id))

    # Edit operations

    def merge_with_previous(
        self, document: Document, block_id: BlockId, current_content: str
    ) -> MergeResult | None:
        """
        Append current_content to the previous block's source (no separator)
        and drop block_id. The cursor offset is the length of the previous
        block's original source, i.e. the old boundary between the two.

        None when block_id is the first block or does not exist.
        """
        idx = document.index_of(block_id)
        if idx is None or idx == 0:
            logger.debug("merge_with_previous: not applicable for %s", block_id)
            return None

        prev = document.blocks[idx - 1]
        merged = self.parser.parse_block(prev.source + current_content, prev.id)
        blocks = document.blocks[: idx - 1] + (merged,) + document.blocks[idx + 1 :]
        return MergeResult(
            document=Document(blocks=blocks),
            merged_into_id=prev.id,
            cursor_offset=len(prev.source),
        )

    def split_block(
        self, document: Document, block_id: BlockId, content: str, cursor_position: int
    ) -> SplitResult | None:
        """
        Split content at cursor_position (characters, clamped to the content).

        The original block keeps the text before the cursor; a new block with
        the rest is inserted right after it. Both types are re-derived from
        their text, so "- x" after the cursor becomes a list item.
        """
        if document.index_of(block_id) is None:
            return None

        cursor = _clamp(cursor_position, 0, len(content))
        if cursor != cursor_position:
            logger.debug("split_block: cursor %d clamped to %d", cursor_position, cursor)
        before, after = content[:cursor], content[cursor:]

        doc = self.update_block(document, block_id, before)
        new_id = self.ids.mint_block_id(doc.block_ids())
        doc = self.insert_block_after(doc, block_id, self.parser.parse_block(after, new_id))
        return SplitResult(document=doc, new_block_id=new_id)

    def commit_block(self, document: Document, block_id: BlockId, value: str) -> Document:
        """
        Apply the final value of a block when it loses focus.

        - empty after trimming trailing whitespace: the block is removed
        - a bare marker ("- ", "## ", "1. "): still being typed, unchanged
        - otherwise: the trimmed value is stored and the whole document is
          re-parsed, which renumbers every block
        """
        if document.index_of(block_id) is None:
            return document
        trimmed = value.rstrip()
        if not trimmed:
            return self.remove_block(document, block_id)
        if self.parser.is_blank(value):
            return document
        return self.reparse(self.update_block(document, block_id, trimmed))

    def reparse(self, document: Document) -> Document:
        return self.parser.parse(to_markdown(document))

    # Cursor helpers

    def navigate(self, document: Document, block_id: BlockId, direction: str) -> BlockId | None:
        """Target block for an up/down arrow press, clamped to the ends."""
        if direction == "up":
            return document.previous_block_id(block_id) or document.first_block_id()
        if direction == "down":
            return document.next_block_id(block_id) or document.last_block_id()
        return None

    def caret_offset(
        self, document: Document, block_id: BlockId, inline_id: str, offset: int
    ) -> int | None:
        """
        Map a click `offset` characters into the displayed text of an inline
        to a character offset in the block's source.
        """
        block = document.find_block(block_id)
        if block is None:
            return None
        if not is_text_block(block):
            return 0

        pos = self.parser.content_start(block.source)
        for inline in block.inlines:  # type: ignore[union-attr]
            ids = {inline.id}
            ids.update(child.id for child in getattr(inline, "children", ()))
            if inline_id in ids:
                shown = len(inline_text(inline))
                return pos + markup_before(inline) + _clamp(offset, 0, shown)
            pos += source_length(inline)
        return 0
