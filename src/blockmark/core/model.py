from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Union

BlockId = str


# Inline spans


@dataclass(frozen=True)
class Text:
    id: str
    text: str
    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class Code:
    id: str
    text: str  # interior of the backticks
    kind: ClassVar[str] = "code"


@dataclass(frozen=True)
class Emphasis:
    id: str
    children: tuple[Text, ...]
    kind: ClassVar[str] = "emphasis"


@dataclass(frozen=True)
class Strong:
    id: str
    children: tuple[Text, ...]
    kind: ClassVar[str] = "strong"


@dataclass(frozen=True)
class Link:
    id: str
    url: str
    children: tuple[Text, ...]
    kind: ClassVar[str] = "link"


@dataclass(frozen=True)
class WikiLink:
    id: str
    text: str  # unresolved note reference
    kind: ClassVar[str] = "wiki_link"


@dataclass(frozen=True)
class Tag:
    id: str
    label: str  # as typed, case preserved
    kind: ClassVar[str] = "tag"


Inline = Union[Text, Code, Emphasis, Strong, Link, WikiLink, Tag]

# markup characters in front of the displayed text, per inline kind
_OPEN_MARKUP = {
    "text": 0,
    "code": 1,  # `
    "emphasis": 1,  # *
    "strong": 2,  # **
    "link": 1,  # [
    "wiki_link": 2,  # [[
    "tag": 0,  # '#' is displayed
}


def inline_text(inline: Inline) -> str:
    """Displayed text of an inline span."""
    if isinstance(inline, (Emphasis, Strong, Link)):
        return "".join(child.text for child in inline.children)
    if isinstance(inline, Tag):
        return f"#{inline.label}"
    return inline.text


def markup_before(inline: Inline) -> int:
    return _OPEN_MARKUP[inline.kind]


def source_length(inline: Inline) -> int:
    """Number of source characters the span was parsed from."""
    shown = len(inline_text(inline))
    if isinstance(inline, Link):
        return shown + len(inline.url) + 4  # [text](url)
    return shown + 2 * _OPEN_MARKUP[inline.kind]


# Blocks


@dataclass(frozen=True)
class Heading:
    id: BlockId
    source: str
    level: int  # 1..3
    inlines: tuple[Inline, ...] = ()
    kind: ClassVar[str] = "heading"


@dataclass(frozen=True)
class Paragraph:
    id: BlockId
    source: str
    inlines: tuple[Inline, ...] = ()
    kind: ClassVar[str] = "paragraph"


@dataclass(frozen=True)
class ListItem:
    id: BlockId
    source: str
    inlines: tuple[Inline, ...] = ()
    kind: ClassVar[str] = "list_item"


@dataclass(frozen=True)
class OrderedItem:
    id: BlockId
    source: str
    inlines: tuple[Inline, ...] = ()
    kind: ClassVar[str] = "ordered_item"


@dataclass(frozen=True)
class CodeBlock:
    id: BlockId
    source: str
    content: str  # fence markers stripped
    language: str | None = None
    kind: ClassVar[str] = "code"


@dataclass(frozen=True)
class ImageBlock:
    id: BlockId
    source: str
    image_key: str  # opaque storage reference
    alt_text: str | None = None
    kind: ClassVar[str] = "image"


Block = Union[Heading, Paragraph, ListItem, OrderedItem, CodeBlock, ImageBlock]

TEXT_BLOCK_TYPES = (Heading, Paragraph, ListItem, OrderedItem)


def is_text_block(block: Block) -> bool:
    return isinstance(block, TEXT_BLOCK_TYPES)


@dataclass(frozen=True)
class Document:
    """
    Ordered, immutable sequence of blocks.

    Every lookup returns None for "not found" (or "no such neighbour")
    instead of raising.
    """

    blocks: tuple[Block, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def is_empty(self) -> bool:
        return not self.blocks

    def block_ids(self) -> list[BlockId]:
        return [b.id for b in self.blocks]

    def index_of(self, block_id: BlockId) -> int | None:
        for i, block in enumerate(self.blocks):
            if block.id == block_id:
                return i
        return None

    def find_block(self, block_id: BlockId) -> Block | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def block_source(self, block_id: BlockId) -> str | None:
        block = self.find_block(block_id)
        return block.source if block is not None else None

    def first_block_id(self) -> BlockId | None:
        return self.blocks[0].id if self.blocks else None

    def last_block_id(self) -> BlockId | None:
        return self.blocks[-1].id if self.blocks else None

    def previous_block_id(self, block_id: BlockId) -> BlockId | None:
        idx = self.index_of(block_id)
        if idx is None or idx == 0:
            return None
        return self.blocks[idx - 1].id

    def next_block_id(self, block_id: BlockId) -> BlockId | None:
        idx = self.index_of(block_id)
        if idx is None or idx + 1 >= len(self.blocks):
            return None
        return self.blocks[idx + 1].id


# Edit results


@dataclass(frozen=True)
class InsertResult:
    document: Document
    block_id: BlockId


@dataclass(frozen=True)
class SplitResult:
    document: Document
    new_block_id: BlockId


@dataclass(frozen=True)
class MergeResult:
    document: Document
    merged_into_id: BlockId
    cursor_offset: int  # chars; the old boundary between the two blocks
