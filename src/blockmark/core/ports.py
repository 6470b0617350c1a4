from typing import Iterable, Protocol

from .model import Block, BlockId, Document, Inline


class IdAssigner(Protocol):
    """
    Deterministic ids; a pure function of position (and parent for inlines).
    """

    def block_id(self, position: int) -> BlockId:
        pass

    def inline_id(self, block_id: BlockId, position: int) -> str:
        pass

    def child_id(self, inline_id: str) -> str:
        pass

    def mint_block_id(self, taken: Iterable[BlockId]) -> BlockId:
        pass


class InlineParserStrategy(Protocol):
    """
    Turn the textual content of one block into inline spans. MUST be total:
    every character of the input lands in exactly one span.
    """

    def parse_inlines(self, text: str, block_id: BlockId) -> list[Inline]:
        pass


class BlockParserStrategy(Protocol):
    """
    Chunk a whole document into blocks, or classify a single chunk under a
    given id. Never raises for string input.
    """

    def parse(self, text: str | None) -> Document:
        pass

    def parse_block(self, source: str, block_id: BlockId) -> Block:
        pass

    def content_start(self, source: str) -> int:
        pass

    def is_blank(self, text: str) -> bool:
        pass
