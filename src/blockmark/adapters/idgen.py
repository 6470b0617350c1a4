from typing import Iterable

from ..core.ports import IdAssigner


class PositionalIds(IdAssigner):
    def __init__(self, prefix: str = "mv"):  # "mv-0", "mv-1", ...
        self.prefix = prefix

    def block_id(self, position: int) -> str:
        return f"{self.prefix}-{position}"

    def inline_id(self, block_id: str, position: int) -> str:
        return f"{block_id}:{position}"

    def child_id(self, inline_id: str) -> str:
        # wrapper inlines hold a single synthetic text child
        return f"{inline_id}:t0"

    def mint_block_id(self, taken: Iterable[str]) -> str:
        """
        Id for a block created by an edit rather than by a parse pass.

        Counts up from the current block count + 1 and skips ids already in
        the document, so a minted id never collides within one document value.
        """
        taken_set = set(taken)
        n = len(taken_set) + 1
        while self.block_id(n) in taken_set:
            n += 1
        return self.block_id(n)
