"""Outgoing references of a document: tags, wiki-links and links.

Labels and targets are returned as typed. Case folding of tags and resolution
of wiki-link/link targets belong to whoever consumes these lists.
"""

from typing import Callable, Iterator, TypeVar

from .model import Document, Inline, Link, Tag, WikiLink, is_text_block

T = TypeVar("T")


def iter_inlines(document: Document) -> Iterator[Inline]:
    for block in document.blocks:
        if is_text_block(block):
            yield from block.inlines  # type: ignore[union-attr]


def _unique(document: Document, pick: Callable[[Inline], T | None]) -> list[T]:
    seen: set[T] = set()
    out: list[T] = []
    for inline in iter_inlines(document):
        value = pick(inline)
        if value is not None and value not in seen:
            seen.add(value)
            out.append(value)
    return out


def collect_tags(document: Document) -> list[str]:
    """
    Tag labels in document order, first occurrence kept.

        >>> collect_tags(parser.parse("Hello #world and #Elixir"))
        ['world', 'Elixir']
    """
    return _unique(document, lambda i: i.label if isinstance(i, Tag) else None)


def collect_wiki_links(document: Document) -> list[str]:
    return _unique(document, lambda i: i.text if isinstance(i, WikiLink) else None)


def collect_links(document: Document) -> list[str]:
    return _unique(document, lambda i: i.url if isinstance(i, Link) else None)
