"""Inline tokenizer and builder.

Tokenization is a leftmost-first scan over an ordered rule list. At each
position the rules are tried in priority order and the first match wins:

    code > strong > emphasis > wiki-link > link > bare text

A lone `` ` ``, ``*`` or ``[`` that opens no complete construct is kept as a
literal character. Adjacent literal pieces are merged into one run, and each
run is then split into Text/Tag tokens. Every input character ends up in
exactly one token.
"""

import re
from dataclasses import dataclass

from ..core.model import Code, Emphasis, Inline, Link, Strong, Tag, Text, WikiLink
from ..core.ports import IdAssigner, InlineParserStrategy
from .idgen import PositionalIds

RULES: list[tuple[str, re.Pattern[str]]] = [
    ("code", re.compile(r"`([^`]+)`")),
    ("strong", re.compile(r"\*\*([^*]+)\*\*")),
    ("emphasis", re.compile(r"\*([^*]+)\*")),
    ("wiki_link", re.compile(r"\[\[([^\]]+)\]\]")),
    ("link", re.compile(r"\[([^\]]+)\]\(([^)]+)\)")),
    ("text", re.compile(r"[^`*\[]+")),
]

# '#' not preceded by '#' or a word char, so "## x" and "a#b" are not tags
TAG_RE = re.compile(r"(?<![#\w])#([\w-]+)")


@dataclass(frozen=True)
class Token:
    kind: str  # "text" | "code" | "strong" | "emphasis" | "wiki_link" | "link" | "tag"
    text: str
    url: str | None = None


def split_tags(run: str) -> list[Token]:
    """Split a literal text run into alternating text/tag tokens."""
    out: list[Token] = []
    last = 0
    for m in TAG_RE.finditer(run):
        if m.start() > last:
            out.append(Token("text", run[last : m.start()]))
        out.append(Token("tag", m.group(1)))
        last = m.end()
    if last < len(run):
        out.append(Token("text", run[last:]))
    return out


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            tokens.extend(split_tags("".join(literal)))
            literal.clear()

    pos = 0
    while pos < len(text):
        for kind, pattern in RULES:
            m = pattern.match(text, pos)
            if m:
                break
        else:
            # unmatched marker char: keep it as literal text
            literal.append(text[pos])
            pos += 1
            continue

        if kind == "text":
            literal.append(m.group(0))
        else:
            flush()
            url = m.group(2) if kind == "link" else None
            tokens.append(Token(kind, m.group(1), url))
        pos = m.end()

    flush()
    return tokens


class InlineParser(InlineParserStrategy):
    def __init__(self, ids: IdAssigner | None = None):
        self.ids = ids or PositionalIds()

    def parse_inlines(self, text: str, block_id: str) -> list[Inline]:
        return [
            self._build(token, block_id, position)
            for position, token in enumerate(tokenize(text))
        ]

    def _build(self, token: Token, block_id: str, position: int) -> Inline:
        iid = self.ids.inline_id(block_id, position)
        if token.kind == "code":
            return Code(id=iid, text=token.text)
        if token.kind == "wiki_link":
            return WikiLink(id=iid, text=token.text)
        if token.kind == "tag":
            return Tag(id=iid, label=token.text)
        if token.kind in ("emphasis", "strong", "link"):
            # no nested inline parsing: the interior is one text child
            child = (Text(id=self.ids.child_id(iid), text=token.text),)
            if token.kind == "emphasis":
                return Emphasis(id=iid, children=child)
            if token.kind == "strong":
                return Strong(id=iid, children=child)
            return Link(id=iid, url=token.url or "", children=child)
        return Text(id=iid, text=token.text)
