import logging
import re

from ..core.model import (
    Block,
    CodeBlock,
    Document,
    Heading,
    ImageBlock,
    Inline,
    ListItem,
    OrderedItem,
    Paragraph,
    Text,
)
from ..core.ports import BlockParserStrategy, IdAssigner, InlineParserStrategy
from .idgen import PositionalIds
from .inline_parser import InlineParser

logger = logging.getLogger(__name__)

FENCE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
BLANK_LINES_RE = re.compile(r"\n\s*\n")
IMAGE_RE = re.compile(r"!\[([^\]\n]*)\]\(([^)\n]+)\)")
ORDERED_RE = re.compile(r"^\d+\.\s+")
FENCED_RE = re.compile(r"^```([^\n]*)\n(.*?)\n?```[ \t]*$", re.DOTALL)
ONE_LINE_FENCE_RE = re.compile(r"^```(.*)```$")
BLANK_MARKER_RE = re.compile(r"(#{1,3} |- |\d+\. )?")

HEADING_MARKERS = (("### ", 3), ("## ", 2), ("# ", 1))


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_chunks(text: str) -> list[str]:
    """
    Split a document into block chunks on blank lines, keeping fenced code
    blocks (and the blank lines inside them) intact.
    """
    text = normalize_line_endings(text).strip()
    if not text:
        return []

    fences = [m.span() for m in FENCE_BLOCK_RE.finditer(text)]
    parts: list[str] = []
    start = 0
    for sep in BLANK_LINES_RE.finditer(text):
        # a separator is all whitespace, so it lies wholly inside or outside a fence
        if any(lo < sep.end() and sep.start() < hi for lo, hi in fences):
            continue
        parts.append(text[start : sep.start()])
        start = sep.end()
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def classify(chunk: str) -> str:
    """
    Kind tag for a chunk. Priority matters since prefixes overlap:
    code fence > image > h3 > h2 > h1 > list item > ordered item > paragraph.
    """
    if chunk.startswith("```"):
        return "code"
    if chunk.startswith("![") and _match_image(chunk) is not None:
        return "image"
    for marker, level in HEADING_MARKERS:
        if chunk.startswith(marker):
            return f"h{level}"
    if chunk.startswith("- "):
        return "list_item"
    if ORDERED_RE.match(chunk):
        return "ordered_item"
    return "paragraph"


def _match_image(chunk: str) -> tuple[str, str] | None:
    m = IMAGE_RE.fullmatch(chunk)
    if not m:
        return None
    key = m.group(2).strip()
    if not key:
        return None
    return m.group(1).strip(), key


def _split_fence(source: str) -> tuple[str | None, str]:
    """(language, content) of a fenced code chunk."""
    m = FENCED_RE.match(source)
    if m:
        return (m.group(1).strip() or None), m.group(2)
    m = ONE_LINE_FENCE_RE.match(source)
    if m:
        return None, m.group(1)
    # unterminated or trailing text after the fence: keep everything after
    # the opening line
    first, _, rest = source.partition("\n")
    if rest.endswith("```"):
        rest = rest[:-3].rstrip("\n")
    return (first[3:].strip() or None), rest


class MarkdownParser(BlockParserStrategy):
    def __init__(
        self,
        ids: IdAssigner | None = None,
        inlines: InlineParserStrategy | None = None,
    ):
        self.ids = ids or PositionalIds()
        self.inlines = inlines or InlineParser(self.ids)

    def parse(self, text: str | None) -> Document:
        if text is None:
            return Document()
        chunks = split_chunks(text)
        blocks = tuple(
            self.parse_block(chunk, self.ids.block_id(position))
            for position, chunk in enumerate(chunks)
        )
        logger.debug("parsed %d chars into %d blocks", len(text), len(blocks))
        return Document(blocks=blocks)

    def parse_block(self, source: str, block_id: str) -> Block:
        """Classify one chunk and build its block under the given id."""
        kind = classify(source)

        if kind == "code":
            language, content = _split_fence(source)
            return CodeBlock(id=block_id, source=source, content=content, language=language)

        if kind == "image":
            alt, key = _match_image(source)  # type: ignore[misc]
            return ImageBlock(id=block_id, source=source, image_key=key, alt_text=alt)

        if kind in ("h1", "h2", "h3"):
            level = int(kind[1])
            content = source[level + 1 :].strip()
            return Heading(
                id=block_id,
                source=source,
                level=level,
                inlines=self._inlines(content, block_id),
            )

        if kind == "list_item":
            return ListItem(
                id=block_id, source=source, inlines=self._inlines(source[2:], block_id)
            )

        if kind == "ordered_item":
            m = ORDERED_RE.match(source)
            content = source[m.end() :] if m else source
            return OrderedItem(
                id=block_id, source=source, inlines=self._inlines(content, block_id)
            )

        return Paragraph(id=block_id, source=source, inlines=self._inlines(source, block_id))

    def content_start(self, source: str) -> int:
        """Offset in source where the inline content of the block begins."""
        kind = classify(source)
        if kind in ("h1", "h2", "h3"):
            rest = source[int(kind[1]) + 1 :]
            return len(source) - len(rest.lstrip())
        if kind == "list_item":
            return 2
        if kind == "ordered_item":
            m = ORDERED_RE.match(source)
            return m.end() if m else 0
        return 0

    def is_blank(self, text: str) -> bool:
        """True for "" and for a bare block marker such as "- " or "## "."""
        return BLANK_MARKER_RE.fullmatch(text) is not None

    def _inlines(self, content: str, block_id: str) -> tuple[Inline, ...]:
        spans = self.inlines.parse_inlines(content, block_id)
        if not spans:
            return (Text(id=self.ids.inline_id(block_id, 0), text=""),)
        return tuple(spans)
