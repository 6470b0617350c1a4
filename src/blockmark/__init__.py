"""blockmark - block-based markdown document engine."""

__version__ = "0.1.0"

from .adapters.idgen import PositionalIds
from .adapters.inline_parser import InlineParser
from .adapters.markdown_parser import MarkdownParser
from .core.editor import Editor
from .core.model import Document
from .core.serializer import to_markdown

__all__ = [
    "__version__",
    "Document",
    "Editor",
    "InlineParser",
    "MarkdownParser",
    "PositionalIds",
    "to_markdown",
]
