"""Runtime wiring helper for the CLI and the API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.idgen import PositionalIds
from .adapters.inline_parser import InlineParser
from .adapters.markdown_parser import MarkdownParser
from .adapters.yaml_codec import YamlFrontmatter
from .config import BlockmarkConfig, load_config
from .core.editor import Editor


@dataclass
class Runtime:
    """Container for all wired components."""
    parser: MarkdownParser
    editor: Editor
    ids: PositionalIds
    frontmatter: YamlFrontmatter
    config: BlockmarkConfig


def build_runtime(
    config_path: Path | None = None,
    config: BlockmarkConfig | None = None,
) -> Runtime:
    """Build and wire all components."""
    if config is None:
        config = load_config(config_path=config_path)

    ids = PositionalIds(prefix=config.ids.prefix)
    parser = MarkdownParser(ids=ids, inlines=InlineParser(ids))
    editor = Editor(parser, ids)

    return Runtime(
        parser=parser,
        editor=editor,
        ids=ids,
        frontmatter=YamlFrontmatter(),
        config=config,
    )
