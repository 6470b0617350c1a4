import io
import re
from typing import Any

import yaml

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


class YamlFrontmatter:
    """
    Split optional YAML frontmatter from a markdown file. The block engine
    only ever sees the body; the frontmatter text is carried through as-is.
    """

    def split(self, text: str) -> tuple[str, str]:
        """(frontmatter_text, body); frontmatter_text is "" when absent."""
        m = _FM.match(text)
        if not m:
            return "", text
        return text[: m.end()], text[m.end() :]

    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _FM.match(text)
        if not m:
            return {}, text
        fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        if not isinstance(fm, dict):
            fm = {}
        return fm, text[m.end() :]

    def join(self, frontmatter: str, body: str) -> str:
        if not frontmatter:
            return body
        frontmatter = frontmatter.rstrip() + "\n"
        return f"{frontmatter}\n{body}" if body else frontmatter
