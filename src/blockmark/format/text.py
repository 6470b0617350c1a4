"""Text hygiene for markdown bodies."""

import os


def normalize_eol(text: str, eol: str | None = "lf") -> str:
    """
    Normalize line endings.

    Args:
        text: Input text
        eol: 'lf', 'crlf', 'native', or None to preserve
    """
    if not eol:
        return text
    result = text.replace("\r\n", "\n").replace("\r", "\n")
    if eol == "crlf" or (eol == "native" and os.name == "nt"):
        result = result.replace("\n", "\r\n")
    return result


def normalize_markdown(text: str) -> str:
    """Canonical block layout of a markdown body.

    - LF line endings
    - surrounding whitespace trimmed
    - runs of blank (or whitespace-only) lines collapsed to one blank line
    - leading whitespace of a block's first line and trailing whitespace of
      its last line dropped

    Lines inside ``` fences are copied verbatim, blank ones included.
    For well-formed input this is exactly what a parse/serialize cycle
    produces.
    """
    lines = normalize_eol(text).split("\n")
    out: list[str] = []
    in_fence = False
    new_block = True

    for line in lines:
        if in_fence:
            out.append(line)
            if "```" in line:
                in_fence = False
            continue

        if not line.strip():
            if out and not new_block:
                out[-1] = out[-1].rstrip()
                new_block = True
            continue

        if new_block:
            if out:
                out.append("")
            line = line.lstrip()
            new_block = False

        out.append(line)
        if line.startswith("```") and "```" not in line[3:]:
            in_fence = True

    if out:
        out[-1] = out[-1].rstrip()
    return "\n".join(out)


def normalize_text(
    text: str,
    eol: str | None = None,
    ensure_final_eol: bool = False,
) -> str:
    """Apply line-ending hygiene to a whole file (frontmatter included).

    Args:
        text: Input text
        eol: Line ending style ('lf', 'crlf', 'native', or None to preserve)
        ensure_final_eol: Ensure file ends with newline
    """
    result = normalize_eol(text, eol)

    if ensure_final_eol and result and not result.endswith(("\n", "\r\n")):
        if eol == "crlf":
            result += "\r\n"
        else:
            result += "\n"

    return result
