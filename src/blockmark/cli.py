"""CLI for blockmark - inspect, format and serve block-structured markdown."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

import yaml

from . import __version__
from .adapters.json_codec import document_to_dict
from .core.refs import collect_links, collect_tags, collect_wiki_links
from .core.serializer import to_markdown
from .errors import BlockmarkError
from .format.text import normalize_eol, normalize_text
from .runtime import build_runtime

logger = logging.getLogger(__name__)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return p.read_text(encoding="utf-8")


def _summary(source: str, width: int = 60) -> str:
    first = source.split("\n", 1)[0]
    return first if len(first) <= width else first[: width - 1] + "…"


def cmd_parse(args: argparse.Namespace, rt: Any) -> int:
    """Print the block structure of a markdown file."""
    raw = _read_input(args.file)
    meta, body = rt.frontmatter.decode(raw)
    doc = rt.parser.parse(body)

    fmt = "json" if args.json else args.format
    if fmt == "json":
        print(json.dumps({"meta": meta, **document_to_dict(doc)}, indent=2, ensure_ascii=False, default=str))
    elif fmt == "yaml":
        data = {"meta": meta, **document_to_dict(doc)}
        print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), end="")
    else:
        for block in doc:
            print(f"{block.id}\t{block.kind}\t{_summary(block.source)}")
        if not args.quiet:
            print(f"{len(doc)} blocks", file=sys.stderr)
    return 0


def cmd_fmt(args: argparse.Namespace, rt: Any) -> int:
    """Reformat a markdown file through a parse/serialize cycle."""
    raw = _read_input(args.file)
    frontmatter, body = rt.frontmatter.split(normalize_eol(raw))
    doc = rt.parser.parse(body)
    result = normalize_text(
        rt.frontmatter.join(frontmatter, to_markdown(doc)),
        ensure_final_eol=True,
    )
    changed = result != raw

    if args.check:
        if changed and not args.quiet:
            print(f"would reformat {args.file}")
        return 1 if changed else 0

    if args.write:
        if args.file == "-":
            print("Error: --write needs a file path", file=sys.stderr)
            return 1
        if changed:
            Path(args.file).write_text(result, encoding="utf-8")
            if not args.quiet:
                print(f"reformatted {args.file}")
        return 0

    sys.stdout.write(result)
    return 0


def cmd_tags(args: argparse.Namespace, rt: Any) -> int:
    """List #tags (and optionally links) referenced by a file."""
    _meta, body = rt.frontmatter.decode(_read_input(args.file))
    doc = rt.parser.parse(body)

    tags = collect_tags(doc)
    wiki_links = collect_wiki_links(doc) if args.links else []
    links = collect_links(doc) if args.links else []

    if args.json:
        data: dict[str, Any] = {"tags": tags}
        if args.links:
            data["wiki_links"] = wiki_links
            data["links"] = links
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    for tag in tags:
        print(f"#{tag}")
    for target in wiki_links:
        print(f"[[{target}]]")
    for url in links:
        print(url)
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    # Determine token
    token_arg = getattr(args, "token", "auto")
    token = None

    if token_arg == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    enable_cors = args.cors or rt.config.api.cors
    app = create_app(rt, token=token, enable_cors=enable_cors)

    host = args.host or rt.config.api.host
    port = args.port or rt.config.api.port

    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")

    return 0


def _version_string() -> str:
    return (
        f"blockmark {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform()})"
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="blockmark", description="Block-based markdown document engine"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/blockmark.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging to stderr"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # parse command
    parser_parse = subparsers.add_parser("parse", help="Show the block structure of a file")
    parser_parse.add_argument("file", help="Markdown file, or - for stdin")
    parser_parse.add_argument(
        "--format", choices=["text", "json", "yaml"], default="text",
        help="Output format (default: text)",
    )

    # fmt command
    parser_fmt = subparsers.add_parser("fmt", help="Normalize a file via parse/serialize")
    parser_fmt.add_argument("file", help="Markdown file, or - for stdin")
    fmt_mode = parser_fmt.add_mutually_exclusive_group()
    fmt_mode.add_argument(
        "--check", action="store_true", help="Exit 1 if the file would change"
    )
    fmt_mode.add_argument(
        "--write", action="store_true", help="Rewrite the file in place"
    )

    # tags command
    parser_tags = subparsers.add_parser("tags", help="List #tags in a file")
    parser_tags.add_argument("file", help="Markdown file, or - for stdin")
    parser_tags.add_argument(
        "--links", action="store_true", help="Also list wiki-links and links"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default=None, help="Host to bind (default: from config)")
    parser_serve.add_argument("--port", type=int, default=None, help="Port (default: from config)")
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token: 'auto' to generate, 'none' to disable, or a literal token",
    )
    parser_serve.add_argument("--cors", action="store_true", help="Enable CORS")

    args = parser.parse_args(argv)

    try:
        rt = build_runtime(config_path=args.config)
    except BlockmarkError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else rt.config.logging.numeric_level(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    handlers = {
        "parse": cmd_parse,
        "fmt": cmd_fmt,
        "tags": cmd_tags,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            logger.debug("command %s failed", args.cmd, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
