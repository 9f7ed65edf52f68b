"""CLI for scholia - inline notes and hashtags in Org documents."""

import argparse
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.hashtags import collect_hashtags
from .core.model import WHOLE
from .core.mutate import delete_annotation, insert_annotation
from .core.query import list_all, list_by_hashtags
from .core.slicer import heading_scope, subtree_scope
from .errors import ScholiaError
from .export.formats import export_document
from .locate import cmd_locate
from .render import FORMATS, dumps, render_occurrences
from .runtime import build_runtime

logger = logging.getLogger(__name__)


def _open(args: argparse.Namespace, rt: Any) -> Any:
    document = rt.open_document(args.file)
    if document is None:
        print(f"Document {args.file} not found", file=sys.stderr)
    return document


def _output_format(args: argparse.Namespace) -> str:
    return "json" if args.json else getattr(args, "format", "table")


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List annotations, optionally filtered by hashtags."""
    document = _open(args, rt)
    if document is None:
        return 1

    scope = WHOLE
    if args.heading:
        scope = heading_scope(document.text, args.heading, rt.parser)
        if scope is None:
            print(f"Heading '{args.heading}' not found in {args.file}", file=sys.stderr)
            return 1
    elif args.at is not None:
        scope = subtree_scope(document.text, args.at, rt.parser)

    placeholder = rt.config.display.placeholder
    tags = [t.lstrip("#") for t in args.tag]
    if tags:
        ambient = rt.config.query.ambient if args.ambient is None else args.ambient
        match = args.match or rt.config.query.tag_match
        occurrences = list_by_hashtags(
            document, tags,
            include_ambient_tags=ambient, scope=scope, mode=match, placeholder=placeholder,
        )
    else:
        occurrences = list_all(document, scope, placeholder)

    fmt = _output_format(args)
    if not occurrences and fmt in ("table", "tsv"):
        if not args.quiet:
            if tags:
                print(f"No notes found for hashtag {' '.join('#' + t for t in tags)}")
            else:
                print("No notes found")
        return 0

    print(render_occurrences(document, occurrences, fmt))
    return 0


def cmd_tags(args: argparse.Namespace, rt: Any) -> int:
    """Print every hashtag used in the document's notes."""
    document = _open(args, rt)
    if document is None:
        return 1

    extra = rt.parser.all_tags(document.text) if args.ambient else None
    tags = collect_hashtags(document, extra_tags=extra)

    fmt = _output_format(args)
    if fmt in ("json", "yaml"):
        print(dumps(tags, fmt))
    else:
        for tag in tags:
            print(tag)
    return 0


def cmd_add(args: argparse.Namespace, rt: Any) -> int:
    """Wrap a span of the document in a new note."""
    document = _open(args, rt)
    if document is None:
        return 1

    end = args.start if args.end is None else args.end
    marker = insert_annotation(document, args.start, end, args.note)

    if args.dry_run:
        print(document.text, end="")
        return 0
    rt.save_document(document)
    if not args.quiet:
        print(f"Added note at {marker.position}")
    return 0


def cmd_rm(args: argparse.Namespace, rt: Any) -> int:
    """Delete the note starting at an offset, keeping its label text."""
    document = _open(args, rt)
    if document is None:
        return 1

    replacement = delete_annotation(document, args.at)

    if args.dry_run:
        print(document.text, end="")
        return 0
    rt.save_document(document)
    if not args.quiet:
        print(f"Deleted note at {args.at}" + (f" (kept {replacement.strip()!r})" if replacement else ""))
    return 0


def cmd_export(args: argparse.Namespace, rt: Any) -> int:
    """Export the document with notes rendered for a target format."""
    document = _open(args, rt)
    if document is None:
        return 1

    if args.to not in rt.export_table and not args.quiet:
        print(f"Warning: no note exporter for '{args.to}', keeping plain labels", file=sys.stderr)

    out = export_document(document.text, args.to, rt.export_table, rt.parser)
    if args.output:
        Path(args.output).write_text(out, encoding="utf-8")
        if not args.quiet:
            print(f"Exported to {args.output}")
    else:
        print(out, end="")
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install scholia[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=getattr(args, 'cors', False))

    host = getattr(args, 'host', '127.0.0.1')
    port = getattr(args, 'port', 8766)
    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def _setup_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scholia",
        description="Inline notes and hashtags for Org documents",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"scholia {__version__} (python {platform.python_version()}, platform {platform.system()})",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/scholia.toml, then beside the document)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (repeatable)"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # ls command
    parser_ls = subparsers.add_parser("ls", help="List notes, optionally by hashtag")
    parser_ls.add_argument("file", type=Path, help="Org document")
    where = parser_ls.add_mutually_exclusive_group()
    where.add_argument("--heading", help="Only the subtree of the heading with this slug")
    where.add_argument("--at", type=int, help="Only the subtree enclosing this offset")
    parser_ls.add_argument(
        "-t", "--tag", action="append", default=[],
        help="Required hashtag (repeatable, all must match)"
    )
    parser_ls.add_argument(
        "--ambient", action=argparse.BooleanOptionalAction, default=None,
        help="Count inherited heading/file tags as note hashtags"
    )
    parser_ls.add_argument(
        "--match", choices=["substring", "token"], default=None,
        help="Tag matching mode (default: from config, substring)"
    )
    parser_ls.add_argument(
        "--format", choices=FORMATS, default="table",
        help="Output format (default: table)"
    )

    # tags command
    parser_tags = subparsers.add_parser("tags", help="List hashtags used in notes")
    parser_tags.add_argument("file", type=Path, help="Org document")
    parser_tags.add_argument(
        "--ambient", action="store_true",
        help="Include heading and file tags"
    )
    parser_tags.add_argument(
        "--format", choices=["lines", "json", "yaml"], default="lines",
        help="Output format (default: lines)"
    )

    # add command
    parser_add = subparsers.add_parser("add", help="Add a note")
    parser_add.add_argument("file", type=Path, help="Org document")
    parser_add.add_argument("--start", type=int, required=True, help="Start offset of the labelled text")
    parser_add.add_argument("--end", type=int, default=None, help="End offset (default: --start, no label)")
    parser_add.add_argument("--note", required=True, help="Note text, may contain #hashtags")
    parser_add.add_argument("--dry-run", action="store_true", help="Print the result without writing")

    # rm command
    parser_rm = subparsers.add_parser("rm", help="Delete a note, keeping its label")
    parser_rm.add_argument("file", type=Path, help="Org document")
    parser_rm.add_argument("--at", type=int, required=True, help="Offset where the note link starts")
    parser_rm.add_argument("--dry-run", action="store_true", help="Print the result without writing")

    # export command
    parser_export = subparsers.add_parser("export", help="Render notes for an export format")
    parser_export.add_argument("file", type=Path, help="Org document")
    parser_export.add_argument("--to", required=True, help="Format (html, latex, odt, ...)")
    parser_export.add_argument("-o", "--output", default=None, help="Output file (default: stdout)")

    # locate command
    parser_locate = subparsers.add_parser("locate", help="Line and column of a note")
    parser_locate.add_argument("file", type=Path, help="Org document")
    parser_locate.add_argument("--at", type=int, required=True, help="Offset where the note link starts")
    parser_locate.add_argument(
        "--format", choices=["json", "tsv"], default="json",
        help="Output format (default: json)"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--root", type=Path, default=None, help="Document root (default: cwd)")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8766,
        help="Port to bind to (default: 8766)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose, args.quiet)

    handlers = {
        "ls": cmd_ls,
        "tags": cmd_tags,
        "add": cmd_add,
        "rm": cmd_rm,
        "export": cmd_export,
        "locate": cmd_locate,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        rt = build_runtime(
            root=getattr(args, "root", None),
            config_path=args.config,
            document_path=getattr(args, "file", None),
        )
        exit_code = handler(args, rt)
    except ScholiaError as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
