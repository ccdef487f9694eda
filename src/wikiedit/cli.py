"""CLI for wikiedit - wikitext conversion and template/section location."""

import argparse
import json
import logging
import platform
import re
import sys
from pathlib import Path

import yaml

from . import __version__
from .core.locator import find_section_range, find_template_range, section_pattern
from .core.model import ReferenceItem
from .locate import locate_section, locate_template
from .runtime import Runtime, build_runtime

log = logging.getLogger(__name__)


def _read_input(path: str | None) -> str:
    """Read a file, or stdin when path is None or '-'."""
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write(text: str) -> None:
    sys.stdout.write(text)
    if text and not text.endswith("\n"):
        sys.stdout.write("\n")


def cmd_to_html(args: argparse.Namespace, rt: Runtime) -> int:
    """Convert wikitext to HTML."""
    _write(rt.wikitext_to_html(_read_input(args.file)))
    return 0


def cmd_to_wikitext(args: argparse.Namespace, rt: Runtime) -> int:
    """Convert HTML to wikitext."""
    _write(rt.html_to_wikitext(_read_input(args.file)))
    return 0


def cmd_locate(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the location of a template or section."""
    text = _read_input(args.file)
    format_type = getattr(args, "format", "json")

    if args.locate_cmd == "template":
        location = locate_template(text, args.name, format_type=format_type)
        what = f"Template {args.name}"
    else:
        location = locate_section(text, args.name, regex=args.regex, format_type=format_type)
        what = f"Section {args.name}"

    if not location:
        print(f"{what} not found", file=sys.stderr)
        return 1

    if format_type == "json":
        print(json.dumps(location, indent=2))
    else:
        print(location)
    return 0


def cmd_yank(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the content of a template or section."""
    text = _read_input(args.file)

    if args.yank_cmd == "template":
        span = find_template_range(text, args.name)
        what = f"Template {args.name}"
    else:
        if args.regex:
            pattern = re.compile(args.name, re.MULTILINE | re.IGNORECASE)
        else:
            pattern = section_pattern(args.name)
        span = find_section_range(text, pattern)
        what = f"Section {args.name}"

    if span is None:
        print(f"{what} not found", file=sys.stderr)
        return 1

    _write(span.content)
    return 0


def cmd_refs_parse(args: argparse.Namespace, rt: Runtime) -> int:
    """Split a reference field into typed items."""
    items = [item.to_dict() for item in rt.references.parse(_read_input(args.file))]

    if args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(items, sort_keys=False, allow_unicode=True))
    else:
        print(json.dumps(items, indent=2, ensure_ascii=False))
    return 0


def cmd_refs_serialize(args: argparse.Namespace, rt: Runtime) -> int:
    """Render a JSON or YAML list of reference items to wikitext."""
    raw = _read_input(args.file)
    try:
        data = yaml.safe_load(raw) or []
    except yaml.YAMLError as e:
        print(f"Error: could not decode reference items: {e}", file=sys.stderr)
        return 1

    if not isinstance(data, list):
        print("Error: expected a list of reference items", file=sys.stderr)
        return 1

    items = [ReferenceItem.from_dict(entry, id=rt.references.idgen.new_id()) for entry in data]
    _write(rt.references.serialize(items))
    return 0


def cmd_serve(args: argparse.Namespace, rt: Runtime) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
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


def version_string() -> str:
    return (
        f"wikiedit {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform()})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wikiedit", description="Wikitext conversion and template location"
    )
    parser.add_argument(
        "--version", action="version", version=version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/wikiedit.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only report errors"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # to-html command
    parser_html = subparsers.add_parser("to-html", help="Convert wikitext to HTML")
    parser_html.add_argument("file", nargs="?", help="Input file (default: stdin)")

    # to-wikitext command
    parser_wt = subparsers.add_parser("to-wikitext", help="Convert HTML to wikitext")
    parser_wt.add_argument("file", nargs="?", help="Input file (default: stdin)")

    # locate / yank commands share their targets
    for name, help_text in (
        ("locate", "Get precise location of a template or section"),
        ("yank", "Print the content of a template or section"),
    ):
        parser_cmd = subparsers.add_parser(name, help=help_text)
        target_sub = parser_cmd.add_subparsers(dest=f"{name}_cmd", required=True)

        parser_tpl = target_sub.add_parser("template", help="First template with this name")
        parser_tpl.add_argument("name", help="Template name (case-insensitive)")
        parser_tpl.add_argument("file", nargs="?", help="Input file (default: stdin)")

        parser_sec = target_sub.add_parser("section", help="Section with this header")
        parser_sec.add_argument("name", help="Section title, or a header pattern with --regex")
        parser_sec.add_argument("file", nargs="?", help="Input file (default: stdin)")
        parser_sec.add_argument(
            "--regex", action="store_true", help="Treat the title as a header-line regex"
        )

        if name == "locate":
            for p in (parser_tpl, parser_sec):
                p.add_argument(
                    "--format", choices=["json", "tsv"], default="json",
                    help="Output format (default: json)"
                )

    # refs command
    parser_refs = subparsers.add_parser("refs", help="Reference template fields")
    refs_sub = parser_refs.add_subparsers(dest="refs_cmd", required=True)

    parser_refs_parse = refs_sub.add_parser("parse", help="Split a field into reference items")
    parser_refs_parse.add_argument("file", nargs="?", help="Input file (default: stdin)")
    parser_refs_parse.add_argument(
        "--format", choices=["json", "yaml"], default="json",
        help="Output format (default: json)"
    )

    parser_refs_ser = refs_sub.add_parser("serialize", help="Render reference items as wikitext")
    parser_refs_ser.add_argument("file", nargs="?", help="JSON or YAML item list (default: stdin)")

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default=None,
        help="Host to bind to (default: config or 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=None,
        help="Port to bind to (default: config or 8765)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: config or false)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    rt = build_runtime(config_path=args.config)
    if rt.config.path:
        log.debug("Loaded config from %s", rt.config.path)

    handlers = {
        "to-html": cmd_to_html,
        "to-wikitext": cmd_to_wikitext,
        "locate": cmd_locate,
        "yank": cmd_yank,
        "serve": cmd_serve,
    }

    if args.cmd == "refs":
        refs_handlers = {
            "parse": cmd_refs_parse,
            "serialize": cmd_refs_serialize,
        }
        handler = refs_handlers.get(args.refs_cmd)
    else:
        handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            log.debug("Command %s failed", args.cmd, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
