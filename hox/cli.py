"""Command-line interface for hox."""

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from . import __version__
from .config import ConfigError, RenderOptions, load_render_options
from .dsl import h
from .rendering import render
from .selector import ParseError


def _stable_json_dumps(obj: object) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def _load_options(args: argparse.Namespace) -> RenderOptions:
    try:
        options = load_render_options(args.config) if args.config else RenderOptions()
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc
    updates = {}
    if args.self_close_void:
        updates["self_close_void"] = True
    if args.doctype:
        updates["doctype"] = args.doctype
    return options.model_copy(update=updates)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hox",
        description="Build an element from a selector and print its markup.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"hox {__version__}",
        help="Show the hox version and exit.",
    )
    parser.add_argument("selector", help="Element selector, e.g. 'div#main.card[role=note]'.")
    parser.add_argument("text", nargs="*", help="Text children appended in order.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with render options (voidElements, selfCloseVoid, doctype).",
    )
    parser.add_argument(
        "--self-close-void",
        dest="self_close_void",
        action="store_true",
        help="Write void elements as <br/>.",
    )
    parser.add_argument("--doctype", default=None, help="Doctype to emit before the element.")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed element as JSON instead of markup.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        node = h(args.selector, *args.text)
    except ParseError as exc:
        raise SystemExit(str(exc)) from exc

    if args.json:
        print(_stable_json_dumps(node.model_dump(mode="json")), end="")
        return

    print(render(node, _load_options(args)))


__all__ = ["build_parser", "main"]
