from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from tupledump.core.format_spec import ConfigError
from tupledump.core.lex import DecodeError
from tupledump.core.presets import get_preset
from tupledump.core.scan import RecordPrinter
from tupledump.core.store import STORE_TYPES, StoreError, open_store
from tupledump.core.summary import summarize_store

logger = logging.getLogger("tupledump")


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tupledump", description="Print records of a lexicographic-tuple key-value store"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("print", help="Print records, decoding keys and values")
    p.add_argument("path", help="Path to the store")
    p.add_argument(
        "--store-type", choices=STORE_TYPES, default="auto",
        help="Store backend (default: detect from the directory)",
    )
    p.add_argument(
        "--key-format", "--key_format", dest="key_format", default=None,
        help="Format keys using this format string",
    )
    p.add_argument(
        "--value-format", "--value_format", dest="value_format", default=None,
        help="Format values using this format string",
    )
    p.add_argument(
        "--key-prefix", "--key_prefix", dest="key_prefix", default=None,
        help="Only print keys with this prefix",
    )
    p.add_argument("--preset", default=None, help="Use formats from a named preset")
    p.add_argument("--config", default=None, help="Presets YAML file")
    p.add_argument("--limit", type=int, default=None, help="Stop after this many records")

    s = sub.add_parser("summarize", help="Count records and bytes in a store")
    s.add_argument("path", help="Path to the store")
    s.add_argument(
        "--store-type", choices=STORE_TYPES, default="auto",
        help="Store backend (default: detect from the directory)",
    )
    return parser


def _print_command(args: argparse.Namespace) -> int:
    key_format, value_format, key_prefix = "", "", ""
    if args.preset:
        preset = get_preset(args.preset, args.config)
        key_format, value_format, key_prefix = (
            preset.key_format,
            preset.value_format,
            preset.key_prefix,
        )
    if args.key_format is not None:
        key_format = args.key_format
    if args.value_format is not None:
        value_format = args.value_format
    if args.key_prefix is not None:
        key_prefix = args.key_prefix

    printer = RecordPrinter.from_formats(key_format, value_format, key_prefix)
    with open_store(args.path, args.store_type) as store:
        printer.print_records(store, sys.stdout, limit=args.limit)
    return 0


def _summarize_command(args: argparse.Namespace) -> int:
    with open_store(args.path, args.store_type) as store:
        summary = summarize_store(store)
    for line in summary.lines():
        print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "print":
            return _print_command(args)
        return _summarize_command(args)
    except (ConfigError, DecodeError, StoreError) as e:
        print(f"tupledump: {e}", file=sys.stderr)
        return 1
    except BrokenPipeError:  # pragma: no cover - e.g. piped into head
        return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
