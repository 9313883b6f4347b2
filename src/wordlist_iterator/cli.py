"""Command-line interface for wordlist-iterator."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import NoReturn

from .exceptions import WordlistError
from .iterator import wordlist_iterator


async def _lines(args: argparse.Namespace) -> int:
    async with wordlist_iterator(
        args.file,
        high_water_mark=args.chunk_size,
        start=args.start,
        end=args.end,
    ) as words:
        async for word in words:
            if args.number:
                print(f"{words.position - 1}\t{word}")
            else:
                print(word)
    return 0


async def _find(args: argparse.Namespace) -> int:
    words = wordlist_iterator(
        args.file,
        high_water_mark=args.chunk_size,
        start=args.start,
        end=args.end,
    )
    found = False
    try:
        word = await words.asend(None)
        while True:
            found = word == args.word
            word = await words.asend(found)
    except StopAsyncIteration:
        pass

    if not found:
        print(f"Not found: {args.word}", file=sys.stderr)
        return 1
    print(words.position - 1)
    return 0


async def _count(args: argparse.Namespace) -> int:
    count = 0
    async with wordlist_iterator(
        args.file,
        high_water_mark=args.chunk_size,
        start=args.start,
        end=args.end,
    ) as words:
        async for _ in words:
            count += 1
    print(count)
    return 0


def _run(command, args: argparse.Namespace) -> int:
    """Run an async subcommand, turning library errors into exit code 1."""
    try:
        return asyncio.run(command(args))
    except WordlistError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_lines(args: argparse.Namespace) -> int:
    """Handle the 'lines' subcommand."""
    return _run(_lines, args)


def cmd_find(args: argparse.Namespace) -> int:
    """Handle the 'find' subcommand."""
    return _run(_find, args)


def cmd_count(args: argparse.Namespace) -> int:
    """Handle the 'count' subcommand."""
    return _run(_count, args)


def _add_window_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to wordlist file")
    parser.add_argument(
        "--start", default="0", help="First line to read (0-indexed, default 0)"
    )
    parser.add_argument(
        "--end", default="inf", help="Line to stop before (default: end of file)"
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Bytes read per chunk (default 65536)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="wordlist-iter",
        description="Stream ranges of huge wordlists line by line",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # lines subcommand
    lines_parser = subparsers.add_parser(
        "lines",
        help="Print lines in a range",
        description="Print every line whose index is in [start, end)",
    )
    _add_window_arguments(lines_parser)
    lines_parser.add_argument(
        "--number", action="store_true", help="Prefix each line with its index"
    )
    lines_parser.set_defaults(func=cmd_lines)

    # find subcommand
    find_parser = subparsers.add_parser(
        "find",
        help="Find the index of a word",
        description="Stream until WORD is found and print its line index",
    )
    _add_window_arguments(find_parser)
    find_parser.add_argument("word", help="Exact line to look for")
    find_parser.set_defaults(func=cmd_find)

    # count subcommand
    count_parser = subparsers.add_parser(
        "count",
        help="Count lines in a range",
        description="Count lines whose index is in [start, end)",
    )
    _add_window_arguments(count_parser)
    count_parser.set_defaults(func=cmd_count)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
