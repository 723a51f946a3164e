#!/usr/bin/env python3
"""
string_const

Puts a block of text into a form Java sees as a string constant, or
takes such a block back to plain text.

Works as a filter from stdin to stdout. It pairs well with ``fold``:
try ``fold -w 70 -s`` first, or in vim ``set tw=70`` and press ``gq``.

Example, with -c::

    Four score and seven years ago our fathers brought forth on this
    continent a new nation, conceived in liberty and dedicated to the
    proposition that all men are created equal

becomes::

    "Four score and seven years ago our fathers brought forth on this " +
    "continent a new nation, conceived in liberty and dedicated to the " +
    "proposition that all men are created equal";

-d strips the quotes and plus signs again. It leaves the final ``;`` in
place, so the last line needs a manual touch-up.
"""

import argparse
import logging
import sys
from typing import Callable, Dict, Iterable, Iterator, Optional, TextIO, Tuple

__version__ = "1.0.0"

CONSTIFY = "constify"
DECONSTIFY = "deconstify"

USAGE_ERROR = "Argument must be either -d or -c"


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger("string_const")


def constify_line(line: str, is_last: bool) -> str:
    """Quote a line, adding `` " +`` unless it is the last one, which gets ``;``."""
    line = line.rstrip(" ")
    if is_last:
        return f'"{line}";'
    return f'"{line} " +'


def deconstify_line(line: str, is_last: bool = False) -> str:  # pylint: disable=unused-argument
    """
    Strip constify decoration from a line.

    Trailing quotes, plus signs and spaces go, then leading quotes and
    spaces. A trailing ``;`` stops the trailing strip, so the last line
    of a constified block keeps its quote and semicolon tail.
    """
    return line.rstrip('"+ ').lstrip('" ')


TRANSFORMS: Dict[str, Callable[[str, bool], str]] = {
    CONSTIFY: constify_line,
    DECONSTIFY: deconstify_line,
}


def mark_last(lines: Iterable[str]) -> Iterator[Tuple[str, bool]]:
    """Yield (line, is_last) pairs, holding one line back to spot the end."""
    pending: Optional[str] = None
    for line in lines:
        if pending is not None:
            yield pending, False
        pending = line
    if pending is not None:
        yield pending, True


def transform(lines: Iterable[str], mode: str) -> Iterator[str]:
    """Apply the constify or deconstify transform to a stream of lines."""
    try:
        func = TRANSFORMS[mode]
    except KeyError:
        raise ValueError(f"Unknown mode: {mode!r}") from None
    for line, is_last in mark_last(lines):
        yield func(line, is_last)


def _chomp(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def read_lines(stream: TextIO) -> Iterator[str]:
    """Yield lines from a text stream without their line terminators."""
    for line in stream:
        yield _chomp(line)


class ModeArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad invocations with exit status 1."""

    def error(self, message: str):  # type: ignore[override]
        logger.debug("Argument error: %s", message)
        self.print_usage(sys.stderr)
        self.exit(1, f"{USAGE_ERROR}\n")


def main() -> int:
    parser = ModeArgumentParser(
        description="Turn a block of text into a quoted string constant, or back"
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "-c",
        dest="mode",
        action="store_const",
        const=CONSTIFY,
        help="Constify: wrap each line in quotes joined with +",
    )
    group.add_argument(
        "-d",
        dest="mode",
        action="store_const",
        const=DECONSTIFY,
        help="Deconstify: strip quotes and + from each line",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"string_const v{__version__}",
        help="Show program version and exit",
    )

    args = parser.parse_args()

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    logger.debug("Mode: %s", args.mode)

    count = 0
    for out_line in transform(read_lines(sys.stdin), args.mode):
        sys.stdout.write(out_line + "\n")
        count += 1
    sys.stdout.flush()

    logger.debug("Wrote %d lines", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
