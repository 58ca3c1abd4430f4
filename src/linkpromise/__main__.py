from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser
from collections.abc import Sequence

from linkpromise import Deferred, delay, read_file, run

logger = logging.getLogger("linkpromise")


def summarize(text: str) -> str:
    lines = text.splitlines()
    first_line = lines[0] if lines else ""
    return "\n".join(
        [
            f"lines: {len(lines)}",
            f"words: {len(text.split())}",
            f"characters: {len(text)}",
            f"first line: {first_line.upper()}",
        ]
    )


def _print_summary(summary: str) -> int:
    print(summary)
    return 0


def _report_failure(reason: object) -> int:
    print(f"error: {reason}", file=sys.stderr)
    return 1


def summarize_file(path: str, encoding: str, wait: float = 0) -> Deferred[int]:
    """Read, wait, summarize and print, resolving to the process exit status."""
    return (
        read_file(path, encoding)
        .then(lambda text: delay(wait, text))
        .then(summarize)
        .then(_print_summary)
        .catch_(_report_failure)
        .finally_(lambda: logger.debug("Finished with %s", path))
    )


def main(argv: Sequence[str] | None = None) -> None:
    parser = ArgumentParser(
        prog="linkpromise",
        description=(
            "Reads a text file through a chain of deferred values and prints a "
            "summary of its contents"
        ),
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log deferred settlements and event loop activity",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.0,
        metavar="SECONDS",
        help="Wait this long between reading the file and summarizing it",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding of the file (default: %(default)s)",
    )
    parser.add_argument("path", help="File to summarize")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    status = run(
        lambda: summarize_file(args.path, args.encoding, args.delay), debug=args.debug
    )
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
