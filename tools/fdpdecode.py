# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
from __future__ import annotations

"""
CLI tool for explaining a fuzz input (crash, corpus entry) with a decode recipe.

Example:
    python tools/fdpdecode.py crash-1234 uint8 int:10:30 rstr bytes:4 --format values
"""

import argparse
import logging
import os
import sys
import urllib.parse
import urllib.request

from fuzzdata.provider import FuzzedDataProvider
from fuzzdata.recipe import parse_recipe, run_recipe
from fuzzdata.trace import ConsumptionTrace, summarize_trace, trace_to_turtle

log = logging.getLogger("fdpdecode")


def read_input(uri: str) -> bytes:
    """Read the whole input from a path or file:// URI."""
    if uri.startswith("file://"):
        parsed = urllib.parse.urlparse(uri)
        path = urllib.request.url2pathname(parsed.path)
    else:
        path = uri

    if not os.path.isfile(path):
        raise FileNotFoundError(f"resource does not exist: {uri}")
    with open(path, "rb") as file:
        return file.read()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode a fuzz input with a FuzzedDataProvider recipe."
    )
    parser.add_argument("uri", help="URI/path of the input file to decode.")
    parser.add_argument(
        "recipe",
        nargs="+",
        help="Decode steps, e.g. 'uint8 int:10:30 bytes:4 rstr:16'.",
    )
    parser.add_argument(
        "--format",
        choices=("json", "turtle", "values"),
        default="json",
        help="Output format (default: json).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every decode step.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        steps = parse_recipe(args.recipe)
        data = read_input(args.uri)
        trace = ConsumptionTrace()
        provider = FuzzedDataProvider(data, trace=trace)
        log.debug("decoding %d bytes with %d steps", len(data), len(steps))
        values = run_recipe(provider, steps)
    except (FileNotFoundError, ValueError) as error:
        print(f"[error] {error}", file=sys.stderr)
        return 1
    except OSError as error:
        print(f"[error] Could not read input: {error}", file=sys.stderr)
        return 1

    if args.format == "turtle":
        print(trace_to_turtle(trace))
    elif args.format == "values":
        for value in values:
            print(repr(value))
    else:
        print(summarize_trace(trace, input_size=len(data)))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
