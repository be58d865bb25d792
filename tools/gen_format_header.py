#!/usr/bin/env python3
"""Print the W4ON2 opcode layout as C #define constants.

Typical use regenerates the block inside the runtime header:

    python tools/gen_format_header.py --update runtime/w4on2.h
    python tools/gen_format_header.py > fmt.h
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from protospan.descriptors import W4ON2_EVENTS, EventDescriptor
from protospan.header import is_current, updated_header, write_if_changed
from protospan.layout import (
    DEFAULT_PREFIX,
    TableOverflowError,
    assign_spans,
    format_span_table,
)
from protospan.render import render_text


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate W4ON2 format opcode constants",
    )
    parser.add_argument(
        "--prefix",
        default=DEFAULT_PREFIX,
        help=f"Constant name prefix (default: {DEFAULT_PREFIX})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when the table needs more than 256 opcode values",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the listing to this file instead of stdout",
    )
    target.add_argument(
        "--update",
        type=Path,
        default=None,
        metavar="HEADER",
        help="Regenerate the format block embedded in an existing header",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="With --output/--update: write nothing, exit 2 if the file is stale",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the opcode map to stderr",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    descriptors: Sequence[EventDescriptor] = W4ON2_EVENTS,
) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    if args.check and args.output is None and args.update is None:
        parser.error("--check needs --output or --update")

    layout = assign_spans(descriptors)
    try:
        layout.check()
    except TableOverflowError as exc:
        if args.strict:
            raise SystemExit(f"error: {exc}") from exc
        print(f"warning: {exc}", file=sys.stderr)

    if args.summary:
        for row in format_span_table(layout):
            print(row, file=sys.stderr)

    block = render_text(layout, prefix=args.prefix)

    if args.output is None and args.update is None:
        sys.stdout.write(block)
        return 0

    if args.update is not None:
        path = args.update.expanduser().resolve()
        try:
            contents = updated_header(path, block)
        except FileNotFoundError as exc:
            raise SystemExit(f"error: {path} not found") from exc
        except OSError as exc:
            raise SystemExit(f"error: {path}: {exc.strerror}") from exc
        except ValueError as exc:
            raise SystemExit(f"error: {path}: {exc}") from exc
    else:
        path = args.output.expanduser().resolve()
        contents = block

    try:
        if args.check:
            if is_current(path, contents):
                print(f"{path} is up to date", file=sys.stderr)
                return 0
            print(f"{path} is stale", file=sys.stderr)
            return 2
        written = write_if_changed(path, contents)
    except OSError as exc:
        raise SystemExit(f"error: {path}: {exc.strerror}") from exc

    if written:
        print(f"wrote {path}", file=sys.stderr)
    else:
        print(f"{path} unchanged", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
