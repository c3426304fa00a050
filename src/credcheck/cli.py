"""Command-line interface for credcheck.

- reads records from stdin or a file
- validates them with the built-in rule table
- writes the summary (and optionally one line per record) to stdout
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Iterable

from .config import PRESENCE_POLICIES, ValidationConfig
from .errors import CredCheckError
from .validate import run_batch


def _read_lines(path: str | None) -> Iterable[str]:
    if path is None or path == "-":
        return sys.stdin
    return open(path, "r", encoding="utf-8")


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="credcheck", description="Validate blank-line-delimited credential records.")
    p.add_argument("path", nargs="?", default="-", help="Input file path or '-' for stdin")
    p.add_argument("--presence-only", action="store_true", help="Only check that required fields are present")
    p.add_argument("--presence", choices=PRESENCE_POLICIES, default="substring",
                   help="How a required field counts as present (default: substring)")
    p.add_argument("--workers", type=int, default=1, help="Validate records on N threads")
    p.add_argument("--show", action="store_true", help="Print one verdict line per record")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Log more (-vv for per-record debug)")
    args = p.parse_args(argv)

    _setup_logging(args.verbose)

    try:
        config = ValidationConfig(
            mode="presence" if args.presence_only else "full",
            presence=args.presence,
            workers=args.workers,
        )
        with _read_lines(args.path) as fh:  # type: ignore[attr-defined]
            result = run_batch(fh, config)
    except (CredCheckError, OSError, UnicodeDecodeError) as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 2

    if args.show:
        for i, v in enumerate(result.verdicts):
            line = f"{i} {v.status}"
            if v.field or v.detail:
                line += f" {v.field or '-'}: {v.detail}"
            sys.stdout.write(line + "\n")
    sys.stdout.write(f"found {result.valid} valid passports out of {result.total}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
