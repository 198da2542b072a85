"""
Build an example plan and print it.

Usage: python -m planwright [PATH] [--schema] [-v]
"""

from __future__ import annotations

import argparse
import logging

from planwright.context import ExecutionContext
from planwright.logical_plan import DType, col, eq, lit, schema


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="planwright",
        description="Print the logical plan of an example query over a CSV file.",
    )
    parser.add_argument("path", nargs="?", default="test.csv", help="CSV file the plan scans")
    parser.add_argument("--schema", action="store_true", help="Also print the output schema")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx = ExecutionContext()
    source_schema = schema([
        ("column1", DType.INT64, False),
        ("column2", DType.INT64, False),
        ("column3", DType.INT64, False),
    ])
    df = (
        ctx.csv(source_schema, args.path)
        .filter(eq(col("column1"), lit(123)))
        .select([col("column1"), col("column3")])
    )

    print(df.explain(), end="")
    if args.schema:
        print()
        print(df.schema())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
