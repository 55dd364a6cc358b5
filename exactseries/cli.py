"""Command-line driver: evaluate the exact series and report their convergence."""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import SeriesConfig, load_parfile
from .convergence import SeriesReport, convergence_table
from .rational import Rational
from .series import exp_series, log_series


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exactseries",
        description="Evaluate truncated exp/log series in exact rational arithmetic.",
        epilog="Negative arguments must follow '--', e.g. exactseries exp -- -1/2",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--parfile", dest="parfile", help="TOML parfile with default settings")
    common.add_argument("--terms", type=int, help="Number of series terms")

    commands = parser.add_subparsers(dest="command", required=True)
    for name, label in (("exp", "e raised to POWER"), ("log", "natural logarithm of X")):
        sub = commands.add_parser(name, parents=[common], help=f"Approximate {label}")
        sub.add_argument("value", help="Rational argument such as 1/2, 3 or 0.25")
        sub.add_argument("--digits", type=int, help="Decimal digits to print")

    table = commands.add_parser(
        "table", parents=[common], help="Show every partial sum against the float oracle"
    )
    table.add_argument("function", choices=["exp", "log"])
    table.add_argument("value", help="Rational argument such as 1/2, 3 or 0.25")
    return parser


def resolve_config(args: argparse.Namespace) -> SeriesConfig:
    config = load_parfile(args.parfile) if args.parfile else SeriesConfig()
    return config.with_overrides(digits=getattr(args, "digits", None))


def run_single(args: argparse.Namespace, config: SeriesConfig) -> None:
    value = Rational.parse(args.value, max_denominator=config.max_denominator)
    if args.command == "exp":
        terms = config.exp_terms if args.terms is None else args.terms
        result = exp_series(value, terms)
    else:
        terms = config.log_terms if args.terms is None else args.terms
        result = log_series(value, terms)

    print(f"{args.command}({value}) with {terms} terms")
    print(f"  Fraction: {result}")
    print(f"  Decimal:  {result.to_decimal(config.digits)}")


def report(result: SeriesReport) -> None:
    print(f"{result.function}({result.argument}) partial sums")
    print(f"  Oracle: {result.oracle:.16e}")
    for count, (value, error) in enumerate(zip(result.partial_sums, result.errors), start=1):
        print(f"  {count:4d}  {float(value): .16e}  {error:.6e}")
    print(f"  Final error: {result.final_error:.6e}")
    print(f"  Linf error: {result.linf_error:.6e}")
    print(f"  Non-increasing: {'yes' if result.is_non_increasing() else 'no'}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
        if args.command == "table":
            terms = config.table_terms if args.terms is None else args.terms
            value = Rational.parse(args.value, max_denominator=config.max_denominator)
            report(convergence_table(args.function, value, terms))
        else:
            run_single(args, config)
    except Exception as exc:  # noqa: BLE001
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
