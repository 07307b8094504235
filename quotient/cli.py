"""Evaluate one fraction operation from the command line."""

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .fraction import Fraction

OPERATIONS = {
    "add": Fraction.add,
    "sub": Fraction.sub,
    "mul": Fraction.mul,
    "div": Fraction.div,
}


@dataclass
class Settings:
    int_bits: Optional[int] = None


def load_settings(path: Optional[str]) -> Settings:
    """Read CLI defaults from a TOML file; no path means built-in defaults."""
    if path is None:
        return Settings()
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with config_path.open("rb") as f:
        params = tomllib.load(f)

    int_bits = params.get("int_bits")
    if int_bits is not None and (isinstance(int_bits, bool) or not isinstance(int_bits, int)):
        raise ValueError(f"int_bits in {config_path} must be an integer")
    return Settings(int_bits=int_bits)


def evaluate(operation: str, operands: Sequence[int], *, int_bits: Optional[int] = None) -> Fraction:
    expected = 2 if operation == "show" else 4
    if len(operands) != expected:
        raise ValueError(f"{operation} takes {expected} integers, got {len(operands)}")

    left = Fraction(operands[0], operands[1], int_bits=int_bits)
    if operation == "show":
        return left
    right = Fraction(operands[2], operands[3], int_bits=int_bits)
    return OPERATIONS[operation](left, right)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quotient",
        description="Reduce a fraction or combine two fractions exactly.",
    )
    parser.add_argument("operation", choices=["show", *OPERATIONS], help="Operation to perform")
    parser.add_argument(
        "operands",
        nargs="+",
        type=int,
        help="Numerator and denominator pairs, e.g. `add 1 2 1 3`",
    )
    parser.add_argument("--int-bits", dest="int_bits", type=int, help="Detect overflow at this signed width")
    parser.add_argument("--config", dest="config", help="TOML file with default settings")
    parser.add_argument("--value", action="store_true", help="Also print the floating point value")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
        int_bits = args.int_bits if args.int_bits is not None else settings.int_bits
        result = evaluate(args.operation, args.operands, int_bits=int_bits)
        lines = [result.display()]
        if args.value:
            lines.append(str(result.value()))
    except (ArithmeticError, TypeError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
