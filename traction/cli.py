"""
Traction - Command Line Interface

Usage:
    traction "1+2*3" [--format canonical|markup|ast] [--strict] [--debug]
    traction -f expressions.txt --format markup
    python -m traction "log_0(w)"
"""

import sys
import argparse

from .visitor import DEFAULT_MAX_DEPTH


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="traction",
        description="Parse Traction Algebra notation and print it as canonical text, markup or an AST",
    )
    parser.add_argument("expressions", nargs="*", help="Expressions to parse")
    parser.add_argument("-f", "--file", help="Read one expression per line from this file")
    parser.add_argument(
        "--format",
        choices=["canonical", "markup", "ast"],
        default="canonical",
        dest="output_format",
        help="Output format (default: canonical)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        dest="max_depth",
        help=f"Limit on nested groups and log_0 chains (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Print nothing for an expression that fails to parse",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print parsing phase info to stderr",
    )

    args = parser.parse_args(argv)

    if not args.expressions and not args.file:
        parser.error("no expressions given")

    from .interpret import parse_expression, read_expressions, ast_to_json
    from .printer import print_canonical, print_markup

    renderers = {
        "canonical": print_canonical,
        "markup": print_markup,
        "ast": ast_to_json,
    }
    render = renderers[args.output_format]

    sources = list(args.expressions)
    if args.file:
        try:
            sources.extend(read_expressions(args.file))
        except FileNotFoundError:
            print(f"[traction] Error: Input file not found: {args.file!r}", file=sys.stderr)
            sys.exit(1)

    failed = False
    for source in sources:
        result = parse_expression(source, max_depth=args.max_depth, debug=args.debug)
        if not result.ok:
            failed = True
            print(f"[traction] {source!r}: {result.error}", file=sys.stderr)
            if args.strict:
                continue
        print(render(result))

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
