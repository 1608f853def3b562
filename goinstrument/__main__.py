import argparse
import logging
import os
import sys

from .errors import InstrumentError
from .pipeline import instrument_source
from .registry import available_instrumenters


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="goinstrument",
        description="Insert trace spans into Go functions that take a context.",
    )
    ap.add_argument("input_file", help="Path to the Go source file")
    out = ap.add_mutually_exclusive_group()
    out.add_argument("-o", "--output", help="Path to the output file")
    out.add_argument("-w", "--write", action="store_true", help="Overwrite the input file")
    ap.add_argument("--app", default="app", help="Tracer name (default: app)")
    ap.add_argument(
        "--instrumenter",
        default="otel",
        choices=sorted(available_instrumenters()),
        help="Instrumentation flavour (default: otel)",
    )
    ap.add_argument("--skip-generated", action="store_true", help="Leave generated files untouched")
    ap.add_argument("--include", action="append", default=[], metavar="RE",
                    help="Only instrument functions whose name matches (repeatable)")
    ap.add_argument("--exclude", action="append", default=[], metavar="RE",
                    help="Never instrument functions whose name matches (repeatable)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not os.path.exists(args.input_file):
        print(f"Error: '{args.input_file}' not found.", file=sys.stderr)
        return 1

    if os.path.splitext(args.input_file)[1] != ".go":
        print(f"Error: unsupported extension for '{args.input_file}'. Supported: .go", file=sys.stderr)
        return 1

    with open(args.input_file, "rb") as f:
        code_bytes = f.read()

    try:
        result = instrument_source(
            code_bytes,
            app=args.app,
            instrumenter=args.instrumenter,
            skip_generated=args.skip_generated,
            include=args.include,
            exclude=args.exclude,
        )
    except InstrumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.write:
        output_path = args.input_file
    else:
        output_path = args.output or "instrumented_" + os.path.basename(args.input_file)

    with open(output_path, "w") as f:
        f.write(result.code)

    if result.skipped:
        print(f"Skipped generated file, copied to {output_path}")
    else:
        print(f"Instrumented {len(result.patches)} functions, written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
