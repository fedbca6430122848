"""CLI entry point: python -m tsln <command>"""

import argparse
import json
import sys
from pathlib import Path


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="tsln",
        description="Time-Series Lean Notation CLI",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- encode ---
    encode_parser = subparsers.add_parser("encode", help="Encode a dataset to TSLN text")
    encode_parser.add_argument("input", type=str,
                               help="Input: .json list of {timestamp, data} or .csv with a timestamp column")
    encode_parser.add_argument("-o", "--output", type=str, required=True, help="Output .tsln file")
    encode_parser.add_argument("--no-diff", action="store_true",
                               help="Disable differential encoding")
    encode_parser.add_argument("--no-repeat", action="store_true",
                               help="Disable repeat markers")

    # --- decode ---
    decode_parser = subparsers.add_parser("decode", help="Decode TSLN text back to JSON")
    decode_parser.add_argument("input", type=str, help="Input .tsln file")
    decode_parser.add_argument("-o", "--output", type=str, required=True, help="Output .json file")

    # --- analyze ---
    analyze_parser = subparsers.add_parser("analyze", help="Show field profiles and strategies")
    analyze_parser.add_argument("input", type=str, help="Input .json or .csv dataset")

    # --- compare ---
    compare_parser = subparsers.add_parser("compare", help="Compare TSLN with JSON, CSV and TOON")
    compare_parser.add_argument("input", type=str, help="Input .json or .csv dataset")
    compare_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "encode":
        _cmd_encode(args)
    elif args.command == "decode":
        _cmd_decode(args)
    elif args.command == "analyze":
        _cmd_analyze(args)
    elif args.command == "compare":
        _cmd_compare(args)


def _load_dataset(input_path):
    """Load data points from a .json or .csv file."""
    from .codec.encoder import coerce_dataset

    path = Path(input_path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        records = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(records, list):
            raise ValueError("JSON input must be a list of {timestamp, data} records")
        return coerce_dataset(records)
    elif suffix in (".csv", ".tsv"):
        import pandas as pd
        from .pandas_ext import dataset_from_dataframe
        sep = "\t" if suffix == ".tsv" else ","
        df = pd.read_csv(str(path), sep=sep)
        df.columns = [str(c) for c in df.columns]
        return dataset_from_dataframe(df, timestamp_column="timestamp")
    else:
        raise ValueError(f"Unsupported input format: {path.suffix}. Use .json or .csv")


def _options(args):
    from .config import EncodeOptions
    return EncodeOptions(
        enable_differential=not args.no_diff,
        enable_repeat_markers=not args.no_repeat,
    )


def _cmd_encode(args):
    from . import convert
    from .cli_formatting import console, print_encode_results

    points = _load_dataset(args.input)
    console.print(f"[bold]Encoding {len(points)} points[/bold]...")
    result = convert(points, _options(args))
    Path(args.output).write_text(result.text, encoding="utf-8")
    print_encode_results(len(points), result.statistics, args.output)


def _cmd_decode(args):
    from . import decode
    from .cli_formatting import print_decode_results

    text = Path(args.input).read_text(encoding="utf-8")
    points = decode(text)
    records = [p.to_dict() for p in points]
    Path(args.output).write_text(json.dumps(records, indent=2), encoding="utf-8")
    n_fields = len(points[0].values) if points else 0
    print_decode_results(len(points), n_fields, args.output)


def _cmd_analyze(args):
    from . import analyze
    from .cli_formatting import print_analysis, print_header

    points = _load_dataset(args.input)
    print_header(f"TSLN analysis: {Path(args.input).name} ({len(points)} points)")
    print_analysis(analyze(points))


def _cmd_compare(args):
    from . import compare_formats
    from .cli_formatting import print_comparison, print_header

    points = _load_dataset(args.input)
    comparison = compare_formats(points)
    if args.json:
        print(json.dumps(comparison.to_dict(), indent=2))
        return
    print_header(f"Format comparison: {Path(args.input).name} ({len(points)} points)")
    print_comparison(comparison)


if __name__ == "__main__":
    main()
