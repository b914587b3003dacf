"""
Command-line interface for the inscribed rectangle scanner.

Provides commands for scanning a curve, listing presets and writing a
default configuration file.
"""

import argparse
import sys

from inscribe.config import load_config, save_default_config
from inscribe.curves.presets import PRESET_CURVES
from inscribe.tracer import configure_tracer, get_tracer


def build_parser():
    """Build the argument parser with all sub-commands."""
    parser = argparse.ArgumentParser(
        prog="inscribe",
        description="Find rectangles inscribed in a closed planar curve",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Scan a curve for inscribed rectangles")
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--points", "-p",
        default=None,
        help="Point file (.json or .csv)",
    )
    source.add_argument(
        "--preset",
        default=None,
        choices=sorted(PRESET_CURVES),
        help="Built-in preset curve",
    )
    run_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    run_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    run_parser.add_argument(
        "--resolution", "-r",
        type=int,
        default=None,
        help="Surface grid resolution (12-120)",
    )
    run_parser.add_argument(
        "--tolerance", "-t",
        type=float,
        default=None,
        help="Collision tolerance (derived from the curve when omitted)",
    )
    run_parser.add_argument(
        "--all",
        action="store_true",
        help="Raise the rectangle cap to the 'show all' limit",
    )
    run_parser.add_argument(
        "--raw",
        action="store_true",
        help="Skip resampling, smoothing and normalization",
    )
    run_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    run_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    subparsers.add_parser("presets", help="List built-in preset curves")

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="inscribe_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "presets":
        return handle_presets(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_run(args):
    """Handle the run command."""
    configure_tracer(
        enabled=args.trace,
        level=args.trace_level,
        file_path=args.trace_file,
        json_output=args.trace_json,
    )

    tracer = get_tracer()

    try:
        from inscribe.pipeline import run_pipeline

        config = load_config(args.config)
        if args.resolution is not None:
            config.surface.resolution = args.resolution
        if args.tolerance is not None:
            config.detection.tolerance = args.tolerance
        if args.all:
            config.detection.show_all = True
        if args.raw:
            config.curve.prepare = False

        with tracer.span("cli_run", module="cli"):
            result = run_pipeline(
                out_dir=args.out,
                points_path=args.points,
                preset=args.preset,
                config=config,
            )

        print("\nScan completed successfully.")
        print(f"  Curve points: {len(result.curve)}")
        print(f"  Pair samples: {result.sample_count}")
        print(f"  Tolerance: {result.tolerance:.4f}")
        print(f"  Rectangles found: {len(result.rectangles)}")
        print(f"  Validation errors: {result.validation.error_count}")
        print(f"  Validation warnings: {result.validation.warning_count}")
        print(f"\nOutputs saved to: {args.out}/")
        print("  - scan.json")
        print("  - surface.json")
        print("  - rectangles.json")
        print("  - validation_report.json")

        if result.validation.has_errors:
            print("\n[!] Validation errors detected. Review validation_report.json")
            return 1

        return 0

    except (OSError, ValueError) as e:
        tracer.event(f"Scan failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1
    finally:
        tracer.config.close()


def handle_presets(args):
    """Handle the presets command."""
    for preset_id in sorted(PRESET_CURVES):
        preset = PRESET_CURVES[preset_id]
        print(f"{preset_id:<12} {preset.name}: {preset.description}")
    return 0


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
