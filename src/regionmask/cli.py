"""
Command-line interface for regionmask.

Provides commands for extracting a mask from a DS9 region file and for
writing a default configuration file.
"""

import argparse
import sys

from regionmask.config import COORDINATE_SYSTEMS, load_config, save_default_config
from regionmask.tracer import configure_tracer, get_tracer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="regionmask: build boolean pixel masks from DS9 region files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Extract a mask from a region file")
    run_parser.add_argument(
        "--regions", "-r",
        required=True,
        help="DS9 region file (ds9 format)",
    )
    source = run_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--image", "-i",
        default=None,
        help="Image or .npy file the mask applies to",
    )
    source.add_argument(
        "--shape",
        nargs=2,
        type=int,
        metavar=("NX", "NY"),
        default=None,
        help="Full image size, for --full without an image",
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
        "--full",
        action="store_true",
        help="Keep the full image frame instead of cropping to the regions",
    )
    run_parser.add_argument(
        "--warn-unknown",
        action="store_true",
        help="Warn about region shapes that cannot be rasterized",
    )
    run_parser.add_argument(
        "--coords",
        default=None,
        choices=COORDINATE_SYSTEMS,
        help="Coordinate system the region file was written in",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug artifact generation",
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

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="regionmask_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_run(args):
    """Handle the run command."""
    tracer = get_tracer()

    try:
        from regionmask.pipeline import run_extraction

        config = load_config(args.config)
        _configure_tracing(args, config)

        if args.full:
            config.extraction.full = True
        if args.warn_unknown:
            config.extraction.silent = False
        if args.coords:
            config.extraction.coords = args.coords

        image_shape = None
        if args.shape:
            nx, ny = args.shape
            image_shape = (ny, nx)

        with tracer.span("cli_run", module="cli"):
            result = run_extraction(
                regions_path=args.regions,
                out_dir=args.out,
                image_path=args.image,
                image_shape=image_shape,
                config=config,
                debug=args.debug,
            )

        grid = result.grid
        print(f"\nMask extracted successfully.")
        print(f"  Regions: {len(result.regions)}")
        print(f"  Grid: x={grid.x_min}..{grid.x_max} y={grid.y_min}..{grid.y_max}")
        print(f"  Pixels in mask: {result.region_mask.pixel_count}")
        if result.unknown_shapes:
            print(f"  Ignored shapes: {', '.join(result.unknown_shapes)}")
        print(f"\nOutputs saved to: {args.out}/")
        print(f"  - mask.png")
        print(f"  - mask.npy")
        if result.pixels is not None:
            print(f"  - pixels.npy")
        print(f"  - summary.json")

        return 0

    except Exception as e:
        tracer.event(f"Extraction failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1
    finally:
        tracer.config.close()


def _configure_tracing(args, config):
    """Configure tracing from CLI flags, falling back to the config file."""
    tracing = config.tracing
    if args.trace:
        configure_tracer(
            enabled=True,
            level=args.trace_level,
            file_path=args.trace_file,
            json_output=args.trace_json,
        )
    elif tracing.enabled:
        configure_tracer(
            enabled=True,
            level=tracing.level,
            file_path=tracing.file_path,
            json_output=tracing.json_output,
        )
    elif args.warn_unknown:
        # Warnings only
        configure_tracer(enabled=True, level="WARN")


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
