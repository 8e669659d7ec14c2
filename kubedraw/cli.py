#!/usr/bin/env python3
"""
Command-line interface for kubedraw.

Provides commands to convert Kubernetes manifests into diagrams and to
validate manifests without rendering.
"""

import argparse
import sys
from typing import List, Optional

from kubedraw import __version__
from kubedraw.config import Config
from kubedraw.converter import RENDERERS, ConvertOptions, Converter
from kubedraw.layout import LAYOUTS
from kubedraw.output import OutputManager, Verbosity, get_output, set_output


def _build_options(args: argparse.Namespace) -> ConvertOptions:
    namespaces = getattr(args, "namespaces", None)
    return ConvertOptions(
        input_dir=args.input,
        output_file=getattr(args, "output", None),
        use_kustomize=args.kustomize,
        namespace=args.namespace if args.namespace is not None else Config.namespace(),
        layout=getattr(args, "layout", None) or Config.layout(),
        no_namespaces=Config.no_namespaces() if namespaces is None else not namespaces,
        output_format=getattr(args, "format", None) or Config.output_format(),
        rank_by_depth=getattr(args, "rank_by_depth", False),
    )


def cmd_convert(args: argparse.Namespace) -> None:
    """Handle the convert subcommand."""
    output = get_output()
    try:
        if not args.input:
            raise ValueError("input directory is required")
        if not args.output:
            raise ValueError("output file is required")

        options = _build_options(args)
        if options.layout not in LAYOUTS:
            output.warning(f"Unknown layout '{options.layout}', using hierarchical")

        output.verbose(f"Reading manifests from {options.input_dir}")
        if options.namespace:
            output.verbose(f"Filtering to namespace: {options.namespace}")

        with output.spinner("Analyzing manifests and generating diagram"):
            result = Converter(options).convert()

        if result.resource_count == 0:
            output.info(f"No resources found in {options.input_dir}")
        output.success(
            f"Successfully converted {result.resource_count} resources to {result.output_file}"
        )
        output.table(
            "Resources",
            ["Kind", "Count"],
            [[kind, str(count)] for kind, count in sorted(result.kind_counts.items())],
        )
        output.verbose(f"{result.node_count} nodes, {result.connection_count} connections")
    except FileNotFoundError as e:
        output.error(f"Error: {e}", suggestion="Check the path passed with -i/--input")
        sys.exit(1)
    except (ValueError, RuntimeError) as e:
        output.error(f"Error: {e}")
        sys.exit(1)


def cmd_validate(args: argparse.Namespace) -> None:
    """Handle the validate subcommand."""
    output = get_output()
    try:
        if not args.input:
            raise ValueError("input directory is required")

        count = Converter(_build_options(args)).validate()
        output.success(f"Successfully validated {count} resources")
    except FileNotFoundError as e:
        output.error(f"Error: {e}", suggestion="Check the path passed with -i/--input")
        sys.exit(1)
    except (ValueError, RuntimeError) as e:
        output.error(f"Error: {e}")
        sys.exit(1)


def cmd_version(args: argparse.Namespace) -> None:
    """Handle the version subcommand."""
    get_output().console.print(f"kubedraw version {__version__}")


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i",
        "--input",
        help="Input directory containing Kubernetes manifests",
    )
    parser.add_argument(
        "-k",
        "--kustomize",
        action="store_true",
        help="Enable Kustomize processing",
    )
    parser.add_argument(
        "-n",
        "--namespace",
        help="Filter by namespace (defaults to KUBEDRAW_NAMESPACE env var)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only show errors and final results",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output including file paths and command execution",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for kubedraw CLI."""
    parser = argparse.ArgumentParser(
        description="kubedraw - Convert Kubernetes manifests to Draw.io diagrams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kubedraw convert -i manifests/ -o diagram.drawio
  kubedraw convert -i overlays/prod -k -o prod.drawio --layout vertical
  kubedraw convert -i manifests/ -o diagram.dot --format dot --no-namespaces
  kubedraw validate -i manifests/ -n default
  kubedraw version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert Kubernetes manifests to a Draw.io diagram",
    )
    _add_input_arguments(convert_parser)
    convert_parser.add_argument(
        "-o",
        "--output",
        help="Output diagram file path",
    )
    convert_parser.add_argument(
        "-l",
        "--layout",
        help=f"Layout algorithm ({'/'.join(LAYOUTS)}; defaults to KUBEDRAW_LAYOUT or hierarchical)",
    )
    convert_parser.add_argument(
        "--namespaces",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Group nodes by namespace; --no-namespaces gives a flat layout "
        "(defaults to KUBEDRAW_NO_NAMESPACES)",
    )
    convert_parser.add_argument(
        "--format",
        choices=sorted(RENDERERS),
        help="Output format (defaults to KUBEDRAW_FORMAT or drawio)",
    )
    convert_parser.add_argument(
        "--rank-by-depth",
        action="store_true",
        help="Place hierarchical rows by dependency depth",
    )
    convert_parser.set_defaults(func=cmd_convert)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate Kubernetes manifests",
    )
    _add_input_arguments(validate_parser)
    validate_parser.set_defaults(func=cmd_validate)

    version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
    )
    version_parser.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)

    if getattr(args, "quiet", False):
        verbosity = Verbosity.QUIET
    elif getattr(args, "verbose", False):
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.NORMAL

    set_output(OutputManager(verbosity=verbosity))

    args.func(args)


if __name__ == "__main__":
    main()
