"""Main CLI entry point for upstreamjs.

Provides commands: install
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from upstreamjs.cli.install import install_command

logger = logging.getLogger("upstreamjs.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upstreamjs",
        description="Upstreamjs - install JavaScript modules packaged in upstream dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    install_parser = subparsers.add_parser(
        "install",
        help="Copy upstream modules into node_modules",
    )
    install_parser.add_argument(
        "graph",
        help=(
            "Dependency graph JSON: output of `mvn dependency:tree "
            "-DoutputType=json` or a networkx node-link document"
        ),
    )
    install_parser.add_argument(
        "--base-dir",
        help="Project directory (default: current directory)",
    )
    install_parser.add_argument(
        "--node-modules-dir",
        help="Output directory (default: <base-dir>/node_modules)",
    )
    install_parser.add_argument(
        "--local-repository",
        help="Local Maven repository (default: ~/.m2/repository)",
    )
    install_parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional configuration. Can be a path to a TOML/JSON file or an "
            "inline TOML/JSON string. Command-line flags take precedence."
        ),
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "install":
        logger.debug("Running install for graph %s", args.graph)
        return install_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
