"""CLI entry point for taskflow."""

import argparse
from pathlib import Path

from . import __version__
from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="taskflow",
        description="Terminal dashboard for managing tasks on a taskflow server",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Directory containing taskflow.yml (default: current directory)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Task server url, overrides taskflow.yml (e.g. http://localhost:5001)",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Bearer token for the task server (or set TASKFLOW_TOKEN)",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate default taskflow.yml in the project root and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Merge CLI flags over environment-derived settings."""
    settings_kwargs: dict = {}
    if args.project_root:
        settings_kwargs["project_root"] = args.project_root
    if args.api_url:
        settings_kwargs["api_url"] = args.api_url
    if args.token:
        settings_kwargs["token"] = args.token
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file
    return Settings(**settings_kwargs)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    settings = build_settings(args)

    setup_logging(settings.verbose, settings.log_file)

    if args.generate:
        from .cli.generate import run_generate

        exit_code = run_generate(settings.project_root, settings.api_url)
        raise SystemExit(exit_code)

    # Import here so --help/--generate do not pay for loading textual
    from .app import run

    run(settings)


if __name__ == "__main__":
    main()
