"""CLI entrypoints for velcro commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .compose import BuildError
from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .scaffold import ScaffoldError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_site_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the site root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="velcro",
        description="Compose a static site from pages, posts, and reusable components.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Create a new site from the starter template.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    init_parser.add_argument("name", help="Name of the site folder to create.")
    init_parser.add_argument(
        "--directory",
        default=".",
        help="Parent directory for the new site (defaults to current directory).",
    )

    build_parser = subparsers.add_parser(
        "build",
        help="Build the site into its output directory.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_site_path_argument(build_parser)
    build_parser.add_argument(
        "--drafts",
        action="store_true",
        help="Include pages and posts whose folder starts with the draft prefix.",
    )
    build_parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove the output directory before building.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Build the site and serve the output for local preview.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_site_path_argument(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    serve_parser.add_argument(
        "--no-build",
        action="store_true",
        help="Serve the existing output without building first.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for velcro commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    diagnostics = configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "init":
        try:
            site_path = orchestrator.run_init(args.name, args.directory)
        except (ScaffoldError, FileExistsError) as exc:
            parser.exit(1, f"{exc}\n")
        rel_path = _relativize(site_path)
        print(f"Site created at {rel_path}")
        print("Getting started:")
        print(f"  1. cd {rel_path}")
        print("  2. velcro build")
        print("  3. velcro serve")
    elif args.command == "build":
        try:
            report = orchestrator.run_build(
                args.path,
                include_drafts=bool(args.drafts),
                clean=bool(args.clean),
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (BuildError, ConfigError) as exc:
            parser.exit(1, f"velcro build failed: {exc}\nRun with --verbose for more details.\n")
        rel_path = _relativize(report.output_dir)
        print(f"Built {report.file_count} file(s) into {rel_path}")
        if diagnostics.warnings:
            print(
                f"{diagnostics.warnings} warning(s) in {len(diagnostics.by_source)} file(s); "
                "see log output above."
            )
    elif args.command == "serve":
        from .service import run_service

        try:
            run_service(
                Path(args.path),
                host=args.host,
                port=args.port,
                build=not args.no_build,
                orchestrator=orchestrator,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (BuildError, ConfigError) as exc:
            parser.exit(1, f"velcro serve failed: {exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
