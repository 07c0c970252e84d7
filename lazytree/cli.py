"""Command-line front door for lazytree.

Parses CLI options, merges them over the persisted config, and launches the
interactive navigator (or prints the root listing with ``--print``).
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .file_tree_model import Tree
from .render import format_tree_row
from .runtime import Settings, load_settings, run_app, save_settings
from .ui_theme import available_theme_names, resolve_theme

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazytree",
        description="Navigate a directory tree and copy, move, delete, rename or create entries.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    hidden = parser.add_mutually_exclusive_group()
    hidden.add_argument("--show-hidden", dest="show_hidden", action="store_true", default=None, help="List dotfiles.")
    hidden.add_argument("--hide-hidden", dest="show_hidden", action="store_false", help="Hide dotfiles.")
    parser.add_argument("--dirs-first", action="store_true", default=None, help="List directories before files.")
    parser.add_argument("--no-preview", action="store_true", help="Disable the file preview pane.")
    parser.add_argument(
        "--poll-interval",
        type=_positive_float,
        default=None,
        metavar="SECONDS",
        help="Seconds between change checks on watched directories.",
    )
    parser.add_argument("--log-file", default=None, metavar="PATH", help="Append debug logs to PATH.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Log level for --log-file (default: INFO).",
    )
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the listing and exit.")
    parser.add_argument("--save", action="store_true", help="Persist the effective options to the config file.")
    return parser


def configure_logging(log_file: str | None, level: str) -> None:
    """Attach a file handler to the package logger when ``log_file`` is set."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("lazytree")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def merge_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI overrides on top of config-file settings."""
    overrides: dict[str, object] = {}
    if args.theme is not None:
        overrides["theme"] = args.theme
    if args.show_hidden is not None:
        overrides["show_hidden"] = args.show_hidden
    if args.dirs_first is not None:
        overrides["dirs_first"] = args.dirs_first
    if args.no_preview:
        overrides["preview"] = False
    if args.poll_interval is not None:
        overrides["watch_poll_seconds"] = args.poll_interval
    return replace(settings, **overrides)


def print_listing(path: Path, settings: Settings, no_color: bool) -> str:
    """Render the root listing as plain lines for non-interactive output."""
    tree = Tree.from_path(path, show_hidden=settings.show_hidden, dirs_first=settings.dirs_first)
    theme = resolve_theme(settings.theme, no_color=no_color)
    out = [str(tree.root.path)]
    out.extend(format_tree_row(row, theme, None) for row in tree.visible_rows())
    return "\n".join(out) + "\n"


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch lazytree on a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path) if args.path is not None else default_path
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    settings = merge_settings(load_settings(), args)
    if args.save:
        save_settings(settings)
    no_color = args.no_color or (args.print_only and not sys.stdout.isatty())
    try:
        if args.print_only:
            sys.stdout.write(print_listing(path, settings, no_color))
            return
        run_app(path, settings, no_color=no_color)
    except OSError as exc:
        raise SystemExit(f"lazytree: {exc}") from exc


if __name__ == "__main__":
    main()
