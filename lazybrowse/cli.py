"""Command-line front door for lazybrowse.

Parses CLI options, builds a navigation session over the local filesystem,
and prints the processed listing of a directory or a capped file preview.
"""

from __future__ import annotations

import argparse
import locale
import shutil
import sys
from dataclasses import replace
from pathlib import Path

from .entries import FilterOptions, SortConfig, SortKey, SortOrder
from .formatting import format_entry_row
from .log import get_logger, set_verbose
from .navigation import NavigationController, Phase
from .preview import PreviewPhase
from .providers import LocalEnvironmentProvider, LocalFileSystemProvider
from .runtime.config import Settings, load_settings

logger = get_logger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default listing width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List a directory through the lazybrowse navigation core, or preview a file."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to list. Defaults to current directory.")
    parser.add_argument(
        "--sort",
        choices=[key.value for key in SortKey],
        default=None,
        help="Sort key (default: saved preference or name).",
    )
    parser.add_argument("--desc", action="store_true", help="Sort in descending order.")
    parser.add_argument("--hidden", action="store_true", help="Show hidden entries.")
    parser.add_argument("--no-dirs-first", action="store_true", help="Do not group directories before files.")
    parser.add_argument("--ext", nargs="+", default=None, metavar="EXT", help="Only list files with these extensions.")
    parser.add_argument("--search", default=None, help="Case-insensitive substring filter on names.")
    parser.add_argument("--preview", metavar="FILE", default=None, help="Print a capped preview of FILE and exit.")
    parser.add_argument("--max-lines", type=_positive_int, default=None, help="Preview line cap.")
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Row width (default: terminal width).")
    parser.add_argument("--verbose", action="store_true", help="Log cache and I/O activity to stderr.")
    return parser


def _settings_from_args(args: argparse.Namespace, settings: Settings) -> Settings:
    sort_config = settings.sort_config
    if args.sort is not None:
        sort_config = replace(sort_config, key=SortKey(args.sort))
    if args.desc:
        sort_config = replace(sort_config, order=SortOrder.DESC)
    return replace(
        settings,
        sort_config=sort_config,
        show_hidden=settings.show_hidden or args.hidden,
        directories_first=settings.directories_first and not args.no_dirs_first,
        preview_max_lines=args.max_lines or settings.preview_max_lines,
    )


def _wait_until_settled(controller: NavigationController) -> None:
    timeout = controller.settings.io_timeout_seconds
    while controller.state.phase is Phase.LOADING:
        controller.wait_for_io(timeout)


def render_listing(controller: NavigationController, width: int) -> str:
    state = controller.state
    sort_config: SortConfig = state.sort_config
    out = [f"{state.current_path}  [{sort_config.key.value} {sort_config.order.value}]"]
    for entry in state.visible_entries:
        out.append(format_entry_row(entry, width))
    return "\n".join(out) + "\n"


def render_preview(controller: NavigationController, path: Path) -> str:
    controller.preview.show(path)
    while controller.preview.state.phase is PreviewPhase.LOADING:
        controller.wait_for_io(controller.settings.io_timeout_seconds)
    preview = controller.preview.state
    if preview.error is not None:
        raise SystemExit(preview.error.message)
    if preview.content is None:
        raise SystemExit(f"Cannot preview {path}")
    return "\n".join(preview.content.lines) + "\n"


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and print a listing or preview.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args()
    set_verbose(args.verbose)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.debug("keeping default collation: %s", exc)

    settings = _settings_from_args(args, load_settings())
    controller = NavigationController(
        LocalFileSystemProvider(),
        LocalEnvironmentProvider(),
        settings=settings,
    )
    try:
        if args.preview is not None:
            if args.path is not None:
                raise SystemExit("Cannot combine positional path with --preview.")
            preview_path = Path(args.preview).resolve()
            if not preview_path.exists():
                raise SystemExit(f"Path not found: {preview_path}")
            sys.stdout.write(render_preview(controller, preview_path))
            return

        if default_path is None:
            default_path = Path.cwd()
        path = Path(args.path or default_path).resolve()
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        if not path.is_dir():
            sys.stdout.write(render_preview(controller, path))
            return

        controller.start(path)
        _wait_until_settled(controller)
        if controller.state.phase is Phase.ERROR:
            raise SystemExit(controller.state.error_message or f"Cannot read {path}")

        if args.ext is not None or args.search:
            options = controller.state.filter_options
            controller.change_filter(
                FilterOptions.create(
                    show_hidden=options.show_hidden,
                    directories_first=options.directories_first,
                    extensions=args.ext,
                    search_query=args.search,
                )
            )
        width = args.max_cols if args.max_cols is not None else _default_render_width()
        sys.stdout.write(render_listing(controller, width))
    finally:
        controller.close()


if __name__ == "__main__":
    main()
