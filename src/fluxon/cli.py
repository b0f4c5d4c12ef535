"""CLI entry point for Fluxon."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from fluxon import __version__, logger
from fluxon.archive import save_artifacts
from fluxon.dependencies import ensure_cli_dependencies
from fluxon.exceptions import PackageError
from fluxon.formatting import format_file_size
from fluxon.imaging import run_export_images
from fluxon.logging import configure_logging
from fluxon.merge import run_merge
from fluxon.nup import NUP_PRESETS, resolve_preset, run_compose
from fluxon.pdf_render import get_page_count
from fluxon.progress import log_progress
from fluxon.settings import Settings, get_settings
from fluxon.split import run_split
from fluxon.typing.enums import ImageFormat, Orientation, PaperSize, SplitMode
from fluxon.typing.models import ComposeRequest, ImageExportRequest, MergeRequest, SplitRequest

if TYPE_CHECKING:
    from collections.abc import Callable

    from fluxon.typing.enums import _EnumMixin


def _enum_from_cli(enum_cls: type[_EnumMixin]) -> Callable[[str], _EnumMixin]:
    """Build an argparse `type=` converter for a user-facing enum.

    Args:
        enum_cls (type[_EnumMixin]): Enum class.

    Returns:
        Callable[[str], _EnumMixin]: Converter raising `argparse.ArgumentTypeError` on bad values.
    """

    def _convert(value: str) -> _EnumMixin:
        try:
            return enum_cls.from_str(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    _convert.__name__ = enum_cls.__name__
    return _convert


def _add_output_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output-dir", type=Path, default=None, dest="output_dir")


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="fluxon", description="Merge, split, N-up and rasterize PDF files.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    merge_parser = subparsers.add_parser("merge", help="Merge PDFs in the given order")
    merge_parser.add_argument("inputs", nargs="+", type=Path)
    merge_parser.add_argument("--invert", action="store_true", help="Invert colors (pages are rasterized)")
    merge_parser.add_argument("--name", default=None, dest="output_name")
    _add_output_dir(merge_parser)

    split_parser = subparsers.add_parser("split", help="Cut a PDF into pieces, bundled as a zip")
    split_parser.add_argument("input_path", type=Path)
    split_parser.add_argument("--mode", type=_enum_from_cli(SplitMode), default=SplitMode.ALL)
    split_parser.add_argument("--ranges", default=None, help="Page ranges, e.g. '1-3, 5, 7-10'")
    split_parser.add_argument("--interval", type=int, default=1)
    split_parser.add_argument("--rasterize", action="store_true", help="Rebuild pages from images")
    split_parser.add_argument("--prefix", default=None)
    split_parser.add_argument("--no-zip", action="store_true", dest="no_zip")
    _add_output_dir(split_parser)

    nup_parser = subparsers.add_parser("nup", help="Place several pages on each sheet")
    nup_parser.add_argument("inputs", nargs="+", type=Path)
    nup_parser.add_argument("--preset", choices=sorted(NUP_PRESETS, key=int), default="10")
    nup_parser.add_argument("--rows", type=int, default=None, help="Overrides the preset rows")
    nup_parser.add_argument("--cols", type=int, default=None, help="Overrides the preset columns")
    nup_parser.add_argument("--paper", type=_enum_from_cli(PaperSize), default=PaperSize.A4)
    nup_parser.add_argument(
        "--orientation",
        type=_enum_from_cli(Orientation),
        default=Orientation.PORTRAIT,
    )
    nup_parser.add_argument("--outer-margin", type=float, default=5.0, dest="outer_margin_mm")
    nup_parser.add_argument("--inner-margin", type=float, default=1.0, dest="inner_margin_mm")
    nup_parser.add_argument("--no-border", action="store_true", dest="no_border")
    nup_parser.add_argument("--dpi", type=int, default=None)
    nup_parser.add_argument("--invert", action="store_true")
    nup_parser.add_argument("--name", default=None, dest="output_name")
    _add_output_dir(nup_parser)

    images_parser = subparsers.add_parser("images", help="Convert PDF pages to images, bundled as a zip")
    images_parser.add_argument("input_path", type=Path)
    images_parser.add_argument("--ranges", default=None, dest="pages", help="Pages to convert (default: all)")
    images_parser.add_argument(
        "--format",
        type=_enum_from_cli(ImageFormat),
        default=ImageFormat.PNG,
        dest="image_format",
    )
    images_parser.add_argument("--quality", type=int, default=None)
    images_parser.add_argument("--scale", type=float, default=None)
    images_parser.add_argument("--invert", action="store_true")
    images_parser.add_argument("--prefix", default=None)
    images_parser.add_argument("--no-zip", action="store_true", dest="no_zip")
    _add_output_dir(images_parser)

    info_parser = subparsers.add_parser("info", help="Show page count and size of PDFs")
    info_parser.add_argument("inputs", nargs="+", type=Path)

    return parser


def _build_merge_request(args: argparse.Namespace, settings: Settings) -> MergeRequest:
    return MergeRequest(
        inputs=args.inputs,
        invert=args.invert,
        invert_scale=settings.invert_scale,
        output_name=args.output_name,
    )


def _build_split_request(args: argparse.Namespace) -> SplitRequest:
    return SplitRequest(
        input_path=args.input_path,
        mode=args.mode,
        ranges=args.ranges,
        interval=args.interval,
        rasterize=args.rasterize,
        prefix=args.prefix,
    )


def _build_compose_request(args: argparse.Namespace, settings: Settings) -> ComposeRequest:
    """Build N-up request from CLI arguments.

    Explicit `--rows` / `--cols` override the preset grid.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        ComposeRequest: Request object.
    """
    rows, cols = resolve_preset(args.preset)
    return ComposeRequest(
        inputs=args.inputs,
        rows=args.rows if args.rows is not None else rows,
        cols=args.cols if args.cols is not None else cols,
        paper=args.paper,
        orientation=args.orientation,
        outer_margin_mm=args.outer_margin_mm,
        inner_margin_mm=args.inner_margin_mm,
        show_border=not args.no_border,
        dpi=args.dpi if args.dpi is not None else settings.nup_dpi,
        invert=args.invert,
        output_name=args.output_name,
    )


def _build_image_request(args: argparse.Namespace, settings: Settings) -> ImageExportRequest:
    return ImageExportRequest(
        input_path=args.input_path,
        image_format=args.image_format,
        quality=args.quality if args.quality is not None else settings.image_quality,
        scale=args.scale if args.scale is not None else settings.image_scale,
        pages=args.pages,
        prefix=args.prefix,
        invert=args.invert,
    )


def _run_command(args: argparse.Namespace, settings: Settings) -> list[Path]:
    """Dispatch one sub-command and write its outputs.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        list[Path]: Written files.
    """
    if args.command == "info":
        for path in args.inputs:
            print(f"{path.name}: {get_page_count(path)} pages, {format_file_size(path.stat().st_size)}")  # noqa: T201
        return []

    output_dir = args.output_dir or Path(settings.output_dir)
    if args.command == "merge":
        artifacts = [run_merge(_build_merge_request(args, settings), on_progress=log_progress)]
    elif args.command == "split":
        artifacts = run_split(_build_split_request(args), bundle=not args.no_zip, on_progress=log_progress)
    elif args.command == "nup":
        artifacts = [run_compose(_build_compose_request(args, settings), on_progress=log_progress)]
    else:
        artifacts = run_export_images(
            _build_image_request(args, settings),
            bundle=not args.no_zip,
            on_progress=log_progress,
        )
    return save_artifacts(artifacts, output_dir)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, defaults to `sys.argv[1:]`.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        ensure_cli_dependencies(args.command)
        written = _run_command(args, settings)
    except ValidationError as exc:
        logger.error("Invalid arguments", extra={"command": args.command, "errors": str(exc)})
        return 1
    except PackageError:
        logger.exception("Operation failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Operation aborted by user", extra={"command": args.command})
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1

    for path in written:
        print(path)  # noqa: T201
    logger.info("Operation completed", extra={"command": args.command, "outputs": [str(p) for p in written]})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
