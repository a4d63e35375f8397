"""
Command-line interface for the color analyzer.

Usage:
  color-analyzer analyze photo.jpg --top 5 --output table --save result.json
  color-analyzer dominant photo.jpg
  color-analyzer palette photo.jpg --colors 6
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from coloranalyzer import __version__
from coloranalyzer.errors import ColorAnalysisError, ImageIOError
from coloranalyzer.schemas import AnalysisResult, ColorBucket
from coloranalyzer.services.analyzer import analyze, get_color_palette, get_dominant_color
from coloranalyzer.utils.logging import configure_logging

OUTPUT_FORMATS = ("json", "table", "simple")


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="color-analyzer",
        description="Analyze dominant colors in images",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default="WARNING", help="Log level for stderr diagnostics")
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Analyze an image and print color information")
    p_analyze.add_argument("image_path")
    p_analyze.add_argument("-t", "--top", type=positive_int, default=5, help="Number of top colors to show")
    p_analyze.add_argument("-o", "--output", choices=OUTPUT_FORMATS, default="table", help="Output format")
    p_analyze.add_argument("-s", "--save", metavar="FILE", help="Save the full JSON result to FILE")

    p_dominant = sub.add_parser("dominant", help="Print only the dominant color")
    p_dominant.add_argument("image_path")

    p_palette = sub.add_parser("palette", help="Extract a color palette")
    p_palette.add_argument("image_path")
    p_palette.add_argument("-c", "--colors", type=positive_int, default=5, help="Number of colors in palette")

    return parser


def result_to_json(result: AnalysisResult) -> str:
    return json.dumps(result.model_dump(mode="json", by_alias=True), indent=2)


def save_result(result: AnalysisResult, filename: str) -> None:
    """
    Write the full JSON result to disk.

    Raises:
        ImageIOError: Target not writable
    """
    try:
        Path(filename).write_text(result_to_json(result) + "\n", encoding="utf-8")
    except OSError as e:
        raise ImageIOError(f"Failed to save results to {filename}: {e}") from e


def swatch(color: ColorBucket, width: int = 3) -> Text:
    return Text(" " * width, style=Style(bgcolor=color.hex))


def _label(color: ColorBucket) -> str:
    return color.name or color.rgb_string


def render_table(console: Console, result: AnalysisResult) -> None:
    info = result.image_info
    console.print("[bold]Image Information:[/bold]")
    console.print(f"  Dimensions: {info.width} x {info.height}")
    console.print(f"  Format: {info.format}")
    console.print(f"  Processing Time: {result.processing_time_ms:.0f}ms\n")

    dominant = result.dominant_color
    if dominant is not None:
        console.print("[bold]Dominant Color:[/bold]")
        console.print(Text.assemble(swatch(dominant, 5), f"  {dominant.hex} - {_label(dominant)}"))
        console.print(f"  RGB: {dominant.rgb_string}")
        console.print(f"  Percentage: {dominant.percentage:.2f}%\n")

    table = Table(title="Top Colors", show_header=True, header_style="bold cyan")
    table.add_column("Rank", justify="right")
    table.add_column("Color")
    table.add_column("Hex")
    table.add_column("Name")
    table.add_column("Percentage", justify="right")
    for rank, color in enumerate(result.top_colors, start=1):
        table.add_row(str(rank), swatch(color), color.hex, color.name or "", f"{color.percentage:.2f}%")
    console.print(table)

    if result.color_stats is not None:
        console.print(f"\nTotal unique colors: {result.color_stats.total_colors}")


def render_simple(console: Console, result: AnalysisResult) -> None:
    dominant = result.dominant_color
    if dominant is not None:
        console.print("[bold]Dominant Color:[/bold]")
        console.print(f"  {dominant.hex} - {_label(dominant)}")
        console.print(f"  Percentage: {dominant.percentage:.2f}%\n")

    console.print("[bold]Top Colors:[/bold]")
    for rank, color in enumerate(result.top_colors, start=1):
        console.print(f"  {rank}. {color.hex} - {_label(color)} ({color.percentage:.2f}%)")


def cmd_analyze(args: argparse.Namespace, console: Console) -> None:
    result = analyze(args.image_path, top_colors_count=args.top)

    if args.output == "json":
        # plain print keeps the JSON free of console markup
        print(result_to_json(result))
    elif args.output == "simple":
        render_simple(console, result)
    else:
        render_table(console, result)

    if args.save:
        save_result(result, args.save)
        console.print(f"\nResults saved to {args.save}", style="green", markup=False)


def cmd_dominant(args: argparse.Namespace, console: Console) -> None:
    dominant = get_dominant_color(args.image_path)
    if dominant is None:
        console.print("No pixels to analyze")
        return
    console.print(Text.assemble(swatch(dominant, 5), Text(f" {dominant.hex} - {_label(dominant)}", style="bold")))
    console.print(f"RGB: {dominant.rgb_string}")
    console.print(f"Percentage: {dominant.percentage:.2f}%")


def cmd_palette(args: argparse.Namespace, console: Console) -> None:
    palette = get_color_palette(args.image_path, args.colors)

    console.print(f"[bold]Color Palette ({len(palette)} colors):[/bold]\n")
    for color in palette:
        console.print(Text.assemble(
            swatch(color, 5),
            f" {color.hex:<10} {_label(color):<12} {color.percentage:.2f}%",
        ))

    console.print("\n[bold]CSS Variables:[/bold]")
    for index, color in enumerate(palette, start=1):
        console.print(f"--color-{index}: {color.hex};", highlight=False)


COMMANDS = {
    "analyze": cmd_analyze,
    "dominant": cmd_dominant,
    "palette": cmd_palette,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()
    error_console = Console(stderr=True)

    if not Path(args.image_path).is_file():
        error_console.print(f"Error: File not found - {args.image_path}", style="red", markup=False, soft_wrap=True)
        return 1

    try:
        COMMANDS[args.command](args, console)
    except ColorAnalysisError as e:
        error_console.print(f"Error: {e}", style="red", markup=False, soft_wrap=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
