"""Command-line interface for followback."""

import sys
import json
import argparse
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analyzer import RelationshipAnalyzer
from .config import ConfigManager
from .error_handling import FollowbackError, MalformedInputError
from .logging_config import setup_logging
from .models import AnalysisResult, Config, SourceKind
from .normalizer import normalize_handle
from .reporter import build_report, save_export
from .utils import kind_from_path, load_document

KIND_CHOICES = ["auto"] + [kind.value for kind in SourceKind]

console = Console()
error_console = Console(stderr=True)


def _display_ratio(result: AnalysisResult) -> str:
    report = result.report
    if report.following_count == 0:
        return "0%"
    return f"{report.followers_count / report.following_count * 100:.1f}%"


def render_summary(result: AnalysisResult) -> Table:
    """Summary cards as a single-row table."""
    report = result.report
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Followers", justify="right", style="magenta")
    table.add_column("Following", justify="right", style="blue")
    table.add_column("Not Following Back", justify="right", style="red")
    table.add_column("Follow Ratio", justify="right", style="green")
    table.add_row(
        str(report.followers_count),
        str(report.following_count),
        str(report.not_following_back_count),
        _display_ratio(result),
    )
    return table


def render_handles(title: str, handles: List[str], style: str) -> Table:
    """Numbered list of handles."""
    table = Table(title=title, box=box.SIMPLE, header_style=f"bold {style}")
    table.add_column("#", justify="right", style="dim", width=5)
    table.add_column("Handle", style=style)
    for idx, handle in enumerate(handles, 1):
        table.add_row(str(idx), f"@{handle}")
    return table


def _resolve_kind(explicit: Optional[str], default: str, path: str) -> str:
    kind = explicit or default
    if kind == "auto":
        return kind_from_path(path).value
    return kind


def load_config(args) -> Config:
    """Load configuration and apply command-line overrides."""
    config = ConfigManager(getattr(args, "config", None)).load()

    if getattr(args, "output_dir", None):
        config.export.output_dir = args.output_dir
    if getattr(args, "parallel", False):
        config.processing.parallel_extraction = True
    if getattr(args, "verbose", False):
        config.logging.level = "DEBUG"
    if getattr(args, "log_format", None):
        config.logging.format = args.log_format

    return config


def analyze_command(args) -> int:
    """Analyze a followers document against a following document."""
    config = load_config(args)
    setup_logging(
        format=config.logging.format,
        level=config.logging.level,
        log_file=config.logging.log_file,
    )

    followers_kind = _resolve_kind(args.followers_kind, args.kind, args.followers)
    following_kind = _resolve_kind(args.following_kind, args.kind, args.following)

    if args.followers == "-" and args.following == "-":
        error_console.print("[red]Only one side can be read from stdin[/red]")
        return 1

    max_bytes = config.processing.max_input_bytes
    try:
        followers_document = load_document(args.followers, max_bytes)
        following_document = load_document(args.following, max_bytes)
    except (FileNotFoundError, FollowbackError) as e:
        error_console.print(f"[red]Error loading input:[/red] {e}")
        return 1

    analyzer = RelationshipAnalyzer(config=config)
    try:
        result = analyzer.analyze(
            followers_document, following_document, followers_kind, following_kind
        )
    except MalformedInputError as e:
        error_console.print(f"[red]Analysis failed:[/red] {e}")
        return 1

    if not result.has_data:
        error_console.print(
            "[yellow]No data found:[/yellow] could not extract usernames from the provided data"
        )
        return 1

    report = result.report
    console.print(render_summary(result))

    for diagnostic in result.diagnostics:
        console.print(Panel(diagnostic.message, title="Warning", border_style="yellow"))

    if report.not_following_back:
        console.print(
            render_handles("People Not Following You Back", report.not_following_back, "red")
        )
    else:
        console.print("[bold green]Perfect follow ratio![/bold green] Everyone you follow follows you back.")

    if args.show_mutual and report.mutual_followers:
        console.print(render_handles("Mutual Followers", report.mutual_followers, "green"))

    if args.export:
        record = build_report(report)
        path = save_export(
            record,
            output_dir=config.export.output_dir,
            prefix=config.export.filename_prefix,
            indent=config.export.indent,
        )
        console.print(f"💾 Results exported to: {path}")

    return 0


def normalize_command(args) -> int:
    """Print the canonical handle of each value."""
    config = ConfigManager(args.config).load()
    status = 0
    for value in args.values:
        handle = normalize_handle(value, config.platform.domain)
        if handle:
            console.print(handle)
        else:
            error_console.print(f"[yellow]rejected:[/yellow] {value!r}")
            status = 1
    return status


def generate_config(args) -> int:
    """Generate a configuration template."""
    config_manager = ConfigManager()

    if args.output:
        config_manager.save_template(args.output)
        console.print(f"✅ Configuration template saved to: {args.output}")
    else:
        print(json.dumps(ConfigManager.DEFAULT_CONFIG, indent=2))

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="followback",
        description="Find the accounts you follow that do not follow you back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare two JSON data exports
  followback analyze followers_1.json following.json

  # Mix formats, infer each from its extension, and export the results
  followback analyze followers.html following.json --kind auto --export

  # Pasted text from stdin for the followers side
  pbpaste | followback analyze - following.json --followers-kind text --following-kind json

  # Check how a value will be normalized
  followback normalize https://www.instagram.com/Jane.Doe/ @jane.doe
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze followers against following")
    analyze_parser.add_argument("followers", help="Followers document (or - for stdin)")
    analyze_parser.add_argument("following", help="Following document (or - for stdin)")
    analyze_parser.add_argument(
        "--kind", choices=KIND_CHOICES, default="auto",
        help="Format of both documents (default: infer from extension)",
    )
    analyze_parser.add_argument("--followers-kind", choices=KIND_CHOICES, help="Format of the followers document")
    analyze_parser.add_argument("--following-kind", choices=KIND_CHOICES, help="Format of the following document")
    analyze_parser.add_argument("-c", "--config", help="Path to configuration file")
    analyze_parser.add_argument("--export", action="store_true", help="Write the analysis JSON file")
    analyze_parser.add_argument("-o", "--output-dir", help="Directory for the exported file")
    analyze_parser.add_argument("--show-mutual", action="store_true", help="Also list mutual followers")
    analyze_parser.add_argument("--parallel", action="store_true", help="Extract both sides concurrently")
    analyze_parser.add_argument("--log-format", choices=["text", "json"], help="Log output format")
    analyze_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    normalize_parser = subparsers.add_parser("normalize", help="Show the canonical handle of values")
    normalize_parser.add_argument("values", nargs="+", help="URLs, @handles or names")
    normalize_parser.add_argument("-c", "--config", help="Path to configuration file")

    config_parser = subparsers.add_parser("generate-config", help="Generate configuration template")
    config_parser.add_argument("-o", "--output", help="Save to file (default: print to stdout)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "analyze":
            return analyze_command(args)
        elif args.command == "normalize":
            return normalize_command(args)
        elif args.command == "generate-config":
            return generate_config(args)
    except KeyboardInterrupt:
        error_console.print("\n⚠️  Interrupted by user")
        return 1
    except FollowbackError as e:
        error_console.print(f"\n❌ Error: {e}")
        if getattr(args, "verbose", False):
            error_console.print_exception()
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
