"""Command-line interface for Word Stamp."""

import asyncio
import logging
import signal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from word_stamp import __version__
from word_stamp.config import get_settings
from word_stamp.export.archive import ArchiveEncodingError
from word_stamp.export.capture import CaptureError, CaptureOptions, PillowCapture
from word_stamp.export.orchestrator import BatchExportOrchestrator, ExportState
from word_stamp.export.surface import RenderSurface
from word_stamp.formatting.ir import ArchiveExport, ExportResult, StyleDeclaration
from word_stamp.formatting.renderer import StyledRenderer
from word_stamp.words.normalizer import (
    MalformedInputError,
    merge_terms,
    normalize_word_list,
)
from word_stamp.words.placeholder import InvalidMarkerError

app = typer.Typer(
    name="word-stamp",
    help="Render styled text to PNG images, one per word of a word list.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Word Stamp v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def load_terms(
    words_file: Optional[Path],
    extra_words: list[str],
    delimiter: str,
) -> list[str]:
    """Read the word list file and merge words given on the command line.

    File order is kept unless extra words are merged in, in which case
    the combined list is sorted.

    Raises:
        MalformedInputError: If the file is not text
    """
    terms: list[str] = []
    if words_file is not None:
        terms = normalize_word_list(words_file.read_bytes(), delimiter)
    if extra_words:
        extra = normalize_word_list(delimiter.join(extra_words), delimiter)
        terms = merge_terms(terms, extra)
    return terms


async def run_export(
    orchestrator: BatchExportOrchestrator,
    text: str,
    terms: list[str],
    rules: Optional[str],
) -> ExportResult:
    """Run one export, turning Ctrl+C into a graceful batch cancellation."""
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
        installed = True
    except (NotImplementedError, RuntimeError):
        # No loop signal handlers on this platform; Ctrl+C aborts instead
        installed = False

    try:
        return await orchestrator.export(text, terms, rules, cancel=cancel)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


def write_result(result: ExportResult, output_dir: Path) -> Optional[Path]:
    """Write the exported file. Returns None when there is nothing to write."""
    if result.data is None:
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / result.filename
    output_path.write_bytes(result.data)
    return output_path


@app.command()
def main(
    text: str = typer.Argument(
        ...,
        help="Text to render. Use !{word} as a placeholder for word list terms.",
    ),
    style: Optional[Path] = typer.Option(
        None,
        "--style",
        "-s",
        exists=True,
        dir_okay=False,
        help="YAML style rule file (.style)",
    ),
    words: Optional[Path] = typer.Option(
        None,
        "--words",
        "-w",
        exists=True,
        dir_okay=False,
        help="Comma-separated word list file (.words)",
    ),
    word: Optional[list[str]] = typer.Option(
        None,
        "--word",
        help="Add a term to the word list (repeatable)",
    ),
    output: Path = typer.Option(
        Path("."),
        "--output",
        "-o",
        file_okay=False,
        help="Output directory",
    ),
    marker: Optional[str] = typer.Option(
        None,
        "--marker",
        help="Placeholder marker (default: !{word})",
    ),
    color: Optional[str] = typer.Option(None, "--color", "-c", help="Text color"),
    weight: Optional[int] = typer.Option(
        None,
        "--weight",
        "-b",
        min=100,
        max=900,
        help="Font weight (100-900)",
    ),
    font: Optional[str] = typer.Option(None, "--font", "-f", help="Font family"),
    font_size: Optional[int] = typer.Option(
        None, "--font-size", min=1, help="Font size in pixels"
    ),
    width: Optional[int] = typer.Option(None, "--width", min=1, help="Surface width"),
    height: Optional[int] = typer.Option(None, "--height", min=1, help="Surface height"),
    scale: Optional[float] = typer.Option(
        None, "--scale", min=0.1, help="Output pixel ratio (default: 2)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Render styled text to a PNG, or a ZIP of PNGs for a word list.

    Examples:

        python stamp.py "Hello world"

        python stamp.py "Hello !{word}!" --word Ann --word Bo

        python stamp.py "I love !{word}" --words fruits.words -o out/

        python stamp.py "I was running" --style verbs.style --color navy
    """
    configure_logging(verbose)
    settings = get_settings()

    try:
        terms = load_terms(words, word or [], settings.delimiter)
    except MalformedInputError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    rules = None
    if style:
        try:
            rules = style.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            console.print(
                f"[yellow]Warning:[/yellow] {style} is not UTF-8 text, "
                f"rendering without styles ({e.reason})"
            )

    overrides = StyleDeclaration(
        color=color,
        font_weight=weight,
        font_family=font,
        font_size=font_size,
    )
    renderer = StyledRenderer().with_overrides(overrides)
    surface = RenderSurface(renderer=renderer, width=width, height=height)
    options = CaptureOptions(
        scale=scale or settings.capture_scale,
        width=surface.width,
        height=surface.height,
    )

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
        transient=True,
    )
    task = progress.add_task("Rendering images...", total=len(terms) or None)

    def on_item(item, success: bool) -> None:
        progress.update(task, description=f"Rendered {item.key}")
        progress.advance(task)

    orchestrator = BatchExportOrchestrator(
        capture=PillowCapture(),
        renderer=renderer,
        surface=surface,
        marker=marker,
        options=options,
        on_item=on_item,
    )

    if verbose:
        console.print(f"[blue]Output:[/blue] {output}")
        console.print(f"[blue]Terms:[/blue] {len(terms)}")
        if style:
            console.print(f"[blue]Style:[/blue] {style}")

    try:
        batch = orchestrator.select_mode(text, terms) is ExportState.BATCH
        if batch:
            with progress:
                result = asyncio.run(run_export(orchestrator, text, terms, rules))
        else:
            result = asyncio.run(run_export(orchestrator, text, terms, rules))
    except (InvalidMarkerError, CaptureError, ArchiveEncodingError) as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    if isinstance(result, ArchiveExport):
        for failure in result.failures:
            console.print(
                f"[yellow]Skipped:[/yellow] {failure.key} ({failure.message})"
            )
        if result.cancelled:
            console.print(
                f"[yellow]Cancelled:[/yellow] kept {len(result.entries)} image(s)"
            )

    output_path = write_result(result, output)
    if output_path is None:
        console.print("[yellow]Nothing to write[/yellow]")
        raise typer.Exit(1)

    if isinstance(result, ArchiveExport):
        console.print(
            f"[green]Success:[/green] {output_path} "
            f"({len(result.entries)} image(s))"
        )
    else:
        console.print(f"[green]Success:[/green] {output_path}")


if __name__ == "__main__":
    app()
