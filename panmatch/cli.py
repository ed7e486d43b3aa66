"""Command-line interface for panmatch.

Provides commands for:
- analyze: Find the melody, its key and the best-matching handpan scale
- compare: Recommend in both standard and pro mode
- scales: List the scale catalog
"""

import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table

from .input import SongLoader
from .matching import SCALES, MatchMode, MatchResult, load_catalog
from .pipeline import SongAnalyzer, ProcessedSong
from .exporter import ReportExporter

app = typer.Typer(
    name="panmatch",
    help="Match a MIDI melody to the handpan scale that plays it best",
    rich_markup_mode="markdown",
)
console = Console()


def _load_catalog(catalog: Optional[Path]):
    if catalog is None:
        return SCALES
    try:
        return load_catalog(str(catalog))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _process(input_file: Path, analyzer: SongAnalyzer) -> ProcessedSong:
    try:
        song = SongLoader().load(str(input_file))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return analyzer.process(song)


def _parse_mode(mode: str) -> MatchMode:
    try:
        return MatchMode(mode.lower())
    except ValueError:
        console.print(f"[red]Error: Unknown mode '{mode}'. Use 'standard' or 'pro'[/red]")
        raise typer.Exit(1)


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input MIDI (.mid) or JSON song file"),
    mode: str = typer.Option("standard", "--mode", "-m", help="Matching mode: standard or pro"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Custom scale catalog (JSON)"),
    melody: Optional[int] = typer.Option(None, "--melody", help="Force this track id as melody"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write a JSON report"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show tracks and alternatives"),
):
    """Find the melody track, its key, and the best handpan scale.

    Examples:
        panmatch analyze song.mid
        panmatch analyze song.mid --mode pro --json
    """
    match_mode = _parse_mode(mode)
    analyzer = SongAnalyzer(catalog=_load_catalog(catalog))

    if not json_output:
        console.print(f"[blue]Loading:[/blue] {input_file}")
    processed = _process(input_file, analyzer)

    if melody is not None:
        try:
            analyzer.set_melody(processed, melody)
        except KeyError:
            console.print(f"[red]Error: No usable track with id {melody}[/red]")
            raise typer.Exit(1)

    result = analyzer.match(processed, match_mode)
    alternatives = _ranked(analyzer, processed, match_mode)

    exporter = ReportExporter()
    if output:
        exporter.export(processed, result, str(output), alternatives)

    if json_output:
        console.print_json(data=exporter.to_dict(processed, result, alternatives))
        return

    if processed.is_empty:
        console.print("[yellow]No usable tracks: every track was too short or percussion[/yellow]")

    if verbose:
        _show_tracks_table(processed, analyzer)

    console.print(f"  Detected key: {result.key}")
    _show_result(result)

    if verbose and alternatives:
        _show_candidates_table(alternatives[:5])

    if output:
        console.print(f"[blue]Report written to:[/blue] {output}")


@app.command()
def compare(
    input_file: Path = typer.Argument(..., help="Input MIDI (.mid) or JSON song file"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Custom scale catalog (JSON)"),
):
    """Recommend a scale in both standard and pro mode."""
    analyzer = SongAnalyzer(catalog=_load_catalog(catalog))
    processed = _process(input_file, analyzer)

    table = Table(title=f"Recommendations: {processed.name}")
    table.add_column("Mode", style="cyan")
    table.add_column("Scale", style="green")
    table.add_column("Transpose", style="yellow")
    table.add_column("Score", style="magenta")
    table.add_column("Raw", style="magenta")
    table.add_column("Tier", style="blue")

    for match_mode in MatchMode:
        result = analyzer.match(processed, match_mode)
        table.add_row(
            match_mode.value,
            result.scale_name,
            f"{result.transposition:+d}",
            f"{result.score:.1f}",
            f"{result.raw_score:.1f}",
            result.tier.value,
        )

    console.print(f"  Detected key: {processed.key}")
    console.print(table)


@app.command()
def scales(
    catalog: Optional[Path] = typer.Option(None, "--catalog", "-c", help="Custom scale catalog (JSON)"),
):
    """List the scale catalog."""
    table = Table(title="Scale Catalog")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Notes", style="yellow")
    table.add_column("Pitch classes")
    table.add_column("Popularity", style="magenta")

    for scale in _load_catalog(catalog):
        table.add_row(
            scale.id,
            scale.name,
            str(scale.note_count),
            " ".join(scale.sorted_pitch_classes()),
            f"{scale.popularity:.2f}",
        )

    console.print(table)


def _ranked(analyzer: SongAnalyzer, processed: ProcessedSong, mode: MatchMode):
    candidates = analyzer.candidates(processed)
    if mode is MatchMode.PRO:
        return analyzer.selector.rank_pro(candidates)
    return analyzer.selector.rank_standard(candidates)


def _show_result(result: MatchResult):
    console.print(
        f"[green]Suggested scale:[/green] {result.scale_name} ({result.scale_id}) "
        f"transpose {result.transposition:+d}, score {result.score:.1f} "
        f"[dim]({result.mode.value}, {result.tier.value})[/dim]"
    )
    if result.matched_notes:
        console.print(f"  Matched: {' '.join(result.matched_notes)}")
    if result.missed_notes:
        console.print(f"  [yellow]Missed: {' '.join(result.missed_notes)}[/yellow]")


def _show_tracks_table(processed: ProcessedSong, analyzer: SongAnalyzer):
    """Display retained and excluded tracks."""
    table = Table(title="Tracks")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Family")
    table.add_column("Notes", style="yellow")
    table.add_column("Melody score", style="magenta")
    table.add_column("Role", style="blue")

    for track, score in zip(processed.tracks, analyzer.melody_selector.scores(processed.tracks)):
        table.add_row(
            str(track.id),
            track.name,
            track.instrument_family,
            str(track.note_count),
            f"{score:.1f}",
            track.role.value,
        )
    for track in processed.excluded:
        table.add_row(
            str(track.id),
            f"[dim]{track.name}[/dim]",
            track.instrument_family,
            str(track.note_count),
            "-",
            track.role.value,
        )

    console.print(table)


def _show_candidates_table(candidates):
    """Display the top ranked candidates."""
    table = Table(title="Top Candidates")
    table.add_column("Scale", style="cyan")
    table.add_column("Transpose", style="yellow")
    table.add_column("Coverage", style="green")
    table.add_column("Score", style="magenta")
    table.add_column("Raw", style="magenta")
    table.add_column("Notes")

    for c in candidates:
        table.add_row(
            c.scale_name,
            f"{c.transposition:+d}",
            f"{c.coverage:.0%}",
            f"{c.score:.1f}",
            f"{c.raw_score:.1f}",
            str(c.note_count),
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
