import asyncio
import functools
import random
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click

from .config import get_settings
from .exceptions import RestitchError
from .models import ClipRole, Sequence

# Lazy load rich to improve startup time
_console = None


def get_console():
    global _console
    if _console is None:
        from rich.console import Console
        _console = Console()
    return _console


ROLE_STYLES = {
    ClipRole.HOOK: "red",
    ClipRole.SELLING_POINT: "green",
    ClipRole.CTA: "magenta",
}


def handle_errors(func):
    """Turn RestitchError into a red message and exit status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RestitchError as e:
            get_console().print(f"[bold red]Error:[/] {e}")
            sys.exit(1)
    return wrapper


def parse_role_overrides(values: Tuple[str, ...]) -> Dict[str, ClipRole]:
    overrides = {}
    for value in values:
        name, sep, role = value.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=ROLE, got {value!r}", param_hint="--role")
        try:
            overrides[name] = ClipRole.parse(role)
        except ValueError:
            raise click.BadParameter(f"unknown role {role!r}", param_hint="--role")
    return overrides


def load_clips(directory: Path, roles: Dict[str, ClipRole]):
    from .ingest import ClipIngestor
    from .registry import ClipRegistry

    registry = ClipRegistry()
    asyncio.run(ClipIngestor(registry).ingest_directory(directory, roles=roles))
    return registry


def build_sequences(registry, seed: Optional[int]) -> List[Sequence]:
    from .sequence_generator import generate_sequences

    rng = random.Random(seed) if seed is not None else None
    return generate_sequences(registry.clips(), rng=rng)


def print_sequences(sequences: List[Sequence]) -> None:
    console = get_console()
    from rich.table import Table

    table = Table(title=f"{len(sequences)} Sequences")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Duration", justify="right")
    table.add_column("Clips")

    for index, sequence in enumerate(sequences, start=1):
        chain = " → ".join(
            f"[{ROLE_STYLES[c.role]}]{c.name}[/]" for c in sequence.clips
        )
        table.add_row(str(index), f"{sequence.duration:.1f}s", chain)

    console.print(table)


directory_argument = click.argument(
    "directory", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
role_option = click.option(
    "--role", "roles", multiple=True, metavar="NAME=ROLE",
    help="Override the detected role of a clip (hook, selling-point, cta)",
)
seed_option = click.option("--seed", type=int, default=None, help="Seed for reproducible sequences")


@click.group()
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write debug logs to this file")
def cli(log_file: Optional[Path]):
    """Restitch - build hook / selling-point / CTA ad variations from clips"""
    if log_file:
        from .logger import configure_file_logging
        configure_file_logging(log_file)


@cli.command()
@directory_argument
@role_option
@handle_errors
def clips(directory: Path, roles: Tuple[str, ...]):
    """List the clips found in DIRECTORY with their roles."""
    console = get_console()
    from rich.table import Table

    registry = load_clips(directory, parse_role_overrides(roles))

    table = Table(title="Clips")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Role")
    table.add_column("Duration", justify="right")
    for clip in registry:
        table.add_row(clip.name, f"[{ROLE_STYLES[clip.role]}]{clip.role.value}[/]", f"{clip.duration:.1f}s")
    console.print(table)


@cli.command()
@directory_argument
@role_option
@seed_option
@handle_errors
def generate(directory: Path, roles: Tuple[str, ...], seed: Optional[int]):
    """Generate unique sequences from the clips in DIRECTORY."""
    registry = load_clips(directory, parse_role_overrides(roles))
    sequences = build_sequences(registry, seed)
    print_sequences(sequences)


@cli.command()
@directory_argument
@role_option
@seed_option
@click.option("--sequence", "sequence_number", type=int, default=None,
              help="Export only this sequence (1-based) instead of the whole archive")
@click.option("--out", "out_path", type=click.Path(path_type=Path), default=None,
              help="Output file (archive) or directory (single sequence)")
@handle_errors
def export(directory: Path, roles: Tuple[str, ...], seed: Optional[int],
           sequence_number: Optional[int], out_path: Optional[Path]):
    """Generate sequences from DIRECTORY and stitch them into videos."""
    from .exporter import SequenceExporter

    console = get_console()
    settings = get_settings()

    registry = load_clips(directory, parse_role_overrides(roles))
    sequences = build_sequences(registry, seed)
    print_sequences(sequences)

    exporter = SequenceExporter()
    if sequence_number is not None:
        if not 1 <= sequence_number <= len(sequences):
            raise click.BadParameter(
                f"must be between 1 and {len(sequences)}", param_hint="--sequence"
            )
        target_dir = out_path or settings.paths.output_dir
        written = asyncio.run(exporter.export_one_to(sequences[sequence_number - 1], target_dir))
    else:
        target = out_path or settings.paths.output_dir / settings.export.archive_name
        written = asyncio.run(exporter.export_all_to(sequences, target))

    console.print(f"\n✅ Wrote [bold green]{written}[/]")


def main():
    cli()


if __name__ == "__main__":
    main()
