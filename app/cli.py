from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.excalidraw.repository import FileSystemExcalidrawRepository
from adapters.excalidraw.scene import elements_from_scene, relayout_scene
from adapters.excalidraw.url_encoder import build_excalidraw_url
from app.config import AppSettings, load_settings
from app.layout_wiring import build_layout_engine
from domain.models import LayoutReport

app = typer.Typer(no_args_is_help=True)
console = Console(soft_wrap=True)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every layout pass."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    try:
        ctx.obj = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc


def _settings(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    return settings if isinstance(settings, AppSettings) else load_settings()


def _describe(report: LayoutReport) -> str:
    parts = [
        f"{len(report.container_shifts)} resized",
        f"{len(report.widened_label_ids)} labels widened",
        f"{len(report.normalized_connector_ids)} connectors normalized",
    ]
    if report.collision:
        parts.append(f"{report.collision.element_id} lifted {report.collision.depth:g}px")
    return ", ".join(parts)


@app.command("relayout")
def relayout(
    ctx: typer.Context,
    input_dir: Optional[Path] = typer.Option(
        None, help="Directory with .excalidraw/.json scenes (defaults to io.input_dir).",
    ),
    output_dir: Optional[Path] = typer.Option(
        None, help="Directory to write corrected scenes (defaults to io.output_dir).",
    ),
) -> None:
    settings = _settings(ctx)
    source_dir = input_dir or settings.io.input_dir
    target_dir = output_dir or settings.io.output_dir
    repo = FileSystemExcalidrawRepository()
    engine = build_layout_engine(settings)

    if not source_dir.is_dir():
        console.print(f"[red]Directory not found:[/] {source_dir}")
        raise typer.Exit(code=1)
    try:
        pairs = repo.load_all_with_paths(source_dir)
    except ValueError as exc:
        console.print(f"[red]Invalid scene:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if not pairs:
        console.print(f"[yellow]No Excalidraw files found in {source_dir}[/]")
        raise typer.Exit(code=0)

    target_dir.mkdir(parents=True, exist_ok=True)
    for path, document in pairs:
        corrected, report = relayout_scene(document, engine)
        target_path = target_dir / f"{path.stem}.excalidraw"
        repo.save(corrected, target_path)
        console.print(f"[green]Wrote[/] {target_path} ({_describe(report)})")


@app.command("fix")
def fix(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Excalidraw scene to correct."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Where to write the result (defaults to overwriting input).",
    ),
    url: bool = typer.Option(False, "--url", help="Print an excalidraw.com link to the result."),
) -> None:
    settings = _settings(ctx)
    repo = FileSystemExcalidrawRepository()
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        document = repo.load_by_path(input_path)
    except ValueError as exc:
        console.print(f"[red]Invalid scene:[/] {exc}")
        raise typer.Exit(code=1) from exc

    corrected, report = relayout_scene(document, build_layout_engine(settings))
    target_path = output or input_path
    repo.save(corrected, target_path)
    console.print(f"[green]Wrote[/] {target_path} ({_describe(report)})")

    if url:
        try:
            link = build_excalidraw_url(
                settings.io.excalidraw_base_url,
                corrected.to_dict(),
                settings.io.excalidraw_max_url_length,
            )
        except ValueError as exc:
            console.print(f"[yellow]{exc}[/]")
            raise typer.Exit(code=1) from exc
        console.print(link)


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Excalidraw scene to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        document = FileSystemExcalidrawRepository().load_by_path(input_path)
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    elements = elements_from_scene(document.elements)
    counts = Counter(element.kind.value for element in elements)
    skipped = len(document.elements) - len(elements)
    summary = ", ".join(f"{counts[kind]} {kind}s" for kind in ("container", "label", "connector"))
    console.print(f"[green]Valid Excalidraw scene:[/] {input_path} ({summary}, {skipped} untouched)")


if __name__ == "__main__":
    app()
