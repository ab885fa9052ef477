from __future__ import annotations

from pathlib import Path
from typing import Optional
import json
import logging
import tempfile

import typer

from . import config
from .export import ExportMode
from .form import NotesTooLongError, apply_field_change, compute_duration, image_file_to_data_url, load_record_file
from .layout.blocks import BlockTooTallError
from .layout.render_preview import render_previews
from .layout.run import generate_timesheet
from .models import TimesheetRecord, reset_engine
from .storage import load_form, load_preview_open, save_form, save_preview_open

app = typer.Typer(help="Interpreter timesheet PDF generator")


@app.callback()
def main(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if out:
        config.set_out_dir(out)
        reset_engine()


def _launch_share(filename: str, data: bytes) -> Path:
    path = Path(tempfile.mkdtemp(prefix="timesheet-share-")) / filename
    path.write_bytes(data)
    if typer.launch(str(path)) != 0:
        raise RuntimeError("no application available to share the file")
    return path


def _saved(ok: bool) -> None:
    if not ok:
        typer.echo(f"Could not save to {config.DB_PATH}", err=True)
        raise typer.Exit(code=1)


def _generate(record: TimesheetRecord, blank: bool, share: bool, logo: Optional[str], preview: Optional[bool]) -> None:
    show_preview = load_preview_open() if preview is None else preview
    try:
        result = generate_timesheet(
            record,
            blank=blank,
            mode=ExportMode.SHARE if share else ExportMode.DOWNLOAD,
            logo=logo,
            share=_launch_share if share else None,
            preview=show_preview,
        )
    except (NotesTooLongError, BlockTooTallError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{result.export.mode.value.upper()}: {result.path} ({result.page_count} page(s))")
    for path in result.previews:
        typer.echo(f"PREVIEW: {path}")


@app.command()
def generate(
    input_path: Optional[Path] = typer.Option(None, "--input", "-i", help="JSON record (defaults to the saved form)"),
    blank: bool = typer.Option(False, "--blank", help="Blank template"),
    share: bool = typer.Option(False, "--share", help="Share instead of saving"),
    logo: Optional[str] = typer.Option(None, "--logo", help="Logo path or URL"),
    preview: Optional[bool] = typer.Option(None, "--preview/--no-preview", help="Render PNG previews"),
) -> None:
    try:
        record = load_record_file(input_path) if input_path else load_form()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _generate(record, blank, share, logo, preview)


@app.command()
def template(
    logo: Optional[str] = typer.Option(None, "--logo", help="Logo path or URL"),
) -> None:
    _generate(load_form(), True, False, logo, False)


@app.command("set")
def set_field(field: str, value: str) -> None:
    try:
        record = apply_field_change(load_form(), field, value)
    except KeyError as exc:
        typer.echo(exc.args[0], err=True)
        raise typer.Exit(code=1)
    _saved(save_form(record))
    if record.estimated_duration:
        typer.echo(f"Duration: {record.estimated_duration}")


@app.command()
def sign(who: str, image: Path) -> None:
    if who not in ("customer", "interpreter"):
        typer.echo("WHO must be 'customer' or 'interpreter'", err=True)
        raise typer.Exit(code=1)
    try:
        data_url = image_file_to_data_url(image)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _saved(save_form(apply_field_change(load_form(), f"{who}_signature_image", data_url)))
    typer.echo(f"Attached {who} signature from {image}")


@app.command()
def show() -> None:
    typer.echo(json.dumps(load_form().to_dict(), indent=2))


@app.command()
def reset() -> None:
    _saved(save_form(TimesheetRecord()))
    typer.echo("Form cleared")


@app.command()
def duration(start: str, end: str) -> None:
    typer.echo(compute_duration(start, end))


@app.command()
def preview(
    pdf: Optional[Path] = typer.Argument(None, help="PDF to preview"),
    open_: Optional[bool] = typer.Option(None, "--open/--closed", help="Remember preview visibility"),
) -> None:
    if open_ is not None:
        _saved(save_preview_open(open_))
        typer.echo(f"Preview {'open' if open_ else 'closed'}")
    if pdf is None:
        return
    if not pdf.exists():
        typer.echo(f"PDF not found: {pdf}", err=True)
        raise typer.Exit(code=1)
    for path in render_previews(pdf):
        typer.echo(f"PREVIEW: {path}")


if __name__ == "__main__":
    app()
