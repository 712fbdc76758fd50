#!/usr/bin/env python3
"""
Main CLI for the Font Preview System
====================================

Load a directory of font files, list their metadata, render previews and
export loaded fonts.
"""

import logging
import sys
from pathlib import Path

import click
from PIL import Image

from fontpreview.core.config import PreviewConfig
from fontpreview.batch import IngestResult
from fontpreview.core.exceptions import FontPreviewError
from fontpreview.session import FontSession

# Setup logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _load_session(ctx: click.Context, directory: Path) -> tuple[FontSession, IngestResult]:
    """Create a session and load a directory, exiting on blocking failures."""
    session = ctx.with_resource(FontSession(ctx.obj["config"]))
    try:
        result = session.load_directory(directory)
    except FontPreviewError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return session, result


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to preview configuration YAML file",
)
@click.pass_context
def cli(ctx, verbose, config):
    """Font Preview System CLI."""
    preview_config = PreviewConfig.from_yaml(config) if config else PreviewConfig()
    logging.getLogger().setLevel(logging.DEBUG if verbose else preview_config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = preview_config


@cli.command(name="inspect")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def inspect_fonts(ctx, directory):
    """List the fonts of a directory with their metadata."""
    session, result = _load_session(ctx, directory)

    click.echo(f"Loaded {len(session.records)} fonts from {directory}")
    for record in session.records:
        details = dict(record.details())
        click.echo(
            f"  {record.id}  {record.display_name}  "
            f"weight={record.weight} style={record.style.value} "
            f"glyphs={details['Glyphs']} version={details['Version']} "
            f"file={record.source_file_name}"
        )

    if result.has_failures:
        click.echo(f"Failed to parse {len(result.failures)} files:")
        for name in result.failures:
            click.echo(f"  {name}")


@cli.command(name="preview")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--text", "-t", default=None, help="Preview text (defaults to the sample text)")
@click.option("--size", "-s", type=int, default=None, help="Pixel size")
@click.option("--font", "font_id", default=None, help="Primary font id (defaults to the first)")
@click.option("--compare", "compare_id", default=None, help="Comparison font id")
@click.option("--side-by-side", is_flag=True, help="Compare with the default comparison font")
@click.option("--compare-text", default=None, help="Comparison panel text (defaults to --text)")
@click.option("--compare-size", type=int, default=None, help="Comparison panel pixel size")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output PNG path",
)
@click.pass_context
def preview(
    ctx,
    directory,
    text,
    size,
    font_id,
    compare_id,
    side_by_side,
    compare_text,
    compare_size,
    output,
):
    """Render preview text with a font, optionally next to a comparison font."""
    session, _ = _load_session(ctx, directory)

    try:
        if font_id:
            session.get_record(font_id)
            session.select_primary(font_id)

        panels = [session.render(text=text, pixel_size=size)]

        if compare_id or side_by_side or compare_text or compare_size:
            session.enable_compare()
            if compare_id:
                session.get_record(compare_id)
                session.select_comparison(compare_id)
            comparison = session.selection.comparison
            panels.append(
                session.render(
                    text=compare_text or text,
                    record_id=comparison.id,
                    pixel_size=compare_size or size,
                )
            )

    except FontPreviewError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    image = _compose_side_by_side(panels, session.config.render.background_color)
    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(output, format="PNG")

    names = [session.selection.primary.display_name]
    if session.selection.comparison is not None:
        names.append(session.selection.comparison.display_name)
    click.echo(f"Saved preview of {' vs '.join(names)} to {output}")


@cli.command(name="export")
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("font_id")
@click.argument("destination", type=click.Path(path_type=Path))
@click.pass_context
def export_font(ctx, directory, font_id, destination):
    """Write a loaded font's original file to DESTINATION."""
    session, _ = _load_session(ctx, directory)
    try:
        written = session.export_font(font_id, destination)
    except FontPreviewError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Exported {font_id} to {written}")


def _compose_side_by_side(panels: list[Image.Image], background: str, gap: int = 24) -> Image.Image:
    """Place rendered panels next to each other."""
    width = sum(panel.width for panel in panels) + gap * (len(panels) - 1)
    height = max(panel.height for panel in panels)
    canvas = Image.new("RGB", (width, height), color=background)

    x = 0
    for panel in panels:
        canvas.paste(panel, (x, 0))
        x += panel.width + gap
    return canvas


if __name__ == "__main__":
    cli()
