"""CLI for constrained image resizing.

Commands:
  - resize: Resize images (file or directory) with fit/scale modes
  - layout: Print the computed layout for a source size without touching files
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from config import CONFIG
from src.lightresize.box_math import Size
from src.lightresize.errors import LightResizeError
from src.lightresize.instructions import Instructions
from src.lightresize.io_utils import iter_image_paths
from src.lightresize.layout import layout
from src.lightresize.modes import FitMode, OutputFormat, ScaleMode
from src.lightresize.options import JobOptions
from src.lightresize.resize_job import ResizeJob


FORMAT_SUFFIXES = {OutputFormat.JPEG: ".jpg", OutputFormat.PNG: ".png"}
SUFFIX_FORMATS = {".jpg": OutputFormat.JPEG, ".jpeg": OutputFormat.JPEG, ".png": OutputFormat.PNG}


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else CONFIG.behavior.log_level)


def _resolve_shape(shape: str) -> tuple[int, int]:
    if shape not in CONFIG.accepted_shapes:
        choices = ", ".join(CONFIG.accepted_shapes.keys())
        raise click.BadParameter(f"Unknown shape '{shape}'. Choose from: {choices}")
    return CONFIG.accepted_shapes[shape]


def _instructions(
    width: Optional[int],
    height: Optional[int],
    shape: Optional[str],
    mode: str,
    scale: str,
    output_format: str,
    quality: int,
    background: Optional[str],
    ignore_icc: bool,
) -> Instructions:
    if shape:
        width, height = _resolve_shape(shape)
    try:
        return Instructions(
            width=width,
            height=height,
            mode=mode,
            scale=scale,
            format=output_format,
            jpeg_quality=quality,
            background_color=background,
            ignore_icc=ignore_icc,
        )
    except LightResizeError as e:
        raise click.BadParameter(str(e)) from e


def _in_place_instructions(
    src: Path, instructions: Instructions, output_format: Optional[str]
) -> Instructions:
    file_format = SUFFIX_FORMATS.get(src.suffix.lower())
    if file_format is None:
        raise click.BadParameter(
            f"{src.name} cannot be rewritten in place; only JPEG and PNG are written",
            param_hint="--in-place",
        )
    if output_format is not None and instructions.format is not file_format:
        raise click.BadParameter(
            f"{src.name} would get {instructions.format.value} data under a "
            f"{src.suffix} name",
            param_hint="--format",
        )
    return replace(instructions, format=file_format)


def _sizing_options(func):
    options = [
        click.option("--width", type=int, default=None),
        click.option("--height", type=int, default=None),
        click.option("--shape", type=str, default=None, help="Size preset, e.g. 1:1, 16:9, thumb"),
        click.option(
            "--mode",
            type=click.Choice([m.value for m in FitMode], case_sensitive=False),
            default=FitMode.MAX.value,
        ),
        click.option(
            "--scale",
            type=click.Choice([s.value for s in ScaleMode], case_sensitive=False),
            default=ScaleMode.DOWNSCALE_ONLY.value,
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
def cli() -> None:
    """Constrained image resizing toolkit."""


@cli.command(name="resize")
@click.option(
    "--input-path",
    type=click.Path(path_type=Path, exists=True),
    required=True,
    help="Image file or directory",
)
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Output directory (required unless --in-place)",
)
@click.option("--in-place", is_flag=True, default=False, help="Overwrite source files")
@_sizing_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["jpeg", "jpg", "png"], case_sensitive=False),
    default=None,
    help="Output encoding; in-place runs keep each file's own format",
)
@click.option("--quality", type=int, default=CONFIG.defaults.jpeg_quality)
@click.option("--background", type=str, default=CONFIG.defaults.background_color)
@click.option("--ignore-icc/--apply-icc", default=False)
@click.option("--create-dirs/--no-create-dirs", default=CONFIG.behavior.create_parent_directory)
@click.option("--overwrite/--no-overwrite", default=CONFIG.behavior.overwrite)
@click.option("--verbose", is_flag=True, default=False)
def cmd_resize(
    input_path: Path,
    output_dir: Optional[Path],
    in_place: bool,
    width: Optional[int],
    height: Optional[int],
    shape: Optional[str],
    mode: str,
    scale: str,
    output_format: Optional[str],
    quality: int,
    background: Optional[str],
    ignore_icc: bool,
    create_dirs: bool,
    overwrite: bool,
    verbose: bool,
) -> None:
    """Resize images according to width/height, fit mode and scale mode."""

    _configure_logging(verbose)
    if output_dir is None and not in_place:
        raise click.UsageError("Pass --output-dir or --in-place")
    if output_dir is not None and in_place:
        raise click.UsageError("--output-dir and --in-place are mutually exclusive")

    instructions = _instructions(
        width,
        height,
        shape,
        mode,
        scale,
        output_format or CONFIG.defaults.output_format,
        quality,
        background,
        ignore_icc,
    )
    options = JobOptions(create_parent_directory=create_dirs)
    job = ResizeJob(resample=CONFIG.defaults.resample)

    paths = list(iter_image_paths(input_path))
    if in_place:
        # Each file is rewritten under its own name, so it keeps its own encoding
        plan = [
            (src, src, _in_place_instructions(src, instructions, output_format))
            for src in paths
        ]
    else:
        plan = []
        for src in paths:
            rel = src.relative_to(input_path) if input_path.is_dir() else Path(src.name)
            dest = (output_dir / rel).with_suffix(FORMAT_SUFFIXES[instructions.format])
            if dest.exists() and not overwrite:
                logger.info("Skipping existing {}", dest)
                continue
            plan.append((src, dest, instructions))

    for src, dest, file_instructions in plan:
        result = job.build(src, dest, options, file_instructions)
        logger.info(
            "{} -> {} ({}x{})",
            src,
            dest,
            result.layout.canvas_size.width,
            result.layout.canvas_size.height,
        )


@cli.command(name="layout")
@click.option("--source-width", type=int, required=True)
@click.option("--source-height", type=int, required=True)
@_sizing_options
def cmd_layout(
    source_width: int,
    source_height: int,
    width: Optional[int],
    height: Optional[int],
    shape: Optional[str],
    mode: str,
    scale: str,
) -> None:
    """Print copy rectangle, target rectangle and canvas size."""

    if source_width < 1 or source_height < 1:
        raise click.BadParameter("Source dimensions must be positive")
    instructions = _instructions(
        width, height, shape, mode, scale, CONFIG.defaults.output_format,
        CONFIG.defaults.jpeg_quality, None, False,
    )
    result = layout(Size(source_width, source_height), instructions)
    copy, target = result.copy_rect, result.target_rect
    click.echo(f"copy:   {copy.x:g},{copy.y:g} {copy.width:g}x{copy.height:g}")
    click.echo(f"target: {target.x:g},{target.y:g} {target.width:g}x{target.height:g}")
    click.echo(f"canvas: {result.canvas_size.width}x{result.canvas_size.height}")


if __name__ == "__main__":
    cli()
