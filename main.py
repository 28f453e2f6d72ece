"""
Preset to LUT conversion script.

Converts Camera Raw / Lightroom XMP presets into 3D .cube LUTs for video and
photo tools, with one file per export variant (Rec.709 or log input).

Using the `preview` command, this script renders a preset onto an image, and
`apply` runs an exported .cube file over an image to check the result.
"""

import json
import logging
from pathlib import Path
from typing import List, Literal, Optional

import torch
import typer
from tqdm import tqdm
from typing_extensions import Annotated

from export import (
    EXPORT_VARIANTS,
    before_after,
    export_variants,
    iter_preview_rows,
)
from presets import ColorSettings, PresetParseError, load_preset
from utils import (
    apply_lut,
    load_image_as_tensor,
    read_cube_file,
    save_tensor_as_image,
)
from utils.config import ConfigValidationError, ExportConfig, load_config

PreviewModeOption = Literal["after", "before", "split"]

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",  # Simple format for CLI output
)
logger = logging.getLogger(__name__)

app = typer.Typer()


def _load_preset_or_exit(preset: str) -> tuple[str, ColorSettings]:
    if not Path(preset).exists():
        raise FileNotFoundError(f"Preset file not found: {preset}")
    try:
        return load_preset(preset)
    except PresetParseError as e:
        logger.error(str(e))
        raise typer.Exit(1)


def _resolve_export_config(config_path: Optional[str], **overrides) -> ExportConfig:
    """Start from the config file (or defaults) and let explicit options win."""
    config = load_config(config_path, validate=False) if config_path else ExportConfig()
    for name, value in overrides.items():
        if value is None or value == []:
            continue
        setattr(config, name, list(value) if name == "variants" else value)
    config.validate()
    return config


def format_settings_report(name: str, settings: ColorSettings) -> str:
    """Group the non-default fields of a preset by panel for display."""
    changed = settings.changed_fields()
    if not changed:
        return f"{name}: all settings at defaults"

    sections: dict[str, list[str]] = {}
    for path, value in changed.items():
        section, _, field = path.rpartition(".")
        label = section.replace(".", " / ") if section else "basic"
        if isinstance(value, list):
            shown = " ".join(f"({x:g},{y:g})" for x, y in value)
        elif isinstance(value, bool):
            shown = "yes" if value else "no"
        else:
            shown = f"{value:+g}"
        sections.setdefault(label, []).append(f"  {field:<22} {shown}")

    lines = [f"{name}: {len(changed)} adjusted setting(s)"]
    for label, rows in sections.items():
        lines.append(f"[{label}]")
        lines.extend(rows)
    return "\n".join(lines)


@app.command()
def export(
    preset: Annotated[str, typer.Argument(help="XMP preset file to convert.")],
    output_dir: Annotated[
        str, typer.Option(help="Folder the .cube files are written to.")
    ] = ".",
    size: Annotated[
        Optional[int], typer.Option(help="Grid points per axis: 17, 25, 33 or 65.")
    ] = None,
    variant: Annotated[
        Optional[List[str]],
        typer.Option(
            help="Export variant id (repeatable): "
            + ", ".join(v.id for v in EXPORT_VARIANTS)
        ),
    ] = None,
    no_clamp: Annotated[
        bool, typer.Option("--no-clamp", help="Leave output values unclamped.")
    ] = False,
    config: Annotated[
        Optional[str], typer.Option(help="JSON export config; options override it.")
    ] = None,
) -> None:
    """
    Convert an XMP preset into one .cube LUT per export variant.

    Files are named {preset}_{N}x{N}x{N}_{variant}.cube.
    """
    try:
        export_config = _resolve_export_config(
            config,
            size=size,
            variants=variant,
            clamp=False if no_clamp else None,
        )
    except ConfigValidationError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    name, settings = _load_preset_or_exit(preset)
    logger.info(
        f"Loaded preset: {name} ({len(settings.changed_fields())} adjusted settings)"
    )

    written = export_variants(
        name,
        settings,
        export_config.variants,
        export_config.size,
        output_dir,
        clamp=export_config.clamp,
        show_progress=len(export_config.variants) > 1,
    )
    logger.info(f"Exported {len(written)} LUT file(s)")


@app.command()
def preview(
    preset: str,
    image: str,
    output_path: str = "preview.png",
    preview_gamma: Annotated[
        Optional[str], typer.Option(help="Working encoding: linear, srgb or rec709")
    ] = None,
    color_space: Annotated[
        Optional[str],
        typer.Option(help="Source encoding: rec709, log_slog3, log_vlog or log_logc"),
    ] = None,
    mode: Annotated[
        PreviewModeOption, typer.Option(help="after, before, or split (side by side)")
    ] = "split",
    rows_per_batch: int = 64,
    config: Annotated[
        Optional[str], typer.Option(help="JSON export config; options override it.")
    ] = None,
) -> None:
    """
    Render a preset onto an image for a before/after comparison.
    """
    if not Path(image).exists():
        raise FileNotFoundError(f"Image file not found: {image}")

    try:
        preview_config = _resolve_export_config(
            config, preview_gamma=preview_gamma, color_space=color_space
        )
    except ConfigValidationError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    name, settings = _load_preset_or_exit(preset)
    image_tensor = load_image_as_tensor(image)
    height = image_tensor.shape[1]

    rendered = torch.empty_like(image_tensor)
    with tqdm(total=height, desc=f"Rendering {name}", unit="row") as pbar:
        for row_start, rows in iter_preview_rows(
            image_tensor,
            settings,
            preview_config.preview_gamma,
            rows_per_batch,
            preview_config.color_space,
        ):
            rendered[:, row_start : row_start + rows.shape[1]] = rows
            pbar.update(rows.shape[1])

    save_tensor_as_image(before_after(image_tensor, rendered, mode), output_path)
    logger.info(f"Preview saved to {output_path}")


@app.command()
def inspect(
    preset: str,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the full settings as JSON.")
    ] = False,
) -> None:
    """
    Show which settings a preset changes.
    """
    name, settings = _load_preset_or_exit(preset)
    if as_json:
        typer.echo(json.dumps(settings.to_dict(), indent=2))
    else:
        typer.echo(format_settings_report(name, settings))


@app.command()
def apply(
    cube_path: str,
    image: str,
    output_path: str = "output.png",
) -> None:
    """
    Apply an exported .cube LUT to an image.
    """
    if not Path(cube_path).exists():
        raise FileNotFoundError(f"LUT file not found: {cube_path}")
    if not Path(image).exists():
        raise FileNotFoundError(f"Image file not found: {image}")

    lut, domain_min, domain_max = read_cube_file(cube_path)
    image_tensor = load_image_as_tensor(image)

    with torch.no_grad():
        image_tensor = apply_lut(image_tensor, lut, domain_min, domain_max)

    save_tensor_as_image(image_tensor, output_path)
    logger.info(f"Saved {output_path}")


if __name__ == "__main__":
    app()
