#!/usr/bin/env python3
"""
Batch preset conversion script.
Converts every XMP preset in a folder into .cube LUTs, one per export variant.
"""

import sys
from pathlib import Path
from typing import List, Optional

import torch
import typer
from typing_extensions import Annotated

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from export import export_variants
from presets import PresetParseError, load_preset
from utils.config import ConfigValidationError, ExportConfig, load_config
from utils.image import save_tensor_as_image
from utils.io import load_image_as_tensor, read_cube_file
from utils.transforms import apply_lut

app = typer.Typer()


def find_presets(preset_folder: Path) -> List[Path]:
    """Collect .xmp files in a folder, sorted by name."""
    return sorted(
        path
        for path in preset_folder.iterdir()
        if path.is_file() and path.suffix.lower() == ".xmp"
    )


def apply_lut_to_test_image(
    lut_path: Path, test_image: Path, output_path: Path
) -> None:
    """Apply a written LUT to a test image and save the result."""
    try:
        lut, domain_min, domain_max = read_cube_file(str(lut_path))
        image = load_image_as_tensor(str(test_image))
        with torch.no_grad():
            result = apply_lut(image, lut, domain_min, domain_max)
        save_tensor_as_image(result, str(output_path))
        print(f"  Saved test image result: {output_path}")
    except (OSError, ValueError) as e:
        print(f"  WARNING: Failed to apply LUT to test image: {e}")


def convert_preset(
    preset_path: Path,
    export_config: ExportConfig,
    output_dir: Path,
    test_image: Optional[Path] = None,
    dry_run: bool = False,
) -> bool:
    """
    Convert a single preset. Returns True on success.

    Parse failures are reported and counted; they do not stop the batch.
    """
    try:
        name, settings = load_preset(preset_path)
    except (PresetParseError, OSError) as e:
        print(f"ERROR: {e}")
        return False

    adjusted = len(settings.changed_fields())
    if dry_run:
        print(f"[DRY RUN] Would export {name} ({adjusted} adjusted settings)")
        return True

    print(f"Converting: {name} ({adjusted} adjusted settings)")
    written = export_variants(
        name,
        settings,
        export_config.variants,
        export_config.size,
        output_dir,
        clamp=export_config.clamp,
    )
    for lut_path in written:
        print(f"  Wrote {lut_path.name}")
        if test_image is not None:
            apply_lut_to_test_image(
                lut_path, test_image, lut_path.with_suffix(".png")
            )
    return True


@app.command()
def main(
    preset_folder: Annotated[
        Path, typer.Option(help="Folder containing .xmp presets")
    ],
    output_dir: Annotated[
        Path, typer.Option(help="Directory to save generated LUTs")
    ] = Path("luts"),
    config: Annotated[
        Optional[str],
        typer.Option(help="Path to JSON export config"),
    ] = None,
    size: Annotated[
        Optional[int],
        typer.Option(help="Grid points per axis (overrides config)"),
    ] = None,
    variant: Annotated[
        Optional[List[str]],
        typer.Option(help="Export variant id, repeatable (overrides config)"),
    ] = None,
    test_image: Annotated[
        Optional[Path], typer.Option(help="Test image to apply each LUT to")
    ] = None,
    dry_run: Annotated[
        bool, typer.Option(help="List presets without writing files")
    ] = False,
):
    """
    Batch convert XMP presets into .cube LUTs.

    Examples:
      # Convert a folder with the default Rec.709 variant at 33^3
      python scripts/batch_export.py --preset-folder presets/ --output-dir luts/

      # All variants at 65^3
      python scripts/batch_export.py --preset-folder presets/ --size 65 \\
          --variant rec709_clean --variant log_input --variant wide_gamut
    """
    export_config = load_config(config, validate=False) if config else ExportConfig()
    if size is not None:
        export_config.size = size
    if variant:
        export_config.variants = list(variant)
    try:
        export_config.validate()
    except ConfigValidationError as e:
        print(f"ERROR: {e}")
        raise typer.Exit(1)

    if not preset_folder.is_dir():
        print(f"ERROR: Preset folder not found: {preset_folder}")
        raise typer.Exit(1)

    presets = find_presets(preset_folder)
    print(f"Found {len(presets)} preset(s) in {preset_folder}")
    print(f"  Size: {export_config.size}")
    print(f"  Variants: {', '.join(export_config.variants)}")
    print(f"  Clamp: {export_config.clamp}")

    if not dry_run:
        output_dir.mkdir(parents=True, exist_ok=True)

    successful = 0
    failed = 0

    for i, preset_path in enumerate(presets, 1):
        print(f"\n[{i}/{len(presets)}]")
        if convert_preset(preset_path, export_config, output_dir, test_image, dry_run):
            successful += 1
        else:
            failed += 1

    print(f"\n{'=' * 80}")
    print("BATCH EXPORT COMPLETE")
    print(f"{'=' * 80}")
    print(f"Successful: {successful}")
    print(f"Failed: {failed}")
    print(f"Output directory: {output_dir}")
    print(f"{'=' * 80}\n")


if __name__ == "__main__":
    app()
