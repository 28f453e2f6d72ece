"""Configuration system for LUT export."""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import List

from export.variants import COLOR_SPACES, PREVIEW_GAMMAS, VARIANT_IDS, ColorSpace, PreviewGamma

from .constants import DEFAULT_LUT_SIZE, LUT_SIZES


class ConfigValidationError(ValueError):
    """Raised when config validation fails."""

    pass


@dataclass
class ExportConfig:
    """Configuration for a LUT export session."""

    size: int = DEFAULT_LUT_SIZE
    color_space: ColorSpace = "rec709"
    clamp: bool = True
    preview_gamma: PreviewGamma = "srgb"
    variants: List[str] = field(default_factory=lambda: ["rec709_clean"])

    def validate(self) -> None:
        errors = []

        if not isinstance(self.size, int) or isinstance(self.size, bool):
            errors.append(f"size must be an integer, got {type(self.size).__name__}")
        elif self.size not in LUT_SIZES:
            errors.append(f"size must be one of {LUT_SIZES}, got {self.size}")

        if self.color_space not in COLOR_SPACES:
            errors.append(
                f"color_space must be one of {COLOR_SPACES}, got '{self.color_space}'"
            )

        if not isinstance(self.clamp, bool):
            errors.append(f"clamp must be a boolean, got {type(self.clamp).__name__}")

        if self.preview_gamma not in PREVIEW_GAMMAS:
            errors.append(
                f"preview_gamma must be one of {PREVIEW_GAMMAS}, got '{self.preview_gamma}'"
            )

        if not isinstance(self.variants, list):
            errors.append(f"variants must be a list, got {type(self.variants).__name__}")
        elif not self.variants:
            errors.append("variants must name at least one export variant")
        else:
            for variant_id in self.variants:
                if variant_id not in VARIANT_IDS:
                    errors.append(
                        f"variants entry must be one of {VARIANT_IDS}, got '{variant_id}'"
                    )

        if errors:
            raise ConfigValidationError("Config validation failed:\n  - " + "\n  - ".join(errors))

    @classmethod
    def from_dict(cls, data: dict) -> "ExportConfig":
        valid_fields = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**kwargs)

    @classmethod
    def from_json(cls, file_path: str | Path, validate: bool = True) -> "ExportConfig":
        with open(file_path, "r") as f:
            data = json.load(f)
        config = cls.from_dict(data)
        if validate:
            config.validate()
        return config

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self, file_path: str | Path) -> None:
        with open(file_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(config_path: str | Path, validate: bool = True) -> ExportConfig:
    return ExportConfig.from_json(config_path, validate=validate)
