"""Layout configuration and process settings."""

import math
from dataclasses import dataclass, fields, replace
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from herold.models import ProjectSettings


class Settings(BaseSettings):
    app_name: str = "herold"

    # Generic environment (local/production)
    app_env: str = "local"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    model_config = SettingsConfigDict(env_prefix="HEROLD_", env_file=".env", extra="ignore")


settings = Settings()


class ConfigurationError(ValueError):
    """A layout option, preset or orientation that cannot be resolved."""


@dataclass(frozen=True)
class LayoutConfig:
    # Spacing
    generation_spacing: float = 80  # vertical distance between generation bands
    person_spacing: float = 120  # horizontal gap between unrelated neighbours
    marriage_spacing: float = 40  # horizontal gap between partners

    # Text
    font_size: float = 16
    font_family: str = "Dancing Script"
    font_fallbacks: tuple[str, ...] = ("Lucida Handwriting", "Apple Chancery", "cursive", "serif")
    title_size: float = 32
    subtitle_size: float = 18
    glyph_width: float = 8  # average glyph width at reference_font_size
    reference_font_size: float = 16

    # Canvas
    margin_top: float = 100
    margin_bottom: float = 50
    margin_left: float = 50
    margin_right: float = 50
    title_height: float = 90
    min_width: float = 595  # A4 portrait at 72 dpi
    min_height: float = 842

    # Lines
    line_color: str = "#8b7355"
    line_width: float = 1
    connector_offset: float = 10  # gap between a label baseline and its connector

    def __post_init__(self):
        for name in ("generation_spacing", "person_spacing", "marriage_spacing", "font_size", "glyph_width"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value!r}")


# Multipliers over the default (generation, person, marriage) spacing
SPACING_PRESETS: dict[str, tuple[float, float, float]] = {
    "tight": (0.75, 2 / 3, 0.75),
    "comfortable": (1.0, 1.0, 1.0),
    "spacious": (1.25, 1.25, 1.25),
}

# Multipliers over (generation, person) spacing
ORIENTATION_FACTORS: dict[str, tuple[float, float]] = {
    "portrait": (1.0, 1.0),
    "landscape": (0.8, 1.2),
}

THUMBNAIL_OVERRIDES: dict[str, Any] = {
    "font_size": 12,
    "generation_spacing": 60,
    "person_spacing": 80,
    "margin_top": 60,
    "margin_bottom": 30,
    "title_height": 50,
}

_FIELD_NAMES = frozenset(f.name for f in fields(LayoutConfig))


def apply_spacing_preset(config: LayoutConfig, preset: str) -> LayoutConfig:
    """Scale the spacing of `config` by the named preset's multipliers."""
    if preset not in SPACING_PRESETS:
        raise ConfigurationError(f"Unknown spacing preset: {preset!r}")
    gen_factor, person_factor, marriage_factor = SPACING_PRESETS[preset]
    return replace(
        config,
        generation_spacing=round(config.generation_spacing * gen_factor, 2),
        person_spacing=round(config.person_spacing * person_factor, 2),
        marriage_spacing=round(config.marriage_spacing * marriage_factor, 2),
    )


def apply_orientation(config: LayoutConfig, orientation: str) -> LayoutConfig:
    """Adjust generation and person spacing for the page orientation."""
    if orientation not in ORIENTATION_FACTORS:
        raise ConfigurationError(f"Unknown orientation: {orientation!r}")
    if orientation == "portrait":
        return config
    gen_factor, person_factor = ORIENTATION_FACTORS[orientation]
    return replace(
        config,
        generation_spacing=math.floor(round(config.generation_spacing * gen_factor, 6)),
        person_spacing=math.floor(round(config.person_spacing * person_factor, 6)),
    )


def check_project_settings(project_settings: ProjectSettings) -> list[str]:
    """List the project settings that resolve_layout_config would reject."""
    errors = []
    spacing = project_settings.layout.spacing
    if spacing not in SPACING_PRESETS:
        errors.append(
            f"Unknown spacing preset {spacing!r} in project settings "
            f"(expected one of: {', '.join(SPACING_PRESETS)})"
        )
    orientation = project_settings.orientation
    if orientation not in ORIENTATION_FACTORS:
        errors.append(
            f"Unknown orientation {orientation!r} in project settings "
            f"(expected one of: {', '.join(ORIENTATION_FACTORS)})"
        )
    names_size = project_settings.font.names_size
    if isinstance(names_size, bool) or not isinstance(names_size, (int, float)) or not names_size > 0:
        errors.append(f"Name font size must be positive, got {names_size!r}")
    return errors


def resolve_layout_config(
    project_settings: ProjectSettings | None = None,
    overrides: dict[str, Any] | None = None,
) -> LayoutConfig:
    """
    Build the effective layout configuration for one render.

    Layers, later ones winning:
    1) Built-in defaults
    2) Project font/theme, spacing preset, then orientation adjustment
    3) One-off caller overrides (taken as-is, not rescaled)

    Raises:
        ConfigurationError: on an unknown override key, preset or orientation, or if
            the result has a non-positive spacing, font size or glyph width.
    """
    config = LayoutConfig()

    if project_settings is not None:
        config = replace(
            config,
            font_size=project_settings.font.names_size,
            font_family=project_settings.font.family,
            font_fallbacks=tuple(project_settings.font.fallbacks),
            title_size=project_settings.font.title_size,
            line_color=project_settings.theme.lines,
        )
        config = apply_spacing_preset(config, project_settings.layout.spacing)
        config = apply_orientation(config, project_settings.orientation)

    if overrides:
        unknown = sorted(set(overrides) - _FIELD_NAMES)
        if unknown:
            raise ConfigurationError(f"Unknown layout option(s): {', '.join(unknown)}")
        values = dict(overrides)
        if "font_fallbacks" in values:
            values["font_fallbacks"] = tuple(values["font_fallbacks"])
        config = replace(config, **values)

    return config
