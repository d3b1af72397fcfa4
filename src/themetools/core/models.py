"""
Theme data types.

A theme arrives as a JSON definition (shadcn/tweakcn registry format) and is
projected into three textual artefacts: a CSS file, one app.css import line,
and one registry entry. ``ThemeRecord`` is the registry projection; it is
never persisted as an object.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SECTIONS = ("theme", "light", "dark")

DEFAULT_FONT = "System Sans"
DEFAULT_DESCRIPTION = "Imported from a shadcn theme registry."

# Registry fallbacks when the light section lacks a palette colour
DEFAULT_PRIMARY = "oklch(0.5 0.2 250)"
DEFAULT_SECONDARY = "oklch(0.9 0.05 250)"
DEFAULT_ACCENT = "oklch(0.9 0.05 250)"


def _stringify_values(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items() if v is not None}
    return value


class ThemeVariableMap(BaseModel):
    """CSS custom properties grouped by section (common, light, dark).

    Keys carry no leading ``--``; values are raw CSS and pass through verbatim.
    """

    model_config = ConfigDict(extra="ignore")

    theme: dict[str, str] = Field(default_factory=dict)
    light: dict[str, str] = Field(default_factory=dict)
    dark: dict[str, str] = Field(default_factory=dict)

    @field_validator("theme", "light", "dark", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        if value is None:
            return {}
        return _stringify_values(value)

    def section(self, name: str) -> dict[str, str]:
        """Return one section by name; unknown names are empty."""
        if name not in SECTIONS:
            return {}
        result: dict[str, str] = getattr(self, name)
        return result

    def is_empty(self) -> bool:
        return not (self.theme or self.light or self.dark)


class ThemeDefinition(BaseModel):
    """A remote or local theme definition."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = None
    css_vars: ThemeVariableMap = Field(alias="cssVars")
    css: dict[str, dict[str, dict[str, str]]] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _name_to_str(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("css", mode="before")
    @classmethod
    def _coerce_css(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return {}
        return {
            str(layer): {
                str(selector): _stringify_values(props)
                for selector, props in rules.items()
                if isinstance(props, dict)
            }
            for layer, rules in value.items()
            if isinstance(rules, dict)
        }


class ThemeColors(BaseModel):
    """Palette preview shown by the switcher UI."""

    primary: str = DEFAULT_PRIMARY
    secondary: str = DEFAULT_SECONDARY
    accent: str = DEFAULT_ACCENT


class ThemeRecord(BaseModel):
    """Registry entry describing a theme for the application UI."""

    id: str
    name: str
    description: str = DEFAULT_DESCRIPTION
    font: str = DEFAULT_FONT
    colors: ThemeColors = Field(default_factory=ThemeColors)


def primary_font_name(value: str) -> str:
    """First family of a CSS font stack, unquoted."""
    first = value.split(",")[0].strip()
    return first.strip("'\"").strip()


def build_record(
    theme_id: str,
    display_name: str,
    css_vars: ThemeVariableMap,
    description: str | None = None,
) -> ThemeRecord:
    """
    Project a variable map onto a registry record.

    The font comes from ``font-sans`` in the common section, then light.
    Palette colours come from the light section.
    """
    font = DEFAULT_FONT
    for section in ("theme", "light"):
        value = css_vars.section(section).get("font-sans")
        if value:
            font = primary_font_name(value) or DEFAULT_FONT
            break

    light = css_vars.light
    colors = ThemeColors(
        primary=light.get("primary", DEFAULT_PRIMARY),
        secondary=light.get("secondary", DEFAULT_SECONDARY),
        accent=light.get("accent", DEFAULT_ACCENT),
    )

    return ThemeRecord(
        id=theme_id,
        name=display_name,
        description=description or DEFAULT_DESCRIPTION,
        font=font,
        colors=colors,
    )
