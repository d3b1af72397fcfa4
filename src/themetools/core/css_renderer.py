"""
CSS generator for installed themes.

Generates class-scoped CSS custom properties from a theme's variable map,
with a light/base block and a ``.dark`` variant block.
"""

from __future__ import annotations

from .fonts import derive_font_imports
from .models import ThemeDefinition, ThemeVariableMap

# Keys that are emitted once (from the light section) when the common
# section defines them too
MERGE_SENSITIVE_KEYS = frozenset({"radius"})

LAYER_BASE = "@layer base"


def render_theme_css(definition: ThemeDefinition, theme_id: str) -> str:
    """
    Generate the full CSS file for a theme.

    Produces font imports (if any), the light and dark variable blocks and
    the scoped ``@layer base`` rules from the definition's ``css`` section.

    Args:
        definition: Validated theme definition
        theme_id: Slug used in the ``.theme-{id}`` selectors

    Returns:
        CSS file contents, newline-terminated
    """
    parts: list[str] = []

    imports = derive_font_imports(definition.css_vars)
    if imports:
        parts.append("\n".join(imports) + "\n")

    parts.append(render_variable_blocks(definition.css_vars, theme_id))

    layer = render_layer_base(definition.css, theme_id)
    if layer:
        parts.append(layer)

    return "\n".join(parts)


def render_variable_blocks(
    css_vars: ThemeVariableMap,
    theme_id: str,
    skip_empty: bool = False,
) -> str:
    """
    Render the light and dark rule blocks.

    Args:
        css_vars: Variable map with theme/light/dark sections
        theme_id: Slug used in selectors
        skip_empty: Return an empty string when there is nothing to declare

    Returns:
        Two rule blocks separated by a blank line
    """
    if skip_empty and css_vars.is_empty():
        return ""

    light_lines = _generate_declarations(merge_light_variables(css_vars))
    dark_lines = _generate_declarations(css_vars.dark)

    lines: list[str] = []
    lines.append(f":root.theme-{theme_id},")
    lines.append(f".theme-{theme_id} {{")
    lines.extend(light_lines)
    lines.append("}")
    lines.append("")
    lines.append(f":root.dark.theme-{theme_id},")
    lines.append(f".dark.theme-{theme_id} {{")
    lines.extend(dark_lines)
    lines.append("}")

    return "\n".join(lines) + "\n"


def merge_light_variables(css_vars: ThemeVariableMap) -> list[tuple[str, str]]:
    """
    Ordered declarations for the light/base block.

    Common entries come first, then light entries. A key present in both is
    declared twice so the light value wins by cascade, except for
    ``MERGE_SENSITIVE_KEYS`` which are declared once with the light value.
    """
    declarations = [
        (key, value)
        for key, value in css_vars.theme.items()
        if not (key in MERGE_SENSITIVE_KEYS and key in css_vars.light)
    ]
    declarations.extend(css_vars.light.items())
    return declarations


def render_layer_base(css: dict[str, dict[str, dict[str, str]]], theme_id: str) -> str:
    """
    Render ``@layer base`` rules with each selector scoped to the theme class.

    Layers other than ``@layer base`` are ignored.
    """
    rules = css.get(LAYER_BASE)
    if not rules:
        return ""

    lines = [f"{LAYER_BASE} {{"]
    for selector, properties in rules.items():
        lines.append(f"  .theme-{theme_id} {selector} {{")
        for prop, value in properties.items():
            lines.append(f"    {prop}: {value};")
        lines.append("  }")
    lines.append("}")

    return "\n".join(lines) + "\n"


def _generate_declarations(items, indent: int = 2) -> list[str]:
    """Custom property lines for ``(key, value)`` pairs or a mapping."""
    if isinstance(items, dict):
        items = items.items()
    prefix = " " * indent
    return [f"{prefix}--{key}: {value};" for key, value in items]
