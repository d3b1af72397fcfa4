"""Tests for theme registry parsing and editing."""

from __future__ import annotations

import re

import pytest

from themetools.core.errors import StructureParseError
from themetools.core.models import ThemeColors, ThemeRecord
from themetools.core.patcher import PatchStatus
from themetools.core.registry import ThemeRegistry, UnionDeclaration


def _record(theme_id: str, name: str | None = None, primary: str = "oklch(0.5 0.2 250)") -> ThemeRecord:
    return ThemeRecord(
        id=theme_id,
        name=name or theme_id.title(),
        description="Test theme.",
        font="Lora",
        colors=ThemeColors(primary=primary),
    )


def _count_ids(text: str, theme_id: str) -> int:
    return len(re.findall(rf"""\bid:\s*["']{re.escape(theme_id)}["']""", text))


class TestParse:
    def test_stock_registry(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        assert registry.ids == ["default", "rose", "ocean"]
        assert registry.union is not None
        assert registry.union.members == ["default", "rose", "ocean"]

    def test_unmodified_round_trip_is_exact(self, registry_text):
        assert ThemeRegistry.parse(registry_text).serialize() == registry_text

    def test_entry_fields(self, registry_text):
        entry = ThemeRegistry.parse(registry_text).entries[1]
        assert entry.id == "rose"
        assert entry.field("name") == "Rose"
        assert entry.field("primary") == "oklch(0.62 0.24 18)"
        assert entry.field("missing") is None

    def test_missing_array(self):
        with pytest.raises(StructureParseError, match="No 'themes' array"):
            ThemeRegistry.parse('export type ColorTheme = "default";\n')

    def test_unbalanced_array(self):
        text = 'export const themes: ThemeConfig[] = [\n  {\n    id: "default",\n'
        with pytest.raises(StructureParseError):
            ThemeRegistry.parse(text)

    def test_non_record_content(self):
        text = "export const themes: ThemeConfig[] = [...baseThemes, { id: 'x' }];\n"
        with pytest.raises(StructureParseError, match="Unexpected content"):
            ThemeRegistry.parse(text)

    def test_union_is_optional(self):
        text = "export const themes = [\n  { id: 'a' },\n];\n"
        registry = ThemeRegistry.parse(text)
        assert registry.union is None
        registry.add(_record("b"))
        assert _count_ids(registry.serialize(), "b") == 1

    def test_non_literal_union_left_alone(self):
        text = "export type ColorTheme = string;\nexport const themes = [\n  { id: 'a' },\n];\n"
        registry = ThemeRegistry.parse(text)
        assert registry.union is None
        registry.add(_record("b"))
        assert registry.serialize().startswith("export type ColorTheme = string;\n")


class TestAdd:
    def test_add_appends_member_and_entry(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        assert registry.add(_record("vintage", "Vintage")) == PatchStatus.APPLIED
        text = registry.serialize()

        assert 'export type ColorTheme = "default" | "rose" | "ocean" | "vintage";' in text
        assert (
            "  {\n"
            '    id: "vintage",\n'
            '    name: "Vintage",\n'
            '    description: "Test theme.",\n'
            '    font: "Lora",\n'
            "    colors: {\n"
            '      primary: "oklch(0.5 0.2 250)",\n'
            '      secondary: "oklch(0.9 0.05 250)",\n'
            '      accent: "oklch(0.9 0.05 250)",\n'
            "    },\n"
            "  },\n"
            "];\n"
        ) in text

    def test_add_is_idempotent(self, registry_text):
        once = ThemeRegistry.parse(registry_text)
        once.add(_record("vintage"))
        first = once.serialize()

        again = ThemeRegistry.parse(first)
        assert again.add(_record("vintage")) == PatchStatus.ALREADY_PRESENT
        assert again.serialize() == first

    def test_existing_entry_not_duplicated(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        assert registry.add(_record("rose", primary="red")) == PatchStatus.ALREADY_PRESENT
        assert registry.serialize() == registry_text

    def test_replace_rewrites_in_place(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        assert registry.add(_record("rose", primary="red"), replace=True) == PatchStatus.APPLIED
        text = registry.serialize()
        assert _count_ids(text, "rose") == 1
        assert 'primary: "red"' in text
        assert text.index('id: "rose"') < text.index('id: "ocean"')
        assert 'export type ColorTheme = "default" | "rose" | "ocean";' in text

    def test_replace_missing_adds(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        registry.add(_record("vintage"), replace=True)
        assert registry.ids[-1] == "vintage"

    def test_quotes_escaped(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        registry.add(ThemeRecord(id="q", name='Say "hi"'))
        assert r'name: "Say \"hi\"",' in registry.serialize()

    def test_follows_single_quotes_and_indent(self):
        text = (
            "export type ColorTheme = 'default';\n"
            "export const themes: ThemeConfig[] = [\n"
            "    {\n"
            "        id: 'default',\n"
            "        name: 'Default',\n"
            "    },\n"
            "];\n"
        )
        registry = ThemeRegistry.parse(text)
        registry.add(_record("mono"))
        out = registry.serialize()
        assert "export type ColorTheme = 'default' | 'mono';" in out
        assert "    {\n        id: 'mono',\n        name: 'Mono'," in out
        assert "        colors: {\n            primary: 'oklch(0.5 0.2 250)'," in out

    def test_add_to_empty_array(self):
        text = "export type ColorTheme = never;\nexport const themes: ThemeConfig[] = [];\n"
        registry = ThemeRegistry.parse(text)
        registry.add(_record("solo"))
        out = registry.serialize()
        assert out.startswith('export type ColorTheme = "solo";\n')
        assert 'export const themes: ThemeConfig[] = [\n  {\n    id: "solo",' in out
        assert out.endswith("  },\n];\n")

    def test_add_keeps_comment_in_empty_array(self):
        text = "export const themes: ThemeConfig[] = [\n  // add themes here\n];\n"
        registry = ThemeRegistry.parse(text)
        registry.add(_record("solo"))
        out = registry.serialize()
        assert out.startswith(
            "export const themes: ThemeConfig[] = [\n  // add themes here\n  {\n    id: \"solo\","
        )
        assert out.endswith("  },\n];\n")

        registry.remove("solo")
        assert registry.serialize() == text

    def test_uniqueness_over_sequences(self, registry_text):
        text = registry_text
        for op, theme_id in [("add", "a"), ("add", "b"), ("add", "a"), ("remove", "a"), ("add", "a"), ("add", "b")]:
            registry = ThemeRegistry.parse(text)
            if op == "add":
                registry.add(_record(theme_id))
            else:
                registry.remove(theme_id)
            text = registry.serialize()
            for tid in ("a", "b", "rose"):
                assert _count_ids(text, tid) <= 1
        assert ThemeRegistry.parse(text).ids == ["default", "rose", "ocean", "b", "a"]


class TestRemove:
    def test_add_remove_round_trip(self, registry_text):
        added = ThemeRegistry.parse(registry_text)
        added.add(_record("vintage"))
        removed = ThemeRegistry.parse(added.serialize())
        assert removed.remove("vintage") == PatchStatus.APPLIED
        assert removed.serialize() == registry_text

    def test_remove_middle(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        registry.remove("rose")
        text = registry.serialize()
        assert 'export type ColorTheme = "default" | "ocean";' in text
        assert _count_ids(text, "rose") == 0
        assert '  },\n  {\n    id: "ocean",' in text
        assert ThemeRegistry.parse(text).ids == ["default", "ocean"]

    def test_remove_first(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        registry.remove("default")
        text = registry.serialize()
        assert 'export const themes: ThemeConfig[] = [\n  {\n    id: "rose",' in text

    def test_remove_missing(self, registry_text):
        registry = ThemeRegistry.parse(registry_text)
        assert registry.remove("missing") == PatchStatus.NOT_FOUND
        assert registry.serialize() == registry_text

    def test_last_member_leaves_never(self):
        text = 'export type ColorTheme = "only";\nexport const themes = [\n  { id: "only" },\n];\n'
        registry = ThemeRegistry.parse(text)
        registry.remove("only")
        out = registry.serialize()
        assert "export type ColorTheme = never;" in out
        assert "export const themes = [];" in out
        assert ThemeRegistry.parse(out).ids == []


class TestUnionDeclaration:
    def test_multiline_dialect(self):
        union = UnionDeclaration.parse("export type ColorTheme =", "\n    | 'default'\n    | 'rose'")
        assert union is not None
        assert union.quote == "'"
        union.add("ocean")
        assert union.serialize() == "export type ColorTheme =\n    | 'default'\n    | 'rose'\n    | 'ocean';"

    def test_multiline_single_member(self):
        union = UnionDeclaration.parse("export type ColorTheme =", "\n  | 'default'")
        union.add("rose")
        assert union.serialize() == "export type ColorTheme =\n  | 'default'\n  | 'rose';"

    def test_multiline_single_member_four_spaces(self):
        union = UnionDeclaration.parse("export type ColorTheme =", "\n    | 'default'")
        union.add("rose")
        assert union.serialize() == "export type ColorTheme =\n    | 'default'\n    | 'rose';"

    def test_inline_round_trip(self):
        union = UnionDeclaration.parse("export type ColorTheme =", ' "a" | "b"')
        union.add("c")
        union.remove("c")
        assert union.serialize() == 'export type ColorTheme = "a" | "b";'

    def test_never_parses_empty(self):
        union = UnionDeclaration.parse("export type ColorTheme =", " never")
        assert union is not None
        assert union.members == []

    def test_non_literal(self):
        assert UnionDeclaration.parse("export type ColorTheme =", " string") is None
