"""Tests for theme installation and removal across the three documents."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from themetools.core.errors import (
    PartialApplyError,
    ProtectedThemeError,
    StructureParseError,
    ThemeNotFoundError,
    ThemeToolsError,
)
from themetools.core.installer import FileAction, ThemeInstaller, prepare_theme
from themetools.core.models import ThemeDefinition
from themetools.core.registry import ThemeRegistry


@pytest.fixture
def installer(config) -> ThemeInstaller:
    return ThemeInstaller(config)


@pytest.fixture
def vintage(vintage_json):
    return prepare_theme(ThemeDefinition.model_validate(vintage_json), "Fallback")


class TestPrepareTheme:
    def test_name_from_definition(self, vintage):
        assert vintage.theme_id == "vintage"
        assert vintage.display_name == "Vintage"
        assert vintage.record.font == "Lora"
        assert vintage.css.startswith("@import url(")

    def test_name_override(self, vintage_json):
        theme = prepare_theme(ThemeDefinition.model_validate(vintage_json), "x", name="Old Paper")
        assert theme.theme_id == "old-paper"
        assert theme.display_name == "Old Paper"
        assert ".theme-old-paper {" in theme.css

    def test_fallback_name(self):
        definition = ThemeDefinition.model_validate({"cssVars": {}})
        theme = prepare_theme(definition, "Vintage Paper", description="Warm")
        assert theme.theme_id == "vintage-paper"
        assert theme.record.description == "Warm"

    def test_unusable_name(self):
        definition = ThemeDefinition.model_validate({"name": "!!!", "cssVars": {}})
        with pytest.raises(ThemeToolsError, match="theme id"):
            prepare_theme(definition, "")


class TestInstall:
    def test_vintage_end_to_end(self, installer, config, vintage):
        report = installer.install(vintage)

        actions = {change.path: change.action for change in report.changes}
        assert actions == {
            config.theme_css_path("vintage"): FileAction.CREATED,
            config.app_css_path: FileAction.UPDATED,
            config.registry_path: FileAction.UPDATED,
        }

        css = config.theme_css_path("vintage").read_text()
        assert css.count("--primary:") == 2
        assert "--primary: oklch(0.5 0.2 250);" in css
        assert "--primary: oklch(0.7 0.2 250);" in css

        app_css = config.app_css_path.read_text()
        assert app_css.count("@import './themes/vintage.css';") == 1

        registry = ThemeRegistry.parse(config.registry_path.read_text())
        assert registry.ids == ["default", "rose", "ocean", "vintage"]
        assert registry.union.members[-1] == "vintage"

    def test_second_run_changes_nothing(self, installer, config, vintage, snapshot):
        installer.install(vintage)
        before = snapshot(config.resources)

        report = installer.install(vintage)

        assert not report.changed
        assert all(c.action == FileAction.UNCHANGED for c in report.changes)
        assert snapshot(config.resources) == before
        assert config.app_css_path.read_text().count("@import './themes/vintage.css';") == 1

    def test_existing_css_kept_without_replace(self, installer, config, vintage):
        path = config.theme_css_path("vintage")
        path.write_text("/* hand edited */\n")

        installer.install(vintage)

        assert path.read_text() == "/* hand edited */\n"
        assert installer.load_registry().has("vintage")

    def test_replace_regenerates(self, installer, config, vintage, vintage_json):
        installer.install(vintage)
        vintage_json["cssVars"]["light"]["primary"] = "oklch(0.6 0.1 80)"
        changed = prepare_theme(ThemeDefinition.model_validate(vintage_json), "x")

        report = installer.install(changed, replace=True)

        actions = [c.action for c in report.changes]
        assert actions == [FileAction.UPDATED, FileAction.UNCHANGED, FileAction.UPDATED]
        assert "oklch(0.6 0.1 80)" in config.theme_css_path("vintage").read_text()
        registry_text = config.registry_path.read_text()
        assert registry_text.count('id: "vintage"') == 1
        assert 'primary: "oklch(0.6 0.1 80)"' in registry_text

    def test_missing_app_css_after_css_written(self, installer, config, vintage):
        config.app_css_path.unlink()

        with pytest.raises(PartialApplyError) as exc_info:
            installer.install(vintage)

        assert exc_info.value.failed == config.app_css_path
        assert exc_info.value.updated == [config.theme_css_path("vintage")]
        assert not installer.load_registry().has("vintage")

    def test_partial_apply_reports_written_files(self, installer, config, vintage):
        config.registry_path.write_text("export const nothing = 1;\n")

        with pytest.raises(PartialApplyError) as exc_info:
            installer.install(vintage)

        error = exc_info.value
        assert error.failed == config.registry_path
        assert error.updated == [config.theme_css_path("vintage"), config.app_css_path]
        # No rollback
        assert config.theme_css_path("vintage").exists()
        assert config.registry_path.read_text() == "export const nothing = 1;\n"

    def test_first_failure_is_not_partial(self, installer, config, vintage):
        config.app_css_path.unlink()
        with patch.object(ThemeInstaller, "_write_css", lambda self, theme, replace, report: None):
            with pytest.raises(StructureParseError, match="app.css not found"):
                installer.install(vintage)


class TestRemove:
    def test_install_remove_round_trip(self, installer, config, vintage, snapshot):
        before = snapshot(config.resources)
        installer.install(vintage)

        report = installer.remove("vintage")

        assert [c.action for c in report.changes] == [
            FileAction.DELETED,
            FileAction.UPDATED,
            FileAction.UPDATED,
        ]
        assert snapshot(config.resources) == before

    def test_protected_default_leaves_files_identical(self, installer, config, snapshot):
        before = snapshot(config.resources)
        with pytest.raises(ProtectedThemeError, match="protected"):
            installer.remove("default")
        assert snapshot(config.resources) == before

    def test_unknown_theme(self, installer):
        with pytest.raises(ThemeNotFoundError, match="does not exist"):
            installer.remove("nope")

    def test_registry_only_theme(self, installer, config):
        """A theme whose CSS file is gone is still removable."""
        report = installer.remove("rose")
        actions = [c.action for c in report.changes]
        assert actions == [FileAction.MISSING, FileAction.UNCHANGED, FileAction.UPDATED]
        assert not installer.load_registry().has("rose")

    def test_css_only_theme(self, installer, config):
        config.theme_css_path("stray").write_text("/* stray */\n")
        report = installer.remove("stray")
        assert report.changes[0].action == FileAction.DELETED
        assert report.changes[2].action == FileAction.UNCHANGED


class TestQueries:
    def test_available_themes(self, installer, config, vintage):
        installer.install(vintage)
        assert installer.available_themes() == ["default", "vintage"]

    def test_is_installed(self, installer, config, vintage):
        assert installer.is_installed("default")
        assert installer.is_installed("rose")
        assert not installer.is_installed("vintage")
        installer.install(vintage)
        assert installer.is_installed("vintage")
