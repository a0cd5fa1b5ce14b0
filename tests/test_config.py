"""
Tests for MacroConfig validation and loading.

Verifies:
1. Build-tool option names and snake_case names both populate fields.
2. The ``externalizeHelpers: {...}`` shorthand.
3. Precedence: pyproject.toml < options file < explicit overrides.
4. package.json version fallback.
"""

import json

import pytest
from pydantic import ValidationError

from debug_macros.config import DEFAULT_DEBUG_TOOLS_SOURCE, DEFAULT_ENV_FLAGS_SOURCE, MacroConfig


def test_defaults():
  config = MacroConfig()
  assert config.package_version is None
  assert config.env_flags.source == DEFAULT_ENV_FLAGS_SOURCE
  assert config.debug_tools.source == DEFAULT_DEBUG_TOOLS_SOURCE
  assert config.features == []
  assert config.helpers_global is None
  assert config.helpers_module is None
  assert not config.strict_mode


def test_aliases_and_field_names():
  by_alias = MacroConfig(packageVersion="3.1.0", envFlags={"flags": {"DEBUG": 0}})
  by_name = MacroConfig(package_version="3.1.0", env_flags={"flags": {"DEBUG": 0}})
  assert by_alias == by_name
  assert by_alias.env_flags.flags == {"DEBUG": 0}


def test_config_is_frozen():
  config = MacroConfig()
  with pytest.raises(ValidationError):
    config.package_version = "9.9.9"


def test_helpers_ignored_unless_externalized():
  config = MacroConfig(helpers={"global": "Ember", "module": "x"})
  assert config.helpers_global is None
  assert config.helpers_module is None


def test_externalize_object_shorthand():
  config = MacroConfig.from_options({"externalizeHelpers": {"global": "Ember"}})
  assert config.externalize_helpers is True
  assert config.helpers_global == "Ember"

  merged = MacroConfig.from_options({"helpers": {"module": "a"}, "externalizeHelpers": {"global": "G"}})
  assert merged.helpers_module == "a"
  assert merged.helpers_global == "G"


def test_feature_tables_keep_order():
  config = MacroConfig.from_options(
    {"features": [{"featuresImport": "a", "flags": {"X": 1}}, {"featuresImport": "b", "flags": {}}]}
  )
  assert [f.features_import for f in config.features] == ["a", "b"]


def test_unknown_option_is_rejected():
  with pytest.raises(ValueError, match="Invalid debug-macros configuration"):
    MacroConfig.from_options({"packageVersoin": "1.0.0"})


def test_load_reads_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.debug_macros]\npackageVersion = "1.2.0"\n\n[tool.debug_macros.envFlags.flags]\nDEBUG = 1\n',
    encoding="utf-8",
  )
  nested = tmp_path / "src" / "app"
  nested.mkdir(parents=True)

  config = MacroConfig.load(search_path=nested)

  assert config.package_version == "1.2.0"
  assert config.env_flags.flags == {"DEBUG": 1}


def test_load_precedence(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.debug_macros]\npackageVersion = "1.0.0"\nstrictMode = true\n\n[tool.debug_macros.envFlags.flags]\nDEBUG = 1\n',
    encoding="utf-8",
  )
  options = tmp_path / "options.json"
  options.write_text(json.dumps({"packageVersion": "2.0.0", "envFlags": {"flags": {"CI": 0}}}), encoding="utf-8")

  config = MacroConfig.load(
    config_file=options,
    package_version="3.0.0",
    externalize_helpers=True,
    helpers_global="Ember",
    search_path=tmp_path,
  )

  assert config.package_version == "3.0.0"
  assert config.env_flags.flags == {"DEBUG": 1, "CI": 0}
  assert config.strict_mode is True
  assert config.helpers_global == "Ember"


def test_load_falls_back_to_package_json(tmp_path):
  (tmp_path / "package.json").write_text(json.dumps({"name": "app", "version": "4.5.6"}), encoding="utf-8")
  assert MacroConfig.load(search_path=tmp_path).package_version == "4.5.6"
  assert MacroConfig.load(package_version="1.0.0", search_path=tmp_path).package_version == "1.0.0"
