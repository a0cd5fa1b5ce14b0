"""
Runtime Configuration Store.

Holds the options that drive one expansion run: flag tables, the package
version deprecations are checked against, and the helper externalization
policy. A ``MacroConfig`` is immutable; every module transformed in a run
reads the same instance.

Option names follow the build-tool convention (``packageVersion``,
``envFlags``, ``externalizeHelpers``...) as aliases of snake_case fields, so a
JSON options file written for the build pipeline loads unchanged.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEBUG_FLAG = "DEBUG"
DEFAULT_ENV_FLAGS_SOURCE = "@ember/env-flags"
DEFAULT_DEBUG_TOOLS_SOURCE = "@ember/debug-tools"


class _Options(BaseModel):
  model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")


class EnvFlags(_Options):
  """
  The reserved environment-flags module.
  """

  source: str = Field(DEFAULT_ENV_FLAGS_SOURCE, description="Module string of the environment-flags import.")
  flags: Dict[str, int] = Field(default_factory=dict, description="Flag name -> literal value. Must define DEBUG.")


class FeatureFlags(_Options):
  """
  A user-supplied feature-flag table bound to one import source.
  """

  features_import: str = Field(..., alias="featuresImport", description="Module string that selects this table.")
  flags: Dict[str, int] = Field(default_factory=dict, description="Feature name -> literal value.")


class DebugTools(_Options):
  source: str = Field(DEFAULT_DEBUG_TOOLS_SOURCE, description="Module string of the diagnostic helpers import.")


class Helpers(_Options):
  """
  Externalization targets, consulted only when ``externalize_helpers`` is set.

  ``module`` may be a string (rewrite the helpers import to that module) or
  ``True`` (keep the helpers import untouched).
  """

  module: Union[bool, str, None] = Field(None, description="Replacement module for the helpers import.")
  global_: Optional[str] = Field(None, alias="global", description="Namespace object for `<global>.<helper>()` calls.")


class MacroConfig(_Options):
  """
  Configuration for a macro expansion run.
  """

  package_version: Optional[str] = Field(
    None, alias="packageVersion", description="Version compared against each deprecation's `until` range."
  )
  env_flags: EnvFlags = Field(default_factory=EnvFlags, alias="envFlags")
  features: List[FeatureFlags] = Field(default_factory=list, description="Ordered feature-flag tables.")
  debug_tools: DebugTools = Field(default_factory=DebugTools, alias="debugTools")
  externalize_helpers: bool = Field(False, alias="externalizeHelpers")
  helpers: Helpers = Field(default_factory=Helpers)
  strict_mode: bool = Field(
    False, alias="strictMode", description="If True, fail on helpers no macro handles instead of skipping them."
  )

  @model_validator(mode="before")
  @classmethod
  def _unfold_externalize_object(cls, data: Any) -> Any:
    """
    Accepts ``externalizeHelpers: {module, global}`` as shorthand for
    ``externalizeHelpers: true`` plus ``helpers: {module, global}``.
    """
    if not isinstance(data, dict):
      return data
    for key in ("externalizeHelpers", "externalize_helpers"):
      value = data.get(key)
      if isinstance(value, dict):
        existing = data.get("helpers") or {}
        if isinstance(existing, BaseModel):
          existing = existing.model_dump(by_alias=True, exclude_none=True)
        data = dict(data)
        data[key] = True
        data["helpers"] = {**existing, **value}
    return data

  @property
  def helpers_global(self) -> Optional[str]:
    return self.helpers.global_ if self.externalize_helpers else None

  @property
  def helpers_module(self) -> Union[bool, str, None]:
    return self.helpers.module if self.externalize_helpers else None

  @classmethod
  def from_options(cls, options: Dict[str, Any]) -> "MacroConfig":
    """
    Validates a raw options dictionary.

    Raises:
        ValueError: If the options do not match the schema.
    """
    try:
      return cls.model_validate(options)
    except ValidationError as e:
      raise ValueError(f"Invalid debug-macros configuration: {e}")

  @classmethod
  def load(
    cls,
    config_file: Optional[Path] = None,
    package_version: Optional[str] = None,
    externalize_helpers: Optional[bool] = None,
    helpers_module: Optional[str] = None,
    helpers_global: Optional[str] = None,
    strict_mode: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "MacroConfig":
    """
    Loads configuration from pyproject.toml, an options file, and overrides.

    Precedence, lowest first: ``[tool.debug_macros]`` in the nearest
    pyproject.toml, the JSON ``config_file``, then explicit arguments. When no
    package version is configured anywhere, the ``version`` of the nearest
    package.json is used.

    Args:
        config_file: Optional JSON file holding build-tool style options.
        package_version: Override for the package version.
        externalize_helpers: Override for helper externalization.
        helpers_module: Override for ``helpers.module``.
        helpers_global: Override for ``helpers.global``.
        strict_mode: Override for strict mode.
        search_path: Directory to start searching for pyproject.toml / package.json.

    Returns:
        MacroConfig: The fully resolved configuration.
    """
    start_dir = search_path or Path.cwd()
    options, _ = _load_toml_settings(start_dir)

    if config_file:
      file_options = json.loads(Path(config_file).read_text(encoding="utf-8"))
      options = _merge(options, file_options)

    overrides: Dict[str, Any] = {}
    if package_version is not None:
      overrides["packageVersion"] = package_version
    if externalize_helpers is not None:
      overrides["externalizeHelpers"] = externalize_helpers
    if strict_mode is not None:
      overrides["strictMode"] = strict_mode
    helper_overrides = {}
    if helpers_module is not None:
      helper_overrides["module"] = helpers_module
    if helpers_global is not None:
      helper_overrides["global"] = helpers_global
    if helper_overrides:
      overrides["helpers"] = helper_overrides
    options = _merge(options, overrides)

    if not (options.get("packageVersion") or options.get("package_version")):
      found = _find_package_version(start_dir)
      if found:
        options["packageVersion"] = found

    return cls.from_options(options)


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
  """Recursively merges ``extra`` over ``base`` without mutating either."""
  merged = dict(base)
  for key, value in extra.items():
    if isinstance(value, dict) and isinstance(merged.get(key), dict):
      merged[key] = _merge(merged[key], value)
    else:
      merged[key] = value
  return merged


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get("debug_macros", {}), parent

  return {}, None


def _find_package_version(start_path: Path) -> Optional[str]:
  """Reads ``version`` from the nearest package.json, if any."""
  current = start_path.resolve()
  for parent in [current, *current.parents]:
    manifest = parent / "package.json"
    if manifest.is_file():
      version = json.loads(manifest.read_text(encoding="utf-8")).get("version")
      return str(version) if version else None
  return None
