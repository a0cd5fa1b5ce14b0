"""
Expand Command Handler.

This module implements the logic for the `debug-macros expand` command.
It orchestrates:
1. Configuration loading (pyproject.toml, options file, CLI overrides).
2. Macro expansion of each ESTree module via the Engine.
3. Output writing (JSON or JavaScript) and a summary table.
"""

import json
import sys
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.table import Table

from debug_macros.config import MacroConfig
from debug_macros.core.engine import ExpansionResult, expand
from debug_macros.core.errors import MacroExpansionError
from debug_macros.estree.emitter import EmitError, EstreeEmitter
from debug_macros.utils.console import console, log_error, log_info, log_success, log_warning


class FileOutcome(BaseModel):
  """Result of expanding one input file."""

  success: bool = True
  error: Optional[str] = None
  result: ExpansionResult = Field(default_factory=ExpansionResult)


def handle_expand(
  input_path: Path,
  output_path: Optional[Path],
  config_file: Optional[Path] = None,
  package_version: Optional[str] = None,
  externalize: Optional[bool] = None,
  helpers_module: Optional[str] = None,
  helpers_global: Optional[str] = None,
  strict: Optional[bool] = None,
  emit_js: bool = False,
) -> int:
  """
  Handles the 'expand' command execution.

  Args:
      input_path: ESTree JSON file, or directory searched recursively for *.json.
      output_path: Destination file or directory. Single files go to stdout when omitted.
      config_file: Optional JSON options file.
      package_version: Override for the package version.
      externalize: Override for helper externalization.
      helpers_module: Override for the externalized helpers module.
      helpers_global: Override for the helpers namespace object.
      strict: Override for strict mode.
      emit_js: If True, write JavaScript instead of JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {escape(str(input_path))}")
    return 1

  try:
    config = MacroConfig.load(
      config_file=config_file,
      package_version=package_version,
      externalize_helpers=externalize,
      helpers_module=helpers_module,
      helpers_global=helpers_global,
      strict_mode=strict,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except (ValueError, OSError) as e:
    log_error(escape(str(e)))
    return 1

  outcomes: Dict[str, FileOutcome] = {}
  suffix = ".js" if emit_js else ".json"

  if input_path.is_file():
    outcomes[input_path.name] = _expand_single_file(input_path, output_path, config, emit_js)
  else:
    if not output_path:
      log_error("Directory expansion requires --out destination directory.")
      return 1

    json_files = sorted(input_path.rglob("*.json"))
    if not json_files:
      log_warning(f"No .json files found in {escape(str(input_path))}")
      return 0

    log_info(f"Processing {len(json_files)} modules from {escape(str(input_path))}...")
    for src_file in json_files:
      rel_path = src_file.relative_to(input_path)
      dest_file = (output_path / rel_path).with_suffix(suffix)
      outcomes[str(rel_path)] = _expand_single_file(src_file, dest_file, config, emit_js)

  _print_summary(outcomes)
  return 0 if all(o.success for o in outcomes.values()) else 1


def _expand_single_file(
  src: Path,
  dest: Optional[Path],
  config: MacroConfig,
  emit_js: bool,
) -> FileOutcome:
  """
  Expands one module and writes the result.

  Failures are logged and reported in the outcome; the output file is not
  written for a failed module.
  """
  try:
    tree = json.loads(src.read_text(encoding="utf-8"))
    result = expand(tree, config)
    output = EstreeEmitter().emit(tree) if emit_js else json.dumps(tree, indent=2) + "\n"
  except (MacroExpansionError, EmitError, ValueError) as e:
    log_error(f"{escape(src.name)}: {escape(str(e))}")
    return FileOutcome(success=False, error=str(e))

  if dest:
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(output, encoding="utf-8")
    log_success(f"Expanded {escape(src.name)} -> {escape(str(dest))}")
  else:
    sys.stdout.write(output)

  return FileOutcome(result=result)


def _print_summary(outcomes: Dict[str, FileOutcome]) -> None:
  if len(outcomes) < 2:
    return

  table = Table(title="Macro Expansion Summary")
  table.add_column("Module", style="path")
  table.add_column("Status")
  table.add_column("Expanded", justify="right")
  table.add_column("Removed", justify="right")
  table.add_column("Flags", justify="right")

  for name, outcome in outcomes.items():
    status = "[green]ok[/green]" if outcome.success else "[red]failed[/red]"
    r = outcome.result
    table.add_row(escape(name), status, str(r.expanded), str(r.removed), str(r.inlined_flags))

  console.print(table)
