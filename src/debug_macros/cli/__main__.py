"""
Main Entry Point for debug-macros CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `debug_macros.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from debug_macros import __version__
from debug_macros.cli.handlers import handle_expand
from debug_macros.utils.console import set_verbosity


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="debug-macros: compile-time expansion of debug macros")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: EXPAND ---
  cmd_exp = subparsers.add_parser("expand", help="Expand debug macros in ESTree JSON modules")
  cmd_exp.add_argument("path", type=Path, help="ESTree JSON file or directory of *.json files")
  cmd_exp.add_argument("--out", type=Path, default=None, help="Output file or directory (default: stdout for files)")
  cmd_exp.add_argument("--config", type=Path, default=None, help="JSON options file (packageVersion, envFlags, ...)")
  cmd_exp.add_argument("--package-version", default=None, help="Version checked against deprecation ranges")
  cmd_exp.add_argument(
    "--externalize",
    action="store_true",
    default=None,
    help="Route diagnostics to external helpers instead of console",
  )
  cmd_exp.add_argument("--helpers-module", default=None, help="Rewrite the helpers import to this module")
  cmd_exp.add_argument("--helpers-global", default=None, help="Call helpers on this global namespace object")
  cmd_exp.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Fail on helpers no macro handles (Overrides config)",
  )
  cmd_exp.add_argument("--emit-js", action="store_true", help="Write JavaScript instead of ESTree JSON")
  cmd_exp.add_argument("-v", "--verbose", action="store_true", help="Show per-module expansion traces")

  args = parser.parse_args(argv)

  if args.command == "expand":
    set_verbosity(args.verbose)
    return handle_expand(
      input_path=args.path,
      output_path=args.out,
      config_file=args.config,
      package_version=args.package_version,
      externalize=args.externalize,
      helpers_module=args.helpers_module,
      helpers_global=args.helpers_global,
      strict=args.strict,
      emit_js=args.emit_js,
    )

  return 0


if __name__ == "__main__":
  sys.exit(main())
