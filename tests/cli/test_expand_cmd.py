"""
Tests for the CLI 'expand' command.

Runs ``main`` against ESTree JSON files in a temporary directory and checks
the written output and exit codes.
"""

import json

import pytest

from debug_macros.cli.__main__ import main
from debug_macros.estree import nodes as n


@pytest.fixture
def module_file(tmp_path, helpers_import, call_stmt):
  program = n.program([helpers_import("warn"), call_stmt("warn", n.literal("careful"))])
  path = tmp_path / "mod.json"
  path.write_text(json.dumps(program), encoding="utf-8")
  return path


@pytest.fixture
def options_file(tmp_path):
  path = tmp_path / "options.json"
  path.write_text(json.dumps({"envFlags": {"flags": {"DEBUG": 1}}}), encoding="utf-8")
  return path


def test_expand_file_to_stdout_as_js(module_file, options_file, capsys):
  code = main(["expand", str(module_file), "--config", str(options_file), "--emit-js"])

  assert code == 0
  assert capsys.readouterr().out == 'const _DEBUG = 1;\n(_DEBUG && console.warn("careful"));\n'


def test_expand_file_to_json(module_file, options_file, tmp_path):
  out = tmp_path / "out" / "mod.json"

  code = main(["expand", str(module_file), "--config", str(options_file), "--out", str(out)])

  assert code == 0
  tree = json.loads(out.read_text(encoding="utf-8"))
  assert [stmt["type"] for stmt in tree["body"]] == ["VariableDeclaration", "ExpressionStatement"]
  assert tree["body"][1]["expression"]["type"] == "ParenthesizedExpression"


def test_externalize_flags(module_file, options_file, capsys):
  code = main(
    ["expand", str(module_file), "--config", str(options_file), "--externalize", "--helpers-global", "Ember", "--emit-js"]
  )

  assert code == 0
  assert "Ember.warn(\"careful\")" in capsys.readouterr().out


def test_missing_debug_flag_fails(module_file, capsys, caplog):
  code = main(["expand", str(module_file), "--emit-js"])

  assert code == 1
  assert capsys.readouterr().out == ""
  assert "not a supported flag" in caplog.text


def test_directory_requires_out(tmp_path, module_file):
  assert main(["expand", str(tmp_path)]) == 1


def test_directory_expansion(tmp_path, options_file, helpers_import, call_stmt):
  src = tmp_path / "src"
  (src / "nested").mkdir(parents=True)
  good = n.program([helpers_import("assert"), call_stmt("assert", "ok")])
  bad = n.program([helpers_import("deprecate"), call_stmt("deprecate", n.literal("m"))])
  (src / "good.json").write_text(json.dumps(good), encoding="utf-8")
  (src / "nested" / "bad.json").write_text(json.dumps(bad), encoding="utf-8")
  out = tmp_path / "dist"

  code = main(["expand", str(src), "--out", str(out), "--config", str(options_file), "--emit-js"])

  assert code == 1
  assert (out / "good.js").read_text(encoding="utf-8") == "const _DEBUG = 1;\n(_DEBUG && ok && console.assert(ok));\n"
  assert not (out / "nested" / "bad.js").exists()


def test_missing_input(tmp_path):
  assert main(["expand", str(tmp_path / "nope.json")]) == 1
