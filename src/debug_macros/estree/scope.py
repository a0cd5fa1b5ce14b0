"""
Module Scope Resolution.

Only the program (module) scope matters to macro expansion: imports are always
top level, and the guard constant is injected at the top of the module body.
The scope is computed from the current state of the tree on every query, so
it stays correct while the engine mutates the program.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Set

from debug_macros.estree.nodes import Node, import_source, is_identifier, local_name
from debug_macros.estree.paths import NodePath, walk


@dataclass
class Binding:
  """
  A name declared at module level.

  Attributes:
      name: The local identifier.
      kind: ``"module"`` for imports, the declaration keyword (``const``/``let``/``var``)
          for variables, ``"hoisted"`` for function and class declarations.
      path: Path to the declaring statement within the program body.
  """

  name: str
  kind: str
  path: NodePath

  @property
  def source(self) -> Optional[str]:
    """Module string the binding was imported from (imports only)."""
    if self.kind != "module":
      return None
    return import_source(self.path.node)


def _pattern_names(pattern: Optional[Node]) -> Iterator[str]:
  """Yields every identifier bound by a declaration pattern."""
  if pattern is None:
    return
  kind = pattern.get("type")
  if kind == "Identifier":
    yield pattern["name"]
  elif kind == "ObjectPattern":
    for prop in pattern.get("properties", []):
      if prop.get("type") in ("RestElement",):
        yield from _pattern_names(prop.get("argument"))
      else:
        yield from _pattern_names(prop.get("value"))
  elif kind == "ArrayPattern":
    for element in pattern.get("elements", []):
      yield from _pattern_names(element)
  elif kind == "RestElement":
    yield from _pattern_names(pattern.get("argument"))
  elif kind == "AssignmentPattern":
    yield from _pattern_names(pattern.get("left"))


class ModuleScope:
  """
  Binding table of a ``Program`` node.
  """

  def __init__(self, program: Node):
    self.program = program

  def bindings(self) -> Dict[str, Binding]:
    table: Dict[str, Binding] = {}
    body = self.program["body"]
    for statement in body:
      path = NodePath(statement, self.program, body, "body")
      kind = statement.get("type")
      if kind == "ImportDeclaration":
        for specifier in statement.get("specifiers", []):
          name = local_name(specifier)
          if name:
            table[name] = Binding(name, "module", path)
      elif kind == "VariableDeclaration":
        for declarator in statement.get("declarations", []):
          for name in _pattern_names(declarator.get("id")):
            table[name] = Binding(name, statement.get("kind", "var"), path)
      elif kind in ("FunctionDeclaration", "ClassDeclaration"):
        if is_identifier(statement.get("id")):
          name = statement["id"]["name"]
          table[name] = Binding(name, "hoisted", path)
    return table

  def get_binding(self, name: str) -> Optional[Binding]:
    return self.bindings().get(name)

  def has_binding(self, name: str) -> bool:
    return name in self.bindings()

  def referenced_names(self) -> Set[str]:
    """Every identifier name appearing anywhere in the program."""
    return {path.node["name"] for path in walk(self.program) if is_identifier(path.node)}

  def generate_uid(self, name: str) -> str:
    """
    Produces an identifier name that collides with nothing in the program.

    Candidates are ``_<name>``, ``_<name>2``, ``_<name>3``... with leading
    underscores and trailing digits of ``name`` stripped first.

    Args:
        name: Base name, e.g. ``"DEBUG"``.

    Returns:
        str: The first free candidate.
    """
    base = name.lstrip("_").rstrip("0123456789") or "temp"
    taken = self.referenced_names() | set(self.bindings())
    i = 1
    while True:
      candidate = f"_{base}" if i == 1 else f"_{base}{i}"
      if candidate not in taken:
        return candidate
      i += 1
