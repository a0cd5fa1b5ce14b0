"""
ESTree Node Constructors and Shape Predicates.

Nodes are plain dictionaries exactly as produced by ``json.load`` on the output
of a standard JavaScript parser (acorn, espree, ``@babel/parser``). Every node
carries a ``type`` key; everything else depends on the node type.

Input may use either the ESTree spelling (``Literal``, ``Property``) or the
Babel spelling (``StringLiteral``, ``NumericLiteral``, ``ObjectProperty``).
Constructors produce the ESTree spelling (``babel_literal`` excepted), plus
``ParenthesizedExpression`` which both dialects understand.
"""

from typing import Any, Dict, List, Optional

Node = Dict[str, Any]

LITERAL_TYPES = frozenset(
  {
    "Literal",
    "StringLiteral",
    "NumericLiteral",
    "BooleanLiteral",
    "NullLiteral",
    "BigIntLiteral",
    "RegExpLiteral",
    "TemplateLiteral",
  }
)

PROPERTY_TYPES = frozenset({"Property", "ObjectProperty"})


def node_type(node: Optional[Node]) -> Optional[str]:
  """Returns the ``type`` tag of a node, or None for non-nodes."""
  if isinstance(node, dict):
    return node.get("type")
  return None


def is_node(value: Any) -> bool:
  return isinstance(value, dict) and isinstance(value.get("type"), str)


def is_call(node: Optional[Node]) -> bool:
  return node_type(node) == "CallExpression"


def is_identifier(node: Optional[Node], name: Optional[str] = None) -> bool:
  """
  Checks whether a node is an ``Identifier``.

  Args:
      node: Candidate node.
      name: If given, the identifier must also carry exactly this name.

  Returns:
      bool: True on match.
  """
  if node_type(node) != "Identifier":
    return False
  return name is None or node.get("name") == name


def is_literal(node: Optional[Node]) -> bool:
  return node_type(node) in LITERAL_TYPES


def is_string_literal(node: Optional[Node]) -> bool:
  kind = node_type(node)
  if kind == "StringLiteral":
    return True
  return kind == "Literal" and isinstance(node.get("value"), str)


def is_object(node: Optional[Node]) -> bool:
  return node_type(node) == "ObjectExpression"


def is_property(node: Optional[Node]) -> bool:
  return node_type(node) in PROPERTY_TYPES


def property_key(prop: Node) -> Optional[str]:
  """
  Resolves the static key of an object property.

  Handles identifier keys (``{ id: ... }``) and literal keys (``{ "id": ... }``).
  Computed keys (``{ [id]: ... }``) have no static name and yield None.
  """
  if prop.get("computed"):
    return None
  key = prop.get("key")
  if is_identifier(key):
    return key["name"]
  if is_literal(key) and key.get("value") is not None:
    return str(key["value"])
  return None


def literal_value(node: Optional[Node]) -> Any:
  """Returns the Python value held by a literal node, or None."""
  if not is_literal(node):
    return None
  return node.get("value")


def identifier(name: str) -> Node:
  return {"type": "Identifier", "name": name}


def literal(value: Any) -> Node:
  """
  Builds an ESTree ``Literal`` with a ``raw`` field consistent with ``value``.

  Args:
      value: A str, int, float, bool or None.

  Returns:
      Node: The literal node.
  """
  return {"type": "Literal", "value": value, "raw": raw_literal(value)}


def babel_literal(value: Any) -> Node:
  """Babel counterpart of ``literal``: ``StringLiteral``, ``NumericLiteral`` and so on."""
  if value is None:
    return {"type": "NullLiteral"}
  if isinstance(value, bool):
    return {"type": "BooleanLiteral", "value": value}
  kind = "StringLiteral" if isinstance(value, str) else "NumericLiteral"
  return {"type": kind, "value": value, "extra": {"rawValue": value, "raw": raw_literal(value)}}


def raw_literal(value: Any) -> str:
  if value is None:
    return "null"
  if isinstance(value, bool):
    return "true" if value else "false"
  if isinstance(value, str):
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'
  return repr(value)


def call_expression(callee: Node, arguments: List[Node]) -> Node:
  return {
    "type": "CallExpression",
    "callee": callee,
    "arguments": list(arguments),
    "optional": False,
  }


def member_expression(obj: Node, prop: Node) -> Node:
  return {
    "type": "MemberExpression",
    "object": obj,
    "property": prop,
    "computed": False,
    "optional": False,
  }


def logical_expression(operator: str, left: Node, right: Node) -> Node:
  return {"type": "LogicalExpression", "operator": operator, "left": left, "right": right}


def parenthesized_expression(expression: Node) -> Node:
  return {"type": "ParenthesizedExpression", "expression": expression}


def const_declaration(name: str, init: Node) -> Node:
  """Builds ``const <name> = <init>;``."""
  return {
    "type": "VariableDeclaration",
    "kind": "const",
    "declarations": [
      {
        "type": "VariableDeclarator",
        "id": identifier(name),
        "init": init,
      }
    ],
  }


def import_source(declaration: Node) -> Optional[str]:
  """Returns the module string of an ``ImportDeclaration``."""
  source = declaration.get("source")
  return literal_value(source) if source else None


def imported_name(specifier: Node) -> Optional[str]:
  """
  Name a specifier imports from the source module.

  ``import { a as b }`` yields ``"a"``. Default and namespace specifiers have no
  imported name and yield None.
  """
  if node_type(specifier) != "ImportSpecifier":
    return None
  imported = specifier.get("imported")
  if is_identifier(imported):
    return imported["name"]
  if is_string_literal(imported):
    return imported["value"]
  return None


def local_name(specifier: Node) -> Optional[str]:
  local = specifier.get("local")
  if is_identifier(local):
    return local["name"]
  return None


def expression_statement(expression: Node) -> Node:
  return {"type": "ExpressionStatement", "expression": expression}


def property_node(key: str, value: Node) -> Node:
  return {
    "type": "Property",
    "key": identifier(key),
    "value": value,
    "kind": "init",
    "computed": False,
    "method": False,
    "shorthand": False,
  }


def object_expression(properties: Dict[str, Node]) -> Node:
  """Builds ``{ key: value, ... }`` preserving the mapping's order."""
  return {"type": "ObjectExpression", "properties": [property_node(k, v) for k, v in properties.items()]}


def import_specifier(imported: str, local: Optional[str] = None) -> Node:
  return {"type": "ImportSpecifier", "imported": identifier(imported), "local": identifier(local or imported)}


def import_declaration(source: str, specifiers: List[Node]) -> Node:
  return {"type": "ImportDeclaration", "specifiers": list(specifiers), "source": literal(source)}


def program(body: List[Node]) -> Node:
  return {"type": "Program", "sourceType": "module", "body": list(body)}
