"""
ESTree Emitter.

This module provides the `EstreeEmitter` class, which renders an ESTree tree
back to JavaScript source. It covers the statement and expression forms that
occur around debug macros (imports, declarations, calls, logical chains,
functions, simple control flow). Formatting is fixed: two-space indentation,
double-quoted strings unless the parser recorded a raw form, semicolons after
every simple statement.

Unsupported node types raise ``EmitError`` rather than producing wrong code.
"""

from typing import Callable, Dict, List, Optional

from debug_macros.estree.nodes import LITERAL_TYPES, Node, raw_literal


class EmitError(ValueError):
  """Raised for node types the emitter cannot render."""


# Binding power of binary and logical operators (higher binds tighter).
_PRECEDENCE: Dict[str, int] = {
  "??": 1,
  "||": 2,
  "&&": 3,
  "|": 4,
  "^": 5,
  "&": 6,
  "==": 7,
  "!=": 7,
  "===": 7,
  "!==": 7,
  "<": 8,
  ">": 8,
  "<=": 8,
  ">=": 8,
  "in": 8,
  "instanceof": 8,
  "<<": 9,
  ">>": 9,
  ">>>": 9,
  "+": 10,
  "-": 10,
  "*": 11,
  "/": 11,
  "%": 11,
  "**": 12,
}

_ATOMIC = 20
_UNARY = 14
_LOW = 0

_SHORT_CIRCUIT = frozenset({"||", "&&"})


def _mixes_nullish(operator: str, operand: Node) -> bool:
  """`??` cannot share an unparenthesized chain with `||` or `&&`."""
  if operand.get("type") != "LogicalExpression":
    return False
  pair = {operator, operand["operator"]}
  return "??" in pair and bool(pair & _SHORT_CIRCUIT)


class EstreeEmitter:
  """
  Converts ESTree nodes into JavaScript text.
  """

  def __init__(self, indent: str = "  "):
    self.indent = indent

  def emit(self, tree: Node) -> str:
    """
    Generates source for a ``Program``/``File`` or a single statement.

    Args:
        tree: The root node.

    Returns:
        str: JavaScript source ending with a newline.
    """
    if tree.get("type") == "File":
      tree = tree["program"]
    if tree.get("type") == "Program":
      lines = [self.statement(stmt, 0) for stmt in tree.get("body", [])]
    else:
      lines = [self.statement(tree, 0)]
    return "\n".join(lines) + "\n"

  # --- Statements ---

  def statement(self, node: Node, depth: int) -> str:
    pad = self.indent * depth
    kind = node.get("type")
    handler: Optional[Callable[[Node, int], str]] = getattr(self, f"_stmt_{kind}", None)
    if handler is not None:
      return pad + handler(node, depth)
    raise EmitError(f"Unsupported statement type: {kind}")

  def _block(self, node: Node, depth: int) -> str:
    if node.get("type") != "BlockStatement":
      return "{\n" + self.statement(node, depth + 1) + "\n" + self.indent * depth + "}"
    body = node.get("body", [])
    if not body:
      return "{}"
    inner = "\n".join(self.statement(stmt, depth + 1) for stmt in body)
    return "{\n" + inner + "\n" + self.indent * depth + "}"

  def _stmt_ExpressionStatement(self, node: Node, depth: int) -> str:
    expression = node["expression"]
    text = self.expression(expression)
    # A leading `{` or `function` would be parsed as a statement.
    if expression.get("type") in ("ObjectExpression", "FunctionExpression"):
      text = f"({text})"
    return text + ";"

  def _stmt_EmptyStatement(self, node: Node, depth: int) -> str:
    return ";"

  def _stmt_BlockStatement(self, node: Node, depth: int) -> str:
    return self._block(node, depth)

  def _stmt_ReturnStatement(self, node: Node, depth: int) -> str:
    if node.get("argument") is None:
      return "return;"
    return f"return {self.expression(node['argument'])};"

  def _stmt_ThrowStatement(self, node: Node, depth: int) -> str:
    return f"throw {self.expression(node['argument'])};"

  def _stmt_IfStatement(self, node: Node, depth: int) -> str:
    text = f"if ({self.expression(node['test'])}) {self._block(node['consequent'], depth)}"
    alternate = node.get("alternate")
    if alternate is not None:
      if alternate.get("type") == "IfStatement":
        text += " else " + self._stmt_IfStatement(alternate, depth)
      else:
        text += " else " + self._block(alternate, depth)
    return text

  def _stmt_VariableDeclaration(self, node: Node, depth: int) -> str:
    return self._declaration(node) + ";"

  def _declaration(self, node: Node) -> str:
    parts = []
    for declarator in node.get("declarations", []):
      text = self.expression(declarator["id"])
      if declarator.get("init") is not None:
        text += " = " + self.expression(declarator["init"], 1)
      parts.append(text)
    return f"{node.get('kind', 'var')} " + ", ".join(parts)

  def _stmt_FunctionDeclaration(self, node: Node, depth: int) -> str:
    return self._function(node, depth)

  def _stmt_ImportDeclaration(self, node: Node, depth: int) -> str:
    source = self.expression(node["source"])
    default: List[str] = []
    named: List[str] = []
    for specifier in node.get("specifiers", []):
      kind = specifier.get("type")
      local = specifier["local"]["name"]
      if kind == "ImportDefaultSpecifier":
        default.append(local)
      elif kind == "ImportNamespaceSpecifier":
        default.append(f"* as {local}")
      else:
        imported = specifier["imported"].get("name") or specifier["imported"].get("value")
        named.append(imported if imported == local else f"{imported} as {local}")
    clauses = list(default)
    if named:
      clauses.append("{ " + ", ".join(named) + " }")
    if not clauses:
      return f"import {source};"
    return f"import {', '.join(clauses)} from {source};"

  def _stmt_ExportNamedDeclaration(self, node: Node, depth: int) -> str:
    declaration = node.get("declaration")
    if declaration is not None:
      return "export " + self._stmt_inline(declaration, depth)
    names = []
    for specifier in node.get("specifiers", []):
      local = specifier["local"]["name"]
      exported = specifier["exported"].get("name") or specifier["exported"].get("value")
      names.append(local if local == exported else f"{local} as {exported}")
    text = "export { " + ", ".join(names) + " }"
    if node.get("source") is not None:
      text += " from " + self.expression(node["source"])
    return text + ";"

  def _stmt_ExportDefaultDeclaration(self, node: Node, depth: int) -> str:
    declaration = node["declaration"]
    if declaration.get("type") == "FunctionDeclaration":
      return "export default " + self._function(declaration, depth)
    return f"export default {self.expression(declaration, 1)};"

  def _stmt_inline(self, node: Node, depth: int) -> str:
    return self.statement(node, depth)[len(self.indent * depth) :]

  # --- Functions ---

  def _params(self, node: Node) -> str:
    return ", ".join(self.expression(param) for param in node.get("params", []))

  def _function(self, node: Node, depth: int) -> str:
    prefix = "async " if node.get("async") else ""
    star = "*" if node.get("generator") else ""
    name = f" {node['id']['name']}" if node.get("id") else ""
    return f"{prefix}function{star}{name}({self._params(node)}) {self._block(node['body'], depth)}"

  # --- Expressions ---

  def expression(self, node: Node, min_precedence: int = _LOW) -> str:
    """
    Renders an expression, parenthesizing it if it binds looser than ``min_precedence``.
    """
    kind = node.get("type")
    if kind in LITERAL_TYPES and kind != "TemplateLiteral":
      return self._literal(node)
    handler = getattr(self, f"_expr_{kind}", None)
    if handler is None:
      raise EmitError(f"Unsupported expression type: {kind}")
    text, precedence = handler(node)
    if precedence < min_precedence:
      return f"({text})"
    return text

  def _literal(self, node: Node) -> str:
    raw = node.get("raw") or (node.get("extra") or {}).get("raw")
    if raw is not None:
      return raw
    if node.get("type") == "NullLiteral":
      return "null"
    if node.get("type") == "RegExpLiteral":
      return f"/{node['pattern']}/{node.get('flags', '')}"
    if "regex" in node:
      return f"/{node['regex']['pattern']}/{node['regex'].get('flags', '')}"
    return raw_literal(node.get("value"))

  def _expr_Identifier(self, node: Node):
    return node["name"], _ATOMIC

  def _expr_ThisExpression(self, node: Node):
    return "this", _ATOMIC

  def _expr_TemplateLiteral(self, node: Node):
    parts = []
    expressions = node.get("expressions", [])
    for i, quasi in enumerate(node.get("quasis", [])):
      parts.append(quasi["value"]["raw"])
      if i < len(expressions):
        parts.append("${" + self.expression(expressions[i]) + "}")
    return "`" + "".join(parts) + "`", _ATOMIC

  def _expr_ParenthesizedExpression(self, node: Node):
    return f"({self.expression(node['expression'])})", _ATOMIC

  def _arguments(self, node: Node) -> str:
    return ", ".join(self.expression(arg, 1) for arg in node.get("arguments", []))

  def _expr_CallExpression(self, node: Node):
    callee = self.expression(node["callee"], _UNARY + 1)
    optional = "?." if node.get("optional") else ""
    return f"{callee}{optional}({self._arguments(node)})", _UNARY + 1

  def _expr_NewExpression(self, node: Node):
    return f"new {self.expression(node['callee'], _UNARY + 1)}({self._arguments(node)})", _UNARY + 1

  def _expr_MemberExpression(self, node: Node):
    obj = self.expression(node["object"], _UNARY + 1)
    if node.get("computed"):
      return f"{obj}[{self.expression(node['property'])}]", _UNARY + 1
    dot = "?." if node.get("optional") else "."
    return f"{obj}{dot}{self.expression(node['property'])}", _UNARY + 1

  def _binary(self, node: Node):
    operator = node["operator"]
    precedence = _PRECEDENCE[operator]
    if operator == "**":
      # Right-associative, and a unary base is a syntax error.
      left_min, right_min = _UNARY + 1, precedence
    else:
      left_min, right_min = precedence, precedence + 1
    if _mixes_nullish(operator, node["left"]):
      left_min = _ATOMIC
    if _mixes_nullish(operator, node["right"]):
      right_min = _ATOMIC
    left = self.expression(node["left"], left_min)
    right = self.expression(node["right"], right_min)
    return f"{left} {operator} {right}", precedence

  def _expr_LogicalExpression(self, node: Node):
    return self._binary(node)

  def _expr_BinaryExpression(self, node: Node):
    return self._binary(node)

  def _expr_UnaryExpression(self, node: Node):
    operator = node["operator"]
    space = " " if operator.isalpha() else ""
    return f"{operator}{space}{self.expression(node['argument'], _UNARY)}", _UNARY

  def _expr_UpdateExpression(self, node: Node):
    argument = self.expression(node["argument"], _UNARY)
    if node.get("prefix"):
      return f"{node['operator']}{argument}", _UNARY
    return f"{argument}{node['operator']}", _UNARY

  def _expr_AssignmentExpression(self, node: Node):
    left = self.expression(node["left"])
    return f"{left} {node['operator']} {self.expression(node['right'], 1)}", 1

  def _expr_ConditionalExpression(self, node: Node):
    test = self.expression(node["test"], 2)
    return f"{test} ? {self.expression(node['consequent'], 1)} : {self.expression(node['alternate'], 1)}", 1

  def _expr_ArrayExpression(self, node: Node):
    items = [self.expression(item, 1) if item is not None else "" for item in node.get("elements", [])]
    return "[" + ", ".join(items) + "]", _ATOMIC

  def _expr_ObjectExpression(self, node: Node):
    props = node.get("properties", [])
    if not props:
      return "{}", _ATOMIC
    return "{ " + ", ".join(self._property(prop) for prop in props) + " }", _ATOMIC

  def _property(self, prop: Node) -> str:
    if prop.get("type") in ("SpreadElement", "RestElement"):
      return "..." + self.expression(prop["argument"], 1)
    key = self.expression(prop["key"])
    if prop.get("computed"):
      key = f"[{key}]"
    if prop.get("shorthand"):
      return key
    return f"{key}: {self.expression(prop['value'], 1)}"

  def _expr_SpreadElement(self, node: Node):
    return "..." + self.expression(node["argument"], 1), 1

  def _expr_FunctionExpression(self, node: Node):
    return self._function(node, 0), _ATOMIC

  def _expr_ArrowFunctionExpression(self, node: Node):
    prefix = "async " if node.get("async") else ""
    body = node["body"]
    if body.get("type") == "BlockStatement":
      text = self._block(body, 0)
    else:
      text = self.expression(body, 1)
      if body.get("type") == "ObjectExpression":
        text = f"({text})"
    return f"{prefix}({self._params(node)}) => {text}", 1

  def _expr_ObjectPattern(self, node: Node):
    return "{ " + ", ".join(self._property(prop) for prop in node.get("properties", [])) + " }", _ATOMIC

  def _expr_ArrayPattern(self, node: Node):
    items = [self.expression(item) if item is not None else "" for item in node.get("elements", [])]
    return "[" + ", ".join(items) + "]", _ATOMIC

  def _expr_AssignmentPattern(self, node: Node):
    return f"{self.expression(node['left'])} = {self.expression(node['right'], 1)}", 1

  def _expr_RestElement(self, node: Node):
    return "..." + self.expression(node["argument"]), 1
