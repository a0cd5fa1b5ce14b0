"""
Tree Host Protocol.

The expansion engine never touches a concrete syntax tree. It builds, reads
and mutates nodes only through this protocol, which a host implementation
supplies for one module. ``debug_macros.estree.host.EstreeHost`` is the
implementation for ESTree JSON; tests may substitute any other.

Handles named ``Site`` below are opaque path objects issued by the host; the
engine only hands them back.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple

Node = Any
Site = Any


class BindingInfo(Protocol):
  """What the engine needs to know about a module-level binding."""

  name: str
  kind: str

  @property
  def source(self) -> Optional[str]: ...

  @property
  def path(self) -> Site: ...


class TreeHost(Protocol):
  """Node builder and mutator capabilities for one module."""

  # --- Construction ---

  def identifier(self, name: str) -> Node: ...

  def literal(self, value: Any) -> Node: ...

  def call(self, callee: Node, arguments: List[Node]) -> Node: ...

  def member(self, obj: Node, prop: str) -> Node: ...

  def logical_and(self, left: Node, right: Node) -> Node: ...

  def parenthesized(self, expression: Node) -> Node: ...

  def const_declaration(self, name: str, value: Node) -> Node: ...

  def clone(self, node: Node) -> Node: ...

  # --- Inspection ---

  def is_identifier(self, node: Node) -> bool: ...

  def callee_name(self, call: Node) -> Optional[str]:
    """Name of the callee when it is a plain identifier, else None."""
    ...

  def call_arguments(self, call: Node) -> List[Node]: ...

  def string_value(self, node: Node) -> Optional[str]: ...

  def static_properties(self, node: Node) -> Optional[Dict[str, Any]]:
    """Static key -> literal value of an object literal; None for non-objects."""
    ...

  def line_of(self, node: Node) -> Optional[int]: ...

  # --- Traversal ---

  def import_declarations(self) -> List[Site]: ...

  def import_source(self, site: Site) -> Optional[str]: ...

  def import_specifiers(self, site: Site) -> List[Tuple[str, str]]:
    """(imported name, local name) pairs of the named specifiers."""
    ...

  def expression_statements(self) -> List[Site]: ...

  def statement_expression(self, site: Site) -> Node: ...

  def is_attached(self, site: Site) -> bool:
    """False once the site, or a statement enclosing it, has been removed."""
    ...

  # --- Scope ---

  def get_binding(self, name: str) -> Optional[BindingInfo]: ...

  def generate_uid(self, name: str) -> str: ...

  # --- Mutation ---

  def replace_expression(self, site: Site, expression: Node) -> None: ...

  def replace_with_multiple(self, site: Site, nodes: List[Node]) -> None: ...

  def remove(self, site: Site) -> None: ...

  def set_import_source(self, site: Site, source: str) -> None: ...

  def insert_at_top(self, node: Node) -> None: ...
