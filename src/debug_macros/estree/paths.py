"""
Node Paths for In-Place Tree Surgery.

A ``NodePath`` remembers where a node lives (its parent container and the key
within it) so the node can be replaced or removed after the traversal that
found it has finished. Positions inside list containers are resolved by node
identity at mutation time, so removing one statement never invalidates the
paths of its siblings.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Union

from debug_macros.estree.nodes import Node, is_node

# Keys holding positional metadata rather than child nodes.
_METADATA_KEYS = frozenset({"loc", "range", "start", "end", "extra", "comments", "leadingComments", "trailingComments"})


@dataclass
class NodePath:
  """
  Location of a node inside its parent.

  Attributes:
      node: The node itself.
      parent: The node owning ``container`` (None for the root).
      container: Either the parent node dict or a list field of the parent.
      key: Field name when ``container`` is a dict; field name of the list otherwise.
      parent_path: Path of ``parent`` when found by ``walk`` (None at the top).
  """

  node: Node
  parent: Optional[Node]
  container: Union[Node, List[Node], None]
  key: Optional[str]
  parent_path: Optional["NodePath"] = field(default=None, repr=False, compare=False)

  @property
  def attached(self) -> bool:
    """True while the node and every ancestor up to the top are still in place."""
    path: Optional[NodePath] = self
    while path is not None:
      if not path._in_container():
        return False
      path = path.parent_path
    return True

  def _in_container(self) -> bool:
    if isinstance(self.container, list):
      return self._index() is not None
    if isinstance(self.container, dict):
      return self.container.get(self.key) is self.node
    return False

  def _index(self) -> Optional[int]:
    for i, item in enumerate(self.container):
      if item is self.node:
        return i
    return None

  def _require_index(self) -> int:
    index = self._index()
    if index is None:
      raise RuntimeError(f"{self.node.get('type')} node is no longer attached to its parent")
    return index

  def replace_with(self, replacement: Node) -> None:
    """
    Substitutes ``replacement`` for the node at this location.

    The path then tracks the replacement.
    """
    if isinstance(self.container, list):
      self.container[self._require_index()] = replacement
    elif isinstance(self.container, dict):
      self.container[self.key] = replacement
    else:
      raise RuntimeError("Cannot replace the root node")
    self.node = replacement

  def replace_with_multiple(self, replacements: Sequence[Node]) -> None:
    """
    Splices several nodes into a list container in place of this node.

    Raises:
        RuntimeError: If the node does not live in a list (e.g. an expression slot).
    """
    if not isinstance(self.container, list):
      raise RuntimeError("replace_with_multiple requires a statement list container")
    index = self._require_index()
    self.container[index : index + 1] = list(replacements)

  def remove(self) -> None:
    if isinstance(self.container, list):
      del self.container[self._require_index()]
    elif isinstance(self.container, dict):
      # Statement slots such as `if (x) stmt;` must keep holding a statement.
      if self.node.get("type", "").endswith("Statement"):
        self.container[self.key] = {"type": "EmptyStatement"}
      else:
        self.container[self.key] = None
    else:
      raise RuntimeError("Cannot remove the root node")


def _children(node: Node, parent_path: Optional[NodePath]) -> Iterator[NodePath]:
  for key, value in node.items():
    if key in _METADATA_KEYS:
      continue
    if isinstance(value, list):
      for item in value:
        if is_node(item):
          yield NodePath(item, node, value, key, parent_path)
    elif is_node(value):
      yield NodePath(value, node, node, key, parent_path)


def walk(root: Node) -> Iterator[NodePath]:
  """
  Pre-order traversal over every node below ``root`` (root excluded).

  Children are visited in field order, which for parser output is source order.
  """
  stack: List[Iterator[NodePath]] = [_children(root, None)]
  while stack:
    try:
      path = next(stack[-1])
    except StopIteration:
      stack.pop()
      continue
    yield path
    stack.append(_children(path.node, path))


def collect(root: Node, *types: str) -> List[NodePath]:
  """
  Snapshot of all paths whose node type is one of ``types``, in source order.

  Taking a snapshot lets callers mutate the tree while consuming the result.
  """
  wanted = set(types)
  return [path for path in walk(root) if path.node.get("type") in wanted]
