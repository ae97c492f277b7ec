"""
AST Scanners.

LibCST visitors and walkers used by the optimizer:

1.  `NameCollector` gathers every identifier spelled anywhere in a module, so
    the `ImportRegistry` can allocate local names that neither shadow nor are
    shadowed by existing code.
2.  `iter_nodes` walks a tree lazily in document order. The rewrite driver and
    the config-file extractor build their match sequences on top of it.
3.  `metadata_value` reads a resolved metadata entry, computing the deferred
    values that batched providers store.
"""

from typing import Any, Iterator, Mapping, Set

import libcst as cst


class NameCollector(cst.CSTVisitor):
  """
  Collects the value of every `Name` node in the visited tree.

  Import aliases, function parameters, attribute names and plain references
  are all included. Over-approximating is harmless: a collision only costs a
  different generated name.

  Attributes:
    names (Set[str]): Identifiers seen so far.
  """

  def __init__(self) -> None:
    self.names: Set[str] = set()

  def visit_Name(self, node: cst.Name) -> None:
    self.names.add(node.value)


def collect_names(node: cst.CSTNode) -> Set[str]:
  """
  Returns every identifier used in `node`.

  Args:
    node: Usually a `cst.Module`.

  Returns:
    Set[str]: The identifiers.
  """
  collector = NameCollector()
  node.visit(collector)
  return collector.names


def iter_nodes(node: cst.CSTNode) -> Iterator[cst.CSTNode]:
  """
  Yields `node` and all of its descendants in pre-order.

  Pre-order over LibCST children follows source position, so callers see
  nodes in the same order they appear in the file. The generator is lazy and,
  like any generator, cannot be restarted once consumed.

  Args:
    node: The root of the walk.

  Yields:
    cst.CSTNode: Each node of the subtree.
  """
  stack = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(current.children))


def metadata_value(resolved: Mapping[cst.CSTNode, Any], node: cst.CSTNode, default: Any = None) -> Any:
  """
  Reads one entry of a ``MetadataWrapper.resolve(...)`` mapping.

  Batched providers such as `QualifiedNameProvider` store a deferred value
  per node that must be called to produce the metadata; eager providers store
  the value itself. Both are returned here in their computed form.

  Args:
    resolved: Mapping returned by ``wrapper.resolve(Provider)``.
    node: The node to look up.
    default: Returned when the provider recorded nothing for `node`.

  Returns:
    Any: The metadata value, or `default`.
  """
  value = resolved.get(node, default)
  if callable(value):
    value = value()
  return value
