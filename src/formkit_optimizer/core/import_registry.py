"""
Import Registry.

Resolves desired imports (`ImportSpec`) to local bindings inside a single
module. Existing ``from X import Y`` statements are reused; new statements are
queued and written into the module's import section by `ImportRegistry.apply`.

A registry is bound to exactly one module for the duration of one rewrite and
must not be shared across modules.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

import libcst as cst
from libcst.metadata import MetadataWrapper, ScopeProvider

from formkit_optimizer.core.ast_utils import create_dotted_name, get_full_name, leading_imports_end
from formkit_optimizer.core.scanners import collect_names, metadata_value
from formkit_optimizer.utils.console import log_debug


@dataclass(frozen=True)
class ImportSpec:
  """
  A desired import: the exported `name` of module `source`.

  Equality is structural, so two specs built independently for the same
  pair address the same binding.
  """

  source: str
  name: str

  @property
  def qualified_name(self) -> str:
    return f"{self.source}.{self.name}"


class ImportRegistry:
  """
  Single-owner builder of import bindings for one module.

  Attributes:
      _bindings (Dict[ImportSpec, str]): Spec -> local name, for existing and queued imports.
      _taken (Set[str]): Identifiers that a generated name must avoid.
      _pending (List[cst.SimpleStatementLine]): New import statements, in request order.
  """

  def __init__(self, module: cst.Module, wrapper: Optional[MetadataWrapper] = None) -> None:
    """
    Indexes the reusable imports of `module`.

    Only ``from X import Y`` statements in the leading import section are
    candidates, so a reused name is bound before any call site runs. A name is
    reused only if nothing else in the module (a parameter, an assignment, a
    later import) binds it too.

    Args:
        module: The module that will receive new imports.
        wrapper: Metadata wrapper whose ``module`` is `module`. One is created
            (without copying) when omitted.
    """
    self._bindings: Dict[ImportSpec, str] = {}
    self._taken: Set[str] = collect_names(module)
    self._pending: List[cst.SimpleStatementLine] = []

    wrapper = wrapper or MetadataWrapper(module, unsafe_skip_copy=True)
    binders = _binding_nodes(wrapper)

    leading: Dict[str, Set[ImportSpec]] = {}
    leading_nodes: Set[cst.ImportFrom] = set()
    candidates: List[Tuple[ImportSpec, str]] = []
    for stmt in module.body[: leading_imports_end(module)]:
      for node in _import_froms(stmt):
        leading_nodes.add(node)
        for spec, local in _imported_specs(node):
          leading.setdefault(local, set()).add(spec)
          candidates.append((spec, local))

    for spec, local in candidates:
      if leading[local] != {spec}:
        continue
      if any(binder not in leading_nodes for binder in binders.get(local, [])):
        log_debug(f"'{local}' is rebound in the module, not reusing it for '{spec.qualified_name}'")
        continue
      # First import of a pair wins; later duplicates bind the same object anyway.
      self._bindings.setdefault(spec, local)

  @property
  def has_pending(self) -> bool:
    return bool(self._pending)

  def lookup(self, spec: ImportSpec) -> str:
    """Returns the known binding for `spec`, or an empty string."""
    return self._bindings.get(spec, "")

  def ensure_import(self, spec: ImportSpec) -> str:
    """
    Returns a local name bound to `spec`, queueing an import when needed.

    Args:
        spec: The desired (source, name) pair.

    Returns:
        str: The local identifier to reference in the module.
    """
    existing = self._bindings.get(spec)
    if existing:
      return existing

    local = self._unique_name(spec.name)
    asname = None
    if local != spec.name:
      asname = cst.AsName(name=cst.Name(local))

    stmt = cst.SimpleStatementLine(
      body=[
        cst.ImportFrom(
          module=create_dotted_name(spec.source),
          names=[cst.ImportAlias(name=cst.Name(spec.name), asname=asname)],
        )
      ]
    )
    self._pending.append(stmt)
    self._bindings[spec] = local
    self._taken.add(local)
    log_debug(f"Queued import of '{spec.qualified_name}' as '{local}'")
    return local

  def _unique_name(self, preferred: str) -> str:
    """
    Picks `preferred` or the first free candidate of ``_name``, ``_name2``, ...
    """
    if preferred not in self._taken:
      return preferred
    candidate = f"_{preferred}"
    counter = 1
    while candidate in self._taken:
      counter += 1
      candidate = f"_{preferred}{counter}"
    return candidate

  def apply(self, module: cst.Module) -> cst.Module:
    """
    Writes queued import statements into the module's import section.

    Statements are placed after the docstring and leading imports, in the
    order they were requested. The queue is emptied.

    Args:
        module: The module to update (the registry's module or a transform of it).

    Returns:
        cst.Module: The module with imports added, or `module` itself when
        nothing was queued.
    """
    if not self._pending:
      return module

    body = list(module.body)
    insert_idx = leading_imports_end(module)
    new_body = body[:insert_idx] + self._pending + body[insert_idx:]
    self._pending = []
    return module.with_changes(body=new_body)


def _import_froms(stmt: cst.CSTNode) -> Iterator[cst.ImportFrom]:
  """
  Yields the ``from`` imports of a leading statement (a line or a ``try:`` block).
  """
  lines: Sequence[cst.CSTNode] = [stmt]
  if isinstance(stmt, cst.Try) and isinstance(stmt.body, cst.IndentedBlock):
    lines = stmt.body.body
  for line in lines:
    if isinstance(line, cst.SimpleStatementLine):
      for small in line.body:
        if isinstance(small, cst.ImportFrom):
          yield small


def _imported_specs(node: cst.ImportFrom) -> Iterator[Tuple[ImportSpec, str]]:
  """
  Yields (spec, local name) for each name of an absolute, non-star import.
  """
  if node.relative or node.module is None or isinstance(node.names, cst.ImportStar):
    return
  source = get_full_name(node.module)
  for alias in node.names:
    exported = get_full_name(alias.name)
    local = exported
    if alias.asname and isinstance(alias.asname.name, cst.Name):
      local = alias.asname.name.value
    yield ImportSpec(source, exported), local


def _binding_nodes(wrapper: MetadataWrapper) -> Dict[str, List[cst.CSTNode]]:
  """
  Maps each name to the nodes that bind it, across every scope of the module.
  """
  scopes = wrapper.resolve(ScopeProvider)
  seen: Dict[int, object] = {}
  for node in scopes:
    scope = metadata_value(scopes, node)
    if scope is not None:
      seen.setdefault(id(scope), scope)

  binders: Dict[str, List[cst.CSTNode]] = {}
  for scope in seen.values():
    for assignment in scope.assignments:
      binders.setdefault(assignment.name, []).append(getattr(assignment, "node", None))
  return binders
