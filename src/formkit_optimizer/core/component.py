"""
Component Call Detection.

Finds invocations of the configured component factories. A call is eligible
only when its callee resolves, through the module's imports, to a known
(module path, export) pair. Matching by bare name would misfire on shadowed
or unrelated identifiers, so resolution is delegated to LibCST's
`QualifiedNameProvider`.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider, QualifiedNameProvider, QualifiedNameSource

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.scanners import iter_nodes, metadata_value


@dataclass
class ComponentUse:
  """
  One detected factory invocation.

  Attributes:
      call: The call expression node (as found in ``traverse.module``).
      root: The module owning the call.
      traverse: The metadata wrapper bound to `root`.
      source: Module path the factory was imported from (e.g. ``formkit.vue``).
      name: Exported name of the factory (e.g. ``FormKit``).
      line: 1-based source line of the call, if known.
      column: 0-based source column of the call, if known.
      filename: Name of the file being rewritten, for diagnostics.
  """

  call: cst.Call
  root: cst.Module
  traverse: MetadataWrapper
  source: str
  name: str
  line: Optional[int] = None
  column: Optional[int] = None
  filename: Optional[str] = None

  @property
  def positional_args(self) -> Sequence[cst.Arg]:
    """Leading positional arguments (stops at the first keyword or unpacking)."""
    args = []
    for arg in self.call.args:
      if arg.keyword is not None or arg.star:
        break
      args.append(arg)
    return args

  @property
  def props(self) -> Optional[cst.BaseExpression]:
    """The properties argument (second positional or ``props=``), or None if absent."""
    positional = self.positional_args
    if len(positional) > 1:
      return positional[1].value
    for arg in self.call.args:
      if arg.keyword is not None and arg.keyword.value == "props":
        return arg.value
    return None

  @property
  def has_keywords(self) -> bool:
    return any(arg.keyword is not None for arg in self.call.args)

  @property
  def is_configured(self) -> bool:
    """True if the call already carries a configuration argument."""
    if len(self.positional_args) > 2:
      return True
    return any(arg.keyword is not None and arg.keyword.value == "config" for arg in self.call.args)

  @property
  def has_unpacking(self) -> bool:
    """True if ``*args`` or ``**kwargs`` hide the argument positions."""
    return any(arg.star for arg in self.call.args)

  @property
  def where(self) -> str:
    """Human readable location, e.g. ``form.py:12:4``."""
    location = self.filename or "<module>"
    if self.line is not None:
      location = f"{location}:{self.line}:{self.column or 0}"
    return location


def _resolve_factory(names, table) -> Optional[str]:
  """
  Returns the factory a callee refers to, if every binding it may have is that factory.
  """
  if not names:
    return None
  qualified = {qn.name for qn in names}
  if len(qualified) != 1:
    return None
  if any(qn.source != QualifiedNameSource.IMPORT for qn in names):
    return None
  (name,) = qualified
  return name if name in table else None


def iter_component_uses(
  wrapper: MetadataWrapper,
  config: OptimizerConfig,
  filename: Optional[str] = None,
) -> Iterator[ComponentUse]:
  """
  Yields each eligible factory call of ``wrapper.module`` in document order.

  The sequence is lazy and finite; being a generator it cannot be restarted.

  Args:
      wrapper: Metadata wrapper of the module to scan.
      config: Supplies the factory lookup table.
      filename: Optional file name recorded on each use.

  Yields:
      ComponentUse: One record per eligible call.
  """
  table = config.factory_table
  qualified_names = wrapper.resolve(QualifiedNameProvider)
  positions = wrapper.resolve(PositionProvider)

  for node in iter_nodes(wrapper.module):
    if not isinstance(node, cst.Call):
      continue
    factory = _resolve_factory(metadata_value(qualified_names, node.func, set()), table)
    if factory is None:
      continue

    source, name = table[factory]
    line = column = None
    code_range = metadata_value(positions, node)
    if code_range is not None:
      line, column = code_range.start.line, code_range.start.column

    yield ComponentUse(
      call=node,
      root=wrapper.module,
      traverse=wrapper,
      source=source,
      name=name,
      line=line,
      column=column,
      filename=filename,
    )
