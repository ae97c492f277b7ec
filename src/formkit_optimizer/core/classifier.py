"""
Call-Site Classifier.

Decides, from the shape of a factory call's props argument alone, whether the
input type is statically known. Nothing is evaluated: a value is literal only
if its node is a plain string literal.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

import libcst as cst

from formkit_optimizer.core.ast_utils import find_dict_value, string_value
from formkit_optimizer.utils.console import log_warning

DEOPT_PREFIX = "[FormKit de-opt]"
TYPE_PROP = "type"


@dataclass(frozen=True)
class StaticType:
  """The input type is known at compile time."""

  value: str


@dataclass(frozen=True)
class Dynamic:
  """The input type is only known at runtime."""


OptimizationDecision = Union[StaticType, Dynamic]


def classify(
  props: Optional[cst.BaseExpression],
  default_type: str = "text",
  where: str = "",
  warnings: Optional[List[str]] = None,
) -> OptimizationDecision:
  """
  Classifies a factory call by its props argument.

  Args:
      props: The second positional argument of the call, or None if absent.
      default_type: Type assumed when no ``"type"`` key is given.
      where: Location label for the diagnostic (e.g. ``"form.py:12"``).
      warnings: Optional sink receiving the text of any warning emitted.

  Returns:
      OptimizationDecision: `StaticType` when the type is a literal or absent,
      `Dynamic` otherwise. A ``**spread`` after the last ``"type"`` key counts
      as a bound type.
  """
  if props is None:
    return StaticType(default_type)

  if isinstance(props, cst.Dict):
    type_node = find_dict_value(props, TYPE_PROP)
    if not _spread_after_type(props):
      if type_node is None:
        return StaticType(default_type)
      value = string_value(type_node)
      if value is not None:
        return StaticType(value)

  # No literal type survives to runtime
  location = f" {where}:" if where else ""
  message = f"{DEOPT_PREFIX}{location} Input uses bound type prop, skipping optimization."
  log_warning(message)
  if warnings is not None:
    warnings.append(message)
  return Dynamic()


def _spread_after_type(props: cst.Dict) -> bool:
  """
  True if a ``**spread`` follows the last literal ``"type"`` key (or there is no such key).

  A later spread may override the type at runtime.
  """
  spread = False
  for element in props.elements:
    if isinstance(element, cst.StarredDictElement):
      spread = True
    elif string_value(element.key) == TYPE_PROP:
      spread = False
  return spread
