"""
Config-File Property Extractor.

Reads statically known settings out of a configuration module such as::

    from formkit import define_formkit_config

    config = define_formkit_config({"inputs": {"custom": custom_input}})

Only the literal shape of the defining call is used. Anything that would need
evaluation (a variable, a function call, a spread) is reported once and treated
as "no information".
"""

from typing import Optional

import libcst as cst

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.ast_utils import find_dict_value
from formkit_optimizer.core.classifier import DEOPT_PREFIX
from formkit_optimizer.core.scanners import iter_nodes
from formkit_optimizer.utils.console import log_warning


def find_config_call(config_module: cst.Module, function_name: str) -> Optional[cst.Call]:
  """
  Returns the first call to `function_name` (by bare name) in document order.
  """
  for node in iter_nodes(config_module):
    if isinstance(node, cst.Call) and isinstance(node.func, cst.Name) and node.func.value == function_name:
      return node
  return None


def lookup_property(
  config_module: cst.Module,
  function_name: str,
  property_key: str,
) -> Optional[cst.BaseExpression]:
  """
  Extracts the value node of a named property from the defining call.

  Args:
      config_module: The parsed configuration module.
      function_name: Name of the defining function (e.g. ``define_formkit_config``).
      property_key: Property to extract (e.g. ``inputs``).

  Returns:
      Optional[cst.BaseExpression]: The value node, or None when the call, the
      property, or a literal argument is missing.
  """
  call = find_config_call(config_module, function_name)
  if call is None:
    return None

  positional = [arg for arg in call.args if arg.keyword is None]
  if positional:
    first = positional[0]
    if not first.star and isinstance(first.value, cst.Dict):
      return find_dict_value(first.value, property_key)
    log_warning(f"{DEOPT_PREFIX} call {function_name} with an object literal to enable optimizations.")
    return None

  # define_formkit_config(inputs=...) is just as static as a dict display
  for arg in call.args:
    if arg.keyword is not None and arg.keyword.value == property_key:
      return arg.value
  return None


def lookup_config_property(
  config_module: cst.Module,
  property_key: str,
  config: Optional[OptimizerConfig] = None,
) -> Optional[cst.BaseExpression]:
  """
  `lookup_property` with the defining function taken from ``config.config_function``.
  """
  config = config or OptimizerConfig()
  return lookup_property(config_module, config.config_function, property_key)
