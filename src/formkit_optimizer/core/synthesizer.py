"""
Config Synthesizer.

Builds the configuration dict injected into a factory call::

    {"plugins": [bindings, library]}

The binding-behavior plugin always comes first: later plugins rely on it
being registered. The second plugin is the input library, imported either
from a per-type virtual module (``formkit_virtual.inputs.<type>``) or, when
the type is only known at runtime, from the all-inputs fallback module
(``formkit_virtual.library``).
"""

import keyword
import re

import libcst as cst

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.classifier import OptimizationDecision, StaticType
from formkit_optimizer.core.component import ComponentUse
from formkit_optimizer.core.import_registry import ImportRegistry, ImportSpec
from formkit_optimizer.utils.console import log_debug

PLUGINS_KEY = "plugins"

_NON_WORD = re.compile(r"\W", re.ASCII)


def module_segment(type_name: str) -> str:
  """
  Mangles an input type name into a valid module path segment.

  The mapping is not injective: names that differ only in punctuation, such as
  ``date-time`` and ``date_time``, share a segment and therefore a module. The
  exact name is kept by `input_specifier`.

  Args:
      type_name: The input type (e.g. ``"datetime-local"``).

  Returns:
      str: A deterministic identifier (e.g. ``"datetime_local"``).
  """
  segment = _NON_WORD.sub("_", type_name)
  if not segment or segment[0].isdigit():
    segment = f"_{segment}"
  if keyword.iskeyword(segment):
    segment = f"{segment}_"
  return segment


def input_specifier(type_name: str, config: OptimizerConfig) -> str:
  """Canonical virtual specifier of a per-type module, e.g. ``formkit_virtual:inputs:text``."""
  return f"{config.virtual_namespace}:{config.inputs_category}:{type_name}"


def library_specifier(config: OptimizerConfig) -> str:
  """Canonical virtual specifier of the fallback module, e.g. ``formkit_virtual:library``."""
  return f"{config.virtual_namespace}:{config.library_category}"


def specifier(decision: OptimizationDecision, config: OptimizerConfig) -> str:
  """Canonical virtual specifier of the input library chosen for `decision`."""
  if isinstance(decision, StaticType):
    return input_specifier(decision.value, config)
  return library_specifier(config)


def input_module_path(type_name: str, config: OptimizerConfig) -> str:
  """Importable module path of a per-type module, e.g. ``formkit_virtual.inputs.text``."""
  return f"{config.virtual_namespace}.{config.inputs_category}.{module_segment(type_name)}"


def fallback_module_path(config: OptimizerConfig) -> str:
  """Importable module path of the fallback module, e.g. ``formkit_virtual.library``."""
  return f"{config.virtual_namespace}.{config.library_category}"


def library_spec(decision: OptimizationDecision, config: OptimizerConfig) -> ImportSpec:
  """
  Selects the input-library import for a classification outcome.

  Args:
      decision: Result of the call-site classifier.
      config: Naming configuration.

  Returns:
      ImportSpec: The per-type module for `StaticType`, the fallback otherwise.
  """
  if isinstance(decision, StaticType):
    return ImportSpec(input_module_path(decision.value, config), config.library_export)
  return ImportSpec(fallback_module_path(config), config.library_export)


def synthesize(
  use: ComponentUse,
  decision: OptimizationDecision,
  registry: ImportRegistry,
  config: OptimizerConfig,
) -> cst.Dict:
  """
  Builds the configuration dict for one factory call.

  Args:
      use: The call being configured.
      decision: How its input type was classified.
      registry: Import registry of ``use.root``.
      config: Naming configuration.

  Returns:
      cst.Dict: ``{"plugins": [<bindings>, <library>]}`` with names bound in the module.
  """
  bindings = registry.ensure_import(ImportSpec(config.bindings_module, config.bindings_export))
  library = registry.ensure_import(library_spec(decision, config))
  source = specifier(decision, config)
  log_debug(f"{use.where}: {use.name} configured with plugins [{bindings}, {library}] from {source}")

  plugins = cst.List(elements=[cst.Element(cst.Name(bindings)), cst.Element(cst.Name(library))])
  return cst.Dict(elements=[cst.DictElement(key=cst.SimpleString(f'"{PLUGINS_KEY}"'), value=plugins)])
