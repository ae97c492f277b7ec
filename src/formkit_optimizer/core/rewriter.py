"""
Rewrite Driver.

Orchestrates the optimization of one module:

1.  **Detection**: `iter_component_uses` yields factory calls in document order.
2.  **Classification**: each call's props decide between a per-type input
    library and the generic fallback.
3.  **Synthesis**: a ``{"plugins": [...]}`` dict is built, with imports
    requested from the module's `ImportRegistry`.
4.  **Splicing**: the dict is inserted as the call's third positional argument,
    then queued imports are written into the module.

Calls that already carry a configuration are left alone, so running the pass
over its own output changes nothing.
"""

from typing import Dict, List, Optional

import libcst as cst
from libcst.metadata import MetadataWrapper

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.classifier import DEOPT_PREFIX, classify
from formkit_optimizer.core.component import ComponentUse, iter_component_uses
from formkit_optimizer.core.import_registry import ImportRegistry
from formkit_optimizer.core.synthesizer import synthesize
from formkit_optimizer.utils.console import log_debug, log_warning

CONFIG_POSITION = 2
CONFIG_KEYWORD = "config"

# Keyword arguments are written PEP 8 style: config={...}
_TIGHT_EQUAL = cst.AssignEqual(whitespace_before=cst.SimpleWhitespace(""), whitespace_after=cst.SimpleWhitespace(""))


class _ConfigInjector(cst.CSTTransformer):
  """
  Splices prepared configuration dicts into their calls.

  Lookups use the original node identity, so nested factory calls are each
  updated even after their parents' children have been replaced.
  """

  def __init__(self, configs: Dict[cst.Call, cst.Dict]) -> None:
    self._configs = configs

  def leave_Call(self, original_node: cst.Call, updated_node: cst.Call) -> cst.Call:
    config = self._configs.get(original_node)
    if config is None:
      return updated_node
    return attach_config(updated_node, config)


def attach_config(call: cst.Call, config: cst.Dict) -> cst.Call:
  """
  Adds `config` to `call` after its props argument.

  The config goes in the third positional slot. Missing leading positions are
  filled with ``None``. When the call passes its leading arguments by keyword,
  a ``config=`` keyword is appended instead, since positional slots cannot
  follow keywords.

  Args:
      call: The call to extend.
      config: The configuration dict.

  Returns:
      cst.Call: The updated call.
  """
  args = list(call.args)
  positional = 0
  for arg in args:
    if arg.keyword is not None or arg.star:
      break
    positional += 1

  if positional < CONFIG_POSITION and positional < len(args):
    new_arg = cst.Arg(value=config, keyword=cst.Name(CONFIG_KEYWORD), equal=_TIGHT_EQUAL)
    return call.with_changes(args=_append_arg(args, new_arg))

  while positional < CONFIG_POSITION:
    args.insert(positional, cst.Arg(value=cst.Name("None")))
    positional += 1

  new_arg = cst.Arg(value=config)
  if CONFIG_POSITION == len(args):
    return call.with_changes(args=_append_arg(args, new_arg))
  args.insert(CONFIG_POSITION, new_arg)
  return call.with_changes(args=args)


def _append_arg(args: List[cst.Arg], new_arg: cst.Arg) -> List[cst.Arg]:
  """
  Appends `new_arg`, moving an explicit trailing comma onto it.
  """
  if args and isinstance(args[-1].comma, cst.Comma):
    new_arg = new_arg.with_changes(comma=args[-1].comma)
    args[-1] = args[-1].with_changes(comma=cst.MaybeSentinel.DEFAULT)
  return args + [new_arg]


class FormKitRewriter:
  """
  Injects plugin configuration into component factory calls of a module.

  One instance may process several modules in turn; every call to `rewrite`
  uses a fresh `ImportRegistry` scoped to that module.

  Attributes:
      config (OptimizerConfig): Well-known identifiers used by the pass.
      filename (Optional[str]): File label for diagnostics.
      warnings (List[str]): Advisory messages emitted so far.
      rewritten (int): Calls that received a configuration.
      skipped (int): Calls that were left untouched.
  """

  def __init__(self, config: Optional[OptimizerConfig] = None, filename: Optional[str] = None) -> None:
    self.config = config or OptimizerConfig()
    self.filename = filename
    self.warnings: List[str] = []
    self.rewritten = 0
    self.skipped = 0

  def _report_warning(self, message: str) -> None:
    log_warning(message)
    self.warnings.append(message)

  def _prepare(self, use: ComponentUse, registry: ImportRegistry) -> Optional[cst.Dict]:
    """
    Classifies and synthesizes the configuration for one call.

    Returns:
        Optional[cst.Dict]: The config to attach, or None if the call is skipped.
    """
    if use.is_configured:
      log_debug(f"{use.where}: {use.name} already configured, skipping")
      return None
    if use.has_unpacking:
      self._report_warning(f"{DEOPT_PREFIX} {use.where}: {use.name} uses argument unpacking, skipping optimization.")
      return None

    decision = classify(use.props, self.config.default_input_type, use.where, self.warnings)
    return synthesize(use, decision, registry, self.config)

  def rewrite(self, module: cst.Module) -> cst.Module:
    """
    Rewrites every eligible factory call of `module`.

    Args:
        module: The parsed module.

    Returns:
        cst.Module: The updated module, or `module` itself if no call was changed.
    """
    wrapper = MetadataWrapper(module)
    registry = ImportRegistry(wrapper.module, wrapper)
    configs: Dict[cst.Call, cst.Dict] = {}

    for use in iter_component_uses(wrapper, self.config, self.filename):
      config = self._prepare(use, registry)
      if config is None:
        self.skipped += 1
        continue
      configs[use.call] = config
      self.rewritten += 1

    if not configs:
      return module

    updated = wrapper.module.visit(_ConfigInjector(configs))
    return registry.apply(updated)


def rewrite(
  module: cst.Module,
  config: Optional[OptimizerConfig] = None,
  filename: Optional[str] = None,
) -> cst.Module:
  """
  Convenience wrapper: rewrites `module` with a one-off `FormKitRewriter`.

  Args:
      module: The parsed module.
      config: Optional configuration (defaults to FormKit's identifiers).
      filename: Optional file label for diagnostics.

  Returns:
      cst.Module: The updated module.
  """
  return FormKitRewriter(config, filename).rewrite(module)
