"""
formkit-optimizer Package.

A compile-time pass that injects plugin configuration into FormKit component
factory calls, so that each call site imports only the input library it uses.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import formkit_optimizer as fko
    code = '''
    from formkit.vue import FormKit
    FormKit(el, {"type": "email"})
    '''
    result = fko.optimize(code)
    print(result.code)
    # from formkit.vue import FormKit
    # from formkit.vue import bindings
    # from formkit_virtual.inputs.email import library
    # FormKit(el, {"type": "email"}, {"plugins": [bindings, library]})

Advanced Usage (CST)
^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import libcst as cst
    from formkit_optimizer import FormKitRewriter, OptimizerConfig

    config = OptimizerConfig(factories=["my_forms.components.Field"])
    module = FormKitRewriter(config, filename="form.py").rewrite(cst.parse_module(source))
"""

from typing import Optional

import libcst as cst

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.config_file import lookup_config_property, lookup_property
from formkit_optimizer.core.result import OptimizationResult
from formkit_optimizer.core.rewriter import FormKitRewriter, rewrite
from formkit_optimizer.utils.console import log_error

__version__ = "0.0.1"


def optimize(
  code: str,
  config: Optional[OptimizerConfig] = None,
  filename: Optional[str] = None,
) -> OptimizationResult:
  """
  Optimizes the FormKit factory calls of a source string.

  Args:
      code (str): The module source.
      config (OptimizerConfig, optional): Identifiers of the factories, plugin
          modules and virtual input modules. Defaults to FormKit's.
      filename (str, optional): File label used in diagnostics.

  Returns:
      OptimizationResult: The rewritten code plus counters and advisory warnings.
      A module that fails to parse yields ``success=False`` and the original code.
  """
  try:
    module = cst.parse_module(code)
  except cst.ParserSyntaxError as e:
    message = f"{filename or '<module>'}: Parse Error: {e}"
    log_error(message)
    return OptimizationResult(code=code, errors=[message], success=False)

  rewriter = FormKitRewriter(config, filename)
  updated = rewriter.rewrite(module)
  return OptimizationResult(
    code=updated.code,
    rewritten=rewriter.rewritten,
    skipped=rewriter.skipped,
    warnings=list(rewriter.warnings),
  )


__all__ = [
  "FormKitRewriter",
  "OptimizationResult",
  "OptimizerConfig",
  "lookup_config_property",
  "lookup_property",
  "optimize",
  "rewrite",
  "__version__",
]
