"""
Optimizer Configuration Store.

Holds every well-known identifier the pass depends on: which exported callables
are component factories, where the binding-behavior plugin lives, how virtual
input-library modules are named, and which function defines a configuration
module.
"""

import keyword
import re
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field, field_validator

_DOTTED_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def _check_dotted(value: str, what: str) -> str:
  v_clean = value.strip()
  if not _DOTTED_PATH.match(v_clean) or any(keyword.iskeyword(p) for p in v_clean.split(".")):
    raise ValueError(f"Invalid {what}: '{value}'. Expected a dotted Python path (e.g. 'formkit.vue').")
  return v_clean


class OptimizerConfig(BaseModel):
  """
  Configuration container for the FormKit call-site optimizer.
  """

  factories: List[str] = Field(
    default_factory=lambda: ["formkit.vue.FormKit"],
    description="Fully qualified names of the component factories to optimize (module path + export).",
  )
  bindings_module: str = Field("formkit.vue", description="Module exporting the binding-behavior plugin.")
  bindings_export: str = Field("bindings", description="Export name of the binding-behavior plugin.")
  virtual_namespace: str = Field("formkit_virtual", description="Root package of the virtual input modules.")
  inputs_category: str = Field("inputs", description="Category holding one specialized module per input type.")
  library_category: str = Field("library", description="Category of the generic all-inputs fallback module.")
  library_export: str = Field("library", description="Export name of the input library plugin in virtual modules.")
  default_input_type: str = Field("text", description="Input type assumed when a call omits the 'type' prop.")
  config_function: str = Field(
    "define_formkit_config",
    description="Name of the function whose literal argument defines a configuration module.",
  )

  @field_validator("factories")
  @classmethod
  def validate_factories(cls, v: List[str]) -> List[str]:
    """
    Ensures each factory is a qualified `module.export` path.

    Args:
        v (List[str]): The raw factory names.

    Returns:
        List[str]: Cleaned names, duplicates removed, order preserved.

    Raises:
        ValueError: If a name is not a dotted path with at least one module segment.
    """
    cleaned: List[str] = []
    for name in v:
      path = _check_dotted(name, "factory name")
      if "." not in path:
        raise ValueError(f"Factory '{name}' must include its module path (e.g. 'formkit.vue.FormKit').")
      if path not in cleaned:
        cleaned.append(path)
    return cleaned

  @field_validator("bindings_module", "virtual_namespace")
  @classmethod
  def validate_module_path(cls, v: str) -> str:
    return _check_dotted(v, "module path")

  @field_validator("bindings_export", "inputs_category", "library_category", "library_export", "config_function")
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    v_clean = _check_dotted(v, "identifier")
    if "." in v_clean:
      raise ValueError(f"Invalid identifier: '{v}'. Dots are not allowed here.")
    return v_clean

  @field_validator("default_input_type")
  @classmethod
  def validate_default_type(cls, v: str) -> str:
    if not v.strip():
      raise ValueError("default_input_type must not be empty.")
    return v.strip()

  @property
  def factory_table(self) -> Dict[str, Tuple[str, str]]:
    """
    Lookup table of recognized factories.

    Returns:
        Dict[str, Tuple[str, str]]: Qualified name -> (module path, export name).
        e.g. ``{'formkit.vue.FormKit': ('formkit.vue', 'FormKit')}``.
    """
    table: Dict[str, Tuple[str, str]] = {}
    for qualified in self.factories:
      module, name = qualified.rsplit(".", 1)
      table[qualified] = (module, name)
    return table
