"""
Tests for factory call detection by resolved import origin.

Verifies that:
1. `from ... import` and `import ... as` bindings resolve to the factory.
2. Shadowed, rebound or unrelated same-named callees are ignored.
3. Uses are produced lazily in document order, with positions.
"""

import textwrap

import libcst as cst
from libcst.metadata import MetadataWrapper

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.component import iter_component_uses


def uses_of(code: str, config: OptimizerConfig = None):
  wrapper = MetadataWrapper(cst.parse_module(textwrap.dedent(code).lstrip("\n")))
  return list(iter_component_uses(wrapper, config or OptimizerConfig(), filename="form.py"))


def test_from_import():
  (use,) = uses_of(
    """
    from formkit.vue import FormKit
    FormKit(el, {"type": "text"})
    """
  )
  assert (use.source, use.name) == ("formkit.vue", "FormKit")
  assert use.where == "form.py:2:0"
  assert use.props is not None


def test_from_import_alias():
  assert len(uses_of("from formkit.vue import FormKit as F\nF(el)\n")) == 1


def test_module_import_alias():
  assert len(uses_of("import formkit.vue as fv\nfv.FormKit(el)\n")) == 1
  assert len(uses_of("import formkit.vue\nformkit.vue.FormKit(el)\n")) == 1


def test_same_name_from_other_module_is_ignored():
  assert uses_of("from other.forms import FormKit\nFormKit(el)\n") == []


def test_undefined_name_is_ignored():
  assert uses_of("FormKit(el)\n") == []


def test_unrelated_calls_without_factory_import():
  code = """
  import os
  from formkit.vue import bindings
  os.path.join(root, name)
  print(len(items))
  bindings(el)
  """
  assert uses_of(code) == []


def test_shadowed_parameter_is_ignored():
  code = """
  from formkit.vue import FormKit

  def render(FormKit):
    return FormKit(el)
  """
  assert uses_of(code) == []


def test_rebound_name_is_ignored():
  code = """
  from formkit.vue import FormKit
  FormKit = make_factory()
  FormKit(el)
  """
  assert uses_of(code) == []


def test_document_order_and_nesting():
  code = """
  from formkit.vue import FormKit
  a = FormKit(el, {"type": "email"})
  b = wrap(FormKit(el, {"type": "group"}, children=[FormKit(el, {"type": "text"})]))
  """
  uses = uses_of(code)
  assert [use.props.elements[0].value.evaluated_value for use in uses] == ["email", "group", "text"]
  assert [use.line for use in uses] == [2, 3, 3]


def test_uses_are_lazy():
  wrapper = MetadataWrapper(cst.parse_module("from formkit.vue import FormKit\nFormKit(a)\nFormKit(b)\n"))
  uses = iter_component_uses(wrapper, OptimizerConfig())

  first = next(uses)
  assert first.call.args[0].value.value == "a"
  assert len(list(uses)) == 1
  assert list(uses) == []


def test_custom_factory_table():
  config = OptimizerConfig(factories=["my_forms.components.Field"])
  code = """
  from my_forms.components import Field
  from formkit.vue import FormKit
  Field(el)
  FormKit(el)
  """
  (use,) = uses_of(code, config)
  assert use.name == "Field"


def test_argument_shape_helpers():
  (plain, configured, by_keyword, unpacked) = uses_of(
    """
    from formkit.vue import FormKit
    FormKit(el)
    FormKit(el, {}, {"plugins": []})
    FormKit(el, props={"type": "text"}, config=cfg)
    FormKit(*args)
    """
  )
  assert plain.props is None and not plain.is_configured
  assert configured.is_configured
  assert by_keyword.is_configured and by_keyword.has_keywords
  assert by_keyword.props is not None
  assert unpacked.has_unpacking
