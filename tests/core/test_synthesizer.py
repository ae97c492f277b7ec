"""
Tests for the Config Synthesizer and virtual module naming.
"""

import logging
import textwrap

import libcst as cst
import pytest
from libcst.metadata import MetadataWrapper

from formkit_optimizer.config import OptimizerConfig
from formkit_optimizer.core.ast_utils import capture_node_source
from formkit_optimizer.core.classifier import Dynamic, StaticType
from formkit_optimizer.core.component import iter_component_uses
from formkit_optimizer.core.import_registry import ImportRegistry, ImportSpec
from formkit_optimizer.core.synthesizer import (
  fallback_module_path,
  input_module_path,
  input_specifier,
  library_spec,
  library_specifier,
  module_segment,
  specifier,
  synthesize,
)

SOURCE = textwrap.dedent(
  """\
  from formkit.vue import FormKit
  FormKit(el, {"type": "email"})
  """
)


@pytest.fixture
def use_and_registry(config):
  wrapper = MetadataWrapper(cst.parse_module(SOURCE))
  (use,) = list(iter_component_uses(wrapper, config))
  return use, ImportRegistry(wrapper.module)


def test_static_config_shape(use_and_registry, config):
  use, registry = use_and_registry
  node = synthesize(use, StaticType("email"), registry, config)

  assert capture_node_source(node) == '{"plugins": [bindings, library]}'
  assert len(node.elements) == 1
  assert registry.lookup(ImportSpec("formkit.vue", "bindings")) == "bindings"
  assert registry.lookup(ImportSpec("formkit_virtual.inputs.email", "library")) == "library"


def test_dynamic_config_uses_fallback(use_and_registry, config):
  use, registry = use_and_registry
  node = synthesize(use, Dynamic(), registry, config)

  assert capture_node_source(node) == '{"plugins": [bindings, library]}'
  assert registry.lookup(ImportSpec("formkit_virtual.library", "library")) == "library"
  assert registry.lookup(ImportSpec("formkit_virtual.inputs.email", "library")) == ""


@pytest.mark.parametrize("decision", [StaticType("text"), StaticType("email"), Dynamic()])
def test_bindings_always_first(use_and_registry, config, decision):
  use, registry = use_and_registry
  node = synthesize(use, decision, registry, config)

  (element,) = node.elements
  assert element.key.evaluated_value == "plugins"
  first = element.value.elements[0].value
  assert first.value == registry.lookup(ImportSpec("formkit.vue", "bindings"))


def test_repeat_synthesis_reuses_bindings(use_and_registry, config):
  use, registry = use_and_registry
  synthesize(use, StaticType("text"), registry, config)
  node = synthesize(use, StaticType("email"), registry, config)

  assert capture_node_source(node) == '{"plugins": [bindings, _library]}'


def test_specifiers(config):
  assert input_specifier("text", config) == "formkit_virtual:inputs:text"
  assert library_specifier(config) == "formkit_virtual:library"
  assert input_module_path("text", config) == "formkit_virtual.inputs.text"
  assert fallback_module_path(config) == "formkit_virtual.library"


def test_custom_namespace():
  config = OptimizerConfig(virtual_namespace="myforms.virtual", library_export="lib")
  assert library_spec(StaticType("range"), config) == ImportSpec("myforms.virtual.inputs.range", "lib")
  assert library_spec(Dynamic(), config) == ImportSpec("myforms.virtual.library", "lib")


@pytest.mark.parametrize(
  "type_name, segment",
  [
    ("text", "text"),
    ("datetime-local", "datetime_local"),
    ("2fa", "_2fa"),
    ("class", "class_"),
    ("my.input", "my_input"),
  ],
)
def test_module_segment(type_name, segment):
  assert module_segment(type_name) == segment


def test_module_segment_is_not_injective(config):
  assert module_segment("date-time") == module_segment("date_time") == "date_time"
  assert input_module_path("date-time", config) == input_module_path("date_time", config)
  # The canonical specifiers still tell the two apart
  assert input_specifier("date-time", config) != input_specifier("date_time", config)


def test_specifier_follows_decision(config):
  assert specifier(StaticType("datetime-local"), config) == "formkit_virtual:inputs:datetime-local"
  assert specifier(Dynamic(), config) == "formkit_virtual:library"


def test_debug_log_names_virtual_specifier(use_and_registry, config, caplog):
  caplog.set_level(logging.DEBUG)
  use, registry = use_and_registry
  synthesize(use, StaticType("email"), registry, config)
  synthesize(use, Dynamic(), registry, config)

  messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
  assert any(m.endswith("from formkit_virtual:inputs:email") for m in messages)
  assert any(m.endswith("from formkit_virtual:library") for m in messages)
