"""
AST Utilities.

Static helpers for inspecting and constructing LibCST nodes: dotted names,
string literals, dict displays and the leading import section of a module.
"""

from typing import Optional, Union

import libcst as cst

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.parse_module("")


def get_full_name(node: cst.BaseExpression) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted representation (e.g., "formkit.vue"), or an empty string
    if the node is not a Name/Attribute chain.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("formkit"), attr=cst.Name("vue")))
    'formkit.vue'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    if base:
      return f"{base}.{node.attr.value}"
  return ""


def create_dotted_name(name_str: str) -> Union[cst.Name, cst.Attribute]:
  """
  Creates a CST node structure for a dotted path string.

  Args:
      name_str (str): Dot-separated path (e.g. "formkit_virtual.inputs.text").

  Returns:
      Union[cst.Name, cst.Attribute]: The constructed AST node.
  """
  parts = name_str.split(".")
  node = cst.Name(parts[0])
  for part in parts[1:]:
    node = cst.Attribute(value=node, attr=cst.Name(part))
  return node


def capture_node_source(node: cst.CSTNode) -> str:
  """
  Renders a LibCST node into Python source, whether it is attached to a
  parsed tree or freshly constructed.

  Args:
      node: The CST node to serialise.

  Returns:
      str: The Python code string.
  """
  return _RENDER_CTX.code_for_node(node)


def string_value(node: Optional[cst.BaseExpression]) -> Optional[str]:
  """
  Returns the text of a plain string literal.

  Only a single ``SimpleString`` node counts. Concatenations, f-strings and
  bytes literals are not folded.

  Args:
      node: Any expression node (or None).

  Returns:
      Optional[str]: The literal's value, or None if the node is not a str literal.
  """
  if isinstance(node, cst.SimpleString):
    value = node.evaluated_value
    if isinstance(value, str):
      return value
  return None


def find_dict_value(node: cst.Dict, key: str) -> Optional[cst.BaseExpression]:
  """
  Finds the value stored under a string-literal key in a dict display.

  When the key appears more than once, the last occurrence wins, matching the
  runtime behaviour of the literal.

  Args:
      node: The dict display.
      key: The key to look up (e.g. "type").

  Returns:
      Optional[cst.BaseExpression]: The value node, or None when the key is absent.
  """
  found = None
  for element in node.elements:
    if isinstance(element, cst.DictElement) and string_value(element.key) == key:
      found = element.value
  return found


def is_docstring(node: cst.CSTNode, idx: int) -> bool:
  """
  Determines if a statement node represents a module docstring.

  Args:
      node: The statement node from the module body.
      idx: The index of this statement in the body list.

  Returns:
      bool: True if it is a docstring (string expression at index 0).
  """
  if idx != 0:
    return False
  if isinstance(node, cst.SimpleStatementLine):
    if len(node.body) == 1 and isinstance(node.body[0], cst.Expr):
      expr = node.body[0].value
      if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
        return True
  return False


def is_import_line(node: cst.CSTNode) -> bool:
  """
  Determines if a statement line consists only of import statements.

  Args:
      node: The statement node.

  Returns:
      bool: True for lines like ``import a`` or ``from a import b; import c``.
  """
  if isinstance(node, cst.SimpleStatementLine) and node.body:
    return all(isinstance(small, (cst.Import, cst.ImportFrom)) for small in node.body)
  return False


def is_import_block(node: cst.CSTNode) -> bool:
  """
  Determines if a top-level ``try:`` guards nothing but imports.

  Args:
      node: The statement node.

  Returns:
      bool: True for blocks like ``try: from a import b`` (any handlers).
  """
  if isinstance(node, cst.Try) and isinstance(node.body, cst.IndentedBlock) and node.body.body:
    return all(is_import_line(line) for line in node.body.body)
  return False


def leading_imports_end(module: cst.Module) -> int:
  """
  Finds the index just past the module's leading import section.

  The section is the docstring (if any) followed by consecutive top-level
  import lines, ``from __future__`` directives included, and ``try:`` blocks
  that only import.

  Args:
      module: The module to inspect.

  Returns:
      int: Insertion index into ``module.body`` for new import statements.
  """
  insert_idx = 0
  for i, stmt in enumerate(module.body):
    if is_docstring(stmt, i) or is_import_line(stmt) or is_import_block(stmt):
      insert_idx = i + 1
      continue
    break
  return insert_idx
