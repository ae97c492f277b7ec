"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Helpers for parsing snippets and running the rewrite driver on them.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable

import libcst as cst
import pytest

# Add src to path so we can import 'formkit_optimizer' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from formkit_optimizer.config import OptimizerConfig  # noqa: E402
from formkit_optimizer.core.rewriter import rewrite  # noqa: E402


def _parse(code: str) -> cst.Module:
  """Dedents and parses a snippet."""
  return cst.parse_module(textwrap.dedent(code).lstrip("\n"))


@pytest.fixture
def config() -> OptimizerConfig:
  """Default FormKit identifiers."""
  return OptimizerConfig()


@pytest.fixture
def run_rewrite(config) -> Callable[[str], str]:
  """Returns a function that rewrites a snippet and yields the generated source."""

  def _run(code: str) -> str:
    return rewrite(_parse(code), config, filename="form.py").code

  return _run
