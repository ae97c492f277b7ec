"""
Tests for the console proxy and logging adapters.
"""

import io
import logging

from rich.console import Console

from formkit_optimizer.utils.console import get_console, log_warning, reset_console, set_console


def test_warnings_are_routed_to_injected_console():
  buffer = Console(file=io.StringIO(), record=True, width=200)
  set_console(buffer)
  try:
    assert get_console() is buffer
    log_warning("[FormKit de-opt] form.py:3:0: Input uses bound type prop, skipping optimization.")
    text = buffer.export_text()
  finally:
    reset_console()

  assert "[FormKit de-opt] form.py:3:0" in text
  assert "WARNING" in text


def test_single_rich_handler_after_swaps():
  from rich.logging import RichHandler

  set_console(Console(file=io.StringIO()))
  set_console(Console(file=io.StringIO()))
  reset_console()

  handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
  assert len(handlers) == 1
