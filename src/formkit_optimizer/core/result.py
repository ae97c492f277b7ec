"""
Data structures representing the output of an optimization run.
"""

from typing import List

from pydantic import BaseModel, Field


class OptimizationResult(BaseModel):
  """
  Container for the results of optimizing one module.
  """

  code: str = Field(default="", description="The rewritten source code.")
  rewritten: int = Field(default=0, description="Number of factory calls that received a configuration.")
  skipped: int = Field(default=0, description="Number of factory calls left untouched.")
  warnings: List[str] = Field(default_factory=list, description="Advisory de-optimization messages.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(default=True, description="True if the module could be parsed and rewritten.")

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0

  @property
  def has_warnings(self) -> bool:
    return len(self.warnings) > 0
