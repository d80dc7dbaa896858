"""Input validation package."""

from lirio.validation.validator import FarmValidationError, FarmValidator

__all__ = ["FarmValidationError", "FarmValidator"]
