"""Exceptions raised by the background modeler."""
from __future__ import annotations


class BackgroundModelerError(Exception):
    """Base class for modeler failures."""


class ConfigurationError(BackgroundModelerError, ValueError):
    """Invalid S/N parameters, kernel or partition settings."""


class DimensionMismatch(BackgroundModelerError, ValueError):
    """A frame or map does not match the dimensions of the run."""


class EmptyHistory(BackgroundModelerError, RuntimeError):
    """Aggregation requested for a region with no retained candidates."""
