"""Exception hierarchy. Programmer errors only; noisy pixel input never raises."""

from __future__ import annotations


class ThermalShapesError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(ThermalShapesError, ValueError):
    """An argument violates a documented precondition."""


class EmptyShapeError(InvalidArgumentError):
    """An empty shape or point set was passed where a non-empty one is required."""
