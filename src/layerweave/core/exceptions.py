"""
Custom exceptions for layerweave.

All layerweave exceptions inherit from LayerWeaveError for easy catching.
"""

from typing import Any


class LayerWeaveError(Exception):
    """Base exception for all layerweave errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(LayerWeaveError):
    """Raised when configuration is invalid or missing."""

    pass


class GeometryError(LayerWeaveError):
    """Raised when a geometric operation has no valid result."""

    pass


class SchedulingError(LayerWeaveError):
    """Raised when a global layer would violate its one-step-per-part contract."""

    def __init__(
        self,
        message: str,
        layer_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.layer_index = layer_index


class SlicingError(LayerWeaveError):
    """Raised when region path synthesis fails."""

    pass
