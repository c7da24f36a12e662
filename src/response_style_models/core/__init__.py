"""
Core shared types and utilities for the response-style models.

This module provides foundational components used across the tree
evaluators, the hierarchical density and the synthetic data layer.
"""

from response_style_models.core.errors import (
    ConfigurationError,
    DomainViolationError,
    InvalidDimensionError,
    ModelError,
)
from response_style_models.core.utils import get_rng, phi_approx, softmax

__all__ = [
    "ConfigurationError",
    "DomainViolationError",
    "InvalidDimensionError",
    "ModelError",
    "get_rng",
    "phi_approx",
    "softmax",
]
