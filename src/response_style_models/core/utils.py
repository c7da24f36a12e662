"""
Core utility functions shared across the response-style modules.

This module provides the random number helpers, the softmax used by the
partial credit tree and the smooth probit-type link used by the response
style tree.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import ArrayLike, NDArray
from scipy.special import expit

from response_style_models.core.constants import (
    LINK_CLIP_MAX,
    LINK_CLIP_MIN,
    PHI_APPROX_CUBIC,
    PHI_APPROX_LINEAR,
)


def get_rng(seed: int | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed for reproducibility. If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def softmax(
    logits: NDArray[np.floating], axis: int = -1
) -> NDArray[np.float64]:
    """
    Compute softmax probabilities from logits.

    Numerically stable implementation.

    Args:
        logits: Array of logits.
        axis: Axis along which to compute softmax.

    Returns:
        Array of probabilities that sum to 1 along the specified axis.
    """
    # Subtract max for numerical stability
    shifted = logits - np.max(logits, axis=axis, keepdims=True)
    exp_logits = np.exp(shifted)
    result: NDArray[np.float64] = exp_logits / np.sum(
        exp_logits, axis=axis, keepdims=True
    )
    return result


def phi_approx(x: ArrayLike) -> NDArray[np.float64]:
    """
    Logistic approximation to the standard normal CDF.

        Phi(x) ~= 1 / (1 + exp(-(0.07056 x^3 + 1.5976 x)))

    The logistic argument is clipped so the result never reaches exactly
    0 or 1.

    Args:
        x: Latent differences, any shape.

    Returns:
        Probabilities in (0, 1) with the same shape as x.
    """
    x = np.asarray(x, dtype=np.float64)
    z = PHI_APPROX_CUBIC * x**3 + PHI_APPROX_LINEAR * x
    z = np.clip(z, LINK_CLIP_MIN, LINK_CLIP_MAX)
    result: NDArray[np.float64] = expit(z)
    return result
