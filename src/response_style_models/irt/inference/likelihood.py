"""
Categorical log-likelihood of observed responses.

For every person i and item j the observed category X[i, j] contributes
    log max(p_cat[i, j, X[i, j]], PROBABILITY_FLOOR)

The per-person sums run in a numba kernel parallelised over persons; persons
are independent given the parameters.
"""

import numpy as np
from numba import njit, prange  # type: ignore
from numpy.typing import NDArray

from response_style_models.core.constants import (
    N_CATEGORIES,
    PROBABILITY_FLOOR,
)
from response_style_models.core.data_models import ResponseMatrix
from response_style_models.core.errors import InvalidDimensionError


@njit(parallel=True)  # type: ignore
def _person_log_likelihood_kernel(
    probs: NDArray[np.float64],
    categories: NDArray[np.int64],
    floor: float,
) -> NDArray[np.float64]:
    """
    Sum the log probability of the observed category per person.

    Args:
        probs: Category probabilities, shape (n_persons, n_items, 5).
        categories: 0-based observed categories, shape (n_persons, n_items).
        floor: Lower clamp applied before the logarithm.

    Returns:
        Log-likelihood per person, shape (n_persons,).
    """
    n_persons, n_items = categories.shape
    out = np.empty(n_persons)

    for i in prange(n_persons):
        total = 0.0
        for j in range(n_items):
            p = probs[i, j, categories[i, j]]
            if p < floor:
                p = floor
            total += np.log(p)
        out[i] = total
    return out


def person_log_likelihood(
    probs: NDArray[np.float64], responses: ResponseMatrix
) -> NDArray[np.float64]:
    """
    Log-likelihood contribution of each person.

    Args:
        probs: Category probabilities, shape (n_persons, n_items, 5).
        responses: Observed responses.

    Returns:
        Array of shape (n_persons,).
    """
    expected = (responses.n_persons, responses.n_items, N_CATEGORIES)
    if probs.shape != expected:
        raise InvalidDimensionError(
            f"Category probabilities must have shape {expected}, "
            f"got {probs.shape}"
        )
    result: NDArray[np.float64] = _person_log_likelihood_kernel(
        np.ascontiguousarray(probs, dtype=np.float64),
        np.ascontiguousarray(responses.category_indices),
        PROBABILITY_FLOOR,
    )
    return result


def categorical_log_likelihood(
    probs: NDArray[np.float64], responses: ResponseMatrix
) -> float:
    """Total categorical log-likelihood of all observed responses."""
    return float(np.sum(person_log_likelihood(probs, responses)))
