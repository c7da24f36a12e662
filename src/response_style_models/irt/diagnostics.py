"""
Posterior predictive checks for the response-style models.

Compares the empirical category rates of every item against the category
probabilities implied by one parameter draw.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from response_style_models.core.constants import MIN_CATEGORY, N_CATEGORIES
from response_style_models.core.data_models import ResponseMatrix
from response_style_models.core.errors import InvalidDimensionError


@dataclass
class ResponseProbComparison:
    """Comparison of empirical vs model category probabilities.

    One row per (item, category); categories are stored 1-based.
    """

    item_id: NDArray[np.int64]
    category: NDArray[np.int64]
    empirical_prob: NDArray[np.float64]
    model_prob: NDArray[np.float64]
    difference: NDArray[np.float64]

    @property
    def max_abs_difference(self) -> float:
        return float(np.max(np.abs(self.difference)))


def compute_response_prob_comparison(
    data: ResponseMatrix,
    probs: NDArray[np.float64],
) -> ResponseProbComparison:
    """Compare empirical vs model category probabilities.

    The model probability of a category is P(category | person, item)
    averaged over persons.

    Args:
        data: Response matrix with observed responses
        probs: Category probabilities, shape (n_persons, n_items, 5)

    Returns:
        ResponseProbComparison with empirical and model probabilities per item/category
    """
    expected = (data.n_persons, data.n_items, N_CATEGORIES)
    if probs.shape != expected:
        raise InvalidDimensionError(
            f"probs must have shape {expected}, got {probs.shape}"
        )

    n_items = data.n_items

    # Shape: (n_items, 5)
    empirical = np.stack(
        [data.item_category_counts(j) for j in range(n_items)]
    ) / float(data.n_persons)
    model = probs.mean(axis=0)

    empirical_arr = empirical.ravel().astype(np.float64)
    model_arr = model.ravel().astype(np.float64)

    return ResponseProbComparison(
        item_id=np.repeat(np.arange(n_items, dtype=np.int64), N_CATEGORIES),
        category=np.tile(
            np.arange(N_CATEGORIES, dtype=np.int64) + MIN_CATEGORY, n_items
        ),
        empirical_prob=empirical_arr,
        model_prob=model_arr,
        difference=empirical_arr - model_arr,
    )
