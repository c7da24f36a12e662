"""
Posterior predictive sampling for the response-style models.

This module draws replicated responses from category probabilities and
bundles the derived quantities of one retained posterior draw.

Responses are returned 1-based (1..5), as recorded on the survey form.
"""

from dataclasses import dataclass

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from response_style_models.core.constants import (
    MIN_CATEGORY,
    N_CATEGORIES,
)
from response_style_models.core.errors import (
    ConfigurationError,
    DomainViolationError,
    InvalidDimensionError,
)
from response_style_models.core.utils import get_rng
from response_style_models.irt.inference.data_models import (
    GeneratedQuantities,
)
from response_style_models.irt.inference.hierarchy import HierarchyLayout
from response_style_models.irt.inference.model import ModelSpecification
from response_style_models.irt.inference.parameters import (
    RawParameters,
    TransformedParameters,
)
from response_style_models.irt.transforms import transform_parameters


def sample_category(
    probs: NDArray[np.float64], rng: Generator | None = None
) -> int:
    """
    Draw one category from a 5-simplex.

    Args:
        probs: Category probabilities, shape (5,).
        rng: Random number generator.

    Returns:
        Sampled category in 1..5.
    """
    if rng is None:
        rng = get_rng()

    probs = np.asarray(probs, dtype=np.float64)
    if probs.shape != (N_CATEGORIES,):
        raise InvalidDimensionError(
            f"probs must have shape ({N_CATEGORIES},), got {probs.shape}"
        )
    if not np.all(np.isfinite(probs)) or np.any(probs < 0.0):
        raise DomainViolationError(f"Invalid category probabilities: {probs}")

    return int(rng.choice(N_CATEGORIES, p=probs / probs.sum())) + MIN_CATEGORY


def sample_responses_batch(
    probs: NDArray[np.float64], rng: Generator | None = None
) -> NDArray[np.int8]:
    """
    Sample one response for every person and item.

    Uses a single uniform draw per cell compared against the cumulative
    category probabilities.

    Args:
        probs: Category probabilities, shape (n_persons, n_items, 5).
        rng: Random number generator.

    Returns:
        Array of shape (n_persons, n_items) with responses in 1..5.
    """
    if rng is None:
        rng = get_rng()

    if probs.ndim != 3 or probs.shape[-1] != N_CATEGORIES:
        raise InvalidDimensionError(
            f"probs must have shape (n_persons, n_items, {N_CATEGORIES}), "
            f"got {probs.shape}"
        )

    n_persons, n_items, _ = probs.shape
    cumprobs = np.cumsum(probs, axis=-1)
    u = rng.random((n_persons, n_items))

    # First category whose cumulative probability reaches u
    sampled = np.minimum(
        (cumprobs < u[:, :, np.newaxis]).sum(axis=-1), N_CATEGORIES - 1
    )
    result: NDArray[np.int8] = (sampled + MIN_CATEGORY).astype(np.int8)
    return result


def sample_posterior_predictive(
    probs: NDArray[np.float64],
    n_predict: int,
    rng: Generator | None = None,
) -> NDArray[np.int8]:
    """
    Replicated responses for the first n_predict persons.

    Args:
        probs: Category probabilities, shape (n_persons, n_items, 5).
        n_predict: Number of persons N2 to draw for, 0 <= N2 <= n_persons.
        rng: Random number generator.

    Returns:
        Array of shape (n_predict, n_items) with responses in 1..5.
    """
    if not 0 <= n_predict <= probs.shape[0]:
        raise ConfigurationError(
            f"n_predict must be in [0, {probs.shape[0]}], got {n_predict}"
        )
    return sample_responses_batch(probs[:n_predict], rng)


def correlation_from_covariance(
    sigma: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Correlation matrix D Sigma D with D = diag(1 / sqrt(diag(Sigma))).

    Raises:
        DomainViolationError: If a variance is not strictly positive.
    """
    variances = np.diag(sigma)
    if not np.all(variances > 0):
        raise DomainViolationError(
            f"Variances must be strictly positive, got {variances}"
        )
    inv_sd = 1.0 / np.sqrt(variances)
    result: NDArray[np.float64] = (
        inv_sd[:, np.newaxis] * sigma * inv_sd[np.newaxis, :]
    )
    return result


@dataclass(frozen=True)
class ItemSummary:
    """
    Hierarchical mean and SD looked up for every item parameter.

    Attributes:
        mu_beta: Shape (n_items, n_processes).
        sigma_beta: Shape (n_items, n_processes).
    """

    mu_beta: NDArray[np.float64]
    sigma_beta: NDArray[np.float64]


def summarize_items(
    transformed: TransformedParameters, layout: HierarchyLayout
) -> ItemSummary:
    """Expand the (group, process) tables to one row per item."""
    return ItemSummary(
        mu_beta=layout.item_table(transformed.mu_beta),
        sigma_beta=layout.item_table(transformed.sigma_beta_raw),
    )


def generate_quantities(
    raw: RawParameters,
    spec: ModelSpecification,
    rng: Generator | None = None,
) -> GeneratedQuantities:
    """
    Derived quantities and predictive responses for one retained draw.

    With a seeded rng the output is reproducible.

    Args:
        raw: Raw parameter set of the draw.
        spec: Model specification.
        rng: Random number generator.

    Returns:
        GeneratedQuantities.
    """
    if rng is None:
        rng = get_rng()

    spec.check_parameters(raw)
    transformed = transform_parameters(raw, spec.layout)
    probs = spec.tree.compute_probabilities_batch(
        transformed.theta, transformed.beta, spec.items
    )
    summary = summarize_items(transformed, spec.layout)

    return GeneratedQuantities(
        theta=transformed.theta,
        sigma=transformed.sigma,
        correlation=correlation_from_covariance(transformed.sigma),
        beta=transformed.beta,
        mu_beta=summary.mu_beta,
        sigma_beta=summary.sigma_beta,
        responses_pred=sample_posterior_predictive(
            probs, spec.n_predict, rng
        ),
        model_version=spec.config.model_version,
    )
