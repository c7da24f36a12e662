"""
Deterministic transforms from raw sampled parameters to model quantities.

All functions are pure: no randomness, no side effects, safe to call from
several sampling chains at once.
"""

import numpy as np
from numpy.typing import NDArray

from response_style_models.core.errors import (
    DomainViolationError,
    InvalidDimensionError,
)
from response_style_models.irt.inference.hierarchy import HierarchyLayout
from response_style_models.irt.inference.parameters import (
    RawParameters,
    TransformedParameters,
)


def scale_person_traits(
    theta_raw: NDArray[np.float64], xi_theta: NDArray[np.float64]
) -> NDArray[np.float64]:
    """
    Rescale person locations: theta[i, s] = theta_raw[i, s] * xi_theta[s].

    Args:
        theta_raw: Shape (n_persons, S).
        xi_theta: Shape (S,). Ignored when S == 1.

    Returns:
        theta, shape (n_persons, S).
    """
    n_dimensions = theta_raw.shape[1]
    if n_dimensions == 1:
        return np.array(theta_raw, dtype=np.float64)
    if xi_theta.shape != (n_dimensions,):
        raise InvalidDimensionError(
            f"xi_theta must have shape ({n_dimensions},), "
            f"got {xi_theta.shape}"
        )
    result: NDArray[np.float64] = theta_raw * xi_theta[np.newaxis, :]
    return result


def scale_covariance(
    sigma_raw: NDArray[np.float64], xi_theta: NDArray[np.float64]
) -> NDArray[np.float64]:
    """
    Rescale the person covariance: Sigma = diag(xi) Sigma_raw diag(xi).

    Args:
        sigma_raw: Shape (S, S).
        xi_theta: Shape (S,). Ignored when S == 1.

    Returns:
        Sigma, shape (S, S).
    """
    n_dimensions = sigma_raw.shape[0]
    if n_dimensions == 1:
        return np.array(sigma_raw, dtype=np.float64)
    if xi_theta.shape != (n_dimensions,):
        raise InvalidDimensionError(
            f"xi_theta must have shape ({n_dimensions},), "
            f"got {xi_theta.shape}"
        )
    result: NDArray[np.float64] = (
        xi_theta[:, np.newaxis] * sigma_raw * xi_theta[np.newaxis, :]
    )
    return result


def locate_items(
    beta_raw: NDArray[np.float64],
    mu_beta: NDArray[np.float64],
    layout: HierarchyLayout,
) -> NDArray[np.float64]:
    """
    Add the hierarchical mean: beta[j, s] = mu_beta[group(j, s), s] + beta_raw[j, s].

    Args:
        beta_raw: Shape (n_items, n_processes).
        mu_beta: Shape (n_groups, n_processes).
        layout: Hierarchy layout giving group(j, s).

    Returns:
        beta, shape (n_items, n_processes).
    """
    expected = (layout.n_items, layout.n_processes)
    if beta_raw.shape != expected:
        raise InvalidDimensionError(
            f"beta_raw must have shape {expected}, got {beta_raw.shape}"
        )
    result: NDArray[np.float64] = layout.item_table(mu_beta) + beta_raw
    return result


def variance_to_scale(sigma2: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Strictly positive square root of variances.

    Raises:
        DomainViolationError: If any variance is not strictly positive.
    """
    sigma2 = np.asarray(sigma2, dtype=np.float64)
    if not np.all(sigma2 > 0):
        raise DomainViolationError(
            f"Variances must be strictly positive, got min {np.min(sigma2)}"
        )
    result: NDArray[np.float64] = np.sqrt(sigma2)
    return result


def transform_parameters(
    raw: RawParameters, layout: HierarchyLayout
) -> TransformedParameters:
    """
    Derive every quantity the probability trees need from one proposal.

    Args:
        raw: Raw parameter set.
        layout: Hierarchy layout of the item parameters.

    Returns:
        TransformedParameters.
    """
    theta = scale_person_traits(raw.theta_raw, raw.xi_theta)
    sigma = scale_covariance(raw.sigma_raw, raw.xi_theta)
    mu_beta = layout.broadcast(raw.mu_beta)
    beta = locate_items(raw.beta_raw, mu_beta, layout)

    if raw.mu_beta_acq_extreme is not None:
        # Person-level process: same location for every item
        shared = np.full(layout.n_items, raw.mu_beta_acq_extreme)
        beta = np.column_stack([beta, shared])

    sigma_beta_raw = variance_to_scale(layout.broadcast(raw.sigma2_beta_raw))

    return TransformedParameters(
        theta=theta,
        sigma=sigma,
        beta=beta,
        mu_beta=mu_beta,
        sigma_beta_raw=sigma_beta_raw,
    )
