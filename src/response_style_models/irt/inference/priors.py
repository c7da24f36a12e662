"""
Hierarchical prior structure.

Item level:
    mu_beta          ~ N(0, mu_beta_scale)         (free cells only)
    sigma2_beta_raw  ~ InvGamma(shape, scale)      (free cells only)
    beta_raw[j, s]   ~ N(0, sqrt(sigma2_beta_raw[group(j, s), s]))

Person level:
    Sigma_raw        ~ InvWishart(df, V)           (S >= 2)
    Sigma_raw[0, 0]  ~ InvGamma(df / 2, V[0, 0] / 2)   (S == 1)
    theta_raw[i]     ~ MVN(theta_mu, Sigma_raw)    (univariate when S == 1)
    xi_theta         ~ Uniform(0, xi_upper]        (support check only)
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from response_style_models.core.errors import DomainViolationError
from response_style_models.irt.inference.config import (
    Hyperparameters,
    PriorConfig,
)
from response_style_models.irt.inference.hierarchy import HierarchyLayout
from response_style_models.irt.inference.model import ModelSpecification
from response_style_models.irt.inference.parameters import RawParameters


@dataclass(frozen=True)
class PriorTerms:
    """Log prior density, split by parameter block."""

    mu_beta: float
    sigma2_beta: float
    beta_raw: float
    sigma_raw: float
    theta_raw: float
    mu_beta_acq_extreme: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.mu_beta
            + self.sigma2_beta
            + self.beta_raw
            + self.sigma_raw
            + self.theta_raw
            + self.mu_beta_acq_extreme
        )


def check_covariance(sigma: NDArray[np.float64]) -> None:
    """
    Raise if a covariance matrix is not symmetric positive-definite.

    Raises:
        DomainViolationError: If the matrix is not finite, not symmetric or
            not positive-definite.
    """
    if not np.all(np.isfinite(sigma)):
        raise DomainViolationError("Covariance matrix is not finite")
    if not np.allclose(sigma, sigma.T):
        raise DomainViolationError("Covariance matrix is not symmetric")
    try:
        np.linalg.cholesky(sigma)
    except np.linalg.LinAlgError as e:
        raise DomainViolationError(
            "Covariance matrix is not positive-definite"
        ) from e


def check_xi_support(xi_theta: NDArray[np.float64], upper: float) -> None:
    """xi_theta must lie in (0, upper]; the uniform prior adds no density."""
    if not np.all((xi_theta > 0.0) & (xi_theta <= upper)):
        raise DomainViolationError(
            f"xi_theta must lie in (0, {upper}], got {xi_theta}"
        )


def mu_beta_log_prior(
    mu_beta: NDArray[np.float64],
    layout: HierarchyLayout,
    priors: PriorConfig,
) -> float:
    values = layout.free_values(mu_beta)
    return float(
        np.sum(stats.norm.logpdf(values, loc=0.0, scale=priors.mu_beta_scale))
    )


def sigma2_beta_log_prior(
    sigma2_beta_raw: NDArray[np.float64],
    layout: HierarchyLayout,
    priors: PriorConfig,
) -> float:
    values = layout.free_values(sigma2_beta_raw)
    if not np.all(values > 0):
        raise DomainViolationError(
            f"sigma2_beta_raw must be positive, got min {values.min()}"
        )
    return float(
        np.sum(
            stats.invgamma.logpdf(
                values, a=priors.sigma2_shape, scale=priors.sigma2_scale
            )
        )
    )


def beta_raw_log_prior(
    beta_raw: NDArray[np.float64],
    sigma2_beta_raw: NDArray[np.float64],
    layout: HierarchyLayout,
) -> float:
    """
    Normal log density of item deviations around their hierarchical mean.

    Each deviation uses the SD of its own (group, process) cell.
    """
    item_sigma2 = layout.item_table(layout.broadcast(sigma2_beta_raw))
    if not np.all(item_sigma2 > 0):
        raise DomainViolationError(
            f"sigma2_beta_raw must be positive, got min {item_sigma2.min()}"
        )
    return float(
        np.sum(
            stats.norm.logpdf(beta_raw, loc=0.0, scale=np.sqrt(item_sigma2))
        )
    )


def covariance_log_prior(
    sigma_raw: NDArray[np.float64], hyperparameters: Hyperparameters
) -> float:
    """
    Inverse-Wishart log density of Sigma_raw.

    For S == 1 the inverse-Wishart is written as the equivalent
    InvGamma(df / 2, V / 2) on the scalar variance.
    """
    check_covariance(sigma_raw)
    scale = hyperparameters.scale_matrix_array
    df = hyperparameters.df

    if sigma_raw.shape == (1, 1):
        return float(
            stats.invgamma.logpdf(
                sigma_raw[0, 0], a=df / 2.0, scale=scale[0, 0] / 2.0
            )
        )
    try:
        value = stats.invwishart.logpdf(sigma_raw, df=df, scale=scale)
    except (np.linalg.LinAlgError, ValueError) as e:
        raise DomainViolationError(
            f"Inverse-Wishart density failed for Sigma_raw: {e}"
        ) from e
    return float(value)


def person_log_prior(
    theta_raw: NDArray[np.float64],
    sigma_raw: NDArray[np.float64],
    theta_mu: NDArray[np.float64],
) -> float:
    """Multivariate normal log density of all person locations."""
    if sigma_raw.shape == (1, 1):
        return float(
            np.sum(
                stats.norm.logpdf(
                    theta_raw[:, 0],
                    loc=theta_mu[0],
                    scale=np.sqrt(sigma_raw[0, 0]),
                )
            )
        )
    # scipy rejects nearly singular matrices that pass a Cholesky check
    try:
        values = stats.multivariate_normal.logpdf(
            theta_raw, mean=theta_mu, cov=sigma_raw
        )
    except (np.linalg.LinAlgError, ValueError) as e:
        raise DomainViolationError(
            f"Sigma_raw is not usable as a covariance: {e}"
        ) from e
    return float(np.sum(values))


def log_prior(raw: RawParameters, spec: ModelSpecification) -> PriorTerms:
    """
    Evaluate every prior term of one raw parameter set.

    Args:
        raw: Raw parameter set.
        spec: Model specification.

    Returns:
        PriorTerms with one log density per block.

    Raises:
        InvalidDimensionError: If raw does not match the specification.
        DomainViolationError: If any parameter lies outside its support.
    """
    spec.check_parameters(raw)
    priors = spec.config.priors
    layout = spec.layout

    if not spec.is_univariate:
        check_xi_support(raw.xi_theta, priors.xi_upper)

    acq_extreme = 0.0
    if raw.mu_beta_acq_extreme is not None:
        acq_extreme = float(
            stats.norm.logpdf(
                raw.mu_beta_acq_extreme, loc=0.0, scale=priors.mu_beta_scale
            )
        )

    return PriorTerms(
        mu_beta=mu_beta_log_prior(raw.mu_beta, layout, priors),
        sigma2_beta=sigma2_beta_log_prior(raw.sigma2_beta_raw, layout, priors),
        beta_raw=beta_raw_log_prior(
            raw.beta_raw, raw.sigma2_beta_raw, layout
        ),
        sigma_raw=covariance_log_prior(raw.sigma_raw, spec.hyperparameters),
        theta_raw=person_log_prior(
            raw.theta_raw, raw.sigma_raw, spec.hyperparameters.theta_mu_array
        ),
        mu_beta_acq_extreme=acq_extreme,
    )
