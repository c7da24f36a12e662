"""
Parameter containers of the hierarchical response-style models.

RawParameters are the quantities an external sampler proposes.
TransformedParameters are derived from them deterministically and feed the
probability trees.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class RawParameters:
    """
    One proposed parameter set.

    Attributes:
        theta_raw: Unscaled person locations, shape (n_persons, S).
        xi_theta: Person scaling factors, shape (S,).
        sigma_raw: Unscaled person covariance, shape (S, S).
        beta_raw: Item deviations from their hierarchical mean,
            shape (n_items, n_item_processes).
        mu_beta: Hierarchical item means, shape (n_groups, n_item_processes).
        sigma2_beta_raw: Hierarchical item variances,
            shape (n_groups, n_item_processes).
        mu_beta_acq_extreme: Location of the person-level extremity process
            after acquiescence. Only set when that process is shared by all
            items.
    """

    theta_raw: NDArray[np.float64]
    xi_theta: NDArray[np.float64]
    sigma_raw: NDArray[np.float64]
    beta_raw: NDArray[np.float64]
    mu_beta: NDArray[np.float64]
    sigma2_beta_raw: NDArray[np.float64]
    mu_beta_acq_extreme: float | None = None

    @property
    def n_persons(self) -> int:
        return self.theta_raw.shape[0]

    @property
    def n_dimensions(self) -> int:
        return self.theta_raw.shape[1]


@dataclass(frozen=True)
class TransformedParameters:
    """
    Scaled, interpretable quantities derived from RawParameters.

    Attributes:
        theta: Person locations, shape (n_persons, S).
        sigma: Person covariance, shape (S, S).
        beta: Item locations consumed by the tree, shape (n_items, n_columns).
            For a person-level extremity process the last column repeats the
            shared location for every item.
        mu_beta: Broadcast hierarchical means, shape (n_groups, n_processes).
        sigma_beta_raw: Hierarchical item SDs, shape (n_groups, n_processes).
    """

    theta: NDArray[np.float64]
    sigma: NDArray[np.float64]
    beta: NDArray[np.float64]
    mu_beta: NDArray[np.float64]
    sigma_beta_raw: NDArray[np.float64]
