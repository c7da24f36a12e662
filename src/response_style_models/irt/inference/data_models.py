from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from response_style_models.irt.inference.priors import PriorTerms


@dataclass
class DensityEvaluation:
    """
    One evaluation of the joint log density.

    Attributes:
        log_likelihood: Categorical log-likelihood of the observed responses.
        prior: Log prior density per parameter block.
        probabilities: Category probabilities, shape (n_persons, n_items, 5).
    """

    log_likelihood: float
    prior: PriorTerms
    probabilities: NDArray[np.float64]

    @property
    def log_prior(self) -> float:
        return self.prior.total

    @property
    def total(self) -> float:
        """Unnormalized log posterior density."""
        return self.log_likelihood + self.prior.total


class GeneratedQuantities(BaseModel):
    """
    Quantities derived from one retained posterior draw.

    Attributes:
        theta: Person locations, shape (n_persons, S).
        sigma: Person covariance, shape (S, S).
        correlation: Person correlation matrix, shape (S, S).
        beta: Item locations, shape (n_items, n_columns).
        mu_beta: Hierarchical mean of every item parameter,
            shape (n_items, n_processes).
        sigma_beta: Hierarchical SD of every item parameter,
            shape (n_items, n_processes).
        responses_pred: Posterior predictive responses in 1..5,
            shape (n_predict, n_items).
        model_version: Version string for reproducibility tracking.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    theta: NDArray[np.float64]
    sigma: NDArray[np.float64]
    correlation: NDArray[np.float64]
    beta: NDArray[np.float64]
    mu_beta: NDArray[np.float64]
    sigma_beta: NDArray[np.float64]
    responses_pred: NDArray[np.int8]
    model_version: str

    @property
    def n_predict(self) -> int:
        """Number of persons with predictive draws."""
        return int(self.responses_pred.shape[0])
