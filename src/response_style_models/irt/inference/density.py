"""
Joint log density of a response-style model.

    log p(raw | X) = log p(X | raw) + log p(raw) + const

JointLogDensity is the single entry point an external sampler calls per
proposal. Proposals outside the parameter support evaluate to -inf so the
sampler rejects them; structural errors (wrong shapes, bad configuration)
are always raised.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from response_style_models.core.data_models import ResponseMatrix
from response_style_models.core.errors import (
    ConfigurationError,
    DomainViolationError,
)
from response_style_models.irt.inference.data_models import DensityEvaluation
from response_style_models.irt.inference.likelihood import (
    categorical_log_likelihood,
)
from response_style_models.irt.inference.model import ModelSpecification
from response_style_models.irt.inference.parameters import RawParameters
from response_style_models.irt.inference.priors import log_prior
from response_style_models.irt.inference.unconstrained import (
    UnconstrainedParameterization,
)
from response_style_models.irt.transforms import transform_parameters

logger = logging.getLogger(__name__)


def compute_category_probabilities(
    raw: RawParameters, spec: ModelSpecification
) -> NDArray[np.float64]:
    """
    Category probabilities of every person x item pair for one proposal.

    Args:
        raw: Raw parameter set.
        spec: Model specification.

    Returns:
        Array of shape (n_persons, n_items, 5).
    """
    spec.check_parameters(raw)
    transformed = transform_parameters(raw, spec.layout)
    return spec.tree.compute_probabilities_batch(
        transformed.theta, transformed.beta, spec.items
    )


class JointLogDensity:
    """
    Log posterior density (up to a constant) of one model and data set.

    Instances hold no mutable state and may be shared between chains.
    """

    def __init__(self, spec: ModelSpecification, responses: ResponseMatrix):
        """
        Args:
            spec: Model specification.
            responses: Observed responses, shape (n_persons, n_items).

        Raises:
            ConfigurationError: If the responses do not match the
                specification.
        """
        if responses.n_persons != spec.n_persons:
            raise ConfigurationError(
                f"Responses have {responses.n_persons} persons, "
                f"model expects {spec.n_persons}"
            )
        if responses.n_items != spec.n_items:
            raise ConfigurationError(
                f"Responses have {responses.n_items} items, "
                f"model expects {spec.n_items}"
            )
        self.spec = spec
        self.responses = responses
        self.parameterization = UnconstrainedParameterization(spec)

    def evaluate(self, raw: RawParameters) -> DensityEvaluation:
        """
        Evaluate every term of the joint density.

        Raises:
            InvalidDimensionError: If raw does not match the specification.
            DomainViolationError: If raw lies outside the parameter support.
        """
        prior = log_prior(raw, self.spec)
        probs = compute_category_probabilities(raw, self.spec)
        log_likelihood = categorical_log_likelihood(probs, self.responses)

        evaluation = DensityEvaluation(
            log_likelihood=log_likelihood, prior=prior, probabilities=probs
        )
        if not np.isfinite(evaluation.total):
            raise DomainViolationError(
                f"Log density is not finite: likelihood={log_likelihood}, "
                f"prior={prior.total}"
            )
        return evaluation

    def log_density(self, raw: RawParameters, strict: bool = False) -> float:
        """
        Log posterior density of one proposal.

        Args:
            raw: Raw parameter set.
            strict: If True, re-raise support violations instead of
                returning -inf.

        Returns:
            Log density, or -inf for a proposal outside the support.
        """
        try:
            return self.evaluate(raw).total
        except DomainViolationError as e:
            if strict:
                raise
            logger.debug("Rejecting proposal: %s", e.message)
            return -np.inf

    def __call__(self, raw: RawParameters) -> float:
        return self.log_density(raw)

    @property
    def dimension(self) -> int:
        """Length of the unconstrained parameter vector."""
        return self.parameterization.dimension

    def log_density_unconstrained(
        self, vector: NDArray[np.float64], strict: bool = False
    ) -> float:
        """
        Log density on the unconstrained scale, including the log Jacobian.

        Args:
            vector: Flat array of length dimension.
            strict: If True, re-raise support violations.

        Returns:
            Log density, or -inf for a proposal outside the support.
        """
        try:
            raw, log_jacobian = self.parameterization.to_raw(vector)
        except DomainViolationError as e:
            if strict:
                raise
            logger.debug("Rejecting proposal: %s", e.message)
            return -np.inf

        value = self.log_density(raw, strict=strict)
        if not np.isfinite(value):
            return value
        return value + log_jacobian
