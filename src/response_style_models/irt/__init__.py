"""
IRT (Item Response Theory) module for response styles.

This module provides:
- Probability trees (response style MPT, partial credit) for 5-point items
- Parameter transforms from sampled to interpretable quantities
- The hierarchical inference core (priors, likelihood, joint density)
- Posterior predictive sampling and derived quantities
- Diagnostic utilities for model validation
"""

from response_style_models.irt.diagnostics import (
    ResponseProbComparison,
    compute_response_prob_comparison,
)
from response_style_models.irt.inference.config import (
    Hyperparameters,
    ModelConfig,
    MPTOptions,
    PriorConfig,
)
from response_style_models.irt.inference.density import JointLogDensity
from response_style_models.irt.inference.enums import ModelFamily, MPTVariant
from response_style_models.irt.inference.model import (
    ModelSpecification,
    build_specification,
)
from response_style_models.irt.inference.parameters import RawParameters
from response_style_models.irt.inference.unconstrained import (
    UnconstrainedParameterization,
)
from response_style_models.irt.response_models import (
    MPTResponseTree,
    PartialCreditResponseTree,
    ResponseTree,
)
from response_style_models.irt.sampling import (
    generate_quantities,
    sample_category,
    sample_posterior_predictive,
    sample_responses_batch,
)

__all__ = [
    "Hyperparameters",
    "JointLogDensity",
    "ModelConfig",
    "ModelFamily",
    "ModelSpecification",
    "MPTOptions",
    "MPTResponseTree",
    "MPTVariant",
    "PartialCreditResponseTree",
    "PriorConfig",
    "RawParameters",
    "ResponseProbComparison",
    "ResponseTree",
    "UnconstrainedParameterization",
    "build_specification",
    "compute_response_prob_comparison",
    "generate_quantities",
    "sample_category",
    "sample_posterior_predictive",
    "sample_responses_batch",
]
