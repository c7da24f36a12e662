"""
Configuration dataclasses for the hierarchical response-style models.

This module defines:
- MPT tree options (acquiescence source and extremity granularity)
- Prior settings for the item hierarchy
- Person-level hyperparameters (theta_mu, df, V)
- The master model configuration
"""

import importlib.metadata
from dataclasses import dataclass, field

import numpy as np
import toml
from numpy.typing import NDArray

from response_style_models.core.constants import DEFAULT_XI_UPPER
from response_style_models.core.paths import (
    ProjectRootNotFound,
    get_project_root_dir,
)
from response_style_models.irt.inference.enums import (
    AcquiescenceExtremity,
    AcquiescenceSource,
    ModelFamily,
    MPTVariant,
)

DISTRIBUTION_NAME = "response-style-models"

# Default item hierarchy priors
DEFAULT_MU_BETA_SCALE = 1.0
DEFAULT_SIGMA2_SHAPE = 1.0
DEFAULT_SIGMA2_SCALE = 1.0


def _get_project_version() -> str:
    try:
        root_dir = get_project_root_dir()
    except ProjectRootNotFound:
        return importlib.metadata.version(DISTRIBUTION_NAME)

    with open(root_dir / "pyproject.toml") as f:
        data = toml.load(f)

    version = data.get("project", {}).get("version")

    if not version:
        raise ValueError("Version not found in pyproject.toml")

    assert isinstance(version, str)
    return version


@dataclass(frozen=True)
class MPTOptions:
    """
    Structural options of the response style tree.

    Attributes:
        acquiescence_source: SHARED uses the acquiescence dimension for every
            item. TRAIT_SPECIFIC routes items on trait dimension 1 to the last
            person dimension instead.
        acquiescence_extremity: PER_ITEM gives every item its own location for
            extremity after acquiescence. PER_PERSON uses one location shared
            by all items, so that probability depends on the person only.
    """

    acquiescence_source: AcquiescenceSource = AcquiescenceSource.SHARED
    acquiescence_extremity: AcquiescenceExtremity = (
        AcquiescenceExtremity.PER_ITEM
    )

    @classmethod
    def for_variant(cls, variant: MPTVariant) -> "MPTOptions":
        """Options of a named sub-variant."""
        match variant:
            case MPTVariant.FULL:
                return cls(
                    acquiescence_source=AcquiescenceSource.SHARED,
                    acquiescence_extremity=AcquiescenceExtremity.PER_ITEM,
                )
            case MPTVariant.HH:
                return cls(
                    acquiescence_source=AcquiescenceSource.TRAIT_SPECIFIC,
                    acquiescence_extremity=AcquiescenceExtremity.PER_PERSON,
                )
        raise ValueError(f"Unknown MPT variant: {variant}")


@dataclass(frozen=True)
class PriorConfig:
    """
    Priors of the item hierarchy and the person scaling bound.

    Attributes:
        mu_beta_scale: SD of the normal prior on hierarchical item means.
        sigma2_shape: Shape of the inverse-gamma prior on item variances.
        sigma2_scale: Scale of the inverse-gamma prior on item variances.
        xi_upper: Upper bound of the uniform prior on xi_theta.
    """

    mu_beta_scale: float = DEFAULT_MU_BETA_SCALE
    sigma2_shape: float = DEFAULT_SIGMA2_SHAPE
    sigma2_scale: float = DEFAULT_SIGMA2_SCALE
    xi_upper: float = DEFAULT_XI_UPPER


@dataclass(frozen=True)
class Hyperparameters:
    """
    Fixed hyperparameters of the person hierarchy.

    Attributes:
        theta_mu: Prior mean of theta_raw, length S.
        df: Degrees of freedom of the inverse-Wishart prior on Sigma_raw.
        scale_matrix: Scale matrix V of the inverse-Wishart prior, S x S.
    """

    theta_mu: tuple[float, ...]
    df: int
    scale_matrix: tuple[tuple[float, ...], ...]

    @classmethod
    def default(cls, n_dimensions: int) -> "Hyperparameters":
        """Zero mean, df = S + 1 and identity scale."""
        return cls(
            theta_mu=tuple(0.0 for _ in range(n_dimensions)),
            df=n_dimensions + 1,
            scale_matrix=tuple(
                tuple(1.0 if r == c else 0.0 for c in range(n_dimensions))
                for r in range(n_dimensions)
            ),
        )

    @property
    def n_dimensions(self) -> int:
        return len(self.theta_mu)

    @property
    def theta_mu_array(self) -> NDArray[np.float64]:
        return np.array(self.theta_mu, dtype=np.float64)

    @property
    def scale_matrix_array(self) -> NDArray[np.float64]:
        return np.array(self.scale_matrix, dtype=np.float64)


@dataclass(frozen=True)
class ModelConfig:
    """
    Master configuration of a response-style model.

    Attributes:
        family: Generative architecture (response style tree or partial credit).
        mpt: Structural options, used when family is MPT.
        priors: Item hierarchy priors.
        n_predict: Number of persons (N2) that get posterior predictive
            draws. None means every person.
        model_version: Version string for reproducibility tracking.
    """

    family: ModelFamily = ModelFamily.MPT
    mpt: MPTOptions = MPTOptions()
    priors: PriorConfig = PriorConfig()
    n_predict: int | None = None
    model_version: str = field(default_factory=_get_project_version)


def default_config() -> ModelConfig:
    """Create a default (full response style tree) configuration."""
    return ModelConfig()
