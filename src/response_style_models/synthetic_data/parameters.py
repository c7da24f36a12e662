"""
Prior-predictive parameter sampling for synthetic surveys.

This module provides:
- Item design (trait dimension and reverse keying) from a generation config
- Person hierarchy hyperparameters
- A draw of every raw model parameter from its hierarchical prior
- Config loading from YAML files using OmegaConf
"""

from pathlib import Path

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from omegaconf import OmegaConf
from scipy import stats

from response_style_models.core.data_models import ItemMetadata
from response_style_models.irt.inference.config import Hyperparameters
from response_style_models.irt.inference.model import ModelSpecification
from response_style_models.irt.inference.parameters import RawParameters
from response_style_models.synthetic_data.config import GenerationConfig
from response_style_models.synthetic_data.sampling import (
    POSITIVE,
    Support,
    registry,
)

# =============================================================================
# Design
# =============================================================================


def build_item_metadata(
    config: GenerationConfig, rng: Generator
) -> ItemMetadata:
    """
    Assign items to trait groups and pick the reverse-keyed ones.

    Items are spread over trait groups in turn (1, 2, ..., T, 1, 2, ...), so
    every group receives at least one item.

    Args:
        config: Generation configuration.
        rng: Random number generator.

    Returns:
        ItemMetadata for config.n_items items.
    """
    n_items = config.n_items
    trait_dimension = (
        np.arange(n_items, dtype=np.int64) % config.n_trait_groups + 1
    )

    n_reversed = int(round(config.items.reverse_keyed_fraction * n_items))
    reverse_keyed = np.zeros(n_items, dtype=np.int64)
    reverse_keyed[rng.choice(n_items, size=n_reversed, replace=False)] = 1

    return ItemMetadata.from_sequences(reverse_keyed, trait_dimension)


def build_hyperparameters(
    config: GenerationConfig, n_dimensions: int
) -> Hyperparameters:
    """Zero mean, df = S + offset and V = scale * I."""
    scale = config.persons.covariance_scale
    return Hyperparameters(
        theta_mu=tuple(0.0 for _ in range(n_dimensions)),
        df=n_dimensions + config.persons.covariance_df_offset,
        scale_matrix=tuple(
            tuple(scale if r == c else 0.0 for c in range(n_dimensions))
            for r in range(n_dimensions)
        ),
    )


# =============================================================================
# Prior draws
# =============================================================================


def sample_covariance(
    hyperparameters: Hyperparameters, rng: Generator
) -> NDArray[np.float64]:
    """
    Draw Sigma_raw from its prior.

    S >= 2 uses the inverse-Wishart; S == 1 uses the equivalent
    InvGamma(df / 2, V / 2) on the scalar variance.
    """
    df = hyperparameters.df
    scale = hyperparameters.scale_matrix_array

    if hyperparameters.n_dimensions == 1:
        variance = stats.invgamma.rvs(
            a=df / 2.0, scale=scale[0, 0] / 2.0, random_state=rng
        )
        return np.array([[variance]], dtype=np.float64)

    sigma: NDArray[np.float64] = np.asarray(
        stats.invwishart.rvs(df=df, scale=scale, random_state=rng),
        dtype=np.float64,
    )
    # Symmetrize rounding noise
    result: NDArray[np.float64] = (sigma + sigma.T) / 2.0
    return result


def sample_raw_parameters(
    spec: ModelSpecification,
    config: GenerationConfig,
    rng: Generator,
) -> RawParameters:
    """
    Draw one complete raw parameter set from the hierarchical prior.

    Args:
        spec: Model specification.
        config: Generation configuration.
        rng: Random number generator.

    Returns:
        RawParameters matching spec.
    """
    layout = spec.layout
    n_free = layout.n_free_cells

    mu_beta_dist = registry.create(config.items.mu_beta)
    sigma2_dist = registry.create(config.items.sigma2_beta)
    sigma2_dist.check_support(POSITIVE, "sigma2_beta")

    mu_beta = layout.from_free_values(mu_beta_dist.sample(n_free, rng))
    sigma2_beta_raw = layout.from_free_values(sigma2_dist.sample(n_free, rng))

    item_sd = np.sqrt(layout.item_table(sigma2_beta_raw))
    beta_raw = rng.normal(loc=0.0, scale=item_sd)

    sigma_raw = sample_covariance(spec.hyperparameters, rng)
    theta_mu = spec.hyperparameters.theta_mu_array
    theta_raw = rng.multivariate_normal(
        theta_mu, sigma_raw, size=spec.n_persons
    )

    if spec.is_univariate:
        xi_theta = np.ones(1, dtype=np.float64)
    else:
        xi_dist = registry.create(config.persons.xi_theta)
        xi_dist.check_support(
            Support(lower=0.0, upper=spec.config.priors.xi_upper), "xi_theta"
        )
        xi_theta = xi_dist.sample(spec.n_dimensions, rng)

    mu_beta_acq_extreme = None
    if spec.has_person_level_acq_extreme:
        mu_beta_acq_extreme = float(mu_beta_dist.sample(1, rng)[0])

    return RawParameters(
        theta_raw=theta_raw,
        xi_theta=xi_theta,
        sigma_raw=sigma_raw,
        beta_raw=beta_raw,
        mu_beta=mu_beta,
        sigma2_beta_raw=sigma2_beta_raw,
        mu_beta_acq_extreme=mu_beta_acq_extreme,
    )


# =============================================================================
# Config Loading
# =============================================================================


def load_config(yaml_path: Path) -> GenerationConfig:
    """Load and validate parameters from YAML.

    Args:
        yaml_path: Path to YAML config file

    Returns:
        Validated GenerationConfig

    Raises:
        FileNotFoundError: If yaml_path doesn't exist
    """
    # Create schema from dataclass
    schema = OmegaConf.structured(GenerationConfig)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    user_config = OmegaConf.load(yaml_path)
    config = OmegaConf.merge(schema, user_config)

    # Convert to typed dataclass
    result = OmegaConf.to_object(config)
    assert isinstance(result, GenerationConfig)

    return result
