from dataclasses import dataclass, field

from omegaconf import MISSING

from response_style_models.irt.inference.config import ModelConfig, MPTOptions
from response_style_models.irt.inference.enums import ModelFamily, MPTVariant


@dataclass
class DistributionConfig:
    """Configuration for a single parameter's marginal distribution.

    Attributes:
        distribution: Distribution type ("normal", "uniform",
            "truncated_normal", "log_normal", "half_normal", "inverse_gamma")
        params: Keyword arguments of the distribution (mean, std, etc.)
    """

    distribution: str = MISSING
    params: dict[str, float | None] = MISSING


def _default_xi_theta() -> DistributionConfig:
    return DistributionConfig(
        distribution="uniform", params={"low": 0.5, "high": 1.5}
    )


def _default_mu_beta() -> DistributionConfig:
    return DistributionConfig(
        distribution="normal", params={"mean": 0.0, "std": 1.0}
    )


def _default_sigma2_beta() -> DistributionConfig:
    """Item variances; more concentrated than the InvGamma(1, 1) model prior."""
    return DistributionConfig(
        distribution="inverse_gamma", params={"shape": 3.0, "scale": 1.0}
    )


@dataclass
class PersonConfig:
    """Person hierarchy of the simulated population.

    Attributes:
        covariance_df_offset: Inverse-Wishart degrees of freedom above S,
            df = S + covariance_df_offset.
        covariance_scale: Diagonal of the scale matrix V = scale * I.
        xi_theta: Distribution of the person scaling factors.
    """

    covariance_df_offset: int = 1
    covariance_scale: float = 1.0
    xi_theta: DistributionConfig = field(default_factory=_default_xi_theta)

    def __post_init__(self) -> None:
        if self.covariance_df_offset < 1:
            raise ValueError(
                f"covariance_df_offset must be >= 1, "
                f"got {self.covariance_df_offset}"
            )
        if self.covariance_scale <= 0:
            raise ValueError(
                f"covariance_scale must be > 0, got {self.covariance_scale}"
            )


@dataclass
class ItemConfig:
    """Item hierarchy of the simulated survey.

    Attributes:
        reverse_keyed_fraction: Share of items worded against their trait.
        mu_beta: Distribution of the hierarchical item means.
        sigma2_beta: Distribution of the hierarchical item variances.
    """

    reverse_keyed_fraction: float = 0.3
    mu_beta: DistributionConfig = field(default_factory=_default_mu_beta)
    sigma2_beta: DistributionConfig = field(
        default_factory=_default_sigma2_beta
    )

    def __post_init__(self) -> None:
        if not (0.0 <= self.reverse_keyed_fraction <= 1.0):
            raise ValueError(
                f"reverse_keyed_fraction must be in [0, 1], "
                f"got {self.reverse_keyed_fraction}"
            )


@dataclass
class GenerationConfig:
    """Complete configuration for generating a synthetic survey."""

    n_persons: int
    n_items: int
    n_trait_groups: int = 1

    # Model family ("mpt" or "pcm") and MPT variant ("full" or "hh")
    family: str = "mpt"
    variant: str = "full"

    # Persons with posterior predictive draws; None means all
    n_predict: int | None = None

    # Reproducibility
    random_seed: int = MISSING

    persons: PersonConfig = field(default_factory=PersonConfig)
    items: ItemConfig = field(default_factory=ItemConfig)

    def __post_init__(self) -> None:
        if self.n_persons < 1:
            raise ValueError("Must have at least 1 person")
        if self.n_items < 1:
            raise ValueError("Must have at least 1 item")
        if self.n_trait_groups < 1:
            raise ValueError("Must have at least 1 trait group")
        if self.n_trait_groups > self.n_items:
            raise ValueError(
                f"Cannot spread {self.n_items} items over "
                f"{self.n_trait_groups} trait groups"
            )
        # Raises ValueError for unknown names
        ModelFamily(self.family)
        MPTVariant(self.variant)

    def to_model_config(self) -> ModelConfig:
        """Model configuration matching this generation setup."""
        return ModelConfig(
            family=ModelFamily(self.family),
            mpt=MPTOptions.for_variant(MPTVariant(self.variant)),
            n_predict=self.n_predict,
        )
