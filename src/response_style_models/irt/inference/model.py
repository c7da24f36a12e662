"""
Model specification: everything fixed before sampling starts.

build_specification() checks the configuration for consistency and fails
with a ConfigurationError naming the offending index. The resulting
ModelSpecification is immutable and is passed explicitly to every
evaluation; there is no module level state.
"""

import logging
from dataclasses import dataclass

import numpy as np

from response_style_models.core.data_models import ItemMetadata
from response_style_models.core.errors import (
    ConfigurationError,
    InvalidDimensionError,
)
from response_style_models.irt.inference.config import (
    Hyperparameters,
    ModelConfig,
)
from response_style_models.irt.inference.enums import ModelFamily
from response_style_models.irt.inference.hierarchy import HierarchyLayout
from response_style_models.irt.inference.parameters import RawParameters
from response_style_models.irt.response_models import (
    MPTResponseTree,
    PartialCreditResponseTree,
    ResponseTree,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSpecification:
    """
    Immutable structure of one response-style model.

    Attributes:
        config: Model configuration.
        items: Item metadata.
        n_persons: Number of persons N.
        n_dimensions: Number of person dimensions S.
        n_groups: Number of trait groups.
        hyperparameters: Person hierarchy hyperparameters.
        layout: Item hierarchy layout.
        tree: Probability tree.
    """

    config: ModelConfig
    items: ItemMetadata
    n_persons: int
    n_dimensions: int
    n_groups: int
    hyperparameters: Hyperparameters
    layout: HierarchyLayout
    tree: ResponseTree

    @property
    def n_items(self) -> int:
        return self.items.n_items

    @property
    def n_predict(self) -> int:
        """Number of persons (N2) receiving posterior predictive draws."""
        if self.config.n_predict is None:
            return self.n_persons
        return self.config.n_predict

    @property
    def is_univariate(self) -> bool:
        """S == 1: scalar covariance with an inverse-gamma prior."""
        return self.n_dimensions == 1

    @property
    def has_person_level_acq_extreme(self) -> bool:
        return isinstance(
            self.tree, MPTResponseTree
        ) and not (self.tree.has_item_acquiescence_extremity)

    def check_parameters(self, raw: RawParameters) -> None:
        """
        Check that a raw parameter set matches this specification.

        Raises:
            InvalidDimensionError: On any shape mismatch.
        """
        s = self.n_dimensions
        expected = {
            "theta_raw": (self.n_persons, s),
            "xi_theta": (s,),
            "sigma_raw": (s, s),
            "beta_raw": (self.n_items, self.layout.n_processes),
            "mu_beta": self.layout.table_shape,
            "sigma2_beta_raw": self.layout.table_shape,
        }
        for name, shape in expected.items():
            actual = np.shape(getattr(raw, name))
            if actual != shape:
                raise InvalidDimensionError(
                    f"{name} must have shape {shape}, got {actual}"
                )
        if self.has_person_level_acq_extreme != (
            raw.mu_beta_acq_extreme is not None
        ):
            raise InvalidDimensionError(
                "mu_beta_acq_extreme must be set exactly when extremity "
                "after acquiescence is a person-level process"
            )


def build_tree(config: ModelConfig) -> ResponseTree:
    """Create the probability tree selected by the configuration."""
    match config.family:
        case ModelFamily.MPT:
            return MPTResponseTree(config.mpt)
        case ModelFamily.PCM:
            return PartialCreditResponseTree()
    raise ConfigurationError(f"Unknown model family: {config.family}")


def _check_hyperparameters(
    hyperparameters: Hyperparameters, n_dimensions: int
) -> None:
    if hyperparameters.n_dimensions != n_dimensions:
        raise InvalidDimensionError(
            f"theta_mu has length {hyperparameters.n_dimensions}, "
            f"expected S = {n_dimensions}"
        )
    scale = hyperparameters.scale_matrix_array
    if scale.shape != (n_dimensions, n_dimensions):
        raise InvalidDimensionError(
            f"Scale matrix V has shape {scale.shape}, "
            f"expected ({n_dimensions}, {n_dimensions})"
        )
    if hyperparameters.df < n_dimensions + 1:
        raise ConfigurationError(
            f"Degrees of freedom must be >= S + 1 = {n_dimensions + 1}, "
            f"got {hyperparameters.df}"
        )
    if not np.allclose(scale, scale.T):
        raise ConfigurationError("Scale matrix V must be symmetric")
    try:
        np.linalg.cholesky(scale)
    except np.linalg.LinAlgError as e:
        raise ConfigurationError(
            "Scale matrix V must be positive-definite"
        ) from e


def build_specification(
    items: ItemMetadata,
    n_persons: int,
    config: ModelConfig | None = None,
    hyperparameters: Hyperparameters | None = None,
    n_dimensions: int | None = None,
) -> ModelSpecification:
    """
    Build and validate a model specification.

    Args:
        items: Item metadata (reverse keying and trait dimensions).
        n_persons: Number of persons N.
        config: Model configuration. If None, uses defaults.
        hyperparameters: Person hierarchy hyperparameters. If None, uses
            zero mean, df = S + 1 and identity scale.
        n_dimensions: Expected number of person dimensions S. If given, it
            must agree with the tree and the number of trait groups.

    Returns:
        ModelSpecification.

    Raises:
        InvalidDimensionError: If S or a trait dimension is inconsistent.
        ConfigurationError: For any other inconsistency.
    """
    config = config or ModelConfig()
    tree = build_tree(config)

    if n_persons < 1:
        raise ConfigurationError(f"n_persons must be >= 1, got {n_persons}")

    n_groups = items.max_trait_dimension
    if n_dimensions is not None:
        # The tree fixes S - n_groups; solve for the number of groups
        offset = tree.n_dimensions(0)
        n_groups = n_dimensions - offset
        if n_groups < 1:
            raise InvalidDimensionError(
                f"S = {n_dimensions} leaves no trait dimension for this "
                f"model, which needs at least {offset + 1} dimensions"
            )
        if items.max_trait_dimension > n_groups:
            item = int(np.argmax(items.trait_dimension))
            raise InvalidDimensionError(
                f"Item {item} loads on trait dimension "
                f"{items.max_trait_dimension}, but S = {n_dimensions} only "
                f"allows {n_groups} trait dimensions"
            )
    s = tree.n_dimensions(n_groups)

    if hyperparameters is None:
        hyperparameters = Hyperparameters.default(s)
    _check_hyperparameters(hyperparameters, s)

    n_predict = config.n_predict
    if n_predict is not None and not (0 <= n_predict <= n_persons):
        raise ConfigurationError(
            f"n_predict must be in [0, {n_persons}], got {n_predict}"
        )

    layout = HierarchyLayout.for_items(
        items,
        process_names=tree.process_names,
        trait_grouped=tree.trait_grouped,
        n_groups=n_groups,
    )

    logger.debug(
        "Built %s model: N=%d, J=%d, S=%d, groups=%d",
        config.family.value,
        n_persons,
        items.n_items,
        s,
        n_groups,
    )

    return ModelSpecification(
        config=config,
        items=items,
        n_persons=n_persons,
        n_dimensions=s,
        n_groups=n_groups,
        hyperparameters=hyperparameters,
        layout=layout,
        tree=tree,
    )
