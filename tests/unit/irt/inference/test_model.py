import numpy as np
import pytest

from response_style_models.core.data_models import ItemMetadata
from response_style_models.core.errors import (
    ConfigurationError,
    InvalidDimensionError,
)
from response_style_models.irt.inference.config import (
    Hyperparameters,
    ModelConfig,
    MPTOptions,
)
from response_style_models.irt.inference.enums import ModelFamily, MPTVariant
from response_style_models.irt.inference.model import build_specification
from response_style_models.irt.inference.parameters import RawParameters
from response_style_models.irt.response_models import (
    MPTResponseTree,
    PartialCreditResponseTree,
)

HH_CONFIG = ModelConfig(mpt=MPTOptions.for_variant(MPTVariant.HH))
PCM_CONFIG = ModelConfig(family=ModelFamily.PCM)


@pytest.fixture
def items() -> ItemMetadata:
    return ItemMetadata.from_sequences([0, 1, 0, 1], [1, 1, 2, 2])


class TestBuildSpecification:
    def test_full_mpt(self, items: ItemMetadata) -> None:
        spec = build_specification(items, n_persons=10)

        assert isinstance(spec.tree, MPTResponseTree)
        assert spec.n_dimensions == 5
        assert spec.n_groups == 2
        assert spec.layout.table_shape == (2, 5)
        assert spec.n_predict == 10
        assert not spec.is_univariate
        assert not spec.has_person_level_acq_extreme

    def test_hh_mpt(self, items: ItemMetadata) -> None:
        spec = build_specification(items, n_persons=10, config=HH_CONFIG)

        assert spec.n_dimensions == 6
        assert spec.layout.table_shape == (2, 4)
        assert spec.has_person_level_acq_extreme

    def test_pcm_single_trait_is_univariate(self) -> None:
        items = ItemMetadata.from_sequences([0, 1, 0], [1, 1, 1])
        spec = build_specification(items, n_persons=5, config=PCM_CONFIG)

        assert isinstance(spec.tree, PartialCreditResponseTree)
        assert spec.n_dimensions == 1
        assert spec.is_univariate
        assert spec.hyperparameters.df == 2

    def test_explicit_dimensions(self, items: ItemMetadata) -> None:
        spec = build_specification(items, n_persons=10, n_dimensions=6)
        assert spec.n_groups == 3

    def test_dimensions_too_small_for_items(
        self, items: ItemMetadata
    ) -> None:
        with pytest.raises(InvalidDimensionError, match="Item 2"):
            build_specification(items, n_persons=10, n_dimensions=4)

    def test_dimensions_without_trait(self, items: ItemMetadata) -> None:
        with pytest.raises(InvalidDimensionError):
            build_specification(items, n_persons=10, n_dimensions=3)

    def test_df_too_small(self, items: ItemMetadata) -> None:
        hyper = Hyperparameters(
            theta_mu=(0.0,) * 5,
            df=5,
            scale_matrix=Hyperparameters.default(5).scale_matrix,
        )
        with pytest.raises(ConfigurationError, match="Degrees of freedom"):
            build_specification(items, n_persons=10, hyperparameters=hyper)

    def test_scale_matrix_not_positive_definite(
        self, items: ItemMetadata
    ) -> None:
        scale = -np.eye(5)
        hyper = Hyperparameters(
            theta_mu=(0.0,) * 5,
            df=6,
            scale_matrix=tuple(tuple(row) for row in scale.tolist()),
        )
        with pytest.raises(ConfigurationError, match="positive-definite"):
            build_specification(items, n_persons=10, hyperparameters=hyper)

    def test_theta_mu_length(self, items: ItemMetadata) -> None:
        with pytest.raises(InvalidDimensionError, match="theta_mu"):
            build_specification(
                items,
                n_persons=10,
                hyperparameters=Hyperparameters.default(4),
            )

    def test_n_predict_out_of_range(self, items: ItemMetadata) -> None:
        config = ModelConfig(n_predict=11)
        with pytest.raises(ConfigurationError, match="n_predict"):
            build_specification(items, n_persons=10, config=config)

    def test_n_predict(self, items: ItemMetadata) -> None:
        spec = build_specification(
            items, n_persons=10, config=ModelConfig(n_predict=3)
        )
        assert spec.n_predict == 3


class TestCheckParameters:
    def _raw(self, n_dims: int, n_processes: int) -> RawParameters:
        return RawParameters(
            theta_raw=np.zeros((10, n_dims)),
            xi_theta=np.ones(n_dims),
            sigma_raw=np.eye(n_dims),
            beta_raw=np.zeros((4, n_processes)),
            mu_beta=np.zeros((2, n_processes)),
            sigma2_beta_raw=np.ones((2, n_processes)),
        )

    def test_valid(self, items: ItemMetadata) -> None:
        spec = build_specification(items, n_persons=10)
        spec.check_parameters(self._raw(5, 5))

    def test_wrong_theta_shape(self, items: ItemMetadata) -> None:
        spec = build_specification(items, n_persons=10)
        with pytest.raises(InvalidDimensionError, match="theta_raw"):
            spec.check_parameters(self._raw(4, 5))

    def test_hh_requires_person_level_location(
        self, items: ItemMetadata
    ) -> None:
        spec = build_specification(items, n_persons=10, config=HH_CONFIG)
        with pytest.raises(InvalidDimensionError, match="mu_beta_acq"):
            spec.check_parameters(self._raw(6, 4))
