import numpy as np

from response_style_models.irt.inference.config import (
    Hyperparameters,
    ModelConfig,
    MPTOptions,
    default_config,
)
from response_style_models.irt.inference.enums import (
    AcquiescenceExtremity,
    AcquiescenceSource,
    ModelFamily,
    MPTVariant,
)


class TestMPTOptions:
    def test_full_variant(self) -> None:
        options = MPTOptions.for_variant(MPTVariant.FULL)
        assert options.acquiescence_source == AcquiescenceSource.SHARED
        assert (
            options.acquiescence_extremity == AcquiescenceExtremity.PER_ITEM
        )

    def test_hh_variant(self) -> None:
        options = MPTOptions.for_variant(MPTVariant.HH)
        assert options.acquiescence_source == AcquiescenceSource.TRAIT_SPECIFIC
        assert (
            options.acquiescence_extremity == AcquiescenceExtremity.PER_PERSON
        )

    def test_default_is_full(self) -> None:
        assert MPTOptions() == MPTOptions.for_variant(MPTVariant.FULL)


class TestHyperparameters:
    def test_default(self) -> None:
        hyper = Hyperparameters.default(3)
        assert hyper.n_dimensions == 3
        assert hyper.df == 4
        np.testing.assert_array_equal(hyper.theta_mu_array, np.zeros(3))
        np.testing.assert_array_equal(hyper.scale_matrix_array, np.eye(3))


class TestModelConfig:
    def test_defaults(self) -> None:
        config = default_config()
        assert config.family == ModelFamily.MPT
        assert config.n_predict is None
        assert config.priors.xi_upper == 100.0
        assert isinstance(config.model_version, str)
        assert config.model_version

    def test_frozen(self) -> None:
        config = ModelConfig(family=ModelFamily.PCM)
        assert config.family == ModelFamily.PCM
        assert hash(config.mpt) == hash(MPTOptions())
