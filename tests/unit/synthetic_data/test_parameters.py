import numpy as np
import pytest
from scipy import stats

from response_style_models.core.utils import get_rng
from response_style_models.irt.inference.model import (
    build_specification,
    build_tree,
)
from response_style_models.synthetic_data.config import (
    DistributionConfig,
    GenerationConfig,
    ItemConfig,
    PersonConfig,
)
from response_style_models.synthetic_data.parameters import (
    build_hyperparameters,
    build_item_metadata,
    sample_covariance,
    sample_raw_parameters,
)


def _spec_for(config: GenerationConfig):
    rng = get_rng(config.random_seed)
    model_config = config.to_model_config()
    items = build_item_metadata(config, rng)
    n_dimensions = build_tree(model_config).n_dimensions(
        config.n_trait_groups
    )
    spec = build_specification(
        items,
        n_persons=config.n_persons,
        config=model_config,
        hyperparameters=build_hyperparameters(config, n_dimensions),
        n_dimensions=n_dimensions,
    )
    return spec, rng


class TestItemDesign:
    def test_round_robin_groups(self) -> None:
        config = GenerationConfig(
            n_persons=5, n_items=7, n_trait_groups=3, random_seed=0
        )
        items = build_item_metadata(config, get_rng(0))

        np.testing.assert_array_equal(
            items.trait_dimension, [1, 2, 3, 1, 2, 3, 1]
        )

    def test_reverse_keyed_count(self) -> None:
        config = GenerationConfig(
            n_persons=5,
            n_items=10,
            random_seed=0,
            items=ItemConfig(reverse_keyed_fraction=0.3),
        )
        items = build_item_metadata(config, get_rng(0))

        assert items.reverse_keyed.sum() == 3

    def test_no_reverse_keyed(self) -> None:
        config = GenerationConfig(
            n_persons=5,
            n_items=4,
            random_seed=0,
            items=ItemConfig(reverse_keyed_fraction=0.0),
        )
        items = build_item_metadata(config, get_rng(0))

        assert not items.reverse_keyed.any()


class TestHyperparameters:
    def test_identity_scale(self) -> None:
        config = GenerationConfig(n_persons=5, n_items=4, random_seed=0)
        hyper = build_hyperparameters(config, 3)

        assert hyper.df == 4
        np.testing.assert_array_equal(hyper.scale_matrix_array, np.eye(3))
        np.testing.assert_array_equal(hyper.theta_mu_array, np.zeros(3))


class TestSampleCovariance:
    def test_univariate_uses_inverse_gamma(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(*args: object, **kwargs: object) -> None:
            raise AssertionError("inverse-Wishart must not be used for S=1")

        monkeypatch.setattr(stats.invwishart, "rvs", fail)
        config = GenerationConfig(n_persons=5, n_items=4, random_seed=0)

        sigma = sample_covariance(
            build_hyperparameters(config, 1), get_rng(0)
        )

        assert sigma.shape == (1, 1)
        assert sigma[0, 0] > 0

    def test_multivariate_positive_definite(self) -> None:
        config = GenerationConfig(n_persons=5, n_items=4, random_seed=0)

        sigma = sample_covariance(
            build_hyperparameters(config, 4), get_rng(3)
        )

        assert sigma.shape == (4, 4)
        np.testing.assert_allclose(sigma, sigma.T)
        assert np.all(np.linalg.eigvalsh(sigma) > 0)


class TestSampleRawParameters:
    @pytest.mark.parametrize(
        "family, variant, n_trait_groups",
        [
            ("mpt", "full", 2),
            ("mpt", "hh", 2),
            ("pcm", "full", 1),
            ("pcm", "full", 3),
        ],
    )
    def test_matches_specification(
        self, family: str, variant: str, n_trait_groups: int
    ) -> None:
        config = GenerationConfig(
            n_persons=20,
            n_items=6,
            n_trait_groups=n_trait_groups,
            family=family,
            variant=variant,
            random_seed=5,
        )
        spec, rng = _spec_for(config)

        raw = sample_raw_parameters(spec, config, rng)

        spec.check_parameters(raw)
        assert raw.theta_raw.shape == (20, spec.n_dimensions)
        assert (raw.mu_beta_acq_extreme is not None) == (
            spec.has_person_level_acq_extreme
        )

    def test_univariate_scaling_is_one(self) -> None:
        config = GenerationConfig(
            n_persons=10, n_items=3, family="pcm", random_seed=1
        )
        spec, rng = _spec_for(config)

        raw = sample_raw_parameters(spec, config, rng)

        np.testing.assert_array_equal(raw.xi_theta, [1.0])

    def test_scaling_within_bounds(self) -> None:
        config = GenerationConfig(n_persons=10, n_items=4, random_seed=2)
        spec, rng = _spec_for(config)

        raw = sample_raw_parameters(spec, config, rng)

        assert np.all(raw.xi_theta > 0)
        assert np.all(raw.xi_theta <= spec.config.priors.xi_upper)

    def test_shared_columns_broadcast(self) -> None:
        config = GenerationConfig(
            n_persons=10, n_items=4, n_trait_groups=2, random_seed=4
        )
        spec, rng = _spec_for(config)

        raw = sample_raw_parameters(spec, config, rng)

        for process, grouped in enumerate(spec.layout.trait_grouped):
            if not grouped:
                column = raw.mu_beta[:, process]
                np.testing.assert_array_equal(column, column[0])

    def test_unbounded_scaling_distribution_rejected(self) -> None:
        config = GenerationConfig(
            n_persons=10,
            n_items=4,
            random_seed=2,
            persons=PersonConfig(
                xi_theta=DistributionConfig(
                    distribution="normal", params={"mean": 1.0, "std": 0.1}
                )
            ),
        )
        spec, rng = _spec_for(config)

        with pytest.raises(ValueError, match="xi_theta"):
            sample_raw_parameters(spec, config, rng)
