import numpy as np
import pytest

from response_style_models.core.constants import PROBABILITY_FLOOR
from response_style_models.core.data_models import ResponseMatrix
from response_style_models.core.errors import InvalidDimensionError
from response_style_models.irt.inference.likelihood import (
    categorical_log_likelihood,
    person_log_likelihood,
)


class TestCategoricalLogLikelihood:
    def test_uniform_probabilities(self) -> None:
        data = ResponseMatrix(responses=np.array([[1, 2, 3], [4, 5, 1]]))
        probs = np.full((2, 3, 5), 0.2)

        assert categorical_log_likelihood(probs, data) == pytest.approx(
            6 * np.log(0.2)
        )

    def test_picks_observed_category(self) -> None:
        data = ResponseMatrix(responses=np.array([[5, 2]]))
        probs = np.array(
            [
                [
                    [0.1, 0.1, 0.1, 0.1, 0.6],
                    [0.3, 0.4, 0.1, 0.1, 0.1],
                ]
            ]
        )

        np.testing.assert_allclose(
            person_log_likelihood(probs, data), [np.log(0.6) + np.log(0.4)]
        )

    def test_zero_probability_is_floored(self) -> None:
        data = ResponseMatrix(responses=np.array([[3]]))
        probs = np.array([[[0.5, 0.5, 0.0, 0.0, 0.0]]])

        value = categorical_log_likelihood(probs, data)

        assert np.isfinite(value)
        assert value == pytest.approx(np.log(PROBABILITY_FLOOR))

    def test_per_person_contributions(self) -> None:
        rng = np.random.default_rng(0)
        probs = rng.dirichlet(np.ones(5), size=(4, 3))
        responses = rng.integers(1, 6, size=(4, 3))
        data = ResponseMatrix(responses=responses)

        expected = np.array(
            [
                sum(
                    np.log(probs[i, j, responses[i, j] - 1])
                    for j in range(3)
                )
                for i in range(4)
            ]
        )
        np.testing.assert_allclose(
            person_log_likelihood(probs, data), expected
        )

    def test_shape_mismatch(self) -> None:
        data = ResponseMatrix(responses=np.array([[1, 2]]))
        with pytest.raises(InvalidDimensionError):
            categorical_log_likelihood(np.full((1, 3, 5), 0.2), data)
