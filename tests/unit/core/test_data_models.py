import numpy as np
import pytest

from response_style_models.core.data_models import ItemMetadata, ResponseMatrix
from response_style_models.core.errors import (
    ConfigurationError,
    DomainViolationError,
)


class TestResponseMatrix:
    def test_valid_responses(self) -> None:
        data = ResponseMatrix(responses=np.array([[1, 5, 3], [2, 4, 3]]))
        assert data.n_persons == 2
        assert data.n_items == 3
        assert data.responses.dtype == np.int8

    def test_category_indices_are_zero_based(self) -> None:
        data = ResponseMatrix(responses=np.array([[1, 5], [3, 2]]))
        np.testing.assert_array_equal(data.category_indices, [[0, 4], [2, 1]])

    @pytest.mark.parametrize("bad_value", [0, 6, -1])
    def test_out_of_range_value_names_cell(self, bad_value: int) -> None:
        responses = np.array([[1, 2, 3], [4, bad_value, 5]])
        with pytest.raises(DomainViolationError, match="person 1, item 1"):
            ResponseMatrix(responses=responses)

    def test_fractional_value_names_cell(self) -> None:
        responses = np.array([[1.0, 2.0], [2.5, 4.9]])
        with pytest.raises(DomainViolationError, match="person 1, item 0"):
            ResponseMatrix(responses=responses)

    def test_nan_value_rejected(self) -> None:
        with pytest.raises(DomainViolationError, match="whole categories"):
            ResponseMatrix(responses=np.array([[1.0, np.nan]]))

    def test_whole_float_values_accepted(self) -> None:
        data = ResponseMatrix(responses=np.array([[1.0, 5.0], [3.0, 2.0]]))
        np.testing.assert_array_equal(data.responses, [[1, 5], [3, 2]])
        assert data.responses.dtype == np.int8

    def test_must_be_2d(self) -> None:
        with pytest.raises(ValueError):
            ResponseMatrix(responses=np.array([1, 2, 3]))

    def test_read_only(self) -> None:
        data = ResponseMatrix(responses=np.array([[1, 2]]))
        with pytest.raises(ValueError):
            data.responses[0, 0] = 3

    def test_item_category_counts(self) -> None:
        data = ResponseMatrix(responses=np.array([[1, 2], [1, 5], [3, 5]]))
        np.testing.assert_array_equal(
            data.item_category_counts(0), [2, 0, 1, 0, 0]
        )
        np.testing.assert_array_equal(
            data.item_category_counts(1), [0, 1, 0, 0, 2]
        )


class TestItemMetadata:
    def test_from_sequences(self) -> None:
        items = ItemMetadata.from_sequences([0, 1, 0], [1, 2, 2])
        assert items.n_items == 3
        assert items.max_trait_dimension == 2
        np.testing.assert_array_equal(items.trait_group, [0, 1, 1])
        np.testing.assert_array_equal(items.key_sign, [1.0, -1.0, 1.0])

    def test_length_mismatch(self) -> None:
        with pytest.raises(ConfigurationError, match="same length"):
            ItemMetadata.from_sequences([0, 1], [1])

    def test_trait_dimension_must_be_positive(self) -> None:
        with pytest.raises(ConfigurationError, match="item 1"):
            ItemMetadata.from_sequences([0, 0], [1, 0])

    def test_reverse_keyed_must_be_binary(self) -> None:
        with pytest.raises(ConfigurationError, match="item 2"):
            ItemMetadata.from_sequences([0, 1, 2], [1, 1, 1])

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ItemMetadata.from_sequences([], [])
