from pathlib import Path

import numpy as np
import pytest

from response_style_models.core.data import (
    load_csv_to_item_metadata,
    load_csv_to_response_matrix,
)
from response_style_models.core.errors import DomainViolationError


def test_load_responses(tmp_path: Path) -> None:
    path = tmp_path / "responses.csv"
    path.write_text("person_id,q1,q2\nA,1,5\nB,3,2\n")

    person_ids, item_ids, data = load_csv_to_response_matrix(path)

    assert person_ids == ["A", "B"]
    assert item_ids == ["q1", "q2"]
    np.testing.assert_array_equal(data.responses, [[1, 5], [3, 2]])


def test_load_responses_requires_person_id(tmp_path: Path) -> None:
    path = tmp_path / "responses.csv"
    path.write_text("id,q1\nA,1\n")

    with pytest.raises(ValueError, match="person_id"):
        load_csv_to_response_matrix(path)


def test_load_responses_rejects_missing(tmp_path: Path) -> None:
    path = tmp_path / "responses.csv"
    path.write_text("person_id,q1,q2\nA,1,\n")

    with pytest.raises(ValueError, match="Missing"):
        load_csv_to_response_matrix(path)


def test_load_responses_rejects_out_of_range(tmp_path: Path) -> None:
    path = tmp_path / "responses.csv"
    path.write_text("person_id,q1\nA,7\n")

    with pytest.raises(DomainViolationError):
        load_csv_to_response_matrix(path)


def test_load_item_metadata(tmp_path: Path) -> None:
    path = tmp_path / "items.csv"
    path.write_text(
        "item_id,reverse_keyed,trait_dimension\nq1,0,1\nq2,1,2\n"
    )

    item_ids, items = load_csv_to_item_metadata(path)

    assert item_ids == ["q1", "q2"]
    np.testing.assert_array_equal(items.reverse_keyed, [False, True])
    np.testing.assert_array_equal(items.trait_dimension, [1, 2])


def test_load_item_metadata_missing_columns(tmp_path: Path) -> None:
    path = tmp_path / "items.csv"
    path.write_text("item_id,trait_dimension\nq1,1\n")

    with pytest.raises(ValueError, match="reverse_keyed"):
        load_csv_to_item_metadata(path)


def test_load_responses_rejects_fractional(tmp_path: Path) -> None:
    path = tmp_path / "responses.csv"
    path.write_text("person_id,q1,q2\nA,2.5,4\n")

    with pytest.raises(DomainViolationError, match="whole categories"):
        load_csv_to_response_matrix(path)
