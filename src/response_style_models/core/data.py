"""
CSV loading utilities for survey response data.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from response_style_models.core.data_models import ItemMetadata, ResponseMatrix

PERSON_ID_COLUMN = "person_id"
ITEM_METADATA_COLUMNS = ("item_id", "reverse_keyed", "trait_dimension")


def load_csv_to_response_matrix(
    path: Path,
) -> tuple[list[str], list[str], ResponseMatrix]:
    """Load a CSV file with survey responses into a ResponseMatrix.

    Expected CSV columns:
        - person_id: unique identifier for each respondent
        - one column per item holding categories 1..5

    Returns:
        Tuple of (person_ids, item_ids, ResponseMatrix).

    Raises:
        ValueError: If CSV format is invalid or data is inconsistent.
    """
    df = pd.read_csv(path, dtype={PERSON_ID_COLUMN: str})

    if PERSON_ID_COLUMN not in df.columns:
        raise ValueError(f"CSV must have '{PERSON_ID_COLUMN}' column")

    item_ids = [c for c in df.columns if c != PERSON_ID_COLUMN]
    if not item_ids:
        raise ValueError("CSV must have at least one item column")
    if df[item_ids].isna().any().any():
        raise ValueError("Missing responses are not supported")

    person_ids: list[str] = df[PERSON_ID_COLUMN].tolist()
    # Float so that fractional entries reach the ResponseMatrix check
    responses = df[item_ids].to_numpy(dtype=np.float64)

    return person_ids, item_ids, ResponseMatrix(responses=responses)


def load_csv_to_item_metadata(path: Path) -> tuple[list[str], ItemMetadata]:
    """Load per-item design information from CSV.

    Expected CSV columns: item_id, reverse_keyed (0/1), trait_dimension (1-based).

    Returns:
        Tuple of (item_ids, ItemMetadata).
    """
    df = pd.read_csv(path, dtype={"item_id": str})

    missing = [c for c in ITEM_METADATA_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing columns: {missing}")

    item_ids: list[str] = df["item_id"].tolist()
    items = ItemMetadata.from_sequences(
        reverse_keyed=df["reverse_keyed"].to_numpy(dtype=np.int64),
        trait_dimension=df["trait_dimension"].to_numpy(dtype=np.int64),
    )
    return item_ids, items
