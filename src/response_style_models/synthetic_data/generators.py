"""
Orchestration layer for synthetic survey generation.

This module ties together item design, prior draws and the probability trees
to generate complete survey response data.
"""

import logging
from pathlib import Path

import pandas as pd

from response_style_models.core.data import PERSON_ID_COLUMN
from response_style_models.core.data_models import ResponseMatrix
from response_style_models.core.utils import get_rng
from response_style_models.irt.inference.density import (
    compute_category_probabilities,
)
from response_style_models.irt.inference.model import (
    build_specification,
    build_tree,
)
from response_style_models.irt.sampling import sample_responses_batch
from response_style_models.synthetic_data.config import GenerationConfig
from response_style_models.synthetic_data.data_models import GeneratedData
from response_style_models.synthetic_data.parameters import (
    build_hyperparameters,
    build_item_metadata,
    sample_raw_parameters,
)

logger = logging.getLogger(__name__)


def generate_survey_responses(config: GenerationConfig) -> GeneratedData:
    """
    Generate synthetic survey response data.

    This is the main entry point for the synthetic data generation pipeline.
    It orchestrates the full generation process:
        1. Lay out items over trait groups and reverse keying
        2. Build the model specification
        3. Draw every parameter from its hierarchical prior
        4. Evaluate the probability tree
        5. Sample one response per person and item

    Args:
        config: Complete generation configuration.

    Returns:
        GeneratedData containing responses and the true parameters.
    """
    rng = get_rng(config.random_seed)
    model_config = config.to_model_config()

    # Step 1: Item design
    items = build_item_metadata(config, rng)

    # Step 2: Model specification
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

    # Step 3: Prior draws
    raw = sample_raw_parameters(spec, config, rng)

    # Step 4: Category probabilities
    probabilities = compute_category_probabilities(raw, spec)

    # Step 5: Responses
    responses = ResponseMatrix(
        responses=sample_responses_batch(probabilities, rng)
    )

    logger.info(
        "Generated %d x %d responses (%s, S=%d)",
        config.n_persons,
        config.n_items,
        model_config.family.value,
        spec.n_dimensions,
    )

    return GeneratedData(
        person_ids=[f"P{i + 1:04d}" for i in range(config.n_persons)],
        item_ids=[f"item_{j + 1}" for j in range(config.n_items)],
        responses=responses,
        items=items,
        spec=spec,
        raw_parameters=raw,
        probabilities=probabilities,
        config=config,
    )


def to_dataframe(data: GeneratedData) -> pd.DataFrame:
    """
    Convert GeneratedData to a wide pandas DataFrame.

    Returns:
        DataFrame with a person_id column and one column per item.
    """
    df = pd.DataFrame(data.responses.responses, columns=data.item_ids)
    df.insert(0, PERSON_ID_COLUMN, data.person_ids)
    return df


def items_to_dataframe(data: GeneratedData) -> pd.DataFrame:
    """
    Item design as a DataFrame.

    Returns:
        DataFrame with columns: item_id, reverse_keyed, trait_dimension.
    """
    return pd.DataFrame(
        {
            "item_id": data.item_ids,
            "reverse_keyed": data.items.reverse_keyed.astype(int),
            "trait_dimension": data.items.trait_dimension,
        }
    )


def to_csv(
    data: GeneratedData, path: Path, items_path: Path | None = None
) -> None:
    """
    Write GeneratedData to CSV files.

    Args:
        data: Generated survey data.
        path: Output file path for the responses.
        items_path: Output file path for the item design. Not written if None.
    """
    to_dataframe(data).to_csv(path, index=False)
    if items_path is not None:
        items_to_dataframe(data).to_csv(items_path, index=False)
