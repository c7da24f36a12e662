"""
Data structures for synthetic survey generation.

This module defines typed data structures for the synthetic data module.
It avoids embedding generation logic - only contracts are defined here.
"""

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from response_style_models.core.data_models import ItemMetadata, ResponseMatrix
from response_style_models.irt.inference.model import ModelSpecification
from response_style_models.irt.inference.parameters import RawParameters
from response_style_models.synthetic_data.config import GenerationConfig


class GeneratedData(BaseModel):
    """
    Complete output from synthetic data generation.

    Contains the simulated responses together with the true parameters they
    were drawn from, for validation.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Primary output
    person_ids: list[str]
    item_ids: list[str]
    responses: ResponseMatrix
    items: ItemMetadata

    # True parameters (for validation and debugging)
    spec: ModelSpecification
    raw_parameters: RawParameters
    probabilities: NDArray[np.float64]  # Shape: (n_persons, n_items, 5)

    # Generation metadata
    config: GenerationConfig

    @property
    def category_rates(self) -> NDArray[np.float64]:
        """Share of all responses falling in each category 1..5."""
        counts = np.bincount(
            self.responses.category_indices.ravel(),
            minlength=self.probabilities.shape[-1],
        )
        result: NDArray[np.float64] = counts / float(
            self.responses.responses.size
        )
        return result
