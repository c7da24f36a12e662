"""
Data models for survey responses and item metadata.

This module defines the immutable inputs of a model run:
- ResponseMatrix: observed 5-point responses, persons x items
- ItemMetadata: reverse keying and trait dimension of every item
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from response_style_models.core.constants import (
    MAX_CATEGORY,
    MIN_CATEGORY,
    N_CATEGORIES,
)
from response_style_models.core.errors import (
    ConfigurationError,
    DomainViolationError,
)


@dataclass(frozen=True)
class ResponseMatrix:
    """
    Observed responses on 5-point items.

    Attributes:
        responses: Array of shape (n_persons, n_items) with categories
            1..5 (1-based, as recorded on the survey form).
    """

    responses: NDArray[np.int8]

    def __post_init__(self) -> None:
        """Validate response matrix."""
        responses = np.asarray(self.responses)
        if responses.ndim != 2:
            raise ValueError(
                f"responses must be 2D, got shape {responses.shape}"
            )
        if responses.size > 0:
            if np.issubdtype(responses.dtype, np.floating):
                fractional = ~np.isfinite(responses) | (
                    responses != np.round(responses)
                )
                if fractional.any():
                    person, item = (
                        int(k) for k in np.argwhere(fractional)[0]
                    )
                    raise DomainViolationError(
                        f"Response values must be whole categories, got "
                        f"{responses[person, item]} for person {person}, "
                        f"item {item}"
                    )
            outside = (responses < MIN_CATEGORY) | (responses > MAX_CATEGORY)
            if outside.any():
                person, item = (int(k) for k in np.argwhere(outside)[0])
                raise DomainViolationError(
                    f"Response values must be in [{MIN_CATEGORY}, "
                    f"{MAX_CATEGORY}], got {responses[person, item]} "
                    f"for person {person}, item {item}"
                )
        responses = responses.astype(np.int8)
        responses.setflags(write=False)
        object.__setattr__(self, "responses", responses)

    @property
    def n_persons(self) -> int:
        """Number of persons (rows)."""
        return self.responses.shape[0]

    @property
    def n_items(self) -> int:
        """Number of items (columns)."""
        return self.responses.shape[1]

    @property
    def category_indices(self) -> NDArray[np.int64]:
        """0-based category indices, shape (n_persons, n_items)."""
        result: NDArray[np.int64] = (
            self.responses.astype(np.int64) - MIN_CATEGORY
        )
        return result

    def item_category_counts(self, item_idx: int) -> NDArray[np.int64]:
        """
        Count responses in each category of an item.

        Args:
            item_idx: Index of the item.

        Returns:
            Array of shape (5,) with counts for categories 1..5.
        """
        counts = np.bincount(
            self.category_indices[:, item_idx], minlength=N_CATEGORIES
        )
        return counts.astype(np.int64)


@dataclass(frozen=True)
class ItemMetadata:
    """
    Fixed per-item design information.

    Attributes:
        reverse_keyed: Boolean array of shape (n_items,). True when the item
            wording runs against the trait.
        trait_dimension: Integer array of shape (n_items,) with the 1-based
            trait dimension each item loads on.
    """

    reverse_keyed: NDArray[np.bool_]
    trait_dimension: NDArray[np.int64]

    def __post_init__(self) -> None:
        reverse_keyed = np.asarray(self.reverse_keyed)
        trait_dimension = np.asarray(self.trait_dimension)

        if reverse_keyed.ndim != 1 or trait_dimension.ndim != 1:
            raise ConfigurationError(
                "reverse_keyed and trait_dimension must be 1D"
            )
        if len(reverse_keyed) != len(trait_dimension):
            raise ConfigurationError(
                f"reverse_keyed and trait_dimension must have same length, "
                f"got {len(reverse_keyed)} and {len(trait_dimension)}"
            )
        if len(trait_dimension) == 0:
            raise ConfigurationError("Must have at least 1 item")

        bad_keys = ~np.isin(reverse_keyed, (0, 1))
        if bad_keys.any():
            item = int(np.argmax(bad_keys))
            raise ConfigurationError(
                f"reverse_keyed must be 0 or 1, got {reverse_keyed[item]} "
                f"for item {item}"
            )
        bad_dims = trait_dimension < 1
        if bad_dims.any():
            item = int(np.argmax(bad_dims))
            raise ConfigurationError(
                f"trait_dimension must be >= 1, got {trait_dimension[item]} "
                f"for item {item}"
            )

        reverse_keyed = reverse_keyed.astype(np.bool_)
        trait_dimension = trait_dimension.astype(np.int64)
        reverse_keyed.setflags(write=False)
        trait_dimension.setflags(write=False)
        object.__setattr__(self, "reverse_keyed", reverse_keyed)
        object.__setattr__(self, "trait_dimension", trait_dimension)

    @classmethod
    def from_sequences(
        cls, reverse_keyed: ArrayLike, trait_dimension: ArrayLike
    ) -> "ItemMetadata":
        """Build metadata from plain 0/1 and 1-based integer sequences."""
        return cls(
            reverse_keyed=np.asarray(reverse_keyed),
            trait_dimension=np.asarray(trait_dimension),
        )

    @property
    def n_items(self) -> int:
        """Number of items."""
        return len(self.trait_dimension)

    @property
    def max_trait_dimension(self) -> int:
        """Largest trait dimension referenced by any item."""
        return int(self.trait_dimension.max())

    @property
    def trait_group(self) -> NDArray[np.int64]:
        """0-based trait group of every item."""
        result: NDArray[np.int64] = self.trait_dimension - 1
        return result

    @property
    def key_sign(self) -> NDArray[np.float64]:
        """(-1)^reversed: +1 for regular items, -1 for reverse-keyed ones."""
        result: NDArray[np.float64] = np.where(self.reverse_keyed, -1.0, 1.0)
        return result
