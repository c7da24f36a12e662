"""
Probability trees for 5-point survey responses.

This module computes P(category | person, item) for every person x item pair.
Two interchangeable trees share one interface:

- MPTResponseTree: multinomial processing tree with midpoint, extremity and
  acquiescence processes around a directional trait process.
- PartialCreditResponseTree: ordinal partial credit model with four item
  thresholds and a softmax over cumulative scores.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from response_style_models.core.constants import N_CATEGORIES
from response_style_models.core.data_models import ItemMetadata
from response_style_models.core.errors import (
    DomainViolationError,
    InvalidDimensionError,
)
from response_style_models.core.utils import phi_approx, softmax
from response_style_models.irt.inference.config import MPTOptions
from response_style_models.irt.inference.enums import (
    AcquiescenceExtremity,
    AcquiescenceSource,
    MPTPersonDimension,
    MPTProcess,
)
from response_style_models.irt.inference.hierarchy import (
    MPT_PROCESS_NAMES,
    PCM_PROCESS_NAMES,
)

N_THRESHOLDS = N_CATEGORIES - 1


def reverse_categories(probs: NDArray[np.float64]) -> NDArray[np.float64]:
    """Swap categories 1<->5 and 2<->4 along the last axis."""
    result: NDArray[np.float64] = np.asarray(probs)[..., ::-1]
    return result


def mpt_category_probabilities(
    middle: NDArray[np.float64],
    extreme: NDArray[np.float64],
    acquiescence: NDArray[np.float64],
    trait: NDArray[np.float64],
    extreme_after_acquiescence: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Combine binary process probabilities into 5 category probabilities.

    With a = acquiescence, m = middle, t = trait, e = extreme and
    ea = extremity after acquiescence:
        p1 = (1-a)(1-m)(1-t) e
        p2 = (1-a)(1-m)(1-t)(1-e)
        p3 = (1-a) m
        p4 = (1-a)(1-m) t (1-e) + a (1-ea)
        p5 = (1-a)(1-m) t e     + a ea

    p1 + p2 = (1-a)(1-m)(1-t) and p4 + p5 = (1-a)(1-m) t + a, so the total
    is (1-a)(1-m) + (1-a) m + a = 1 for any inputs.

    All arguments broadcast against each other.

    Returns:
        Array with the broadcast shape plus a trailing axis of length 5.
    """
    not_acq = 1.0 - acquiescence
    substantive = not_acq * (1.0 - middle)
    disagree = substantive * (1.0 - trait)
    agree = substantive * trait

    return np.stack(
        [
            disagree * extreme,
            disagree * (1.0 - extreme),
            not_acq * middle,
            agree * (1.0 - extreme)
            + acquiescence * (1.0 - extreme_after_acquiescence),
            agree * extreme + acquiescence * extreme_after_acquiescence,
        ],
        axis=-1,
    )


def _check_probabilities(probs: NDArray[np.float64]) -> None:
    if not np.all(np.isfinite(probs)):
        raise DomainViolationError("Category probabilities are not finite")
    if np.any(probs < 0.0) or np.any(probs > 1.0):
        raise DomainViolationError("Category probabilities outside [0, 1]")


class ResponseTree(ABC):
    """Abstract base class for trees mapping latent parameters to 5 categories."""

    @abstractmethod
    def n_dimensions(self, n_groups: int) -> int:
        """Number of person dimensions S for n_groups trait groups."""
        ...

    @property
    @abstractmethod
    def process_names(self) -> tuple[str, ...]:
        """Item process columns that carry item-level parameters."""
        ...

    @property
    @abstractmethod
    def trait_grouped(self) -> tuple[bool, ...]:
        """Per process column, whether its hierarchy splits by trait group."""
        ...

    @abstractmethod
    def compute_probabilities_batch(
        self,
        theta: NDArray[np.float64],
        beta: NDArray[np.float64],
        items: ItemMetadata,
    ) -> NDArray[np.float64]:
        """
        Compute category probabilities for every person and item.

        Args:
            theta: Person locations, shape (n_persons, S).
            beta: Item locations, shape (n_items, n_columns).
            items: Item metadata.

        Returns:
            Array of shape (n_persons, n_items, 5) whose last axis sums to 1.
        """
        ...

    def compute_probabilities(
        self,
        theta: NDArray[np.float64],
        beta: NDArray[np.float64],
        reverse_keyed: bool,
        trait_dimension: int,
    ) -> NDArray[np.float64]:
        """
        Compute the category probabilities of a single person x item pair.

        Args:
            theta: One person's locations, shape (S,).
            beta: One item's locations, shape (n_columns,).
            reverse_keyed: Whether the item is reverse keyed.
            trait_dimension: 1-based trait dimension of the item.

        Returns:
            Array of shape (5,) summing to 1.
        """
        items = ItemMetadata.from_sequences(
            [int(reverse_keyed)], [trait_dimension]
        )
        probs = self.compute_probabilities_batch(
            np.asarray(theta, dtype=np.float64)[np.newaxis, :],
            np.asarray(beta, dtype=np.float64)[np.newaxis, :],
            items,
        )
        result: NDArray[np.float64] = probs[0, 0]
        return result

    @staticmethod
    def _check_shapes(
        theta: NDArray[np.float64],
        beta: NDArray[np.float64],
        items: ItemMetadata,
        n_columns: int,
    ) -> None:
        if theta.ndim != 2:
            raise InvalidDimensionError(
                f"theta must be 2D, got shape {theta.shape}"
            )
        if beta.shape != (items.n_items, n_columns):
            raise InvalidDimensionError(
                f"beta must have shape ({items.n_items}, {n_columns}), "
                f"got {beta.shape}"
            )


@dataclass(frozen=True)
class MPTBranches:
    """Binary process probabilities of the response style tree, each (n_persons, n_items)."""

    middle: NDArray[np.float64]
    extreme: NDArray[np.float64]
    acquiescence: NDArray[np.float64]
    trait: NDArray[np.float64]
    extreme_after_acquiescence: NDArray[np.float64]


class MPTResponseTree(ResponseTree):
    """
    Response style multinomial processing tree (Boeckenholt, extended).

    Person dimensions are [middle, extreme, acquiescence, trait_1..trait_T],
    followed by one more acquiescence dimension when acquiescence is trait
    specific. Item columns are [middle, extreme, acquiescence, trait,
    acquiescence_extreme].

    Every process is a probit-type link of a person minus item difference:
        middle  = Phi(theta_mid - beta_mid)
        extreme = Phi(theta_ext - beta_ext)
        acquies = Phi(theta_acq - beta_acq)
        trait   = Phi((-1)^rev * (theta_trait - beta_trait))
        extreme_after_acquiescence = Phi(theta_ext - beta_acq_extreme)
    """

    def __init__(self, options: MPTOptions | None = None):
        self.options = options or MPTOptions()

    @property
    def has_item_acquiescence_extremity(self) -> bool:
        return (
            self.options.acquiescence_extremity
            == AcquiescenceExtremity.PER_ITEM
        )

    def n_dimensions(self, n_groups: int) -> int:
        n_dims = int(MPTPersonDimension.FIRST_TRAIT) + n_groups
        if (
            self.options.acquiescence_source
            == AcquiescenceSource.TRAIT_SPECIFIC
        ):
            n_dims += 1
        return n_dims

    @property
    def process_names(self) -> tuple[str, ...]:
        if self.has_item_acquiescence_extremity:
            return MPT_PROCESS_NAMES
        return MPT_PROCESS_NAMES[: MPTProcess.ACQUIESCENCE_EXTREME]

    @property
    def trait_grouped(self) -> tuple[bool, ...]:
        return tuple(
            process == MPTProcess.TRAIT
            for process in range(len(self.process_names))
        )

    def acquiescence_dimensions(
        self, items: ItemMetadata, n_dimensions: int
    ) -> NDArray[np.int64]:
        """
        Person dimension feeding the acquiescence branch of every item.

        Args:
            items: Item metadata.
            n_dimensions: Number of person dimensions S.

        Returns:
            0-based dimension index per item, shape (n_items,).
        """
        shared = np.full(
            items.n_items, int(MPTPersonDimension.ACQUIESCENCE), np.int64
        )
        match self.options.acquiescence_source:
            case AcquiescenceSource.SHARED:
                return shared
            case AcquiescenceSource.TRAIT_SPECIFIC:
                # Items on the first trait draw on the last person dimension
                return np.where(
                    items.trait_dimension == 1, n_dimensions - 1, shared
                ).astype(np.int64)
        raise ValueError(
            f"Unknown acquiescence source: {self.options.acquiescence_source}"
        )

    def trait_dimensions(self, items: ItemMetadata) -> NDArray[np.int64]:
        """0-based person dimension of every item's trait."""
        result: NDArray[np.int64] = (
            int(MPTPersonDimension.FIRST_TRAIT) + items.trait_group
        )
        return result

    def branch_probabilities(
        self,
        theta: NDArray[np.float64],
        beta: NDArray[np.float64],
        items: ItemMetadata,
    ) -> MPTBranches:
        """
        Evaluate the five binary processes for every person and item.

        Args:
            theta: Person locations, shape (n_persons, S).
            beta: Item locations, shape (n_items, 5).
            items: Item metadata.

        Returns:
            MPTBranches with arrays of shape (n_persons, n_items).
        """
        self._check_shapes(theta, beta, items, len(MPT_PROCESS_NAMES))
        n_dimensions = theta.shape[1]

        trait_dims = self.trait_dimensions(items)
        acq_dims = self.acquiescence_dimensions(items, n_dimensions)
        if trait_dims.max() >= n_dimensions:
            item = int(np.argmax(trait_dims))
            raise InvalidDimensionError(
                f"Item {item} needs person dimension {int(trait_dims[item])}, "
                f"but theta only has {n_dimensions} dimensions"
            )

        theta_mid = theta[:, MPTPersonDimension.MIDDLE, np.newaxis]
        theta_ext = theta[:, MPTPersonDimension.EXTREME, np.newaxis]

        middle = phi_approx(theta_mid - beta[np.newaxis, :, MPTProcess.MIDDLE])
        extreme = phi_approx(
            theta_ext - beta[np.newaxis, :, MPTProcess.EXTREME]
        )
        acquiescence = phi_approx(
            theta[:, acq_dims] - beta[np.newaxis, :, MPTProcess.ACQUIESCENCE]
        )
        trait = phi_approx(
            items.key_sign[np.newaxis, :]
            * (theta[:, trait_dims] - beta[np.newaxis, :, MPTProcess.TRAIT])
        )
        extreme_after_acquiescence = phi_approx(
            theta_ext - beta[np.newaxis, :, MPTProcess.ACQUIESCENCE_EXTREME]
        )

        return MPTBranches(
            middle=middle,
            extreme=extreme,
            acquiescence=acquiescence,
            trait=trait,
            extreme_after_acquiescence=extreme_after_acquiescence,
        )

    def compute_probabilities_batch(
        self,
        theta: NDArray[np.float64],
        beta: NDArray[np.float64],
        items: ItemMetadata,
    ) -> NDArray[np.float64]:
        branches = self.branch_probabilities(theta, beta, items)
        probs = mpt_category_probabilities(
            branches.middle,
            branches.extreme,
            branches.acquiescence,
            branches.trait,
            branches.extreme_after_acquiescence,
        )
        _check_probabilities(probs)
        return probs


class PartialCreditResponseTree(ResponseTree):
    """
    Partial Credit Model over 5 ordered categories.

    For item j on trait d with thresholds beta_1..beta_4:
        scores = [0, theta_d - beta_1, ..., theta_d - beta_4]
        P(category) = softmax(cumsum(scores))

    Reverse-keyed items reverse the resulting probabilities (1<->5, 2<->4)
    instead of negating the trait.
    """

    def n_dimensions(self, n_groups: int) -> int:
        return n_groups

    @property
    def process_names(self) -> tuple[str, ...]:
        return PCM_PROCESS_NAMES

    @property
    def trait_grouped(self) -> tuple[bool, ...]:
        return tuple(True for _ in PCM_PROCESS_NAMES)

    def compute_probabilities_batch(
        self,
        theta: NDArray[np.float64],
        beta: NDArray[np.float64],
        items: ItemMetadata,
    ) -> NDArray[np.float64]:
        self._check_shapes(theta, beta, items, N_THRESHOLDS)
        n_dimensions = theta.shape[1]
        if items.max_trait_dimension > n_dimensions:
            item = int(np.argmax(items.trait_dimension))
            raise InvalidDimensionError(
                f"Item {item} loads on trait dimension "
                f"{items.max_trait_dimension}, but theta only has "
                f"{n_dimensions} dimensions"
            )

        n_persons = theta.shape[0]
        theta_item = theta[:, items.trait_group]

        # Shape: (n_persons, n_items, 5)
        scores = np.zeros(
            (n_persons, items.n_items, N_CATEGORIES), dtype=np.float64
        )
        scores[:, :, 1:] = (
            theta_item[:, :, np.newaxis] - beta[np.newaxis, :, :]
        )
        probs = softmax(np.cumsum(scores, axis=-1), axis=-1)

        probs[:, items.reverse_keyed, :] = reverse_categories(
            probs[:, items.reverse_keyed, :]
        )
        _check_probabilities(probs)
        return probs
