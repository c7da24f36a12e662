"""
Tables of hierarchical item means and variances.

Item parameters are grouped by (trait group, process). A process is either
trait-grouped, in which case every trait group has its own mean and variance,
or shared, in which case all items use a single value stored in row 0.

Tables always have shape (n_groups, n_processes). Shared columns hold one
free value; the remaining rows of a shared column are kept equal to row 0.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from response_style_models.core.data_models import ItemMetadata
from response_style_models.core.errors import InvalidDimensionError

MPT_PROCESS_NAMES = (
    "middle",
    "extreme",
    "acquiescence",
    "trait",
    "acquiescence_extreme",
)
PCM_PROCESS_NAMES = (
    "threshold_1",
    "threshold_2",
    "threshold_3",
    "threshold_4",
)


@dataclass(frozen=True)
class HierarchyLayout:
    """
    Maps every (item, process) pair onto a cell of a (group, process) table.

    Attributes:
        process_names: Name of each item process column.
        trait_grouped: Per process, whether the hierarchy is split by the
            item's trait dimension.
        item_groups: 0-based trait group of every item, shape (n_items,).
        n_groups: Number of trait groups (rows of the tables).
    """

    process_names: tuple[str, ...]
    trait_grouped: tuple[bool, ...]
    item_groups: NDArray[np.int64]
    n_groups: int

    def __post_init__(self) -> None:
        if len(self.process_names) != len(self.trait_grouped):
            raise InvalidDimensionError(
                f"process_names and trait_grouped must have same length, "
                f"got {len(self.process_names)} and {len(self.trait_grouped)}"
            )
        if self.n_groups < 1:
            raise InvalidDimensionError(
                f"n_groups must be >= 1, got {self.n_groups}"
            )
        too_large = self.item_groups >= self.n_groups
        if too_large.any():
            item = int(np.argmax(too_large))
            raise InvalidDimensionError(
                f"Item {item} loads on trait dimension "
                f"{int(self.item_groups[item]) + 1}, but the model only has "
                f"{self.n_groups} trait groups"
            )

    @classmethod
    def for_items(
        cls,
        items: ItemMetadata,
        process_names: tuple[str, ...],
        trait_grouped: tuple[bool, ...],
        n_groups: int,
    ) -> "HierarchyLayout":
        return cls(
            process_names=process_names,
            trait_grouped=trait_grouped,
            item_groups=items.trait_group,
            n_groups=n_groups,
        )

    @property
    def n_items(self) -> int:
        return len(self.item_groups)

    @property
    def n_processes(self) -> int:
        return len(self.process_names)

    @property
    def table_shape(self) -> tuple[int, int]:
        return (self.n_groups, self.n_processes)

    @property
    def free_mask(self) -> NDArray[np.bool_]:
        """
        Cells of a table that carry a free parameter.

        Returns:
            Boolean array of shape (n_groups, n_processes). Trait-grouped
            columns are free in every row, shared columns only in row 0.
        """
        mask = np.zeros(self.table_shape, dtype=np.bool_)
        for process, grouped in enumerate(self.trait_grouped):
            if grouped:
                mask[:, process] = True
            else:
                mask[0, process] = True
        return mask

    @property
    def n_free_cells(self) -> int:
        return int(self.free_mask.sum())

    def group_of(self, item: int, process: int) -> int:
        """Table row used by one (item, process) pair."""
        if self.trait_grouped[process]:
            return int(self.item_groups[item])
        return 0

    def group_index(self) -> NDArray[np.int64]:
        """
        Table row of every (item, process) pair.

        Returns:
            Integer array of shape (n_items, n_processes).
        """
        grouped = np.array(self.trait_grouped, dtype=np.bool_)
        result: NDArray[np.int64] = np.where(
            grouped[np.newaxis, :], self.item_groups[:, np.newaxis], 0
        ).astype(np.int64)
        return result

    def item_table(self, table: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Look up the cell of every (item, process) pair.

        Args:
            table: Array of shape (n_groups, n_processes).

        Returns:
            Array of shape (n_items, n_processes).
        """
        self.check_table(table)
        processes = np.arange(self.n_processes)
        result: NDArray[np.float64] = table[
            self.group_index(), processes[np.newaxis, :]
        ]
        return result

    def broadcast(self, table: NDArray[np.float64]) -> NDArray[np.float64]:
        """Copy row 0 of shared columns into every row."""
        self.check_table(table)
        result = np.array(table, dtype=np.float64)
        for process, grouped in enumerate(self.trait_grouped):
            if not grouped:
                result[:, process] = result[0, process]
        return result

    def from_free_values(
        self, values: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Build a broadcast table from its free cells (row-major order)."""
        if values.shape != (self.n_free_cells,):
            raise InvalidDimensionError(
                f"Expected {self.n_free_cells} free values, "
                f"got shape {values.shape}"
            )
        table = np.zeros(self.table_shape, dtype=np.float64)
        table[self.free_mask] = values
        return self.broadcast(table)

    def free_values(self, table: NDArray[np.float64]) -> NDArray[np.float64]:
        """Free cells of a table in row-major order."""
        self.check_table(table)
        result: NDArray[np.float64] = np.asarray(table, dtype=np.float64)[
            self.free_mask
        ]
        return result

    def check_table(self, table: NDArray[np.float64]) -> None:
        if np.shape(table) != self.table_shape:
            raise InvalidDimensionError(
                f"Expected table of shape {self.table_shape}, "
                f"got {np.shape(table)}"
            )
