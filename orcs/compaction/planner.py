#!/usr/bin/env python3
"""
Created on Wed Sep 23 18:00:00 2026.

@author: yoh

Mutation planner.

Compacting a partition keeps the first range of each island, its
representative, and extends its end to the end of the island. All other ranges
of the island are deleted. Rows are identified by their 'start' within a
partition.

"""
from dataclasses import dataclass
from dataclasses import field
from typing import Dict, FrozenSet, Hashable, Iterable, List

from numpy.typing import NDArray

from orcs.compaction.classifier import compute_island_starts
from orcs.compaction.reducer import reduce_islands
from orcs.defines import DEFAULT_ADJACENCY
from orcs.defines import KEY_END
from orcs.defines import KEY_REP_IDX
from orcs.defines import KEY_START
from orcs.errors import PreconditionError
from orcs.ranges import Range


@dataclass(frozen=True)
class MutationPlan:
    """
    Row-level mutations compacting a partition.

    Attributes
    ----------
    partition_key : Hashable
        Key of the compacted partition.
    deletions : FrozenSet[int]
        Starts of the ranges absorbed into their island representative.
    updates : Dict[int, int]
        New end of island representatives, keyed by their start. Only
        representatives whose end changes are listed.

    """

    partition_key: Hashable
    deletions: FrozenSet[int] = field(default_factory=frozenset)
    updates: Dict[int, int] = field(default_factory=dict)

    @property
    def n_deletions(self) -> int:
        return len(self.deletions)

    @property
    def n_updates(self) -> int:
        return len(self.updates)

    @property
    def is_empty(self) -> bool:
        """
        Return True if partition is already compacted.
        """
        return not (self.deletions or self.updates)


def plan_mutations(
    partition_key: Hashable,
    starts: NDArray,
    ends: NDArray,
    island_starts: NDArray,
    islands: NDArray,
) -> MutationPlan:
    """
    Diff original ranges against merged islands.

    Parameters
    ----------
    partition_key : Hashable
        Key of the partition.
    starts : NDArray
        Start values of the ranges of the partition, sorted in ascending order.
    ends : NDArray
        End values of ranges, in same order as 'starts'.
    island_starts : NDArray[bool]
        Flags of ranges starting an island.
    islands : NDArray
        Merged ranges as returned by ``reduce_islands()``.

    Returns
    -------
    MutationPlan
        Deletions of non-representative ranges, and updates of representative
        ends which differ from their island end.

    """
    rep_idx = islands[KEY_REP_IDX]
    if (islands[KEY_START] != starts[rep_idx]).any():
        # Only possible if ranges are not sorted.
        raise PreconditionError("merged ranges have to start with their representative.")
    rep_ends = ends[rep_idx]
    is_extended = islands[KEY_END] != rep_ends
    return MutationPlan(
        partition_key=partition_key,
        deletions=frozenset(starts[~island_starts].tolist()),
        updates=dict(
            zip(
                islands[KEY_START][is_extended].tolist(),
                islands[KEY_END][is_extended].tolist(),
            ),
        ),
    )


def plan_compaction(
    partition_key: Hashable,
    starts: NDArray,
    ends: NDArray,
    adjacency: int = DEFAULT_ADJACENCY,
) -> MutationPlan:
    """
    Classify, reduce and diff ranges of a partition.

    Parameters
    ----------
    partition_key : Hashable
        Key of the partition.
    starts : NDArray
        Start values of the ranges of the partition, sorted in ascending order.
    ends : NDArray
        End values of ranges, in same order as 'starts'.
    adjacency : int, default 1
        Contiguity threshold, see ``compute_island_starts()``.

    Returns
    -------
    MutationPlan
        Minimal set of mutations compacting the partition. Empty if the
        partition is empty or already compacted.

    Raises
    ------
    PreconditionError
        If ranges are not sorted, are duplicated, or overlap.

    """
    island_starts = compute_island_starts(starts, ends, adjacency)
    islands = reduce_islands(starts, ends, island_starts)
    return plan_mutations(partition_key, starts, ends, island_starts, islands)


def apply_plan(ranges: Iterable[Range], plan: MutationPlan) -> List[Range]:
    """
    Return ranges as they are once 'plan' is applied.

    Ranges of other partitions than that of the plan are left untouched.
    Result is sorted.

    """
    return sorted(
        Range(rng.partition_key, rng.start, plan.updates.get(rng.start, rng.end))
        if rng.partition_key == plan.partition_key
        else rng
        for rng in ranges
        if rng.partition_key != plan.partition_key or rng.start not in plan.deletions
    )
