#!/usr/bin/env python3
"""
Created on Sun Sep 27 18:00:00 2026.

@author: yoh

Compaction coordinator.

Compaction of a partition runs as a single unit, while holding the exclusive
lock of the partition:

  Idle -> PartitionLocked -> RangesFetched -> PlanComputed -> Applying -> Committed

Any failure moves the compaction to 'Aborted', and is raised to the caller.
Mutations are applied by the storage as a single atomic batch, so that an
aborted compaction leaves the partition as it was.

"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Hashable, Iterable, List, Optional, Tuple, Union

from flufl.lock import NotLockedError

from orcs.compaction.planner import MutationPlan
from orcs.compaction.planner import plan_compaction
from orcs.defines import DEFAULT_LOCK_LIFETIME
from orcs.defines import DEFAULT_LOCK_TIMEOUT
from orcs.defines import KEY_END
from orcs.defines import KEY_START
from orcs.errors import LockTimeoutError
from orcs.ranges import check_adjacency
from orcs.store.base import RangeStorage
from orcs.store.lock import partition_lock


logger = logging.getLogger(__name__)


class CompactionState(Enum):
    IDLE = "idle"
    PARTITION_LOCKED = "partition_locked"
    RANGES_FETCHED = "ranges_fetched"
    PLAN_COMPUTED = "plan_computed"
    APPLYING = "applying"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CompactionResult:
    """
    Outcome of a committed compaction.

    Attributes
    ----------
    partition_key : Hashable
        Key of the compacted partition.
    plan : MutationPlan
        Mutations computed, and applied unless a dry run.
    states : Tuple[CompactionState]
        States the compaction went through.
    applied : bool
        True if mutations have been applied to storage.

    """

    partition_key: Hashable
    plan: MutationPlan
    states: Tuple[CompactionState, ...]
    applied: bool

    @property
    def n_deletions(self) -> int:
        return self.plan.n_deletions

    @property
    def n_updates(self) -> int:
        return self.plan.n_updates


class _Compaction:
    """
    A single compaction run, recording the states it goes through.
    """

    def __init__(self, partition_key: Hashable):
        self.partition_key = partition_key
        self.states: List[CompactionState] = [CompactionState.IDLE]

    def transition(self, state: CompactionState):
        logger.debug(
            "partition '%s': %s -> %s",
            self.partition_key,
            self.states[-1].value,
            state.value,
        )
        self.states.append(state)


class CompactionCoordinator:
    """
    Compact partitions of a range storage, merging contiguous ranges.

    A coordinator holds no state specific to a compaction. It can be shared by
    any number of threads, compacting same or different partitions.

    Attributes
    ----------
    storage : RangeStorage
        Storage from which ranges are fetched, and to which mutations are
        applied.
    adjacency : int
        Difference between the start of a range and the end of the previous
        one for both ranges to be contiguous.
    lock_dirpath : Path
        Directory of partition lock files.
    lock_timeout : Optional[int]
        Maximum time to wait for partition lock acquisition in seconds.
    lock_lifetime : Optional[int]
        Maximum partition lock lifetime in seconds.

    Methods
    -------
    compact()
        Compact a single partition.
    compact_many()
        Compact several partitions in parallel.

    """

    def __init__(
        self,
        storage: RangeStorage,
        adjacency: Optional[int] = None,
        lock_timeout: Optional[int] = DEFAULT_LOCK_TIMEOUT,
        lock_lifetime: Optional[int] = DEFAULT_LOCK_LIFETIME,
        lock_dirpath: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize coordinator.

        Parameters
        ----------
        storage : RangeStorage
            Storage of the ranges.
        adjacency : Optional[int], default None
            Contiguity threshold. If not set, that of the storage is used.
        lock_timeout : Optional[int], default 20
            Maximum time to wait for partition lock acquisition in seconds.
            None means wait until acquired, 0 means fail if the partition is
            already locked.
        lock_lifetime : Optional[int], default 40
            Maximum partition lock lifetime in seconds. A compaction lasting
            longer may see its lock broken by another process, and is then
            aborted before applying mutations.
        lock_dirpath : Optional[Union[str, Path]], default None
            Directory of partition lock files. If not set, that of the storage
            is used.

        """
        self.storage = storage
        self.adjacency = (
            storage.adjacency if adjacency is None else check_adjacency(adjacency)
        )
        self.lock_timeout = lock_timeout
        self.lock_lifetime = lock_lifetime
        self.lock_dirpath = Path(lock_dirpath or storage.lock_dirpath).resolve()

    def compact(self, partition_key: Hashable, dry_run: bool = False) -> CompactionResult:
        """
        Merge contiguous ranges of a partition.

        Parameters
        ----------
        partition_key : Hashable
            Key of the partition to compact.
        dry_run : bool, default False
            If True, mutations are computed but not applied.

        Returns
        -------
        CompactionResult
            Mutation plan, and states the compaction went through.

        Raises
        ------
        LockTimeoutError
            If partition lock is not acquired within 'lock_timeout', or has
            expired before mutations are applied.
        PreconditionError
            If ranges fetched from storage are not sorted or overlap.
        StorageError
            If storage fails to apply mutations.

        """
        compaction = _Compaction(partition_key)
        applied = False
        try:
            with partition_lock(
                self.lock_dirpath,
                partition_key,
                timeout=self.lock_timeout,
                lifetime=self.lock_lifetime,
            ) as lock:
                compaction.transition(CompactionState.PARTITION_LOCKED)
                ranges = self.storage.fetch_sorted(partition_key)
                compaction.transition(CompactionState.RANGES_FETCHED)
                plan = plan_compaction(
                    partition_key,
                    ranges[KEY_START].to_numpy(),
                    ranges[KEY_END].to_numpy(),
                    self.adjacency,
                )
                compaction.transition(CompactionState.PLAN_COMPUTED)
                if not (plan.is_empty or dry_run):
                    try:
                        # Extend lock lifetime, checking it has not been lost.
                        lock.refresh()
                    except NotLockedError as e:
                        raise LockTimeoutError(
                            f"lock for partition '{partition_key}' expired before "
                            "applying mutations.",
                            partition_key=partition_key,
                        ) from e
                    compaction.transition(CompactionState.APPLYING)
                    self.storage.apply(partition_key, plan.deletions, plan.updates)
                    applied = True
        except Exception:
            compaction.transition(CompactionState.ABORTED)
            logger.warning("compaction of partition '%s' aborted", partition_key, exc_info=True)
            raise
        compaction.transition(CompactionState.COMMITTED)
        if applied:
            logger.info(
                "compacted partition '%s': %d ranges deleted, %d ranges extended",
                partition_key,
                plan.n_deletions,
                plan.n_updates,
            )
        return CompactionResult(
            partition_key=partition_key,
            plan=plan,
            states=tuple(compaction.states),
            applied=applied,
        )

    def compact_many(
        self,
        partition_keys: Optional[Iterable[Hashable]] = None,
        max_workers: Optional[int] = None,
        dry_run: bool = False,
    ) -> Dict[Hashable, CompactionResult]:
        """
        Compact several partitions in parallel.

        Each partition is compacted under its own lock. Compactions of
        different partitions do not wait for each other.

        Parameters
        ----------
        partition_keys : Optional[Iterable[Hashable]], default None
            Keys of partitions to compact. If None, all partitions of the
            storage are compacted.
        max_workers : Optional[int], default None
            Maximum number of threads, as in ``ThreadPoolExecutor``.
        dry_run : bool, default False
            If True, mutations are computed but not applied.

        Returns
        -------
        Dict[Hashable, CompactionResult]
            Compaction results, per partition key.

        Raises
        ------
        Exception
            First exception raised by a compaction, in order of
            'partition_keys', once all compactions have completed.

        """
        if partition_keys is None:
            partition_keys = self.storage.partitions()
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                partition_key: executor.submit(self.compact, partition_key, dry_run)
                for partition_key in partition_keys
            }
        # Exiting executor context waits for all compactions to complete.
        return {partition_key: future.result() for partition_key, future in futures.items()}
