#!/usr/bin/env python3
"""
Created on Sun Sep 27 18:00:00 2026.

@author: yoh

"""
from .classifier import classify_islands
from .classifier import compute_island_starts
from .coordinator import CompactionCoordinator
from .coordinator import CompactionResult
from .coordinator import CompactionState
from .planner import MutationPlan
from .planner import apply_plan
from .planner import plan_compaction
from .planner import plan_mutations
from .reducer import compute_island_ids
from .reducer import merge_ranges
from .reducer import reduce_islands


__all__ = [
    "CompactionCoordinator",
    "CompactionResult",
    "CompactionState",
    "MutationPlan",
    "apply_plan",
    "classify_islands",
    "compute_island_ids",
    "compute_island_starts",
    "merge_ranges",
    "plan_compaction",
    "plan_mutations",
    "reduce_islands",
]
