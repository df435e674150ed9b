"""
Pace Distribution Engine.

Groups runs by a caller-supplied key (run type, distance bucket, ...) and
describes the spread of paces inside each group.
"""

import statistics
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

from strava_coach.features.activities.schemas import ActivityRecord
from strava_coach.shared.constants import (
    DISTANCE_BUCKETS,
    EXAMPLE_RUNS_PER_GROUP,
    LONGEST_DISTANCE_BUCKET,
    RunType,
    WORKOUT_TYPE_TO_RUN_TYPE,
)
from strava_coach.shared.formatters import pace_from_speed, seconds_to_pace
from strava_coach.shared.formulas import round_half_up, round_to_tenth


GroupKey = Callable[[ActivityRecord], str]


@dataclass(frozen=True)
class PaceStatistics:
    """Mean, median and spread of paces, in seconds per km."""
    mean_seconds: float
    median_seconds: float
    std_dev_seconds: float
    mean: str
    median: str
    std_dev: int  # whole seconds, for display


@dataclass(frozen=True)
class ExampleRun:
    id: int
    name: str
    date: str
    distance: float
    pace: str


@dataclass(frozen=True)
class PaceGroup:
    group: str
    count: int
    statistics: PaceStatistics
    example_runs: List[ExampleRun] = field(default_factory=list)


def pace_statistics(paces: Sequence[float]) -> PaceStatistics:
    """
    Describe a set of paces (seconds per km).

    Standard deviation is the population one, so a single run has 0.
    An empty set gives all zeros.
    """
    if not paces:
        return PaceStatistics(0.0, 0.0, 0.0, seconds_to_pace(0), seconds_to_pace(0), 0)

    mean = statistics.mean(paces)
    median = statistics.median(paces)
    std_dev = statistics.pstdev(paces)

    return PaceStatistics(
        mean_seconds=mean,
        median_seconds=median,
        std_dev_seconds=std_dev,
        mean=seconds_to_pace(mean),
        median=seconds_to_pace(median),
        std_dev=round_half_up(std_dev),
    )


# =============================================================================
# Stock grouping keys
# =============================================================================

def distance_bucket(record: ActivityRecord) -> str:
    """Distance range label, e.g. '5-10km'."""
    km = record.distance_km
    for upper, label in DISTANCE_BUCKETS:
        if km < upper:
            return label
    return LONGEST_DISTANCE_BUCKET


def run_type(record: ActivityRecord) -> str:
    """Run category from Strava's workout_type; unknown values count as easy."""
    if record.workout_type is None:
        return RunType.EASY.value
    return WORKOUT_TYPE_TO_RUN_TYPE.get(record.workout_type, RunType.EASY).value


GROUP_KEYS: Dict[str, GroupKey] = {
    "runType": run_type,
    "distanceRange": distance_bucket,
}


# =============================================================================
# Grouping
# =============================================================================

def _example(record: ActivityRecord) -> ExampleRun:
    return ExampleRun(
        id=record.id,
        name=record.name,
        date=record.local_date.isoformat(),
        distance=round_to_tenth(record.distance_km),
        pace=pace_from_speed(record.average_speed),
    )


def group_paces(
    records: Sequence[ActivityRecord],
    key: GroupKey,
    examples_per_group: int = EXAMPLE_RUNS_PER_GROUP,
) -> List[PaceGroup]:
    """
    Pace statistics per group.

    Runs with no defined pace are left out. Groups are ordered by their
    first appearance in `records`; example runs are the most recent ones.
    """
    members: Dict[str, List[ActivityRecord]] = defaultdict(list)

    for record in records:
        if not record.has_pace:
            continue
        members[key(record)].append(record)

    groups = []
    for name, runs in members.items():
        recent = sorted(runs, key=lambda r: r.start_date_local, reverse=True)
        groups.append(PaceGroup(
            group=name,
            count=len(runs),
            statistics=pace_statistics([r.pace_seconds for r in runs]),
            example_runs=[_example(r) for r in recent[:examples_per_group]],
        ))

    return groups
