"""
Training Load Engine.

Acute (7-day) and chronic (28-day) load, the acute:chronic ratio and the
state classifiers used for coaching advice.

Load of a window is the sum over its runs of

    distance_km * (run_speed / window_average_speed)

i.e. distance weighted by how hard the run was relative to the same
window's average. Each window computes its own baseline speed, so a hard
week is measured against itself for acute load and against the month for
chronic load.

All functions are pure and total: empty windows and zero baselines yield
zero rather than raising.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Sequence

from strava_coach.features.activities.schemas import ActivityRecord
from strava_coach.features.activities.summary import (
    records_in_last_days,
    total_distance_km,
)
from strava_coach.shared.constants import (
    ACUTE_WINDOW_DAYS,
    CHRONIC_WINDOW_DAYS,
    HIGH_RISK_RATIO,
    OPTIMAL_RATIO_MIN,
    OPTIMAL_RATIO_MAX,
    LOAD_SCORE_MULTIPLIER,
    LOAD_SCORE_MAX,
    FATIGUE_CONSECUTIVE_DAYS,
    FATIGUE_LAST_3_DAYS_KM,
    BUILDING_LAST_7_DAYS_KM,
    RECOVERING_LAST_3_DAYS_KM,
    RECOVERING_LAST_7_DAYS_KM,
    SHORT_WINDOW_DAYS,
)
from strava_coach.shared.formulas import round_half_up, safe_ratio


class RiskBand(str, Enum):
    """Injury-risk band derived from the acute:chronic ratio."""
    HIGH_RISK = "high injury risk"
    OPTIMAL = "optimal"
    UNDERTRAINING = "undertraining"
    BUILDING = "building"


class TrainingState(str, Enum):
    """Short-term training state used for coaching advice."""
    FRESH = "fresh"
    BUILDING = "building"
    FATIGUED = "fatigued"
    RECOVERING = "recovering"


@dataclass(frozen=True)
class LoadWindow:
    """Aggregate over the runs of one trailing window."""
    window_days: int
    count: int
    total_distance_km: float
    average_speed: float  # m/s, mean of run speeds
    load: float


@dataclass(frozen=True)
class LoadAssessment:
    """Acute vs chronic load with its risk band."""
    acute_load: float
    chronic_load: float
    ratio: float
    risk_band: RiskBand
    load_score: int  # 0-100, display only


@dataclass(frozen=True)
class TrainingLoadReport:
    """Both windows plus the assessment built from them."""
    acute: LoadWindow
    chronic: LoadWindow
    assessment: LoadAssessment


@dataclass(frozen=True)
class RecentLoad:
    """Short-term volume used by the training-state classifier."""
    last_7_days_km: float
    last_3_days_km: float
    consecutive_days: int
    training_state: TrainingState


# =============================================================================
# Load windows
# =============================================================================

def window_load(records: Sequence[ActivityRecord], window_days: int) -> LoadWindow:
    """
    Intensity-weighted load of one window.

    Args:
        records: Runs already restricted to the window
        window_days: Window length, carried for display

    Returns:
        LoadWindow; load is 0 when the window is empty or nobody moved
    """
    count = len(records)
    average_speed = safe_ratio(sum(r.average_speed for r in records), count)

    load = 0.0
    if average_speed > 0:
        for record in records:
            load += record.distance_km * (record.average_speed / average_speed)

    return LoadWindow(
        window_days=window_days,
        count=count,
        total_distance_km=total_distance_km(records),
        average_speed=average_speed,
        load=load,
    )


def classify_risk(ratio: float) -> RiskBand:
    """
    Map an acute:chronic ratio to a risk band.

    Bands are checked in priority order:
    > 1.5 high risk, [0.8, 1.3] optimal, < 0.8 undertraining,
    otherwise (1.3, 1.5] building.
    """
    if ratio > HIGH_RISK_RATIO:
        return RiskBand.HIGH_RISK
    if OPTIMAL_RATIO_MIN <= ratio <= OPTIMAL_RATIO_MAX:
        return RiskBand.OPTIMAL
    if ratio < OPTIMAL_RATIO_MIN:
        return RiskBand.UNDERTRAINING
    return RiskBand.BUILDING


def load_score(acute_load: float) -> int:
    """Cosmetic 0-100 score: twice the acute load, saturating at 100."""
    return min(LOAD_SCORE_MAX, round_half_up(acute_load * LOAD_SCORE_MULTIPLIER))


def assess_load(acute_load: float, chronic_load: float) -> LoadAssessment:
    """
    Build an assessment from two load values.

    A zero chronic load gives ratio 0 (no history means no ratio).
    """
    ratio = acute_load / chronic_load if chronic_load != 0 else 0.0

    return LoadAssessment(
        acute_load=acute_load,
        chronic_load=chronic_load,
        ratio=ratio,
        risk_band=classify_risk(ratio),
        load_score=load_score(acute_load),
    )


def assess_training_load(
    records: Sequence[ActivityRecord],
    as_of: datetime,
    acute_days: int = ACUTE_WINDOW_DAYS,
    chronic_days: int = CHRONIC_WINDOW_DAYS,
) -> TrainingLoadReport:
    """
    Split runs into acute and chronic windows ending at `as_of` and assess.

    The windows overlap: the chronic window contains the acute one.
    """
    acute = window_load(records_in_last_days(records, as_of, acute_days), acute_days)
    chronic = window_load(records_in_last_days(records, as_of, chronic_days), chronic_days)

    return TrainingLoadReport(
        acute=acute,
        chronic=chronic,
        assessment=assess_load(acute.load, chronic.load),
    )


# =============================================================================
# Streaks and training state
# =============================================================================

def consecutive_days(records: Sequence[ActivityRecord]) -> int:
    """
    Length of the run streak ending at the most recent run.

    Walks runs newest first and counts while each run's local date is
    exactly one day before the previous one. The walk stops at the first
    run that is not on the adjacent day, including a second run on the
    same day.
    """
    ordered = sorted(records, key=lambda r: r.start_date_local, reverse=True)

    streak = 0
    last_day: date | None = None

    for record in ordered:
        day = record.local_date
        if last_day is None:
            streak = 1
        elif (last_day - day).days == 1:
            streak += 1
        else:
            break
        last_day = day

    return streak


def classify_training_state(
    consecutive: int,
    last_3_days_km: float,
    last_7_days_km: float,
) -> TrainingState:
    """
    Classify short-term training state; first matching rule wins.

    1. fatigued:   4+ consecutive days, or > 30 km in the last 3 days
    2. building:   > 40 km in the last 7 days
    3. recovering: < 10 km in 3 days and < 20 km in 7 days
    4. fresh:      anything else
    """
    if consecutive >= FATIGUE_CONSECUTIVE_DAYS or last_3_days_km > FATIGUE_LAST_3_DAYS_KM:
        return TrainingState.FATIGUED
    if last_7_days_km > BUILDING_LAST_7_DAYS_KM:
        return TrainingState.BUILDING
    if last_3_days_km < RECOVERING_LAST_3_DAYS_KM and last_7_days_km < RECOVERING_LAST_7_DAYS_KM:
        return TrainingState.RECOVERING
    return TrainingState.FRESH


def recent_load(
    records: Sequence[ActivityRecord],
    as_of: datetime,
) -> RecentLoad:
    """Volume of the last 7 and 3 days, streak, and the resulting state."""
    last_7 = records_in_last_days(records, as_of, ACUTE_WINDOW_DAYS)
    last_3 = records_in_last_days(last_7, as_of, SHORT_WINDOW_DAYS)

    last_7_km = total_distance_km(last_7)
    last_3_km = total_distance_km(last_3)
    streak = consecutive_days(last_7)

    return RecentLoad(
        last_7_days_km=last_7_km,
        last_3_days_km=last_3_km,
        consecutive_days=streak,
        training_state=classify_training_state(streak, last_3_km, last_7_km),
    )
