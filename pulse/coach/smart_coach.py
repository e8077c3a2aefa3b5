"""
Smart Coach: deterministic validation and repair of a proposed schedule.

The model's 56-day proposal is walked week by week. Each day is first
classified (Strength on the user's strength weekdays, an evenly spread set of
Run days, Rest everywhere else), then the proposed entry for the day is either
trusted or replaced from the template library. Whatever the model returned,
the output always has 56 entries that satisfy the weekly distribution.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pulse.coach.progression import (
    DAYS_PER_WEEK,
    DEFAULT_TABLES,
    PLAN_DAYS,
    PLAN_WEEKS,
    REST_DAY,
    WEEKDAYS,
    CoachTables,
    week_number,
)

logger = logging.getLogger(__name__)

RUN = "Run"
STRENGTH = "Strength"
REST = "Rest"

GENERIC_RUN_TITLES = frozenset({"", "training run", "run", "workout"})
MIN_STRENGTH_EXERCISES = 3


@dataclass(frozen=True)
class Trusted:
    entry: Dict[str, Any]


@dataclass(frozen=True)
class Invalid:
    reason: str


Verdict = Union[Trusted, Invalid]


@dataclass(frozen=True)
class RotationState:
    """Template rotation counters carried across the whole 8-week scan."""
    strength_days: int = 0
    run_days: int = 0

    def after_strength(self) -> "RotationState":
        return replace(self, strength_days=self.strength_days + 1)

    def after_run(self) -> "RotationState":
        return replace(self, run_days=self.run_days + 1)


def normalize_strength_days(strength_days: Optional[Iterable[Any]]) -> frozenset:
    if not strength_days:
        return frozenset()
    return frozenset(d.strip().lower() for d in strength_days if isinstance(d, str) and d.strip())


def day_name(start_date: date, day_offset: int) -> str:
    return WEEKDAYS[(start_date + timedelta(days=day_offset)).weekday()]


def spread_runs(available_days: int, runs_per_week: int) -> List[int]:
    """
    Pick which of the available days get a run.

    Day i (0-based, among the available days) becomes a run when
    floor(i * R / A) equals the number of runs already placed, so runs are
    spread as evenly as R/A allows and front-loaded when it does not divide.
    """
    runs = max(0, min(runs_per_week, available_days))
    chosen = []
    for i in range(available_days):
        if len(chosen) >= runs:
            break
        if i * runs // available_days == len(chosen):
            chosen.append(i)
    return chosen


def classify_week(week: int, start_date: date, strength_days: frozenset, runs_per_week: int) -> List[str]:
    """Return the forced activity type for each day of a 0-based week."""
    week_start = week * DAYS_PER_WEEK
    types = []
    available = []
    for idx in range(DAYS_PER_WEEK):
        if day_name(start_date, week_start + idx) in strength_days:
            types.append(STRENGTH)
        else:
            types.append(REST)
            available.append(idx)

    if runs_per_week > len(available):
        logger.warning(
            f"Week {week + 1}: requested {runs_per_week} runs but only {len(available)} days available; "
            f"scheduling {len(available)}"
        )

    for pick in spread_runs(len(available), runs_per_week):
        types[available[pick]] = RUN
    return types


def validate_entry(entry: Any, expected_type: str) -> Verdict:
    """Decide whether a proposed day can be kept for a Strength or Run slot."""
    if not isinstance(entry, dict):
        return Invalid("entry is not an object")
    if entry.get("activity_type") != expected_type:
        return Invalid(f"expected {expected_type}, got {entry.get('activity_type')!r}")

    structure = entry.get("structure")
    if not isinstance(structure, dict):
        return Invalid("missing structure")

    if expected_type == STRENGTH:
        if not structure.get("split"):
            return Invalid("strength workout has no split")
        exercises = structure.get("exercises")
        if not isinstance(exercises, list) or len(exercises) < MIN_STRENGTH_EXERCISES:
            return Invalid(f"strength workout needs at least {MIN_STRENGTH_EXERCISES} exercises")
        return Trusted(entry)

    if expected_type == RUN:
        if not structure.get("distance") or not structure.get("pace"):
            return Invalid("run is missing distance or pace")
        title = entry.get("title")
        if not isinstance(title, str) or title.strip().lower() in GENERIC_RUN_TITLES:
            return Invalid(f"generic run title {title!r}")
        return Trusted(entry)

    raise ValueError(f"Cannot validate entries for activity type {expected_type}")


def _apply_strength_progression(entry, day_offset, tables):
    phase = tables.strength_phase(week_number(day_offset))
    repaired = dict(entry, day_offset=day_offset)
    repaired["structure"] = dict(
        entry["structure"],
        sets=phase.sets,
        reps=phase.reps,
        rest=phase.rest,
        instructions=phase.instructions,
    )
    return repaired


def _strength_from_template(day_offset, state, tables):
    template = tables.strength_templates[state.strength_days % len(tables.strength_templates)]
    phase = tables.strength_phase(week_number(day_offset))
    return {
        "day_offset": day_offset,
        "title": template.name,
        "activity_type": STRENGTH,
        "description": template.focus,
        "structure": {
            "duration": template.duration,
            "split": template.split,
            "exercises": list(template.exercises),
            "sets": phase.sets,
            "reps": phase.reps,
            "rest": phase.rest,
            "instructions": phase.instructions,
        },
    }


def _run_from_template(day_offset, state, tables):
    template = tables.run_templates[state.run_days % len(tables.run_templates)]
    dose = tables.run_dose(week_number(day_offset), template.key)
    return {
        "day_offset": day_offset,
        "title": template.name,
        "activity_type": RUN,
        "description": template.description,
        "structure": {
            "distance": dose.distance,
            "duration": dose.duration,
            "pace": template.pace,
            "instructions": template.instructions,
        },
    }


def _rest_day(day_offset):
    return {
        "day_offset": day_offset,
        "title": REST_DAY["title"],
        "activity_type": REST,
        "description": REST_DAY["description"],
        "structure": {"instructions": REST_DAY["instructions"]},
    }


def repair_day(entry: Any, activity_type: str, day_offset: int, state: RotationState,
               tables: CoachTables) -> Tuple[Dict[str, Any], RotationState]:
    """Repair one day for its forced activity type, returning the entry and the advanced rotation."""
    if activity_type == REST:
        return _rest_day(day_offset), state

    verdict = validate_entry(entry, activity_type)

    if activity_type == STRENGTH:
        if isinstance(verdict, Trusted):
            logger.debug(f"Day {day_offset}: kept proposed strength workout ({verdict.entry['structure']['split']})")
            repaired = _apply_strength_progression(verdict.entry, day_offset, tables)
        else:
            logger.debug(f"Day {day_offset}: strength fallback to template ({verdict.reason})")
            repaired = _strength_from_template(day_offset, state, tables)
        return repaired, state.after_strength()

    if isinstance(verdict, Trusted):
        logger.debug(f"Day {day_offset}: kept proposed run ({verdict.entry.get('title')})")
        repaired = dict(verdict.entry, day_offset=day_offset)
    else:
        logger.debug(f"Day {day_offset}: run fallback to template ({verdict.reason})")
        repaired = _run_from_template(day_offset, state, tables)
    return repaired, state.after_run()


def repair_week(week: int, entries: List[Any], start_date: date, strength_days: frozenset,
                runs_per_week: int, state: RotationState,
                tables: CoachTables) -> Tuple[List[Dict[str, Any]], RotationState]:
    types = classify_week(week, start_date, strength_days, runs_per_week)
    repaired = []
    for idx, (entry, activity_type) in enumerate(zip(entries, types)):
        day, state = repair_day(entry, activity_type, week * DAYS_PER_WEEK + idx, state, tables)
        repaired.append(day)

    logger.info(
        f"Week {week + 1} distribution: {types.count(STRENGTH)} Strength | "
        f"{types.count(RUN)} Runs | {types.count(REST)} Rest"
    )
    return repaired, state


def repair_schedule(candidate: Optional[List[Any]], runs_per_week: int, strength_days: Optional[Iterable[str]],
                    start_date: date, tables: CoachTables = DEFAULT_TABLES) -> List[Dict[str, Any]]:
    """
    Turn a proposed schedule into a valid 56-day schedule.

    The candidate is copied, never mutated. Missing days (short or absent
    candidate) are filled from the templates; extra days are dropped.
    """
    days = copy.deepcopy(candidate) if isinstance(candidate, list) else []
    days = (days + [None] * PLAN_DAYS)[:PLAN_DAYS]

    strength_set = normalize_strength_days(strength_days)
    unknown = strength_set.difference(WEEKDAYS)
    if unknown:
        logger.warning(f"Ignoring unrecognised strength days: {sorted(unknown)}")

    logger.info(f"Applying Smart Coach: runs_per_week={runs_per_week} | strength_days={sorted(strength_set)}")

    schedule = []
    state = RotationState()
    for week in range(PLAN_WEEKS):
        week_start = week * DAYS_PER_WEEK
        week_days, state = repair_week(
            week,
            days[week_start:week_start + DAYS_PER_WEEK],
            start_date,
            strength_set,
            runs_per_week,
            state,
            tables,
        )
        schedule.extend(week_days)
    return schedule


@dataclass
class WeekDistribution:
    week: int
    strength: int
    runs: int
    rest: int
    expected_strength: int
    expected_runs: int

    @property
    def discrepancies(self) -> List[str]:
        issues = []
        if self.strength != self.expected_strength:
            issues.append(f"Week {self.week}: expected {self.expected_strength} Strength, got {self.strength}")
        if self.runs != self.expected_runs:
            issues.append(f"Week {self.week}: expected {self.expected_runs} Runs, got {self.runs}")
        return issues


@dataclass
class DistributionReport:
    weeks: List[WeekDistribution] = field(default_factory=list)

    @property
    def totals(self) -> Dict[str, int]:
        return {
            STRENGTH: sum(w.strength for w in self.weeks),
            RUN: sum(w.runs for w in self.weeks),
            REST: sum(w.rest for w in self.weeks),
        }

    @property
    def discrepancies(self) -> List[str]:
        return [issue for w in self.weeks for issue in w.discrepancies]


def summarize_distribution(schedule: List[Dict[str, Any]], runs_per_week: int,
                           strength_days: Optional[Iterable[str]], start_date: date) -> DistributionReport:
    """Count activity types per week and flag weeks that differ from the expected split."""
    strength_set = normalize_strength_days(strength_days)
    report = DistributionReport()
    for week_start in range(0, len(schedule), DAYS_PER_WEEK):
        window = schedule[week_start:week_start + DAYS_PER_WEEK]
        types = [day.get("activity_type") for day in window]
        expected_strength = sum(
            1 for offset in range(week_start, week_start + len(window))
            if day_name(start_date, offset) in strength_set
        )
        report.weeks.append(WeekDistribution(
            week=week_start // DAYS_PER_WEEK + 1,
            strength=types.count(STRENGTH),
            runs=types.count(RUN),
            rest=types.count(REST),
            expected_strength=expected_strength,
            expected_runs=max(0, min(runs_per_week, len(window) - expected_strength)),
        ))

    for issue in report.discrepancies:
        logger.warning(issue)
    totals = report.totals
    logger.info(
        f"Total distribution ({len(schedule)} days): {totals[STRENGTH]} Strength | "
        f"{totals[RUN]} Runs | {totals[REST]} Rest"
    )
    return report
