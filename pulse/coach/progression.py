"""
Static coaching tables.

The 8-week horizon is split into four 2-week progression phases of increasing
intensity. Each phase carries a strength prescription (sets, reps, rest) and a
distance/duration for every run type. The template library holds the fallback
content used when the proposed workout for a day cannot be trusted.

Everything here is immutable and bundled into a CoachTables value that the
schedule repairer receives as an argument.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

PLAN_WEEKS = 8
DAYS_PER_WEEK = 7
PLAN_DAYS = PLAN_WEEKS * DAYS_PER_WEEK

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class StrengthPhase:
    weeks: Tuple[int, ...]
    sets: int
    reps: str
    rest: str
    note: str

    @property
    def instructions(self) -> str:
        return f"{self.note} phase: {self.sets} sets of {self.reps}. Rest {self.rest} between sets."


@dataclass(frozen=True)
class RunDose:
    distance: str
    duration: str


@dataclass(frozen=True)
class RunPhase:
    weeks: Tuple[int, ...]
    doses: Mapping[str, RunDose]


@dataclass(frozen=True)
class StrengthTemplate:
    key: str
    name: str
    split: str
    exercises: Tuple[str, ...]
    focus: str
    duration: str = "40-50 min"


@dataclass(frozen=True)
class RunTemplate:
    key: str
    name: str
    pace: str
    description: str
    instructions: str


@dataclass(frozen=True)
class CoachTables:
    strength_phases: Tuple[StrengthPhase, ...]
    run_phases: Tuple[RunPhase, ...]
    strength_templates: Tuple[StrengthTemplate, ...]
    run_templates: Tuple[RunTemplate, ...]

    def strength_phase(self, week: int) -> StrengthPhase:
        return _phase_for_week(self.strength_phases, week)

    def run_dose(self, week: int, run_type: str) -> RunDose:
        return _phase_for_week(self.run_phases, week).doses[run_type]


def week_number(day_offset: int) -> int:
    """1-based week number of a day offset."""
    return day_offset // DAYS_PER_WEEK + 1


def _phase_for_week(phases, week):
    # Weeks outside the horizon clamp to the first/last phase
    week = min(max(week, phases[0].weeks[0]), phases[-1].weeks[-1])
    for phase in phases:
        if week in phase.weeks:
            return phase
    raise ValueError(f"No progression phase covers week {week}")


STRENGTH_PHASES = (
    StrengthPhase(weeks=(1, 2), sets=2, reps="10-12", rest="60s", note="Foundation"),
    StrengthPhase(weeks=(3, 4), sets=3, reps="10-12", rest="60s", note="Build"),
    StrengthPhase(weeks=(5, 6), sets=3, reps="12-15", rest="45s", note="Intensify"),
    StrengthPhase(weeks=(7, 8), sets=4, reps="12-15", rest="45s", note="Peak"),
)


def _doses(easy, long, tempo, intervals):
    return MappingProxyType({
        "easy": RunDose(*easy),
        "long": RunDose(*long),
        "tempo": RunDose(*tempo),
        "intervals": RunDose(*intervals),
    })


RUN_PHASES = (
    RunPhase(weeks=(1, 2), doses=_doses(("3 mi", "30 min"), ("5 mi", "50 min"), ("3 mi", "25 min"), ("2 mi", "20 min"))),
    RunPhase(weeks=(3, 4), doses=_doses(("3.5 mi", "35 min"), ("6 mi", "60 min"), ("3.5 mi", "28 min"), ("2.5 mi", "25 min"))),
    RunPhase(weeks=(5, 6), doses=_doses(("4 mi", "40 min"), ("7 mi", "70 min"), ("4 mi", "32 min"), ("3 mi", "30 min"))),
    RunPhase(weeks=(7, 8), doses=_doses(("4.5 mi", "45 min"), ("8 mi", "80 min"), ("4.5 mi", "36 min"), ("3 mi", "30 min"))),
)

# A/B/C rotation
STRENGTH_TEMPLATES = (
    StrengthTemplate(
        key="A",
        name="Lower Body Power",
        split="Lower Body",
        exercises=("Squats", "Romanian Deadlifts", "Walking Lunges", "Glute Bridges", "Calf Raises"),
        focus="Build leg strength for running power",
    ),
    StrengthTemplate(
        key="B",
        name="Upper Body & Core",
        split="Upper Body",
        exercises=("Push-ups", "Dumbbell Rows", "Overhead Press", "Plank Hold", "Dead Bugs"),
        focus="Upper body balance and core stability",
    ),
    StrengthTemplate(
        key="C",
        name="Full Body Conditioning",
        split="Full Body",
        exercises=("Burpees", "Kettlebell Swings", "Box Step-ups", "Mountain Climbers", "Turkish Get-ups"),
        focus="Total body conditioning and endurance",
    ),
)

RUN_TEMPLATES = (
    RunTemplate(
        key="easy",
        name="Easy Run",
        pace="easy",
        description="Relaxed pace to build aerobic base. Should feel comfortable.",
        instructions="Maintain a conversational pace. If you can't chat, slow down.",
    ),
    RunTemplate(
        key="long",
        name="Long Run",
        pace="easy",
        description="Extended distance run to build endurance.",
        instructions="Start slow, finish strong. Fuel and hydrate as needed.",
    ),
    RunTemplate(
        key="tempo",
        name="Tempo Run",
        pace="moderate",
        description="Sustained effort at comfortably hard pace.",
        instructions="Run at a pace you could hold for about an hour. Challenging but controlled.",
    ),
    RunTemplate(
        key="intervals",
        name="Interval Training",
        pace="hard",
        description="Speed work with recovery periods.",
        instructions="Alternate between hard efforts and recovery jogs. Push yourself on the fast segments.",
    ),
)

REST_DAY = MappingProxyType({
    "title": "Rest Day",
    "description": "Take it easy today. Light stretching or complete rest.",
    "instructions": "Recovery is essential. Stay hydrated and get good sleep.",
})

DEFAULT_TABLES = CoachTables(
    strength_phases=STRENGTH_PHASES,
    run_phases=RUN_PHASES,
    strength_templates=STRENGTH_TEMPLATES,
    run_templates=RUN_TEMPLATES,
)
