import unittest
from datetime import timedelta
from itertools import combinations

from pulse.coach.progression import DEFAULT_TABLES, PLAN_DAYS, WEEKDAYS
from pulse.coach.smart_coach import (
    Invalid,
    RotationState,
    Trusted,
    classify_week,
    repair_schedule,
    spread_runs,
    summarize_distribution,
    validate_entry,
)
from tests.support import MONDAY


def week_types(schedule, week):
    return [d["activity_type"] for d in schedule[week * 7:(week + 1) * 7]]


def strength_entry(split="Full Body", exercises=("Squats", "Rows", "Lunges", "Planks")):
    return {
        "day_offset": 0,
        "title": "Full Body A",
        "activity_type": "Strength",
        "description": "AI strength",
        "structure": {"duration": "45 min", "split": split, "exercises": list(exercises), "sets": 9},
    }


def run_entry(title="Hill Repeats", distance="4 mi", pace="hard"):
    return {
        "day_offset": 0,
        "title": title,
        "activity_type": "Run",
        "description": "AI run",
        "structure": {"distance": distance, "duration": "40 min", "pace": pace, "instructions": "Go"},
    }


class TestSpreadRuns(unittest.TestCase):
    def test_front_loads_when_uneven(self):
        self.assertEqual(spread_runs(5, 4), [0, 2, 3, 4])
        self.assertEqual(spread_runs(7, 3), [0, 3, 5])

    def test_caps_at_available_days(self):
        self.assertEqual(spread_runs(3, 7), [0, 1, 2])
        self.assertEqual(spread_runs(0, 4), [])


class TestClassification(unittest.TestCase):
    def test_monday_thursday_scenario(self):
        types = classify_week(0, MONDAY, frozenset({"monday", "thursday"}), 4)
        self.assertEqual(types[0], "Strength")
        self.assertEqual(types[3], "Strength")
        self.assertEqual(types.count("Run"), 4)
        self.assertEqual(types.count("Rest"), 1)

    def test_weekly_counts_for_all_profiles(self):
        for runs_per_week in range(2, 8):
            for size in range(0, 8):
                for days in combinations(WEEKDAYS, size):
                    schedule = repair_schedule(None, runs_per_week, list(days), MONDAY)
                    self.assertEqual(len(schedule), PLAN_DAYS)
                    for week in range(8):
                        types = week_types(schedule, week)
                        strength = types.count("Strength")
                        runs = min(runs_per_week, 7 - strength)
                        self.assertEqual(strength, size)
                        self.assertEqual(types.count("Run"), runs)
                        self.assertEqual(types.count("Rest"), 7 - strength - runs)

    def test_strength_follows_weekday_not_position(self):
        wednesday = MONDAY + timedelta(days=2)
        schedule = repair_schedule(None, 3, ["monday"], wednesday)
        # Day offset 5 from a Wednesday start is a Monday
        self.assertEqual(schedule[5]["activity_type"], "Strength")
        self.assertEqual(schedule[0]["activity_type"], "Run")

    def test_unknown_weekday_is_ignored(self):
        schedule = repair_schedule(None, 3, ["Funday", " Monday "], MONDAY)
        self.assertEqual(week_types(schedule, 0).count("Strength"), 1)
        self.assertEqual(schedule[0]["activity_type"], "Strength")

    def test_too_many_runs_schedules_what_fits(self):
        with self.assertLogs("pulse.coach.smart_coach", level="WARNING"):
            schedule = repair_schedule(None, 7, ["monday", "tuesday", "wednesday"], MONDAY)
        self.assertEqual(week_types(schedule, 0).count("Run"), 4)
        self.assertEqual(week_types(schedule, 0).count("Rest"), 0)


class TestValidateEntry(unittest.TestCase):
    def test_trusts_complete_strength(self):
        self.assertIsInstance(validate_entry(strength_entry(), "Strength"), Trusted)

    def test_rejects_short_exercise_list(self):
        verdict = validate_entry(strength_entry(exercises=("Squats", "Rows")), "Strength")
        self.assertIsInstance(verdict, Invalid)

    def test_rejects_missing_split(self):
        self.assertIsInstance(validate_entry(strength_entry(split=""), "Strength"), Invalid)

    def test_rejects_generic_run_title(self):
        self.assertIsInstance(validate_entry(run_entry(title="Training Run"), "Run"), Invalid)

    def test_rejects_run_without_pace(self):
        self.assertIsInstance(validate_entry(run_entry(pace=None), "Run"), Invalid)

    def test_rejects_type_mismatch_and_garbage(self):
        self.assertIsInstance(validate_entry(run_entry(), "Strength"), Invalid)
        self.assertIsInstance(validate_entry("not a workout", "Run"), Invalid)
        self.assertIsInstance(validate_entry({"activity_type": "Run"}, "Run"), Invalid)


class TestRepair(unittest.TestCase):
    def test_trusted_strength_gets_phase_progression(self):
        candidate = [None] * PLAN_DAYS
        candidate[0] = strength_entry()
        schedule = repair_schedule(candidate, 3, ["monday"], MONDAY)
        day = schedule[0]
        self.assertEqual(day["title"], "Full Body A")
        self.assertEqual(day["structure"]["exercises"], ["Squats", "Rows", "Lunges", "Planks"])
        self.assertEqual(day["structure"]["sets"], 2)
        self.assertEqual(day["structure"]["reps"], "10-12")
        self.assertTrue(day["structure"]["instructions"].startswith("Foundation phase"))

    def test_trusted_run_is_untouched(self):
        candidate = [None] * PLAN_DAYS
        candidate[0] = run_entry()
        schedule = repair_schedule(candidate, 3, [], MONDAY)
        self.assertEqual(schedule[0]["title"], "Hill Repeats")
        self.assertEqual(schedule[0]["structure"]["distance"], "4 mi")

    def test_candidate_is_not_mutated(self):
        candidate = [strength_entry() for _ in range(PLAN_DAYS)]
        repair_schedule(candidate, 3, ["monday"], MONDAY)
        self.assertEqual(candidate[0]["structure"]["sets"], 9)
        self.assertEqual(candidate[1]["activity_type"], "Strength")

    def test_day_offsets_are_positional(self):
        candidate = [dict(run_entry(), day_offset=99) for _ in range(PLAN_DAYS)]
        schedule = repair_schedule(candidate, 3, [], MONDAY)
        self.assertEqual([d["day_offset"] for d in schedule], list(range(PLAN_DAYS)))

    def test_short_candidate_is_padded(self):
        schedule = repair_schedule([run_entry()] * 10, 3, ["friday"], MONDAY)
        self.assertEqual(len(schedule), PLAN_DAYS)

    def test_repair_is_idempotent(self):
        candidate = [strength_entry() if i % 3 else run_entry(title="Training Run") for i in range(PLAN_DAYS)]
        first = repair_schedule(candidate, 4, ["monday", "thursday"], MONDAY)
        second = repair_schedule(first, 4, ["monday", "thursday"], MONDAY)
        self.assertEqual(first, second)

    def test_strength_sets_never_decrease(self):
        schedule = repair_schedule(None, 3, ["monday", "wednesday", "friday"], MONDAY)
        sets = [d["structure"]["sets"] for d in schedule if d["activity_type"] == "Strength"]
        self.assertEqual(sets, sorted(sets))
        self.assertEqual(sets[0], 2)
        self.assertEqual(sets[-1], 4)

    def test_run_distances_follow_phase(self):
        schedule = repair_schedule(None, 4, [], MONDAY)
        long_runs = [d["structure"]["distance"] for d in schedule if d["title"] == "Long Run"]
        self.assertEqual(long_runs[0], "5 mi")
        self.assertEqual(long_runs[-1], "8 mi")

    def test_no_immediate_template_repeat(self):
        schedule = repair_schedule(None, 4, ["monday", "wednesday", "friday"], MONDAY)
        strength_titles = [d["title"] for d in schedule if d["activity_type"] == "Strength"]
        run_titles = [d["title"] for d in schedule if d["activity_type"] == "Run"]
        for previous, current in zip(strength_titles, strength_titles[1:]):
            self.assertNotEqual(previous, current)
        for previous, current in zip(run_titles, run_titles[1:]):
            self.assertNotEqual(previous, current)

    def test_rotation_continues_across_weeks(self):
        schedule = repair_schedule(None, 2, ["monday"], MONDAY)
        strength_titles = [d["title"] for d in schedule if d["activity_type"] == "Strength"]
        expected = [DEFAULT_TABLES.strength_templates[i % 3].name for i in range(8)]
        self.assertEqual(strength_titles, expected)

    def test_rotation_state_is_immutable(self):
        state = RotationState()
        advanced = state.after_strength().after_run()
        self.assertEqual((state.strength_days, state.run_days), (0, 0))
        self.assertEqual((advanced.strength_days, advanced.run_days), (1, 1))


class TestDistributionReport(unittest.TestCase):
    def test_clean_schedule_has_no_discrepancies(self):
        schedule = repair_schedule(None, 4, ["monday", "thursday"], MONDAY)
        report = summarize_distribution(schedule, 4, ["monday", "thursday"], MONDAY)
        self.assertEqual(report.discrepancies, [])
        self.assertEqual(report.totals, {"Strength": 16, "Run": 32, "Rest": 8})

    def test_reports_discrepancies(self):
        schedule = repair_schedule(None, 4, ["monday"], MONDAY)
        schedule[1]["activity_type"] = "Rest"
        with self.assertLogs("pulse.coach.smart_coach", level="WARNING"):
            report = summarize_distribution(schedule, 4, ["monday"], MONDAY)
        self.assertEqual(report.discrepancies, ["Week 1: expected 4 Runs, got 3"])


if __name__ == '__main__':
    unittest.main()
