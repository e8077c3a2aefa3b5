import unittest

from pulse.mock_supabase import MockSupabaseClient
from pulse.tools.workout_tools import add_rest_day, reschedule_workout, swap_workouts, update_workout
from tests.support import patch_store, seed_plan


class SecondUpdateFailsClient(MockSupabaseClient):
    """Rejects the second workouts update it sees, then behaves normally."""

    def __init__(self, data=None):
        super().__init__(data)
        self.updates = 0

    def _update_rows(self, table_name, rows, values):
        if table_name == "workouts":
            self.updates += 1
            if self.updates == 2:
                raise RuntimeError("connection reset")
        return super()._update_rows(table_name, rows, values)


class WorkoutToolsTestCase(unittest.TestCase):
    client_class = MockSupabaseClient

    def setUp(self):
        self.client = self.client_class()
        seed_plan(self.client)
        seed_plan(self.client, user_id="user-2", plan_id="plan-2", days=1)
        self.client.data["workouts"][-1]["id"] = "other-w0"
        self.store = patch_store(self.client)
        self.store.__enter__()

    def tearDown(self):
        self.store.__exit__(None, None, None)

    def workout(self, workout_id):
        return next(w for w in self.client.data["workouts"] if w["id"] == workout_id)


class TestUpdateWorkout(WorkoutToolsTestCase):
    def test_missing_workout_fails(self):
        result = update_workout("plan-1", "missing", title="Hill Repeats")
        self.assertFalse(result.success)
        self.assertIn("not found", result.error)

    def test_workout_from_another_plan_is_not_visible(self):
        result = update_workout("plan-1", "other-w0", title="Hill Repeats")
        self.assertFalse(result.success)
        self.assertEqual(self.workout("other-w0")["title"], "Easy Run")

    def test_partial_update_keeps_other_fields(self):
        result = update_workout("plan-1", "w2", title="Hill Repeats")
        self.assertTrue(result.success)
        workout = self.workout("w2")
        self.assertEqual(workout["title"], "Hill Repeats")
        self.assertEqual(workout["activity_type"], "Run")
        self.assertEqual(workout["description"], "Relaxed pace")

    def test_activity_type_is_canonicalised(self):
        self.assertTrue(update_workout("plan-1", "w1", activity_type="strength").success)
        self.assertEqual(self.workout("w1")["activity_type"], "Strength")

    def test_invalid_activity_type(self):
        result = update_workout("plan-1", "w1", activity_type="Yoga")
        self.assertFalse(result.success)
        self.assertEqual(self.workout("w1")["activity_type"], "Run")

    def test_no_changes(self):
        self.assertFalse(update_workout("plan-1", "w1").success)


class TestSwapWorkouts(WorkoutToolsTestCase):
    def test_swap_exchanges_dates_and_offsets(self):
        result = swap_workouts("plan-1", "w1", "w4")
        self.assertTrue(result.success)
        self.assertEqual(self.workout("w1")["scheduled_date"], "2026-10-23")
        self.assertEqual(self.workout("w1")["day_offset"], 4)
        self.assertEqual(self.workout("w4")["scheduled_date"], "2026-10-20")
        self.assertEqual(self.workout("w4")["day_offset"], 1)

    def test_swapping_twice_restores_original(self):
        before = {w["id"]: (w["scheduled_date"], w["day_offset"]) for w in self.client.data["workouts"]}
        swap_workouts("plan-1", "w1", "w4")
        swap_workouts("plan-1", "w1", "w4")
        after = {w["id"]: (w["scheduled_date"], w["day_offset"]) for w in self.client.data["workouts"]}
        self.assertEqual(before, after)

    def test_missing_partner_fails_without_changes(self):
        result = swap_workouts("plan-1", "w1", "missing")
        self.assertFalse(result.success)
        self.assertEqual(self.workout("w1")["day_offset"], 1)

    def test_cannot_swap_with_itself(self):
        self.assertFalse(swap_workouts("plan-1", "w1", "w1").success)


class TestSwapRevert(WorkoutToolsTestCase):
    client_class = SecondUpdateFailsClient

    def test_first_update_is_reverted(self):
        result = swap_workouts("plan-1", "w1", "w4")
        self.assertFalse(result.success)
        self.assertEqual(self.workout("w1")["scheduled_date"], "2026-10-20")
        self.assertEqual(self.workout("w1")["day_offset"], 1)
        self.assertEqual(self.workout("w4")["day_offset"], 4)


class TestAddRestDay(WorkoutToolsTestCase):
    def test_converts_with_reason(self):
        result = add_rest_day("plan-1", "w3", reason="Sore calf")
        self.assertTrue(result.success)
        workout = self.workout("w3")
        self.assertEqual(workout["activity_type"], "Rest")
        self.assertEqual(workout["title"], "Rest Day")
        self.assertEqual(workout["description"], "Sore calf")
        self.assertEqual(workout["structure"], {"instructions": "Rest day: Sore calf"})

    def test_default_copy_without_reason(self):
        add_rest_day("plan-1", "w3")
        self.assertIn("Light stretching", self.workout("w3")["description"])

    def test_missing_workout(self):
        self.assertFalse(add_rest_day("plan-1", "missing").success)


class TestRescheduleWorkout(WorkoutToolsTestCase):
    def test_moves_date_but_keeps_offset(self):
        result = reschedule_workout("plan-1", "w2", "2026-10-30")
        self.assertTrue(result.success)
        self.assertEqual(self.workout("w2")["scheduled_date"], "2026-10-30")
        self.assertEqual(self.workout("w2")["day_offset"], 2)

    def test_rejects_malformed_date(self):
        for bad in ("next tuesday", "2026-13-01", "30/10/2026"):
            result = reschedule_workout("plan-1", "w2", bad)
            self.assertFalse(result.success)
        self.assertEqual(self.workout("w2")["scheduled_date"], "2026-10-21")

    def test_missing_workout(self):
        self.assertFalse(reschedule_workout("plan-1", "missing", "2026-10-30").success)


if __name__ == '__main__':
    unittest.main()
