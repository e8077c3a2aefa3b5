"""
Workout mutation tools exposed to the chat assistant.

Every executor is scoped to the user's active plan: a workout id that does not
belong to that plan is reported exactly like a missing one. Executors return a
ToolResult for expected failures; store exceptions propagate and are turned
into failed results by the dispatcher.
"""
import logging
from pulse.supabase_client import supabase
from pulse.tools.results import ToolResult
from pulse.utils.helpers import parse_iso_date

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = {"run": "Run", "strength": "Strength", "rest": "Rest"}

DEFAULT_REST_DESCRIPTION = "Take it easy today. Light stretching or complete rest."
DEFAULT_REST_INSTRUCTIONS = "Recovery is essential. Stay hydrated and get good sleep."


def _find_workout(plan_id, workout_id, columns="id"):
    res = supabase.table("workouts").select(columns).eq("id", workout_id).eq("plan_id", plan_id).execute()
    return res.data[0] if res.data else None


def update_workout(plan_id, workout_id, activity_type=None, title=None, description=None) -> ToolResult:
    """
    Partially updates a workout; omitted fields are left unchanged.

    Args:
        plan_id: The active plan the workout must belong to.
        workout_id: The workout to update.
        activity_type: Optional new type (Run, Strength or Rest).
        title: Optional new title.
        description: Optional new description.
    """
    name = "update_workout"
    if not _find_workout(plan_id, workout_id):
        return ToolResult.failed(name, f"Workout {workout_id} not found")

    updates = {}
    if activity_type:
        canonical = ACTIVITY_TYPES.get(str(activity_type).strip().lower())
        if not canonical:
            return ToolResult.failed(name, f"Invalid activity type: {activity_type}")
        updates["activity_type"] = canonical
    if title:
        updates["title"] = title
    if description:
        updates["description"] = description

    if not updates:
        return ToolResult.failed(name, "No changes provided")

    res = supabase.table("workouts").update(updates).eq("id", workout_id).execute()
    if not res.data:
        return ToolResult.failed(name, "Failed to update workout")
    return ToolResult.ok(name, "Workout updated successfully")


def swap_workouts(plan_id, workout_id_1, workout_id_2) -> ToolResult:
    """
    Exchanges scheduled_date and day_offset between two workouts.

    The two updates are not wrapped in a transaction. If the second one fails,
    the first is reverted on a best-effort basis.
    """
    name = "swap_workouts"
    if str(workout_id_1) == str(workout_id_2):
        return ToolResult.failed(name, "Cannot swap a workout with itself")

    res = supabase.table("workouts").select("id, scheduled_date, day_offset") \
        .in_("id", [workout_id_1, workout_id_2]).eq("plan_id", plan_id).execute()
    workouts = {str(w["id"]): w for w in (res.data or [])}
    if len(workouts) != 2:
        return ToolResult.failed(name, "Could not find both workouts")

    w1 = workouts[str(workout_id_1)]
    w2 = workouts[str(workout_id_2)]

    supabase.table("workouts").update({
        "scheduled_date": w2["scheduled_date"],
        "day_offset": w2["day_offset"]
    }).eq("id", w1["id"]).execute()

    try:
        supabase.table("workouts").update({
            "scheduled_date": w1["scheduled_date"],
            "day_offset": w1["day_offset"]
        }).eq("id", w2["id"]).execute()
    except Exception as e:
        logger.error(f"Swap of {w1['id']} and {w2['id']} failed halfway: {e}")
        _revert_swap(w1)
        return ToolResult.failed(name, "Failed to swap workouts")

    return ToolResult.ok(name, f"Swapped workouts between {w1['scheduled_date']} and {w2['scheduled_date']}")


def _revert_swap(original):
    try:
        supabase.table("workouts").update({
            "scheduled_date": original["scheduled_date"],
            "day_offset": original["day_offset"]
        }).eq("id", original["id"]).execute()
        logger.info(f"Reverted workout {original['id']} after failed swap")
    except Exception as e:
        logger.error(f"Could not revert workout {original['id']}; plan is partially swapped: {e}")


def add_rest_day(plan_id, workout_id, reason=None) -> ToolResult:
    """Overwrites a workout with a rest day. The previous content is not kept."""
    name = "add_rest_day"
    if not _find_workout(plan_id, workout_id):
        return ToolResult.failed(name, f"Workout {workout_id} not found")

    res = supabase.table("workouts").update({
        "activity_type": "Rest",
        "title": "Rest Day",
        "description": reason or DEFAULT_REST_DESCRIPTION,
        "structure": {"instructions": f"Rest day: {reason}" if reason else DEFAULT_REST_INSTRUCTIONS}
    }).eq("id", workout_id).execute()
    if not res.data:
        return ToolResult.failed(name, "Failed to convert workout to a rest day")
    return ToolResult.ok(name, "Converted to rest day")


def reschedule_workout(plan_id, workout_id, new_date) -> ToolResult:
    """
    Moves a workout to another date. Only scheduled_date changes; day_offset
    keeps the workout's original position in the plan.
    """
    name = "reschedule_workout"
    parsed = parse_iso_date(new_date)
    if not parsed:
        return ToolResult.failed(name, f"Invalid date {new_date!r}, expected YYYY-MM-DD")

    workout = _find_workout(plan_id, workout_id, "id, scheduled_date, day_offset")
    if not workout:
        return ToolResult.failed(name, f"Workout {workout_id} not found")

    new_date = parsed.isoformat()
    res = supabase.table("workouts").update({"scheduled_date": new_date}).eq("id", workout_id).execute()
    if not res.data:
        return ToolResult.failed(name, "Failed to reschedule workout")

    if workout.get("scheduled_date") != new_date:
        logger.info(
            f"Workout {workout_id} moved {workout.get('scheduled_date')} -> {new_date}; "
            f"day_offset stays {workout.get('day_offset')}"
        )
    return ToolResult.ok(name, f"Workout moved to {new_date}")
