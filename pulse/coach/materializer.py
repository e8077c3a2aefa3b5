"""
Plan Materializer.

Persists a repaired schedule as one active training plan plus one workout row
per day. There is no transaction around the two inserts: if the workouts fail
to insert, the plan row is deleted again so the user is not left with an
empty active plan.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List

from pulse.errors import ServiceError
from pulse.supabase_client import supabase

logger = logging.getLogger(__name__)

ACTIVITY_TYPE_ALIASES = {
    "run": "Run",
    "running": "Run",
    "strength": "Strength",
    "cross-training": "Strength",
    "cross training": "Strength",
    "rest": "Rest",
    "recovery": "Rest",
    "off": "Rest",
}


def normalize_activity_type(value: Any) -> str:
    """Map free-text activity types onto Run/Strength/Rest. Unknown values become Rest."""
    if not isinstance(value, str):
        return "Rest"
    return ACTIVITY_TYPE_ALIASES.get(value.strip().lower(), "Rest")


def build_workout_records(plan_id: Any, schedule: List[Dict[str, Any]], start_date: date) -> List[Dict[str, Any]]:
    records = []
    for index, workout in enumerate(schedule):
        day_offset = workout.get("day_offset")
        if not isinstance(day_offset, int):
            day_offset = index
        records.append({
            "plan_id": plan_id,
            "scheduled_date": (start_date + timedelta(days=day_offset)).isoformat(),
            "day_offset": day_offset,
            "title": workout.get("title") or "Workout",
            "activity_type": normalize_activity_type(workout.get("activity_type")),
            "description": workout.get("description") or None,
            "structure": workout.get("structure") or {},
            "is_completed": False,
        })
    return records


def materialize_plan(user_id: str, goal_description: str, schedule: List[Dict[str, Any]], start_date: date) -> Any:
    """
    Create the training plan and its workouts. Returns the new plan id.

    Raises:
        ServiceError: DB_ERROR when either insert fails.
    """
    logger.info(f"Creating training plan for user {user_id}")
    try:
        plan_res = supabase.table("training_plans").insert({
            "user_id": user_id,
            "plan_name": f"8-Week {goal_description} Plan",
            "goal": goal_description,
            "is_active": True,
        }).execute()
    except Exception as e:
        logger.error(f"Training plan insert error: {e}")
        raise ServiceError("DB_ERROR", "Failed to save training plan")

    if not plan_res.data:
        logger.error("Training plan insert returned no row")
        raise ServiceError("DB_ERROR", "Failed to save training plan")

    plan_id = plan_res.data[0]["id"]
    logger.info(f"Training plan created: {plan_id}")

    records = build_workout_records(plan_id, schedule, start_date)
    logger.info(f"Inserting {len(records)} workouts...")
    try:
        supabase.table("workouts").insert(records).execute()
    except Exception as e:
        logger.error(f"Workouts insert error: {e}")
        _delete_orphaned_plan(plan_id)
        raise ServiceError("DB_ERROR", "Failed to save training plan")

    _deactivate_other_plans(user_id, plan_id)
    logger.info(f"Successfully created plan {plan_id} with {len(records)} workouts")
    return plan_id


def _delete_orphaned_plan(plan_id):
    try:
        supabase.table("training_plans").delete().eq("id", plan_id).execute()
        logger.info(f"Deleted orphaned training plan {plan_id}")
    except Exception as e:
        logger.error(f"Failed to delete orphaned training plan {plan_id}: {e}")


def _deactivate_other_plans(user_id, plan_id):
    # The new plan is already saved; a failure here leaves two active plans but loses no data
    try:
        supabase.table("training_plans").update({"is_active": False}) \
            .eq("user_id", user_id).eq("is_active", True).neq("id", plan_id).execute()
    except Exception as e:
        logger.warning(f"Could not deactivate previous plans for user {user_id}: {e}")
