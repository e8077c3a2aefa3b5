"""Shared fixtures for the test suites."""

from contextlib import ExitStack
from datetime import date, timedelta
from unittest.mock import patch

from pulse.mock_supabase import MockSupabaseClient

MONDAY = date(2026, 10, 19)

STORE_MODULES = [
    "pulse.coach.plan_service",
    "pulse.coach.materializer",
    "pulse.tools.workout_tools",
    "pulse.chats.context_builder",
    "pulse.chats.dispatcher",
    "pulse.chats.routes",
    "pulse.workouts.routes",
]


def patch_store(client):
    """Point every module's `supabase` name at the given client."""
    stack = ExitStack()
    for module in STORE_MODULES:
        stack.enter_context(patch(f"{module}.supabase", client))
    return stack


def seeded_client(user_id="user-1", runs_per_week=4, strength_days=("monday", "thursday")):
    return MockSupabaseClient({
        "profiles": [{
            "id": user_id,
            "name": "Sam",
            "goal": "marathon",
            "custom_goal_text": None,
            "runs_per_week": runs_per_week,
            "strength_days": list(strength_days),
        }],
    })


def seed_plan(client, user_id="user-1", plan_id="plan-1", start=MONDAY, days=7):
    client.data["training_plans"].append({
        "id": plan_id,
        "user_id": user_id,
        "plan_name": "8-Week Marathon Plan",
        "goal": "Marathon",
        "is_active": True,
    })
    for offset in range(days):
        client.data["workouts"].append({
            "id": f"w{offset}",
            "plan_id": plan_id,
            "scheduled_date": (start + timedelta(days=offset)).isoformat(),
            "day_offset": offset,
            "title": "Easy Run",
            "activity_type": "Run",
            "description": "Relaxed pace",
            "structure": {"distance": "3 mi", "duration": "30 min", "pace": "easy", "instructions": "Chat pace"},
            "is_completed": False,
        })
