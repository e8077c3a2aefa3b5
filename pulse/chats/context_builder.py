"""
Context Builder for the coach chat.

Assembles a bounded window of plan state (last week's workouts, the coming
week's workouts) and recent conversation into the system prompt and history
sent to the assistant.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pulse.config import Config
from pulse.supabase_client import supabase
from pulse.utils.helpers import goal_description
from pulse.utils.prompts import CHAT_SYSTEM_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)

WORKOUT_COLUMNS = "id, scheduled_date, title, activity_type, description, is_completed"


@dataclass
class ChatContext:
    system_prompt: str
    history: List[Dict[str, str]] = field(default_factory=list)


def fetch_chat_history(user_id: str, limit: int = None) -> List[Dict[str, str]]:
    """Last `limit` chat messages of the user, oldest first, as role/content dicts."""
    limit = limit or Config.CHAT_HISTORY_LIMIT
    res = supabase.table("ai_chat_logs").select("role, content") \
        .eq("user_id", user_id).order("created_at", desc=True).limit(limit).execute()
    rows = list(reversed(res.data or []))
    return [
        {"role": "user" if row.get("role") == "user" else "assistant", "content": row.get("content") or ""}
        for row in rows
    ]


def fetch_workout_window(plan_id: Any, start: date, end: date, include_end: bool = True) -> List[Dict[str, Any]]:
    query = supabase.table("workouts").select(WORKOUT_COLUMNS).eq("plan_id", plan_id).gte("scheduled_date", start.isoformat())
    if include_end:
        query = query.lte("scheduled_date", end.isoformat())
    else:
        query = query.lt("scheduled_date", end.isoformat())
    res = query.order("scheduled_date").execute()
    return res.data or []


def format_workouts(workouts: List[Dict[str, Any]], done_label: str, open_label: str, empty: str) -> str:
    if not workouts:
        return empty
    lines = []
    for w in workouts:
        status = done_label if w.get("is_completed") else open_label
        lines.append(f"- {w['scheduled_date']} | {w.get('title')} ({w.get('activity_type')}) | {status} | id: {w['id']}")
    return "\n".join(lines)


def build_chat_context(user_id: str, profile: Dict[str, Any], plan: Dict[str, Any],
                       history: Optional[List[Dict[str, str]]] = None, today: date = None) -> ChatContext:
    """
    Build the coach system prompt for one chat turn.

    Args:
        user_id: The user's ID.
        profile: The user's profile row.
        plan: The active training plan row.
        history: Prior messages (oldest first); fetched when omitted.
        today: Reference date for the workout windows.
    """
    today = today or date.today()
    days_back = Config.CONTEXT_DAYS_BACK
    days_forward = Config.CONTEXT_DAYS_FORWARD

    recent = fetch_workout_window(plan["id"], today - timedelta(days=days_back), today, include_end=False)
    upcoming = fetch_workout_window(plan["id"], today, today + timedelta(days=days_forward))
    logger.debug(f"Chat context for user {user_id}: {len(recent)} recent, {len(upcoming)} upcoming workouts")

    strength_days = profile.get("strength_days") or []
    system_prompt = CHAT_SYSTEM_PROMPT_TEMPLATE.format(
        name=profile.get("name") or "Runner",
        goal=goal_description(profile),
        runs_per_week=profile.get("runs_per_week") or 3,
        strength_days=", ".join(strength_days) if strength_days else "no specific days",
        plan_name=plan.get("plan_name"),
        plan_id=plan["id"],
        days_back=days_back,
        days_forward=days_forward,
        recent_history=format_workouts(recent, "COMPLETED", "MISSED", "No recent workout history"),
        upcoming=format_workouts(upcoming, "COMPLETED", "pending", "No upcoming workouts"),
        today=today.isoformat(),
    )

    if history is None:
        history = fetch_chat_history(user_id)
    return ChatContext(system_prompt=system_prompt, history=list(history))
