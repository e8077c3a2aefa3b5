# pulse/coach/plan_service.py

import json
import logging
from datetime import date
from pulse.supabase_client import supabase
from pulse.errors import ServiceError
from pulse.utils.llm_utils import generate_text, LLMError
from pulse.utils.helpers import clean_response, goal_description
from pulse.utils.prompts import PLAN_SYSTEM_PROMPT_TEMPLATE, PLAN_USER_PROMPT_TEMPLATE
from pulse.coach.progression import PLAN_DAYS, DAYS_PER_WEEK
from pulse.coach.smart_coach import repair_schedule, summarize_distribution
from pulse.coach.materializer import materialize_plan

logger = logging.getLogger(__name__)

DEFAULT_RUNS_PER_WEEK = 3


def generate_plan(user_id: str, start_date: date = None) -> dict:
    """
    Generates an 8-week training plan for the user and persists it as the active plan.

    Returns:
        dict: {"success": True, "planId": ...} or {"error": ..., "code": ...}
    """
    if not user_id:
        return {"error": "userId is required", "code": "MISSING_USER_ID"}

    try:
        plan_id = _generate_plan(user_id, start_date or date.today())
        return {"success": True, "planId": plan_id}
    except ServiceError as e:
        logger.warning(f"Plan generation failed for user {user_id}: {e.code} {e.message}")
        return e.to_dict()
    except Exception as e:
        logger.error(f"Unexpected error generating plan for user {user_id}: {e}")
        return {"error": "Internal server error", "code": "INTERNAL_ERROR"}


def _generate_plan(user_id, start_date):
    profile = fetch_profile(user_id)
    goal = goal_description(profile)
    runs_per_week = _runs_per_week(profile)
    strength_days = profile.get("strength_days") or []

    candidate = propose_schedule(profile, start_date)

    schedule = repair_schedule(candidate, runs_per_week, strength_days, start_date)
    summarize_distribution(schedule, runs_per_week, strength_days, start_date)

    return materialize_plan(user_id, goal, schedule, start_date)


def fetch_profile(user_id: str) -> dict:
    try:
        res = supabase.table("profiles").select("goal, custom_goal_text, runs_per_week, strength_days") \
            .eq("id", user_id).execute()
    except Exception as e:
        logger.error(f"Profile fetch error: {e}")
        raise ServiceError("PROFILE_NOT_FOUND", "User profile not found")
    if not res.data:
        raise ServiceError("PROFILE_NOT_FOUND", "User profile not found")
    return res.data[0]


def build_plan_prompts(profile: dict, start_date: date):
    """Return the (system, user) prompts for the plan proposer."""
    goal = goal_description(profile)
    runs_per_week = _runs_per_week(profile)
    strength_days = profile.get("strength_days") or []
    strength_list = ", ".join(strength_days) if strength_days else "None specified"

    if strength_days:
        strength_rules = (
            f"   - The user lifts weights on: {strength_list}\n"
            f"   - You MUST schedule \"activity_type\": \"Strength\" on these specific days\n"
            f"   - NEVER schedule a \"Run\" on strength days"
        )
    else:
        strength_rules = "   - No strength days specified - all 7 days available for runs/rest"

    system_prompt = PLAN_SYSTEM_PROMPT_TEMPLATE.format(
        goal=goal,
        custom_details=profile.get("custom_goal_text") or "None",
        runs_per_week=runs_per_week,
        strength_days=strength_list,
        available_days=DAYS_PER_WEEK - len(strength_days),
        strength_count=len(strength_days),
        expected_rest_days=max(0, DAYS_PER_WEEK - len(strength_days) - runs_per_week),
        strength_rules=strength_rules,
    )
    user_prompt = PLAN_USER_PROMPT_TEMPLATE.format(
        goal=goal,
        runs_per_week=runs_per_week,
        strength_days=", ".join(strength_days) if strength_days else "none specified",
        start_date=start_date.isoformat(),
    )
    return system_prompt, user_prompt


def propose_schedule(profile: dict, start_date: date) -> list:
    """Ask the model for a 56-day schedule and check its shape. Content is repaired later."""
    system_prompt, user_prompt = build_plan_prompts(profile, start_date)

    logger.info("Calling plan proposer...")
    try:
        raw_content = generate_text(user_prompt, system_prompt=system_prompt)
    except LLMError as e:
        logger.error(f"Plan proposer error: {e}")
        raise ServiceError("AI_ERROR", "AI service unavailable")

    if not raw_content:
        logger.error("No content from plan proposer")
        raise ServiceError("AI_EMPTY", "AI returned empty response")

    logger.info(f"Raw content length: {len(raw_content)}")
    return parse_schedule(raw_content)


def parse_schedule(raw_content: str) -> list:
    try:
        workouts = json.loads(clean_response(raw_content))
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {e}. Raw content: {raw_content[:500]}")
        raise ServiceError("PARSE_ERROR", "Failed to parse training plan")

    if not isinstance(workouts, list) or len(workouts) != PLAN_DAYS:
        length = len(workouts) if isinstance(workouts, list) else None
        logger.error(f"Invalid workout plan length: {length}")
        raise ServiceError("INVALID_FORMAT", "Invalid training plan format")
    return workouts


def _runs_per_week(profile):
    try:
        return int(profile.get("runs_per_week") or DEFAULT_RUNS_PER_WEEK)
    except (TypeError, ValueError):
        return DEFAULT_RUNS_PER_WEEK
