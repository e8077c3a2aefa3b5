# pulse/utils/helpers.py

from datetime import date, datetime

GOAL_LABELS = {
    "marathon": "Marathon",
    "5k": "5K",
    "habit": "Running Habit",
}


def clean_response(response_text):
    """
    Clean the response text to extract JSON by removing Markdown code block delimiters.
    """
    cleaned = response_text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned.replace("```json", "").replace("```", "").strip()


def goal_description(profile):
    """Human-readable goal; custom goals use the user's own text."""
    goal = profile.get("goal")
    if goal == "custom" and profile.get("custom_goal_text"):
        return profile["custom_goal_text"]
    if not goal:
        return "General Fitness"
    return GOAL_LABELS.get(goal, goal)


def parse_iso_date(value):
    """Parse a strict YYYY-MM-DD string, returning None when it is not one."""
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError:
        return None
