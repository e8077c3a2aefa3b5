"""
Tool Registry for LLM Function Calling.
Defines the JSON schemas (OpenAI format) for the workout tools.
"""

from pulse.tools.workout_tools import update_workout, swap_workouts, add_rest_day, reschedule_workout

TOOLS_REGISTRY = [
    {
        "type": "function",
        "function": {
            "name": "update_workout",
            "description": "Update a workout's details including activity type, title, or description.",
            "parameters": {
                "type": "object",
                "properties": {
                    "workout_id": {
                        "type": "string",
                        "description": "The ID of the workout to update."
                    },
                    "activity_type": {
                        "type": "string",
                        "enum": ["Run", "Strength", "Rest"],
                        "description": "The type of workout."
                    },
                    "title": {
                        "type": "string",
                        "description": "New title for the workout."
                    },
                    "description": {
                        "type": "string",
                        "description": "New description for the workout."
                    }
                },
                "required": ["workout_id"]
            }
        }
    },
    {
        "type": "function",
        "function": {
            "name": "swap_workouts",
            "description": "Swap two workouts between their scheduled dates.",
            "parameters": {
                "type": "object",
                "properties": {
                    "workout_id_1": {
                        "type": "string",
                        "description": "ID of the first workout."
                    },
                    "workout_id_2": {
                        "type": "string",
                        "description": "ID of the second workout."
                    }
                },
                "required": ["workout_id_1", "workout_id_2"]
            }
        }
    },
    {
        "type": "function",
        "function": {
            "name": "add_rest_day",
            "description": "Convert an existing workout to a rest day. Use when the user needs recovery.",
            "parameters": {
                "type": "object",
                "properties": {
                    "workout_id": {
                        "type": "string",
                        "description": "ID of the workout to convert to rest."
                    },
                    "reason": {
                        "type": "string",
                        "description": "Optional reason for the rest day (e.g., 'feeling sick', 'work deadline')."
                    }
                },
                "required": ["workout_id"]
            }
        }
    },
    {
        "type": "function",
        "function": {
            "name": "reschedule_workout",
            "description": "Move a workout to a different date.",
            "parameters": {
                "type": "object",
                "properties": {
                    "workout_id": {
                        "type": "string",
                        "description": "ID of the workout to reschedule."
                    },
                    "new_date": {
                        "type": "string",
                        "description": "New date in YYYY-MM-DD format."
                    }
                },
                "required": ["workout_id", "new_date"]
            }
        }
    }
]

# Mapping of tool names to actual python functions
TOOL_IMPLEMENTATIONS = {
    "update_workout": update_workout,
    "swap_workouts": swap_workouts,
    "add_rest_day": add_rest_day,
    "reschedule_workout": reschedule_workout
}

def get_tool_definitions():
    """Return the list of tool definitions for the LLM."""
    return TOOLS_REGISTRY

def get_tool_implementation(tool_name):
    """Return the python function for a given tool name."""
    return TOOL_IMPLEMENTATIONS.get(tool_name)

def get_tool_parameters(tool_name):
    """Return the declared parameter names of a tool, or an empty set if unknown."""
    for tool in TOOLS_REGISTRY:
        if tool["function"]["name"] == tool_name:
            return set(tool["function"]["parameters"]["properties"])
    return set()
