"""
Chat Tool Dispatcher.

One chat turn is a short state machine:

    AWAITING_MODEL_RESPONSE -> TOOL_REQUESTED | TEXT_ONLY -> REPLIED

At most one tool call is honoured per user message. When the model asks for a
tool, it is executed against the store and a single follow-up request hands
the result back to the model so it can phrase the confirmation. If that
follow-up fails, a templated confirmation is used instead.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pulse.chats.context_builder import ChatContext, build_chat_context, fetch_chat_history
from pulse.config import Config
from pulse.errors import ServiceError
from pulse.supabase_client import supabase
from pulse.tools.registry import get_tool_definitions, get_tool_implementation, get_tool_parameters
from pulse.tools.results import ToolCall, ToolResult
from pulse.utils.llm_utils import LLMError, ModelReply, generate_chat_response

logger = logging.getLogger(__name__)

SUCCESS_FALLBACK = "Done! I've updated your plan."
FAILURE_FALLBACK = "Sorry, I couldn't complete that: {error}"
NO_ANSWER_REPLY = "I'm not sure how to help with that. Could you rephrase?"


class ChatTurnState(Enum):
    AWAITING_MODEL_RESPONSE = "awaiting_model_response"
    TOOL_REQUESTED = "tool_requested"
    TEXT_ONLY = "text_only"
    REPLIED = "replied"


@dataclass
class ChatTurn:
    user_id: str
    message: str
    plan_id: Any
    context: ChatContext
    state: ChatTurnState = ChatTurnState.AWAITING_MODEL_RESPONSE
    tool_call: Optional[ToolCall] = None
    tool_result: Optional[ToolResult] = None
    reply: Optional[str] = None

    @property
    def messages(self) -> List[Dict[str, str]]:
        return self.context.history + [{"role": "user", "content": self.message}]

    def _expect(self, *states):
        if self.state not in states:
            raise RuntimeError(f"Chat turn is {self.state.name}, expected one of {[s.name for s in states]}")

    def receive_model_reply(self, model_reply: ModelReply):
        self._expect(ChatTurnState.AWAITING_MODEL_RESPONSE)
        if model_reply.tool_call:
            self.tool_call = model_reply.tool_call
            self.state = ChatTurnState.TOOL_REQUESTED
        else:
            self.reply = model_reply.text or NO_ANSWER_REPLY
            self.state = ChatTurnState.TEXT_ONLY

    def record_tool_result(self, result: ToolResult):
        self._expect(ChatTurnState.TOOL_REQUESTED)
        self.tool_result = result

    def confirm(self, followup_text: Optional[str]):
        """Finish a tool turn with the model's confirmation, or the templated one."""
        self._expect(ChatTurnState.TOOL_REQUESTED)
        if self.tool_result is None:
            raise RuntimeError("Cannot confirm a tool turn before the tool has run")
        if followup_text:
            self.reply = followup_text
        elif self.tool_result.success:
            self.reply = SUCCESS_FALLBACK
        else:
            self.reply = FAILURE_FALLBACK.format(error=self.tool_result.error)
        self.state = ChatTurnState.REPLIED

    def finish(self):
        self._expect(ChatTurnState.TEXT_ONLY)
        self.state = ChatTurnState.REPLIED

    @property
    def tools_executed(self) -> List[str]:
        return [self.tool_call.name] if self.tool_result else []


def execute_tool(tool_call: ToolCall, plan_id: Any) -> ToolResult:
    """Run one tool against the store. Never raises: failures become a failed ToolResult."""
    logger.info(f"Executing tool: {tool_call.name} {tool_call.args}")
    func = get_tool_implementation(tool_call.name)
    if not func:
        return ToolResult.failed(tool_call.name, f"Unknown tool: {tool_call.name}")

    if tool_call.args is not None and not isinstance(tool_call.args, dict):
        logger.warning(f"Tool arguments for {tool_call.name} are not an object: {tool_call.args!r}")
        return ToolResult.failed(tool_call.name, "Invalid tool arguments")

    allowed = get_tool_parameters(tool_call.name)
    args = {k: v for k, v in (tool_call.args or {}).items() if k in allowed}
    try:
        result = func(plan_id=plan_id, **args)
    except Exception as e:
        logger.error(f"Tool execution failed for {tool_call.name}: {e}")
        return ToolResult.failed(tool_call.name, f"Tool execution failed: {e}")

    logger.info(f"Tool result: {result.to_dict()}")
    return result


def request_confirmation(turn: ChatTurn) -> Optional[str]:
    """Second model call carrying the tool result. Returns None when it fails or has no text."""
    try:
        followup = generate_chat_response(
            messages=turn.messages,
            system_prompt=turn.context.system_prompt,
            tools=get_tool_definitions(),
            tool_exchange=(turn.tool_call, turn.tool_result),
            max_output_tokens=Config.FOLLOWUP_MAX_OUTPUT_TOKENS,
        )
    except LLMError as e:
        logger.warning(f"Confirmation request failed, using templated reply: {e}")
        return None
    if followup is None or not followup.text:
        logger.warning("Confirmation request returned no text, using templated reply")
        return None
    return followup.text


def log_message(user_id: str, role: str, content: str, tool_calls=None, tool_results=None):
    record = {
        "user_id": user_id,
        "role": role,
        "content": content,
        "created_at": datetime.now(timezone.utc).isoformat()
    }
    if tool_calls is not None:
        record["tool_calls"] = tool_calls
    if tool_results is not None:
        record["tool_results"] = tool_results
    try:
        supabase.table("ai_chat_logs").insert(record).execute()
    except Exception as e:
        logger.error(f"Error appending {role} message for user {user_id}: {e}")


def handle_chat_message(user_id: str, message: str) -> dict:
    """
    Chat entrypoint: answer one user message, applying at most one plan change.

    Returns:
        dict: {"success": True, "message": ..., "toolsExecuted": [...]} or
              {"success": False, "error": ..., "code": ...}
    """
    if not user_id or not message:
        return {"success": False, "error": "userId and message are required", "code": "MISSING_PARAMS"}

    try:
        return _handle_chat_message(user_id, message)
    except ServiceError as e:
        logger.warning(f"Chat turn failed for user {user_id}: {e.code} {e.message}")
        return e.to_dict(include_success=True)
    except Exception as e:
        logger.error(f"Unexpected error in chat for user {user_id}: {e}")
        return {"success": False, "error": "Internal server error", "code": "INTERNAL_ERROR"}


def _handle_chat_message(user_id, message):
    history = fetch_chat_history(user_id)
    log_message(user_id, "user", message)

    profile = _fetch_profile(user_id)
    plan = _fetch_active_plan(user_id)
    context = build_chat_context(user_id, profile, plan, history=history)
    turn = ChatTurn(user_id=user_id, message=message, plan_id=plan["id"], context=context)

    try:
        model_reply = generate_chat_response(
            messages=turn.messages,
            system_prompt=context.system_prompt,
            tools=get_tool_definitions(),
        )
    except LLMError as e:
        logger.error(f"Chat model error: {e}")
        raise ServiceError("AI_ERROR", "AI service temporarily unavailable")
    if model_reply is None:
        raise ServiceError("AI_EMPTY", "AI returned empty response")

    turn.receive_model_reply(model_reply)

    if turn.state is ChatTurnState.TOOL_REQUESTED:
        turn.record_tool_result(execute_tool(turn.tool_call, turn.plan_id))
        turn.confirm(request_confirmation(turn))
    else:
        turn.finish()

    log_message(
        user_id,
        "assistant",
        turn.reply,
        tool_calls=[turn.tool_call.to_dict()] if turn.tool_result else None,
        tool_results=[turn.tool_result.to_dict()] if turn.tool_result else None,
    )

    result = {"success": True, "message": turn.reply}
    if turn.tools_executed:
        result["toolsExecuted"] = turn.tools_executed
    return result


def _fetch_profile(user_id):
    try:
        res = supabase.table("profiles").select("name, goal, custom_goal_text, runs_per_week, strength_days") \
            .eq("id", user_id).execute()
    except Exception as e:
        logger.error(f"Profile fetch error: {e}")
        raise ServiceError("USER_NOT_FOUND", "User profile not found")
    if not res.data:
        raise ServiceError("USER_NOT_FOUND", "User profile not found")
    return res.data[0]


def _fetch_active_plan(user_id):
    res = supabase.table("training_plans").select("id, plan_name, goal") \
        .eq("user_id", user_id).eq("is_active", True).order("created_at", desc=True).limit(1).execute()
    if not res.data:
        raise ServiceError("NO_PLAN", "No active training plan found. Please complete onboarding first.")
    return res.data[0]
