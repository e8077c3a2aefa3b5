# pulse/chats/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from pulse.supabase_client import supabase
from pulse.errors import STATUS_BY_CODE
import logging

chats_bp = Blueprint('chats', __name__)
logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 50

@chats_bp.route("/", methods=["POST"], strict_slashes=False)
def send_message():
    data = request.get_json(silent=True) or {}
    user_id = data.get("userId")
    message = data.get("message")

    from pulse.chats.dispatcher import handle_chat_message
    result = handle_chat_message(user_id, message)

    if result.get("success"):
        return jsonify(result), 200
    return jsonify(result), STATUS_BY_CODE.get(result.get("code"), 500)

@chats_bp.route("/history", methods=["GET"], strict_slashes=False)
@jwt_required()
def get_history():
    user_id = get_jwt_identity()
    try:
        response = supabase.table("ai_chat_logs").select("id, role, content, tool_calls, created_at") \
            .eq("user_id", user_id).order("created_at", desc=True).limit(HISTORY_PAGE_SIZE).execute()
        messages = list(reversed(response.data or []))
        return jsonify({"messages": messages}), 200
    except Exception as e:
        current_app.logger.error(f"Error fetching chat history: {e}")
        return jsonify({"error": "Failed to fetch chat history."}), 500
