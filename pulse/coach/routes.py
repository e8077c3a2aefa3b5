# pulse/coach/routes.py

from flask import Blueprint, request, jsonify
from pulse.errors import STATUS_BY_CODE
from pulse.extensions import limiter
import logging

coach_bp = Blueprint('coach', __name__)
logger = logging.getLogger(__name__)

@coach_bp.route("/generate-plan", methods=["POST"])
@limiter.limit("10 per hour")
def generate_plan_route():
    """
    Generates and saves an 8-week plan for the user in the request body.
    """
    data = request.get_json(silent=True) or {}
    user_id = data.get("userId")

    from pulse.coach.plan_service import generate_plan
    result = generate_plan(user_id)

    if result.get("success"):
        return jsonify(result), 200
    return jsonify(result), STATUS_BY_CODE.get(result.get("code"), 500)
