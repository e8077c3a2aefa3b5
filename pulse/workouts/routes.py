# pulse/workouts/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from pulse.supabase_client import supabase
import logging

workouts_bp = Blueprint('workouts', __name__)
logger = logging.getLogger(__name__)

@workouts_bp.route("/<workout_id>/complete", methods=["PATCH"])
@jwt_required()
def set_completion(workout_id):
    """
    Marks a workout as completed or not completed.
    Only workouts belonging to one of the caller's plans can be changed.
    """
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}
    is_completed = data.get("isCompleted")
    if not isinstance(is_completed, bool):
        return jsonify({"error": "isCompleted must be true or false."}), 400

    try:
        workout_res = supabase.table("workouts").select("id, plan_id").eq("id", workout_id).execute()
        if not workout_res.data:
            return jsonify({"error": "Workout not found."}), 404

        plan_id = workout_res.data[0]["plan_id"]
        plan_res = supabase.table("training_plans").select("id").eq("id", plan_id).eq("user_id", user_id).execute()
        if not plan_res.data:
            logger.warning(f"User {user_id} tried to update workout {workout_id} of another user")
            return jsonify({"error": "Workout not found."}), 404

        res = supabase.table("workouts").update({"is_completed": is_completed}).eq("id", workout_id).execute()
        if not res.data:
            return jsonify({"error": "Failed to update workout."}), 500
        return jsonify({"workout": res.data[0]}), 200
    except Exception as e:
        logger.error(f"Error updating workout {workout_id}: {e}")
        return jsonify({"error": "Failed to update workout."}), 500

@workouts_bp.route("/plans", methods=["DELETE"])
@jwt_required()
def reset_plans():
    """
    Full plan reset: deletes every workout and training plan of the caller.
    """
    user_id = get_jwt_identity()
    try:
        plans_res = supabase.table("training_plans").select("id").eq("user_id", user_id).execute()
        plan_ids = [p["id"] for p in (plans_res.data or [])]
        if plan_ids:
            supabase.table("workouts").delete().in_("plan_id", plan_ids).execute()
            supabase.table("training_plans").delete().eq("user_id", user_id).execute()
        logger.info(f"Reset {len(plan_ids)} training plans for user {user_id}")
        return jsonify({"message": "Training plans reset.", "plans_deleted": len(plan_ids)}), 200
    except Exception as e:
        logger.error(f"Error resetting plans for user {user_id}: {e}")
        return jsonify({"error": "Failed to reset training plans."}), 500
