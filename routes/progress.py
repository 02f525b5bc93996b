from flask import Blueprint, jsonify, request

from classes.progress_manager import ProgressManager
from utils.badge_service import check_and_award_badges
from utils.utils import get_current_user, login_required

progress_bp = Blueprint("progress", __name__)


@progress_bp.route("", methods=["GET"])
@login_required
def get_progress():
    user = get_current_user()
    rows = ProgressManager.get_progress(user.id, request.args.get("module"))
    return jsonify({"progress": [row.to_dict() for row in rows]})


@progress_bp.route("", methods=["POST"])
@login_required
def update_progress():
    user = get_current_user()
    update = ProgressManager.parse_update(request.get_json(silent=True) or {})

    progress = ProgressManager.record_progress(user.id, **update)
    new_badges = check_and_award_badges(user.id)

    return jsonify({
        "message": "Progress updated successfully",
        "progress": progress.to_dict(),
        "newBadges": new_badges,
    })
