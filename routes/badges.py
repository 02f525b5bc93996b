from flask import Blueprint, jsonify, request, g

from utils.badge_service import (
    award_specific_badge,
    check_and_award_badges,
    get_user_badge_stats,
    get_user_badges_with_progress,
)
from utils.errors import ValidationError
from utils.utils import get_current_user, login_required

badges_bp = Blueprint("badges", __name__)


def _new_badges_message(new_badges):
    if new_badges:
        return f"Congratulations! You earned {len(new_badges)} new badge(s)!"
    return "No new badges earned at this time."


@badges_bp.route("", methods=["GET"])
@login_required
def get_badges():
    user = get_current_user()
    view = request.args.get("type")

    if view == "stats":
        return jsonify({"stats": get_user_badge_stats(user.id)})

    if view == "progress":
        return jsonify({"badges": get_user_badges_with_progress(user.id)})

    if view == "check":
        new_badges = check_and_award_badges(user.id)
        return jsonify({"newBadges": new_badges, "message": _new_badges_message(new_badges)})

    return jsonify({
        "stats": get_user_badge_stats(user.id),
        "badges": get_user_badges_with_progress(user.id),
    })


@badges_bp.route("", methods=["POST"])
@login_required
def award_badges():
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    action = data.get("action")

    if action == "check_and_award":
        new_badges = check_and_award_badges(user.id)
        return jsonify({
            "success": True,
            "newBadges": new_badges,
            "count": len(new_badges),
            "message": _new_badges_message(new_badges),
        })

    if action == "award_specific" and data.get("badgeId") is not None:
        badge_id = data["badgeId"]
        if isinstance(badge_id, bool) or not isinstance(badge_id, int):
            raise ValidationError("badgeId must be an integer")

        achievement = award_specific_badge(user.id, badge_id)
        if achievement:
            return jsonify({"success": True, "badge": achievement, "message": achievement["message"]})
        return jsonify({"success": False, "message": "Badge already earned"})

    raise ValidationError("Invalid action")
