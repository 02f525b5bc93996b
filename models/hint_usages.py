from datetime import datetime
from models import db
from utils.helpers import format_datetime


class HintUsage(db.Model):
    __tablename__ = "hint_usages"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    problem_id = db.Column(db.String(100), nullable=False, index=True)
    module_slug = db.Column(db.String(100), nullable=False, index=True)
    hint_index = db.Column(db.Integer, nullable=False)
    solved_after = db.Column(db.Boolean, nullable=False, default=False)
    time_to_solve = db.Column(db.Integer, nullable=True)  # seconds
    was_helpful = db.Column(db.Boolean, nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "problemId": self.problem_id,
            "moduleSlug": self.module_slug,
            "hintIndex": self.hint_index,
            "solvedAfter": self.solved_after,
            "timeToSolve": self.time_to_solve,
            "wasHelpful": self.was_helpful,
            "timestamp": format_datetime(self.timestamp),
        }
