from datetime import datetime
from models import db
from utils.helpers import format_datetime


class ProblemAttempt(db.Model):
    __tablename__ = "problem_attempts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    problem_id = db.Column(db.String(100), nullable=False, index=True)
    module_slug = db.Column(db.String(100), nullable=False, index=True)
    is_correct = db.Column(db.Boolean, nullable=False)
    attempt_number = db.Column(db.Integer, nullable=False, default=1)
    hints_used_count = db.Column(db.Integer, nullable=False, default=0)
    time_spent = db.Column(db.Integer, nullable=True)  # seconds
    answer = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", backref=db.backref("problem_attempts", lazy=True, cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "problemId": self.problem_id,
            "moduleSlug": self.module_slug,
            "isCorrect": self.is_correct,
            "attemptNumber": self.attempt_number,
            "hintsUsedCount": self.hints_used_count,
            "timeSpent": self.time_spent,
            "answer": self.answer,
            "timestamp": format_datetime(self.timestamp),
        }
