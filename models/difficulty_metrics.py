from datetime import datetime
from models import db
from utils.helpers import format_datetime


class ProblemDifficultyMetrics(db.Model):
    __tablename__ = "problem_difficulty_metrics"

    id = db.Column(db.Integer, primary_key=True)
    problem_id = db.Column(db.String(100), nullable=False, unique=True)
    module_slug = db.Column(db.String(100), nullable=False, index=True)
    total_attempts = db.Column(db.Integer, nullable=False, default=0)
    total_completions = db.Column(db.Integer, nullable=False, default=0)
    avg_attempts = db.Column(db.Float, nullable=False, default=0.0)
    avg_time_to_solve = db.Column(db.Integer, nullable=False, default=0)  # seconds
    avg_hints_used = db.Column(db.Float, nullable=False, default=0.0)
    success_rate = db.Column(db.Float, nullable=False, default=0.0)  # 0..1
    calculated_diff = db.Column(db.String(20), nullable=False, default="medium")
    sample_size = db.Column(db.Integer, nullable=False, default=0)
    last_calculated = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "problemId": self.problem_id,
            "moduleSlug": self.module_slug,
            "totalAttempts": self.total_attempts,
            "totalCompletions": self.total_completions,
            "avgAttempts": self.avg_attempts,
            "avgTimeToSolve": self.avg_time_to_solve,
            "avgHintsUsed": self.avg_hints_used,
            "successRate": self.success_rate,
            "calculatedDiff": self.calculated_diff,
            "sampleSize": self.sample_size,
            "lastCalculated": format_datetime(self.last_calculated),
        }
