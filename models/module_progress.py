from datetime import datetime
from models import db
from models.enums import ProgressStatus
from utils.helpers import format_datetime


class ModuleProgress(db.Model):
    __tablename__ = "module_progress"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    module_id = db.Column(db.Integer, db.ForeignKey("learning_modules.id"), nullable=False)
    status = db.Column(db.Enum(ProgressStatus), nullable=False, default=ProgressStatus.NOT_STARTED)
    score = db.Column(db.Float, nullable=False, default=0.0)
    time_spent = db.Column(db.Integer, nullable=False, default=0)  # minutes
    last_accessed = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="progress")
    module = db.relationship("LearningModule", back_populates="progress")

    __table_args__ = (
        db.UniqueConstraint("user_id", "module_id", name="unique_user_module"),
    )

    @property
    def module_slug(self):
        return self.module.slug if self.module else None

    def __repr__(self):
        return f"<ModuleProgress user {self.user_id} module {self.module_id} {self.status}>"

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "moduleId": self.module_id,
            "moduleSlug": self.module_slug,
            "moduleTitle": self.module.title if self.module else None,
            "status": self.status.value if self.status else None,
            "score": self.score,
            "timeSpent": self.time_spent,
            "lastAccessed": format_datetime(self.last_accessed),
            "completedAt": format_datetime(self.completed_at),
        }
