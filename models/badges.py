from models import db
from datetime import datetime
from sqlalchemy.orm import relationship
from models.enums import BadgeType
from utils.helpers import format_datetime, parse_json_object


class Badge(db.Model):
    __tablename__ = "badges"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    badge_type = db.Column(db.Enum(BadgeType), nullable=False)
    requirements = db.Column(db.Text, nullable=True)  # JSON-encoded requirement object
    points = db.Column(db.Integer, nullable=False, default=0)
    module_id = db.Column(db.Integer, db.ForeignKey("learning_modules.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    module = relationship("LearningModule", back_populates="badges")

    @property
    def requirement_object(self):
        return parse_json_object(self.requirements)

    def __repr__(self):
        return f"<Badge {self.title} ({self.badge_type})>"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "badgeType": self.badge_type.value if self.badge_type else None,
            "requirements": self.requirement_object,
            "points": self.points,
            "moduleId": self.module_id,
        }


class UserBadge(db.Model):
    __tablename__ = "user_badges"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    badge_id = db.Column(db.Integer, db.ForeignKey("badges.id"), nullable=False)
    earned_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="badges")
    badge = relationship("Badge")

    __table_args__ = (
        db.UniqueConstraint("user_id", "badge_id", name="unique_user_badge"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "badgeId": self.badge_id,
            "earnedAt": format_datetime(self.earned_at),
        }
