from models import db
from utils.helpers import format_datetime


class LearningModule(db.Model):
    __tablename__ = "learning_modules"

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(100), nullable=False, unique=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    content = db.Column(db.Text, nullable=True)
    objectives = db.Column(db.JSON, nullable=True)
    topics = db.Column(db.JSON, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    progress = db.relationship("ModuleProgress", back_populates="module", cascade="all, delete-orphan")
    badges = db.relationship("Badge", back_populates="module")

    def __repr__(self):
        return f"<LearningModule {self.slug} (order {self.order})>"

    def to_dict(self):
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description if self.description is not None else "",
            "order": self.order,
            "content": self.content,
            "objectives": self.objectives or [],
            "topics": self.topics or [],
            "isActive": self.is_active,
            "createdAt": format_datetime(self.created_at),
        }
