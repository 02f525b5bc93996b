from models import db
from models.enums import UserRole
from utils.helpers import format_datetime
from werkzeug.security import generate_password_hash, check_password_hash


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    name = db.Column(db.String(201), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=UserRole.STUDENT.value)  # 'student', 'instructor'
    date_created = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    progress = db.relationship("ModuleProgress", back_populates="user", cascade="all, delete-orphan")
    badges = db.relationship("UserBadge", back_populates="user", cascade="all, delete-orphan")

    def set_password(self, password):
        """Hashes the password before storing."""
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password):
        """Checks if a given password matches the stored hash."""
        return check_password_hash(self.password_hash, password)

    @property
    def is_instructor(self):
        return self.role == UserRole.INSTRUCTOR.value

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "name": self.name,
            "role": self.role,
            "dateCreated": format_datetime(self.date_created),
        }
