from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Import models
from models.enums import ProgressStatus, BadgeType, UserRole
from models.users import User

from models.learning_modules import LearningModule
from models.module_progress import ModuleProgress
from models.badges import Badge, UserBadge

from models.problem_attempts import ProblemAttempt
from models.hint_usages import HintUsage
from models.difficulty_metrics import ProblemDifficultyMetrics

from models.contact_submissions import ContactSubmission
