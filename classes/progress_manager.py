from datetime import datetime

from sqlalchemy.orm import joinedload

from classes.validators import (
    require_fields,
    validate_non_negative,
    validate_score,
    validate_slug,
    validate_status,
)
from models import db, LearningModule, ModuleProgress
from models.enums import ProgressStatus
from utils.db import with_retry
from utils.errors import NotFoundError


class ProgressManager:
    @staticmethod
    def get_progress(user_id, module_slug=None):
        """A user's progress rows, optionally for one module."""
        def query():
            q = (
                ModuleProgress.query
                .options(joinedload(ModuleProgress.module))
                .filter(ModuleProgress.user_id == user_id)
            )
            if module_slug:
                q = q.join(LearningModule).filter(LearningModule.slug == module_slug)
            return q.order_by(ModuleProgress.module_id).all()

        return with_retry(query)

    @staticmethod
    def parse_update(data):
        """Validate a progress update payload into keyword arguments."""
        require_fields(data, "moduleSlug", message="moduleSlug is required")

        update = {"module_slug": validate_slug(data["moduleSlug"])}
        if data.get("status") is not None:
            update["status"] = validate_status(data["status"])
        if data.get("score") is not None:
            update["score"] = validate_score(data["score"])
        if data.get("timeSpent") is not None:
            update["time_spent"] = int(validate_non_negative("timeSpent", data["timeSpent"]))
        update["problem_id"] = data.get("problemId")
        return update

    @staticmethod
    def record_progress(user_id, module_slug, status=None, score=None, time_spent=None, problem_id=None):
        """
        Upsert the (user, module) progress row.

        Status and score are overwritten when given, time spent accumulates,
        and completion is stamped when a whole-module update (no problem id)
        moves the row to COMPLETED.
        """
        module = with_retry(lambda: LearningModule.query.filter_by(slug=module_slug).first())
        if not module:
            raise NotFoundError("Module")

        now = datetime.utcnow()
        progress = with_retry(lambda: ModuleProgress.query.filter_by(
            user_id=user_id, module_id=module.id
        ).first())

        if not progress:
            progress = ModuleProgress(
                user_id=user_id,
                module_id=module.id,
                status=status or ProgressStatus.IN_PROGRESS,
                score=score if score is not None else 0.0,
                time_spent=time_spent or 0,
                last_accessed=now,
            )
            db.session.add(progress)
        else:
            if status:
                progress.status = status
            if score is not None:
                progress.score = score
            if time_spent:
                progress.time_spent = (progress.time_spent or 0) + time_spent
            progress.last_accessed = now

        if status == ProgressStatus.COMPLETED and not problem_id:
            progress.completed_at = now

        progress.module = module
        db.session.commit()
        return progress

    @staticmethod
    def estimate_module_progress(status, score):
        """Rough completion percentage of a module from its status and score."""
        if status == ProgressStatus.COMPLETED:
            return 100
        if status == ProgressStatus.IN_PROGRESS:
            return min(90, max(20, (score or 0) * 0.9))
        if status == ProgressStatus.NOT_STARTED:
            return 0
        return min(50, (score or 0) * 0.5)
