import logging
import random
import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError

from models import db

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, DisconnectionError, InterfaceError)


def with_retry(operation, max_retries=None, base_delay=None):
    """
    Run ``operation()`` and retry it when the database connection drops.

    Retries use exponential backoff with jitter: ``base_delay * 2**attempt``
    milliseconds plus up to ``base_delay`` more. Only connectivity errors are
    retried; anything else (validation, unique violations, bugs) propagates
    on the first failure.
    """
    if max_retries is None:
        max_retries = current_app.config.get("DATABASE_RETRY_ATTEMPTS", 3)
    if base_delay is None:
        base_delay = current_app.config.get("DATABASE_RETRY_DELAY", 1000)

    for attempt in range(max_retries + 1):
        try:
            return operation()
        except TRANSIENT_ERRORS as e:
            db.session.rollback()
            if attempt == max_retries:
                logger.error("[DB] Operation failed after %d attempts: %s", attempt + 1, e)
                raise

            delay_ms = base_delay * (2 ** attempt) + random.uniform(0, base_delay)
            logger.warning(
                "[DB] Operation failed (attempt %d/%d), retrying in %dms: %s",
                attempt + 1, max_retries + 1, round(delay_ms), e,
            )
            time.sleep(delay_ms / 1000.0)


def insert_ignore(model, **values):
    """
    Insert a row unless it collides with a unique constraint.

    Returns True when the row was inserted and False when an equal row
    already existed. Runs inside the current session transaction.
    """
    dialect = db.session.get_bind().dialect.name
    table = model.__table__

    if dialect == "sqlite":
        stmt = sqlite_insert(table).values(**values).on_conflict_do_nothing()
    elif dialect == "postgresql":
        stmt = postgresql_insert(table).values(**values).on_conflict_do_nothing()
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql_insert(table).values(**values).prefix_with("IGNORE")
    else:
        try:
            with db.session.begin_nested():
                db.session.add(model(**values))
            return True
        except IntegrityError:
            return False

    result = db.session.execute(stmt)
    return result.rowcount == 1


def check_database():
    """Run a trivial query and return its latency in milliseconds."""
    started = time.perf_counter()
    db.session.execute(text("SELECT 1"))
    return round((time.perf_counter() - started) * 1000)
