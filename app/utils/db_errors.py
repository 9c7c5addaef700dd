# app/utils/db_errors.py
from sqlalchemy.exc import IntegrityError

# SQLSTATE codes reported by PostgreSQL drivers
FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = getattr(exc, "orig", None)
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return code
    # asyncpg errors arrive wrapped by the SQLAlchemy adapter
    cause = getattr(orig, "__cause__", None)
    return getattr(cause, "sqlstate", None)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == FOREIGN_KEY_VIOLATION:
        return True
    text = str(exc.orig).lower()
    return "foreign key" in text


def is_unique_violation(exc: IntegrityError, column: str | None = None) -> bool:
    text = str(exc.orig).lower()
    if _sqlstate(exc) != UNIQUE_VIOLATION and "unique" not in text:
        return False
    return column is None or column in text
