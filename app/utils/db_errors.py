"""Turns storage constraint violations into client errors."""
import logging
import re

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

logger = logging.getLogger(__name__)

FK_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"

# postgres: Key (brand_id)=(42) is not present in table "brand".
_PG_KEY = re.compile(r"Key \((?P<field>[^)]+)\)=")
# sqlite: UNIQUE constraint failed: coupon.code
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: \w+\.(?P<field>\w+)")


def _error_code(exc: IntegrityError):
    orig = exc.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _offending_field(message: str):
    match = _PG_KEY.search(message) or _SQLITE_UNIQUE.search(message)
    return match.group("field") if match else None


def translate_integrity_error(exc: IntegrityError) -> HTTPException:
    message = str(exc.orig)
    code = _error_code(exc)
    field = _offending_field(message)

    if code == FK_VIOLATION or "FOREIGN KEY constraint failed" in message:
        detail = f"Invalid reference: {field} does not exist" if field else "Invalid reference to a related record"
        return HTTPException(400, detail)

    if code == UNIQUE_VIOLATION or "UNIQUE constraint failed" in message:
        detail = f"{field} already exists" if field else "Record already exists"
        return HTTPException(400, detail)

    raise exc


def commit_or_400(session: Session):
    """Commit, mapping FK/unique violations to 400; anything else propagates."""
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        logger.warning(f"Integrity error on commit: {exc.orig}")
        raise translate_integrity_error(exc) from exc
