"""Commit helpers that turn store failures into HTTP errors."""

from __future__ import annotations

from typing import Callable

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import Conflict, InternalServerError

from models import db
from storage.abstract_storage import AbstractStorage


def commit_or_abort(
    failure_detail: str,
    *,
    conflict_detail: str | None = None,
    on_failure: Callable[[], None] | None = None,
) -> None:
    """Commit the session or roll back and raise.

    A unique-constraint violation becomes ``Conflict`` when ``conflict_detail``
    is given; every other store error becomes ``InternalServerError`` carrying
    ``failure_detail`` only. ``on_failure`` runs after the rollback.
    """

    try:
        db.session.commit()
    except SQLAlchemyError as error:
        db.session.rollback()
        if on_failure is not None:
            on_failure()
        if isinstance(error, IntegrityError) and conflict_detail is not None:
            current_app.logger.info("Unique constraint rejected write: %s", error.orig)
            raise Conflict(conflict_detail) from error
        current_app.logger.exception("Database commit failed")
        raise InternalServerError(failure_detail) from error


def discard_stored_file(storage: AbstractStorage, path: str) -> None:
    """Best-effort removal of a file no longer referenced by any record."""

    try:
        removed = storage.delete(path)
    except OSError:
        current_app.logger.warning("Could not remove stored file %s", path, exc_info=True)
        return
    if removed:
        current_app.logger.info("Removed stored file %s", path)
