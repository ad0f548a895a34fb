from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from liftlog.db import transaction
from liftlog.errors import EngineError, InternalError, ValidationError

log = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str) -> Iterator[Session]:
    """
    Run a multi-step mutation as one transaction and classify what escapes it.

    Domain errors pass through untouched. Constraint violations are blamed on
    the caller's input, anything else from the storage layer is internal.
    """
    try:
        with transaction(db):
            yield db
    except EngineError:
        raise
    except IntegrityError as e:
        log.warning("%s rejected by a storage constraint: %s", action, e.orig)
        raise ValidationError(f"{action} violates a data constraint") from e
    except SQLAlchemyError as e:
        log.exception("%s failed", action)
        raise InternalError(f"{action} failed") from e
