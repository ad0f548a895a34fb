"""
Error taxonomy raised by the services and mapped to HTTP in main.py.

Ownership failures raise NotFoundError on purpose: a caller must not be able
to tell "exists but belongs to someone else" from "does not exist".
"""
from __future__ import annotations

from typing import Any


class EngineError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class NotFoundError(EngineError):
    status_code = 404


class ValidationError(EngineError):
    status_code = 422


class ConflictError(EngineError):
    status_code = 409


class InternalError(EngineError):
    status_code = 500
