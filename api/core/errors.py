"""
Error taxonomy shared by the dispatcher and the procedure orchestrator.

Every error carries the HTTP status it maps to; `main.py` turns them into
`{"error": "<message>"}` responses.
"""

from __future__ import annotations

from asyncpg import exceptions as pg_errors


class DispatchError(Exception):
    status_code = 500


class UnknownName(DispatchError):
    """A client supplied a name that is absent from a registry."""

    status_code = 400


class UnknownQuery(UnknownName):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown query: {name}")
        self.name = name


class UnknownResource(UnknownName):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown table: {name}")
        self.name = name


class InvalidInput(DispatchError):
    """A request value has the wrong shape or type for the operation."""

    status_code = 400


class OperationFailed(DispatchError):
    """A store interaction failed; the message is the underlying error text."""


class ValidationRejected(OperationFailed):
    """The store rejected the supplied values on constraint or type grounds."""


def store_failure(exc: Exception) -> OperationFailed:
    if isinstance(exc, OperationFailed):
        return exc
    if isinstance(exc, (pg_errors.IntegrityConstraintViolationError, pg_errors.DataError)):
        return ValidationRejected(str(exc))
    return OperationFailed(str(exc))
