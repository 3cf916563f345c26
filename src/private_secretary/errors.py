# src/private_secretary/errors.py

"""
Error taxonomy.

- ValidationError: user input rejected (empty title, bad time range, ...)
- AuthError: sync attempted without a TickTick token
- RemoteApiError: TickTick answered with a non-2xx status
- EditInProgressError / SyncInProgressError: UI state guards
"""

from __future__ import annotations


class SecretaryError(Exception):
    """Base class for errors surfaced to the user as a notice."""


class ValidationError(SecretaryError, ValueError):
    pass


class TaskNotFoundError(SecretaryError, LookupError):
    def __init__(self, task_ref: str) -> None:
        super().__init__(f"Task not found: {task_ref}")
        self.task_ref = task_ref


class AuthError(SecretaryError):
    pass


class RemoteApiError(SecretaryError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"TickTick API error: {status} - {body}")
        self.status = status
        self.body = body


class EditInProgressError(SecretaryError):
    pass


class SyncInProgressError(SecretaryError):
    pass
