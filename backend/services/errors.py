# backend/services/errors.py
"""Errors raised by the order workflow and the services around it.

Each error carries the HTTP status the API answers with; ``main.py``
registers a single handler for ``WorkflowError``.
"""


class WorkflowError(Exception):
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(WorkflowError):
    """Input rejected before anything is written (no client, empty cart, bad quantity)."""
    status_code = 422


class InvalidTransition(WorkflowError):
    """The order is no longer in the status the actor expected. Re-fetch and retry."""
    status_code = 409

    def __init__(self, message: str = "", current_status: str = None):
        super().__init__(message)
        self.current_status = current_status


class NotFound(WorkflowError):
    status_code = 404


class PersistenceFailure(WorkflowError):
    status_code = 503


class AuthorizationDenied(WorkflowError):
    status_code = 403
