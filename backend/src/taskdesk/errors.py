"""
Business errors raised by the core and mapped to HTTP responses by the handlers.
"""
from typing import Any, Dict, Optional


class TaskDeskError(Exception):
    """Base error. `status_code` is the HTTP status a handler answers with."""
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(TaskDeskError):
    status_code = 404


class TaskNotFound(NotFound):
    pass


class WorkerNotFound(NotFound):
    pass


class NotificationNotFound(NotFound):
    pass


class DepartmentNotFound(NotFound):
    pass


class NoEligibleWorker(TaskDeskError):
    """The candidate pool was empty. The task stays persisted, unassigned."""
    status_code = 422

    def __init__(self, task_id: str, message: str = 'No available workers matching the task requirements'):
        super().__init__(message, {'taskId': task_id})
        self.task_id = task_id


class InvalidState(TaskDeskError):
    """Malformed input, e.g. an unknown status string."""
    status_code = 400


class StorageError(TaskDeskError):
    status_code = 500


class ConflictError(StorageError):
    """A conditional write lost against a concurrent change."""
    status_code = 409
