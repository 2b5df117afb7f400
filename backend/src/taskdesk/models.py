"""
Status constants and record defaults for the task desk.
Task lifecycle: Pending → In progress → Completed, with Delayed reachable from any open state.

Records are plain DynamoDB items (dicts with camelCase keys):
    Worker:       workerId, username, role, departmentId, qualification, lastActiveAt
    Task:         taskId, title, description, dueDate, priority, status,
                  requiredQualification, departmentId, assignedTo, comments
    Notification: notificationId, recipientId, message, read, createdAt, kind, referenceId
"""
from typing import Any, Iterable, Optional

from .errors import InvalidState


class Role:
    """Worker roles. Only employees take tasks."""
    EMPLOYEE = 'EMPLOYEE'
    DEPARTMENT_SUPERVISOR = 'DEPARTMENT_SUPERVISOR'
    ADMIN = 'ADMIN'

    ALL = (EMPLOYEE, DEPARTMENT_SUPERVISOR, ADMIN)


class Qualification:
    """Skill tiers held by a worker and required by a task."""
    JUNIOR = 'JUNIOR'
    MID = 'MID'
    SENIOR = 'SENIOR'

    ALL = (JUNIOR, MID, SENIOR)


class TaskStatus:
    """Task lifecycle statuses."""
    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    DELAYED = 'DELAYED'

    ALL = (PENDING, IN_PROGRESS, COMPLETED, DELAYED)


class TaskPriority:
    """Stored with the task; never used for assignment order."""
    LOW = 'LOW'
    MEDIUM = 'MEDIUM'
    HIGH = 'HIGH'

    ALL = (LOW, MEDIUM, HIGH)


class NotificationKind:
    """What a notification's referenceId points at."""
    TASK = 'TASK'
    USER = 'USER'
    OTHER = 'OTHER'

    ALL = (TASK, USER, OTHER)


TASK_DEFAULTS = {
    'priority': TaskPriority.MEDIUM,
    'status': TaskStatus.PENDING,
    'requiredQualification': Qualification.JUNIOR,
}

TITLE_MAX_LENGTH = 100


def choice(value: Any, allowed: Iterable[str], field: str, default: Optional[str] = None) -> Optional[str]:
    """
    Normalize an enum-like string and check it against the allowed values.

    Blank values fall back to `default`. Matching is case-insensitive; the
    canonical upper-case value is returned.

    Raises:
        InvalidState: if the value is not one of `allowed`
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if not isinstance(value, str):
        raise InvalidState(f"Invalid {field}: {value!r}")
    normalized = value.strip().upper()
    if normalized not in allowed:
        raise InvalidState(f"Invalid {field}: {value!r}. Must be one of {', '.join(allowed)}")
    return normalized
