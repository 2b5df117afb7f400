"""
Task lifecycle: create (with assignment), read, patch, delete and comments.
"""
import uuid
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key

from . import assignment, directory, dynamo, notifications
from .config import config
from .errors import ConflictError, InvalidState, TaskNotFound
from .logging import logger
from .models import (
    NotificationKind, Qualification, TaskPriority, TaskStatus,
    TASK_DEFAULTS, TITLE_MAX_LENGTH, choice,
)
from .utils import parse_due_date, utc_now

Task = Dict[str, Any]

UPDATED_MESSAGE = 'Task updated: {title}'

PATCHABLE_FIELDS = (
    'title', 'description', 'dueDate', 'priority', 'status',
    'assignedTo', 'departmentId', 'requiredQualification', 'comments',
)

_ENUM_FIELDS = {
    'priority': TaskPriority.ALL,
    'status': TaskStatus.ALL,
    'requiredQualification': Qualification.ALL,
}


def _title(value: Any) -> str:
    title = str(value).strip() if value is not None else ''
    if not title:
        raise InvalidState('Title required')
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidState(f"Title must be between 1 and {TITLE_MAX_LENGTH} characters")
    return title


def _comment(text: Any, created_at: str) -> Dict[str, str]:
    return {'comment': str(text).strip(), 'createdAt': created_at}


def _comments(value: Any, created_at: str) -> List[Dict[str, str]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidState('comments must be a list')
    comments = []
    for entry in value:
        if isinstance(entry, dict):
            text = entry.get('comment')
            stamp = entry.get('createdAt') or created_at
        else:
            text, stamp = entry, created_at
        if text is not None and str(text).strip():
            comments.append(_comment(text, stamp))
    return comments


def create_task(data: Dict[str, Any], actor_id: Optional[str] = None) -> Task:
    """
    Create a task and give it an assignee.

    With an explicit `assignedTo` the worker is validated and assigned directly;
    otherwise the task is stored unassigned and handed to the assignment engine.
    Either way the assignee and the department's supervisors are notified.

    Args:
        data: Task fields (title, description, dueDate, priority, status,
            requiredQualification, departmentId, assignedTo)
        actor_id: The worker creating the task, recorded as createdBy

    Raises:
        InvalidState: for a missing title or malformed field values
        DepartmentNotFound / WorkerNotFound: for unresolvable references
        NoEligibleWorker: if automatic assignment found nobody; the task is stored
    """
    timestamp = utc_now().isoformat()
    task = {
        'taskId': str(uuid.uuid4()),
        'title': _title(data.get('title')),
        'description': data.get('description'),
        'dueDate': parse_due_date(data.get('dueDate')),
        'comments': [],
        'createdBy': actor_id,
        'createdAt': timestamp,
        'updatedAt': timestamp,
    }
    for field, allowed in _ENUM_FIELDS.items():
        task[field] = choice(data.get(field), allowed, field, default=TASK_DEFAULTS[field])

    department = directory.get_department(data.get('departmentId'))
    task['departmentId'] = department['departmentId']

    assignee_id = data.get('assignedTo')
    if assignee_id:
        assignee = directory.get_worker(assignee_id)
        task['assignedTo'] = assignee['workerId']
        stored = dynamo.put_item(config.TASKS_TABLE, task)
        logger.info(f"Task {stored['taskId']} created and assigned to worker {assignee['workerId']}")
        assignment.announce_assignment(stored, assignee)
        return stored

    stored = dynamo.put_item(config.TASKS_TABLE, task)
    logger.info(f"Task {stored['taskId']} created in department {stored['departmentId']}, assigning")
    return assignment.assign_automatically(stored)


def get_task(task_id: str) -> Task:
    task = dynamo.get_item(config.TASKS_TABLE, {'taskId': task_id}) if task_id else None
    if not task:
        raise TaskNotFound(f"Task not found with id {task_id}")
    return task


def list_tasks_by_department(department_id: str) -> List[Task]:
    directory.get_department(department_id)
    return dynamo.query(
        config.TASKS_TABLE,
        index_name=config.TASKS_DEPARTMENT_INDEX,
        key_condition=Key('departmentId').eq(department_id)
    )


def list_tasks_by_assignee(worker_id: str) -> List[Task]:
    directory.get_worker(worker_id)
    return dynamo.query(
        config.TASKS_TABLE,
        index_name=config.TASKS_ASSIGNEE_INDEX,
        key_condition=Key('assignedTo').eq(worker_id)
    )


def _patched_value(field: str, value: Any, timestamp: str) -> Any:
    if field == 'title':
        return _title(value)
    if field == 'description':
        return value
    if field == 'dueDate':
        return parse_due_date(value)
    if field in _ENUM_FIELDS:
        normalized = choice(value, _ENUM_FIELDS[field], field)
        if normalized is None:
            raise InvalidState(f"{field} cannot be empty")
        return normalized
    if field == 'assignedTo':
        return directory.get_worker(value)['workerId'] if value else None
    if field == 'departmentId':
        return directory.get_department(value)['departmentId']
    return _comments(value, timestamp)


def _update_expression(changes: Dict[str, Any]) -> str:
    """SET every non-null change, REMOVE the nulls."""
    expression = 'SET ' + ', '.join(f"#{f} = :{f}" for f, v in changes.items() if v is not None)
    removed = [f"#{f}" for f, v in changes.items() if v is None]
    if removed:
        expression += ' REMOVE ' + ', '.join(removed)
    return expression


def update_task(task_id: str, patch: Dict[str, Any]) -> Task:
    """
    Apply a field-level patch to a task and notify the department's supervisors.

    Any known status is accepted regardless of the current one. Only the
    patched attributes are written, so fields changed concurrently elsewhere
    (the assignee in particular) are left alone.

    Raises:
        TaskNotFound: if the task does not exist, or is deleted before the write
        InvalidState: for unknown fields or malformed values
        WorkerNotFound / DepartmentNotFound: for unresolvable references
    """
    get_task(task_id)

    unknown = sorted(set(patch) - set(PATCHABLE_FIELDS))
    if unknown:
        raise InvalidState(f"Fields cannot be updated: {', '.join(unknown)}")

    timestamp = utc_now().isoformat()
    changes = {field: _patched_value(field, value, timestamp) for field, value in patch.items()}
    changes['updatedAt'] = timestamp

    try:
        stored = dynamo.update_item(
            config.TASKS_TABLE,
            key={'taskId': task_id},
            update_expression=_update_expression(changes),
            expression_values={f":{f}": v for f, v in changes.items() if v is not None},
            expression_names={f"#{f}": f for f in changes},
            condition_expression='attribute_exists(taskId)'
        )
    except ConflictError as e:
        raise TaskNotFound(f"Task not found with id {task_id}") from e
    logger.info(f"Task {task_id} updated: {', '.join(sorted(patch)) or 'no fields'}")

    notifications.notify_department_supervisors(
        UPDATED_MESSAGE.format(title=stored['title']), stored['departmentId'],
        NotificationKind.TASK, task_id
    )
    return stored


def delete_task(task_id: str) -> None:
    if not task_id:
        raise TaskNotFound('Task not found')
    try:
        dynamo.delete_item(
            config.TASKS_TABLE, {'taskId': task_id},
            condition_expression='attribute_exists(taskId)'
        )
    except ConflictError as e:
        raise TaskNotFound(f"Task not found with id {task_id}") from e
    logger.info(f"Task {task_id} deleted")


def add_comment(task_id: str, comment: Any) -> Task:
    """Append a comment to a task. Blank comments are ignored."""
    if not task_id:
        raise TaskNotFound('Task not found')
    if comment is None or not str(comment).strip():
        return get_task(task_id)
    timestamp = utc_now().isoformat()
    try:
        return dynamo.update_item(
            config.TASKS_TABLE,
            key={'taskId': task_id},
            update_expression='SET comments = list_append(if_not_exists(comments, :empty), :new), updatedAt = :ts',
            expression_values={
                ':empty': [],
                ':new': [_comment(comment, timestamp)],
                ':ts': timestamp
            },
            condition_expression='attribute_exists(taskId)'
        )
    except ConflictError as e:
        raise TaskNotFound(f"Task not found with id {task_id}") from e


def get_comments(task_id: str) -> List[Dict[str, str]]:
    return get_task(task_id).get('comments', [])
