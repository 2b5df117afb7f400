"""
Worker lifecycle. Administrators are notified of every registration, update and deletion.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from boto3.dynamodb.conditions import Key

from . import directory, dynamo, notifications
from .config import config
from .errors import ConflictError, InvalidState, WorkerNotFound
from .logging import logger
from .models import NotificationKind, Qualification, Role, choice
from .utils import utc_now

Worker = Dict[str, Any]

REGISTERED_MESSAGE = 'New user registered: {username}'
UPDATED_MESSAGE = 'User updated: {username}'
DELETED_MESSAGE = 'User deleted: {username}'

PROFILE_FIELDS = ('email', 'firstName', 'lastName')
PATCHABLE_FIELDS = PROFILE_FIELDS + ('username', 'role', 'qualification', 'departmentId')


def _username(value: Any, current_id: Optional[str] = None) -> str:
    username = str(value).strip() if value is not None else ''
    if not username:
        raise InvalidState('Username required')
    existing = directory.find_worker_by_username(username)
    if existing and existing['workerId'] != current_id:
        raise InvalidState('Username already exists')
    return username


def _role(value: Any) -> str:
    role = choice(value, Role.ALL, 'role')
    if role is None:
        raise InvalidState('Role required')
    return role


def _department_id(role: str, department_id: Optional[str]) -> Optional[str]:
    # Only administrators may sit outside a department
    if not department_id:
        if role == Role.ADMIN:
            return None
        raise InvalidState(f"Department required for role {role}")
    return directory.get_department(department_id)['departmentId']


def register_worker(data: Dict[str, Any], actor_id: Optional[str] = None,
                    now: Optional[datetime] = None) -> Worker:
    """
    Register a new worker and notify the administrators.

    Args:
        data: username, role, departmentId, qualification, profile fields and
            optionally workerId (the Cognito sub)
        actor_id: The administrator performing the registration
        now: Registration time, also the worker's first lastActiveAt
    """
    timestamp = (now or utc_now()).isoformat()
    role = _role(data.get('role'))
    worker = {
        'workerId': data.get('workerId') or str(uuid.uuid4()),
        'username': _username(data.get('username')),
        'role': role,
        'departmentId': _department_id(role, data.get('departmentId')),
        'qualification': choice(data.get('qualification'), Qualification.ALL, 'qualification'),
        'lastActiveAt': timestamp,
        'createdBy': actor_id,
        'createdAt': timestamp,
        'updatedAt': timestamp,
    }
    for field in PROFILE_FIELDS:
        worker[field] = data.get(field)

    stored = dynamo.put_item(config.WORKERS_TABLE, worker, condition_expression='attribute_not_exists(workerId)')
    logger.info(f"Registered worker {stored['workerId']} ({stored['username']}, {role})")

    notifications.notify_admins(
        REGISTERED_MESSAGE.format(username=stored['username']), NotificationKind.USER, stored['workerId']
    )
    return stored


def update_worker(worker_id: str, patch: Dict[str, Any]) -> Worker:
    """
    Apply a field-level patch to a worker and notify the administrators.

    Raises:
        WorkerNotFound: if the worker does not exist
        InvalidState: for unknown fields or malformed values
    """
    worker = directory.get_worker(worker_id)

    unknown = sorted(set(patch) - set(PATCHABLE_FIELDS))
    if unknown:
        raise InvalidState(f"Fields cannot be updated: {', '.join(unknown)}")

    updated = dict(worker)
    for field in PROFILE_FIELDS:
        if field in patch:
            updated[field] = patch[field]
    if 'username' in patch:
        updated['username'] = _username(patch['username'], current_id=worker_id)
    if 'role' in patch:
        updated['role'] = _role(patch['role'])
    if 'qualification' in patch:
        updated['qualification'] = choice(patch['qualification'], Qualification.ALL, 'qualification')
    if 'role' in patch or 'departmentId' in patch:
        updated['departmentId'] = _department_id(updated['role'], patch.get('departmentId', updated.get('departmentId')))
    updated['updatedAt'] = utc_now().isoformat()

    stored = dynamo.put_item(config.WORKERS_TABLE, updated)
    logger.info(f"Worker {worker_id} updated: {', '.join(sorted(patch)) or 'no fields'}")

    notifications.notify_admins(
        UPDATED_MESSAGE.format(username=stored['username']), NotificationKind.USER, worker_id
    )
    return stored


def delete_worker(worker_id: str) -> None:
    """
    Delete a worker: remove the record, unassign their tasks, drop their
    notifications, then notify the administrators.

    The record goes first so the worker can no longer be picked for new work.
    A failed cleanup is logged with what was left behind and re-raised.

    Raises:
        WorkerNotFound: if the worker does not exist
    """
    worker = directory.get_worker(worker_id)
    timestamp = utc_now().isoformat()

    try:
        dynamo.delete_item(
            config.WORKERS_TABLE, {'workerId': worker_id},
            condition_expression='attribute_exists(workerId)'
        )
    except ConflictError as e:
        raise WorkerNotFound(f"Worker not found with id {worker_id}") from e

    unassigned = 0
    try:
        assigned = dynamo.query(
            config.TASKS_TABLE,
            index_name=config.TASKS_ASSIGNEE_INDEX,
            key_condition=Key('assignedTo').eq(worker_id)
        )
        for task in assigned:
            dynamo.update_item(
                config.TASKS_TABLE,
                key={'taskId': task['taskId']},
                update_expression='REMOVE assignedTo SET updatedAt = :ts',
                expression_values={':ts': timestamp}
            )
            unassigned += 1

        removed = notifications.delete_for_worker(worker_id)
    except Exception as e:
        logger.error(
            f"Worker {worker_id} deleted but cleanup failed after {unassigned} tasks unassigned; "
            f"remaining tasks and notifications still reference the worker: {e}"
        )
        raise
    logger.info(f"Deleted worker {worker_id}: {unassigned} tasks unassigned, {removed} notifications removed")

    notifications.notify_admins(
        DELETED_MESSAGE.format(username=worker.get('username')), NotificationKind.USER, worker_id
    )


def record_activity(username: str, now: Optional[datetime] = None) -> Optional[Worker]:
    """Stamp a worker's lastActiveAt. Unknown usernames are ignored."""
    worker = directory.find_worker_by_username(username)
    if not worker:
        logger.warning(f"Activity for unknown username {username} ignored")
        return None
    return dynamo.update_item(
        config.WORKERS_TABLE,
        key={'workerId': worker['workerId']},
        update_expression='SET lastActiveAt = :ts',
        expression_values={':ts': (now or utc_now()).isoformat()}
    )
