"""
Read-only view over workers and departments.

The assignment engine, the notification fan-out and the sweeps only ever
read the organization through these functions. Empty results are not errors.
"""
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key

from . import dynamo
from .config import config
from .errors import DepartmentNotFound, WorkerNotFound
from .models import Role

Worker = Dict[str, Any]


def get_department(department_id: str) -> Dict[str, Any]:
    """Resolve a department or raise DepartmentNotFound."""
    department = dynamo.get_item(config.DEPARTMENTS_TABLE, {'departmentId': department_id}) if department_id else None
    if not department:
        raise DepartmentNotFound(f"Department not found with id {department_id}")
    return department


def get_worker(worker_id: str) -> Worker:
    """Resolve a worker or raise WorkerNotFound."""
    worker = dynamo.get_item(config.WORKERS_TABLE, {'workerId': worker_id}) if worker_id else None
    if not worker:
        raise WorkerNotFound(f"Worker not found with id {worker_id}")
    return worker


def find_worker_by_username(username: str) -> Optional[Worker]:
    """Look up a worker by username; None if nobody has it."""
    if not username:
        return None
    matches = dynamo.query(
        config.WORKERS_TABLE,
        index_name=config.WORKERS_USERNAME_INDEX,
        key_condition=Key('username').eq(username)
    )
    return matches[0] if matches else None


def get_worker_by_username(username: str) -> Worker:
    worker = find_worker_by_username(username)
    if not worker:
        raise WorkerNotFound(f"Worker not found with username {username}")
    return worker


def _department_members(department_id: str, role: str) -> List[Worker]:
    return dynamo.query(
        config.WORKERS_TABLE,
        index_name=config.WORKERS_DEPARTMENT_INDEX,
        key_condition=Key('departmentId').eq(department_id),
        filter_expression=Attr('role').eq(role)
    )


def list_employees_in_department(department_id: str) -> List[Worker]:
    return _department_members(department_id, Role.EMPLOYEE)


def list_supervisors_in_department(department_id: str) -> List[Worker]:
    return _department_members(department_id, Role.DEPARTMENT_SUPERVISOR)


def list_admins() -> List[Worker]:
    return dynamo.query(
        config.WORKERS_TABLE,
        index_name=config.WORKERS_ROLE_INDEX,
        key_condition=Key('role').eq(Role.ADMIN)
    )


def assigned_task_count(worker_id: str) -> int:
    """Number of tasks currently assigned to the worker, derived from the tasks table."""
    return dynamo.count(
        config.TASKS_TABLE,
        index_name=config.TASKS_ASSIGNEE_INDEX,
        key_condition=Key('assignedTo').eq(worker_id)
    )


def all_workers() -> List[Worker]:
    return dynamo.scan(config.WORKERS_TABLE)
