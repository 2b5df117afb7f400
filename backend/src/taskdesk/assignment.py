"""
Assignment engine - picks the least-loaded qualified employee of a task's department.

Selection rules:
1. Candidates are EMPLOYEE workers of the task's department whose qualification
   satisfies the task's requiredQualification (see qualification.satisfies).
2. The candidate with the fewest currently assigned tasks wins.
3. Ties go to the lowest workerId.

Loads are read, not locked: two tasks created at the same moment may both land
on the same least-loaded worker.
"""
from typing import Any, Callable, Dict, List, Tuple

from . import directory, dynamo, notifications
from .config import config
from .errors import ConflictError, InvalidState, NoEligibleWorker
from .logging import logger
from .models import NotificationKind, Role
from .qualification import satisfies
from .utils import utc_now

Task = Dict[str, Any]
Worker = Dict[str, Any]

ASSIGNED_MESSAGE = 'You have been assigned a new task: {title}'
CREATED_MESSAGE = 'A new task has been created: {title}'


def candidate_pool(task: Task, workers: List[Worker]) -> List[Worker]:
    """Filter workers down to those eligible for automatic assignment to the task."""
    department_id = task['departmentId']
    required = task['requiredQualification']
    return [
        worker for worker in workers
        if worker.get('role') == Role.EMPLOYEE
        and worker.get('departmentId') == department_id
        and satisfies(worker.get('qualification'), required)
    ]


def select_least_loaded(
    candidates: List[Worker],
    load_of: Callable[[str], int]
) -> Tuple[Worker, int]:
    """
    Pick the candidate with the fewest assigned tasks, lowest workerId on ties.

    Args:
        candidates: Non-empty list of eligible workers
        load_of: Returns the current assigned-task count for a workerId

    Returns:
        (selected worker, its load before this assignment)
    """
    loads = {worker['workerId']: load_of(worker['workerId']) for worker in candidates}
    selected = min(candidates, key=lambda w: (loads[w['workerId']], w['workerId']))
    return selected, loads[selected['workerId']]


def announce_assignment(task: Task, assignee: Worker) -> None:
    """Tell the assignee and the department's supervisors. Best-effort."""
    title = task.get('title', '')
    notifications.notify(
        ASSIGNED_MESSAGE.format(title=title), assignee['workerId'],
        NotificationKind.TASK, task['taskId']
    )
    notifications.notify_department_supervisors(
        CREATED_MESSAGE.format(title=title), task['departmentId'],
        NotificationKind.TASK, task['taskId']
    )


def _commit(task: Task, assignee: Worker) -> Task:
    try:
        return dynamo.update_item(
            config.TASKS_TABLE,
            key={'taskId': task['taskId']},
            update_expression='SET assignedTo = :worker, updatedAt = :ts',
            expression_values={
                ':worker': assignee['workerId'],
                ':ts': utc_now().isoformat()
            },
            condition_expression='attribute_exists(taskId) AND attribute_not_exists(assignedTo)'
        )
    except ConflictError as e:
        raise ConflictError(
            f"Task {task['taskId']} was deleted or assigned concurrently",
            {'taskId': task['taskId']}
        ) from e


def assign_automatically(task: Task) -> Task:
    """
    Assign a persisted, unassigned task to the best-available employee.

    The task's department, requiredQualification, priority and status must
    already be resolved and defaulted by the caller.

    Returns:
        The task as stored after the assignment

    Raises:
        InvalidState: if the task already has an assignee
        NoEligibleWorker: if nobody qualifies; the task stays stored unassigned
        ConflictError: if the task was assigned or deleted concurrently
    """
    task_id = task['taskId']
    if task.get('assignedTo'):
        raise InvalidState(f"Task {task_id} is already assigned", {'taskId': task_id})

    employees = directory.list_employees_in_department(task['departmentId'])
    candidates = candidate_pool(task, employees)
    logger.info(
        f"Task {task_id}: {len(candidates)} of {len(employees)} employees in department "
        f"{task['departmentId']} qualify for {task['requiredQualification']}"
    )

    if not candidates:
        raise NoEligibleWorker(task_id)

    assignee, load = select_least_loaded(candidates, directory.assigned_task_count)
    assigned = {**task, **_commit(task, assignee)}
    logger.info(f"Task {task_id} assigned to worker {assignee['workerId']} (had {load} tasks)")

    announce_assignment(assigned, assignee)
    return assigned
