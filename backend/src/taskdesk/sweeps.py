"""
Daily sweeps: upcoming-deadline reminders and inactive-worker detection.

Both are stateless and independent. Nothing records that a reminder was sent,
so running a sweep twice on the same day sends its notifications twice.
A failure on one task or worker never stops the rest of the pass.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from boto3.dynamodb.conditions import Attr

from . import directory, dynamo, notifications
from .config import config
from .logging import logger
from .models import NotificationKind
from .utils import parse_timestamp, utc_now

ASSIGNEE_REMINDER = "Reminder: The due date for your task '{title}' is approaching on {due}"
SUPERVISOR_REMINDER = "Reminder: The due date for task '{title}' is approaching on {due}"
INACTIVE_MESSAGE = 'User {username} has been inactive for over a week'


def reminder_window(today: date, days: Optional[int] = None) -> Tuple[date, date]:
    """Inclusive [today, today + days] window of due dates that get reminders."""
    days = config.REMINDER_WINDOW_DAYS if days is None else days
    return today, today + timedelta(days=days)


def is_due_soon(task: Dict[str, Any], today: date, days: Optional[int] = None) -> bool:
    due = task.get('dueDate')
    if not due:
        return False
    start, end = reminder_window(today, days)
    return start <= date.fromisoformat(due) <= end


def is_inactive(worker: Dict[str, Any], now: datetime, threshold_days: Optional[int] = None) -> bool:
    """
    A worker is inactive if never seen, or last seen more than threshold_days ago.
    Naive timestamps, on either side, are taken as UTC.
    """
    threshold_days = config.INACTIVITY_THRESHOLD_DAYS if threshold_days is None else threshold_days
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    last_active = parse_timestamp(worker.get('lastActiveAt'))
    return last_active is None or last_active < now - timedelta(days=threshold_days)


def _remind(task: Dict[str, Any]) -> None:
    title, due = task.get('title', ''), task['dueDate']
    if task.get('assignedTo'):
        notifications.notify(
            ASSIGNEE_REMINDER.format(title=title, due=due), task['assignedTo'],
            NotificationKind.TASK, task['taskId']
        )
    notifications.notify_department_supervisors(
        SUPERVISOR_REMINDER.format(title=title, due=due), task['departmentId'],
        NotificationKind.TASK, task['taskId']
    )


def run_deadline_sweep(today: Optional[date] = None) -> Dict[str, int]:
    """
    Remind assignees and supervisors of every task due within the reminder window,
    whatever its status.

    Returns:
        Counts of tasks checked, reminded and failed
    """
    today = today or utc_now().date()
    start, end = reminder_window(today)
    logger.info(f"Running deadline reminder sweep for {start.isoformat()}..{end.isoformat()}")

    tasks = dynamo.scan(
        config.TASKS_TABLE,
        filter_expression=Attr('dueDate').between(start.isoformat(), end.isoformat())
    )

    reminded = 0
    failed = 0
    for task in tasks:
        try:
            if not is_due_soon(task, today):
                continue
            _remind(task)
            reminded += 1
        except Exception as e:
            failed += 1
            logger.error(f"Error sending reminder for task {task.get('taskId')}: {e}")

    logger.info(f"Deadline sweep done: {reminded} reminded, {failed} failed of {len(tasks)}")
    return {
        'checked': len(tasks),
        'reminded': reminded,
        'failed': failed
    }


def run_inactivity_sweep(now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Tell every administrator about each worker inactive past the threshold.

    Returns:
        Counts of workers checked, flagged inactive and failed
    """
    now = now or utc_now()
    logger.info(f"Running inactivity sweep at {now.isoformat()}")

    workers = directory.all_workers()

    inactive = 0
    failed = 0
    for worker in workers:
        try:
            if not is_inactive(worker, now):
                continue
            notifications.notify_admins(
                INACTIVE_MESSAGE.format(username=worker.get('username')),
                NotificationKind.OTHER
            )
            inactive += 1
        except Exception as e:
            failed += 1
            logger.error(f"Error checking activity of worker {worker.get('workerId')}: {e}")

    logger.info(f"Inactivity sweep done: {inactive} inactive, {failed} failed of {len(workers)}")
    return {
        'checked': len(workers),
        'inactive': inactive,
        'failed': failed
    }
