"""
Deadline Reminders Handler.
Triggered by EventBridge once a day (cron(0 12 * * ? *)) to remind assignees
and department supervisors of tasks due within the next three days.
"""
from taskdesk.logging import log_event
from taskdesk.sweeps import run_deadline_sweep


def handler(event, context):
    """
    Scheduled handler. Tasks failing individually are counted, not retried;
    the next day's run covers them again.
    """
    log_event(event)
    return run_deadline_sweep()
