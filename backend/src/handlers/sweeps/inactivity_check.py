"""
Inactivity Check Handler.
Triggered by EventBridge once a day (cron(0 0 * * ? *)) to tell administrators
about workers not seen for over a week.
"""
from taskdesk.logging import log_event
from taskdesk.sweeps import run_inactivity_sweep


def handler(event, context):
    log_event(event)
    return run_inactivity_sweep()
