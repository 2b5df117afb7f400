"""
Tests for the deadline reminder and inactivity sweeps.
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

from boto3.dynamodb.conditions import Attr

from taskdesk import sweeps
from taskdesk.models import NotificationKind

TODAY = date(2026, 10, 18)
NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def due(days):
    return (TODAY + timedelta(days=days)).isoformat()


class TestDeadlineSweep:
    """Tests for run_deadline_sweep."""

    def test_window_is_inclusive_three_days(self, make_task):
        """Due today, in 2 and in 3 days are reminded; in 4 days and overdue are not."""
        candidates = [
            make_task('today', due_date=due(0), assigned_to='E1'),
            make_task('plus2', due_date=due(2), assigned_to='E1'),
            make_task('plus3', due_date=due(3), assigned_to='E2'),
            make_task('plus4', due_date=due(4), assigned_to='E2'),
            make_task('overdue', due_date=due(-1), assigned_to='E2'),
        ]

        with patch('taskdesk.dynamo.scan', return_value=candidates), \
             patch('taskdesk.notifications.notify') as mock_notify, \
             patch('taskdesk.notifications.notify_department_supervisors') as mock_supervisors:

            result = sweeps.run_deadline_sweep(today=TODAY)

        assert result == {'checked': 5, 'reminded': 3, 'failed': 0}
        assert [c.args[3] for c in mock_notify.call_args_list] == ['today', 'plus2', 'plus3']
        assert [c.args[3] for c in mock_supervisors.call_args_list] == ['today', 'plus2', 'plus3']

    def test_scan_limited_to_window(self):
        with patch('taskdesk.dynamo.scan', return_value=[]) as mock_scan:
            sweeps.run_deadline_sweep(today=TODAY)

        assert mock_scan.call_args.kwargs['filter_expression'] == Attr('dueDate').between('2026-10-18', '2026-10-21')

    def test_reminder_messages(self, make_task):
        """Assignee and supervisors get reminders naming the title and due date."""
        task = make_task('T1', title='Ship it', due_date=due(1), assigned_to='E1', status='COMPLETED')

        with patch('taskdesk.dynamo.scan', return_value=[task]), \
             patch('taskdesk.notifications.notify') as mock_notify, \
             patch('taskdesk.notifications.notify_department_supervisors') as mock_supervisors:

            sweeps.run_deadline_sweep(today=TODAY)

        mock_notify.assert_called_once_with(
            "Reminder: The due date for your task 'Ship it' is approaching on 2026-10-19",
            'E1', NotificationKind.TASK, 'T1'
        )
        mock_supervisors.assert_called_once_with(
            "Reminder: The due date for task 'Ship it' is approaching on 2026-10-19",
            'D1', NotificationKind.TASK, 'T1'
        )

    def test_unassigned_task_reminds_supervisors_only(self, make_task):
        with patch('taskdesk.dynamo.scan', return_value=[make_task(due_date=due(0))]), \
             patch('taskdesk.notifications.notify') as mock_notify, \
             patch('taskdesk.notifications.notify_department_supervisors') as mock_supervisors:

            result = sweeps.run_deadline_sweep(today=TODAY)

        assert result['reminded'] == 1
        mock_notify.assert_not_called()
        mock_supervisors.assert_called_once()

    def test_bad_item_does_not_abort_pass(self, make_task):
        """A task with a malformed due date is counted as failed; the rest still get reminders."""
        tasks = [
            make_task('bad', due_date='soon'),
            make_task('good', due_date=due(1)),
        ]

        with patch('taskdesk.dynamo.scan', return_value=tasks), \
             patch('taskdesk.notifications.notify_department_supervisors') as mock_supervisors:

            result = sweeps.run_deadline_sweep(today=TODAY)

        assert result == {'checked': 2, 'reminded': 1, 'failed': 1}
        assert mock_supervisors.call_args.args[3] == 'good'

    def test_rerun_resends(self, make_task):
        """No suppression: a second run the same day reminds again."""
        with patch('taskdesk.dynamo.scan', return_value=[make_task(due_date=due(2))]), \
             patch('taskdesk.notifications.notify_department_supervisors') as mock_supervisors:

            sweeps.run_deadline_sweep(today=TODAY)
            sweeps.run_deadline_sweep(today=TODAY)

        assert mock_supervisors.call_count == 2


class TestInactivitySweep:
    """Tests for run_inactivity_sweep and is_inactive."""

    def test_inactivity_threshold(self, make_worker):
        """8 days idle and never seen are flagged; 6 days idle is not."""
        workers = [
            make_worker('W1', username='eight', last_active_at=(NOW - timedelta(days=8)).isoformat()),
            make_worker('W2', username='six', last_active_at=(NOW - timedelta(days=6)).isoformat()),
            make_worker('W3', username='never', last_active_at=None),
        ]

        with patch('taskdesk.directory.all_workers', return_value=workers), \
             patch('taskdesk.notifications.notify_admins') as mock_admins:

            result = sweeps.run_inactivity_sweep(now=NOW)

        assert result == {'checked': 3, 'inactive': 2, 'failed': 0}
        assert [c.args for c in mock_admins.call_args_list] == [
            ('User eight has been inactive for over a week', NotificationKind.OTHER),
            ('User never has been inactive for over a week', NotificationKind.OTHER),
        ]

    def test_naive_timestamp_taken_as_utc(self, make_worker):
        worker = make_worker('W1', last_active_at='2026-10-01T08:00:00')

        assert sweeps.is_inactive(worker, NOW) is True

    def test_naive_now_taken_as_utc(self, make_worker):
        """A naive sweep time still flags a worker idle for 8 days."""
        workers = [
            make_worker('W1', username='eight', last_active_at=(NOW - timedelta(days=8)).isoformat()),
            make_worker('W2', username='six', last_active_at=(NOW - timedelta(days=6)).isoformat()),
        ]

        with patch('taskdesk.directory.all_workers', return_value=workers), \
             patch('taskdesk.notifications.notify_admins') as mock_admins:

            result = sweeps.run_inactivity_sweep(now=NOW.replace(tzinfo=None))

        assert result == {'checked': 2, 'inactive': 1, 'failed': 0}
        mock_admins.assert_called_once_with('User eight has been inactive for over a week', NotificationKind.OTHER)

    def test_bad_item_does_not_abort_pass(self, make_worker):
        workers = [
            make_worker('W1', last_active_at='last tuesday'),
            make_worker('W2', username='idle', last_active_at=None),
        ]

        with patch('taskdesk.directory.all_workers', return_value=workers), \
             patch('taskdesk.notifications.notify_admins') as mock_admins:

            result = sweeps.run_inactivity_sweep(now=NOW)

        assert result == {'checked': 2, 'inactive': 1, 'failed': 1}
        mock_admins.assert_called_once()


@pytest.mark.parametrize('offset,expected', [(0, True), (3, True), (4, False), (-1, False)])
def test_is_due_soon(make_task, offset, expected):
    assert sweeps.is_due_soon(make_task(due_date=due(offset)), TODAY) is expected


def test_is_due_soon_without_due_date(make_task):
    assert sweeps.is_due_soon(make_task(due_date=None), TODAY) is False
