"""
Shared fixtures: record factories shaped like the DynamoDB items the core reads.
"""
import pytest


@pytest.fixture
def make_worker():
    def _make(worker_id, role='EMPLOYEE', department_id='D1', qualification='MID',
              username=None, last_active_at=None):
        return {
            'workerId': worker_id,
            'username': username or worker_id.lower(),
            'role': role,
            'departmentId': department_id,
            'qualification': qualification,
            'lastActiveAt': last_active_at,
        }
    return _make


@pytest.fixture
def make_task():
    def _make(task_id='T1', title='Quarterly report', department_id='D1',
              required='MID', assigned_to=None, due_date=None, status='PENDING'):
        return {
            'taskId': task_id,
            'title': title,
            'departmentId': department_id,
            'requiredQualification': required,
            'priority': 'MEDIUM',
            'status': status,
            'assignedTo': assigned_to,
            'dueDate': due_date,
            'comments': [],
        }
    return _make


def stored(table_name, item, **kwargs):
    """side_effect for a patched dynamo.put_item: echo the written item."""
    return item


@pytest.fixture
def echo_put():
    return stored


@pytest.fixture
def apply_update():
    """side_effect factory for a patched dynamo.update_item: apply SET/REMOVE to a copy of item."""
    def _factory(item):
        def _update(table_name, key, update_expression, expression_values=None,
                    expression_names=None, condition_expression=None):
            updated = dict(item)
            values = expression_values or {}
            for placeholder, field in (expression_names or {}).items():
                value_key = ':' + placeholder[1:]
                if value_key in values:
                    updated[field] = values[value_key]
                else:
                    updated.pop(field, None)
            return updated
        return _update
    return _factory
