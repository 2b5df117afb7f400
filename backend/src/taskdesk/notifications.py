"""
Notification fan-out.

Fan-out calls (notify, notify_department_supervisors, notify_admins) are
best-effort: they log failures and report them through their return value,
so the task or worker write that triggered them is never unwound.
Everything addressed to a user from the outside (send_notification, mark_read)
is a primary operation and raises.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key

from . import directory, dynamo, sqs
from .config import config
from .errors import ConflictError, InvalidState, NotificationNotFound
from .logging import logger
from .models import NotificationKind, choice
from .utils import utc_now

Notification = Dict[str, Any]


def _build(message: str, recipient_id: str, kind: str, reference_id: Optional[str],
           now: Optional[datetime] = None) -> Notification:
    return {
        'notificationId': str(uuid.uuid4()),
        'recipientId': recipient_id,
        'message': message,
        'read': False,
        'createdAt': (now or utc_now()).isoformat(),
        'kind': kind,
        'referenceId': reference_id,
    }


def _deliver(notification: Notification) -> Notification:
    stored = dynamo.put_item(config.NOTIFICATIONS_TABLE, notification)
    if config.NOTIFICATIONS_QUEUE_URL:
        # The table row is the source of truth; a failed publish only delays push delivery
        sqs.send_message(config.NOTIFICATIONS_QUEUE_URL, stored, group_key=stored['recipientId'])
    return stored


def notify(message: str, recipient_id: str, kind: str, reference_id: Optional[str] = None,
           now: Optional[datetime] = None) -> bool:
    """
    Create one notification addressed to a worker.

    Returns:
        True if the notification was stored, False if delivery failed
    """
    try:
        _deliver(_build(message, recipient_id, kind, reference_id, now))
        return True
    except Exception as e:
        logger.error(f"Failed to notify worker {recipient_id} ({kind} {reference_id}): {e}")
        return False


def _fan_out(message: str, recipients: List[Dict[str, Any]], kind: str,
             reference_id: Optional[str]) -> int:
    delivered = 0
    for recipient in recipients:
        if notify(message, recipient['workerId'], kind, reference_id):
            delivered += 1
    return delivered


def notify_department_supervisors(message: str, department_id: str, kind: str,
                                  reference_id: Optional[str] = None) -> int:
    """
    Notify every supervisor of a department. No supervisors is a no-op.

    Returns:
        Number of notifications stored
    """
    try:
        supervisors = directory.list_supervisors_in_department(department_id)
    except Exception as e:
        logger.error(f"Could not resolve supervisors of department {department_id}: {e}")
        return 0
    return _fan_out(message, supervisors, kind, reference_id)


def notify_admins(message: str, kind: str, reference_id: Optional[str] = None) -> int:
    """
    Notify every administrator.

    Returns:
        Number of notifications stored
    """
    try:
        admins = directory.list_admins()
    except Exception as e:
        logger.error(f"Could not resolve administrators: {e}")
        return 0
    return _fan_out(message, admins, kind, reference_id)


def send_notification(message: str, recipient_username: str, kind: str,
                      reference_id: Optional[str] = None) -> Notification:
    """
    Send a notification to a worker identified by username.

    Raises:
        WorkerNotFound: if no worker has that username
        InvalidState: for a blank message or an unknown kind
    """
    if not message or not str(message).strip():
        raise InvalidState('Notification message is required')
    kind = choice(kind, NotificationKind.ALL, 'kind', default=NotificationKind.OTHER)
    recipient = directory.get_worker_by_username(recipient_username)
    notification = _deliver(_build(message, recipient['workerId'], kind, reference_id))
    logger.info(f"Notification {notification['notificationId']} sent to {recipient_username}")
    return notification


def _for_recipient(recipient_id: str, filter_expression=None) -> List[Notification]:
    return dynamo.query(
        config.NOTIFICATIONS_TABLE,
        index_name=config.NOTIFICATIONS_RECIPIENT_INDEX,
        key_condition=Key('recipientId').eq(recipient_id),
        filter_expression=filter_expression,
        scan_forward=False
    )


def get_unread(username: str) -> List[Notification]:
    """Unread notifications of a worker, newest first."""
    worker = directory.get_worker_by_username(username)
    return _for_recipient(worker['workerId'], Attr('read').eq(False))


def list_notifications(username: str) -> List[Notification]:
    """All notifications of a worker, newest first."""
    worker = directory.get_worker_by_username(username)
    return _for_recipient(worker['workerId'])


def mark_read(notification_id: str) -> Notification:
    """
    Mark a notification as read. Marking it again is a no-op.

    Raises:
        NotificationNotFound: if the notification does not exist
    """
    if not notification_id:
        raise NotificationNotFound('Notification not found')
    try:
        return dynamo.update_item(
            config.NOTIFICATIONS_TABLE,
            key={'notificationId': notification_id},
            update_expression='SET #read = :true',
            expression_values={':true': True},
            expression_names={'#read': 'read'},
            condition_expression='attribute_exists(notificationId)'
        )
    except ConflictError as e:
        raise NotificationNotFound(f"Notification not found with id {notification_id}") from e


def delete_for_worker(worker_id: str) -> int:
    """Delete every notification addressed to a worker."""
    notifications = _for_recipient(worker_id)
    for notification in notifications:
        dynamo.delete_item(config.NOTIFICATIONS_TABLE, {'notificationId': notification['notificationId']})
    return len(notifications)
