"""
Authentication utilities for extracting the acting worker from Cognito tokens.

Handlers call these once and pass the result into the core explicitly.
"""
from typing import Optional


def _claims(event: dict) -> dict:
    try:
        return event['requestContext']['authorizer']['claims'] or {}
    except (KeyError, TypeError):
        return {}


def get_user_sub(event: dict) -> Optional[str]:
    """
    Extract user sub (the worker id) from Cognito authorizer claims.

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        User sub string or None if not authenticated
    """
    return _claims(event).get('sub')


def get_username(event: dict) -> Optional[str]:
    """Extract the username from Cognito claims."""
    claims = _claims(event)
    return claims.get('cognito:username') or claims.get('username')


def get_user_groups(event: dict) -> list:
    """Extract user groups (employee, supervisor, admin) from Cognito claims."""
    groups = _claims(event).get('cognito:groups', '')
    if isinstance(groups, str):
        return groups.split(',') if groups else []
    return groups or []


def is_admin(event: dict) -> bool:
    """Check if user belongs to admin group."""
    return 'admin' in get_user_groups(event)
