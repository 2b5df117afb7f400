"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the task desk.
"""
import os


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # DynamoDB Tables
    TASKS_TABLE = os.environ.get('TASKS_TABLE', '')
    WORKERS_TABLE = os.environ.get('WORKERS_TABLE', '')
    DEPARTMENTS_TABLE = os.environ.get('DEPARTMENTS_TABLE', '')
    NOTIFICATIONS_TABLE = os.environ.get('NOTIFICATIONS_TABLE', '')

    # Global Secondary Indexes
    WORKERS_DEPARTMENT_INDEX = os.environ.get('WORKERS_DEPARTMENT_INDEX', 'DepartmentIndex')
    WORKERS_ROLE_INDEX = os.environ.get('WORKERS_ROLE_INDEX', 'RoleIndex')
    WORKERS_USERNAME_INDEX = os.environ.get('WORKERS_USERNAME_INDEX', 'UsernameIndex')
    TASKS_ASSIGNEE_INDEX = os.environ.get('TASKS_ASSIGNEE_INDEX', 'AssigneeIndex')
    TASKS_DEPARTMENT_INDEX = os.environ.get('TASKS_DEPARTMENT_INDEX', 'DepartmentIndex')
    NOTIFICATIONS_RECIPIENT_INDEX = os.environ.get('NOTIFICATIONS_RECIPIENT_INDEX', 'RecipientIndex')

    # SQS Queues (optional downstream delivery of notifications)
    NOTIFICATIONS_QUEUE_URL = os.environ.get('NOTIFICATIONS_QUEUE_URL', '')

    # Sweep windows
    REMINDER_WINDOW_DAYS = int(os.environ.get('REMINDER_WINDOW_DAYS', '3'))
    INACTIVITY_THRESHOLD_DAYS = int(os.environ.get('INACTIVITY_THRESHOLD_DAYS', '7'))

    # Assignment: 'exact' or 'at_least'
    QUALIFICATION_POLICY = os.environ.get('QUALIFICATION_POLICY', 'exact')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


config = Config()
