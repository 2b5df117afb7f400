"""
Qualification matching - decides whether a worker's tier fits a task's requirement.
"""
from typing import Optional

from .config import config
from .models import Qualification

# Tier hierarchy for comparison (higher = more senior)
QUALIFICATION_RANK = {
    Qualification.JUNIOR: 0,
    Qualification.MID: 1,
    Qualification.SENIOR: 2,
}

EXACT = 'exact'
AT_LEAST = 'at_least'


def satisfies(worker_qualification: Optional[str], required: str, policy: Optional[str] = None) -> bool:
    """
    Check if a worker's qualification meets a task's required qualification.

    Policies:
    - exact: tiers must be equal (a SENIOR does not take a JUNIOR task)
    - at_least: the worker's tier must rank at or above the requirement

    Args:
        worker_qualification: The worker's tier, or None if unqualified
        required: The task's required tier
        policy: Overrides config.QUALIFICATION_POLICY

    Returns:
        True if the worker is eligible on qualification grounds
    """
    if worker_qualification is None:
        return False

    policy = policy or config.QUALIFICATION_POLICY
    if policy == AT_LEAST:
        worker_rank = QUALIFICATION_RANK.get(worker_qualification)
        required_rank = QUALIFICATION_RANK.get(required)
        if worker_rank is None or required_rank is None:
            return False
        return worker_rank >= required_rank
    if policy == EXACT:
        return worker_qualification == required
    raise ValueError(f"Unknown qualification policy: {policy}")
