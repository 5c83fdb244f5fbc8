"""Campaign lifecycle status resolution."""

from dataclasses import dataclass

from aggregator.models import CampaignStatus


@dataclass(frozen=True)
class StatusResult:
    """Derived lifecycle fields for a campaign."""
    status: CampaignStatus
    progress: float
    is_active: bool


def compute_progress(goal: int, raised: int) -> float:
    """Funding progress as a percentage in [0, 100].

    A zero (or negative) goal yields 0.
    """
    if goal <= 0 or raised <= 0:
        return 0.0
    if raised >= goal:
        return 100.0
    return min(raised / goal * 100, 100.0)


def resolve(goal: int, raised: int, deadline: int, now: float) -> StatusResult:
    """Resolve status, progress and activity for a campaign.

    Rules in priority order:
    1. goal > 0 and raised >= goal -> SUCCESSFUL
    2. now >= deadline -> ENDED
    3. otherwise -> ACTIVE

    Args:
        goal: Funding goal in wei
        raised: Amount raised in wei
        deadline: Deadline as a unix timestamp
        now: Current unix time, supplied by the caller

    Returns:
        StatusResult
    """
    if goal > 0 and raised >= goal:
        status = CampaignStatus.SUCCESSFUL
    elif now >= deadline:
        status = CampaignStatus.ENDED
    else:
        status = CampaignStatus.ACTIVE

    return StatusResult(
        status=status,
        progress=compute_progress(goal, raised),
        is_active=status == CampaignStatus.ACTIVE,
    )
