"""Tests for campaign status resolution."""

import pytest

from aggregator.models import CampaignStatus
from aggregator.services.status import compute_progress, resolve

NOW = 1_735_000_000
FUTURE = NOW + 3600
PAST = NOW - 3600


def test_goal_reached_is_successful():
    """Raised == goal before the deadline is SUCCESSFUL and inactive."""
    result = resolve(goal=10, raised=10, deadline=FUTURE, now=NOW)

    assert result.status == CampaignStatus.SUCCESSFUL
    assert result.progress == 100
    assert result.is_active is False


def test_past_deadline_is_ended():
    """Deadline passed without reaching the goal is ENDED."""
    result = resolve(goal=10, raised=5, deadline=PAST, now=NOW)

    assert result.status == CampaignStatus.ENDED
    assert result.progress == 50
    assert result.is_active is False


def test_open_campaign_is_active():
    """Goal not reached and deadline ahead is ACTIVE."""
    result = resolve(goal=10, raised=5, deadline=FUTURE, now=NOW)

    assert result.status == CampaignStatus.ACTIVE
    assert result.progress == 50
    assert result.is_active is True


def test_zero_goal_has_zero_progress():
    """A zero goal never divides and is not treated as reached."""
    result = resolve(goal=0, raised=0, deadline=FUTURE, now=NOW)

    assert result.progress == 0
    assert result.status == CampaignStatus.ACTIVE
    assert result.is_active is True


def test_success_takes_priority_over_deadline():
    """A funded campaign stays SUCCESSFUL after its deadline."""
    result = resolve(goal=10, raised=12, deadline=PAST, now=NOW)

    assert result.status == CampaignStatus.SUCCESSFUL
    assert result.is_active is False


def test_deadline_boundary_is_ended():
    """now == deadline counts as ended."""
    result = resolve(goal=10, raised=1, deadline=NOW, now=NOW)

    assert result.status == CampaignStatus.ENDED


@pytest.mark.parametrize("raised", [11, 20, 10 ** 30, 10 ** 400])
def test_progress_clamped_to_100(raised):
    """Overfunding never pushes progress past 100."""
    result = resolve(goal=10, raised=raised, deadline=FUTURE, now=NOW)

    assert result.progress == 100


def test_progress_with_wei_amounts():
    """Progress is exact enough on 18-decimal amounts."""
    goal = 3 * 10 ** 18
    raised = 10 ** 18

    assert compute_progress(goal, raised) == pytest.approx(33.3333333, rel=1e-6)


def test_negative_inputs_stay_in_range():
    """Nonsense input still yields a progress within [0, 100]."""
    assert compute_progress(-5, 10) == 0
    assert compute_progress(10, -5) == 0


def test_resolve_is_deterministic():
    """Same inputs give the same result."""
    first = resolve(goal=7, raised=3, deadline=FUTURE, now=NOW)
    second = resolve(goal=7, raised=3, deadline=FUTURE, now=NOW)

    assert first == second
