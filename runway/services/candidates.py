"""
Candidate scorer - picks the most plausible "airborne now" record.

Schedule-oriented providers frequently mislabel an airborne flight as
"scheduled" when their schedule feed lags reality, so corroborating
evidence (live GPS, actual departure/arrival timestamps) outranks the
status string. Each candidate gets a rung on an ordered evidence ladder;
the lowest rung wins and ties go to the provider's original order.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from runway.models import RawCandidate

logger = logging.getLogger(__name__)

# Evidence ladder, lower is better
AIRBORNE_WITH_POSITION = 1
LIVE_POSITION = 2
DEPARTED_TODAY_NOT_ARRIVED = 3
DEPARTED_NOT_ARRIVED = 4
STATUS_ACTIVE = 5
DEPARTED_TODAY = 6
STATUS_SCHEDULED = 7
STATUS_LANDED = 8
FALLBACK = 9


def score_candidate(candidate: RawCandidate, now: Optional[datetime] = None) -> int:
    """Ladder rung for one candidate; first matching rule wins."""
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()

    departed = candidate.departed_at is not None
    arrived = candidate.arrived_at is not None
    departed_today = departed and candidate.departed_at.astimezone(timezone.utc).date() == today
    label = (candidate.status_label or '').lower()

    if candidate.has_live_position and candidate.is_confirmed_airborne is True:
        return AIRBORNE_WITH_POSITION
    if candidate.has_live_position:
        return LIVE_POSITION
    if departed_today and not arrived:
        return DEPARTED_TODAY_NOT_ARRIVED
    if departed and not arrived:
        return DEPARTED_NOT_ARRIVED
    if label == 'active':
        return STATUS_ACTIVE
    if departed_today:
        return DEPARTED_TODAY
    if label == 'scheduled':
        return STATUS_SCHEDULED
    if label == 'landed':
        return STATUS_LANDED
    return FALLBACK


def select_best_candidate(
    candidates: List[RawCandidate],
    now: Optional[datetime] = None,
) -> RawCandidate:
    """
    Candidate with the best (lowest) score.

    Raises ValueError on an empty list; callers report not-found first.
    """
    if not candidates:
        raise ValueError('select_best_candidate() requires at least one candidate')

    now = now or datetime.now(timezone.utc)
    # min() keeps the first of equal keys, which is the stable tie-break
    best = min(candidates, key=lambda c: score_candidate(c, now))

    logger.debug(
        f'Selected candidate #{best.index} of {len(candidates)} '
        f'(score={score_candidate(best, now)}, status={best.status_label!r})'
    )
    return best
