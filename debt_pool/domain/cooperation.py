"""Creditor cooperation score lookup"""

from typing import Dict, Iterable, Mapping

from debt_pool.domain.models import Claim

DEFAULT_COOPERATION_SCORE = 5
MIN_COOPERATION_SCORE = 0
MAX_COOPERATION_SCORE = 10


def build_cooperation_scores(claims: Iterable[Claim]) -> Dict[str, int]:
    """
    Map creditor id -> cooperation score of that creditor's most recent claim.

    Most recent is decided by created_at. Claims with the same timestamp resolve
    to the one appearing later in the sequence.
    """
    latest: Dict[str, Claim] = {}
    for claim in claims:
        current = latest.get(claim.creditor_id)
        if current is None or claim.created_at >= current.created_at:
            latest[claim.creditor_id] = claim

    return {creditor_id: claim.cooperation_score for creditor_id, claim in latest.items()}


def cooperation_score_for(
    scores: Mapping[str, float],
    creditor_id: str,
    default: float = DEFAULT_COOPERATION_SCORE,
) -> float:
    """Score for a creditor, or the neutral default when no claim was filed"""
    return scores.get(creditor_id, default)
