"""
Eligibility gate applied before any scoring.

Missing data never excludes a card: a card without a minimum score, or a
profile without a usable credit score, is always eligible.
"""
from __future__ import annotations

import math

from .models import Card, CardLevel, UserProfile

NEW_ACCOUNT_LIMIT = 5
VELOCITY_ISSUERS = frozenset({"chase"})
LOW_SCORE_CUTOFF = 630
PREMIUM_SCORE_CUTOFF = 680

_STARTER_LEVELS = frozenset({CardLevel.beginner, CardLevel.student})


def _usable_score(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def is_eligible(card: Card, profile: UserProfile | None) -> bool:
    # A zero minimum is no requirement at all
    if not card.min_credit_score:
        return True
    score = _usable_score(profile.credit_score) if profile is not None else None
    if score is None:
        return True

    # Issuer velocity rule on recently opened accounts
    if (
        profile.accounts_opened_24 >= NEW_ACCOUNT_LIMIT
        and card.issuer.strip().lower() in VELOCITY_ISSUERS
    ):
        return False

    if score < LOW_SCORE_CUTOFF:
        if not (card.secured or card.level in _STARTER_LEVELS):
            return False

    if LOW_SCORE_CUTOFF <= score < PREMIUM_SCORE_CUTOFF and card.level == CardLevel.premium:
        return False

    return score >= card.min_credit_score


def filter_eligible(cards: list[Card], profile: UserProfile | None) -> list[Card]:
    """Eligible cards in catalog order."""
    return [card for card in cards if is_eligible(card, profile)]
