"""
Card recommendation engine.

Responsibilities:
- Filter the catalog down to cards the user can be approved for.
- Project base rewards from the user's monthly spending.
- Score eligible cards against preferences and already-owned cards.
- Aggregate per-category leaders and the top overall picks.

Pure and synchronous: every call is a function of its arguments only.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .eligibility import filter_eligible
from .models import (
    Card,
    CardId,
    CategoryLeader,
    PairingRule,
    RecommendationResult,
    ScoredCard,
    UserProfile,
)
from .rewards import has_rate, rate_for
from .scoring import resolve_ownership, score_card

TOP_N = 3


def best_by_category(
    eligible: Sequence[Card], spending: Mapping[str, float] | None,
) -> dict[str, CategoryLeader]:
    """Highest raw earn rate per spending category; the first card in catalog order wins ties."""
    leaders: dict[str, CategoryLeader] = {}
    for category in spending or {}:
        best: CategoryLeader | None = None
        for card in eligible:
            if not has_rate(card, category):
                continue
            rate = rate_for(card, category)
            if best is None or rate > best.rate:
                best = CategoryLeader(id=card.id, name=card.name, rate=rate)
        if best is not None:
            leaders[category] = best
    return leaders


def best_overall(scored: Sequence[ScoredCard], limit: int = TOP_N) -> list[ScoredCard]:
    # sorted() is stable, so equal estimates keep catalog order
    ranked = sorted(scored, key=lambda item: item.estimates.annual, reverse=True)
    return ranked[:limit]


def recommend_cards(
    cards: Sequence[Card],
    profile: UserProfile,
    spending: Mapping[str, float] | None,
    owned_cards: Iterable[CardId] | None = None,
    pairings: Sequence[PairingRule] = (),
    limit: int = TOP_N,
) -> RecommendationResult:
    eligible = filter_eligible(list(cards), profile)
    ownership = resolve_ownership(cards, owned_cards)

    scored = [
        score_card(card, profile, spending, ownership=ownership, pairings=pairings)
        for card in eligible
    ]

    return RecommendationResult(
        scored=scored,
        best_by_category=best_by_category(eligible, spending),
        best_overall=best_overall(scored, limit=limit),
    )
