"""
Preference-driven scoring of eligible cards.

Each adjustment multiplies the base estimate and records a reason. Factors
are multiplied unrounded; only the final annual figure is rounded.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from .models import (
    Card,
    CardId,
    CardLevel,
    PairingRule,
    Reason,
    ReasonCode,
    RewardCategory,
    RewardEstimate,
    ScoredCard,
    UserProfile,
)
from .reasons import make_reason
from .rewards import DEFAULT_CATEGORY, estimate_rewards, rate_for, round2, weighted_rate

STUDENT_BOOST = 1.20
ECOSYSTEM_PREFERENCE_BOOST = 1.10
SAME_ECOSYSTEM_BOOST = 1.05
STRONG_CASH_BACK_BOOST = 1.07
PREMIUM_TRAVEL_PENALTY = 0.90
POINTS_EARNING_BOOST = 1.08
FLAT_CASH_PENALTY = 0.95
FREQUENT_TRAVEL_BOOST = 1.10
NO_TRAVEL_PENALTY = 0.80
ROTATING_BOOST = 1.05
TRANSFER_PARTNER_BOOST = 1.40

STRONG_CASH_BACK_RATE = 6
BONUS_RATE = 3
FLAT_CASH_RATE = 2
TOP_CATEGORY_LIMIT = 3

ANY_ECOSYSTEM = "any"
CASH_BACK = "cash back"
POINTS_MILES = "points/miles"


@dataclass(frozen=True)
class Ownership:
    """Cards the user already holds, resolved against the catalog."""

    ids: frozenset[str] = field(default_factory=frozenset)
    names: frozenset[str] = field(default_factory=frozenset)
    families: frozenset[str] = field(default_factory=frozenset)

    def owns(self, card: Card) -> bool:
        return str(card.id) in self.ids

    def owns_any(self, names: Iterable[str]) -> bool:
        return any(n.strip().lower() in self.names for n in names)

    def shares_family(self, card: Card) -> bool:
        return card.family.strip().lower() in self.families


def resolve_ownership(cards: Sequence[Card], owned_cards: Iterable[CardId] | None) -> Ownership:
    """Match owned ids or names (case-insensitive) to catalog cards; unknown entries are dropped."""
    ids: set[str] = set()
    names: set[str] = set()
    families: set[str] = set()
    for entry in owned_cards or ():
        wanted = str(entry).strip()
        for card in cards:
            if card.name.lower() == wanted.lower() or str(card.id) == wanted:
                ids.add(str(card.id))
                names.add(card.name.lower())
                families.add(card.family.strip().lower())
                break
    return Ownership(frozenset(ids), frozenset(names), frozenset(families))


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def _adjustments(
    card: Card,
    profile: UserProfile,
    ownership: Ownership,
    pairings: Sequence[PairingRule],
) -> Iterator[tuple[float, Reason]]:
    """Yield (multiplier, reason) for every adjustment that applies, in order."""
    family = _norm(card.family)
    travel = rate_for(card, "travel")
    dining = rate_for(card, "dining")
    groceries = rate_for(card, "groceries")
    bonus_earner = travel >= BONUS_RATE or dining >= BONUS_RATE

    if profile.is_student and card.student_friendly:
        yield STUDENT_BOOST, make_reason(ReasonCode.student_friendly)

    preferred = _norm(profile.preferred_ecosystem)
    if preferred and preferred != ANY_ECOSYSTEM and preferred in family:
        yield ECOSYSTEM_PREFERENCE_BOOST, make_reason(
            ReasonCode.preferred_ecosystem, ecosystem=profile.preferred_ecosystem.strip(),
        )

    for rule in pairings:
        if ownership.owns_any(rule.owned) and rule.applies_to(card):
            yield rule.multiplier, make_reason(
                ReasonCode.ownership_synergy, rule.reason or None, owned=rule.label or rule.owned[0],
            )

    if ownership.shares_family(card):
        yield SAME_ECOSYSTEM_BOOST, make_reason(ReasonCode.same_ecosystem)

    preference = _norm(profile.reward_preference)
    if preference == CASH_BACK:
        if groceries + dining >= STRONG_CASH_BACK_RATE:
            yield STRONG_CASH_BACK_BOOST, make_reason(ReasonCode.strong_cash_back)
        if card.level == CardLevel.premium and travel >= BONUS_RATE:
            yield PREMIUM_TRAVEL_PENALTY, make_reason(ReasonCode.premium_travel_penalty)
    elif preference == POINTS_MILES:
        if bonus_earner:
            yield POINTS_EARNING_BOOST, make_reason(ReasonCode.points_travel_earning)
        elif rate_for(card, DEFAULT_CATEGORY) >= FLAT_CASH_RATE:
            yield FLAT_CASH_PENALTY, make_reason(ReasonCode.flat_cash_penalty)

    frequency = _norm(profile.travel_frequency)
    if travel >= BONUS_RATE:
        if frequency == "often":
            yield FREQUENT_TRAVEL_BOOST, make_reason(ReasonCode.frequent_traveler)
        elif frequency == "never":
            yield NO_TRAVEL_PENALTY, make_reason(ReasonCode.travel_deemphasized)

    if card.rotating_categories:
        yield ROTATING_BOOST, make_reason(ReasonCode.rotating_categories)

    if card.unlock_transfer_partners and ownership.shares_family(card):
        yield TRANSFER_PARTNER_BOOST, make_reason(ReasonCode.transfer_partners)


def top_reward_categories(card: Card, limit: int = TOP_CATEGORY_LIMIT) -> list[RewardCategory]:
    ranked = sorted(
        ((cat, rate) for cat, rate in card.rewards.items() if cat != DEFAULT_CATEGORY and rate > 1),
        key=lambda item: item[1],
        reverse=True,
    )
    return [
        RewardCategory(category=cat[:1].upper() + cat[1:], rate=rate)
        for cat, rate in ranked[:limit]
    ]


def score_card(
    card: Card,
    profile: UserProfile,
    spending: Mapping[str, float] | None,
    ownership: Ownership | None = None,
    pairings: Sequence[PairingRule] = (),
) -> ScoredCard:
    """Apply the multiplier chain to the card's base estimate."""
    ownership = ownership or Ownership()
    base = estimate_rewards(card, spending)

    multiplier = 1.0
    reasons: list[Reason] = []
    for factor, reason in _adjustments(card, profile, ownership, pairings):
        multiplier *= factor
        reasons.append(reason)

    annual = round2(base.annual * multiplier)
    return ScoredCard(
        id=card.id,
        name=card.name,
        estimates=RewardEstimate(monthly=round2(annual / 12), annual=annual),
        rate=weighted_rate(card, spending),
        reward_categories=top_reward_categories(card),
        annual_fee=card.annual_fee,
        level=card.level,
        owned=ownership.owns(card),
        reasons=reasons,
    )
