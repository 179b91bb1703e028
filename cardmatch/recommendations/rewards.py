"""
Base reward projection from spending alone.

Rates in a card's ``rewards`` table are points earned per dollar. Points are
converted to cash through ``point_value_cents``, so a 3x card whose points are
worth 2 cents returns 6% of the spend.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from .models import Card, RewardEstimate

DEFAULT_CATEGORY = "default"
CENTS = Decimal("0.01")


def round2(value: float) -> float:
    """Round to cents with ties going away from zero, on the exact binary value."""
    return float(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def _as_amount(value: object) -> float:
    """Coerce a spend amount or rate to a usable number; anything else is 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return float(value)


def rate_for(card: Card, category: str) -> float:
    """Rate for *category*, falling back to the card's default rate, then 0."""
    rewards = card.rewards
    key = category.strip().lower()
    if key in rewards:
        return _as_amount(rewards[key])
    return _as_amount(rewards.get(DEFAULT_CATEGORY, 0.0))


def has_rate(card: Card, category: str) -> bool:
    """Whether the card earns anything defined for *category* (its own entry or a default)."""
    return category.strip().lower() in card.rewards or DEFAULT_CATEGORY in card.rewards


def raw_annual_value(card: Card, spending: Mapping[str, float] | None) -> float:
    point_value = _as_amount(card.point_value_cents) / 100
    annual = 0.0
    for category, amount in (spending or {}).items():
        monthly = max(_as_amount(amount), 0.0)
        annual += monthly * 12 * rate_for(card, category) * point_value
    if card.annual_fee > 0:
        annual -= card.annual_fee
    return annual


def estimate_rewards(card: Card, spending: Mapping[str, float] | None) -> RewardEstimate:
    """Project the card's yearly and monthly cash value, net of its annual fee."""
    annual = round2(raw_annual_value(card, spending))
    monthly = round2(annual / 12)
    return RewardEstimate(monthly=monthly, annual=annual)


def weighted_rate(card: Card, spending: Mapping[str, float] | None) -> float:
    """Spend-weighted average earn rate across the provided categories."""
    weighted = 0.0
    total = 0.0
    for category, amount in (spending or {}).items():
        monthly = max(_as_amount(amount), 0.0)
        weighted += rate_for(card, category) * monthly
        total += monthly
    return round2(weighted / total) if total > 0 else 0.0
