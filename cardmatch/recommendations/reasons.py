from __future__ import annotations

from .models import Reason, ReasonCode

MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.student_friendly: "Good for students",
    ReasonCode.preferred_ecosystem: "Matches preferred ecosystem ({ecosystem})",
    ReasonCode.ownership_synergy: "Boosted because you own {owned}, a strong pairing",
    ReasonCode.same_ecosystem: "Same ecosystem as cards you already own",
    ReasonCode.strong_cash_back: "Strong cash back benefits",
    ReasonCode.premium_travel_penalty: "Premium travel card penalized under cash back preference",
    ReasonCode.points_travel_earning: "Optimized for points + travel earning",
    ReasonCode.flat_cash_penalty: "Cash-back card penalized due to points preference",
    ReasonCode.frequent_traveler: "Better for frequent travelers",
    ReasonCode.travel_deemphasized: "Travel rewards de-emphasized",
    ReasonCode.rotating_categories: "Rotating category bonus potential",
    ReasonCode.transfer_partners: "Unlocks transfer partners useful with your existing cards",
}


def render(code: ReasonCode, params: dict[str, str], template: str | None = None) -> str:
    template = template or MESSAGES.get(code, code.value)
    try:
        return template.format(**params)
    except (KeyError, IndexError, ValueError):
        return template


def make_reason(code: ReasonCode, template: str | None = None, **params: str) -> Reason:
    """Build a tagged reason with its English rendering attached."""
    return Reason(code=code, params=params, message=render(code, params, template))
