from __future__ import annotations

from collections import Counter
from typing import Any


def _distribution(values: list[str]) -> dict[str, int]:
    return dict(Counter(values).most_common())


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "recommend"]
    total = len(requests)

    # Average response time
    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Most recommended cards (top-N appearances)
    card_counter: Counter[str] = Counter()
    for r in requests:
        for name in r.get("best_overall_names", []) or []:
            card_counter[name] += 1
    top_cards = [{"name": n, "count": c} for n, c in card_counter.most_common(10)]

    # Spending categories people ask about
    category_counter: Counter[str] = Counter()
    for r in requests:
        for cat in r.get("categories", []) or []:
            category_counter[cat] += 1
    top_categories = [{"name": n, "count": c} for n, c in category_counter.most_common(10)]

    eligible = [r["eligible_count"] for r in requests if "eligible_count" in r]
    avg_eligible = round(sum(eligible) / len(eligible), 1) if eligible else 0.0

    with_owned = sum(1 for r in requests if r.get("owned_count", 0) > 0)

    cache_hits = sum(1 for r in requests if r.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "avg_eligible_cards": avg_eligible,
        "top_recommended_cards": top_cards,
        "top_categories": top_categories,
        "credit_bands": _distribution([r.get("credit_band", "unknown") for r in requests]),
        "ecosystem_preferences": _distribution([r.get("preferred_ecosystem", "Any") for r in requests]),
        "reward_preferences": _distribution([r.get("reward_preference", "Cash Back") for r in requests]),
        "travel_frequency": _distribution([r.get("travel_frequency", "Never") for r in requests]),
        "owned_cards_usage": round(with_owned / total * 100, 1) if total else 0.0,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }
