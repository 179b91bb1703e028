from __future__ import annotations

import time

from ..analytics.store import record_event
from .cache import cache_get, cache_set
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .data_store import get_catalog, get_pairings
from .engine import recommend_cards
from .models import RecommendationRequest, RecommendationResult


def credit_band(score: float | None) -> str:
    if score is None:
        return "unknown"
    if score < 630:
        return "poor"
    if score < 680:
        return "fair"
    if score < 740:
        return "good"
    return "excellent"


def _record(request: RecommendationRequest, result: RecommendationResult, start_time: float, cache_hit: bool) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    profile = request.profile
    record_event("recommend", {
        "credit_band": credit_band(profile.credit_score),
        "preferred_ecosystem": profile.preferred_ecosystem,
        "reward_preference": profile.reward_preference,
        "travel_frequency": profile.travel_frequency,
        "categories": sorted(request.spending),
        "owned_count": len(request.owned_cards),
        "eligible_count": len(result.scored),
        "best_overall": [str(card.id) for card in result.best_overall],
        "best_overall_names": [card.name for card in result.best_overall],
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })


def get_recommendations(
    request: RecommendationRequest,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> RecommendationResult:
    start_time = time.time()

    # --- Cache check ---
    request_dict = request.model_dump()
    if config.cache_enabled:
        cached = cache_get(request_dict, ttl=config.cache_ttl_seconds)
        if cached is not None:
            _record(request, cached, start_time, cache_hit=True)
            return cached

    # --- Filter -> estimate -> score -> aggregate ---
    result = recommend_cards(
        get_catalog(),
        request.profile,
        request.spending,
        owned_cards=request.owned_cards,
        pairings=get_pairings(),
        limit=config.top_n,
    )

    if config.cache_enabled:
        cache_set(request_dict, result, max_entries=config.cache_max_entries)

    _record(request, result, start_time, cache_hit=False)
    return result
