from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .recommendations.cache import get_cache_stats
from .recommendations.data_store import CatalogError, find_card, get_catalog
from .recommendations.export import import_result
from .recommendations.models import Card, RecommendationRequest, RecommendationResult
from .recommendations.service import get_recommendations

logger = logging.getLogger(__name__)

app = FastAPI(title="CardMatch Recommendation API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    logger.error("Card catalog unavailable: %s", exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Could not read cards data"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "CardMatch backend running"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Catalog endpoints ────────────────────────────────────────────────────


@app.get("/api/cards", response_model=list[Card])
def list_cards() -> list[Card]:
    return get_catalog()


@app.get("/api/cards/{card_id}", response_model=Card)
def card_detail(card_id: str) -> Card:
    card = find_card(card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/api/cards/recommend", response_model=RecommendationResult)
def recommend(body: RecommendationRequest) -> RecommendationResult:
    try:
        return get_recommendations(body)
    except CatalogError:
        raise
    except Exception:
        logger.exception("Recommendation failed")
        raise HTTPException(status_code=500, detail="Recommendation server error")


@app.post("/api/results/import", response_model=RecommendationResult)
async def import_results(request: Request) -> RecommendationResult:
    # Round-trips a result previously saved from /api/cards/recommend
    try:
        return import_result(await request.body())
    except ValidationError as exc:
        detail = exc.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=detail) from exc


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
