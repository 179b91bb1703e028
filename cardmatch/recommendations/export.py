from __future__ import annotations

from .models import RecommendationResult


def export_result(result: RecommendationResult) -> str:
    """Serialise a result exactly as the API serves it (camelCase JSON)."""
    return result.model_dump_json(by_alias=True, indent=2)


def import_result(raw: str | bytes) -> RecommendationResult:
    """Load a previously exported result; raises ``pydantic.ValidationError`` if malformed."""
    return RecommendationResult.model_validate_json(raw)
