from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..catalog.config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Card, CardId, PairingRule

logger = logging.getLogger(__name__)

_cards: list[Card] | None = None
_pairings: list[PairingRule] | None = None

_CARDS_ADAPTER = TypeAdapter(list[Card])
_PAIRINGS_ADAPTER = TypeAdapter(list[PairingRule])


class CatalogError(RuntimeError):
    """The catalog or pairing table could not be read or did not validate."""


def _read(path: Path, adapter: TypeAdapter) -> list:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return adapter.validate_python(raw)
    except (OSError, ValueError, ValidationError) as exc:
        raise CatalogError(f"Could not load {path.name}") from exc


def load_cards(path: Path) -> list[Card]:
    cards = _read(path, _CARDS_ADAPTER)
    ids = [str(c.id) for c in cards]
    if len(set(ids)) != len(ids):
        raise CatalogError(f"Duplicate card ids in {path.name}")
    logger.info("Loaded %d cards from %s", len(cards), path)
    return cards


def load_pairings(path: Path) -> list[PairingRule]:
    if not path.exists():
        logger.warning("Pairing table %s not found, ownership synergy disabled", path)
        return []
    return _read(path, _PAIRINGS_ADAPTER)


def get_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[Card]:
    """Return the in-memory card catalog, loading it on first call."""
    global _cards
    if _cards is None:
        _cards = load_cards(config.cards_path)
    return _cards


def get_pairings(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[PairingRule]:
    """Return the ownership pairing table, loading it on first call."""
    global _pairings
    if _pairings is None:
        _pairings = load_pairings(config.pairings_path)
    return _pairings


def find_card(card_id: CardId, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Card | None:
    wanted = str(card_id)
    for card in get_catalog(config):
        if str(card.id) == wanted:
            return card
    return None


def reset_catalog() -> None:
    """Forget the loaded catalog so the next access re-reads it."""
    global _cards, _pairings
    _cards = None
    _pairings = None
