from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Where the card catalog and the ownership pairing table are read from.
    """

    cards_path: Path = Path(os.getenv("CARDMATCH_CARDS_PATH", str(_DATA_DIR / "cards.json")))
    pairings_path: Path = Path(os.getenv("CARDMATCH_PAIRINGS_PATH", str(_DATA_DIR / "pairings.json")))


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for turning a spreadsheet export into the canonical catalog.
    """

    processed_data_dir: Path = _DATA_DIR
    processed_filename: str = "cards.json"

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
DEFAULT_INGESTION_CONFIG = IngestionConfig()
