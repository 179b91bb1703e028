from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, List

import pandas as pd
from pydantic import ValidationError

from ..recommendations.models import Card
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

REWARD_PREFIX = "reward_"

# spreadsheet column -> canonical catalog field
COLUMN_MAP: dict[str, str] = {
    "id": "id",
    "name": "name",
    "issuer": "issuer",
    "ecosystem": "ecosystem",
    "level": "level",
    "annual_fee": "annualFee",
    "point_value_cents": "pointValueCents",
    "min_credit_score": "minCreditScore",
    "secured": "secured",
    "student_friendly": "studentFriendly",
    "rotating_categories": "rotatingCategories",
    "unlock_transfer_partners": "unlockTransferPartners",
}

FLAG_COLUMNS: List[str] = [
    "secured",
    "student_friendly",
    "rotating_categories",
    "unlock_transfer_partners",
]

_TRUE_VALUES = {"true", "yes", "y", "1", "x"}


def _parse_flag(value: Any) -> bool:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_id(value: Any) -> int | str:
    raw = str(value).strip()
    if raw.endswith(".0"):
        raw = raw[:-2]
    return int(raw) if raw.isdigit() else raw


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    return df


def _row_to_record(row: pd.Series, reward_columns: List[str]) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for column, field in COLUMN_MAP.items():
        if column not in row.index:
            continue
        value = row[column]
        if column in FLAG_COLUMNS:
            record[field] = _parse_flag(value)
        elif pd.isna(value) or value == "":
            continue
        elif column == "id":
            record[field] = _parse_id(value)
        elif column == "min_credit_score":
            record[field] = int(float(value))
        elif column in ("annual_fee", "point_value_cents"):
            record[field] = float(value)
        else:
            record[field] = str(value).strip()

    rewards: dict[str, float] = {}
    for column in reward_columns:
        rate = pd.to_numeric(row[column], errors="coerce")
        if pd.notna(rate):
            rewards[column[len(REWARD_PREFIX):]] = float(rate)
    record["rewards"] = rewards
    return record


def normalize_catalog(df: pd.DataFrame) -> list[dict[str, Any]]:
    """
    Map a spreadsheet of cards onto canonical catalog records.

    Rows without a name, or that fail validation, are skipped with a warning.
    """
    df = _normalize_columns(df)
    if "name" not in df.columns:
        raise ValueError("Catalog spreadsheet needs a 'name' column")
    if "id" not in df.columns:
        df["id"] = range(1, len(df) + 1)

    reward_columns = [c for c in df.columns if c.startswith(REWARD_PREFIX)]
    records: list[dict[str, Any]] = []
    for position, row in df.iterrows():
        if pd.isna(row["name"]) or not str(row["name"]).strip():
            logger.warning("Skipping catalog row %s: missing name", position)
            continue
        record = _row_to_record(row, reward_columns)
        try:
            card = Card.model_validate(record)
        except ValidationError:
            logger.warning("Skipping catalog row %s: invalid card", position, exc_info=True)
            continue
        records.append(card.model_dump(by_alias=True, exclude_defaults=True, mode="json"))
    return records


def run_ingestion(source: Path, config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Execute the catalog ingestion pipeline.

    Steps:
    - Read the spreadsheet export (CSV).
    - Map raw columns into the canonical Card schema.
    - Persist the validated catalog as JSON for the API to load.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    df = pd.read_csv(source)
    records = normalize_catalog(df)

    output_path = config.processed_path
    output_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote %d cards to %s", len(records), output_path)
    return output_path


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python -m cardmatch.catalog.ingest <cards.csv>")
        sys.exit(2)
    path = run_ingestion(Path(sys.argv[1]))
    print(f"Ingestion complete. Catalog saved to: {path}")
