from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class EngineConfig:
    top_n: int = 3
    cache_ttl_seconds: float = float(os.getenv("CARDMATCH_CACHE_TTL", "300"))
    cache_max_entries: int = int(os.getenv("CARDMATCH_CACHE_MAX_ENTRIES", "1024"))
    cache_enabled: bool = os.getenv("CARDMATCH_CACHE_ENABLED", "1") not in ("0", "false", "False")


DEFAULT_ENGINE_CONFIG = EngineConfig()
