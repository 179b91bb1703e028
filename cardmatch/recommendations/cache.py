"""
In-process response cache for recommendation requests.

The engine is deterministic over a fixed catalog, so identical request
payloads can reuse a previous result until the entry expires.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any

from .config import DEFAULT_ENGINE_CONFIG

_cache: dict[str, dict[str, Any]] = {}
_lock = threading.Lock()
_hits: int = 0
_misses: int = 0


def _make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(request_dict: dict, ttl: float = DEFAULT_ENGINE_CONFIG.cache_ttl_seconds) -> Any | None:
    global _hits, _misses
    key = _make_key(request_dict)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        _cache.pop(key, None)
    _misses += 1
    return None


def cache_set(
    request_dict: dict, value: Any, max_entries: int = DEFAULT_ENGINE_CONFIG.cache_max_entries,
) -> None:
    key = _make_key(request_dict)
    # sync routes run in a threadpool, so eviction and insert must not interleave
    with _lock:
        _cache.pop(key, None)
        while _cache and len(_cache) >= max_entries:
            # dicts keep insertion order, so the first key is the oldest entry
            _cache.pop(next(iter(_cache)), None)
        _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
