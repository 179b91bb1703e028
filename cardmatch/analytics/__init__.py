"""
Request analytics.

Responsibilities:
- Keep an in-memory log of recommendation requests.
- Summarise request volume, latency, preferences and top picks.
"""
