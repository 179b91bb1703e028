"""
Card catalog package.

Responsibilities:
- Locate the catalog and pairing-table files (env-overridable).
- Normalize spreadsheet exports of card data into the canonical JSON catalog.
"""
