"""
Card recommendation engine.

Responsibilities:
- Accept a financial profile, monthly spending and already-owned cards.
- Filter the card catalog down to cards the user is eligible for.
- Estimate rewards and score candidates with preference multipliers.
- Return per-card estimates, category leaders and the top overall picks.
"""
