from __future__ import annotations

from cardmatch.catalog.config import DEFAULT_CATALOG_CONFIG
from cardmatch.recommendations.data_store import load_cards, load_pairings
from cardmatch.recommendations.engine import best_by_category, best_overall, recommend_cards
from cardmatch.recommendations.models import Card, CardLevel, UserProfile

CATALOG = load_cards(DEFAULT_CATALOG_CONFIG.cards_path)
PAIRINGS = load_pairings(DEFAULT_CATALOG_CONFIG.pairings_path)

SAMPLE_CARDS = [
    Card(
        id=1,
        name="Chase Sapphire Preferred",
        issuer="Chase",
        level="Premium",
        annual_fee=95,
        point_value_cents=2,
        min_credit_score=670,
        rewards={"dining": 3, "groceries": 1, "gas": 1, "travel": 2, "other": 1},
    ),
    Card(
        id=2,
        name="Discover Student",
        issuer="Discover",
        level="Student",
        min_credit_score=620,
        student_friendly=True,
        rewards={"dining": 1, "groceries": 1, "gas": 1, "travel": 1, "other": 1},
    ),
]
SPENDING = {"dining": 300, "groceries": 400, "gas": 200, "travel": 100, "other": 200}
GOOD_PROFILE = UserProfile(credit_score=720, accounts_opened_24=1)


def test_result_has_all_sections():
    result = recommend_cards(SAMPLE_CARDS, GOOD_PROFILE, SPENDING, [])
    assert [c.id for c in result.scored] == [1, 2]
    assert set(result.best_by_category) == set(SPENDING)
    assert len(result.best_overall) > 0


def test_owned_card_stays_in_results():
    result = recommend_cards(SAMPLE_CARDS, GOOD_PROFILE, SPENDING, [1])
    owned = next(card for card in result.scored if card.id == 1)
    assert owned.owned is True
    assert next(card for card in result.scored if card.id == 2).owned is False


def test_owned_card_matched_by_name():
    result = recommend_cards(SAMPLE_CARDS, GOOD_PROFILE, SPENDING, ["chase sapphire PREFERRED", "Unknown"])
    assert [c.owned for c in result.scored] == [True, False]


def test_low_score_excludes_sapphire():
    result = recommend_cards(SAMPLE_CARDS, UserProfile(credit_score=600, accounts_opened_24=1), SPENDING)
    assert all(card.id != 1 for card in result.best_overall)


def test_velocity_rule_removes_chase_everywhere():
    profile = UserProfile(credit_score=780, accounts_opened_24=5)
    result = recommend_cards(CATALOG, profile, SPENDING, pairings=PAIRINGS)
    chase_ids = {c.id for c in CATALOG if c.issuer.lower() == "chase"}
    assert chase_ids
    assert not chase_ids & {c.id for c in result.scored}
    assert not chase_ids & {c.id for c in result.best_overall}
    assert not chase_ids & {leader.id for leader in result.best_by_category.values()}


def test_sub_630_only_starter_cards_scored():
    result = recommend_cards(CATALOG, UserProfile(credit_score=600), SPENDING, pairings=PAIRINGS)
    by_id = {c.id: c for c in CATALOG}
    assert result.scored
    for scored in result.scored:
        card = by_id[scored.id]
        assert card.secured or card.level in (CardLevel.beginner, CardLevel.student, CardLevel.secured)


def test_best_overall_is_top_three_descending():
    result = recommend_cards(CATALOG, UserProfile(credit_score=800), SPENDING, pairings=PAIRINGS)
    annuals = [c.estimates.annual for c in result.best_overall]
    assert len(result.best_overall) == 3
    assert annuals == sorted(annuals, reverse=True)
    assert annuals[-1] >= max(
        c.estimates.annual for c in result.scored if c.id not in {b.id for b in result.best_overall}
    )


def test_best_overall_limit():
    result = recommend_cards(CATALOG, UserProfile(credit_score=800), SPENDING, limit=5)
    assert len(result.best_overall) == 5


def test_best_overall_ties_keep_input_order():
    cards = [
        Card(id="a", name="First", issuer="Bank", rewards={"default": 2}),
        Card(id="b", name="Second", issuer="Bank", rewards={"default": 2}),
        Card(id="c", name="Third", issuer="Bank", rewards={"default": 1}),
        Card(id="d", name="Fourth", issuer="Bank", rewards={"default": 2}),
    ]
    result = recommend_cards(cards, GOOD_PROFILE, {"other": 100})
    assert [c.id for c in result.best_overall] == ["a", "b", "d"]
    assert [c.id for c in best_overall(result.scored, limit=10)] == ["a", "b", "d", "c"]


def test_best_by_category_ties_go_to_first_card():
    cards = [
        Card(id=1, name="One", issuer="Bank", rewards={"dining": 3}),
        Card(id=2, name="Two", issuer="Bank", rewards={"dining": 3, "gas": 2}),
        Card(id=3, name="Three", issuer="Bank", rewards={"default": 2}),
    ]
    leaders = best_by_category(cards, {"dining": 50, "gas": 10, "groceries": 10})
    assert leaders["dining"].id == 1
    assert leaders["gas"].id == 2
    assert leaders["groceries"].name == "Three"
    assert leaders["groceries"].rate == 2


def test_best_by_category_omits_unrewarded_categories():
    cards = [Card(id=1, name="Gas Only", issuer="Bank", rewards={"gas": 3})]
    leaders = best_by_category(cards, {"gas": 100, "travel": 100})
    assert set(leaders) == {"gas"}


def test_best_by_category_uses_eligible_cards_only():
    result = recommend_cards(SAMPLE_CARDS, UserProfile(credit_score=650), {"dining": 100})
    assert result.best_by_category["dining"].id == 2


def test_empty_spending():
    result = recommend_cards(SAMPLE_CARDS, GOOD_PROFILE, {})
    assert result.best_by_category == {}
    assert [c.estimates.annual for c in result.scored] == [-95.0, 0.0]
    assert result.best_overall[0].id == 2


def test_freedom_owner_gets_sapphire_boost():
    profile = UserProfile(credit_score=760)
    plain = recommend_cards(CATALOG, profile, SPENDING, pairings=PAIRINGS)
    paired = recommend_cards(CATALOG, profile, SPENDING, owned_cards=["Chase Freedom Flex"], pairings=PAIRINGS)
    before = next(c for c in plain.scored if c.name == "Chase Sapphire Preferred")
    after = next(c for c in paired.scored if c.name == "Chase Sapphire Preferred")
    assert after.estimates.annual > before.estimates.annual
    assert "ownership_synergy" in [r.code.value for r in after.reasons]


def test_recommend_is_deterministic():
    first = recommend_cards(CATALOG, GOOD_PROFILE, SPENDING, [3], pairings=PAIRINGS)
    second = recommend_cards(CATALOG, GOOD_PROFILE, SPENDING, [3], pairings=PAIRINGS)
    assert first == second


def test_amex_gold_owner_boosts_only_amex_platinum():
    result = recommend_cards(CATALOG, UserProfile(credit_score=800), {"other": 500}, ["Amex Gold"], pairings=PAIRINGS)
    by_name = {c.name: c for c in result.scored}
    amex = [r for r in by_name["Amex Platinum"].reasons if r.code.value == "ownership_synergy"]
    assert [r.message for r in amex] == ["Boosted due to Amex ecosystem synergy"]
    secured = by_name["Capital One Platinum Secured"]
    assert "ownership_synergy" not in [r.code.value for r in secured.reasons]
