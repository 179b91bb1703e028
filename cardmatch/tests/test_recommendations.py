from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from cardmatch.app import app
from cardmatch.recommendations.cache import clear_cache
from cardmatch.recommendations.data_store import CatalogError

client = TestClient(app)

PROFILE = {
    "creditScore": 720,
    "accountsOpened24": 1,
    "isStudent": False,
    "preferredEcosystem": "Any",
    "travelFrequency": "Never",
    "rewardPreference": "Cash Back",
}
SPENDING = {"dining": 300, "groceries": 400, "gas": 200, "travel": 100, "other": 200}


def _recommend(**overrides):
    body = {"profile": PROFILE, "spending": SPENDING, "ownedCards": []}
    body.update(overrides)
    return client.post("/api/cards/recommend", json=body)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_root_message():
    assert client.get("/").json() == {"message": "CardMatch backend running"}


def test_list_cards():
    resp = client.get("/api/cards")
    assert resp.status_code == 200
    cards = resp.json()
    assert len(cards) == 16
    assert cards[0]["name"] == "Chase Sapphire Preferred"
    assert cards[0]["annualFee"] == 95
    assert cards[0]["minCreditScore"] == 670


def test_card_detail():
    resp = client.get("/api/cards/5")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Amex Gold"


def test_card_detail_not_found():
    resp = client.get("/api/cards/999")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Card not found"}


def test_recommend_returns_all_sections():
    resp = _recommend()
    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {"scored", "bestByCategory", "bestOverall"}
    assert 0 < len(body["bestOverall"]) <= 3
    first = body["scored"][0]
    for key in ("id", "name", "estimates", "rate", "rewardCategories", "annualFee", "level", "owned", "reasons"):
        assert key in first
    assert set(first["estimates"]) == {"monthly", "annual"}


def test_recommend_best_overall_sorted():
    body = _recommend().json()
    annuals = [c["estimates"]["annual"] for c in body["bestOverall"]]
    assert annuals == sorted(annuals, reverse=True)


def test_recommend_marks_owned_cards():
    body = _recommend(ownedCards=[1]).json()
    owned = [c for c in body["scored"] if c["id"] == 1]
    assert owned and owned[0]["owned"] is True


def test_recommend_reasons_are_tagged():
    body = _recommend(ownedCards=["Chase Freedom Flex"]).json()
    sapphire = next(c for c in body["scored"] if c["name"] == "Chase Sapphire Preferred")
    codes = [r["code"] for r in sapphire["reasons"]]
    assert "ownership_synergy" in codes
    assert all(r["message"] for r in sapphire["reasons"])


def test_recommend_owned_cards_optional():
    resp = client.post("/api/cards/recommend", json={"profile": PROFILE, "spending": SPENDING})
    assert resp.status_code == 200


def test_recommend_accepts_legacy_preference_keys():
    profile = {"creditScore": 720, "accountsOpened24": 0, "ecosystem": "Chase", "travelFreq": "often"}
    resp = client.post("/api/cards/recommend", json={"profile": profile, "spending": {"travel": 500}})
    assert resp.status_code == 200
    reserve = next(c for c in resp.json()["scored"] if c["name"] == "Chase Sapphire Reserve")
    codes = [r["code"] for r in reserve["reasons"]]
    assert "preferred_ecosystem" in codes
    assert "frequent_traveler" in codes


# ── Validation ───────────────────────────────────────────────────────────


def test_missing_profile_rejected():
    resp = client.post("/api/cards/recommend", json={"spending": SPENDING})
    assert resp.status_code == 422


def test_profile_must_be_object():
    assert _recommend(profile="720").status_code == 422


def test_credit_score_must_be_number():
    assert _recommend(profile=dict(PROFILE, creditScore="720")).status_code == 422


def test_credit_score_range():
    assert _recommend(profile=dict(PROFILE, creditScore=299)).status_code == 422
    assert _recommend(profile=dict(PROFILE, creditScore=851)).status_code == 422
    assert _recommend(profile=dict(PROFILE, creditScore=300)).status_code == 200


def test_accounts_opened_non_negative():
    assert _recommend(profile=dict(PROFILE, accountsOpened24=-1)).status_code == 422
    missing = {k: v for k, v in PROFILE.items() if k != "accountsOpened24"}
    assert _recommend(profile=missing).status_code == 422


def test_is_student_must_be_boolean():
    assert _recommend(profile=dict(PROFILE, isStudent="yes")).status_code == 422


def test_spending_validation():
    assert _recommend(spending=None).status_code == 422
    assert _recommend(spending=[100]).status_code == 422
    assert _recommend(spending={"dining": -5}).status_code == 422
    assert _recommend(spending={"dining": "300"}).status_code == 422


def test_owned_cards_must_be_list():
    assert _recommend(ownedCards="Chase Freedom Flex").status_code == 422


def test_unusable_owned_entries_are_ignored():
    resp = _recommend(ownedCards=[1.5, {}, 1])
    assert resp.status_code == 200
    owned = [c["id"] for c in resp.json()["scored"] if c["owned"]]
    assert owned == [1]


def test_blank_or_null_preferences_use_defaults():
    profile = dict(PROFILE, preferredEcosystem=None, travelFrequency="", rewardPreference=None)
    resp = _recommend(profile=profile)
    assert resp.status_code == 200
    assert resp.json() == _recommend().json()


# ── Internal errors ──────────────────────────────────────────────────────


def test_catalog_failure_is_generic_500():
    with patch("cardmatch.app.get_catalog", side_effect=CatalogError("cards.json unreadable")):
        resp = client.get("/api/cards")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Could not read cards data"}


def test_catalog_failure_during_recommend():
    clear_cache()
    with patch("cardmatch.recommendations.service.get_catalog", side_effect=CatalogError("boom")):
        resp = _recommend(spending={"dining": 12345})
    assert resp.status_code == 500
    assert "boom" not in resp.text


def test_unexpected_error_during_recommend():
    with patch("cardmatch.app.get_recommendations", side_effect=ZeroDivisionError("secret")):
        resp = _recommend()
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Recommendation server error"}
