from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

CardId = int | str
SpendAmount = Annotated[float, Field(ge=0, strict=True)]


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Catalog ──────────────────────────────────────────────────────────────


class CardLevel(str, Enum):
    beginner = "beginner"
    student = "student"
    mid = "mid"
    premium = "premium"
    secured = "secured"
    store = "store"


class Card(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: CardId
    name: str = Field(..., min_length=1)
    issuer: str = ""
    ecosystem: str | None = None
    level: CardLevel = CardLevel.mid
    annual_fee: float = Field(default=0.0, ge=0)
    point_value_cents: float = Field(default=1.0, gt=0)
    min_credit_score: int | None = Field(default=None, ge=0)
    secured: bool = False
    student_friendly: bool = False
    rotating_categories: bool = False
    unlock_transfer_partners: bool = False
    rewards: dict[str, float] = Field(default_factory=dict)

    @field_validator("level", mode="before")
    @classmethod
    def _lower_level(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("rewards", mode="before")
    @classmethod
    def _lower_categories(cls, v: object) -> object:
        if isinstance(v, dict):
            return {str(k).strip().lower(): rate for k, rate in v.items()}
        return v

    @property
    def family(self) -> str:
        """Ecosystem the card belongs to, falling back to its issuer."""
        return self.ecosystem or self.issuer


class PairingRule(BaseModel):
    """
    Owning any card in ``owned`` boosts candidates whose name contains ``match``.

    When ``family`` is set the candidate must also belong to that family, so a
    generic ``match`` such as "platinum" cannot reach across issuers. ``reason``
    overrides the default synergy message and may use ``{owned}``.
    """

    owned: list[str] = Field(..., min_length=1)
    match: str = Field(..., min_length=1)
    multiplier: float = Field(default=1.4, gt=0)
    label: str = ""
    family: str = ""
    reason: str = ""

    def applies_to(self, card: Card) -> bool:
        if self.match.lower() not in card.name.lower():
            return False
        family = self.family.strip().lower()
        return not family or family in card.family.lower()


# ── Request side ─────────────────────────────────────────────────────────


class UserProfile(CamelModel):
    credit_score: float | None = None
    accounts_opened_24: float = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("accountsOpened24", "accounts_opened_24"),
        serialization_alias="accountsOpened24",
    )
    is_student: bool = False
    preferred_ecosystem: str = Field(
        default="Any",
        validation_alias=AliasChoices("preferredEcosystem", "ecosystem", "preferred_ecosystem"),
        serialization_alias="preferredEcosystem",
    )
    travel_frequency: str = Field(
        default="Never",
        validation_alias=AliasChoices("travelFrequency", "travelFreq", "travel_frequency"),
        serialization_alias="travelFrequency",
    )
    reward_preference: str = Field(
        default="Cash Back",
        validation_alias=AliasChoices("rewardPreference", "rewardPref", "reward_preference"),
        serialization_alias="rewardPreference",
    )

    @field_validator("preferred_ecosystem", "travel_frequency", "reward_preference", mode="before")
    @classmethod
    def _blank_is_default(cls, v: object, info: ValidationInfo) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v


class ProfileIn(UserProfile):
    """Profile as accepted over HTTP: numeric fields are required and strictly typed."""

    credit_score: float = Field(..., ge=300, le=850, strict=True)
    accounts_opened_24: float = Field(
        ...,
        ge=0,
        strict=True,
        validation_alias=AliasChoices("accountsOpened24", "accounts_opened_24"),
        serialization_alias="accountsOpened24",
    )
    is_student: bool = Field(default=False, strict=True)


class RecommendationRequest(CamelModel):
    profile: ProfileIn
    spending: dict[str, SpendAmount]
    owned_cards: list[CardId] = Field(default_factory=list)

    @field_validator("owned_cards", mode="before")
    @classmethod
    def _normalize_owned(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, list):
            # entries that are neither ids nor names can never match a card
            return [e if isinstance(e, (int, str)) and not isinstance(e, bool) else str(e) for e in v]
        return v


# ── Engine output ────────────────────────────────────────────────────────


class ReasonCode(str, Enum):
    student_friendly = "student_friendly"
    preferred_ecosystem = "preferred_ecosystem"
    ownership_synergy = "ownership_synergy"
    same_ecosystem = "same_ecosystem"
    strong_cash_back = "strong_cash_back"
    premium_travel_penalty = "premium_travel_penalty"
    points_travel_earning = "points_travel_earning"
    flat_cash_penalty = "flat_cash_penalty"
    frequent_traveler = "frequent_traveler"
    travel_deemphasized = "travel_deemphasized"
    rotating_categories = "rotating_categories"
    transfer_partners = "transfer_partners"


class Reason(CamelModel):
    code: ReasonCode
    params: dict[str, str] = Field(default_factory=dict)
    message: str = ""


class RewardEstimate(CamelModel):
    monthly: float
    annual: float


class RewardCategory(CamelModel):
    category: str
    rate: float


class ScoredCard(CamelModel):
    id: CardId
    name: str
    estimates: RewardEstimate
    rate: float
    reward_categories: list[RewardCategory] = Field(default_factory=list)
    annual_fee: float = 0.0
    level: CardLevel = CardLevel.mid
    owned: bool = False
    reasons: list[Reason] = Field(default_factory=list)


class CategoryLeader(CamelModel):
    id: CardId
    name: str
    rate: float


class RecommendationResult(CamelModel):
    scored: list[ScoredCard]
    best_by_category: dict[str, CategoryLeader]
    best_overall: list[ScoredCard]
