"""Classification rule and sync schemas."""

from pydantic import BaseModel, ConfigDict, Field

from ledger_classifier.classification.accounts import AccountCategory
from ledger_classifier.classification.rules import MatchStrategy, RuleOrigin
from ledger_classifier.classification.sync import ConflictKind


class RuleCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    match_strategy: MatchStrategy = MatchStrategy.CONTAINS
    pattern: str = Field(min_length=1, max_length=500)
    target_account_code: str
    priority: int = Field(0, description="Higher priority rules are evaluated first")
    expected_category: AccountCategory | None = Field(
        None, description="Category the target code must resolve to"
    )


class RuleUpdateRequest(BaseModel):
    """Partial rule edit. Any edit makes the rule human-owned (origin=persisted)."""

    description: str | None = None
    match_strategy: MatchStrategy | None = None
    pattern: str | None = Field(None, min_length=1, max_length=500)
    target_account_code: str | None = None
    priority: int | None = None
    expected_category: AccountCategory | None = None
    active: bool | None = None


class RuleResponse(BaseModel):
    name: str
    description: str | None = None
    match_strategy: MatchStrategy
    pattern: str
    target_account_code: str
    priority: int
    active: bool
    origin: RuleOrigin
    expected_category: AccountCategory | None = None

    model_config = ConfigDict(from_attributes=True)


class RuleListResult(BaseModel):
    rules: list[RuleResponse]
    total: int


class SyncRequest(BaseModel):
    resolutions: dict[str, RuleOrigin] = Field(
        default_factory=dict,
        description="Rule name -> origin to keep when standard and persisted targets differ",
    )


class ConflictResponse(BaseModel):
    rule_name: str
    kind: ConflictKind
    message: str
    origin: RuleOrigin | None = None
    standard_target: str | None = None
    persisted_target: str | None = None
    expected_category: str | None = None
    registry_category: str | None = None
    resolution: RuleOrigin | None = None

    model_config = ConfigDict(from_attributes=True)


class SyncResponse(BaseModel):
    active_rules: int
    conflicts: list[ConflictResponse]
    persisted: int = Field(description="Standard-rule mirrors written to the store")
    deactivated: int = Field(description="Mirrors retired because their definition was removed")
    excluded: list[str]
