"""Persisted classification rules.

One table holds both human-authored rules (``origin='persisted'``) and the
store mirrors of code-defined standard rules (``origin='standard'``).
``sequence`` records insertion order, the tie-break between equal priorities.
"""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger_classifier.classification.rules import ClassificationRule as RuleValue
from ledger_classifier.models.base import BaseModel


class ClassificationRule(BaseModel):
    __tablename__ = "classification_rules"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    match_strategy: Mapped[str] = mapped_column(String(20), nullable=False)
    pattern: Mapped[str] = mapped_column(String(500), nullable=False)
    target_account_code: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    origin: Mapped[str] = mapped_column(String(20), nullable=False, default="persisted")
    expected_category: Mapped[str | None] = mapped_column(String(40), nullable=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    def to_domain(self) -> RuleValue:
        return RuleValue(
            name=self.name,
            description=self.description,
            match_strategy=self.match_strategy,
            pattern=self.pattern,
            target_account_code=self.target_account_code,
            priority=self.priority,
            active=self.active,
            origin=self.origin,
            expected_category=self.expected_category,
        )

    def apply(self, rule: RuleValue) -> None:
        """Copy a rule value's fields onto this row (sequence is kept)."""
        self.name = rule.name
        self.description = rule.description
        self.match_strategy = rule.match_strategy.value
        self.pattern = rule.pattern
        self.target_account_code = rule.target_account_code
        self.priority = rule.priority
        self.active = rule.active
        self.origin = rule.origin.value
        self.expected_category = (
            rule.expected_category.value if rule.expected_category is not None else None
        )

    def __repr__(self) -> str:
        return (
            f"<ClassificationRule(name={self.name}, origin={self.origin}, "
            f"target={self.target_account_code}, active={self.active})>"
        )
