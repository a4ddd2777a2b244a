"""Integration tests for rule synchronisation and rule administration."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.accounts import AccountCategory
from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.classification.rules import ClassificationRule, MatchStrategy, RuleOrigin
from ledger_classifier.classification.standard_rules import STANDARD_RULES
from ledger_classifier.classification.sync import ConflictKind
from ledger_classifier.core.exceptions import (
    AccountNotFoundError,
    DuplicateNameError,
    InvalidPatternError,
    InvalidRuleError,
    RangeConflictError,
    RuleNotFoundError,
)
from ledger_classifier.repositories.rule import RuleRepository
from ledger_classifier.services.rules import RuleSyncService


@pytest.fixture
def service(db_session: AsyncSession, context: ClassificationContext) -> RuleSyncService:
    return RuleSyncService(db_session, context)


class TestSync:
    @pytest.mark.asyncio
    async def test_first_sync_mirrors_standard_rules(self, service, db_session):
        result = await service.sync()

        assert result.conflicts.is_clean
        assert len(result.to_persist) == len(STANDARD_RULES)
        rows = await RuleRepository(db_session).list_ordered()
        assert [r.name for r in rows] == [r.name for r in STANDARD_RULES]
        assert all(r.origin == "standard" for r in rows)

    @pytest.mark.asyncio
    async def test_sync_is_idempotent(self, service, context):
        first = await service.sync()
        published = context.rules

        second = await service.sync()

        assert second.to_persist == ()
        assert second.to_deactivate == ()
        assert second.rule_set == first.rule_set
        assert context.rules == published

    @pytest.mark.asyncio
    async def test_removed_standard_rule_is_deactivated(self, db_session, context, service):
        await service.sync()
        trimmed = RuleSyncService(db_session, context, standard_rules=STANDARD_RULES[:-1])

        result = await trimmed.sync()

        assert result.to_deactivate == (STANDARD_RULES[-1].name,)
        assert STANDARD_RULES[-1].name not in context.rules
        row = await RuleRepository(db_session).get_by_name(STANDARD_RULES[-1].name)
        assert row.active is False

    @pytest.mark.asyncio
    async def test_target_edit_conflicts_until_resolved(self, service, context):
        await service.sync()

        edited = await service.update_rule("Salaries", target_account_code="8200")

        assert edited.origin is RuleOrigin.PERSISTED
        assert "Salaries" not in context.rules
        assert context.classify("MONTHLY SALARIES").matched_account_code is None

        result = await service.sync({"Salaries": "persisted"})

        conflicts = result.conflicts.for_rule("Salaries")
        assert [c.kind for c in conflicts] == [ConflictKind.TARGET_MISMATCH]
        assert conflicts[0].resolution is RuleOrigin.PERSISTED
        assert context.classify("MONTHLY SALARIES").matched_account_code == "8200"

    @pytest.mark.asyncio
    async def test_resolutions_survive_later_edits(self, service, context):
        await service.sync()
        await service.update_rule("Salaries", target_account_code="8200")
        await service.sync({"Salaries": "persisted"})

        await service.update_rule("Salaries", priority=6)

        assert context.rules.get("Salaries").priority == 6
        assert context.classify("SALARIES MARCH").matched_account_code == "8200"


class TestRuleAdministration:
    @pytest.mark.asyncio
    async def test_same_target_edit_overrides_silently(self, service, context):
        await service.sync()

        await service.update_rule("Insurance Premiums", priority=11)
        result = await service.sync()

        assert result.conflicts.is_clean
        rule = context.rules.get("Insurance Premiums")
        assert rule.priority == 11
        assert rule.origin is RuleOrigin.PERSISTED
        # Now ahead of the payee-specific salary rule.
        assert context.classify("INSURANCE CHAUKE").matched_rule_name == "Insurance Premiums"

    @pytest.mark.asyncio
    async def test_deactivated_standard_rule_stays_inactive(self, service, context):
        await service.sync()

        await service.deactivate_rule("Insurance Premiums")
        await service.sync()

        assert context.classify("OLD MUTUAL INSURANCE").matched_account_code is None
        stored = await service.get_rule("Insurance Premiums")
        assert stored.active is False
        assert stored.origin is RuleOrigin.PERSISTED

    @pytest.mark.asyncio
    async def test_create_rule_publishes(self, service, context):
        rule = ClassificationRule("Acme", MatchStrategy.CONTAINS, "ACME SUPPLIES", "8710", priority=9)

        created = await service.create_rule(rule)

        assert created.origin is RuleOrigin.PERSISTED
        assert context.classify("PAYMENT ACME SUPPLIES 12").matched_rule_name == "Acme"
        assert "Acme" in [r.name for r in await service.list_rules()]

    @pytest.mark.asyncio
    async def test_create_rule_rejects_duplicate_name(self, service):
        await service.sync()
        rule = ClassificationRule("Salaries", MatchStrategy.CONTAINS, "WAGES", "8100")

        with pytest.raises(DuplicateNameError):
            await service.create_rule(rule)

    @pytest.mark.asyncio
    async def test_create_rule_rejects_unknown_target(self, service, context):
        before = context.rules
        rule = ClassificationRule("Ghost", MatchStrategy.CONTAINS, "GHOST", "8999")

        with pytest.raises(AccountNotFoundError):
            await service.create_rule(rule)

        assert context.rules is before

    @pytest.mark.asyncio
    async def test_update_rejects_bad_pattern(self, service):
        await service.sync()

        with pytest.raises(InvalidPatternError):
            await service.update_rule("Salaries", match_strategy="regex", pattern="(SALARY")

        assert (await service.get_rule("Salaries")).origin is RuleOrigin.STANDARD

    @pytest.mark.asyncio
    async def test_unknown_rule(self, service):
        with pytest.raises(RuleNotFoundError):
            await service.get_rule("missing")
        with pytest.raises(RuleNotFoundError):
            await service.deactivate_rule("missing")

    @pytest.mark.asyncio
    async def test_retarget_across_categories_takes_new_category(self, service, context):
        await service.sync()

        edited = await service.update_rule("Corobrik Service Revenue", target_account_code="8710")

        assert edited.target_account_code == "8710"
        assert edited.expected_category is AccountCategory.OPERATING_EXPENSE
        result = await service.sync({"Corobrik Service Revenue": "persisted"})
        assert [c.kind for c in result.conflicts.for_rule("Corobrik Service Revenue")] == [
            ConflictKind.TARGET_MISMATCH
        ]
        assert context.classify("COROBRIK").matched_account_code == "8710"

    @pytest.mark.asyncio
    async def test_explicit_expected_category_is_still_checked(self, service):
        await service.sync()

        with pytest.raises(RangeConflictError):
            await service.update_rule(
                "Corobrik Service Revenue",
                target_account_code="8710",
                expected_category=AccountCategory.REVENUE,
            )

    @pytest.mark.asyncio
    async def test_null_changes_are_ignored(self, service):
        await service.sync()
        before = await service.get_rule("Salaries")

        edited = await service.update_rule(
            "Salaries", priority=None, match_strategy=None, active=None, pattern=None
        )

        assert edited.priority == before.priority
        assert edited.match_strategy is before.match_strategy
        assert edited.active is True
        assert edited.pattern == before.pattern

    @pytest.mark.asyncio
    async def test_malformed_change_is_invalid_rule(self, service):
        await service.sync()

        with pytest.raises(InvalidRuleError):
            await service.update_rule("Salaries", priority="high")
        with pytest.raises(InvalidRuleError):
            await service.update_rule("Salaries", match_strategy="fuzzy")

        assert (await service.get_rule("Salaries")).origin is RuleOrigin.STANDARD
