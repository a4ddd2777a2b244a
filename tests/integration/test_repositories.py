"""Integration tests for repository layer."""
import pytest
from sqlalchemy import Text
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.bulk import BulkProposal
from ledger_classifier.classification.chart import CHART_VERSION, STANDARD_ACCOUNTS
from ledger_classifier.classification.matcher import ClassificationResult
from ledger_classifier.classification.rules import ClassificationRule, MatchStrategy
from ledger_classifier.classification.standard_rules import STANDARD_RULES
from ledger_classifier.models.transaction import BankTransaction
from ledger_classifier.repositories.account import AccountRepository
from ledger_classifier.repositories.bulk import BulkBatchRepository
from ledger_classifier.repositories.rule import RuleRepository
from ledger_classifier.repositories.transaction import BankTransactionRepository


@pytest.fixture
async def imported(db_session: AsyncSession) -> BankTransactionRepository:
    repo = BankTransactionRepository(db_session)
    await repo.add_new(
        [
            ("t1", "ACME SUPPLIES INV 001"),
            ("t2", "acme supplies inv 002"),
            ("t3", "ACME HARDWARE"),
            ("t4", "MONTHLY SERVICE FEE"),
        ]
    )
    return repo


class TestAccountRepository:
    @pytest.mark.asyncio
    async def test_add_missing_is_idempotent(self, db_session: AsyncSession):
        repo = AccountRepository(db_session)

        added = await repo.add_missing(STANDARD_ACCOUNTS, chart_version=CHART_VERSION)
        again = await repo.add_missing(STANDARD_ACCOUNTS, chart_version=CHART_VERSION)

        assert added == len(STANDARD_ACCOUNTS)
        assert again == 0
        row = await repo.get_by_code("8600-099")
        assert row.chart_version == CHART_VERSION
        assert row.to_domain() == next(a for a in STANDARD_ACCOUNTS if a.code == "8600-099")


class TestRuleRepository:
    @pytest.mark.asyncio
    async def test_round_trip_preserves_rule_values(self, db_session: AsyncSession):
        repo = RuleRepository(db_session)
        for rule in STANDARD_RULES[:5]:
            await repo.add(rule)

        stored = [row.to_domain() for row in await repo.list_ordered()]

        assert stored == list(STANDARD_RULES[:5])

    @pytest.mark.asyncio
    async def test_sequence_follows_insertion(self, db_session: AsyncSession):
        repo = RuleRepository(db_session)
        await repo.add(ClassificationRule("B", MatchStrategy.CONTAINS, "B", "8100"))
        await repo.add(ClassificationRule("A", MatchStrategy.CONTAINS, "A", "8100"))

        rows = await repo.list_ordered()

        assert [r.name for r in rows] == ["B", "A"]
        assert rows[0].sequence < rows[1].sequence

    @pytest.mark.asyncio
    async def test_apply_sync(self, db_session: AsyncSession):
        repo = RuleRepository(db_session)
        first, second = STANDARD_RULES[:2]
        await repo.add(first.evolve(priority=1))

        written = await repo.apply_sync([first, second], [])
        retired = await repo.apply_sync([], [first.name, "missing"])

        assert written == 2
        assert retired == 1
        rows = await repo.list_ordered()
        assert [r.name for r in rows] == [first.name, second.name]
        assert rows[0].priority == first.priority
        assert rows[0].active is False
        assert len(await repo.list_ordered(include_inactive=False)) == 1


class TestBankTransactionRepository:
    @pytest.mark.asyncio
    async def test_add_new_skips_duplicates(self, imported: BankTransactionRepository):
        created = await imported.add_new([("t1", "AGAIN"), ("t9", "NEW"), ("t9", "NEW TWICE")])

        assert [r.external_id for r in created] == ["t9"]
        assert (await imported.get_by_external_id("t1")).description == "ACME SUPPLIES INV 001"

    @pytest.mark.asyncio
    async def test_new_rows_need_review(self, imported: BankTransactionRepository):
        rows = await imported.list_filtered(needs_review=True)

        assert len(rows) == 4
        assert all(r.account_code is None for r in rows)

    @pytest.mark.asyncio
    async def test_save_results_and_filters(self, imported: BankTransactionRepository):
        row = await imported.get_by_external_id("t4")
        result = ClassificationResult("MONTHLY SERVICE FEE", "9600", "Bank Fees", False, "MONTHLY")

        await imported.save_results([(row, result)])

        assert [r.external_id for r in await imported.list_filtered(account_code="9600")] == ["t4"]
        assert len(await imported.list_filtered(needs_review=False)) == 1
        assert row.classified_at is not None
        pending = await imported.get_for_classification()
        assert {r.external_id for r in pending} == {"t1", "t2", "t3"}

    @pytest.mark.asyncio
    async def test_manual_assignment_is_never_reclassified(self, imported: BankTransactionRepository):
        row = await imported.get_by_external_id("t3")
        await imported.assign_account(row, "8710")

        for include_classified in (False, True):
            rows = await imported.get_for_classification(include_classified)
            assert "t3" not in {r.external_id for r in rows}

    @pytest.mark.asyncio
    async def test_find_candidates(self, imported: BankTransactionRepository):
        rows = await imported.find_candidates(["ACME", "SUPPLIES"], "8710", exclude_external_id="t1")

        assert [r.external_id for r in rows] == ["t2"]

    @pytest.mark.asyncio
    async def test_find_candidates_skips_rows_already_on_target(
        self, imported: BankTransactionRepository
    ):
        await imported.assign_account(await imported.get_by_external_id("t2"), "8710")

        rows = await imported.find_candidates(["ACME"], "8710")

        assert {r.external_id for r in rows} == {"t1", "t3"}

    @pytest.mark.asyncio
    async def test_find_candidates_treats_wildcards_literally(
        self, imported: BankTransactionRepository
    ):
        await imported.add_new([("t5", "PAYMENT 100% REFUND_A")])

        assert await imported.find_candidates(["AC_E"], "8710") == []
        assert await imported.find_candidates(["SUP%"], "8710") == []
        rows = await imported.find_candidates(["100%", "REFUND_A"], "8710")
        assert [r.external_id for r in rows] == ["t5"]

    @pytest.mark.asyncio
    async def test_long_detail_is_stored_whole(self, imported: BankTransactionRepository):
        row = await imported.get_by_external_id("t3")
        detail = " ".join(["NORTHGATE"] * 120)
        result = ClassificationResult(row.description, "8710", "Acme", False, detail)

        await imported.save_results([(row, result)])

        stored = await imported.get_by_external_id("t3")
        assert stored.detail == detail
        assert len(stored.detail) > 1000
        assert isinstance(BankTransaction.__table__.c.detail.type, Text)

    @pytest.mark.asyncio
    async def test_apply_bulk_is_idempotent(self, imported: BankTransactionRepository):
        first = await imported.apply_bulk("batch-1", "8710", ["t1", "t2"])
        second = await imported.apply_bulk("batch-1", "8710", ["t1", "t2"])

        assert first == 2
        assert second == 0
        assert await imported.count_in_batch("batch-1") == 2
        row = await imported.get_by_external_id("t2")
        assert row.account_code == "8710"
        assert row.bulk_batch_id == "batch-1"
        assert row.needs_review is False

    @pytest.mark.asyncio
    async def test_get_stats(self, imported: BankTransactionRepository):
        await imported.apply_bulk("batch-1", "8710", ["t1", "t2"])

        stats = await imported.get_stats()

        assert stats == {
            "total": 4,
            "classified": 2,
            "needs_review": 2,
            "by_account": {"8710": 2},
        }


class TestBulkBatchRepository:
    @pytest.mark.asyncio
    async def test_save_and_update_state(self, db_session: AsyncSession):
        repo = BulkBatchRepository(db_session)
        proposal = BulkProposal("8710", "ACME SUPPLIES", ("ACME", "SUPPLIES"), ("t2", "t3"))

        await repo.save(proposal)
        await repo.save(proposal.confirm())

        row = await repo.get_by_batch_id(proposal.batch_id)
        assert row.to_domain() == proposal.confirm()
        assert await repo.get_by_batch_id("unknown") is None
