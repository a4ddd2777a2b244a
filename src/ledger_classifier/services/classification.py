"""Transaction import and store-backed classification."""
import logging
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.classification.engine import BatchResult, ClassificationStats
from ledger_classifier.classification.matcher import ClassificationResult
from ledger_classifier.classification.suggestions import (
    MAX_SUGGESTIONS,
    AccountSuggestion,
    suggest_accounts,
)
from ledger_classifier.core.exceptions import TransactionNotFoundError
from ledger_classifier.models.transaction import BankTransaction
from ledger_classifier.repositories.transaction import BankTransactionRepository

logger = logging.getLogger(__name__)


class ClassificationService:
    def __init__(self, db: AsyncSession, context: ClassificationContext):
        self.db = db
        self.context = context
        self.transaction_repo = BankTransactionRepository(db)

    def classify(self, description: str | None) -> ClassificationResult:
        """Classify one description against the live rule set (nothing stored)."""
        return self.context.classify(description)

    def classify_batch(self, transactions: Iterable[tuple[str, str | None]]) -> BatchResult:
        return self.context.engine.classify_batch(transactions)

    async def import_transactions(
        self, items: Iterable[tuple[str, str]], classify: bool = True
    ) -> tuple[int, int, ClassificationStats | None]:
        """Store new ``(transaction_id, description)`` pairs.

        Returns:
            Tuple of (imported, skipped, stats); stats is None when the rows
            were not classified.
        """
        pairs = list(items)
        created = await self.transaction_repo.add_new(pairs)
        skipped = len(pairs) - len(created)
        logger.info(
            "Imported transactions",
            extra={"imported": len(created), "skipped": skipped},
        )
        stats = await self._classify_rows(created) if classify else None
        return len(created), skipped, stats

    async def classify_pending(self, include_classified: bool = False) -> ClassificationStats:
        """Classify stored rows that are new or still flagged for review.

        Manually assigned rows are never touched.
        """
        rows = await self.transaction_repo.get_for_classification(include_classified)
        return await self._classify_rows(rows)

    async def _classify_rows(self, rows: list[BankTransaction]) -> ClassificationStats:
        batch = self.context.engine.classify_batch((row, row.description) for row in rows)
        await self.transaction_repo.save_results(batch.results)
        return batch.stats

    async def get_transaction(self, external_id: str) -> BankTransaction:
        row = await self.transaction_repo.get_by_external_id(external_id)
        if row is None:
            raise TransactionNotFoundError(details={"transaction_id": external_id})
        return row

    async def suggest_accounts(
        self, external_id: str, limit: int = MAX_SUGGESTIONS
    ) -> tuple[BankTransaction, list[AccountSuggestion]]:
        """Accounts a reviewer may assign to a stored transaction."""
        row = await self.get_transaction(external_id)
        suggestions = suggest_accounts(row.description, self.context.registry, limit)
        logger.debug(
            "Suggested accounts",
            extra={"transaction_id": external_id, "suggestions": len(suggestions)},
        )
        return row, suggestions

    async def list_transactions(
        self,
        needs_review: bool | None = None,
        account_code: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[BankTransaction]:
        return await self.transaction_repo.list_filtered(needs_review, account_code, skip, limit)

    async def get_stats(self) -> dict:
        return await self.transaction_repo.get_stats()
