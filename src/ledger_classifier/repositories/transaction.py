"""Bank transaction repository with classification and bulk-update queries."""
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.matcher import ClassificationResult
from ledger_classifier.models.transaction import BankTransaction
from ledger_classifier.repositories.base import BaseRepository


class BankTransactionRepository(BaseRepository[BankTransaction]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, BankTransaction)

    async def get_by_external_id(self, external_id: str) -> BankTransaction | None:
        result = await self.db.execute(
            select(BankTransaction).where(BankTransaction.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def add_new(self, items: Iterable[tuple[str, str]]) -> list[BankTransaction]:
        """Insert ``(external_id, description)`` pairs not stored yet.

        Duplicate ids, within the batch or already stored, are skipped.
        """
        pairs = list(items)
        ids = [external_id for external_id, _ in pairs]
        result = await self.db.execute(
            select(BankTransaction.external_id).where(BankTransaction.external_id.in_(ids))
        )
        seen = set(result.scalars().all())
        created = []
        for external_id, description in pairs:
            if external_id in seen:
                continue
            seen.add(external_id)
            row = BankTransaction(external_id=external_id, description=description)
            self.db.add(row)
            created.append(row)
        if created:
            await self.db.commit()
        return created

    async def list_filtered(
        self,
        needs_review: bool | None = None,
        account_code: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[BankTransaction]:
        query = select(BankTransaction).where(BankTransaction.deleted_at.is_(None))
        if needs_review is not None:
            query = query.where(BankTransaction.is_fallback.is_(needs_review))
        if account_code:
            query = query.where(BankTransaction.account_code == account_code)
        query = query.order_by(BankTransaction.created_at, BankTransaction.external_id)
        result = await self.db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_for_classification(self, include_classified: bool = False) -> list[BankTransaction]:
        """Rows the engine may (re)classify.

        Pending rows are those never classified or still flagged for review.
        Rows a human assigned (no matched rule, not flagged) are never returned.
        """
        query = select(BankTransaction).where(BankTransaction.deleted_at.is_(None))
        if include_classified:
            query = query.where(
                or_(
                    BankTransaction.is_fallback.is_(True),
                    BankTransaction.matched_rule_name.is_not(None),
                )
            )
        else:
            query = query.where(
                or_(
                    BankTransaction.classified_at.is_(None),
                    BankTransaction.is_fallback.is_(True),
                )
            )
        result = await self.db.execute(query.order_by(BankTransaction.created_at))
        return list(result.scalars().all())

    async def save_results(
        self, pairs: Iterable[tuple[BankTransaction, ClassificationResult]]
    ) -> int:
        now = datetime.now(timezone.utc)
        count = 0
        for row, result in pairs:
            row.account_code = result.matched_account_code
            row.matched_rule_name = result.matched_rule_name
            row.is_fallback = result.is_fallback
            row.detail = result.detail
            row.classified_at = now
            count += 1
        if count:
            await self.db.commit()
        return count

    async def assign_account(self, row: BankTransaction, account_code: str) -> BankTransaction:
        """Record a manual classification."""
        row.account_code = account_code
        row.matched_rule_name = None
        row.is_fallback = False
        row.classified_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def find_candidates(
        self,
        keywords: Sequence[str],
        account_code: str,
        exclude_external_id: str | None = None,
    ) -> list[BankTransaction]:
        """Unclassified or differently classified rows whose description has every keyword."""
        query = select(BankTransaction).where(
            BankTransaction.deleted_at.is_(None),
            or_(
                BankTransaction.account_code.is_(None),
                BankTransaction.is_fallback.is_(True),
                BankTransaction.account_code != account_code,
            ),
        )
        for keyword in keywords:
            query = query.where(BankTransaction.description.icontains(keyword, autoescape=True))
        if exclude_external_id is not None:
            query = query.where(BankTransaction.external_id != exclude_external_id)
        result = await self.db.execute(
            query.order_by(BankTransaction.created_at, BankTransaction.external_id)
        )
        return list(result.scalars().all())

    async def apply_bulk(
        self, batch_id: str, account_code: str, external_ids: Sequence[str]
    ) -> int:
        """Assign ``account_code`` to the given rows under ``batch_id``.

        Rows already carrying ``batch_id`` are left alone, so re-running a batch
        changes nothing and returns 0.

        Returns:
            Number of rows updated by this call.
        """
        if not external_ids:
            return 0
        result = await self.db.execute(
            select(BankTransaction).where(
                BankTransaction.external_id.in_(list(external_ids)),
                or_(
                    BankTransaction.bulk_batch_id.is_(None),
                    BankTransaction.bulk_batch_id != batch_id,
                ),
            )
        )
        rows = list(result.scalars().all())
        now = datetime.now(timezone.utc)
        for row in rows:
            row.account_code = account_code
            row.matched_rule_name = None
            row.is_fallback = False
            row.classified_at = now
            row.bulk_batch_id = batch_id
        await self.db.commit()
        return len(rows)

    async def count_in_batch(self, batch_id: str) -> int:
        result = await self.db.execute(
            select(func.count(BankTransaction.id)).where(BankTransaction.bulk_batch_id == batch_id)
        )
        return int(result.scalar_one())

    async def get_stats(self) -> dict:
        """
        Aggregate classification counts.
        Returns dict with total, classified, needs_review and by_account.
        """
        total = (
            await self.db.execute(
                select(func.count(BankTransaction.id)).where(BankTransaction.deleted_at.is_(None))
            )
        ).scalar_one()
        needs_review = (
            await self.db.execute(
                select(func.count(BankTransaction.id)).where(
                    BankTransaction.deleted_at.is_(None),
                    BankTransaction.is_fallback.is_(True),
                )
            )
        ).scalar_one()
        result = await self.db.execute(
            select(BankTransaction.account_code, func.count().label("total"))
            .where(
                BankTransaction.deleted_at.is_(None),
                BankTransaction.account_code.is_not(None),
            )
            .group_by(BankTransaction.account_code)
        )
        by_account = {row.account_code: int(row.total) for row in result}
        return {
            "total": int(total),
            "classified": int(total) - int(needs_review),
            "needs_review": int(needs_review),
            "by_account": by_account,
        }
