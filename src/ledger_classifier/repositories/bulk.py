"""Bulk reclassification batch repository."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.bulk import BulkProposal
from ledger_classifier.models.bulk_batch import BulkReclassificationBatch
from ledger_classifier.repositories.base import BaseRepository


class BulkBatchRepository(BaseRepository[BulkReclassificationBatch]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, BulkReclassificationBatch)

    async def get_by_batch_id(self, batch_id: str) -> BulkReclassificationBatch | None:
        result = await self.db.execute(
            select(BulkReclassificationBatch).where(
                BulkReclassificationBatch.batch_id == batch_id
            )
        )
        return result.scalar_one_or_none()

    async def save(self, proposal: BulkProposal) -> BulkReclassificationBatch:
        """Insert a new batch or store a proposal's latest state."""
        row = await self.get_by_batch_id(proposal.batch_id)
        if row is None:
            return await self.create(BulkReclassificationBatch.from_domain(proposal))
        row.state = proposal.state.value
        row.applied_count = proposal.applied_count
        await self.db.commit()
        await self.db.refresh(row)
        return row
