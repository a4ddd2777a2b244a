"""Classification rule repository."""
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.rules import ClassificationRule as RuleValue
from ledger_classifier.models.classification_rule import ClassificationRule
from ledger_classifier.repositories.base import BaseRepository


class RuleRepository(BaseRepository[ClassificationRule]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, ClassificationRule)

    async def get_by_name(self, name: str) -> ClassificationRule | None:
        result = await self.db.execute(
            select(ClassificationRule).where(ClassificationRule.name == name)
        )
        return result.scalar_one_or_none()

    async def list_ordered(self, include_inactive: bool = True) -> list[ClassificationRule]:
        """Stored rules in insertion (sequence) order."""
        query = select(ClassificationRule).order_by(ClassificationRule.sequence)
        if not include_inactive:
            query = query.where(ClassificationRule.active.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def next_sequence(self) -> int:
        result = await self.db.execute(select(func.max(ClassificationRule.sequence)))
        current = result.scalar_one_or_none()
        return (current or 0) + 1

    async def add(self, rule: RuleValue) -> ClassificationRule:
        """Store a new rule at the end of the sequence."""
        row = ClassificationRule(sequence=await self.next_sequence())
        row.apply(rule)
        return await self.create(row)

    async def save(self, row: ClassificationRule, rule: RuleValue) -> ClassificationRule:
        """Overwrite a stored rule with a new value, keeping its sequence."""
        row.apply(rule)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def apply_sync(
        self, to_persist: Iterable[RuleValue], to_deactivate: Iterable[str]
    ) -> int:
        """Write standard-rule mirrors and retire orphaned ones in one commit.

        Returns:
            Number of rows written.
        """
        rows = {row.name: row for row in await self.list_ordered()}
        sequence = await self.next_sequence()
        written = 0
        for rule in to_persist:
            row = rows.get(rule.name)
            if row is None:
                row = ClassificationRule(sequence=sequence)
                sequence += 1
                self.db.add(row)
                rows[rule.name] = row
            row.apply(rule)
            written += 1
        for name in to_deactivate:
            row = rows.get(name)
            if row is not None and row.active:
                row.active = False
                written += 1
        if written:
            await self.db.commit()
        return written
