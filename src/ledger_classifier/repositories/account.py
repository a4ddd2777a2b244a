"""Account repository."""
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.accounts import AccountCode
from ledger_classifier.models.account import Account
from ledger_classifier.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Account)

    async def get_by_code(self, code: str) -> Account | None:
        result = await self.db.execute(select(Account).where(Account.code == code))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Account]:
        """All stored accounts (unordered; the registry orders codes numerically)."""
        result = await self.db.execute(select(Account).where(Account.deleted_at.is_(None)))
        return list(result.scalars().all())

    async def existing_codes(self) -> set[str]:
        result = await self.db.execute(select(Account.code))
        return set(result.scalars().all())

    async def add_missing(
        self, accounts: Iterable[AccountCode], chart_version: str | None = None
    ) -> int:
        """Insert accounts whose code isn't stored yet. Returns the number inserted."""
        existing = await self.existing_codes()
        added = 0
        for account in accounts:
            if account.code in existing:
                continue
            self.db.add(Account.from_domain(account, chart_version=chart_version))
            existing.add(account.code)
            added += 1
        if added:
            await self.db.commit()
        return added
