"""Account registry service: chart bootstrap and account registration."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.accounts import AccountCategory, AccountCode
from ledger_classifier.classification.chart import (
    CHART_VERSION,
    STANDARD_ACCOUNTS,
    STANDARD_RANGES,
)
from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.classification.registry import AccountRegistry
from ledger_classifier.models.account import Account
from ledger_classifier.repositories.account import AccountRepository

logger = logging.getLogger(__name__)


class RegistryService:
    """Keeps the stored chart of accounts and the live registry in step."""

    def __init__(self, db: AsyncSession, context: ClassificationContext):
        self.db = db
        self.context = context
        self.account_repo = AccountRepository(db)

    async def seed_standard_chart(self) -> int:
        """Store standard accounts missing from the database.

        Returns:
            Number of accounts inserted
        """
        added = await self.account_repo.add_missing(STANDARD_ACCOUNTS, chart_version=CHART_VERSION)
        if added:
            logger.info(
                "Seeded standard chart of accounts",
                extra={"chart_version": CHART_VERSION, "added": added},
            )
        return added

    async def load_registry(self) -> AccountRegistry:
        """Rebuild the registry from stored accounts and publish it.

        Raises:
            RangeConflictError: A stored code contradicts the standard ranges.
        """
        async with self.context.admin_lock:
            stored = [row.to_domain() for row in await self.account_repo.list_all()]
            registry = AccountRegistry.from_accounts(STANDARD_RANGES, stored)
            self.context.publish(self.context.rules, registry)
            logger.info("Loaded account registry", extra={"accounts": len(registry)})
            return registry

    async def register_account(
        self,
        code: str,
        display_name: str,
        category: AccountCategory,
        description: str | None = None,
    ) -> AccountCode:
        """Register a new (non-standard) account code.

        The candidate registry is built before anything is stored, so a
        rejected code leaves both the store and the live registry unchanged.

        Raises:
            InvalidAccountCodeError: Malformed code.
            DuplicateCodeError: Code already registered in the same category.
            RangeConflictError: Code owned by, or inside the range of, another category.
        """
        account = AccountCode(
            code=code,
            display_name=display_name,
            category=category,
            is_standard=False,
            description=description,
        )
        async with self.context.admin_lock:
            current = self.context.registry
            candidate = AccountRegistry.from_accounts(current.ranges(), current.all_codes())
            candidate.register(account)
            await self.account_repo.create(Account.from_domain(account))
            self.context.publish(self.context.rules, candidate)

        logger.info(
            "Registered account",
            extra={"code": account.code, "category": account.category.value},
        )
        return account

    def list_accounts(self, category: AccountCategory | None = None) -> tuple[AccountCode, ...]:
        registry = self.context.registry
        if category is not None:
            return registry.by_category(category)
        return registry.all_codes()

    def get_account(self, code: str) -> AccountCode:
        """Raises AccountNotFoundError for unknown codes."""
        return self.context.registry.resolve(code)
