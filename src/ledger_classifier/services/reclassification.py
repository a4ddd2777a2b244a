"""Manual corrections and bulk reclassification workflow.

A human corrects one transaction; similar transactions are proposed for the
same account; nothing changes until the proposal is confirmed and applied.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.bulk import (
    BulkProposal,
    ProposalState,
    extract_key_pattern,
    similar_indexes,
)
from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.classification.rules import (
    ClassificationRule,
    MatchStrategy,
    RuleOrigin,
    normalize_description,
)
from ledger_classifier.config import Settings, settings as default_settings
from ledger_classifier.core.exceptions import (
    AccountNotFoundError,
    InvalidRuleError,
    ProposalNotFoundError,
    TransactionNotFoundError,
)
from ledger_classifier.models.transaction import BankTransaction
from ledger_classifier.repositories.bulk import BulkBatchRepository
from ledger_classifier.repositories.transaction import BankTransactionRepository
from ledger_classifier.services.rules import RuleSyncService

logger = logging.getLogger(__name__)


class BulkReclassificationService:
    def __init__(
        self,
        db: AsyncSession,
        context: ClassificationContext,
        settings: Settings | None = None,
    ):
        self.db = db
        self.context = context
        self.settings = settings or default_settings
        self.transaction_repo = BankTransactionRepository(db)
        self.batch_repo = BulkBatchRepository(db)

    async def _get_transaction(self, external_id: str) -> BankTransaction:
        row = await self.transaction_repo.get_by_external_id(external_id)
        if row is None:
            raise TransactionNotFoundError(details={"transaction_id": external_id})
        return row

    async def _get_proposal(self, batch_id: str) -> BulkProposal:
        row = await self.batch_repo.get_by_batch_id(batch_id)
        if row is None:
            raise ProposalNotFoundError(details={"batch_id": batch_id})
        return row.to_domain()

    def _key(self, description: str) -> list[str]:
        return extract_key_pattern(
            description, self.settings.key_min_length, self.settings.key_max_keywords
        )

    async def correct_transaction(self, external_id: str, account_code: str) -> BankTransaction:
        """Assign an account to one transaction by hand.

        Raises:
            TransactionNotFoundError: Unknown transaction id.
            AccountNotFoundError: The code isn't registered.
        """
        account = self.context.registry.resolve(account_code)
        row = await self._get_transaction(external_id)
        row = await self.transaction_repo.assign_account(row, account.code)
        logger.info(
            "Corrected transaction",
            extra={"transaction_id": external_id, "account_code": account.code},
        )
        return row

    async def propose(
        self,
        external_id: str,
        account_code: str | None = None,
        max_results: int | None = None,
    ) -> BulkProposal:
        """Propose reclassifying transactions similar to a corrected one.

        Raises:
            TransactionNotFoundError: Unknown transaction id.
            AccountNotFoundError: No account given and the transaction has none,
                or the code isn't registered.
        """
        corrected = await self._get_transaction(external_id)
        code = account_code or corrected.account_code
        if code is None:
            raise AccountNotFoundError(
                details={"transaction_id": external_id, "reason": "transaction is unclassified"}
            )
        code = self.context.registry.resolve(code).code
        key = self._key(corrected.description)
        limit = max_results or self.settings.bulk_max_results

        candidates = (
            await self.transaction_repo.find_candidates(key, code, exclude_external_id=external_id)
            if key
            else []
        )
        indexes = similar_indexes(
            corrected.description,
            [c.description for c in candidates],
            max_results=limit,
            min_length=self.settings.key_min_length,
            max_keywords=self.settings.key_max_keywords,
        )
        proposal = BulkProposal(
            account_code=code,
            corrected_description=corrected.description,
            key_pattern=tuple(key),
            candidate_ids=tuple(candidates[i].external_id for i in indexes),
        )
        await self.batch_repo.save(proposal)
        logger.info(
            "Proposed bulk reclassification",
            extra={
                "batch_id": proposal.batch_id,
                "account_code": code,
                "candidates": len(proposal.candidate_ids),
            },
        )
        return proposal

    async def get_proposal(self, batch_id: str) -> BulkProposal:
        return await self._get_proposal(batch_id)

    async def confirm(self, batch_id: str) -> BulkProposal:
        proposal = (await self._get_proposal(batch_id)).confirm()
        await self.batch_repo.save(proposal)
        return proposal

    async def reject(self, batch_id: str) -> BulkProposal:
        proposal = (await self._get_proposal(batch_id)).reject()
        await self.batch_repo.save(proposal)
        return proposal

    async def apply(self, batch_id: str) -> BulkProposal:
        """Apply a confirmed proposal.

        Applying an already-applied batch returns it unchanged.

        Raises:
            ProposalNotFoundError: Unknown batch id.
            InvalidTransitionError: The proposal isn't confirmed.
        """
        proposal = await self._get_proposal(batch_id)
        if proposal.state is ProposalState.APPLIED:
            return proposal
        # Checks the transition before any row is touched.
        proposal.mark_applied(0)

        updated = await self.transaction_repo.apply_bulk(
            batch_id, proposal.account_code, proposal.candidate_ids
        )
        applied = proposal.mark_applied(await self.transaction_repo.count_in_batch(batch_id))
        await self.batch_repo.save(applied)
        logger.info(
            "Applied bulk reclassification",
            extra={
                "batch_id": batch_id,
                "account_code": applied.account_code,
                "updated": updated,
                "applied_count": applied.applied_count,
            },
        )
        return applied

    async def create_rule_from_correction(
        self,
        external_id: str,
        name: str | None = None,
        priority: int = 9,
    ) -> ClassificationRule:
        """Promote a corrected transaction's key pattern into a ``contains`` rule.

        The pattern is the whole key when it appears verbatim in the
        description, otherwise its longest keyword.

        Raises:
            TransactionNotFoundError: Unknown transaction id.
            AccountNotFoundError: The transaction is unclassified.
            InvalidRuleError: The description yields no keywords.
        """
        row = await self._get_transaction(external_id)
        if row.account_code is None or row.is_fallback:
            raise AccountNotFoundError(
                details={"transaction_id": external_id, "reason": "transaction is unclassified"}
            )
        key = self._key(row.description)
        if not key:
            raise InvalidRuleError(
                details={"transaction_id": external_id, "reason": "no keywords in description"}
            )
        phrase = " ".join(key)
        pattern = phrase if phrase in normalize_description(row.description) else max(key, key=len)

        rule = ClassificationRule(
            name=name or phrase.title(),
            description=f"Created from correction of transaction {external_id}",
            match_strategy=MatchStrategy.CONTAINS,
            pattern=pattern,
            target_account_code=row.account_code,
            priority=priority,
            origin=RuleOrigin.PERSISTED,
            expected_category=self.context.registry.resolve(row.account_code).category,
        )
        return await RuleSyncService(self.db, self.context).create_rule(rule)
