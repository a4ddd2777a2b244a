"""Rule administration and standard/persisted rule synchronisation."""
import logging
from collections.abc import Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_classifier.classification.context import ClassificationContext
from ledger_classifier.classification.rules import (
    ClassificationRule,
    RuleOrigin,
    validate_rule,
)
from ledger_classifier.classification.standard_rules import STANDARD_RULES
from ledger_classifier.classification.sync import SyncResult, reconcile
from ledger_classifier.core.exceptions import (
    DuplicateNameError,
    InvalidRuleError,
    RuleNotFoundError,
)
from ledger_classifier.models.classification_rule import ClassificationRule as RuleRow
from ledger_classifier.repositories.rule import RuleRepository

logger = logging.getLogger(__name__)

_CLEARABLE_FIELDS = frozenset({"description", "expected_category"})


class RuleSyncService:
    """Single writer for the rule store and the live rule-set snapshot.

    Every mutation runs under the context's admin lock, validates before
    storing, then re-runs reconciliation and publishes the merged snapshot.
    """

    def __init__(
        self,
        db: AsyncSession,
        context: ClassificationContext,
        standard_rules: Sequence[ClassificationRule] = STANDARD_RULES,
    ):
        self.db = db
        self.context = context
        self.standard_rules = tuple(standard_rules)
        self.rule_repo = RuleRepository(db)

    async def sync(self, resolutions: Mapping[str, RuleOrigin | str] | None = None) -> SyncResult:
        """Reconcile the store with the code-defined rules and publish the result.

        Idempotent: with unchanged inputs a second call writes nothing and
        publishes an identical rule set.
        """
        async with self.context.admin_lock:
            if resolutions is not None:
                self.context.resolutions = {
                    name: RuleOrigin(origin) for name, origin in resolutions.items()
                }
            return await self._reconcile_and_publish()

    async def _reconcile_and_publish(self) -> SyncResult:
        rows = await self.rule_repo.list_ordered()
        result = reconcile(
            self.standard_rules,
            [row.to_domain() for row in rows],
            self.context.registry,
            self.context.resolutions,
        )
        written = await self.rule_repo.apply_sync(result.to_persist, result.to_deactivate)
        self.context.publish(result.rule_set)

        for conflict in result.conflicts:
            logger.warning(
                "Rule conflict",
                extra={
                    "rule": conflict.rule_name,
                    "kind": conflict.kind.value,
                    "resolution": conflict.resolution.value if conflict.resolution else None,
                },
            )
        logger.info(
            "Rules synchronised",
            extra={
                "rules": len(result.rule_set),
                "conflicts": len(result.conflicts),
                "mirrors_written": written,
            },
        )
        return result

    async def _get_row(self, name: str) -> RuleRow:
        row = await self.rule_repo.get_by_name((name or "").strip())
        if row is None:
            raise RuleNotFoundError(details={"rule": name})
        return row

    async def create_rule(self, rule: ClassificationRule) -> ClassificationRule:
        """Store a new human-authored rule.

        Raises:
            DuplicateNameError: A stored rule already has this name.
            AccountNotFoundError: The target code isn't registered.
            RangeConflictError: The target resolves to an unexpected category.
        """
        rule = rule.evolve(origin=RuleOrigin.PERSISTED)
        async with self.context.admin_lock:
            validate_rule(rule, self.context.registry)
            if await self.rule_repo.get_by_name(rule.name) is not None:
                raise DuplicateNameError(details={"rule": rule.name})
            await self.rule_repo.add(rule)
            await self._reconcile_and_publish()
        logger.info("Created rule", extra={"rule": rule.name})
        return rule

    async def update_rule(self, name: str, **changes) -> ClassificationRule:
        """Edit a stored rule. The edited rule becomes persisted-origin.

        Raises:
            RuleNotFoundError: No stored rule has this name.
            InvalidRuleError: A changed value can't be applied to the rule.
            InvalidPatternError: The new pattern is empty or doesn't compile.
            AccountNotFoundError: The new target code isn't registered.
            RangeConflictError: The target resolves to an unexpected category.
        """
        changes.pop("name", None)
        changes.pop("origin", None)
        # Only description and expected_category can be cleared.
        changes = {
            key: value
            for key, value in changes.items()
            if value is not None or key in _CLEARABLE_FIELDS
        }
        async with self.context.admin_lock:
            row = await self._get_row(name)
            current = row.to_domain()
            retarget = changes.get("target_account_code")
            if (
                retarget is not None
                and "expected_category" not in changes
                and changes.get("active", current.active)
            ):
                # A retarget is a deliberate choice of account, category included.
                target = self.context.registry.resolve(retarget)
                if target.code != current.target_account_code:
                    changes["expected_category"] = target.category
            try:
                updated = current.evolve(origin=RuleOrigin.PERSISTED, **changes)
            except (TypeError, ValueError) as e:
                raise InvalidRuleError(
                    details={"rule": current.name, "reason": str(e)}
                ) from e
            if updated.active:
                validate_rule(updated, self.context.registry)
            await self.rule_repo.save(row, updated)
            await self._reconcile_and_publish()
        logger.info(
            "Updated rule", extra={"rule": updated.name, "fields": sorted(changes)}
        )
        return updated

    async def deactivate_rule(self, name: str) -> ClassificationRule:
        """Retire a rule. Rules are never hard-deleted.

        Deactivating a standard rule makes the deactivation a human decision,
        so later syncs don't reactivate it.
        """
        async with self.context.admin_lock:
            row = await self._get_row(name)
            updated = row.to_domain().evolve(active=False, origin=RuleOrigin.PERSISTED)
            await self.rule_repo.save(row, updated)
            await self._reconcile_and_publish()
        logger.info("Deactivated rule", extra={"rule": updated.name})
        return updated

    async def list_rules(self, include_inactive: bool = True) -> list[ClassificationRule]:
        rows = await self.rule_repo.list_ordered(include_inactive=include_inactive)
        return [row.to_domain() for row in rows]

    async def get_rule(self, name: str) -> ClassificationRule:
        return (await self._get_row(name)).to_domain()
