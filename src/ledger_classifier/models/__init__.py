"""Database models."""
from ledger_classifier.models.account import Account
from ledger_classifier.models.bulk_batch import BulkReclassificationBatch
from ledger_classifier.models.classification_rule import ClassificationRule
from ledger_classifier.models.transaction import BankTransaction

__all__ = ["Account", "BankTransaction", "BulkReclassificationBatch", "ClassificationRule"]
