"""Custom exception classes for the classification core.

Each exception maps to an error code defined in errors.py. Validation
failures are raised where a rule or account is created, so nothing invalid
reaches an active rule set. "No rule matched" is not an exception.
"""

from typing import Any


class ClassificationError(Exception):
    """Base exception for all classification errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "ACC_003")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 400)
    """

    default_code = "UNKNOWN"
    default_status = 400

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(self.error_code)


class AccountNotFoundError(ClassificationError):
    """Raised when an account code is not in the registry."""

    default_code = "ACC_001"
    default_status = 404


class DuplicateCodeError(ClassificationError):
    """Raised when registering a code that already exists in the same category."""

    default_code = "ACC_002"
    default_status = 409


class RangeConflictError(ClassificationError):
    """Raised when a code or range collides with another category's range.

    Guards against two numbering schemes silently overlapping, e.g. 4000
    meaning "Revenue" in one chart and "Long-term Loans" in another.
    """

    default_code = "ACC_003"
    default_status = 409


class InvalidAccountCodeError(ClassificationError):
    """Raised when an account code is not in NNNN or NNNN-NNN form."""

    default_code = "ACC_004"


class RuleNotFoundError(ClassificationError):
    """Raised when a rule name is absent."""

    default_code = "RULE_001"
    default_status = 404


class DuplicateNameError(ClassificationError):
    """Raised when a rule name is already used by an active rule."""

    default_code = "RULE_002"
    default_status = 409


class InvalidRuleError(ClassificationError):
    """Raised when a rule definition is incomplete (e.g. no name)."""

    default_code = "RULE_004"


class InvalidPatternError(ClassificationError):
    """Raised when a rule pattern is empty or a regex fails to compile."""

    default_code = "RULE_003"


class ProposalNotFoundError(ClassificationError):
    """Raised when a bulk reclassification batch id is unknown."""

    default_code = "BULK_001"
    default_status = 404


class InvalidTransitionError(ClassificationError):
    """Raised on an illegal bulk proposal state transition."""

    default_code = "BULK_002"
    default_status = 409


class TransactionNotFoundError(ClassificationError):
    """Raised when a stored bank transaction is absent."""

    default_code = "TXN_001"
    default_status = 404
