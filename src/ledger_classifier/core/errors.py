"""Error codes and user-friendly messages.

This module defines the error catalog for account registration, rule
administration and reclassification. Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the operator
- retry_allowed: Whether the operation is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    # Account registry
    "ACC_001": {
        "code": "ACC_001",
        "message": "Account code not found in registry",
        "user_message": "That account code doesn't exist in the chart of accounts.",
        "suggestion": "Choose an existing account code or register it first.",
        "retry_allowed": False,
    },
    "ACC_002": {
        "code": "ACC_002",
        "message": "Account code already registered",
        "user_message": "This account code is already registered.",
        "suggestion": "Use the existing account instead of registering it again.",
        "retry_allowed": False,
    },
    "ACC_003": {
        "code": "ACC_003",
        "message": "Account code range is owned by a different category",
        "user_message": "This code belongs to a range reserved for another category.",
        "suggestion": "Pick a code inside the range reserved for the intended category.",
        "retry_allowed": False,
    },
    "ACC_004": {
        "code": "ACC_004",
        "message": "Malformed account code",
        "user_message": "Account codes must look like 8100 or 8100-001.",
        "suggestion": "Use four digits with an optional three-digit sub-account suffix.",
        "retry_allowed": False,
    },
    # Rule administration
    "RULE_001": {
        "code": "RULE_001",
        "message": "Classification rule not found",
        "user_message": "We couldn't find this rule.",
        "suggestion": "Check the rule name and try again.",
        "retry_allowed": False,
    },
    "RULE_002": {
        "code": "RULE_002",
        "message": "Classification rule name already in use",
        "user_message": "A rule with this name already exists.",
        "suggestion": "Choose a different name or edit the existing rule.",
        "retry_allowed": False,
    },
    "RULE_003": {
        "code": "RULE_003",
        "message": "Classification rule pattern is empty or does not compile",
        "user_message": "The rule pattern is invalid.",
        "suggestion": "Provide a non-empty pattern; regular expressions must compile.",
        "retry_allowed": False,
    },
    "RULE_004": {
        "code": "RULE_004",
        "message": "Classification rule definition is invalid",
        "user_message": "The rule is missing required information.",
        "suggestion": "Provide a rule name, a pattern and a target account code.",
        "retry_allowed": False,
    },
    # Bulk reclassification
    "BULK_001": {
        "code": "BULK_001",
        "message": "Bulk reclassification batch not found",
        "user_message": "We couldn't find this reclassification proposal.",
        "suggestion": "Create a new proposal from the corrected transaction.",
        "retry_allowed": False,
    },
    "BULK_002": {
        "code": "BULK_002",
        "message": "Bulk reclassification state transition not allowed",
        "user_message": "This proposal can't move to the requested state.",
        "suggestion": "Proposals must be confirmed before they are applied.",
        "retry_allowed": False,
    },
    # Transactions
    "TXN_001": {
        "code": "TXN_001",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic entry for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    """Get actionable suggestion for an error code."""
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
