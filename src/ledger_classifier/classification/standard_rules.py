"""Built-in ("standard") classification rules.

These are additive defaults. The sync service mirrors them into the rule
store; a persisted rule with the same name, edited by a human, takes
precedence. Priorities:

- 10: payee-specific patterns that must beat generic keywords
- 9: high-confidence vendor and counterparty patterns
- 8: standard business patterns
- 5: generic keywords
"""

from ledger_classifier.classification.accounts import AccountCategory
from ledger_classifier.classification.chart import STANDARD_ACCOUNTS
from ledger_classifier.classification.rules import (
    ClassificationRule,
    MatchStrategy,
    RuleOrigin,
)

CONTAINS = MatchStrategy.CONTAINS
STARTS_WITH = MatchStrategy.STARTS_WITH
REGEX = MatchStrategy.REGEX

_CATEGORY_BY_CODE: dict[str, AccountCategory] = {a.code: a.category for a in STANDARD_ACCOUNTS}


def _rule(
    name: str,
    description: str,
    strategy: MatchStrategy,
    pattern: str,
    code: str,
    priority: int,
) -> ClassificationRule:
    return ClassificationRule(
        name=name,
        description=description,
        match_strategy=strategy,
        pattern=pattern,
        target_account_code=code,
        priority=priority,
        origin=RuleOrigin.STANDARD,
        expected_category=_CATEGORY_BY_CODE[code],
    )


STANDARD_RULES: tuple[ClassificationRule, ...] = (
    # Priority 10
    _rule(
        "Insurance Chauke Salaries",
        "Salary payments to the payee Insurance Chauke; must beat the generic insurance keyword",
        CONTAINS, "INSURANCE CHAUKE", "8100", 10,
    ),
    _rule(
        "Director Loan Repayment",
        "Loan repayments from a director to the company loan account",
        CONTAINS, "JEFFREY MAPHOSA LOAN", "4000", 10,
    ),
    _rule(
        "Director Reimbursement",
        "Director reimbursements for company expenses paid personally",
        REGEX, r"STONE JEFFR.*MAPHOSA.*(REIMBURSE|REPAYMENT)", "4000", 10,
    ),
    _rule(
        "Corobrik Service Revenue",
        "Customer payments from Corobrik",
        CONTAINS, "COROBRIK", "6100", 10,
    ),
    _rule(
        "Fee Immediate Payment",
        "Bank charges for immediate payment processing",
        CONTAINS, "FEE IMMEDIATE PAYMENT", "9600", 10,
    ),
    # Priority 9
    _rule(
        "Excess Interest Expense",
        "Excess interest charges on loans and overdrafts",
        CONTAINS, "EXCESS INTEREST", "9500", 9,
    ),
    _rule(
        "Bond Repayment",
        "Bond / home loan repayments",
        CONTAINS, "STD BANK BOND", "4000", 9,
    ),
    _rule(
        "IB Transfer From Fuel Account",
        "Internal transfers from the fuel supplier account",
        CONTAINS, "IB TRANSFER FROM *****2689327", "8600-099", 9,
    ),
    _rule(
        "Vehicle Tracking - Cartrack",
        "Cartrack vehicle tracking service fees",
        CONTAINS, "CARTRACK", "8500-001", 9,
    ),
    _rule(
        "Vehicle Tracking - Netstar",
        "Netstar vehicle tracking service fees",
        CONTAINS, "NETSTAR", "8500-001", 9,
    ),
    _rule(
        "Instant Money to Employees",
        "E-wallet payments to part-time employees",
        CONTAINS, "IB INSTANT MONEY CASH TO", "8100", 9,
    ),
    _rule(
        "Autobank Transfer to Fuel Account",
        "Automated transfers to the fuel supplier account",
        CONTAINS, "AUTOBANK TRANSFER TO ACCOUNT", "8600-099", 9,
    ),
    _rule(
        "Returned Debit",
        "Returned debit orders offset the original insurance debit",
        STARTS_WITH, "RTD-", "8800", 9,
    ),
    _rule(
        "Director Remuneration - DB Nkuna",
        "Director remuneration payments",
        CONTAINS, "DB NKUNA", "8100-001", 9,
    ),
    _rule(
        "Pension Fund Contributions",
        "Pension fund contributions for employees",
        CONTAINS, "PENSION FUND CONTRIBUTION", "9900", 9,
    ),
    _rule(
        "OHS Training",
        "Occupational health and safety training",
        CONTAINS, "OHS TRAINING", "8730", 9,
    ),
    _rule(
        "PAYE Payments",
        "PAYE payments to the revenue service",
        CONTAINS, "PAYE-PAY-AS-", "9820", 9,
    ),
    _rule(
        "VAT Payments",
        "VAT payments to the revenue service",
        CONTAINS, "PAYMENT TO SARS-VAT", "9800", 9,
    ),
    _rule(
        "Director Reimbursements - Generic",
        "Director expense reimbursements booked against the director loan",
        CONTAINS, "REIMBURSE", "4000", 9,
    ),
    _rule(
        "Transport Expenses",
        "Transport and related expenses",
        CONTAINS, "TRANSPORT", "8500", 9,
    ),
    _rule(
        "Accounting Services",
        "Accounting services from Global Hope Finacia",
        CONTAINS, "GLOBAL HOPE FINACIA", "8700", 9,
    ),
    _rule(
        "Stadium Rent",
        "Rent payments to Ellis Park Stadium",
        CONTAINS, "ELLISPARK STADIUM", "8200", 9,
    ),
    _rule(
        "Vehicle Purchase",
        "Vehicle purchases from EBS Car Sales",
        CONTAINS, "EBS CAR SALES", "2000", 9,
    ),
    _rule(
        "Supplier - Two Way Technologies",
        "Supplier payments to Two Way Technologies",
        CONTAINS, "TWO WAY TECHNOLOGIES", "8710", 9,
    ),
    _rule(
        "Balance Brought Forward",
        "Opening balance lines carried from previous periods",
        CONTAINS, "BALANCE BROUGHT FORWARD", "5300", 9,
    ),
    # Priority 8
    _rule(
        "Immediate Payment - Employee",
        "Immediate payments to a named individual",
        REGEX, r"IMMEDIATE PAYMENT \d+ [A-Z]+ [A-Z]+", "8100", 8,
    ),
    _rule(
        "IB Payment To - Individual",
        "Internet banking payments to a named individual",
        REGEX, r"IB PAYMENT TO [A-Z]+ [A-Z]+", "8100", 8,
    ),
    _rule(
        "Director Loan Income",
        "Loans received from directors and associates",
        CONTAINS, "IB PAYMENT FROM", "2000-001", 8,
    ),
    _rule(
        "Stokvela Payments",
        "Savings club payments",
        CONTAINS, "STOKVELA", "1000-001", 8,
    ),
    _rule(
        "Bank Transfers - Outgoing",
        "Internal bank transfers to other accounts",
        CONTAINS, "IB TRANSFER TO", "1100-001", 8,
    ),
    _rule(
        "Bank Transfers - Incoming",
        "Internal bank transfers from other accounts",
        CONTAINS, "IB TRANSFER FROM", "1100-001", 8,
    ),
    _rule(
        "Cash Deposits",
        "Cash deposits through autobank",
        CONTAINS, "AUTOBANK CASH DEPOSIT", "1000", 8,
    ),
    _rule(
        "Interest Received",
        "Credit interest earned on bank balances",
        CONTAINS, "CREDIT INTEREST", "7000", 8,
    ),
    # Priority 5
    _rule(
        "Insurance Premiums",
        "Generic insurance premiums",
        CONTAINS, "INSURANCE", "8800", 5,
    ),
    _rule(
        "Bank Fees",
        "Generic bank fees and service charges",
        REGEX, r"\b(FEE|SERVICE CHARGE|ADMIN CHARGE)\b", "9600", 5,
    ),
    _rule(
        "Telephone and Internet",
        "Telephone, mobile and internet services",
        REGEX, r"\b(TELKOM|VODACOM|MTN|CELL C|AIRTIME|DATA BUNDLE)\b", "8400", 5,
    ),
    _rule(
        "Electricity and Water",
        "Municipal electricity and water",
        REGEX, r"\b(ESKOM|ELECTRICITY|PREPAID ELEC|MUNICIPALITY|WATER)\b", "8300", 5,
    ),
    _rule(
        "Fuel Purchases",
        "Fuel purchases at service stations",
        REGEX, r"\b(ENGEN|SASOL|SHELL|CALTEX|FUEL)\b", "8600-099", 5,
    ),
    _rule(
        "Salaries",
        "Generic salary and wage payments",
        REGEX, r"\b(SALARY|SALARIES|WAGES)\b", "8100", 5,
    ),
)
