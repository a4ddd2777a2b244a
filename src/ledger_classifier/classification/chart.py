"""Standard chart of accounts used to bootstrap the registry.

The chart is versioned: codes are append-only, so a new version may add
accounts but must never move an existing code to another category.
"""

from ledger_classifier.classification.accounts import (
    AccountCategory,
    AccountCode,
    CategoryRange,
)
from ledger_classifier.classification.registry import AccountRegistry

CHART_VERSION = "2025.1"

A = AccountCategory.ASSET
L = AccountCategory.LIABILITY
E = AccountCategory.EQUITY
R = AccountCategory.REVENUE
OPEX = AccountCategory.OPERATING_EXPENSE
ADMIN = AccountCategory.ADMINISTRATIVE_EXPENSE
FIN = AccountCategory.FINANCE_COST

STANDARD_RANGES: tuple[CategoryRange, ...] = (
    CategoryRange(A, 1000, 2999),
    CategoryRange(L, 3000, 4999),
    CategoryRange(E, 5000, 5999),
    CategoryRange(R, 6000, 7999),
    CategoryRange(OPEX, 8000, 8999),
    CategoryRange(ADMIN, 9000, 9499),
    CategoryRange(FIN, 9500, 9999),
)

# (code, display name, category, description)
_STANDARD_ACCOUNTS: tuple[tuple[str, str, AccountCategory, str], ...] = (
    # Current assets
    ("1000", "Petty Cash", A, "Cash on hand for small expenses"),
    ("1000-001", "Stokvela Contributions", A, "Savings club contributions receivable"),
    ("1100", "Bank - Current Account", A, "Primary business current account"),
    ("1100-001", "Bank Transfers", A, "Internal bank transfers"),
    ("1101", "Bank - Savings Account", A, "Business savings account"),
    ("1200", "Accounts Receivable", A, "Money owed by customers"),
    ("1300", "Inventory", A, "Stock and inventory items"),
    ("1400", "Prepaid Expenses", A, "Expenses paid in advance"),
    ("1500", "VAT Input", A, "VAT paid on purchases"),
    # Non-current assets
    ("2000", "Property, Plant & Equipment", A, "Fixed assets at cost"),
    ("2000-001", "Director Loan - Company Assist", A, "Loan to director for company assistance"),
    ("2100", "Accumulated Depreciation", A, "Depreciation of fixed assets"),
    ("2200", "Investments", A, "Long-term investments"),
    # Current liabilities
    ("3000", "Accounts Payable", L, "Money owed to suppliers"),
    ("3100", "VAT Output", L, "VAT collected on sales"),
    ("3200", "PAYE Payable", L, "Pay-As-You-Earn tax payable"),
    ("3300", "UIF Payable", L, "Unemployment Insurance Fund payable"),
    ("3500", "Accrued Expenses", L, "Expenses incurred but not yet paid"),
    # Non-current liabilities
    ("4000", "Long-term Loans", L, "Long-term debt obligations"),
    # Equity
    ("5000", "Share Capital", E, "Issued share capital"),
    ("5100", "Retained Earnings", E, "Accumulated profits"),
    ("5300", "Opening Balance Equity", E, "Temporary equity for opening balances"),
    # Operating revenue
    ("6000", "Sales Revenue", R, "Revenue from sales"),
    ("6100", "Service Revenue", R, "Revenue from services"),
    ("6200", "Other Operating Revenue", R, "Other operating income"),
    # Other income
    ("7000", "Interest Income", R, "Interest earned on investments"),
    ("7100", "Dividend Income", R, "Dividends received"),
    # Operating expenses
    ("8000", "Cost of Goods Sold", OPEX, "Direct costs of products sold"),
    ("8100", "Employee Costs", OPEX, "Salaries, wages and benefits"),
    ("8100-001", "Director Remuneration", OPEX, "Director remuneration"),
    ("8200", "Rent Expense", OPEX, "Office and facility rent"),
    ("8300", "Utilities", OPEX, "Electricity, water, gas"),
    ("8400", "Communication", OPEX, "Telephone, internet, postage"),
    ("8500", "Motor Vehicle Expenses", OPEX, "Vehicle running costs"),
    ("8500-001", "Vehicle Tracking", OPEX, "Vehicle tracking service fees"),
    ("8600", "Travel & Entertainment", OPEX, "Business travel and entertainment"),
    ("8600-099", "Fuel Expenses", OPEX, "Fuel purchases"),
    ("8700", "Professional Services", OPEX, "Legal, accounting, consulting"),
    ("8710", "Suppliers Expense", OPEX, "Payments to suppliers and vendors"),
    ("8730", "Education & Training", OPEX, "Education fees and training costs"),
    ("8800", "Insurance", OPEX, "Business insurance premiums"),
    ("8900", "Repairs & Maintenance", OPEX, "Equipment and facility maintenance"),
    # Administrative expenses
    ("9000", "Office Supplies", ADMIN, "Stationery and office materials"),
    ("9100", "Computer Expenses", ADMIN, "Software licenses and IT costs"),
    ("9200", "Marketing & Advertising", ADMIN, "Promotional and marketing costs"),
    ("9400", "Depreciation", ADMIN, "Depreciation of fixed assets"),
    # Finance costs
    ("9500", "Interest Expense", FIN, "Interest on loans and credit"),
    ("9600", "Bank Charges", FIN, "Bank fees and transaction costs"),
    ("9800", "VAT Payments", FIN, "VAT payments to the revenue service"),
    ("9820", "PAYE Expense", FIN, "PAYE payments to the revenue service"),
    ("9900", "Pension Expenses", FIN, "Pension-related costs"),
)

STANDARD_ACCOUNTS: tuple[AccountCode, ...] = tuple(
    AccountCode(code, name, category, is_standard=True, description=description)
    for code, name, category, description in _STANDARD_ACCOUNTS
)


def build_standard_registry() -> AccountRegistry:
    """Registry seeded with the standard ranges and accounts."""
    return AccountRegistry.from_accounts(STANDARD_RANGES, STANDARD_ACCOUNTS)
