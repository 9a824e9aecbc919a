"""Chart-of-accounts seed data."""

from lexledger.domain.entities import AccountSeed, AccountType

# The five root accounts a chart reset starts from
ROOT_CHART = [
    AccountSeed("1", "Assets", AccountType.ASSET),
    AccountSeed("2", "Liabilities", AccountType.LIABILITY),
    AccountSeed("3", "Equity", AccountType.EQUITY),
    AccountSeed("4", "Revenue", AccountType.INCOME),
    AccountSeed("5", "Expenses", AccountType.EXPENSE),
]

# Standard law-firm chart
STANDARD_CHART = [
    # Assets
    AccountSeed("1000", "Operating Cash", AccountType.ASSET),
    AccountSeed("1010", "Bank - Default", AccountType.ASSET),
    AccountSeed("1020", "Client Trust Cash", AccountType.ASSET),
    AccountSeed("1100", "Accounts Receivable", AccountType.ASSET),
    AccountSeed("1110", "Unbilled WIP", AccountType.ASSET),
    AccountSeed("1200", "Fixed Assets", AccountType.ASSET),
    # Liabilities
    AccountSeed("2000", "Client Trust Liability", AccountType.LIABILITY),
    AccountSeed("2100", "Accounts Payable", AccountType.LIABILITY),
    AccountSeed("2200", "Accrued Expenses", AccountType.LIABILITY),
    # Equity
    AccountSeed("3000", "Owner's Capital", AccountType.EQUITY),
    AccountSeed("3100", "Owner's Draws", AccountType.EQUITY),
    AccountSeed("3200", "Retained Earnings", AccountType.EQUITY),
    # Income
    AccountSeed("4000", "Legal Fees", AccountType.INCOME),
    AccountSeed("4100", "Reimbursed Expenses", AccountType.INCOME),
    AccountSeed("4200", "Other Income", AccountType.INCOME),
    # Expenses
    AccountSeed("5000", "Payroll & Benefits", AccountType.EXPENSE),
    AccountSeed("5100", "Office Expenses", AccountType.EXPENSE),
    AccountSeed("5200", "Marketing", AccountType.EXPENSE),
    AccountSeed("5300", "Professional Fees", AccountType.EXPENSE),
    AccountSeed("5400", "Client Costs Advanced", AccountType.EXPENSE),
]

# Codes used by older charts, merged into their standard replacement
LEGACY_CODE_MAP = {
    "CASH-MAIN": "1010",
    "TRUST-ASSET": "1020",
    "TRUST-LIAB": "2000",
    "ASSET": "1000",
    "LIABILITY": "2000",
    "EQUITY": "3000",
    "INCOME": "4000",
    "EXPENSE": "5000",
}

CASH_CODE_PREFIX = "10"
BANK_CODE = "1010"
TRUST_CASH_CODE = "1020"
TRUST_LIABILITY_CODE = "2000"
