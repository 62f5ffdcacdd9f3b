"""Enumerations for StatementFlow."""

from enum import StrEnum


class SourceId(StrEnum):
    QUICKBOOKS = "quickbooks"
    ROOTFI = "rootfi"


class CategoryKey(StrEnum):
    INCOME = "income"
    COGS = "cogs"
    GROSS_PROFIT = "gross_profit"
    EXPENSES = "expenses"
    OPERATING_INCOME = "operating_income"
    OTHER_INCOME = "other_income"
    OTHER_EXPENSES = "other_expenses"
    NET_OTHER_INCOME = "net_other_income"
    NET_INCOME = "net_income"
    TAXES = "taxes"  # Only reported by Rootfi; not one of the nine persisted keys


class LineType(StrEnum):
    NORMAL = "normal"
    SUMMARY = "summary"
    TOTAL = "total"


class CategoryType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"
    PROFIT = "profit"
    OTHER = "other"


class ItemType(StrEnum):
    REVENUE = "revenue"
    EXPENSE = "expense"
    OTHER = "other"
