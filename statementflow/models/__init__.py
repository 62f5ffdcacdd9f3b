"""Data models for StatementFlow."""

from statementflow.models.canonical import (
    CATEGORY_KEYS,
    LineItem,
    PeriodRecord,
    category_type_for,
    item_type_for,
)
from statementflow.models.enums import CategoryKey, CategoryType, ItemType, LineType, SourceId
from statementflow.models.results import (
    CompanyRef,
    EntityCounts,
    ETLResult,
    MergedCategory,
    ReportDate,
    ReportPeriodRef,
    SourceStatistics,
    StoredCategory,
    StoredLineItem,
)
from statementflow.models.sources import (
    QuickBooksDocument,
    RootfiDocument,
    SourceDocument,
)

__all__ = [
    "CATEGORY_KEYS",
    "CategoryKey",
    "CategoryType",
    "CompanyRef",
    "EntityCounts",
    "ETLResult",
    "ItemType",
    "LineItem",
    "LineType",
    "MergedCategory",
    "PeriodRecord",
    "QuickBooksDocument",
    "ReportDate",
    "ReportPeriodRef",
    "RootfiDocument",
    "SourceDocument",
    "SourceId",
    "SourceStatistics",
    "StoredCategory",
    "StoredLineItem",
    "category_type_for",
    "item_type_for",
]
