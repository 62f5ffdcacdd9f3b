"""Category merge: aggregate same-named categories across companies and periods."""

import logging
from decimal import Decimal
from typing import Protocol

from statementflow.models.results import CompanyRef, MergedCategory, StoredCategory
from statementflow.normalization.text import clean_line_item_title

logger = logging.getLogger(__name__)


class CategoryStore(Protocol):
    def find_categories_by_period_bounds(
        self, start_date: str, end_date: str
    ) -> list[StoredCategory]: ...


def merge_categories(categories: list[StoredCategory]) -> list[MergedCategory]:
    """Fold categories into one entry per name, sorted by name.

    Values are summed, line items concatenated in input order, and companies
    deduplicated by id.
    """
    merged: list[MergedCategory] = []
    position: dict[str, int] = {}

    for category in categories:
        if category.name not in position:
            position[category.name] = len(merged)
            merged.append(
                MergedCategory(
                    id=clean_line_item_title(category.name),
                    name=category.name,
                    value=Decimal("0"),
                    category_type=category.category_type,
                )
            )
        entry = merged[position[category.name]]
        entry.value += category.value
        entry.line_items.extend(category.line_items)
        entry.report_periods.append(category.report_period)
        _add_company(entry.companies, category.report_period.company)

    return sorted(merged, key=lambda m: m.name)


def _add_company(companies: list[CompanyRef], company: CompanyRef) -> None:
    if all(existing.id != company.id for existing in companies):
        companies.append(company)


class CategoryMerger:
    """Merges stored categories whose period bounds exactly match a date pair."""

    def __init__(self, store: CategoryStore):
        self.store = store

    def merge(self, start_date: str, end_date: str) -> list[MergedCategory]:
        categories = self.store.find_categories_by_period_bounds(start_date, end_date)
        merged = merge_categories(categories)
        logger.info(
            "Merged %d stored categories into %d for %s..%s",
            len(categories),
            len(merged),
            start_date,
            end_date,
        )
        return merged
