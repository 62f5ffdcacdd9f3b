"""Rootfi normalizer: reduces flat period objects into canonical records."""

import logging
import math
from decimal import Decimal
from typing import Any

from statementflow.models.canonical import LineItem, PeriodRecord
from statementflow.models.enums import CategoryKey, SourceId
from statementflow.models.results import ReportDate, SourceStatistics
from statementflow.models.sources import RootfiCategory, RootfiDocument, RootfiPeriod
from statementflow.normalization.base import BaseNormalizer, UnmappedHook
from statementflow.normalization.key_maps import ROOTFI_UNIFIED_KEYS, KeyMap
from statementflow.normalization.text import clean_line_item_title

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_ID = 2


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


class RootfiNormalizer(BaseNormalizer):
    """Converts a Rootfi income statement export into canonical period records."""

    source = SourceId.ROOTFI
    document_model = RootfiDocument

    def __init__(
        self,
        key_map: KeyMap = ROOTFI_UNIFIED_KEYS,
        *,
        company_id: int = DEFAULT_COMPANY_ID,
        on_unmapped: UnmappedHook | None = None,
    ):
        super().__init__(company_id=company_id, on_unmapped=on_unmapped)
        self.key_map = key_map

    def validate(self, raw: Any) -> list[str]:
        """Every period needs both date bounds and a numeric company id."""
        if not isinstance(raw, dict) or not isinstance(raw.get("data"), list):
            return ["Rootfi: 'data' must be a list of periods"]
        errors = []
        for i, period in enumerate(raw["data"]):
            if not isinstance(period, dict):
                errors.append(f"Rootfi period {i + 1}: not an object")
                continue
            if not period.get("period_start"):
                errors.append(f"Rootfi period {i + 1}: period_start is missing")
            if not period.get("period_end"):
                errors.append(f"Rootfi period {i + 1}: period_end is missing")
            if not _is_number(period.get("rootfi_company_id")):
                errors.append(f"Rootfi period {i + 1}: rootfi_company_id must be a number")
        return errors

    def report_dates(self, document: RootfiDocument) -> list[ReportDate]:
        return [
            ReportDate(start_date=p.period_start, end_date=p.period_end) for p in document.data
        ]

    def statistics(self, document: RootfiDocument) -> SourceStatistics:
        if not document.data:
            return SourceStatistics(total_periods=0)
        starts = sorted(p.period_start for p in document.data)
        companies = list(dict.fromkeys(p.rootfi_company_id for p in document.data))
        return SourceStatistics(
            total_periods=len(document.data),
            start=starts[0],
            end=starts[-1],
            companies=companies,
        )

    def normalize(self, document: RootfiDocument) -> list[PeriodRecord]:
        records = [self._normalize_period(period) for period in document.data]
        logger.info("Normalized %d Rootfi period(s)", len(records))
        return records

    def _normalize_period(self, period: RootfiPeriod) -> PeriodRecord:
        amounts: dict[CategoryKey, Decimal] = {}
        items: dict[CategoryKey, list[LineItem]] = {}

        for source_key, canonical in self.key_map.items():
            concept = period.concept(source_key)
            if isinstance(concept, list):
                amounts[canonical] = sum((c.value for c in concept), Decimal("0"))
                items[canonical] = self._first_category_items(concept)
            elif isinstance(concept, Decimal):
                amounts[canonical] = concept
            else:
                amounts[canonical] = Decimal("0")

        return PeriodRecord(
            company_id=self.company_id,
            start_date=period.period_start,
            end_date=period.period_end,
            line_items=items,
            **{key.value: value for key, value in amounts.items()},
        )

    @staticmethod
    def _first_category_items(categories: list[RootfiCategory]) -> list[LineItem]:
        # Rootfi totals every category but only the first one's line items are kept.
        if not categories:
            return []
        return [
            LineItem(
                key=clean_line_item_title(item.name),
                value=item.value,
                original_name=item.name,
                account_id=item.account_id,
            )
            for item in categories[0].line_items
        ]
