"""QuickBooks normalizer: walks the nested row/column report tree."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal

from statementflow.exceptions import DocumentStructureError
from statementflow.models.canonical import LineItem, PeriodRecord
from statementflow.models.enums import CategoryKey, LineType, SourceId
from statementflow.models.results import ReportDate
from statementflow.models.sources import QuickBooksDocument, Row
from statementflow.normalization.base import BaseNormalizer, UnmappedHook
from statementflow.normalization.key_maps import QUICKBOOKS_UNIFIED_KEYS, KeyMap, resolve_key
from statementflow.normalization.text import classify_line, parse_amount

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_ID = 1
DEFAULT_GROUP = "Ungrouped"
# Real reports nest three levels deep; anything far beyond that is malformed.
MAX_ROW_DEPTH = 16


@dataclass(frozen=True)
class PeriodColumn:
    index: int
    start_date: str
    end_date: str


@dataclass(frozen=True)
class WalkedRow:
    row: Row
    depth: int
    group: str


class QuickBooksNormalizer(BaseNormalizer):
    """Converts a QuickBooks profit-and-loss report into canonical period records."""

    source = SourceId.QUICKBOOKS
    document_model = QuickBooksDocument

    def __init__(
        self,
        key_map: KeyMap = QUICKBOOKS_UNIFIED_KEYS,
        *,
        company_id: int = DEFAULT_COMPANY_ID,
        default_group: str = DEFAULT_GROUP,
        max_depth: int = MAX_ROW_DEPTH,
        on_unmapped: UnmappedHook | None = None,
    ):
        super().__init__(company_id=company_id, on_unmapped=on_unmapped)
        self.key_map = key_map
        self.default_group = default_group
        self.max_depth = max_depth

    # --- Inspection ---

    def period_columns(self, document: QuickBooksDocument) -> list[PeriodColumn]:
        """Money columns carrying both date annotations, in column order."""
        periods = []
        for index, column in enumerate(document.data.columns.columns):
            if column.col_type != "Money":
                continue
            start = column.meta("StartDate")
            end = column.meta("EndDate")
            if start and end:
                periods.append(PeriodColumn(index=index, start_date=start, end_date=end))
        return periods

    def report_dates(self, document: QuickBooksDocument) -> list[ReportDate]:
        return [
            ReportDate(start_date=p.start_date, end_date=p.end_date)
            for p in self.period_columns(document)
        ]

    def groups(self, document: QuickBooksDocument) -> list[str]:
        """Names of the top-level group rows."""
        return [row.group for row in document.data.rows.rows if row.is_group]

    def walk(self, document: QuickBooksDocument) -> Iterator[WalkedRow]:
        """Yield every row in pre-order with its depth and nearest ancestor group."""
        yield from self._walk(document.data.rows.rows, self.default_group, 1)

    def _walk(self, rows: list[Row], group: str, depth: int) -> Iterator[WalkedRow]:
        if depth > self.max_depth:
            raise DocumentStructureError(
                self.source.value, f"row nesting exceeds maximum depth of {self.max_depth}"
            )
        for row in rows:
            yield WalkedRow(row=row, depth=depth, group=group)
            if row.child_rows:
                child_group = row.group if row.is_group else group
                yield from self._walk(row.child_rows, child_group, depth + 1)

    # --- Transformation ---

    def normalize(self, document: QuickBooksDocument) -> list[PeriodRecord]:
        columns = self.period_columns(document)
        amounts: list[dict[CategoryKey, Decimal]] = [{} for _ in columns]
        items: list[dict[CategoryKey, list[LineItem]]] = [{} for _ in columns]

        walked = list(self.walk(document))
        self._apply_summaries(walked, columns, amounts)
        self._collect_line_items(walked, columns, items)

        records = [
            PeriodRecord(
                company_id=self.company_id,
                start_date=column.start_date,
                end_date=column.end_date,
                line_items=items[i],
                **{key.value: value for key, value in amounts[i].items()},
            )
            for i, column in enumerate(columns)
        ]
        logger.info("Normalized %d QuickBooks period(s)", len(records))
        return records

    def _apply_summaries(
        self,
        walked: list[WalkedRow],
        columns: list[PeriodColumn],
        amounts: list[dict[CategoryKey, Decimal]],
    ) -> None:
        """Summary subtotals overwrite the period's canonical field.

        Deeper summaries are applied first so the outermost group total wins.
        """
        summary_rows = [w for w in walked if w.row.summary is not None and w.row.group]
        for entry in sorted(summary_rows, key=lambda w: w.depth, reverse=True):
            row = entry.row
            key = resolve_key(self.key_map, row.group)
            if key is None:
                self._report_unmapped(row.group, row.label, "summary")
                continue
            cells = row.summary.col_data
            for i, column in enumerate(columns):
                if column.index >= len(cells):
                    continue
                value = parse_amount(cells[column.index].value)
                if value is not None:
                    amounts[i][key] = value

    def _collect_line_items(
        self,
        walked: list[WalkedRow],
        columns: list[PeriodColumn],
        items: list[dict[CategoryKey, list[LineItem]]],
    ) -> None:
        for entry in walked:
            row = entry.row
            if row.is_group or not row.col_data:
                continue
            if classify_line(row.label) is not LineType.NORMAL:
                continue
            key = resolve_key(self.key_map, entry.group)
            if key is None:
                self._report_unmapped(entry.group, row.label, "line")
                continue

            account_id = row.col_data[0].id
            for i, column in enumerate(columns):
                raw = row.col_data[column.index].value if column.index < len(row.col_data) else None
                value = parse_amount(raw)
                if value is None:
                    continue
                items[i].setdefault(key, []).append(
                    LineItem(key=row.label, value=value, original_name=row.label, account_id=account_id)
                )
