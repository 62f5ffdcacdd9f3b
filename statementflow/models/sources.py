"""Typed schemas for the raw provider documents.

QuickBooks reports are a nested row/column tree; Rootfi reports are a flat
array of period objects. Both are read into these models at the boundary so
that normalizers never touch untyped JSON.
"""

import math
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statementflow.models.enums import SourceId


def _number_or_none(value: Any) -> Decimal | None:
    """Accept JSON numbers only; booleans, strings and non-finite floats are not amounts."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None
    return None


# --- QuickBooks ---


class _QuickBooksModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")


class ColDataCell(_QuickBooksModel):
    value: str | None = None
    id: str | None = None


class MetaDataEntry(_QuickBooksModel):
    name: str = Field(alias="Name")
    value: str | None = Field(default=None, alias="Value")


class Column(_QuickBooksModel):
    title: str = Field(default="", alias="ColTitle")
    col_type: str = Field(default="", alias="ColType")
    metadata: list[MetaDataEntry] = Field(default_factory=list, alias="MetaData")

    def meta(self, name: str) -> str | None:
        for entry in self.metadata:
            if entry.name == name:
                return entry.value
        return None


class ColumnSet(_QuickBooksModel):
    columns: list[Column] = Field(default_factory=list, alias="Column")


class CellBlock(_QuickBooksModel):
    col_data: list[ColDataCell] = Field(default_factory=list, alias="ColData")


class RowSet(_QuickBooksModel):
    rows: list["Row"] = Field(default_factory=list, alias="Row")


class Row(_QuickBooksModel):
    row_type: str | None = Field(default=None, alias="type")
    group: str | None = None
    header: CellBlock | None = Field(default=None, alias="Header")
    col_data: list[ColDataCell] = Field(default_factory=list, alias="ColData")
    children: RowSet | None = Field(default=None, alias="Rows")
    summary: CellBlock | None = Field(default=None, alias="Summary")

    @property
    def child_rows(self) -> list["Row"]:
        return self.children.rows if self.children else []

    @property
    def is_group(self) -> bool:
        return bool(self.group) and bool(self.child_rows)

    @property
    def label(self) -> str:
        if not self.col_data:
            return ""
        return self.col_data[0].value or ""


RowSet.model_rebuild()
Row.model_rebuild()


class ReportHeader(_QuickBooksModel):
    report_name: str | None = Field(default=None, alias="ReportName")
    report_basis: str | None = Field(default=None, alias="ReportBasis")
    start_period: str | None = Field(default=None, alias="StartPeriod")
    end_period: str | None = Field(default=None, alias="EndPeriod")
    currency: str | None = Field(default=None, alias="Currency")


class QuickBooksReport(_QuickBooksModel):
    header: ReportHeader | None = Field(default=None, alias="Header")
    columns: ColumnSet = Field(default_factory=ColumnSet, alias="Columns")
    rows: RowSet = Field(default_factory=RowSet, alias="Rows")


class QuickBooksDocument(_QuickBooksModel):
    source: ClassVar[SourceId] = SourceId.QUICKBOOKS

    data: QuickBooksReport


# --- Rootfi ---


class RootfiLineItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    name: str = ""
    value: Decimal = Decimal("0")
    account_id: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> Decimal:
        return _number_or_none(v) or Decimal("0")


class RootfiCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    value: Decimal = Decimal("0")
    line_items: list[RootfiLineItem] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> Decimal:
        return _number_or_none(v) or Decimal("0")

    @field_validator("line_items", mode="before")
    @classmethod
    def _coerce_line_items(cls, v: Any) -> list:
        return v if isinstance(v, list) else []


# A Rootfi concept is either a list of categories, a bare amount, or absent.
CategoryField = list[RootfiCategory] | Decimal | None


class RootfiPeriod(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rootfi_id: int | None = None
    rootfi_company_id: int | float
    platform_id: str | None = None
    currency_id: str | None = None
    period_start: str
    period_end: str
    revenue: CategoryField = None
    cost_of_goods_sold: CategoryField = None
    gross_profit: CategoryField = None
    operating_expenses: CategoryField = None
    operating_profit: CategoryField = None
    non_operating_revenue: CategoryField = None
    non_operating_expenses: CategoryField = None
    earnings_before_taxes: CategoryField = None
    taxes: CategoryField = None
    net_profit: CategoryField = None

    @field_validator(
        "revenue",
        "cost_of_goods_sold",
        "gross_profit",
        "operating_expenses",
        "operating_profit",
        "non_operating_revenue",
        "non_operating_expenses",
        "earnings_before_taxes",
        "taxes",
        "net_profit",
        mode="before",
    )
    @classmethod
    def _coerce_concept(cls, v: Any) -> Any:
        if isinstance(v, list):
            return v
        return _number_or_none(v)

    def concept(self, source_key: str) -> list[RootfiCategory] | Decimal | None:
        return getattr(self, source_key, None)


class RootfiDocument(BaseModel):
    source: ClassVar[SourceId] = SourceId.ROOTFI

    data: list[RootfiPeriod] = Field(default_factory=list)


SourceDocument = QuickBooksDocument | RootfiDocument
