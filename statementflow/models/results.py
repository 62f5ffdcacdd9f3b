"""Pipeline result, storage row, and merge output models."""

from decimal import Decimal

from pydantic import BaseModel, Field


class EntityCounts(BaseModel):
    companies: int = 0
    report_periods: int = 0
    categories: int = 0
    line_items: int = 0

    def __add__(self, other: "EntityCounts") -> "EntityCounts":
        return EntityCounts(
            companies=self.companies + other.companies,
            report_periods=self.report_periods + other.report_periods,
            categories=self.categories + other.categories,
            line_items=self.line_items + other.line_items,
        )


class ETLResult(BaseModel):
    success: bool
    message: str
    results: EntityCounts | None = None
    errors: list[str] | None = None


class ReportDate(BaseModel):
    start_date: str
    end_date: str


class CompanyRef(BaseModel):
    id: int
    name: str


class ReportPeriodRef(BaseModel):
    id: int
    start_date: str
    end_date: str
    company: CompanyRef


class StoredLineItem(BaseModel):
    id: int
    name: str
    value: Decimal
    account_id: str | None = None
    item_type: str | None = None


class StoredCategory(BaseModel):
    """A persisted category row, joined with its line items, period and company."""

    id: int
    name: str
    value: Decimal
    category_type: str | None = None
    line_items: list[StoredLineItem] = Field(default_factory=list)
    report_period: ReportPeriodRef


class MergedCategory(BaseModel):
    """Categories sharing a name, aggregated across companies and periods."""

    id: str
    name: str
    value: Decimal
    category_type: str | None = None
    line_items: list[StoredLineItem] = Field(default_factory=list)
    report_periods: list[ReportPeriodRef] = Field(default_factory=list)
    companies: list[CompanyRef] = Field(default_factory=list)


class SourceStatistics(BaseModel):
    total_periods: int
    start: str = ""
    end: str = ""
    companies: list[int | float] = Field(default_factory=list)
