"""Canonical, source-independent income statement models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statementflow.models.enums import CategoryKey, CategoryType, ItemType

# Fixed, ordered set of persisted categories. Every PeriodRecord carries all nine.
CATEGORY_KEYS: tuple[CategoryKey, ...] = (
    CategoryKey.INCOME,
    CategoryKey.COGS,
    CategoryKey.GROSS_PROFIT,
    CategoryKey.EXPENSES,
    CategoryKey.OPERATING_INCOME,
    CategoryKey.OTHER_INCOME,
    CategoryKey.OTHER_EXPENSES,
    CategoryKey.NET_OTHER_INCOME,
    CategoryKey.NET_INCOME,
)

_INCOME_KEYS = frozenset({CategoryKey.INCOME, CategoryKey.OTHER_INCOME})
_EXPENSE_KEYS = frozenset({CategoryKey.COGS, CategoryKey.EXPENSES, CategoryKey.OTHER_EXPENSES})
_PROFIT_KEYS = frozenset(
    {
        CategoryKey.GROSS_PROFIT,
        CategoryKey.OPERATING_INCOME,
        CategoryKey.NET_OTHER_INCOME,
        CategoryKey.NET_INCOME,
    }
)


def category_type_for(key: str) -> CategoryType:
    """Classify a category key as income, expense, or profit."""
    if key in _INCOME_KEYS:
        return CategoryType.INCOME
    if key in _EXPENSE_KEYS:
        return CategoryType.EXPENSE
    if key in _PROFIT_KEYS:
        return CategoryType.PROFIT
    return CategoryType.OTHER


def item_type_for(key: str) -> ItemType:
    """Classify the line items under a category key."""
    if key in _INCOME_KEYS:
        return ItemType.REVENUE
    if key in _EXPENSE_KEYS:
        return ItemType.EXPENSE
    return ItemType.OTHER


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: Decimal
    original_name: str | None = None
    account_id: str | None = None


class PeriodRecord(BaseModel):
    """One reporting interval for one company, in canonical form."""

    model_config = ConfigDict(frozen=True)

    company_id: int
    start_date: str
    end_date: str
    income: Decimal = Decimal("0")
    cogs: Decimal = Decimal("0")
    gross_profit: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    operating_income: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    other_expenses: Decimal = Decimal("0")
    net_other_income: Decimal = Decimal("0")
    net_income: Decimal = Decimal("0")
    taxes: Decimal | None = None
    line_items: dict[CategoryKey, list[LineItem]] = Field(default_factory=dict)

    @field_validator("line_items", mode="after")
    @classmethod
    def _fill_category_keys(
        cls, v: dict[CategoryKey, list[LineItem]]
    ) -> dict[CategoryKey, list[LineItem]]:
        filled = {key: list(v.get(key, [])) for key in CATEGORY_KEYS}
        for key, items in v.items():
            if key not in filled:
                filled[key] = list(items)
        return filled

    def amount(self, key: CategoryKey) -> Decimal:
        value = getattr(self, key.value)
        return value if value is not None else Decimal("0")

    def items_for(self, key: CategoryKey) -> list[LineItem]:
        return self.line_items.get(key, [])

    @property
    def category_values(self) -> dict[CategoryKey, Decimal]:
        return {key: self.amount(key) for key in CATEGORY_KEYS}
