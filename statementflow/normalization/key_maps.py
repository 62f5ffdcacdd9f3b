"""Source-to-canonical key tables and the shared key resolver."""

from collections.abc import Mapping
from types import MappingProxyType

from statementflow.models.enums import CategoryKey

KeyMap = Mapping[str, CategoryKey]

QUICKBOOKS_UNIFIED_KEYS: KeyMap = MappingProxyType(
    {
        "Income": CategoryKey.INCOME,
        "COGS": CategoryKey.COGS,
        "GrossProfit": CategoryKey.GROSS_PROFIT,
        "Expenses": CategoryKey.EXPENSES,
        "NetOperatingIncome": CategoryKey.OPERATING_INCOME,
        "OtherIncome": CategoryKey.OTHER_INCOME,
        "OtherExpenses": CategoryKey.OTHER_EXPENSES,
        "NetOtherIncome": CategoryKey.NET_OTHER_INCOME,
        "NetIncome": CategoryKey.NET_INCOME,
    }
)

ROOTFI_UNIFIED_KEYS: KeyMap = MappingProxyType(
    {
        "revenue": CategoryKey.INCOME,
        "cost_of_goods_sold": CategoryKey.COGS,
        "gross_profit": CategoryKey.GROSS_PROFIT,
        "operating_expenses": CategoryKey.EXPENSES,
        "operating_profit": CategoryKey.OPERATING_INCOME,
        "non_operating_revenue": CategoryKey.OTHER_INCOME,
        "non_operating_expenses": CategoryKey.OTHER_EXPENSES,
        "earnings_before_taxes": CategoryKey.NET_OTHER_INCOME,
        "taxes": CategoryKey.TAXES,
        "net_profit": CategoryKey.NET_INCOME,
    }
)


def resolve_key(key_map: KeyMap, name: str | None) -> CategoryKey | None:
    """Resolve a source label to a canonical key: exact match, then case-insensitive."""
    if not name:
        return None
    if name in key_map:
        return key_map[name]
    lowered = name.lower()
    for source_key, canonical in key_map.items():
        if source_key.lower() == lowered:
            return canonical
    return None
