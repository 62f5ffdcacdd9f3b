"""Label cleaning and amount parsing helpers shared by the normalizers."""

import re
from decimal import Decimal, InvalidOperation

from statementflow.models.enums import LineType


def clean_line_item_title(title: str) -> str:
    """Normalize a line item title into a stable snake_case key.

    "Product A" -> "product_a", "R&D (Labs)" -> "randd_labs".
    """
    cleaned = title.lower().replace("&", "and")
    cleaned = re.sub(r"[()]", "", cleaned)
    cleaned = re.sub(r"\s+", "_", cleaned)
    return re.sub(r"[^a-z0-9_]", "", cleaned)


def classify_line(label: str) -> LineType:
    """Classify a row label. First matching prefix wins."""
    lower = label.strip().lower()
    if lower.startswith("summary"):
        return LineType.SUMMARY
    if lower.startswith("net"):
        return LineType.SUMMARY
    if lower.startswith("total "):
        return LineType.TOTAL
    return LineType.NORMAL


def parse_amount(raw: str | None) -> Decimal | None:
    """Parse a report cell into a Decimal.

    Missing or blank cells are zero. Returns None when the cell holds text
    that is not a finite number.
    """
    if raw is None:
        return Decimal("0")
    s = raw.strip()
    if not s:
        return Decimal("0")
    try:
        value = Decimal(s)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
