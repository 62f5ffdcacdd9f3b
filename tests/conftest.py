"""Shared test fixtures for StatementFlow."""

import json
from types import SimpleNamespace

import pytest

from statementflow.config import Settings
from statementflow.db.repository import StatementRepository
from statementflow.db.schema import create_schema

JANUARY = ("2023-01-01", "2023-01-31")
FEBRUARY = ("2023-02-01", "2023-02-28")


def _money_column(title: str, start: str | None, end: str | None) -> dict:
    metadata = []
    if start:
        metadata.append({"Name": "StartDate", "Value": start})
    if end:
        metadata.append({"Name": "EndDate", "Value": end})
    metadata.append({"Name": "ColKey", "Value": title})
    return {"ColTitle": title, "ColType": "Money", "MetaData": metadata}


def _cells(label: str, *values: str, account_id: str | None = None) -> list[dict]:
    first = {"value": label}
    if account_id is not None:
        first["id"] = account_id
    return [first] + [{"value": v} for v in values]


def data_row(label: str, *values: str, account_id: str | None = None) -> dict:
    return {"type": "Data", "ColData": _cells(label, *values, account_id=account_id)}


def section(group: str | None, rows: list[dict] | None = None, summary: list | None = None) -> dict:
    row: dict = {"type": "Section"}
    if group:
        row["group"] = group
        row["Header"] = {"ColData": [{"value": group}]}
    if rows:
        row["Rows"] = {"Row": rows}
    if summary:
        row["Summary"] = {"ColData": _cells(*summary)}
    return row


@pytest.fixture
def qb_rows() -> SimpleNamespace:
    """Row builders for hand-made QuickBooks reports."""
    return SimpleNamespace(section=section, data_row=data_row, money_column=_money_column)


@pytest.fixture
def make_qb_report():
    """Factory for QuickBooks profit-and-loss documents."""

    def _make(rows: list[dict], periods=(JANUARY, FEBRUARY), extra_columns=()) -> dict:
        columns = [{"ColTitle": "", "ColType": "Account", "MetaData": [{"Name": "ColKey", "Value": "account"}]}]
        columns.extend(extra_columns)
        for start, end in periods:
            columns.append(_money_column(start[:7], start, end))
        return {
            "data": {
                "Header": {
                    "ReportName": "ProfitAndLoss",
                    "ReportBasis": "Accrual",
                    "StartPeriod": periods[0][0] if periods else None,
                    "EndPeriod": periods[-1][1] if periods else None,
                    "Currency": "USD",
                },
                "Columns": {"Column": columns},
                "Rows": {"Row": rows},
            }
        }

    return _make


@pytest.fixture
def quickbooks_raw(make_qb_report) -> dict:
    """Two monthly periods with income, COGS, expenses and computed subtotals."""
    return make_qb_report(
        [
            section(
                "Income",
                [
                    data_row("Consulting Fees", "100", "150", account_id="1"),
                    data_row("Sales", "200.50", "0", account_id="2"),
                ],
                ["Total Income", "300.50", "150.00"],
            ),
            section(
                "COGS",
                [data_row("Cost of Goods Sold", "50", "25", account_id="3")],
                ["Total Cost of Goods Sold", "50.00", "25.00"],
            ),
            section("GrossProfit", summary=["Gross Profit", "250.50", "125.00"]),
            section(
                "Expenses",
                [
                    section(
                        None,
                        [data_row("Salaries", "80", "90", account_id="4")],
                        ["Total Payroll", "80.00", "90.00"],
                    ),
                    data_row("Rent", "20", "20", account_id="5"),
                ],
                ["Total Expenses", "100.00", "110.00"],
            ),
            section("NetIncome", summary=["Net Income", "150.50", "15.00"]),
        ]
    )


@pytest.fixture
def rootfi_raw() -> dict:
    """Two Rootfi periods; the first has a multi-element revenue array."""
    return {
        "data": [
            {
                "rootfi_id": 101,
                "rootfi_company_id": 42,
                "platform_id": "xero-1",
                "currency_id": "USD",
                "period_start": "2023-01-01",
                "period_end": "2023-01-31",
                "revenue": [
                    {
                        "name": "Sales",
                        "value": 1000,
                        "line_items": [
                            {"name": "Product A", "value": 600, "account_id": "a1"},
                            {"name": "Product B", "value": 400, "account_id": "a2"},
                        ],
                    },
                    {
                        "name": "Services",
                        "value": 500,
                        "line_items": [{"name": "Consulting", "value": 500}],
                    },
                ],
                "cost_of_goods_sold": [{"name": "COGS", "value": 300, "line_items": []}],
                "gross_profit": 1200,
                "operating_expenses": [
                    {"name": "Opex", "value": 700, "line_items": [{"name": "R&D (Labs)", "value": 700}]}
                ],
                "operating_profit": 500,
                "non_operating_revenue": None,
                "non_operating_expenses": "n/a",
                "earnings_before_taxes": 500,
                "taxes": 100,
                "net_profit": 400,
            },
            {
                "rootfi_id": 102,
                "rootfi_company_id": 42,
                "period_start": "2023-02-01",
                "period_end": "2023-02-28",
                "revenue": [
                    {"name": "Sales", "value": 250, "line_items": [{"name": "Product A", "value": 250}]}
                ],
                "net_profit": 250,
            },
        ]
    }


@pytest.fixture
def db_conn(tmp_path):
    db_path = tmp_path / "test.db"
    conn = create_schema(db_path)
    yield conn
    conn.close()


@pytest.fixture
def repo(db_conn):
    return StatementRepository(db_conn)


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(db_path=tmp_path / "test.db")
    s.quickbooks.location = "quickbooks.json"
    s.rootfi.location = "rootfi.json"
    return s


@pytest.fixture
def source_files(tmp_path, quickbooks_raw, rootfi_raw):
    """Write both source documents to disk. Returns (quickbooks_path, rootfi_path)."""
    qb_path = tmp_path / "quickbooks.json"
    rf_path = tmp_path / "rootfi.json"
    qb_path.write_text(json.dumps(quickbooks_raw))
    rf_path.write_text(json.dumps(rootfi_raw))
    return qb_path, rf_path
