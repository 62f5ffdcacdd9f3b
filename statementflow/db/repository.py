"""Data access layer for StatementFlow."""

import logging
import sqlite3
from decimal import Decimal

from statementflow.exceptions import PersistenceError
from statementflow.models.canonical import (
    CATEGORY_KEYS,
    PeriodRecord,
    category_type_for,
    item_type_for,
)
from statementflow.models.results import (
    CompanyRef,
    EntityCounts,
    ReportPeriodRef,
    StoredCategory,
    StoredLineItem,
)

logger = logging.getLogger(__name__)

_CATEGORY_SELECT = """
    SELECT c.id, c.name, c.value, c.category_type,
           rp.id, rp.start_date, rp.end_date,
           co.id, co.name,
           li.id, li.name, li.value, li.account_id, li.item_type
    FROM financial_categories c
    JOIN report_periods rp ON rp.id = c.report_period_id
    JOIN companies co ON co.id = rp.company_id
    LEFT JOIN financial_line_items li ON li.category_id = c.id
"""


class StatementRepository:
    """Persistence and queries for companies, report periods, categories and line items."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Writes ---

    def save_company_data(
        self,
        company_name: str,
        records: list[PeriodRecord],
        period_type: str = "monthly",
    ) -> EntityCounts:
        """Save one company with all its periods in a single transaction.

        Every period gets one row per canonical category, zero-valued or not.
        Returns the counts of the rows written.
        """
        line_item_count = 0
        try:
            cursor = self.conn.execute(
                "INSERT INTO companies (name, description) VALUES (?, ?)",
                (company_name, "Company created from ETL process"),
            )
            company_id = cursor.lastrowid

            for record in records:
                cursor = self.conn.execute(
                    """INSERT INTO report_periods (company_id, start_date, end_date, period_type)
                       VALUES (?, ?, ?, ?)""",
                    (company_id, record.start_date, record.end_date, period_type),
                )
                period_id = cursor.lastrowid

                for key in CATEGORY_KEYS:
                    cursor = self.conn.execute(
                        """INSERT INTO financial_categories
                           (report_period_id, name, value, category_type)
                           VALUES (?, ?, ?, ?)""",
                        (period_id, key.value, str(record.amount(key)), category_type_for(key).value),
                    )
                    category_id = cursor.lastrowid
                    items = record.items_for(key)
                    self.conn.executemany(
                        """INSERT INTO financial_line_items
                           (category_id, name, value, account_id, item_type)
                           VALUES (?, ?, ?, ?, ?)""",
                        [
                            (category_id, item.key, str(item.value), item.account_id, item_type_for(key).value)
                            for item in items
                        ],
                    )
                    line_item_count += len(items)

            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            logger.error("Rolled back save for %s: %s", company_name, exc)
            raise PersistenceError(f"could not save {company_name}: {exc}") from exc

        counts = EntityCounts(
            companies=1,
            report_periods=len(records),
            categories=len(records) * len(CATEGORY_KEYS),
            line_items=line_item_count,
        )
        logger.info("Saved %s: %s", company_name, counts)
        return counts

    def clear_all_data(self) -> None:
        """Delete every company, period, category and line item."""
        try:
            self.conn.execute("DELETE FROM financial_line_items")
            self.conn.execute("DELETE FROM financial_categories")
            self.conn.execute("DELETE FROM report_periods")
            self.conn.execute("DELETE FROM companies")
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise PersistenceError(f"could not clear data: {exc}") from exc

    # --- Queries ---

    def count_entities(self) -> EntityCounts:
        def count(table: str) -> int:
            return self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

        return EntityCounts(
            companies=count("companies"),
            report_periods=count("report_periods"),
            categories=count("financial_categories"),
            line_items=count("financial_line_items"),
        )

    def get_companies(self) -> list[CompanyRef]:
        cursor = self.conn.execute("SELECT id, name FROM companies ORDER BY id")
        return [CompanyRef(id=row[0], name=row[1]) for row in cursor.fetchall()]

    def get_report_periods(self) -> list[ReportPeriodRef]:
        """All report periods with their company, ordered by start date."""
        cursor = self.conn.execute(
            """SELECT rp.id, rp.start_date, rp.end_date, co.id, co.name
               FROM report_periods rp
               JOIN companies co ON co.id = rp.company_id
               ORDER BY rp.start_date, rp.id"""
        )
        return [
            ReportPeriodRef(
                id=row[0],
                start_date=row[1],
                end_date=row[2],
                company=CompanyRef(id=row[3], name=row[4]),
            )
            for row in cursor.fetchall()
        ]

    def find_categories_by_period_bounds(
        self, start_date: str, end_date: str
    ) -> list[StoredCategory]:
        """Categories whose period bounds equal the given dates exactly."""
        cursor = self.conn.execute(
            _CATEGORY_SELECT
            + " WHERE rp.start_date = ? AND rp.end_date = ? ORDER BY co.id, rp.id, c.id, li.id",
            (start_date, end_date),
        )
        return _fold_category_rows(cursor.fetchall())

    def get_categories_by_report_period(self, report_period_id: int) -> list[StoredCategory]:
        cursor = self.conn.execute(
            _CATEGORY_SELECT + " WHERE rp.id = ? ORDER BY c.name, c.id, li.id",
            (report_period_id,),
        )
        return _fold_category_rows(cursor.fetchall())


def _fold_category_rows(rows: list[tuple]) -> list[StoredCategory]:
    """Collapse joined category/line-item rows into categories, keeping row order."""
    categories: list[StoredCategory] = []
    by_id: dict[int, StoredCategory] = {}
    for row in rows:
        category_id = row[0]
        category = by_id.get(category_id)
        if category is None:
            category = StoredCategory(
                id=category_id,
                name=row[1],
                value=Decimal(row[2]),
                category_type=row[3],
                report_period=ReportPeriodRef(
                    id=row[4],
                    start_date=row[5],
                    end_date=row[6],
                    company=CompanyRef(id=row[7], name=row[8]),
                ),
            )
            by_id[category_id] = category
            categories.append(category)
        if row[9] is not None:
            category.line_items.append(
                StoredLineItem(
                    id=row[9],
                    name=row[10],
                    value=Decimal(row[11]),
                    account_id=row[12],
                    item_type=row[13],
                )
            )
    return categories
