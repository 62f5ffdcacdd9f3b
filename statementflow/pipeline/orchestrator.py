"""ETL orchestration: fetch, validate, normalize and persist each source."""

import logging
import re
from functools import partial

from statementflow.config import Settings
from statementflow.db.repository import StatementRepository
from statementflow.exceptions import (
    RequestValidationError,
    SourceValidationError,
    StatementFlowError,
)
from statementflow.ingestion.fetch import Fetcher, fetch_json
from statementflow.models.enums import SourceId
from statementflow.models.results import (
    EntityCounts,
    ETLResult,
    MergedCategory,
    ReportPeriodRef,
    StoredCategory,
)
from statementflow.normalization.base import BaseNormalizer, UnmappedHook
from statementflow.normalization.key_maps import QUICKBOOKS_UNIFIED_KEYS, ROOTFI_UNIFIED_KEYS
from statementflow.normalization.merge import CategoryMerger
from statementflow.normalization.quickbooks import QuickBooksNormalizer
from statementflow.normalization.rootfi import RootfiNormalizer

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Sources are always processed in this order, one after the other.
SOURCE_ORDER = (SourceId.QUICKBOOKS, SourceId.ROOTFI)


def validate_date_param(field: str, value: str | None) -> str:
    """Require a strict YYYY-MM-DD date string."""
    if not value:
        raise RequestValidationError(field, "is required")
    if not DATE_PATTERN.fullmatch(value):
        raise RequestValidationError(field, f"{value!r} must be in YYYY-MM-DD format")
    return value


class ETLOrchestrator:
    """Runs the per-source pipelines and answers queries over the stored data."""

    def __init__(
        self,
        settings: Settings,
        repository: StatementRepository,
        fetcher: Fetcher | None = None,
        *,
        on_unmapped: UnmappedHook | None = None,
    ):
        self.settings = settings
        self.repository = repository
        self.fetcher = fetcher or partial(fetch_json, timeout=settings.fetch_timeout)
        self.normalizers: dict[SourceId, BaseNormalizer] = {
            SourceId.QUICKBOOKS: QuickBooksNormalizer(
                QUICKBOOKS_UNIFIED_KEYS,
                company_id=settings.quickbooks.company_id,
                default_group=settings.default_group,
                on_unmapped=on_unmapped,
            ),
            SourceId.ROOTFI: RootfiNormalizer(
                ROOTFI_UNIFIED_KEYS,
                company_id=settings.rootfi.company_id,
                on_unmapped=on_unmapped,
            ),
        }
        self.merger = CategoryMerger(repository)

    # --- Processing ---

    def process_source(self, source_id: SourceId | str) -> ETLResult:
        """Fetch, validate, normalize and save one source. Never raises pipeline errors."""
        source_id = SourceId(source_id)
        source = self.settings.source(source_id)
        normalizer = self.normalizers[source_id]
        logger.info("Processing %s data...", source.label)

        try:
            raw = self.fetcher(source.location)
            errors = normalizer.validate(raw)
            if errors:
                raise SourceValidationError(source.label, errors)
            document = normalizer.parse(raw)
            records = normalizer.normalize(document)
            counts = self.repository.save_company_data(source.company_name, records)
        except StatementFlowError as exc:
            logger.error("%s data processing failed: %s", source.label, exc)
            return ETLResult(
                success=False,
                message=f"{source.label} data processing failed: {exc}",
                errors=[str(exc)],
            )

        logger.info("%s data processing completed", source.label)
        return ETLResult(
            success=True,
            message=f"{source.label} data processed successfully",
            results=counts,
        )

    def process_all(self) -> ETLResult:
        """Process every source in order. Succeeds only if all of them do."""
        outcomes = [self.process_source(source_id) for source_id in SOURCE_ORDER]

        if not all(outcome.success for outcome in outcomes):
            return ETLResult(
                success=False,
                message="Unified data processing failed",
                errors=[error for outcome in outcomes for error in outcome.errors or []],
            )

        combined = EntityCounts()
        for outcome in outcomes:
            combined = combined + (outcome.results or EntityCounts())
        return ETLResult(
            success=True,
            message="All data processed successfully",
            results=combined,
        )

    def refresh(self) -> ETLResult:
        """Clear all stored data and re-run every source."""
        self.clear_all_data()
        return self.process_all()

    # --- Queries ---

    def merge_categories_by_date_range(self, start_date: str, end_date: str) -> list[MergedCategory]:
        validate_date_param("start_date", start_date)
        validate_date_param("end_date", end_date)
        return self.merger.merge(start_date, end_date)

    def get_statistics(self) -> EntityCounts:
        return self.repository.count_entities()

    def get_report_dates(self) -> list[ReportPeriodRef]:
        return self.repository.get_report_periods()

    def get_categories_by_report_period(self, report_period_id: int) -> list[StoredCategory]:
        return self.repository.get_categories_by_report_period(report_period_id)

    def clear_all_data(self) -> None:
        logger.info("Clearing all data from database")
        self.repository.clear_all_data()
