"""Tests for the ETL orchestrator."""

import copy
import json
from decimal import Decimal

import pytest

from statementflow.exceptions import FetchError, RequestValidationError
from statementflow.models.enums import SourceId
from statementflow.pipeline.orchestrator import ETLOrchestrator, validate_date_param


@pytest.fixture
def documents(quickbooks_raw, rootfi_raw) -> dict:
    return {"quickbooks.json": quickbooks_raw, "rootfi.json": rootfi_raw}


@pytest.fixture
def fetcher(documents):
    def _fetch(location):
        if location not in documents:
            raise FetchError(location, "file not found")
        return copy.deepcopy(documents[location])

    return _fetch


@pytest.fixture
def orchestrator(settings, repo, fetcher) -> ETLOrchestrator:
    return ETLOrchestrator(settings, repo, fetcher)


class TestProcessSource:
    def test_quickbooks(self, orchestrator):
        result = orchestrator.process_source(SourceId.QUICKBOOKS)

        assert result.success is True
        assert result.message == "QuickBooks data processed successfully"
        assert result.results.companies == 1
        assert result.results.report_periods == 2
        assert result.errors is None

    def test_accepts_plain_string(self, orchestrator):
        assert orchestrator.process_source("rootfi").success is True

    def test_fetch_failure(self, orchestrator, settings):
        settings.rootfi.location = "missing.json"
        result = orchestrator.process_source(SourceId.ROOTFI)

        assert result.success is False
        assert result.message.startswith("Rootfi data processing failed:")
        assert result.errors == ["Failed to fetch missing.json: file not found"]
        assert result.results is None

    def test_validation_failure(self, orchestrator, documents, repo):
        documents["rootfi.json"] = {"data": [{"rootfi_company_id": 1, "period_end": "2023-01-31"}]}
        result = orchestrator.process_source(SourceId.ROOTFI)

        assert result.success is False
        assert "Invalid Rootfi data structure" in result.errors[0]
        assert "period_start is missing" in result.errors[0]
        assert repo.count_entities().companies == 0

    def test_unmapped_hook_wired(self, settings, repo, fetcher, documents, make_qb_report, qb_rows):
        documents["quickbooks.json"] = make_qb_report(
            [qb_rows.section("Mystery", [qb_rows.data_row("Widget", "1", "2")])]
        )
        seen = []
        orchestrator = ETLOrchestrator(settings, repo, fetcher, on_unmapped=seen.append)

        assert orchestrator.process_source(SourceId.QUICKBOOKS).success is True
        assert [g.label for g in seen] == ["Widget"]


class TestProcessAll:
    def test_all_succeed(self, orchestrator, repo):
        result = orchestrator.process_all()

        assert result.success is True
        assert result.message == "All data processed successfully"
        assert result.results.companies == 2
        assert result.results.report_periods == 4
        assert result.results.categories == 36
        assert result.results.line_items == 14
        assert repo.count_entities() == result.results

    def test_one_failure_fails_all(self, orchestrator, settings, repo):
        settings.rootfi.location = "missing.json"
        result = orchestrator.process_all()

        assert result.success is False
        assert result.message == "Unified data processing failed"
        assert len(result.errors) == 1
        assert result.results is None
        # QuickBooks was committed before Rootfi failed
        assert repo.count_entities().companies == 1

    def test_errors_concatenated_in_order(self, orchestrator, settings):
        settings.quickbooks.location = "qb-missing.json"
        settings.rootfi.location = "rootfi-missing.json"
        result = orchestrator.process_all()

        assert result.success is False
        assert len(result.errors) == 2
        assert "qb-missing.json" in result.errors[0]
        assert "rootfi-missing.json" in result.errors[1]

    def test_unreadable_file_does_not_stop_other_source(self, settings, repo, tmp_path, rootfi_raw):
        qb_path = tmp_path / "quickbooks.json"
        rf_path = tmp_path / "rootfi.json"
        qb_path.write_bytes(b'{"data": "\xff\xfe"}')
        rf_path.write_text(json.dumps(rootfi_raw))
        settings.quickbooks.location = str(qb_path)
        settings.rootfi.location = str(rf_path)

        result = ETLOrchestrator(settings, repo).process_all()

        assert result.success is False
        assert len(result.errors) == 1
        assert "quickbooks.json" in result.errors[0]
        assert [c.name for c in repo.get_companies()] == ["CompanyB"]

    def test_refresh_replaces_data(self, orchestrator, repo):
        orchestrator.process_all()
        result = orchestrator.refresh()

        assert result.success is True
        assert repo.count_entities().companies == 2


class TestMerge:
    def test_merge_across_sources(self, orchestrator):
        orchestrator.process_all()
        merged = orchestrator.merge_categories_by_date_range("2023-01-01", "2023-01-31")

        assert len(merged) == 9
        income = next(m for m in merged if m.name == "income")
        assert income.value == Decimal("1800.50")
        assert [c.name for c in income.companies] == ["CompanyA", "CompanyB"]
        assert [i.name for i in income.line_items] == [
            "Consulting Fees",
            "Sales",
            "product_a",
            "product_b",
        ]

    def test_bad_date_rejected_before_merge(self, orchestrator):
        class ExplodingMerger:
            def merge(self, start_date, end_date):
                raise AssertionError("merger should not be reached")

        orchestrator.merger = ExplodingMerger()
        with pytest.raises(RequestValidationError, match="YYYY-MM-DD"):
            orchestrator.merge_categories_by_date_range("01-01-2023", "2023-01-31")

    def test_no_matching_periods(self, orchestrator):
        orchestrator.process_all()
        assert orchestrator.merge_categories_by_date_range("2030-01-01", "2030-01-31") == []


class TestQueries:
    def test_statistics_and_dates(self, orchestrator):
        orchestrator.process_all()

        assert orchestrator.get_statistics().report_periods == 4
        dates = orchestrator.get_report_dates()
        assert [d.start_date for d in dates] == ["2023-01-01", "2023-01-01", "2023-02-01", "2023-02-01"]

    def test_categories_by_report_period(self, orchestrator):
        orchestrator.process_all()
        first = orchestrator.get_report_dates()[0]
        categories = orchestrator.get_categories_by_report_period(first.id)
        assert len(categories) == 9

    def test_clear_all_data(self, orchestrator):
        orchestrator.process_all()
        orchestrator.clear_all_data()
        assert orchestrator.get_statistics().companies == 0


class TestValidateDateParam:
    def test_valid(self):
        assert validate_date_param("start_date", "2023-01-01") == "2023-01-01"

    @pytest.mark.parametrize("value", ["01-01-2023", "2023-1-1", "2023-01-01T00:00", "20230101"])
    def test_bad_format(self, value):
        with pytest.raises(RequestValidationError, match="start_date"):
            validate_date_param("start_date", value)

    @pytest.mark.parametrize("value", ["", None])
    def test_missing(self, value):
        with pytest.raises(RequestValidationError, match="is required"):
            validate_date_param("end_date", value)
