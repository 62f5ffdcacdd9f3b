"""Text report generators for StatementFlow."""

from statementflow.reports.merged_categories import (
    MergedCategoryReportGenerator,
    StatisticsReportGenerator,
)

__all__ = ["MergedCategoryReportGenerator", "StatisticsReportGenerator"]
