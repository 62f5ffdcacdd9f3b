"""Merged category and database statistics text reports."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from statementflow.models.results import EntityCounts, MergedCategory

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _environment() -> Environment:
    return Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), trim_blocks=True, lstrip_blocks=True)


class MergedCategoryReportGenerator:
    """Renders merged categories for a period as a plain-text report."""

    def __init__(self) -> None:
        self.env = _environment()

    def render(self, start_date: str, end_date: str, categories: list[MergedCategory]) -> str:
        template = self.env.get_template("merged_categories.txt")
        return template.render(start_date=start_date, end_date=end_date, categories=categories)


class StatisticsReportGenerator:
    """Renders database entity counts as a plain-text summary."""

    def __init__(self) -> None:
        self.env = _environment()

    def render(self, stats: EntityCounts) -> str:
        template = self.env.get_template("statistics.txt")
        return template.render(stats=stats)
