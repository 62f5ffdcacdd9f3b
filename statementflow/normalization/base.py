"""Base normalizer interface shared by the provider-specific normalizers."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from statementflow.exceptions import DocumentStructureError
from statementflow.models.canonical import PeriodRecord
from statementflow.models.enums import SourceId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnmappedGroup:
    """A row or category whose group could not be resolved to a canonical key."""

    source: SourceId
    group: str
    label: str
    kind: str  # "line" or "summary"


UnmappedHook = Callable[[UnmappedGroup], None]


class BaseNormalizer(ABC):
    """Abstract base class for all source normalizers."""

    source: SourceId
    document_model: type[BaseModel]

    def __init__(self, *, company_id: int, on_unmapped: UnmappedHook | None = None):
        self.company_id = company_id
        self.on_unmapped = on_unmapped

    def parse(self, raw: Any) -> Any:
        """Read a raw JSON document into the source's typed schema."""
        try:
            return self.document_model.model_validate(raw)
        except ValidationError as exc:
            raise DocumentStructureError(self.source.value, str(exc)) from exc

    def validate(self, raw: Any) -> list[str]:
        """Structural pre-validation. Returns a list of validation error messages."""
        return []

    @abstractmethod
    def normalize(self, document: Any) -> list[PeriodRecord]:
        """Transform a parsed document into canonical period records."""
        ...

    def _report_unmapped(self, group: str, label: str, kind: str) -> None:
        logger.debug("Dropping unmapped %s %r in group %r (%s)", kind, label, group, self.source)
        if self.on_unmapped is not None:
            self.on_unmapped(UnmappedGroup(source=self.source, group=group, label=label, kind=kind))
