"""Runtime configuration, read from the environment with CLI overrides."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

from statementflow.models.enums import SourceId
from statementflow.normalization.quickbooks import DEFAULT_GROUP

DEFAULT_DB_PATH = Path.home() / ".statementflow" / "statementflow.db"


class SourceSettings(BaseModel):
    source_id: SourceId
    label: str
    company_id: int
    company_name: str
    location: str = ""


class Settings(BaseModel):
    db_path: Path = DEFAULT_DB_PATH
    default_group: str = DEFAULT_GROUP
    fetch_timeout: float | None = None
    quickbooks: SourceSettings = Field(
        default_factory=lambda: SourceSettings(
            source_id=SourceId.QUICKBOOKS,
            label="QuickBooks",
            company_id=1,
            company_name="CompanyA",
        )
    )
    rootfi: SourceSettings = Field(
        default_factory=lambda: SourceSettings(
            source_id=SourceId.ROOTFI,
            label="Rootfi",
            company_id=2,
            company_name="CompanyB",
        )
    )

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls()
        settings.quickbooks.location = os.environ.get("QUICKBOOKS_URL", "")
        settings.rootfi.location = os.environ.get("ROOTFI_URL", "")
        if os.environ.get("STATEMENTFLOW_DB"):
            settings.db_path = Path(os.environ["STATEMENTFLOW_DB"]).expanduser()
        if os.environ.get("STATEMENTFLOW_DEFAULT_GROUP"):
            settings.default_group = os.environ["STATEMENTFLOW_DEFAULT_GROUP"]
        if os.environ.get("STATEMENTFLOW_FETCH_TIMEOUT"):
            settings.fetch_timeout = float(os.environ["STATEMENTFLOW_FETCH_TIMEOUT"])
        return settings

    def source(self, source_id: SourceId) -> SourceSettings:
        return self.quickbooks if source_id == SourceId.QUICKBOOKS else self.rootfi
