"""Pipeline orchestration for StatementFlow."""

from statementflow.pipeline.orchestrator import ETLOrchestrator, validate_date_param

__all__ = ["ETLOrchestrator", "validate_date_param"]
