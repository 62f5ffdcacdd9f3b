"""Database layer for StatementFlow."""

from statementflow.db.repository import StatementRepository
from statementflow.db.schema import create_schema

__all__ = ["StatementRepository", "create_schema"]
