"""Ingestion: retrieval of raw provider documents."""

from statementflow.ingestion.fetch import Fetcher, fetch_json

__all__ = ["Fetcher", "fetch_json"]
