"""Normalization layer: provider documents into canonical period records."""

from statementflow.normalization.base import BaseNormalizer, UnmappedGroup
from statementflow.normalization.key_maps import (
    QUICKBOOKS_UNIFIED_KEYS,
    ROOTFI_UNIFIED_KEYS,
    resolve_key,
)
from statementflow.normalization.merge import CategoryMerger, merge_categories
from statementflow.normalization.quickbooks import QuickBooksNormalizer
from statementflow.normalization.rootfi import RootfiNormalizer

__all__ = [
    "BaseNormalizer",
    "CategoryMerger",
    "QUICKBOOKS_UNIFIED_KEYS",
    "QuickBooksNormalizer",
    "ROOTFI_UNIFIED_KEYS",
    "RootfiNormalizer",
    "UnmappedGroup",
    "merge_categories",
    "resolve_key",
]
