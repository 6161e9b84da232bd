"""Worksheet readers for the maintainer registry import."""

from __future__ import annotations

from .client import SheetsAPIError, SheetsValuesReader, XlsxWorksheetReader
from .schema import ValueRange

__all__ = ["SheetsAPIError", "SheetsValuesReader", "ValueRange", "XlsxWorksheetReader"]
