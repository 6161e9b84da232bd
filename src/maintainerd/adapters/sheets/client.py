"""Readers for the maintainer worksheet."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from openpyxl import load_workbook
from pydantic import ValidationError

from maintainerd.adapters.http_resilience import ResilientClient
from maintainerd.config.sheets import get_sheets_config
from maintainerd.domain.ports.fetching import WorksheetReader

from .schema import ValueRange

if TYPE_CHECKING:
    from collections.abc import Callable

    from maintainerd.config.http_resilience import ResilienceConfig
    from maintainerd.config.sheets import SheetsConfig

log = getLogger(__name__)


class SheetsAPIError(RuntimeError):
    """Raised when the Sheets API returns an error or an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class SheetsValuesReader:
    """Reads a cell range through the Google Sheets ``values.get`` endpoint."""

    config: SheetsConfig = field(default_factory=get_sheets_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> list[list[object]]:
        return asyncio.run(self._fetch_values_async())

    async def _fetch_values_async(self) -> list[list[object]]:
        path = (
            f"spreadsheets/{quote(self.config.spreadsheet_id, safe='')}"
            f"/values/{quote(self.config.read_range, safe='!:')}"
        )
        async with self.client_factory(self.config.resilience) as client:
            response = await client.get(path, params={"key": self.config.api_key})
        if not response.is_success:
            log.error("Sheets API error %s: %s", response.status_code, response.text)
            raise SheetsAPIError(
                f"Unable to retrieve data from sheet: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            value_range = ValueRange.model_validate(response.json())
        except ValidationError as exc:
            raise SheetsAPIError("Unexpected Sheets API payload") from exc
        log.info(
            "Read %d rows from %s", len(value_range.values), value_range.range or "worksheet"
        )
        return [list(row) for row in value_range.values]


@dataclass(slots=True)
class XlsxWorksheetReader:
    """Reads the maintainer worksheet from a local ``.xlsx`` export."""

    path: Path
    sheet_name: str | None = "Active"

    def __call__(self) -> list[list[object]]:
        workbook = load_workbook(filename=Path(self.path), read_only=True, data_only=True)
        try:
            if self.sheet_name is not None and self.sheet_name in workbook.sheetnames:
                worksheet = workbook[self.sheet_name]
            else:
                worksheet = workbook.worksheets[0]
            rows = [
                ["" if cell is None else cell for cell in row]
                for row in worksheet.iter_rows(values_only=True)
            ]
        finally:
            workbook.close()
        log.info("Read %d rows from %s", len(rows), self.path)
        return rows


if TYPE_CHECKING:
    _sheets_check: WorksheetReader = SheetsValuesReader()
    _xlsx_check: WorksheetReader = XlsxWorksheetReader(Path("maintainers.xlsx"))
