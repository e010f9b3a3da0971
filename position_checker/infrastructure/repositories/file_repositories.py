"""File-backed repositories for position snapshots."""
from __future__ import annotations

import json
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd

from position_checker.domain.models import PositionSnapshot
from position_checker.domain.repositories import PositionRepository
from position_checker.infrastructure.parsing.positions import (
    snapshots_from_dataframe,
    snapshots_from_payloads,
    unwrap_positions_response,
)
from position_checker.infrastructure.parsing.utils import PayloadError, ensure_bytes


class JsonPositionRepository(PositionRepository):
    """Reads a positions API response (or a bare list of positions) saved as JSON."""

    def __init__(self, source: BytesIO | Path | bytes) -> None:
        self._source = ensure_bytes(source)

    def list_positions(self) -> Sequence[PositionSnapshot]:
        try:
            document = json.loads(self._source.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PayloadError(f"Invalid positions JSON: {exc}") from exc
        return snapshots_from_payloads(unwrap_positions_response(document))


class CsvPositionRepository(PositionRepository):
    def __init__(self, source: BytesIO | Path | bytes) -> None:
        self._source = ensure_bytes(source)

    def list_positions(self) -> Sequence[PositionSnapshot]:
        try:
            dataframe = pd.read_csv(BytesIO(self._source), dtype=str, keep_default_na=True)
        except ValueError as exc:
            raise PayloadError(f"Invalid positions CSV: {exc}") from exc
        return snapshots_from_dataframe(dataframe)


class ExcelPositionRepository(PositionRepository):
    def __init__(self, source: BytesIO | Path | bytes, sheet_name: str | int = 0) -> None:
        self._source = ensure_bytes(source)
        self._sheet_name = sheet_name

    def list_positions(self) -> Sequence[PositionSnapshot]:
        try:
            dataframe = pd.read_excel(
                BytesIO(self._source),
                sheet_name=self._sheet_name,
                engine="openpyxl",
                dtype=str,
            )
        except (ValueError, zipfile.BadZipFile) as exc:
            raise PayloadError(f"Invalid positions workbook: {exc}") from exc
        return snapshots_from_dataframe(dataframe)


def repository_for(name: str, source: BytesIO | Path | bytes) -> PositionRepository:
    """Pick a repository from the file name's suffix."""
    suffix = Path(name).suffix.lower()
    if suffix == ".json":
        return JsonPositionRepository(source)
    if suffix == ".csv":
        return CsvPositionRepository(source)
    if suffix in {".xlsx", ".xlsm"}:
        return ExcelPositionRepository(source)
    raise PayloadError(f"Unsupported positions file type: {name}")
