"""
Workbook Parser - Runs the full extraction pipeline over one workbook

  load -> RESTAURANTES / DISCOTECAS (units + KPI rows + results)
       -> weight normalization -> ROI/TIR matching -> ParsedScorecard

Single pass, no persistence. The only fatal condition is a workbook that has
neither scorecard sheet (or can't be opened at all); everything else is
logged to the diagnostic log and skipped.
"""

import math
from collections import OrderedDict
from typing import Any, Dict, List, Optional
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException

from scorecard.config import Settings, get_settings
from scorecard.models import (
    KpiDef,
    KpiResult,
    ParsedScorecard,
    RoiTirData,
    Unit,
    UnitPeriodData,
    UnitType,
)
from scorecard.modules.kpi_scanner import DEFAULT_AREAS, kpi_id, scan_kpi_rows
from scorecard.modules.logger import DiagnosticLog, get_logger
from scorecard.modules.matrix_loader import SheetMatrix, load_workbook_bytes, sheet_to_matrix
from scorecard.modules.roi_matcher import match_roi_blocks
from scorecard.modules.unit_locator import get_unit_columns
from scorecard.modules.value_normalizer import as_number
from scorecard.modules.weight_normalizer import normalize_weights


class WorkbookFormatError(ValueError):
    """Workbook can't be used at all (unreadable, or no scorecard sheets)."""


def _raw_cell(value: Any):
    """Keep numbers and text as-is; anything else (dates, bools) as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value if math.isfinite(value) else None
    return str(value)


def _cell(matrix: SheetMatrix, r: int, c: int) -> Any:
    if r >= len(matrix) or c < 0:
        return None
    row = matrix[r]
    return row[c] if c < len(row) else None


class ScorecardParser:
    """Parses scorecard workbooks. Every parse() starts from empty state."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger()
        self._reset()

    def _reset(self):
        self.log = DiagnosticLog()
        self._kpis: "OrderedDict[str, KpiDef]" = OrderedDict()
        self._units: "OrderedDict[str, Unit]" = OrderedDict()
        self._unit_data: List[UnitPeriodData] = []

    def parse(self, data: bytes) -> ParsedScorecard:
        """
        Parse workbook bytes into a ParsedScorecard.

        Raises:
            WorkbookFormatError: unreadable buffer, or neither scorecard sheet present
        """
        s = self.settings
        self._reset()

        self.logger.step_start("Load workbook")
        try:
            wb = load_workbook_bytes(data)
        except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
            self.logger.step_end("Load workbook", success=False, details=str(e))
            raise WorkbookFormatError(f"Could not open workbook: {e}") from e

        sheet_types = [(s.restaurant_sheet, "restaurant"), (s.disco_sheet, "disco")]
        present = [(name, t) for name, t in sheet_types if name in wb.sheetnames]
        if not present:
            self.logger.step_end("Load workbook", success=False, details="no scorecard sheets")
            raise WorkbookFormatError(
                f"No encontré hojas '{s.restaurant_sheet}' ni '{s.disco_sheet}'."
            )
        self.logger.step_end("Load workbook", details=", ".join(wb.sheetnames))

        for sheet_name, unit_type in present:
            self.logger.step_start(f"Sheet {sheet_name}")
            self._parse_sheet(sheet_to_matrix(wb[sheet_name]), unit_type)
            self.logger.step_end(f"Sheet {sheet_name}")

        kpis = normalize_weights(list(self._kpis.values()))

        roi_records: Dict[str, RoiTirData] = {}
        if s.roi_sheet in wb.sheetnames:
            self.logger.step_start("ROI/TIR matching")
            roi_records = self._attach_roi(sheet_to_matrix(wb[s.roi_sheet]))
            self.logger.step_end("ROI/TIR matching", details=f"{len(roi_records)} records")

        return ParsedScorecard(
            areas=list(DEFAULT_AREAS),
            kpis=kpis,
            units=list(self._units.values()),
            unit_data=list(self._unit_data),
            roi_tir=roi_records,
            debug_logs=self.log.entries,
        )

    def _parse_sheet(self, matrix: SheetMatrix, unit_type: UnitType):
        s = self.settings
        sheet_units, cols = get_unit_columns(matrix, self.log, unit_type,
                                             name_row=s.name_row, header_row=s.header_row)
        scan = scan_kpi_rows(matrix, first_data_row=s.first_data_row)

        self.log.add(f"--- Sheet {unit_type} ---")
        self.log.add(f"Found {len(sheet_units)} units: {', '.join(u.name for u in sheet_units)}")
        self.log.extend(scan.logs)

        row_ids = []
        for row in scan.rows:
            kid = kpi_id(unit_type, row.area_id, row.name)
            row_ids.append((row, kid))
            if kid not in self._kpis:
                self._kpis[kid] = KpiDef(
                    id=kid,
                    area_id=row.area_id,
                    name=row.name,
                    weight_in_area=row.weight_in_area,
                    operator=row.operator,
                    param=row.param,
                )

        # unit_id -> running sum of CALIFICACION points
        source_scores: Dict[str, float] = {}

        for unit, col in zip(sheet_units, cols):
            if unit.id in self._units:
                self.log.add(f"Unit \"{unit.name}\" already known, skipping duplicate column {col.score_col}")
                continue

            results: Dict[str, KpiResult] = {}
            for row, kid in row_ids:
                raw_score = _cell(matrix, row.row_idx, col.score_col)
                raw_indicator = _cell(matrix, row.row_idx, col.indicator_col)
                value = as_number(raw_score)
                self.logger.extraction(f"{unit.name} / {row.name}", raw_score, f"R{row.row_idx}:C{col.score_col}")

                if value is not None:
                    source_scores[unit.id] = source_scores.get(unit.id, 0.0) + value

                results[kid] = KpiResult(kpi_id=kid, value=value, raw_value=_raw_cell(raw_indicator))

            scored_unit = unit.model_copy(update={"excel_score": source_scores.get(unit.id)})
            self._units[unit.id] = scored_unit
            self._unit_data.append(UnitPeriodData(unit_id=unit.id, results=results))

            total = scored_unit.excel_score or 0.0
            self.log.add(f"FINAL SUMMATION SCORE for {unit.name}: {total:.4f} ({total * 100:.2f}%)")

    def _attach_roi(self, matrix: SheetMatrix) -> Dict[str, RoiTirData]:
        records, attachments = match_roi_blocks(matrix, list(self._units.values()), self.log,
                                                label_col=self.settings.roi_label_col)
        for unit_id, record_id in attachments.items():
            self._units[unit_id] = self._units[unit_id].model_copy(update={"roi_tir_id": record_id})
        return records


def parse_scorecard_workbook(data: bytes, settings: Optional[Settings] = None) -> ParsedScorecard:
    """Parse an in-memory scorecard workbook."""
    return ScorecardParser(settings).parse(data)
