"""
Unit-Column Locator - Finds business units across the header rows of a sheet

Layout (zero-based rows):
  Row 0: sheet title ("RESTAURANTES" / "DISCOTECAS")
  Row 1: unit names, one per INDICADOR column
  Row 2: headers INDICADOR / CALIFICACION alternating per unit
The unit name sits one column left of its CALIFICACION header.
"""

import json
import re
from dataclasses import dataclass
from typing import List, Tuple

from slugify import slugify

from scorecard.models import Unit, UnitType
from scorecard.modules.logger import DiagnosticLog
from scorecard.modules.matrix_loader import SheetMatrix
from scorecard.modules.value_normalizer import as_string


SCORE_HEADER = re.compile(r'^CALIFICACI[OÓ]N$', re.IGNORECASE)
NAME_NOISE = re.compile(r'PESO|AREA|INDICADOR|PARAM', re.IGNORECASE)


@dataclass(frozen=True)
class UnitColumn:
    """Where a unit's values live on the sheet."""
    unit_id: str
    unit_name: str
    score_col: int

    @property
    def indicator_col(self) -> int:
        return self.score_col - 1


def unit_slug(name: str) -> str:
    """Stable unit id: lowercase, underscores, accents folded."""
    return slugify(name, separator="_")


def _preview(row: list, limit: int = 12) -> str:
    return " | ".join(f"C{i}={json.dumps(v, default=str, ensure_ascii=False)}"
                      for i, v in enumerate(row[:limit]))


def get_unit_columns(matrix: SheetMatrix, log: DiagnosticLog,
                     unit_type: UnitType = "restaurant",
                     name_row: int = 1, header_row: int = 2) -> Tuple[List[Unit], List[UnitColumn]]:
    """
    Discover units and their score columns from the name/header rows.

    Returns units and columns in sheet order. Duplicates (same slug) keep the
    first occurrence.
    """
    name_cells = matrix[name_row] if name_row < len(matrix) else []
    header_cells = matrix[header_row] if header_row < len(matrix) else []

    log.add(f"get_unit_columns: nameRow({name_row}) first 12 cols: {_preview(name_cells)}")
    log.add(f"get_unit_columns: headerRow({header_row}) first 12 cols: {_preview(header_cells)}")

    units: List[Unit] = []
    cols: List[UnitColumn] = []
    seen = set()

    for c, header in enumerate(header_cells):
        if not SCORE_HEADER.match(as_string(header)):
            continue

        name_col = c - 1
        unit_name = as_string(name_cells[name_col]) if 0 <= name_col < len(name_cells) else ""
        log.add(f"  Found CALIFICACION at col {c}, nameRow[{name_col}] = \"{unit_name}\"")

        if len(unit_name) < 2:
            log.add("    SKIPPED: empty or short name")
            continue
        if NAME_NOISE.search(unit_name):
            log.add("    SKIPPED: filtered word")
            continue

        unit_id = unit_slug(unit_name)
        if not unit_id:
            log.add("    SKIPPED: name has no usable characters")
            continue
        if unit_id in seen:
            log.add(f"    SKIPPED: duplicate unit {unit_id}")
            continue

        seen.add(unit_id)
        cols.append(UnitColumn(unit_id=unit_id, unit_name=unit_name, score_col=c))
        units.append(Unit(id=unit_id, name=unit_name, type=unit_type))
        log.add(f"    ADDED unit: {unit_name}")

    return units, cols
