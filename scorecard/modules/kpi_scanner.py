"""
KPI Row Scanner - Reads area blocks and KPI definitions from a scorecard sheet

Column structure of every data row:
  C0: area weight (0.65)
  C1: area name ("ECONOMICO") - only on the first row of each area
  C2: KPI weight inside the area (0.07)
  C3: KPI name ("CRECIMIENTO VENTAS")
  C4: operator (">")
  C5: parameter / threshold (0.03)
  C6+: INDICADOR / CALIFICACION pairs, one per unit
"""

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern

from slugify import slugify

from scorecard.models import AreaDef, AreaId, Operator, UnitType
from scorecard.modules.matrix_loader import SheetMatrix
from scorecard.modules.value_normalizer import as_number, as_string, detect_operator


DEFAULT_AREAS: List[AreaDef] = [
    AreaDef(id="ECONOMICO", name="Económico", weight=0.65, order=1),
    AreaDef(id="OPERATIVO", name="Operativo", weight=0.10, order=2),
    AreaDef(id="SERVICIO", name="Servicio", weight=0.10, order=3),
    AreaDef(id="MERCADEO", name="Mercadeo", weight=0.10, order=4),
    AreaDef(id="RRHH", name="RRHH", weight=0.05, order=5),
]

# Area names are spelled inconsistently (accents, "R R H H", "TALENTO HUMANO")
AREA_ALIASES: Dict[AreaId, List[Pattern]] = {
    "ECONOMICO": [re.compile(r'ECONOM', re.I), re.compile(r'ECONÓM', re.I)],
    "OPERATIVO": [re.compile(r'OPERATIV', re.I)],
    "SERVICIO": [re.compile(r'SERVIC', re.I)],
    "MERCADEO": [re.compile(r'MERCAD', re.I)],
    "RRHH": [re.compile(r'RRHH', re.I), re.compile(r'R\s*R\s*H\s*H', re.I), re.compile(r'TALENTO', re.I)],
}

KPI_NOISE = re.compile(r'TOTAL|CALIFICACI|INDICADOR|^PESO$', re.IGNORECASE)

MIN_ROW_CELLS = 7
AREA_LOG_ROW_LIMIT = 20
DEBUG_ROW_LIMIT = 7


@dataclass(frozen=True)
class KpiRow:
    """KPI definition as found on one sheet row."""
    area_id: AreaId
    row_idx: int
    name: str
    weight_in_area: float
    operator: Operator
    param: float


@dataclass
class KpiScanResult:
    rows: List[KpiRow] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)


def kpi_id(unit_type: UnitType, area_id: AreaId, name: str) -> str:
    """Deterministic KPI id; the unit-type prefix keeps sheets apart."""
    return slugify(f"{unit_type}_{area_id}_{name}", separator="_")


def detect_area(area_name: str) -> Optional[AreaId]:
    """Match an area-name cell against the alias table."""
    if not area_name:
        return None
    for area_id, patterns in AREA_ALIASES.items():
        if any(rx.search(area_name) for rx in patterns):
            return area_id
    return None


def scan_kpi_rows(matrix: SheetMatrix, first_data_row: int = 2) -> KpiScanResult:
    """
    Walk the data rows, carrying the current area forward.

    A row does not need to repeat the area name: the last area seen stays
    active until another area cell matches. Rows before the first area are
    skipped.
    """
    result = KpiScanResult()
    logs = result.logs
    current_area: Optional[AreaId] = None
    accepted: List[KpiRow] = []

    for r in range(first_data_row, len(matrix)):
        row = matrix[r]
        if not row or len(row) < MIN_ROW_CELLS:
            continue

        if r < DEBUG_ROW_LIMIT:
            cells = " | ".join(f"C{i}={json.dumps(v, default=str, ensure_ascii=False)}"
                               for i, v in enumerate(row[:10]))
            logs.append(f"DEBUG Row {r}: {cells}")

        area_name = as_string(row[1])
        kpi_weight = as_number(row[2])
        kpi_name = as_string(row[3])
        operator = as_string(row[4])
        param = as_number(row[5])

        matched_area = detect_area(area_name)
        if matched_area:
            current_area = matched_area
            logs.append(f"Row {r}: Found Area \"{matched_area}\" (matched \"{area_name}\")")

        if current_area is None:
            if r < AREA_LOG_ROW_LIMIT:
                logs.append(f"Row {r} skipped: No area active yet. areaName=\"{area_name}\"")
            continue

        if not kpi_name:
            continue
        if len(kpi_name) < 2:
            logs.append(f"Row {r} skipped: KPI name too short \"{kpi_name}\"")
            continue
        if KPI_NOISE.search(kpi_name):
            logs.append(f"Row {r} skipped: structural row \"{kpi_name}\"")
            continue
        if kpi_weight is None or kpi_weight <= 0 or kpi_weight > 1:
            logs.append(f"Row {r} skipped: Invalid weight {kpi_weight} for \"{kpi_name}\" in {current_area}")
            continue

        logs.append(f"Row {r} ADDED: {kpi_name} ({current_area}) W={kpi_weight}")
        accepted.append(KpiRow(
            area_id=current_area,
            row_idx=r,
            name=kpi_name,
            weight_in_area=float(kpi_weight),
            operator=detect_operator(operator),
            param=float(param) if param is not None else 0.0,
        ))

    # Same KPI listed twice in an area: keep the first. Keyed like kpi_id,
    # so spellings that only differ in accents or punctuation collapse too
    seen = set()
    for kpi_row in accepted:
        key = (kpi_row.area_id, slugify(kpi_row.name, separator="_"))
        if key in seen:
            logs.append(f"Row {kpi_row.row_idx} skipped: duplicate KPI \"{kpi_row.name}\" in {kpi_row.area_id}")
            continue
        seen.add(key)
        result.rows.append(kpi_row)

    return result
