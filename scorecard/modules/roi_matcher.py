"""
Financial Block Matcher - Reads ROI / TIR blocks and ties them to known units

Sheet layout ("ROI   TIR"), label column C2:
  row r     : business name ("BELISARIO", "SUPER 8 Y CIEN FUEGOS")
  row r+1   : "INVERSION"
  row r+2..8: TIR / ROI rows -> value in C3, suffix in C4, extra in C5

Quirks of the authored sheets:
  - TIR rows without an ANUAL/MENSUAL suffix are "orphans"; the larger
    magnitude one fills the annual slot.
  - A parseable value next to the ROI row (C4) is the real monthly TIR and
    overrides whatever the TIR rows said.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from slugify import slugify

from scorecard.models import RoiTirData, Unit
from scorecard.modules.logger import DiagnosticLog
from scorecard.modules.matrix_loader import SheetMatrix
from scorecard.modules.value_normalizer import as_number, as_string


BLOCK_MARKERS = ("INVERSION", "INVERSIÓN")
BLOCK_FIRST_OFFSET = 2
BLOCK_LAST_OFFSET = 8

RECOVERY_MONTHS = re.compile(r'(\d+)\s*MESES?', re.IGNORECASE)
COMPOUND_SPLIT = re.compile(r'\s+Y\s+')

# Same venue, two spellings
SYNONYMS = {"CIEN FUEGOS": ("100 FUEGOS", "CIEN FUEGOS")}


@dataclass
class _BlockValues:
    tir_annual: Optional[float] = None
    tir_monthly: Optional[float] = None
    roi: Optional[float] = None
    recovery_months: Optional[int] = None
    orphans: List[float] = field(default_factory=list)


def _cell(matrix: SheetMatrix, r: int, c: int) -> Any:
    if r < 0 or r >= len(matrix):
        return None
    row = matrix[r]
    return row[c] if 0 <= c < len(row) else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_name(name: str) -> str:
    return re.sub(r'\s+', ' ', name.upper()).strip()


def name_matches(unit_name: str, business_name: str) -> bool:
    """
    Fuzzy match between a unit name and an ROI block label.

    Tried in order: exact, substring either way, shared first token
    (4+ chars), compound "A Y B" labels, and the SUPER 8 / CIEN FUEGOS
    override.
    """
    u_name = _normalize_name(unit_name)
    b_name = _normalize_name(business_name)
    if not u_name or not b_name:
        return False

    if u_name == b_name or b_name in u_name or u_name in b_name:
        return True

    first_token = b_name.split(' ')[0]
    if len(first_token) > 3 and u_name.startswith(first_token):
        return True

    if " Y " in b_name:
        for part in COMPOUND_SPLIT.split(b_name):
            part = part.strip()
            if len(part) < 3:
                continue
            if part in SYNONYMS and any(s in u_name for s in SYNONYMS[part]):
                return True
            if part in u_name or u_name in part:
                return True

    if "SUPER 8" in b_name and "CIEN FUEGOS" in b_name:
        if any(s in u_name for s in ("SUPER 8", "100 FUEGOS", "CIEN FUEGOS")):
            return True

    return False


def _read_block(matrix: SheetMatrix, r: int, label_col: int,
                business_name: str, log: DiagnosticLog) -> _BlockValues:
    block = _BlockValues()

    for offset in range(BLOCK_FIRST_OFFSET, BLOCK_LAST_OFFSET + 1):
        row = r + offset
        label = as_string(_cell(matrix, row, label_col)).upper()
        value = _cell(matrix, row, label_col + 1)
        suffix = _cell(matrix, row, label_col + 2)
        extra = _cell(matrix, row, label_col + 3)

        if not _is_number(value):
            continue

        if label == "TIR":
            suffix_str = as_string(suffix).upper()
            log.add(f"DEBUG TIR [{business_name}]: Val={value} Suffix={suffix_str}")
            if 'ANNUAL' in suffix_str or 'ANUAL' in suffix_str:
                block.tir_annual = float(value)
            elif 'MES' in suffix_str or 'MENSUAL' in suffix_str:
                block.tir_monthly = float(value)
            else:
                block.orphans.append(float(value))

        elif label == "ROI":
            block.roi = float(value)

            # "Real" monthly TIR is authored next to the ROI (e.g. "2,60%")
            adjacent = as_number(suffix)
            if adjacent is not None:
                block.tir_monthly = float(adjacent)

            match = RECOVERY_MONTHS.search(as_string(extra or suffix))
            if match:
                block.recovery_months = int(match.group(1))

    if block.orphans:
        orphans = sorted(block.orphans, key=abs, reverse=True)
        if block.tir_annual is None:
            block.tir_annual = orphans[0]
        if block.tir_monthly is None:
            block.tir_monthly = orphans[1] if len(orphans) > 1 else orphans[0]

    return block


def match_roi_blocks(matrix: SheetMatrix, units: List[Unit], log: DiagnosticLog,
                     label_col: int = 2) -> Tuple[Dict[str, RoiTirData], Dict[str, str]]:
    """
    Scan the ROI/TIR sheet and match every block to known units.

    Returns:
        (records by id, {unit_id: record_id}). A record shared by a combined
        block appears once and is referenced by every matched unit.
    """
    records: Dict[str, RoiTirData] = {}
    attachments: Dict[str, str] = {}

    log.add("--- Parsing ROI/TIR Sheet ---")
    log.add(f"Active Units in System: {', '.join(u.name for u in units)}")

    for r in range(len(matrix) - 1):
        label = _cell(matrix, r, label_col)
        marker = as_string(_cell(matrix, r + 1, label_col)).upper()
        if not isinstance(label, str) or not label.strip() or marker not in BLOCK_MARKERS:
            continue

        business_name = label.strip().upper()
        log.add(f"ROI/TIR: Found business \"{business_name}\" at row {r}")

        block = _read_block(matrix, r, label_col, business_name, log)
        if block.tir_annual is None or block.roi is None:
            log.add(f"  Incomplete block \"{business_name}\": TIR={block.tir_annual} ROI={block.roi}")
            continue

        record = RoiTirData(
            id=slugify(business_name, separator="_") or f"block_{r}",
            tir_annual=block.tir_annual,
            tir_monthly=block.tir_monthly if block.tir_monthly is not None else 0.0,
            roi=block.roi,
            recovery_months=block.recovery_months,
        )

        matched = [u for u in units if name_matches(u.name, business_name)]
        if not matched:
            log.warn(f"No matching unit found for \"{business_name}\"")
            continue

        records[record.id] = record
        for unit in matched:
            attachments[unit.id] = record.id
            log.add(f"  Matched to unit \"{unit.name}\" - TIR Annual: {record.tir_annual * 100:.1f}%, "
                    f"ROI: {record.roi * 100:.0f}%")

    return records, attachments
