"""
Weight Normalizer - Rescales in-area KPI weights to sum to 1
Restaurant and disco KPIs are normalized separately even when they share an
area, because each sheet authors its own weights.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from scorecard.models import KpiDef, UnitType


UNIT_TYPES: Tuple[UnitType, ...] = ("restaurant", "disco")


def unit_type_of(kpi: KpiDef) -> Optional[UnitType]:
    """Unit type encoded in the KPI id prefix."""
    for unit_type in UNIT_TYPES:
        if kpi.id.startswith(f"{unit_type}_"):
            return unit_type
    return None


def normalize_weights(kpis: List[KpiDef]) -> List[KpiDef]:
    """
    Return new KPI definitions with weights divided by their
    (unit type, area) group sum.

    Groups summing to 0 are left as-is. KPIs without a known unit-type
    prefix are left untouched.
    """
    sums: Dict[Tuple[UnitType, str], float] = defaultdict(float)
    for kpi in kpis:
        unit_type = unit_type_of(kpi)
        if unit_type is not None:
            sums[(unit_type, kpi.area_id)] += kpi.weight_in_area

    normalized = []
    for kpi in kpis:
        unit_type = unit_type_of(kpi)
        total = sums.get((unit_type, kpi.area_id), 0.0) if unit_type else 0.0
        if total > 0:
            kpi = kpi.model_copy(update={"weight_in_area": kpi.weight_in_area / total})
        normalized.append(kpi)

    return normalized
