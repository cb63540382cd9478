"""
Score Calculator - Weighted performance score per unit

CALIFICACION cells already hold earned points (e.g. 0.045 out of a possible
0.65 * 0.07), so a unit's area score is the plain sum of its values. Points
possible only count KPIs the unit actually reported: a missing value means
"not applicable", not "failed".

Modes:
  excel      - headline total is the sheet's own sum of points when present
  normalized - headline total is always gained / possible
"""

import math
from collections import defaultdict
from typing import Dict, List

from scorecard.models import (
    AreaDef,
    AreaScore,
    KpiDef,
    KpiScore,
    ParsedScorecard,
    ScoreBreakdown,
    ScoreMode,
    Unit,
    UnitPeriodData,
)
from scorecard.modules.weight_normalizer import unit_type_of


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def compute_scores(unit_data: UnitPeriodData, unit: Unit, areas: List[AreaDef],
                   kpis: List[KpiDef], mode: ScoreMode) -> ScoreBreakdown:
    """
    Score one unit.

    Args:
        unit_data: The unit's per-KPI results
        unit: The unit (its excel_score is used in "excel" mode)
        areas: Area definitions with global weights
        kpis: KPI definitions (normalized in-area weights)
        mode: "excel" or "normalized"

    Returns:
        A fresh ScoreBreakdown; inputs are not modified.
    """
    kpis_by_area: Dict[str, List[KpiDef]] = defaultdict(list)
    for kpi in kpis:
        kpis_by_area[kpi.area_id].append(kpi)

    score_by_area: Dict[str, AreaScore] = {}
    kpi_scored: List[KpiScore] = []
    total_gained = 0.0
    total_possible = 0.0

    for area in areas:
        area_kpis = kpis_by_area.get(area.id, [])
        gained = 0.0
        possible = 0.0
        evaluable = 0

        for kpi in area_kpis:
            result = unit_data.results.get(kpi.id)
            value = result.value if result is not None else None
            raw_value = result.raw_value if result is not None else None
            max_points = area.weight * kpi.weight_in_area

            if value is not None and math.isfinite(value):
                evaluable += 1
                points_gained = value
                possible += max_points
                meets = points_gained > 0
            else:
                value = None
                points_gained = 0.0
                meets = None

            gained += points_gained
            kpi_scored.append(KpiScore(
                kpi=kpi,
                value=value,
                raw_value=raw_value,
                meets=meets,
                points_possible=max_points,
                points_gained=points_gained,
                points_lost=max(0.0, max_points - points_gained),
            ))

        coverage = 1.0 if not area_kpis else evaluable / len(area_kpis)
        score_by_area[area.id] = AreaScore(gained=gained, possible=possible, coverage=coverage)
        total_gained += gained
        total_possible += possible

    score_total = total_gained / total_possible if total_possible > 0 else 0.0

    # Sheet's own total wins in excel mode
    if mode == "excel" and unit.excel_score is not None:
        score_total = unit.excel_score

    return ScoreBreakdown(
        score_total=clamp01(score_total),
        score_by_area=score_by_area,
        kpi_scored=kpi_scored,
    )


class ScoreCalculator:
    """Scores every unit of a parsed scorecard."""

    def __init__(self, scorecard: ParsedScorecard):
        self.scorecard = scorecard

    def kpis_for(self, unit: Unit) -> List[KpiDef]:
        """KPIs authored on the unit's own sheet."""
        return [k for k in self.scorecard.kpis if unit_type_of(k) == unit.type]

    def score_unit(self, unit: Unit, mode: ScoreMode) -> ScoreBreakdown:
        unit_data = self.scorecard.data_for(unit.id) or UnitPeriodData(unit_id=unit.id)
        return compute_scores(unit_data, unit, self.scorecard.areas, self.kpis_for(unit), mode)

    def calculate_all_scores(self, mode: ScoreMode) -> Dict[str, ScoreBreakdown]:
        """Score all units; returns {unit_id: ScoreBreakdown}."""
        return {unit.id: self.score_unit(unit, mode) for unit in self.scorecard.units}
