# Scorecard Models Package

from .scorecard import (
    AreaDef,
    AreaId,
    AreaScore,
    KpiDef,
    KpiResult,
    KpiScore,
    Operator,
    ParsedScorecard,
    RoiTirData,
    ScoreBreakdown,
    ScoreMode,
    Unit,
    UnitPeriodData,
    UnitType,
)

__all__ = [
    "AreaDef",
    "AreaId",
    "AreaScore",
    "KpiDef",
    "KpiResult",
    "KpiScore",
    "Operator",
    "ParsedScorecard",
    "RoiTirData",
    "ScoreBreakdown",
    "ScoreMode",
    "Unit",
    "UnitPeriodData",
    "UnitType",
]
