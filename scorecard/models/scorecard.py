"""
Scorecard domain models.

Typed representation of a parsed scorecard workbook: areas, KPI definitions,
business units, per-unit results, shared ROI/TIR records and score breakdowns.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


AreaId = Literal["ECONOMICO", "OPERATIVO", "SERVICIO", "MERCADEO", "RRHH"]
UnitType = Literal["restaurant", "disco"]
Operator = Literal[">", ">=", "<", "<="]
ScoreMode = Literal["excel", "normalized"]

CellValue = Union[float, int, str, None]


# ----- Reference Data -----


class AreaDef(BaseModel):
    """Top-level performance category with a fixed global weight."""

    model_config = ConfigDict(frozen=True)

    id: AreaId
    name: str
    weight: float
    order: int


class KpiDef(BaseModel):
    """Single indicator definition inside an area."""

    model_config = ConfigDict(frozen=True)

    id: str
    area_id: AreaId
    name: str
    weight_in_area: float
    operator: Operator = ">="
    param: float = 0.0


# ----- Units & Results -----


class RoiTirData(BaseModel):
    """
    Financial summary for one business block of the ROI/TIR sheet.

    A single record may be referenced by several units when the sheet lists a
    combined block (e.g. "SUPER 8 Y CIEN FUEGOS").
    """

    model_config = ConfigDict(frozen=True)

    id: str
    tir_annual: float  # 0.28 = 28%
    tir_monthly: float
    roi: float  # 2.09 = 209%
    recovery_months: Optional[int] = None


class Unit(BaseModel):
    """Business unit discovered on a scorecard sheet."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: UnitType
    excel_score: Optional[float] = None  # sum of CALIFICACION points on the sheet
    roi_tir_id: Optional[str] = None


class KpiResult(BaseModel):
    """Score cell (points already earned) plus the raw indicator next to it."""

    model_config = ConfigDict(frozen=True)

    kpi_id: str
    value: Optional[float] = None
    raw_value: CellValue = None


class UnitPeriodData(BaseModel):
    """Complete transcription of one unit's column."""

    model_config = ConfigDict(frozen=True)

    unit_id: str
    results: Dict[str, KpiResult] = {}


# ----- Scoring -----


class AreaScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    gained: float = 0.0
    possible: float = 0.0
    coverage: float = 0.0


class KpiScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    kpi: KpiDef
    value: Optional[float] = None
    raw_value: CellValue = None
    meets: Optional[bool] = None
    points_possible: float
    points_gained: float
    points_lost: float


class ScoreBreakdown(BaseModel):
    """Result of scoring one unit in one mode. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    score_total: float
    score_by_area: Dict[str, AreaScore]
    kpi_scored: List[KpiScore]


# ----- Parse Output -----


class ParsedScorecard(BaseModel):
    """Structured output of a single workbook parse."""

    model_config = ConfigDict(frozen=True)

    areas: List[AreaDef]
    kpis: List[KpiDef]
    units: List[Unit]
    unit_data: List[UnitPeriodData]
    roi_tir: Dict[str, RoiTirData] = {}
    debug_logs: List[str] = []

    def unit(self, unit_id: str) -> Optional[Unit]:
        for u in self.units:
            if u.id == unit_id:
                return u
        return None

    def data_for(self, unit_id: str) -> Optional[UnitPeriodData]:
        for ud in self.unit_data:
            if ud.unit_id == unit_id:
                return ud
        return None

    def roi_for(self, unit: Unit) -> Optional[RoiTirData]:
        """Resolve the (possibly shared) ROI/TIR record of a unit."""
        if unit.roi_tir_id is None:
            return None
        return self.roi_tir.get(unit.roi_tir_id)
