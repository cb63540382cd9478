"""
Ranking - Traffic lights, unit ranking and summary figures for a scorecard
These are the numbers the dashboard shows next to each unit; no rendering here.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from scorecard.models import ParsedScorecard, RoiTirData, ScoreBreakdown, ScoreMode, Unit
from scorecard.modules.score_calculator import ScoreCalculator


TrafficLight = Literal["green", "yellow", "red"]
TypeFilter = Literal["all", "restaurant", "disco"]

GREEN_ABOVE = 0.60
YELLOW_FROM = 0.35

HISTOGRAM_BINS = 10


def traffic_light(score_total: float) -> TrafficLight:
    if score_total > GREEN_ABOVE:
        return "green"
    if score_total >= YELLOW_FROM:
        return "yellow"
    return "red"


def investment_tier(roi_tir: RoiTirData) -> str:
    """
    Classify an ROI/TIR record:
      exceptional (ROI >= 200%), recovered (>= 100%), on_track (>= 50%),
      growing (positive TIR), attention (everything else).
    """
    if roi_tir.roi >= 2:
        return "exceptional"
    if roi_tir.roi >= 1:
        return "recovered"
    if roi_tir.roi >= 0.5:
        return "on_track"
    if roi_tir.tir_annual > 0 or roi_tir.tir_monthly > 0:
        return "growing"
    return "attention"


@dataclass(frozen=True)
class RankedUnit:
    rank: int
    unit: Unit
    score: ScoreBreakdown
    light: TrafficLight
    roi_tir: Optional[RoiTirData] = None


@dataclass
class ScoreSummary:
    total: int
    average: float
    best: Optional[RankedUnit]
    worst: Optional[RankedUnit]
    lights: Dict[str, int] = field(default_factory=dict)
    histogram: List[int] = field(default_factory=list)


def rank_units(scorecard: ParsedScorecard, mode: ScoreMode,
               unit_type: TypeFilter = "all", search: str = "") -> List[RankedUnit]:
    """
    Score every unit, sort by total (best first) and number them from 1.

    Ranks are assigned before filtering, so a filtered view keeps each unit's
    position in the overall ranking.
    """
    calculator = ScoreCalculator(scorecard)
    scores = calculator.calculate_all_scores(mode)

    ordered = sorted(scorecard.units, key=lambda u: scores[u.id].score_total, reverse=True)
    ranked = [
        RankedUnit(
            rank=i + 1,
            unit=unit,
            score=scores[unit.id],
            light=traffic_light(scores[unit.id].score_total),
            roi_tir=scorecard.roi_for(unit),
        )
        for i, unit in enumerate(ordered)
    ]

    needle = search.strip().lower()
    return [
        r for r in ranked
        if (unit_type == "all" or r.unit.type == unit_type)
        and (not needle or needle in r.unit.name.lower())
    ]


def histogram(scores: List[float], bins: int = HISTOGRAM_BINS) -> List[int]:
    """Counts per 10% bucket; the last bucket includes a perfect 1.0."""
    counts = [0] * bins
    for s in scores:
        if s < 0 or s >= 1.01:
            continue
        counts[min(int(s * bins), bins - 1)] += 1
    return counts


def summarize(ranked: List[RankedUnit]) -> ScoreSummary:
    if not ranked:
        return ScoreSummary(total=0, average=0.0, best=None, worst=None,
                            lights={"green": 0, "yellow": 0, "red": 0},
                            histogram=[0] * HISTOGRAM_BINS)

    totals = [r.score.score_total for r in ranked]
    lights = {"green": 0, "yellow": 0, "red": 0}
    for r in ranked:
        lights[r.light] += 1

    return ScoreSummary(
        total=len(ranked),
        average=sum(totals) / len(totals),
        best=ranked[0],
        worst=ranked[-1],
        lights=lights,
        histogram=histogram(totals),
    )
