"""
Scorecard - KPI workbook extraction and scoring for restaurants and nightclubs.
"""

from scorecard.modules.score_calculator import ScoreCalculator, compute_scores
from scorecard.modules.workbook_parser import (
    ScorecardParser,
    WorkbookFormatError,
    parse_scorecard_workbook,
)

__version__ = "0.1.0"

__all__ = [
    "ScoreCalculator",
    "ScorecardParser",
    "WorkbookFormatError",
    "compute_scores",
    "parse_scorecard_workbook",
]
