"""
Scoring Engine - Sector Baselines.

Starting vector for a company before news or AI adjustment.
A sector missing from the table, or a dimension missing from a
sector's entry, scores DEFAULT_DIMENSION_SCORE (70).
"""

from typing import Mapping, Optional

from .models import DEFAULT_DIMENSION_SCORE, ImpactDimension, ImpactScoreVector


D = ImpactDimension

SECTOR_BASELINES: dict[str, dict[ImpactDimension, int]] = {
    "Technology": {
        D.ENVIRONMENTAL: 75,
        D.LABOR_PRACTICES: 80,
        D.SOCIAL_IMPACT: 82,
        D.GENDER_EQUALITY: 70,
        D.PAY_EQUALITY: 75,
        D.CORPORATE_IMPACT: 85,
        D.SHORT_TERM_PROFITABILITY: 85,
        D.LONG_TERM_PROFITABILITY: 88,
    },
    "Automotive": {
        D.ENVIRONMENTAL: 60,
        D.LABOR_PRACTICES: 70,
        D.SOCIAL_IMPACT: 65,
        D.GENDER_EQUALITY: 60,
        D.PAY_EQUALITY: 65,
        D.CORPORATE_IMPACT: 70,
        D.SHORT_TERM_PROFITABILITY: 70,
        D.LONG_TERM_PROFITABILITY: 75,
    },
    "Financial Services": {
        D.ENVIRONMENTAL: 65,
        D.LABOR_PRACTICES: 75,
        D.SOCIAL_IMPACT: 70,
        D.GENDER_EQUALITY: 68,
        D.PAY_EQUALITY: 72,
        D.CORPORATE_IMPACT: 80,
        D.SHORT_TERM_PROFITABILITY: 82,
        D.LONG_TERM_PROFITABILITY: 80,
    },
    "Healthcare": {
        D.ENVIRONMENTAL: 70,
        D.LABOR_PRACTICES: 78,
        D.SOCIAL_IMPACT: 85,
        D.GENDER_EQUALITY: 72,
        D.PAY_EQUALITY: 70,
        D.CORPORATE_IMPACT: 75,
        D.SHORT_TERM_PROFITABILITY: 78,
        D.LONG_TERM_PROFITABILITY: 82,
    },
    "Energy": {
        D.ENVIRONMENTAL: 45,
        D.LABOR_PRACTICES: 72,
        D.SOCIAL_IMPACT: 55,
        D.GENDER_EQUALITY: 58,
        D.PAY_EQUALITY: 65,
        D.CORPORATE_IMPACT: 65,
        D.SHORT_TERM_PROFITABILITY: 75,
        D.LONG_TERM_PROFITABILITY: 65,
    },
    "ETF": {
        D.ENVIRONMENTAL: 75,
        D.LABOR_PRACTICES: 75,
        D.SOCIAL_IMPACT: 75,
        D.GENDER_EQUALITY: 75,
        D.PAY_EQUALITY: 75,
        D.CORPORATE_IMPACT: 75,
        D.SHORT_TERM_PROFITABILITY: 75,
        D.LONG_TERM_PROFITABILITY: 80,
    },
}


def sector_baseline(
    sector: str,
    table: Optional[Mapping[str, Mapping[ImpactDimension, int]]] = None,
) -> ImpactScoreVector:
    """Baseline vector for a sector. Total and pure; never raises."""
    table = SECTOR_BASELINES if table is None else table
    partial = table.get(sector, {}) if isinstance(sector, str) else {}
    return ImpactScoreVector.from_mapping(partial, default=DEFAULT_DIMENSION_SCORE)
