"""
Scoring Engine - Category Aggregation.

Collapses a score vector into the single "overall" number shown
for an impact category: the equal-weight mean of the category's
dimensions, rounded half-up and clamped to [0, 100].
"""

from typing import Any

from .models import ImpactCategory, ImpactDimension, ImpactScoreVector, clamp_score


D = ImpactDimension

CATEGORY_DIMENSIONS: dict[ImpactCategory, tuple[ImpactDimension, ...]] = {
    ImpactCategory.ENVIRONMENTAL: (D.ENVIRONMENTAL, D.CORPORATE_IMPACT, D.LONG_TERM_PROFITABILITY),
    ImpactCategory.SOCIAL: (D.SOCIAL_IMPACT, D.LABOR_PRACTICES, D.PAY_EQUALITY),
    ImpactCategory.GENDER_EQUALITY: (D.GENDER_EQUALITY, D.PAY_EQUALITY, D.LABOR_PRACTICES),
    ImpactCategory.RACIAL_JUSTICE: (D.SOCIAL_IMPACT, D.LABOR_PRACTICES, D.PAY_EQUALITY),
    ImpactCategory.WORKPLACE_EQUALITY: (D.LABOR_PRACTICES, D.GENDER_EQUALITY, D.PAY_EQUALITY),
    ImpactCategory.BROAD: tuple(ImpactDimension),
}


def dimensions_for(category: Any) -> tuple[ImpactDimension, ...]:
    """Dimensions averaged for a category; unknown categories average all 8."""
    return CATEGORY_DIMENSIONS[ImpactCategory.parse(category)]


def overall_score(vector: ImpactScoreVector, category: Any) -> int:
    dimensions = dimensions_for(category)
    mean = sum(vector[d] for d in dimensions) / len(dimensions)
    return clamp_score(mean)
