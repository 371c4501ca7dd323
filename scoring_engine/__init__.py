"""
Scoring Engine Package.

Computes per-company impact scores from a sector baseline and
recent news. Scores are descriptive, not investment advice.

Modules:
- models: Score vectors, categories, company profiles
- baseline: Sector baseline table
- aggregation: Category -> dimensions, overall score
- heuristic: Keyword/sentiment adjustment (always available)
- ai_scorer: LLM re-scoring (optional)
- cache: TTL score cache
- service: The compute_impact_scores() pipeline
"""

from .aggregation import CATEGORY_DIMENSIONS, dimensions_for, overall_score
from .ai_scorer import AIScorer, build_scoring_prompt, parse_scoring_response
from .base import BaseImpactScorer
from .baseline import SECTOR_BASELINES, sector_baseline
from .cache import ScoreCache, cache_key
from .heuristic import DEFAULT_IMPACT_KEYWORDS, HeuristicScorer
from .models import (
    CompanyProfile,
    ImpactCategory,
    ImpactDimension,
    ImpactScoreResult,
    ImpactScoreVector,
    ScoreSource,
    clamp_score,
)
from .service import ScoringService


__all__ = [
    # Service
    "ScoringService",

    # Scorers
    "BaseImpactScorer",
    "AIScorer",
    "HeuristicScorer",
    "build_scoring_prompt",
    "parse_scoring_response",
    "DEFAULT_IMPACT_KEYWORDS",

    # Tables
    "SECTOR_BASELINES",
    "sector_baseline",
    "CATEGORY_DIMENSIONS",
    "dimensions_for",
    "overall_score",

    # Cache
    "ScoreCache",
    "cache_key",

    # Models
    "CompanyProfile",
    "ImpactCategory",
    "ImpactDimension",
    "ImpactScoreResult",
    "ImpactScoreVector",
    "ScoreSource",
    "clamp_score",
]
