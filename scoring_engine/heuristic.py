"""
Scoring Engine - Keyword Heuristic Scorer.

Fallback scorer used when AI scoring is unavailable.

For every news item, in order:
1. delta = +3 (positive), -3 (negative), 0 (neutral)
2. for each dimension whose keyword list has at least one
   case-insensitive substring hit in "title description",
   add delta and clamp to [0, 100] immediately

Clamping happens after every single update, not once at the end,
so a +3 that hits the ceiling is lost even if a later -3 follows.
"""

import logging
from typing import Mapping, Optional, Sequence

from news.models import NewsItem, SentimentLabel

from .base import BaseImpactScorer
from .models import CompanyProfile, ImpactDimension, ImpactScoreVector, ScoreSource, clamp_score


logger = logging.getLogger(__name__)


D = ImpactDimension

DEFAULT_IMPACT_KEYWORDS: dict[ImpactDimension, tuple[str, ...]] = {
    D.ENVIRONMENTAL: (
        "climate", "carbon", "emissions", "renewable", "sustainable", "green",
        "pollution", "environmental", "energy", "solar", "wind", "electric",
    ),
    D.LABOR_PRACTICES: (
        "worker", "employee", "labor", "safety", "workplace", "union",
        "working conditions", "benefits", "layoff", "hiring",
    ),
    D.SOCIAL_IMPACT: (
        "community", "social", "privacy", "data", "security", "philanthropy",
        "donation", "charity", "society", "public",
    ),
    D.GENDER_EQUALITY: (
        "gender", "women", "female", "diversity", "inclusion", "representation",
        "equality", "discrimination",
    ),
    D.PAY_EQUALITY: (
        "pay gap", "wage", "salary", "compensation", "equal pay", "bonus",
    ),
    D.CORPORATE_IMPACT: (
        "governance", "board", "executive", "transparency", "ethics",
        "compliance", "regulation", "scandal", "investigation",
    ),
    D.SHORT_TERM_PROFITABILITY: (
        "earnings", "revenue", "profit", "quarter", "sales", "growth",
        "beat expectations", "miss", "guidance",
    ),
    D.LONG_TERM_PROFITABILITY: (
        "innovation", "r&d", "patent", "expansion", "market share",
        "competitive", "strategic", "long-term", "investment",
    ),
}

SENTIMENT_DELTAS: dict[SentimentLabel, int] = {
    SentimentLabel.POSITIVE: 3,
    SentimentLabel.NEGATIVE: -3,
    SentimentLabel.NEUTRAL: 0,
}


class HeuristicScorer(BaseImpactScorer):
    """
    Keyword/sentiment adjustment of the baseline.

    Deterministic and I/O free, so it always produces a vector.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[ImpactDimension, Sequence[str]]] = None,
        deltas: Optional[Mapping[SentimentLabel, int]] = None,
    ) -> None:
        keywords = DEFAULT_IMPACT_KEYWORDS if keywords is None else keywords
        # Dimensions absent from a custom table simply never match
        self.keywords: dict[ImpactDimension, tuple[str, ...]] = {
            dimension: tuple(kw.lower() for kw in keywords.get(dimension, ()))
            for dimension in ImpactDimension
        }
        self.deltas = dict(SENTIMENT_DELTAS if deltas is None else deltas)

    @property
    def source(self) -> ScoreSource:
        return ScoreSource.HEURISTIC

    def matched_dimensions(self, item: NewsItem) -> list[ImpactDimension]:
        text = item.text.lower()
        return [
            dimension
            for dimension, words in self.keywords.items()
            if any(word in text for word in words)
        ]

    def adjust(
        self,
        base: ImpactScoreVector,
        news: Sequence[NewsItem],
    ) -> ImpactScoreVector:
        scores = dict(base)
        for item in news:
            delta = self.deltas.get(item.sentiment, 0)
            if delta == 0:
                continue
            for dimension in self.matched_dimensions(item):
                scores[dimension] = clamp_score(scores[dimension] + delta)
        return base.with_scores(scores)

    async def score(
        self,
        profile: CompanyProfile,
        baseline: ImpactScoreVector,
        news: Sequence[NewsItem],
    ) -> Optional[ImpactScoreVector]:
        adjusted = self.adjust(baseline, news)
        logger.debug(f"[HeuristicScorer] {profile.symbol}: {len(news)} articles applied")
        return adjusted
